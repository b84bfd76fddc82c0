"""
lnc - Little Numbers Computer Command-Line Interface
====================================================

Compiles an LNC assembly file and then runs it, runs its inline tests,
or steps through it in an interactive debugger.

Usage Examples
--------------
Run a program (inp reads from the terminal):
    $ lnc countdown.lnc

Run the inline tests declared with `.name [inputs] [outputs]`:
    $ lnc countdown.lnc --test

Single-step interactively:
    $ lnc countdown.lnc --debug

Show the interpreter trace while running:
    $ lnc -v countdown.lnc

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from lnc import __version__
from lnc.assembler import Program, compile_file
from lnc.cli.console import ConsoleInput, ConsoleOutput
from lnc.cli.errors import ExitCode, handle_cli_exception
from lnc.config import LNCConfig
from lnc.errors import MachineError
from lnc.machine import Debugger, Interpreter, LoggingTracer
from lnc.testkit import format_report, run_tests


DEBUG_HELP = """\
commands:
  s, step             execute one instruction (default)
  c, continue         run until a breakpoint or hlt
  b, break ADDR|LABEL set a breakpoint
  d, delete ADDR|LABEL remove a breakpoint
  m, memory           show registers, memory and listing
  q, quit             leave the debugger"""


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-t", "--test", "test_mode",
    is_flag=True,
    help="Run the inline tests instead of executing the program",
)
@click.option(
    "-d", "--debug", "debug_mode",
    is_flag=True,
    help="Step through the program interactively",
)
@click.option(
    "-v", "--trace",
    is_flag=True,
    help="Print the interpreter trace (also: LNC_TRACE=1)",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Logging level (default: WARNING, or LNC_LOG_LEVEL)",
)
@click.version_option(version=__version__, prog_name="lnc")
def main(
    input_file: Path,
    test_mode: bool,
    debug_mode: bool,
    trace: bool,
    log_level: Optional[str],
) -> None:
    """
    Assemble and run a Little Numbers Computer program.

    INPUT_FILE is the assembly source file to compile.

    \b
    Examples:
        lnc countdown.lnc            # Run, reading inp from the terminal
        lnc countdown.lnc --test     # Run the inline tests
        lnc countdown.lnc --debug    # Single-step interactively
    """
    if test_mode and debug_mode:
        click.echo("Error: --test and --debug are mutually exclusive", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    config = LNCConfig.from_env()
    if trace:
        config.trace = True
    if log_level:
        config.log_level = log_level.upper()
    _configure_logging(config)

    try:
        program = compile_file(input_file)
    except Exception as e:
        handle_cli_exception(e, verbose=config.trace)

    try:
        if test_mode:
            _run_tests(program, config)
        elif debug_mode:
            _debug(program, config)
        else:
            _run(program, config)
    except MachineError as e:
        handle_cli_exception(e, verbose=config.trace, error_type="Runtime")


class _EchoHandler(logging.Handler):
    """Write records through click so they follow the current stderr."""

    def emit(self, record: logging.LogRecord) -> None:
        click.echo(self.format(record), err=True)


def _configure_logging(config: LNCConfig) -> None:
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.WARNING),
        format="%(levelname)s: %(name)s: %(message)s",
    )
    trace_logger = logging.getLogger("lnc.trace")
    if config.trace and not trace_logger.handlers:
        handler = _EchoHandler()
        handler.setFormatter(logging.Formatter("%(message)s"))
        trace_logger.addHandler(handler)
        trace_logger.setLevel(logging.DEBUG)
        trace_logger.propagate = False


# =============================================================================
# Modes
# =============================================================================

def _run(program: Program, config: LNCConfig) -> None:
    """Execute with console I/O, then print a summary."""
    inputs = ConsoleInput(config.input_prompt)
    outputs = ConsoleOutput()
    tracer = LoggingTracer() if config.trace else None
    count = Interpreter(program.memory, inputs, outputs, tracer).run()

    click.echo("--- summary ---")
    click.echo(f"instruction count: {count}")
    click.echo(f"in:  {inputs.history}")
    click.echo(f"out: {outputs.history}")


def _run_tests(program: Program, config: LNCConfig) -> None:
    if not program.tests:
        click.echo("no tests declared")
        return

    results = run_tests(program, LoggingTracer() if config.trace else None)
    click.echo(format_report(results))
    if not all(result.passed for result in results):
        sys.exit(ExitCode.BUILD_ERROR)


def _debug(program: Program, config: LNCConfig) -> None:
    """Interactive single-step loop."""
    dbg = Debugger(program, ConsoleInput(config.input_prompt), ConsoleOutput())
    click.echo(dbg.render())
    click.echo(DEBUG_HELP)

    while True:
        try:
            command = click.prompt("(lnc)", default="s", show_default=False).strip()
        except click.Abort:
            break
        name, _, argument = command.partition(" ")
        argument = argument.strip()

        if name in ("q", "quit"):
            break
        elif name in ("s", "step"):
            if dbg.halted:
                click.echo("program has halted")
                continue
            for line in dbg.step():
                click.echo(line)
            click.echo(dbg.render_registers())
            click.echo(dbg.render_listing())
        elif name in ("c", "continue"):
            event = dbg.run_until_break()
            if config.trace:
                for line in event.trace:
                    click.echo(line)
            click.echo(str(event))
            click.echo(dbg.render_registers())
            click.echo(dbg.render_listing())
        elif name in ("b", "break", "d", "delete"):
            try:
                if name in ("b", "break"):
                    address = dbg.add_breakpoint(argument)
                    click.echo(f"breakpoint set at {address:02d}")
                else:
                    dbg.remove_breakpoint(argument)
                    click.echo(f"breakpoint removed at {argument}")
            except ValueError as e:
                click.echo(f"Error: {e}", err=True)
        elif name in ("m", "memory"):
            click.echo(dbg.render())
        else:
            click.echo(DEBUG_HELP)


if __name__ == "__main__":
    main()
