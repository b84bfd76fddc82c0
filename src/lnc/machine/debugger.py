"""
Single-Step Debugger
====================

Wraps an Interpreter with everything an interactive front end needs:

- single-stepping with the trace lines each step produced
- full state introspection (pc, acc, neg_flag, halted, memory)
- breakpoints by address or label, and run-until-break
- reverse address -> label lookup and disassembly of any cell
- a rendered memory/register table

Example:
    >>> dbg = Debugger(program, QueueInput([3]), CaptureOutput())
    >>> dbg.add_breakpoint("loop")
    >>> event = dbg.run_until_break()
    >>> event.reason
    <BreakReason.BREAKPOINT: 2>
    >>> print(dbg.render())

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional

from lnc.assembler.assembler import Program
from lnc.assembler.opcodes import MEMORY_SIZE
from lnc.disassembler import DisassembledWord, Disassembler
from lnc.machine.cpu import Interpreter, MachineState
from lnc.machine.ports import InputPort, OutputPort, RecordingTracer


class BreakReason(Enum):
    """Why run_until_break stopped."""
    HALTED = auto()      # hlt executed (or already halted)
    BREAKPOINT = auto()  # pc reached a breakpoint address


@dataclass
class BreakEvent:
    """
    Information about why execution stopped.

    Attributes:
        reason: Why execution stopped
        address: pc at the time of the stop
        steps: Instructions executed by the run
        trace: Trace lines produced during the run
    """
    reason: BreakReason
    address: int
    steps: int = 0
    trace: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        match self.reason:
            case BreakReason.BREAKPOINT:
                return f"breakpoint at {self.address:02d} after {self.steps} steps"
            case BreakReason.HALTED:
                return f"halted after {self.steps} steps"


class Debugger:
    """
    Interactive-debugging controller for one program run.

    Attributes:
        program: The compiled program being debugged
        interpreter: The underlying interpreter (owns the live memory)
        steps: Instructions executed so far
    """

    def __init__(self, program: Program, input_port: InputPort, output_port: OutputPort):
        self.program = program
        self._tracer = RecordingTracer()
        self.interpreter = Interpreter(program.memory, input_port, output_port, self._tracer)
        self.disassembler = Disassembler(program.labels)
        self.steps = 0
        self._breakpoints: set[int] = set()

    # =========================================================================
    # State
    # =========================================================================

    @property
    def state(self) -> MachineState:
        return self.interpreter.snapshot()

    @property
    def halted(self) -> bool:
        return self.interpreter.halted

    def label_at(self, address: int) -> Optional[str]:
        """Reverse lookup: label bound to address, if any."""
        return self.disassembler.label_at(address)

    def disassemble(self, address: int) -> DisassembledWord:
        """Decode the live contents of a cell."""
        return self.disassembler.disassemble_one(self.interpreter.memory[address], address)

    def resolve(self, target: int | str) -> int:
        """
        Turn an address or label name into an address.

        Raises:
            ValueError: For unknown labels or addresses outside 0-99
        """
        if isinstance(target, str):
            if target.isdigit():
                target = int(target)
            elif target in self.program.labels:
                return self.program.labels[target]
            else:
                raise ValueError(f"unknown label '{target}'")
        if not 0 <= target < MEMORY_SIZE:
            raise ValueError(f"address {target} is out of range (0-{MEMORY_SIZE - 1})")
        return target

    # =========================================================================
    # Breakpoints
    # =========================================================================

    def add_breakpoint(self, target: int | str) -> int:
        """Break when pc reaches target; returns the resolved address."""
        address = self.resolve(target)
        self._breakpoints.add(address)
        return address

    def remove_breakpoint(self, target: int | str) -> None:
        self._breakpoints.discard(self.resolve(target))

    def list_breakpoints(self) -> list[int]:
        return sorted(self._breakpoints)

    # =========================================================================
    # Execution
    # =========================================================================

    def step(self) -> list[str]:
        """
        Execute one instruction.

        Returns:
            Trace lines the step produced

        Raises:
            MachineError: Propagated from the interpreter
        """
        was_halted = self.interpreter.halted
        try:
            self.interpreter.step()
        finally:
            lines = self._tracer.drain()
        if not was_halted:
            self.steps += 1
        return lines

    def run_until_break(self) -> BreakEvent:
        """
        Run until hlt or a breakpoint (checked after at least one step).

        Raises:
            MachineError: Propagated from the interpreter
        """
        start = self.steps
        trace: list[str] = []
        while not self.interpreter.halted:
            trace.extend(self.step())
            if self.interpreter.pc in self._breakpoints and not self.interpreter.halted:
                return BreakEvent(
                    BreakReason.BREAKPOINT, self.interpreter.pc, self.steps - start, trace
                )
        return BreakEvent(BreakReason.HALTED, self.interpreter.pc, self.steps - start, trace)

    # =========================================================================
    # Rendering
    # =========================================================================

    def render_registers(self) -> str:
        state = self.state
        return (
            f"pc={state.pc:02d}  acc={state.acc:03d}  "
            f"neg={'1' if state.neg_flag else '0'}  "
            f"halted={'yes' if state.halted else 'no'}  steps={self.steps}"
        )

    def render_memory(self) -> str:
        """10x10 grid of cells; the cell at pc is bracketed."""
        pc = self.interpreter.pc
        lines = ["     " + " ".join(f"  {col}  " for col in range(10))]
        for row in range(0, MEMORY_SIZE, 10):
            cells = []
            for address in range(row, row + 10):
                word = f"{self.interpreter.memory[address]:03d}"
                cells.append(f"[{word}]" if address == pc else f" {word} ")
            lines.append(f"{row:02d}:  " + " ".join(cells))
        return "\n".join(lines)

    def render_listing(self, context: int = 3) -> str:
        """Disassembly around pc, with a marker on the next instruction."""
        pc = self.interpreter.pc
        start = max(0, pc - context)
        end = min(MEMORY_SIZE, pc + context + 1)
        lines = []
        for address in range(start, end):
            marker = "=>" if address == pc else "  "
            bp = "*" if address in self._breakpoints else " "
            lines.append(f"{marker}{bp}{self.disassemble(address)}")
        return "\n".join(lines)

    def render(self) -> str:
        """Registers, memory grid and listing, as shown after each command."""
        return "\n\n".join(
            [self.render_registers(), self.render_memory(), self.render_listing()]
        )
