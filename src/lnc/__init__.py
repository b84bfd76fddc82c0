"""
LNC - Little Numbers Computer Toolchain
=======================================

An assembler, interpreter, debugger and inline test harness for the
Little Numbers Computer: a decimal teaching machine with 100 memory
cells, one accumulator and a program counter, where every word holds a
value from 0 to 999.

Main Components
---------------
- **assembler**: source text -> 100-word memory image, labels and tests
- **machine**: the interpreter, its I/O ports and the single-step debugger
- **disassembler**: memory words -> mnemonics, with label annotation
- **testkit**: runs the `.name [inputs] [outputs]` tests declared in source

Quick Start
-----------
    >>> from lnc import compile_program, run_tests
    >>> program = compile_program('''
    ...     inp
    ... loop: out
    ...     sub one
    ...     brp loop
    ...     hlt
    ... one: dat 1
    ... .countdown [3] [3, 2, 1, 0]
    ... ''')
    >>> [r.passed for r in run_tests(program)]
    [True]

Or use the command-line tool:
    $ lnc countdown.lnc --test
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from lnc.assembler import Assembler, Program, compile_file, compile_program
from lnc.errors import (
    LNCError,
    SourceLocation,
    AssemblerError,
    AssemblySyntaxError,
    UndefinedLabelError,
    ProgramTooLargeError,
    CompilationError,
    MachineError,
    UndefinedInstructionError,
    InputError,
    InputExhaustedError,
    InputRangeError,
)
from lnc.machine import (
    Interpreter,
    Debugger,
    QueueInput,
    CaptureOutput,
    LoggingTracer,
    RecordingTracer,
)
from lnc.testkit import TestResult, run_test, run_tests, format_report

__all__ = [
    "__version__",
    # Assembler
    "Assembler",
    "Program",
    "compile_file",
    "compile_program",
    # Errors
    "LNCError",
    "SourceLocation",
    "AssemblerError",
    "AssemblySyntaxError",
    "UndefinedLabelError",
    "ProgramTooLargeError",
    "CompilationError",
    "MachineError",
    "UndefinedInstructionError",
    "InputError",
    "InputExhaustedError",
    "InputRangeError",
    # Machine
    "Interpreter",
    "Debugger",
    "QueueInput",
    "CaptureOutput",
    "LoggingTracer",
    "RecordingTracer",
    # Tests
    "TestResult",
    "run_test",
    "run_tests",
    "format_report",
]
