"""
LNC Assembler - Main Interface
==============================

This module resolves addresses and encodes instructions into the 100-word
memory image, and provides the Assembler class that coordinates the
lexer, parser and encoder.

Example Usage
-------------
>>> from lnc.assembler import Assembler
>>> asm = Assembler()
>>> asm.assemble_string('''
...     inp
... loop: out
...     sub one
...     brp loop
...     hlt
... one: dat 1
... ''')
>>> asm.has_errors()
False
>>> asm.get_memory()[:6]
[901, 902, 205, 801, 0, 1]

Error Handling
--------------
Lexical and syntax errors are collected and the remaining stages still
run, so one compile reports as much as possible. Assembly itself stops at
the first unresolvable label, since every later address would be suspect.

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

import difflib
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from lnc.assembler.lexer import tokenize
from lnc.assembler.opcodes import (
    MAX_INSTRUCTIONS,
    MEMORY_SIZE,
    OPCODE_TABLE,
    OperandKind,
    encode,
)
from lnc.assembler.parser import (
    Address,
    Instruction,
    LNCTest,
    NumericAddress,
    ParseInfo,
    parse,
)
from lnc.errors import (
    AssemblerError,
    ErrorCollector,
    ProgramTooLargeError,
    SourceLocation,
    TooManyErrors,
    UndefinedLabelError,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Encoding
# =============================================================================

def resolve_address(
    address: Address,
    labels: dict[str, int],
    location: Optional[SourceLocation] = None,
) -> int:
    """
    Resolve an operand to a numeric address.

    Raises:
        UndefinedLabelError: If a symbolic address has no definition
    """
    if isinstance(address, NumericAddress):
        return address.value
    if address.label not in labels:
        similar = difflib.get_close_matches(address.label, list(labels), n=3)
        raise UndefinedLabelError(address.label, location, similar_labels=similar)
    return labels[address.label]


def encode_instruction(
    instruction: Instruction,
    labels: dict[str, int],
    filename: str = "<input>",
) -> int:
    """Encode one parsed instruction into its memory word."""
    kind = OPCODE_TABLE[instruction.opcode].operand
    if kind is OperandKind.ADDRESS:
        location = SourceLocation(filename, instruction.line)
        return encode(instruction.opcode, resolve_address(instruction.address, labels, location))
    if kind is OperandKind.VALUE:
        return encode(instruction.opcode, instruction.value)
    return encode(instruction.opcode)


def assemble(parse_info: ParseInfo, filename: str = "<input>") -> list[int]:
    """
    Produce the memory image for a parsed program.

    Cell i holds the encoding of instruction i; every other cell is 0.
    Operand and data ranges were already checked by the parser.

    Raises:
        ProgramTooLargeError: If there are 100 or more instructions
        UndefinedLabelError: On the first unresolvable label
    """
    count = len(parse_info.instructions)
    if count > MAX_INSTRUCTIONS:
        raise ProgramTooLargeError(count, MAX_INSTRUCTIONS)

    memory = [0] * MEMORY_SIZE
    for address, instruction in enumerate(parse_info.instructions):
        memory[address] = encode_instruction(instruction, parse_info.labels, filename)

    logger.debug(f"Assembled {count} instructions")
    return memory


# =============================================================================
# Compiled Program
# =============================================================================

@dataclass
class Program:
    """
    A successfully compiled program.

    Attributes:
        memory: The 100-word memory image
        tests: Inline test declarations
        labels: Label name -> program address
        instructions: The parsed instruction list
    """
    memory: list[int]
    tests: list[LNCTest] = field(default_factory=list)
    labels: dict[str, int] = field(default_factory=dict)
    instructions: list[Instruction] = field(default_factory=list)

    def label_at(self, address: int) -> Optional[str]:
        """Return a label bound to address, if any (first in source order)."""
        for name, bound in self.labels.items():
            if bound == address:
                return name
        return None


# =============================================================================
# Assembler
# =============================================================================

class Assembler:
    """
    Main LNC assembler class.

    Runs the lexer, parser and encoder over a source text, collecting
    every diagnostic along the way.

    Attributes:
        verbose: If True, log progress at INFO level instead of DEBUG
    """

    def __init__(self, verbose: bool = False, max_errors: Optional[int] = None):
        """
        Initialize the assembler.

        Args:
            verbose: Log progress at INFO level
            max_errors: Stop collecting after this many diagnostics
                (default: report every diagnostic)
        """
        self._verbose = verbose
        self._errors = ErrorCollector(max_errors=max_errors)
        self._program: Optional[Program] = None
        self._source_file: Optional[Path] = None

    def _log(self, message: str) -> None:
        logger.log(logging.INFO if self._verbose else logging.DEBUG, message)

    # =========================================================================
    # Assembly
    # =========================================================================

    def assemble_string(self, source: str, filename: str = "<input>") -> Optional[Program]:
        """
        Compile source text.

        Returns:
            The Program, or None if any error was collected
        """
        self._errors.clear()
        self._program = None

        try:
            self._program = self._compile(source, filename)
        except TooManyErrors as e:
            self._errors.errors.append(e)

        if self._errors.has_errors():
            self._log(f"{filename}: {self._errors.error_count()} error(s)")
            self._program = None
        return self._program

    def assemble_file(self, path: str | Path) -> Optional[Program]:
        """Compile a source file; see assemble_string."""
        self._source_file = Path(path)
        self._log(f"Assembling {self._source_file}")
        source = self._source_file.read_text(encoding="utf-8")
        return self.assemble_string(source, filename=str(self._source_file))

    def _compile(self, source: str, filename: str) -> Optional[Program]:
        lexed = tokenize(source, filename)
        self._errors.extend(lexed.errors)

        info = parse(lexed.tokens, filename)
        self._errors.extend(info.errors)

        try:
            memory = assemble(info, filename)
        except AssemblerError as e:
            self._errors.add(e)
            return None

        self._log(
            f"{filename}: {len(info.instructions)} instructions, "
            f"{len(info.labels)} labels, {len(info.tests)} tests"
        )
        return Program(memory, info.tests, info.labels, info.instructions)

    # =========================================================================
    # Results
    # =========================================================================

    def has_errors(self) -> bool:
        return self._errors.has_errors()

    def get_errors(self) -> list[AssemblerError]:
        return list(self._errors.errors)

    def get_error_report(self) -> str:
        """All diagnostics, one per line, with a count."""
        return self._errors.report()

    def get_program(self) -> Optional[Program]:
        return self._program

    def get_memory(self) -> list[int]:
        """The assembled memory image (empty if compilation failed)."""
        return list(self._program.memory) if self._program else []

    def get_tests(self) -> list[LNCTest]:
        return list(self._program.tests) if self._program else []

    def get_labels(self) -> dict[str, int]:
        return dict(self._program.labels) if self._program else {}

    def raise_for_errors(self) -> None:
        """Raise CompilationError if the last compile produced diagnostics."""
        if self._errors.has_errors():
            raise self._errors.to_exception()


# =============================================================================
# Convenience Functions
# =============================================================================

def compile_program(source: str, filename: str = "<input>") -> Program:
    """
    Compile source to a memory image and test list.

    Raises:
        CompilationError: Aggregating every lexer, parser and assembler
            diagnostic, one per line
    """
    asm = Assembler()
    program = asm.assemble_string(source, filename)
    asm.raise_for_errors()
    return program


def compile_file(path: str | Path) -> Program:
    """Compile a source file; see compile_program."""
    asm = Assembler()
    program = asm.assemble_file(path)
    asm.raise_for_errors()
    return program
