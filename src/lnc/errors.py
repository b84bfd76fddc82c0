"""
LNC Toolchain Error Hierarchy
=============================

This module defines the exception hierarchy for the whole toolchain.
All exceptions inherit from LNCError, allowing callers to catch every
toolchain error with a single except clause if desired.

Exception Hierarchy
-------------------
LNCError (base)
├── AssemblerError (compile-time errors tied to a source line)
│   ├── AssemblySyntaxError - lexical or syntactic errors in source
│   ├── UndefinedLabelError - reference to a label that is never defined
│   ├── ProgramTooLargeError - more instructions than memory can hold
│   └── TooManyErrors - error collection limit reached
├── CompilationError - every diagnostic from one compile, aggregated
└── MachineError (runtime errors raised while stepping the interpreter)
    ├── UndefinedInstructionError - fetched word has no defined opcode
    └── InputError - the input port could not supply a value
        ├── InputExhaustedError - queue-backed input ran out of values
        └── InputRangeError - value is not a valid 3-digit word

Message Format
--------------
Errors that carry a source location are formatted as:
    filename:line: error: description
    hint: suggestion for fixing (when available)

Line numbers are stored 0-based (as tokens carry them) and displayed
1-based.

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class LNCError(Exception):
    """
    Base exception for all LNC toolchain errors.

        try:
            program = compile_program(source)
        except LNCError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A line in a source file, used for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (0-indexed, as carried by tokens)
    """
    filename: str
    line: int

    def __str__(self) -> str:
        """Format as 'filename:line' with a 1-based line number."""
        return f"{self.filename}:{self.line + 1}"


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(LNCError):
    """
    Base exception for compile-time errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location and hint.

        Example output:
            loop.lnc:3: error: undefined label 'cuont'
            hint: did you mean 'count'?
        """
        if self.location:
            parts = [f"{self.location}: error: {self.message}"]
        else:
            parts = [f"error: {self.message}"]

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class AssemblySyntaxError(AssemblerError):
    """
    Lexical or syntactic error in source code.

    Examples:
        - Unrecognised character
        - Keyword used as a label name
        - Missing or surplus operand
        - Malformed test declaration
    """
    pass


class UndefinedLabelError(AssemblerError):
    """
    Reference to a label that has no definition.

    Raised during assembly when a symbolic address cannot be resolved.
    Similarly-named labels are suggested when available.
    """

    def __init__(
        self,
        label: str,
        location: Optional[SourceLocation] = None,
        similar_labels: Optional[list[str]] = None,
    ):
        self.label = label
        self.similar_labels = similar_labels or []

        hint = None
        if self.similar_labels:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_labels[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(f"undefined label '{label}'", location=location, hint=hint)


class ProgramTooLargeError(AssemblerError):
    """
    The program emits more instructions than memory can hold.

    Only addresses 0-98 may hold assembled instructions; a program with
    100 or more instructions is rejected before anything is encoded.
    """

    def __init__(self, count: int, limit: int):
        self.count = count
        self.limit = limit
        super().__init__(
            f"too many instructions: {count} (at most {limit} allowed)",
            hint="split data tables or shorten the program",
        )


class TooManyErrors(AssemblerError):
    """Raised when the error collector reaches its limit."""

    def __init__(self, message: str = "too many errors"):
        super().__init__(message)


class CompilationError(LNCError):
    """
    Aggregate of every diagnostic produced by one compile.

    The message joins the individual diagnostics with newlines, in the
    order they were produced (lexer, then parser, then assembler).

    Attributes:
        errors: The individual AssemblerError instances
    """

    def __init__(self, errors: list[AssemblerError]):
        self.errors = list(errors)
        super().__init__("\n".join(str(e) for e in self.errors))


# =============================================================================
# Runtime Exceptions
# =============================================================================

class MachineError(LNCError):
    """Base exception for errors raised while the interpreter is stepping."""
    pass


class UndefinedInstructionError(MachineError):
    """
    The fetched word does not encode any instruction.

    Attributes:
        opcode_class: Hundreds digit of the word
        operand: Remaining two digits
        address: Where the word was fetched from (optional)
    """

    def __init__(self, opcode_class: int, operand: int, address: Optional[int] = None):
        self.opcode_class = opcode_class
        self.operand = operand
        self.address = address
        message = f"{opcode_class}{operand:02d}: undefined instruction"
        if address is not None:
            message += f" at address {address:02d}"
        super().__init__(message)


class InputError(MachineError):
    """The input port failed to produce a value."""
    pass


class InputExhaustedError(InputError):
    """A queue-backed input has no values left."""

    def __init__(self, message: str = "input queue is empty"):
        super().__init__(message)


class InputRangeError(InputError):
    """An input value does not fit in a memory cell (0-999)."""

    def __init__(self, value: int):
        self.value = value
        super().__init__(f"input value {value} is out of range (0-999)")


# =============================================================================
# Error Collection for Multiple Error Reporting
# =============================================================================

class ErrorCollector:
    """
    Collects multiple errors for batch reporting.

    The compile pipeline uses this to keep going after a lexical or
    syntax error, so every independent error in a file is reported in
    one pass.

    Example:
        collector = ErrorCollector()
        collector.extend(lex_result.errors)
        if collector.has_errors():
            print(collector.report())
    """

    def __init__(self, max_errors: Optional[int] = None):
        """
        Initialize the error collector.

        Args:
            max_errors: Maximum errors to collect before raising
                TooManyErrors (default: no limit)
        """
        self.errors: list[AssemblerError] = []
        self.max_errors = max_errors

    def add(self, error: AssemblerError) -> None:
        """
        Add an error to the collection.

        Raises:
            TooManyErrors: If a max_errors limit has been reached
        """
        self.errors.append(error)
        if self.max_errors is not None and len(self.errors) >= self.max_errors:
            raise TooManyErrors(f"too many errors ({self.max_errors}), stopping")

    def extend(self, errors: list[AssemblerError]) -> None:
        """Add several errors in order."""
        for error in errors:
            self.add(error)

    def has_errors(self) -> bool:
        """Return True if any errors have been collected."""
        return len(self.errors) > 0

    def error_count(self) -> int:
        """Return the number of collected errors."""
        return len(self.errors)

    def report(self) -> str:
        """Format all errors, one diagnostic per line, plus a summary."""
        lines = [str(error) for error in self.errors]
        error_word = "error" if len(self.errors) == 1 else "errors"
        lines.append(f"{len(self.errors)} {error_word}")
        return "\n".join(lines)

    def to_exception(self) -> CompilationError:
        """Bundle the collected errors into one CompilationError."""
        return CompilationError(self.errors)

    def clear(self) -> None:
        """Clear all collected errors."""
        self.errors.clear()
