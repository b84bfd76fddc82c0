"""
LNC Assembly Language Parser
============================

This module implements the parser for LNC assembly language. It converts
the token stream from the lexer into a flat instruction list, a label map
and the inline test declarations.

Statement Forms
---------------
1. **Label definition**: binds a name to the current program address
   ```asm
   loop:
   count: dat 0
   ```

2. **Instruction with address**: lda, sto, add, sub, brz, brp, bra
   ```asm
   lda 42          ; numeric address (0-99)
   brp loop        ; symbolic address
   ```

3. **Instruction without operand**: inp, out, hlt

4. **Data**: dat with a literal value (0-999)

5. **Test declaration**: a name, the inputs, then the expected outputs
   ```asm
   .countdown [3] [3, 2, 1, 0]
   ```

Program Addresses
-----------------
An instruction's program address is its index in the instruction list.
The parser keeps a single counter that only advances when an instruction
is emitted; label definitions and test declarations never take a slot.

Error Recovery
--------------
When a statement is malformed the parser records one diagnostic, skips
to the next end of line and carries on, so a single pass reports every
independent syntax error.

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Union

from lnc.assembler.lexer import Token, TokenType
from lnc.assembler.opcodes import (
    ADDRESS_INSTRUCTIONS,
    INHERENT_INSTRUCTIONS,
    MEMORY_SIZE,
    WORD_LIMIT,
    Opcode,
)
from lnc.errors import AssemblerError, AssemblySyntaxError, SourceLocation

logger = logging.getLogger(__name__)


# =============================================================================
# Addresses
# =============================================================================

@dataclass(frozen=True)
class NumericAddress:
    """A literal address in 0-99."""
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class SymbolicAddress:
    """A label reference, resolved by the assembler."""
    label: str

    def __str__(self) -> str:
        return self.label


Address = Union[NumericAddress, SymbolicAddress]


# =============================================================================
# Parse Results
# =============================================================================

@dataclass(frozen=True)
class Instruction:
    """
    One emitted instruction.

    Attributes:
        opcode: Which of the eleven instructions this is
        address: Operand of address-taking instructions, else None
        value: Literal of a dat instruction, else None
        line: Source line it was parsed from (0-indexed)
    """
    opcode: Opcode
    address: Optional[Address] = None
    value: Optional[int] = None
    line: int = 0

    def __str__(self) -> str:
        if self.address is not None:
            return f"{self.opcode.mnemonic} {self.address}"
        if self.value is not None:
            return f"{self.opcode.mnemonic} {self.value}"
        return self.opcode.mnemonic


@dataclass
class LNCTest:
    """
    An inline test declaration.

    Attributes:
        name: Test name (without the leading dot)
        inputs: Values fed to inp, in order
        expected: Values out must produce, in order
        line: Source line of the declaration (0-indexed)
    """
    name: str
    inputs: list[int] = field(default_factory=list)
    expected: list[int] = field(default_factory=list)
    line: int = 0


@dataclass
class ParseInfo:
    """
    Everything the parser extracted from a token stream.

    Attributes:
        instructions: Emitted instructions, index == program address
        labels: Label name -> program address (last definition wins)
        tests: Test declarations in source order
        errors: One diagnostic per rejected statement
    """
    instructions: list[Instruction] = field(default_factory=list)
    labels: dict[str, int] = field(default_factory=dict)
    tests: list[LNCTest] = field(default_factory=list)
    errors: list[AssemblerError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def message(self) -> str:
        """All diagnostics joined by newlines."""
        return "\n".join(str(e) for e in self.errors)


# =============================================================================
# Parser Implementation
# =============================================================================

_END_OF_STATEMENT = (TokenType.NEWLINE, TokenType.EOF)


class Parser:
    """
    Parses LNC tokens into instructions, labels and tests.

    Usage:
        tokens = tokenize(source).tokens
        info = Parser(tokens).parse()
    """

    def __init__(self, tokens: list[Token], filename: str = "<input>"):
        """
        Initialize the parser.

        Args:
            tokens: Token stream from the lexer (EOF is optional)
            filename: Source filename for error reporting
        """
        self._tokens = tokens
        self._filename = filename
        self._pos = 0
        self._address = 0
        self._info = ParseInfo()

    def parse(self) -> ParseInfo:
        """
        Parse every statement, recovering from malformed ones.

        Returns:
            ParseInfo; check its errors list for rejected statements
        """
        while not self._at_end():
            token = self._advance()

            if token.type is TokenType.EOF:
                break
            if token.type is TokenType.NEWLINE:
                continue

            try:
                self._parse_statement(token)
            except AssemblySyntaxError as e:
                logger.debug(f"Syntax error on line {token.line}: {e.message}")
                self._info.errors.append(e)
                self._synchronize()

        logger.debug(
            f"Parsed {len(self._info.instructions)} instructions, "
            f"{len(self._info.labels)} labels, {len(self._info.tests)} tests"
        )
        return self._info

    # =========================================================================
    # Token Navigation
    # =========================================================================

    def _at_end(self) -> bool:
        return self._pos >= len(self._tokens)

    def _current(self) -> Token:
        """Current token; a synthetic EOF once the stream runs out."""
        if self._at_end():
            last_line = self._tokens[-1].line if self._tokens else 0
            return Token(TokenType.EOF, None, last_line)
        return self._tokens[self._pos]

    def _advance(self) -> Token:
        token = self._current()
        self._pos += 1
        return token

    def _check(self, *types: TokenType) -> bool:
        return self._current().type in types

    def _synchronize(self) -> None:
        """Skip the rest of a malformed statement, including its NEWLINE."""
        while not self._check(*_END_OF_STATEMENT):
            self._advance()
        if self._check(TokenType.NEWLINE):
            self._advance()

    def _error(self, message: str, token: Token) -> AssemblySyntaxError:
        return AssemblySyntaxError(message, SourceLocation(self._filename, token.line))

    def _expect_end_of_statement(self) -> None:
        """Require NEWLINE or end of input, consuming a NEWLINE."""
        token = self._current()
        if token.type not in _END_OF_STATEMENT:
            raise self._error(f"found {token.describe()} instead of end of line", token)
        if token.type is TokenType.NEWLINE:
            self._advance()

    # =========================================================================
    # Statements
    # =========================================================================

    def _emit(self, instruction: Instruction) -> None:
        """Append an instruction; the only place the address counter moves."""
        self._info.instructions.append(instruction)
        self._address += 1

    def _parse_statement(self, token: Token) -> None:
        if token.type is TokenType.LABEL_DEF:
            self._info.labels[token.value] = self._address
            return

        if token.type is TokenType.TEST_NAME:
            self._parse_test(token)
            return

        opcode = token.type.opcode
        if opcode in ADDRESS_INSTRUCTIONS:
            address = self._parse_address(token)
            self._expect_end_of_statement()
            self._emit(Instruction(opcode, address=address, line=token.line))
        elif opcode in INHERENT_INSTRUCTIONS:
            self._expect_end_of_statement()
            self._emit(Instruction(opcode, line=token.line))
        elif opcode is Opcode.DATA:
            value = self._parse_number(WORD_LIMIT, "data value", token)
            self._emit(Instruction(opcode, value=value, line=token.line))
        else:
            raise self._error(
                f"found {token.describe()} instead of instruction/label definition",
                token,
            )

    def _parse_address(self, mnemonic: Token) -> Address:
        """Parse the single address operand of an address-taking mnemonic."""
        token = self._current()
        if token.type is TokenType.LABEL:
            self._advance()
            return SymbolicAddress(token.value)
        if token.type is TokenType.NUMBER:
            return NumericAddress(self._parse_number(MEMORY_SIZE, "address", mnemonic))
        raise self._error(
            f"found {token.describe()} instead of an address after "
            f"'{mnemonic.type.name.lower()}'",
            token,
        )

    def _parse_number(self, limit: int, what: str, owner: Token) -> int:
        """Parse one NUMBER token whose value must be below limit."""
        token = self._current()
        if token.type is not TokenType.NUMBER:
            raise self._error(
                f"found {token.describe()} instead of a number after {owner.describe()}",
                token,
            )
        if token.value >= limit:
            raise self._error(
                f"invalid {what} {token.value}: must be less than {limit}", token
            )
        self._advance()
        return token.value

    # =========================================================================
    # Test Declarations
    # =========================================================================

    def _parse_test(self, name_token: Token) -> None:
        """Parse `.name [inputs] [expected]` up to the end of the line."""
        inputs = self._parse_number_list(name_token)
        expected = self._parse_number_list(name_token)
        self._expect_end_of_statement()
        self._info.tests.append(
            LNCTest(name_token.value, inputs, expected, line=name_token.line)
        )

    def _parse_number_list(self, name_token: Token) -> list[int]:
        """
        Parse `[n, n, ...]`.

        A trailing comma and an empty list are accepted; two numbers
        without a separating comma, or a comma without a preceding
        number, are errors.
        """
        opening = self._current()
        if opening.type is not TokenType.OPEN_BRACKET:
            raise self._error(
                f"found {opening.describe()} instead of '[' in {name_token.describe()}",
                opening,
            )
        self._advance()

        values: list[int] = []
        after_number = False

        while True:
            token = self._current()

            if token.type is TokenType.CLOSE_BRACKET:
                self._advance()
                return values

            if token.type is TokenType.NUMBER:
                if after_number:
                    raise self._error(
                        f"expected ',' before {token.describe()} in test list", token
                    )
                values.append(self._parse_number(WORD_LIMIT, "test value", name_token))
                after_number = True
            elif token.type is TokenType.COMMA:
                if not after_number:
                    raise self._error("found ',' without a preceding number in test list", token)
                self._advance()
                after_number = False
            else:
                raise self._error(
                    f"found {token.describe()} inside test list, expected a number or ']'",
                    token,
                )


def parse(tokens: list[Token], filename: str = "<input>") -> ParseInfo:
    """
    Convenience function to parse a token stream.

    Args:
        tokens: Token stream from the lexer
        filename: Source filename for error reporting

    Returns:
        ParseInfo with instructions, labels, tests and errors
    """
    return Parser(tokens, filename).parse()
