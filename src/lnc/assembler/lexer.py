"""
LNC Assembly Language Lexer
===========================

This module implements the lexer (tokenizer) for LNC assembly language.
It converts source text into a flat stream of line-tagged tokens that the
parser can process.

Token Types
-----------
- NUMBER: Decimal literal (leading zeros allowed, unbounded here)
- LABEL: Reference to a label
- LABEL_DEF: Label definition ("name:", the colon is not a token)
- LDA ... DAT: One token type per mnemonic
- TEST_NAME: Test declaration name (".name")
- OPEN_BRACKET, CLOSE_BRACKET, COMMA: Test list punctuation
- NEWLINE: End of a source line
- EOF: End of input (only present when lexing succeeded everywhere)

Comments start with ";" and run to the end of the line. Mnemonics are
matched case-sensitively.

Error Recovery
--------------
Source is lexed one line at a time. A line that fails contributes no
tokens; its error is collected and lexing continues with the next line,
so one pass reports every lexical error in the file.

Example
-------
>>> from lnc.assembler.lexer import tokenize
>>> result = tokenize("loop: out ; print")
>>> result.tokens
[Token(LABEL_DEF, 'loop', 0), Token(OUT, 0), Token(NEWLINE, 0), Token(EOF, 0)]

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

import logging
import string
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional

from lnc.assembler.opcodes import MNEMONICS, Opcode
from lnc.errors import AssemblerError, AssemblySyntaxError, SourceLocation

logger = logging.getLogger(__name__)


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """Token types for LNC assembly language."""

    # Values
    NUMBER = auto()
    LABEL = auto()
    LABEL_DEF = auto()

    # Mnemonics
    LDA = auto()
    STO = auto()
    ADD = auto()
    SUB = auto()
    INP = auto()
    OUT = auto()
    HLT = auto()
    BRZ = auto()
    BRP = auto()
    BRA = auto()
    DAT = auto()

    # Test declarations
    TEST_NAME = auto()
    OPEN_BRACKET = auto()   # [
    CLOSE_BRACKET = auto()  # ]
    COMMA = auto()          # ,

    # Structural tokens
    NEWLINE = auto()
    EOF = auto()

    @property
    def opcode(self) -> Optional[Opcode]:
        """The opcode for a mnemonic token type, None for anything else."""
        return MNEMONICS.get(self.name.lower())


# Mnemonic text -> token type
KEYWORDS: dict[str, TokenType] = {
    mnemonic: TokenType[mnemonic.upper()] for mnemonic in MNEMONICS
}


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token from the source code.

    Attributes:
        type: The TokenType classification
        value: Number value, or name for labels and tests, else None
        line: Source line the token came from (0-indexed)
    """
    type: TokenType
    value: str | int | None = None
    line: int = 0

    def __repr__(self) -> str:
        if self.value is not None:
            return f"Token({self.type.name}, {self.value!r}, {self.line})"
        return f"Token({self.type.name}, {self.line})"

    def describe(self) -> str:
        """Describe the token for error messages."""
        match self.type:
            case TokenType.NUMBER:
                return f"number {self.value}"
            case TokenType.LABEL:
                return f"label '{self.value}'"
            case TokenType.LABEL_DEF:
                return f"label definition '{self.value}:'"
            case TokenType.TEST_NAME:
                return f"test name '.{self.value}'"
            case TokenType.OPEN_BRACKET:
                return "'['"
            case TokenType.CLOSE_BRACKET:
                return "']'"
            case TokenType.COMMA:
                return "','"
            case TokenType.NEWLINE:
                return "end of line"
            case TokenType.EOF:
                return "end of input"
            case _:
                return f"instruction '{self.type.name.lower()}'"


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes a single line of LNC assembly source.

    Usage:
        lexer = Lexer("lda count", line_number=4)
        tokens = lexer.tokenize()

    The returned tokens always end with a NEWLINE token.
    """

    # Characters that can start a label or mnemonic
    IDENT_START = string.ascii_letters

    # Characters that can start a test name (after the dot)
    TEST_NAME_START = string.ascii_letters + "_"

    # Characters that can continue an identifier or test name
    IDENT_CHARS = string.ascii_letters + string.digits + "_"

    SINGLE_CHAR_TOKENS = {
        "[": TokenType.OPEN_BRACKET,
        "]": TokenType.CLOSE_BRACKET,
        ",": TokenType.COMMA,
    }

    def __init__(self, source: str, line_number: int = 0, filename: str = "<input>"):
        """
        Initialize the lexer with one line of source.

        Args:
            source: Text of the line (without its line terminator)
            line_number: 0-based line number, recorded on every token
            filename: Name of the source file (for error messages)
        """
        self.source = source
        self.line_number = line_number
        self.filename = filename
        self._pos = 0
        self._tokens: list[Token] = []

    def tokenize(self) -> list[Token]:
        """
        Produce the tokens for this line, terminated by NEWLINE.

        Raises:
            AssemblySyntaxError: On the first lexical error in the line
        """
        while not self._at_end():
            char = self._peek()

            if char == ";":
                break
            if char.isspace():
                self._advance()
            elif char in string.digits:
                self._scan_number()
            elif char in self.IDENT_START:
                self._scan_identifier()
            elif char == ".":
                self._scan_test_name()
            elif char in self.SINGLE_CHAR_TOKENS:
                self._advance()
                self._add_token(self.SINGLE_CHAR_TOKENS[char])
            else:
                raise self._error(f"unrecognised character '{char}'")

        self._add_token(TokenType.NEWLINE)
        return self._tokens

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        return self._pos >= len(self.source)

    def _peek(self) -> str:
        """Current character, or empty string past the end."""
        if self._at_end():
            return ""
        return self.source[self._pos]

    def _advance(self) -> str:
        char = self._peek()
        self._pos += 1
        return char

    def _consume_while(self, chars: str) -> str:
        start = self._pos
        # '' in chars is True, so the emptiness check must come first
        while self._peek() and self._peek() in chars:
            self._advance()
        return self.source[start:self._pos]

    # =========================================================================
    # Token Creation
    # =========================================================================

    def _add_token(self, token_type: TokenType, value: str | int | None = None) -> None:
        self._tokens.append(Token(token_type, value, self.line_number))

    def _error(self, message: str) -> AssemblySyntaxError:
        location = SourceLocation(self.filename, self.line_number)
        return AssemblySyntaxError(message, location)

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _scan_number(self) -> None:
        lexeme = self._consume_while(string.digits)
        try:
            value = int(lexeme, 10)
        except ValueError:
            raise self._error(f"invalid number literal '{lexeme}'") from None
        self._add_token(TokenType.NUMBER, value)

    def _scan_identifier(self) -> None:
        """Scan a mnemonic, a label reference or a label definition."""
        lexeme = self._consume_while(self.IDENT_CHARS)
        is_definition = self._peek() == ":"

        if lexeme in KEYWORDS:
            if is_definition:
                raise self._error(
                    f"keyword cannot be used as a label name: '{lexeme}'"
                )
            self._add_token(KEYWORDS[lexeme])
            return

        if is_definition:
            self._advance()  # consume ':'
            self._add_token(TokenType.LABEL_DEF, lexeme)
        else:
            self._add_token(TokenType.LABEL, lexeme)

    def _scan_test_name(self) -> None:
        self._advance()  # consume '.'
        if not (self._peek() and self._peek() in self.TEST_NAME_START):
            raise self._error("test names must start with a letter or underscore")
        name = self._consume_while(self.IDENT_CHARS)
        self._add_token(TokenType.TEST_NAME, name)


# =============================================================================
# Whole-Source Tokenization
# =============================================================================

@dataclass
class LexResult:
    """
    Tokens for a whole source file plus any per-line errors.

    When errors is non-empty the token stream holds only the lines that
    lexed cleanly and has no trailing EOF.
    """
    tokens: list[Token] = field(default_factory=list)
    errors: list[AssemblerError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def message(self) -> str:
        """All diagnostics joined by newlines."""
        return "\n".join(str(e) for e in self.errors)


def _source_lines(source: str) -> list[str]:
    """
    Split on line feeds only, dropping one trailing carriage return per line.

    Form feeds and other Unicode line separators stay inside their line.
    A final line terminator does not start an extra empty line.
    """
    lines = source.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def tokenize(source: str, filename: str = "<input>") -> LexResult:
    """
    Tokenize a complete source text, collecting every line's errors.

    Args:
        source: The assembly source
        filename: Source filename for error messages

    Returns:
        LexResult with the concatenated tokens and the collected errors
    """
    result = LexResult()

    for line_number, line in enumerate(_source_lines(source)):
        try:
            tokens = Lexer(line, line_number, filename).tokenize()
        except AssemblySyntaxError as e:
            logger.debug(f"Lexical error on line {line_number}: {e.message}")
            result.errors.append(e)
            continue
        result.tokens.extend(tokens)

    if result.ok:
        last_line = result.tokens[-1].line if result.tokens else 0
        result.tokens.append(Token(TokenType.EOF, None, last_line))

    logger.debug(
        f"Tokenized {filename}: {len(result.tokens)} tokens, {len(result.errors)} errors"
    )
    return result
