# =============================================================================
# test_lexer.py - Lexer Unit Tests
# =============================================================================
# Tests for the LNC assembly lexer.
#
# Test coverage includes:
#   - Numbers, labels, label definitions and every mnemonic
#   - Test declaration tokens (names, brackets, commas)
#   - Comments and whitespace handling
#   - Line tagging and NEWLINE/EOF placement
#   - Per-line error recovery
# =============================================================================

import pytest
from lnc.assembler.lexer import Lexer, Token, TokenType, tokenize
from lnc.errors import AssemblySyntaxError


# =============================================================================
# Helper Function
# =============================================================================

def lex_line(source: str, line_number: int = 0) -> list:
    """Tokenize one line, dropping the trailing NEWLINE."""
    tokens = Lexer(source, line_number, "<test>").tokenize()
    assert tokens[-1].type == TokenType.NEWLINE
    return tokens[:-1]


def types(tokens: list) -> list:
    return [t.type for t in tokens]


# =============================================================================
# Basic Token Recognition Tests
# =============================================================================

class TestBasicTokens:
    """Test basic token recognition for simple inputs."""

    def test_empty_line(self):
        assert lex_line("") == []

    def test_whitespace_only(self):
        assert lex_line("   \t   ") == []

    def test_number(self):
        tokens = lex_line("42")
        assert tokens == [Token(TokenType.NUMBER, 42, 0)]

    def test_number_with_leading_zeros(self):
        """Leading zeros are allowed and do not mean octal."""
        tokens = lex_line("007")
        assert tokens[0].value == 7

    def test_large_number_is_unbounded(self):
        """Range checks belong to the parser, not the lexer."""
        tokens = lex_line("123456")
        assert tokens[0].value == 123456

    def test_label_reference(self):
        tokens = lex_line("count")
        assert tokens == [Token(TokenType.LABEL, "count", 0)]

    def test_label_with_digits_and_underscore(self):
        tokens = lex_line("loop_2")
        assert tokens[0].value == "loop_2"

    def test_label_definition(self):
        tokens = lex_line("loop:")
        assert tokens == [Token(TokenType.LABEL_DEF, "loop", 0)]

    def test_label_definition_followed_by_instruction(self):
        tokens = lex_line("loop: out")
        assert types(tokens) == [TokenType.LABEL_DEF, TokenType.OUT]


# =============================================================================
# Mnemonic Tests
# =============================================================================

class TestMnemonics:
    """Every mnemonic gets its own token type."""

    @pytest.mark.parametrize("text,expected", [
        ("lda", TokenType.LDA),
        ("sto", TokenType.STO),
        ("add", TokenType.ADD),
        ("sub", TokenType.SUB),
        ("inp", TokenType.INP),
        ("out", TokenType.OUT),
        ("hlt", TokenType.HLT),
        ("brz", TokenType.BRZ),
        ("brp", TokenType.BRP),
        ("bra", TokenType.BRA),
        ("dat", TokenType.DAT),
    ])
    def test_mnemonic(self, text, expected):
        tokens = lex_line(text)
        assert types(tokens) == [expected]
        assert tokens[0].value is None

    def test_mnemonics_are_case_sensitive(self):
        """Upper-case spellings are ordinary labels."""
        tokens = lex_line("LDA")
        assert tokens == [Token(TokenType.LABEL, "LDA", 0)]

    def test_mnemonic_with_operand(self):
        tokens = lex_line("lda 5")
        assert types(tokens) == [TokenType.LDA, TokenType.NUMBER]

    def test_token_type_opcode(self):
        assert TokenType.LDA.opcode is not None
        assert TokenType.LDA.opcode.mnemonic == "lda"
        assert TokenType.NUMBER.opcode is None


# =============================================================================
# Test Declaration Tokens
# =============================================================================

class TestTestDeclarations:
    """Tokens making up `.name [inputs] [outputs]`."""

    def test_full_declaration(self):
        tokens = lex_line(".t1 [5] [5,4]")
        assert types(tokens) == [
            TokenType.TEST_NAME,
            TokenType.OPEN_BRACKET, TokenType.NUMBER, TokenType.CLOSE_BRACKET,
            TokenType.OPEN_BRACKET, TokenType.NUMBER, TokenType.COMMA,
            TokenType.NUMBER, TokenType.CLOSE_BRACKET,
        ]
        assert tokens[0].value == "t1"

    def test_name_may_start_with_underscore(self):
        tokens = lex_line("._private [] []")
        assert tokens[0] == Token(TokenType.TEST_NAME, "_private", 0)

    def test_name_starting_with_digit_fails(self):
        with pytest.raises(AssemblySyntaxError, match="test names must start"):
            lex_line(".1bad [] []")

    def test_lone_dot_fails(self):
        with pytest.raises(AssemblySyntaxError, match="test names must start"):
            lex_line(".")


# =============================================================================
# Comments and Whitespace
# =============================================================================

class TestComments:
    """Semicolon comments run to end of line."""

    def test_comment_only(self):
        assert lex_line("; nothing here") == []

    def test_trailing_comment(self):
        tokens = lex_line("hlt ; stop")
        assert types(tokens) == [TokenType.HLT]

    def test_comment_hides_bad_characters(self):
        assert lex_line("out ; $%^&") == [Token(TokenType.OUT, None, 0)]

    def test_tabs_separate_tokens(self):
        tokens = lex_line("\tlda\tcount")
        assert types(tokens) == [TokenType.LDA, TokenType.LABEL]


# =============================================================================
# Lexical Error Tests
# =============================================================================

class TestLexerErrors:
    """Errors raised for a single line."""

    def test_unrecognised_character(self):
        with pytest.raises(AssemblySyntaxError, match="unrecognised character '\\$'"):
            lex_line("lda $5")

    def test_keyword_as_label_definition(self):
        with pytest.raises(AssemblySyntaxError) as exc_info:
            lex_line("add:")
        assert "keyword cannot be used as a label name: 'add'" in str(exc_info.value)

    def test_error_carries_location(self):
        with pytest.raises(AssemblySyntaxError) as exc_info:
            lex_line("#", line_number=4)
        assert exc_info.value.location.line == 4
        assert str(exc_info.value).startswith("<test>:5: error:")


# =============================================================================
# Whole-Source Tokenization
# =============================================================================

class TestTokenize:
    """tokenize() over complete sources."""

    def test_lines_are_tagged(self):
        result = tokenize("inp\nout\nhlt")
        assert result.ok
        lines = {t.line for t in result.tokens if t.type is not TokenType.EOF}
        assert lines == {0, 1, 2}

    def test_every_line_ends_with_newline(self):
        result = tokenize("inp\n\nhlt")
        newlines = [t for t in result.tokens if t.type is TokenType.NEWLINE]
        assert len(newlines) == 3

    def test_eof_appended_on_success(self):
        result = tokenize("hlt")
        assert result.tokens[-1].type is TokenType.EOF

    def test_empty_source(self):
        result = tokenize("")
        assert result.ok
        assert types(result.tokens) == [TokenType.EOF]

    def test_bad_lines_are_dropped(self):
        """A failing line contributes no tokens; others still lex."""
        result = tokenize("inp\nlda $\nout")
        assert not result.ok
        assert len(result.errors) == 1
        assert TokenType.LDA not in types(result.tokens)
        assert TokenType.OUT in types(result.tokens)

    def test_no_eof_after_errors(self):
        result = tokenize("inp\n@")
        assert TokenType.EOF not in types(result.tokens)

    def test_every_bad_line_reported(self):
        result = tokenize("$\nadd:\n.9\nhlt", "prog.lnc")
        assert len(result.errors) == 3
        assert [e.location.line for e in result.errors] == [0, 1, 2]
        assert result.message.splitlines()[0] == (
            "prog.lnc:1: error: unrecognised character '$'"
        )

    @pytest.mark.parametrize("separator", ["\x0b", "\x0c", "\x1c", "\x85", "\u2028"])
    def test_only_line_feeds_end_lines(self, separator):
        """Form feeds and Unicode separators are whitespace inside a line."""
        result = tokenize(f"inp{separator}\nhlt")
        assert result.ok
        hlt = [t for t in result.tokens if t.type is TokenType.HLT]
        assert hlt[0].line == 1

    def test_form_feed_line_numbers_in_errors(self):
        result = tokenize("\x0c\nlda $")
        assert result.errors[0].location.line == 1

    def test_trailing_newline_adds_no_line(self):
        result = tokenize("hlt\n")
        assert types(result.tokens) == [TokenType.HLT, TokenType.NEWLINE, TokenType.EOF]

    def test_crlf_line_endings(self):
        result = tokenize("inp\r\nhlt\r\n")
        assert result.ok
        assert types(result.tokens) == [
            TokenType.INP, TokenType.NEWLINE,
            TokenType.HLT, TokenType.NEWLINE,
            TokenType.EOF,
        ]


class TestTokenDescribe:
    """Token descriptions used in parser diagnostics."""

    @pytest.mark.parametrize("token,text", [
        (Token(TokenType.NUMBER, 7), "number 7"),
        (Token(TokenType.LABEL, "x"), "label 'x'"),
        (Token(TokenType.LABEL_DEF, "x"), "label definition 'x:'"),
        (Token(TokenType.TEST_NAME, "t"), "test name '.t'"),
        (Token(TokenType.COMMA), "','"),
        (Token(TokenType.NEWLINE), "end of line"),
        (Token(TokenType.EOF), "end of input"),
        (Token(TokenType.BRZ), "instruction 'brz'"),
    ])
    def test_describe(self, token, text):
        assert token.describe() == text
