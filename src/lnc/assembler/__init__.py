"""
LNC Assembler Module
====================

Turns LNC assembly source into a 100-word memory image.

Pipeline:
    source -> tokenize() -> parse() -> assemble() -> memory image

The Assembler class drives all three stages and collects every error;
compile_program() and compile_file() wrap it and raise CompilationError.
"""

from lnc.assembler.assembler import (
    Assembler,
    Program,
    assemble,
    compile_file,
    compile_program,
    encode_instruction,
    resolve_address,
)
from lnc.assembler.lexer import Lexer, LexResult, Token, TokenType, tokenize
from lnc.assembler.opcodes import (
    MAX_INSTRUCTIONS,
    MEMORY_SIZE,
    WORD_LIMIT,
    Opcode,
    OperandKind,
    decode,
    encode,
)
from lnc.assembler.parser import (
    Instruction,
    LNCTest,
    NumericAddress,
    ParseInfo,
    Parser,
    SymbolicAddress,
    parse,
)

__all__ = [
    "Assembler",
    "Program",
    "assemble",
    "compile_file",
    "compile_program",
    "encode_instruction",
    "resolve_address",
    "Lexer",
    "LexResult",
    "Token",
    "TokenType",
    "tokenize",
    "MAX_INSTRUCTIONS",
    "MEMORY_SIZE",
    "WORD_LIMIT",
    "Opcode",
    "OperandKind",
    "decode",
    "encode",
    "Instruction",
    "LNCTest",
    "NumericAddress",
    "ParseInfo",
    "Parser",
    "SymbolicAddress",
    "parse",
]
