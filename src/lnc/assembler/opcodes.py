"""
LNC Instruction Set Definition
==============================

This module defines the fixed eleven-instruction set of the little
numbers computer: mnemonics, encodings and operand kinds.

Every memory cell holds a three-digit decimal word. The hundreds digit
is the opcode class and the remaining two digits are the operand:

| Mnemonic | Class | Encoding | Operand         |
|----------|-------|----------|-----------------|
| add      | 1     | 1xx      | address         |
| sub      | 2     | 2xx      | address         |
| sto      | 3     | 3xx      | address         |
| lda      | 5     | 5xx      | address         |
| bra      | 6     | 6xx      | address         |
| brz      | 7     | 7xx      | address         |
| brp      | 8     | 8xx      | address         |
| inp      | 9     | 901      | (none)          |
| out      | 9     | 902      | (none)          |
| hlt      | 0     | 000      | (none)          |
| dat      | -     | value    | literal 000-999 |

Class 4 and any class 0/9 word other than 000, 901 and 902 is undefined.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


# =============================================================================
# Machine Geometry
# =============================================================================

MEMORY_SIZE = 100        # Number of cells in the memory image
WORD_LIMIT = 1000        # Every cell and the accumulator hold 0..999
MAX_INSTRUCTIONS = 99    # Instruction lists of 100 or more are rejected


# =============================================================================
# Operand Kinds
# =============================================================================

class OperandKind(Enum):
    """What, if anything, follows a mnemonic in source."""
    NONE = auto()       # inp, out, hlt
    ADDRESS = auto()    # lda, sto, add, sub, brz, brp, bra
    VALUE = auto()      # dat

    def __str__(self) -> str:
        return self.name.lower()


# =============================================================================
# Opcodes
# =============================================================================

class Opcode(Enum):
    """The eleven instructions, valued by their source mnemonic."""
    LOAD = "lda"
    STORE = "sto"
    ADD = "add"
    SUBTRACT = "sub"
    INPUT = "inp"
    OUTPUT = "out"
    HALT = "hlt"
    BRANCH_ZERO = "brz"
    BRANCH_POSITIVE = "brp"
    BRANCH_ALWAYS = "bra"
    DATA = "dat"

    @property
    def mnemonic(self) -> str:
        return self.value

    @property
    def info(self) -> "InstructionInfo":
        return OPCODE_TABLE[self]


@dataclass(frozen=True)
class InstructionInfo:
    """
    Encoding information for one opcode.

    Attributes:
        base: Encoded word with a zero operand (e.g. 500 for lda)
        operand: Kind of operand the instruction takes
        description: One-line summary for listings and the debugger
    """
    base: int
    operand: OperandKind
    description: str

    def __repr__(self) -> str:
        return f"InstructionInfo(base={self.base:03d}, operand={self.operand})"


OPCODE_TABLE: dict[Opcode, InstructionInfo] = {
    Opcode.ADD: InstructionInfo(100, OperandKind.ADDRESS, "acc += memory[addr]"),
    Opcode.SUBTRACT: InstructionInfo(200, OperandKind.ADDRESS, "acc -= memory[addr]"),
    Opcode.STORE: InstructionInfo(300, OperandKind.ADDRESS, "memory[addr] = acc"),
    Opcode.LOAD: InstructionInfo(500, OperandKind.ADDRESS, "acc = memory[addr]"),
    Opcode.BRANCH_ALWAYS: InstructionInfo(600, OperandKind.ADDRESS, "pc = addr"),
    Opcode.BRANCH_ZERO: InstructionInfo(700, OperandKind.ADDRESS, "pc = addr if acc == 0"),
    Opcode.BRANCH_POSITIVE: InstructionInfo(800, OperandKind.ADDRESS, "pc = addr if not negative"),
    Opcode.INPUT: InstructionInfo(901, OperandKind.NONE, "acc = input"),
    Opcode.OUTPUT: InstructionInfo(902, OperandKind.NONE, "output acc"),
    Opcode.HALT: InstructionInfo(0, OperandKind.NONE, "stop"),
    Opcode.DATA: InstructionInfo(0, OperandKind.VALUE, "literal word"),
}

# Source mnemonic -> opcode, used by the lexer for keyword matching
MNEMONICS: dict[str, Opcode] = {op.mnemonic: op for op in Opcode}

ADDRESS_INSTRUCTIONS = frozenset(
    op for op, info in OPCODE_TABLE.items() if info.operand is OperandKind.ADDRESS
)

INHERENT_INSTRUCTIONS = frozenset(
    op for op, info in OPCODE_TABLE.items() if info.operand is OperandKind.NONE
)

# Opcode class (hundreds digit) -> address-taking opcode
ADDRESS_CLASSES: dict[int, Opcode] = {
    OPCODE_TABLE[op].base // 100: op for op in ADDRESS_INSTRUCTIONS
}

# Full word -> operand-less opcode
INHERENT_WORDS: dict[int, Opcode] = {
    OPCODE_TABLE[op].base: op for op in INHERENT_INSTRUCTIONS
}


# =============================================================================
# Encoding Helpers
# =============================================================================

def encode(opcode: Opcode, operand: int = 0) -> int:
    """
    Encode an instruction into its three-digit word.

    Args:
        opcode: The instruction
        operand: Resolved address (0-99) or data value (0-999)

    Returns:
        The encoded word
    """
    info = OPCODE_TABLE[opcode]
    if info.operand is OperandKind.VALUE:
        return operand
    if info.operand is OperandKind.ADDRESS:
        return info.base + operand
    return info.base


def split_word(word: int) -> tuple[int, int]:
    """Split a word into (opcode class, operand)."""
    return word // 100, word % 100


def decode(word: int) -> Optional[tuple[Opcode, Optional[int]]]:
    """
    Decode a word into the instruction it executes as.

    Returns:
        (opcode, address) for address-taking instructions,
        (opcode, None) for inp/out/hlt, or None if the word is undefined
    """
    opcode_class, operand = split_word(word)
    if opcode_class in ADDRESS_CLASSES:
        return ADDRESS_CLASSES[opcode_class], operand
    if word in INHERENT_WORDS:
        return INHERENT_WORDS[word], None
    return None
