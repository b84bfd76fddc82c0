"""
LNC Disassembler
================

Turns memory words back into readable assembly. This is the inverse of
the assembler's encoding and needs nothing but the class/operand split:
the hundreds digit picks the instruction, the last two digits are its
address.

Words that do not decode (class 4, or class 0/9 words other than 000,
901, 902) are shown as ``dat`` with the raw value, since that is the
only way such a word can appear in source.

Usage:
    disasm = Disassembler(labels={"loop": 1, "one": 5})
    for line in disasm.disassemble(memory, count=6):
        print(line)

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from lnc.assembler.opcodes import MEMORY_SIZE, Opcode, decode


@dataclass(frozen=True)
class DisassembledWord:
    """
    One decoded memory word.

    Attributes:
        address: Cell the word came from
        word: Raw value (0-999)
        opcode: Decoded instruction, None if the word is undefined
        operand: Address operand, None for operand-less instructions
        label: Label bound to this cell, if known
        target_label: Label bound to the operand address, if known
    """
    address: int
    word: int
    opcode: Optional[Opcode]
    operand: Optional[int] = None
    label: Optional[str] = None
    target_label: Optional[str] = None

    @property
    def is_defined(self) -> bool:
        return self.opcode is not None

    @property
    def mnemonic(self) -> str:
        return self.opcode.mnemonic if self.opcode else Opcode.DATA.mnemonic

    @property
    def operand_str(self) -> str:
        if self.opcode is None:
            return f"{self.word:03d}"
        if self.operand is None:
            return ""
        if self.target_label:
            return self.target_label
        return f"{self.operand:02d}"

    @property
    def text(self) -> str:
        """Mnemonic and operand, e.g. ``lda 05``."""
        if self.operand_str:
            return f"{self.mnemonic} {self.operand_str}"
        return self.mnemonic

    def __str__(self) -> str:
        """Format as listing line: ADDRESS: WORD  [label:] TEXT"""
        label = f"{self.label}:" if self.label else ""
        return f"{self.address:02d}: {self.word:03d}  {label:<10} {self.text}".rstrip()


def disassemble_word(word: int) -> str:
    """Render a single word as ``mnemonic operand``."""
    return Disassembler().disassemble_one(word).text


class Disassembler:
    """
    Disassembler for LNC memory images.

    Attributes:
        labels: Label name -> address, used to annotate output
    """

    def __init__(self, labels: Optional[dict[str, int]] = None):
        self.labels = dict(labels or {})
        # First label in definition order wins for each address
        self._reverse: dict[int, str] = {}
        for name, address in self.labels.items():
            self._reverse.setdefault(address, name)

    def label_at(self, address: int) -> Optional[str]:
        """Reverse lookup: label bound to address, if any."""
        return self._reverse.get(address)

    def disassemble_one(self, word: int, address: int = 0) -> DisassembledWord:
        """Decode one word found at address."""
        decoded = decode(word)
        if decoded is None:
            return DisassembledWord(address, word, None, label=self.label_at(address))

        opcode, operand = decoded
        target = self.label_at(operand) if operand is not None else None
        return DisassembledWord(
            address, word, opcode, operand,
            label=self.label_at(address),
            target_label=target,
        )

    def disassemble(
        self,
        memory: Sequence[int],
        start: int = 0,
        count: Optional[int] = None,
    ) -> list[DisassembledWord]:
        """
        Decode a run of cells.

        Args:
            memory: Memory image
            start: First address
            count: Number of cells (default: through the end of memory)
        """
        end = MEMORY_SIZE if count is None else min(MEMORY_SIZE, start + count)
        return [self.disassemble_one(memory[a], a) for a in range(start, end)]

