"""
LNC Disassembler Module
=======================

Renders memory words back into mnemonics, annotated with the program's
labels when they are known.

Usage:
    from lnc.disassembler import Disassembler

    disasm = Disassembler(program.labels)
    for line in disasm.disassemble(program.memory, count=6):
        print(line)

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

from .lnc import DisassembledWord, Disassembler, disassemble_word

__all__ = [
    "DisassembledWord",
    "Disassembler",
    "disassemble_word",
]
