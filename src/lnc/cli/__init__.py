"""
LNC Command-Line Interface
==========================

- **lnc**: assemble a program, then run it, test it or debug it

The tool is a Click application; console.py holds the interactive
input/output ports and errors.py the shared exit-code handling.
"""

__all__ = ["lnc"]
