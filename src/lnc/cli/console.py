"""
Console Ports
=============

Interactive implementations of the interpreter's input and output ports,
built on click so prompts and output behave the same under CliRunner.
"""

import click

from lnc.errors import InputError
from lnc.machine.ports import check_word


class ConsoleInput:
    """
    Reads one decimal integer per ``inp`` from the terminal.

    A line that is not a non-negative integer, or a value of 1000 or more,
    fails the step rather than prompting again.
    """

    def __init__(self, prompt: str = "Input"):
        self.prompt = prompt
        self.history: list[int] = []

    def take(self) -> int:
        try:
            text = click.prompt(self.prompt, type=str, default="", show_default=False).strip()
        except click.Abort:
            raise InputError("input stream closed") from None
        # isdigit alone accepts superscripts and other non-ASCII digits
        if not (text.isascii() and text.isdigit()):
            raise InputError(f'invalid input "{text}": expected a number from 0 to 999')
        value = check_word(int(text))
        self.history.append(value)
        return value


class ConsoleOutput:
    """Echoes every ``out`` value and keeps a history for the run summary."""

    def __init__(self):
        self.history: list[int] = []

    def send(self, value: int) -> None:
        self.history.append(value)
        click.echo(f"Output: {value}")
