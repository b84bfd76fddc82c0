"""
Interpreter Ports
=================

The interpreter talks to the outside world through three small
interfaces, injected at construction:

- **InputPort**: supplies one value (0-999) per ``inp``
- **OutputPort**: receives the accumulator on every ``out``
- **TraceLogger**: receives one human-readable trace line per call

Any object with the right method satisfies a port; this module provides
the queue-backed and capturing implementations the test harness uses,
plus tracers that forward to ``logging``, record lines, or discard them.
Console implementations live in ``lnc.cli.console``.
"""

import logging
from collections import deque
from typing import Iterable, Protocol

from lnc.assembler.opcodes import WORD_LIMIT
from lnc.errors import InputExhaustedError, InputRangeError


class InputPort(Protocol):
    """Source of values for the ``inp`` instruction."""

    def take(self) -> int:
        """
        Return the next input value.

        Raises:
            InputError: If no valid value can be produced
        """
        ...


class OutputPort(Protocol):
    """Sink for the ``out`` instruction."""

    def send(self, value: int) -> None:
        """Accept one output value (0-999)."""
        ...


class TraceLogger(Protocol):
    """Receiver of interpreter trace lines."""

    def log(self, message: str) -> None:
        ...


def check_word(value: int) -> int:
    """Return value if it fits a memory cell, else raise InputRangeError."""
    if not 0 <= value < WORD_LIMIT:
        raise InputRangeError(value)
    return value


# =============================================================================
# Queue-Backed Ports
# =============================================================================

class QueueInput:
    """
    Input port pre-loaded with a fixed sequence of values.

    Values are validated when the queue is built, so take() only fails
    once the queue is empty.
    """

    def __init__(self, values: Iterable[int] = ()):
        self.queue: deque[int] = deque(check_word(v) for v in values)

    def take(self) -> int:
        if not self.queue:
            raise InputExhaustedError()
        return self.queue.popleft()

    @property
    def remaining(self) -> list[int]:
        """Values not yet consumed."""
        return list(self.queue)


class CaptureOutput:
    """Output port that records every value sent to it."""

    def __init__(self):
        self.values: list[int] = []

    def send(self, value: int) -> None:
        self.values.append(value)


# =============================================================================
# Tracers
# =============================================================================

class LoggingTracer:
    """Forward trace lines to a ``logging`` logger at DEBUG level."""

    def __init__(self, logger: logging.Logger | None = None):
        self._logger = logger or logging.getLogger("lnc.trace")

    def log(self, message: str) -> None:
        self._logger.debug(message)


class RecordingTracer:
    """Keep trace lines in memory, e.g. for display next to a debugger view."""

    def __init__(self):
        self.lines: list[str] = []

    def log(self, message: str) -> None:
        self.lines.append(message)

    def drain(self) -> list[str]:
        """Return and forget the lines recorded so far."""
        lines, self.lines = self.lines, []
        return lines


class NullTracer:
    """Discard trace lines."""

    def log(self, message: str) -> None:
        pass
