"""
LNC Machine Module
==================

The interpreter, the ports it reads from and writes to, and a
single-step debugger built on top of it.
"""

from lnc.machine.cpu import Interpreter, MachineState, execute
from lnc.machine.debugger import BreakEvent, BreakReason, Debugger
from lnc.machine.ports import (
    CaptureOutput,
    InputPort,
    LoggingTracer,
    NullTracer,
    OutputPort,
    QueueInput,
    RecordingTracer,
    TraceLogger,
    check_word,
)

__all__ = [
    "Interpreter",
    "MachineState",
    "execute",
    "BreakEvent",
    "BreakReason",
    "Debugger",
    "CaptureOutput",
    "InputPort",
    "LoggingTracer",
    "NullTracer",
    "OutputPort",
    "QueueInput",
    "RecordingTracer",
    "TraceLogger",
    "check_word",
]
