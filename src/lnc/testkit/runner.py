"""
Inline Test Runner
==================

Executes the tests declared in a program's source:

    .countdown [3] [3, 2, 1, 0]

Each test gets a fresh Interpreter over its own copy of the shared memory
image, a QueueInput holding the test's inputs and a CaptureOutput. The
run goes until hlt or the first failing step, and the outcome is decided
in this order:

1. a step raised            -> FAILED (error, instruction count, outputs)
2. inputs left unconsumed   -> FAILED (which inputs were unused)
3. outputs != expected      -> FAILED ("incorrect outputs")
4. otherwise                -> PASSED

Tests are independent: a failure never stops the remaining tests.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence

from lnc.assembler.assembler import Program
from lnc.assembler.parser import LNCTest
from lnc.errors import LNCError
from lnc.machine.cpu import Interpreter
from lnc.machine.ports import CaptureOutput, QueueInput, TraceLogger

logger = logging.getLogger(__name__)


class TestOutcome(Enum):
    """Result classification of one inline test."""
    __test__ = False  # not a pytest class

    PASSED = "passed"
    FAILED = "failed"


@dataclass
class TestResult:
    """
    Outcome of running one inline test.

    Attributes:
        test: The declaration that was run
        outcome: PASSED or FAILED
        message: Why the test failed (empty when it passed)
        instruction_count: Instructions executed before halting or failing
        outputs: Values captured from out, in order
        unused_inputs: Inputs still queued when the program halted
        error: The runtime error, if a step failed
    """
    __test__ = False

    test: LNCTest
    outcome: TestOutcome
    message: str = ""
    instruction_count: int = 0
    outputs: list[int] = field(default_factory=list)
    unused_inputs: list[int] = field(default_factory=list)
    error: Optional[LNCError] = None

    @property
    def name(self) -> str:
        return self.test.name

    @property
    def passed(self) -> bool:
        return self.outcome is TestOutcome.PASSED

    def __str__(self) -> str:
        if self.passed:
            return f"{self.name}: passed ({self.instruction_count} instructions)"
        return f"{self.name}: FAILED - {self.message}"


def run_test(
    memory: Sequence[int],
    test: LNCTest,
    tracer: Optional[TraceLogger] = None,
) -> TestResult:
    """
    Run one inline test against a memory image.

    Args:
        memory: Assembled image (copied, never modified)
        test: The declaration to run
        tracer: Optional trace receiver for the run

    Returns:
        TestResult describing the outcome
    """
    inputs = QueueInput(test.inputs)
    outputs = CaptureOutput()
    interpreter = Interpreter(memory, inputs, outputs, tracer)
    count = 0

    try:
        while not interpreter.halted:
            interpreter.step()
            count += 1
    except LNCError as e:
        logger.debug(f"Test '{test.name}' raised after {count} instructions: {e}")
        return TestResult(
            test, TestOutcome.FAILED,
            message=f"{e} (after {count} instructions, outputs {outputs.values})",
            instruction_count=count,
            outputs=outputs.values,
            unused_inputs=inputs.remaining,
            error=e,
        )

    if inputs.remaining:
        return TestResult(
            test, TestOutcome.FAILED,
            message=f"unused inputs {inputs.remaining}",
            instruction_count=count,
            outputs=outputs.values,
            unused_inputs=inputs.remaining,
        )

    if outputs.values != test.expected:
        return TestResult(
            test, TestOutcome.FAILED,
            message=f"incorrect outputs: expected {test.expected}, got {outputs.values}",
            instruction_count=count,
            outputs=outputs.values,
        )

    logger.debug(f"Test '{test.name}' passed in {count} instructions")
    return TestResult(test, TestOutcome.PASSED, instruction_count=count, outputs=outputs.values)


def run_tests(program: Program, tracer: Optional[TraceLogger] = None) -> list[TestResult]:
    """Run every test declared in program, in source order."""
    return [run_test(program.memory, test, tracer) for test in program.tests]


def format_report(results: list[TestResult]) -> str:
    """
    Render a summary of test results.

    Example:
        countdown: passed (18 instructions)
        too_many: FAILED - unused inputs [7]

        1 passed, 1 failed
    """
    lines = [str(result) for result in results]
    passed = sum(1 for r in results if r.passed)
    failed = len(results) - passed
    if lines:
        lines.append("")
    lines.append(f"{passed} passed, {failed} failed")
    return "\n".join(lines)
