"""
LNC Inline Test Harness
=======================

Runs the `.name [inputs] [expected outputs]` tests declared in a program.
"""

from lnc.testkit.runner import TestOutcome, TestResult, format_report, run_test, run_tests

__all__ = ["TestOutcome", "TestResult", "format_report", "run_test", "run_tests"]
