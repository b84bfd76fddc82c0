"""
LNC Test Configuration
======================

Shared fixtures: the countdown program used across the suites, both as
source text and compiled.
"""

import pytest

from lnc.assembler import compile_program


COUNTDOWN_SOURCE = """\
; count down from the input value to zero
        inp
loop:   out
        sub one
        sto count
        brp loop
        hlt
one:    dat 1
count:  dat 0
"""


@pytest.fixture
def countdown_source() -> str:
    return COUNTDOWN_SOURCE


@pytest.fixture
def countdown_program():
    return compile_program(COUNTDOWN_SOURCE, "countdown.lnc")
