# =============================================================================
# test_assembler.py - Assembler Unit Tests
# =============================================================================
# Tests for address resolution, encoding and the compile pipeline.
#
# Test coverage includes:
#   - Encoding of every instruction into the memory image
#   - Label resolution and undefined-label diagnostics
#   - The 99-instruction capacity limit
#   - Aggregated diagnostics from lexer, parser and assembler
#   - The Assembler class and compile_file
# =============================================================================

import pytest
from lnc.assembler import (
    Assembler,
    MAX_INSTRUCTIONS,
    MEMORY_SIZE,
    Opcode,
    compile_file,
    compile_program,
    decode,
    encode,
)
from lnc.errors import (
    CompilationError,
    ProgramTooLargeError,
    UndefinedLabelError,
)


# =============================================================================
# Encoding Tests
# =============================================================================

class TestEncoding:
    """Instruction words in the memory image."""

    @pytest.mark.parametrize("source,word", [
        ("lda 5", 505),
        ("sto 17", 317),
        ("add 99", 199),
        ("sub 0", 200),
        ("bra 42", 642),
        ("brz 3", 703),
        ("brp 8", 808),
        ("inp", 901),
        ("out", 902),
        ("hlt", 0),
        ("dat 123", 123),
    ])
    def test_single_instruction(self, source, word):
        program = compile_program(source)
        assert program.memory[0] == word

    @pytest.mark.parametrize("opcode,operand", [
        (Opcode.LOAD, 5),
        (Opcode.STORE, 99),
        (Opcode.ADD, 0),
        (Opcode.SUBTRACT, 50),
        (Opcode.BRANCH_ALWAYS, 1),
        (Opcode.BRANCH_ZERO, 98),
        (Opcode.BRANCH_POSITIVE, 7),
    ])
    def test_decode_inverts_encode(self, opcode, operand):
        assert decode(encode(opcode, operand)) == (opcode, operand)

    @pytest.mark.parametrize("opcode", [Opcode.INPUT, Opcode.OUTPUT, Opcode.HALT])
    def test_decode_operand_less(self, opcode):
        assert decode(encode(opcode)) == (opcode, None)

    @pytest.mark.parametrize("word", [400, 455, 1, 99, 900, 903, 999])
    def test_undefined_words(self, word):
        assert decode(word) is None

    def test_image_layout(self, countdown_program):
        """Cell i holds instruction i; the rest are zero."""
        memory = countdown_program.memory
        assert len(memory) == MEMORY_SIZE
        assert memory[:8] == [901, 902, 206, 307, 801, 0, 1, 0]
        assert memory[8:] == [0] * (MEMORY_SIZE - 8)

    def test_labels_resolve_forward_and_backward(self):
        program = compile_program("start: bra end\nbra start\nend: hlt")
        assert program.memory[:3] == [602, 600, 0]


# =============================================================================
# Label Resolution Tests
# =============================================================================

class TestUndefinedLabels:
    """Symbolic addresses without a definition."""

    def test_undefined_label(self):
        with pytest.raises(CompilationError) as exc_info:
            compile_program("lda undefined_label")
        errors = exc_info.value.errors
        assert len(errors) == 1
        assert isinstance(errors[0], UndefinedLabelError)
        assert "undefined label 'undefined_label'" in str(exc_info.value)

    def test_no_program_on_failure(self):
        asm = Assembler()
        assert asm.assemble_string("lda nowhere") is None
        assert asm.has_errors()
        assert asm.get_memory() == []

    def test_similar_label_hint(self):
        with pytest.raises(CompilationError) as exc_info:
            compile_program("lda cuont\ncount: dat 0", "loop.lnc")
        assert str(exc_info.value) == (
            "loop.lnc:1: error: undefined label 'cuont'\n"
            "hint: did you mean 'count'?"
        )

    def test_first_failure_stops_assembly(self):
        with pytest.raises(CompilationError) as exc_info:
            compile_program("lda a\nlda b")
        assert len(exc_info.value.errors) == 1
        assert exc_info.value.errors[0].label == "a"


# =============================================================================
# Capacity Tests
# =============================================================================

class TestCapacity:
    """At most 99 instructions fit."""

    def test_99_instructions(self):
        program = compile_program("hlt\n" * (MAX_INSTRUCTIONS - 1) + "dat 7\n")
        assert program.memory[98] == 7
        assert program.memory[99] == 0

    def test_100_instructions(self):
        with pytest.raises(CompilationError) as exc_info:
            compile_program("out\n" * 100)
        error = exc_info.value.errors[0]
        assert isinstance(error, ProgramTooLargeError)
        assert error.count == 100
        assert "too many instructions: 100 (at most 99 allowed)" in str(error)

    def test_labels_and_tests_do_not_count(self):
        source = "hlt\n" * MAX_INSTRUCTIONS + "end:\n.t [] []\n"
        program = compile_program(source)
        assert program.labels == {"end": 99}


# =============================================================================
# Aggregate Diagnostics
# =============================================================================

class TestAggregateErrors:
    """Every independent error is reported in one compile."""

    def test_keyword_label_and_number_statement(self):
        with pytest.raises(CompilationError) as exc_info:
            compile_program("inp\nadd:\n99 99\nhlt", "f.lnc")
        lines = str(exc_info.value).splitlines()
        assert lines == [
            "f.lnc:2: error: keyword cannot be used as a label name: 'add'",
            "f.lnc:3: error: found number 99 instead of instruction/label definition",
        ]

    def test_lexer_then_parser_then_assembler(self):
        source = "lda 100\n$\nbra nowhere"
        with pytest.raises(CompilationError) as exc_info:
            compile_program(source)
        messages = [e.message for e in exc_info.value.errors]
        assert messages == [
            "unrecognised character '$'",
            "invalid address 100: must be less than 100",
            "undefined label 'nowhere'",
        ]

    def test_form_feed_keeps_line_numbers(self):
        with pytest.raises(CompilationError) as exc_info:
            compile_program("\x0c\nlda")
        assert str(exc_info.value) == (
            "<input>:2: error: found end of line instead of an address after 'lda'"
        )

    def test_error_report(self):
        asm = Assembler()
        asm.assemble_string("lda\nsto")
        report = asm.get_error_report()
        assert report.endswith("2 errors")
        assert len(asm.get_errors()) == 2

    def test_raise_for_errors(self):
        asm = Assembler()
        asm.assemble_string("#")
        with pytest.raises(CompilationError):
            asm.raise_for_errors()

    def test_every_error_reported(self):
        with pytest.raises(CompilationError) as exc_info:
            compile_program("$\n" * 150)
        errors = exc_info.value.errors
        assert len(errors) == 150
        assert errors[-1].location.line == 149
        assert len(str(exc_info.value).splitlines()) == 150

    def test_explicit_error_limit(self):
        asm = Assembler(max_errors=3)
        assert asm.assemble_string("$\n" * 10) is None
        assert "too many errors" in asm.get_errors()[-1].message


# =============================================================================
# Assembler Class and Files
# =============================================================================

class TestAssembler:
    """Program results from the Assembler class."""

    def test_program_contents(self, countdown_source):
        asm = Assembler()
        program = asm.assemble_string(countdown_source + ".t1 [5] [5,4,3,2,1,0]\n")
        assert not asm.has_errors()
        assert asm.get_program() is program
        assert asm.get_labels() == {"loop": 1, "one": 6, "count": 7}
        assert [t.name for t in asm.get_tests()] == ["t1"]
        assert len(program.instructions) == 8

    def test_label_at(self, countdown_program):
        assert countdown_program.label_at(1) == "loop"
        assert countdown_program.label_at(2) is None

    def test_reassembly_clears_state(self):
        asm = Assembler()
        asm.assemble_string("lda")
        asm.assemble_string("hlt")
        assert not asm.has_errors()

    def test_compile_file(self, tmp_path, countdown_source):
        path = tmp_path / "countdown.lnc"
        path.write_text(countdown_source)
        program = compile_file(path)
        assert program.memory[0] == 901

    def test_compile_file_errors_use_filename(self, tmp_path):
        path = tmp_path / "bad.lnc"
        path.write_text("hlt\nlda 100\n")
        with pytest.raises(CompilationError) as exc_info:
            compile_file(path)
        assert str(exc_info.value).startswith(f"{path}:2: error:")
