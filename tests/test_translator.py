# =============================================================================
# test_translator.py - Translator Unit Tests
# =============================================================================
# Tests for the single-pass VALGOL I translator.
#
# Test coverage includes:
#   - Expression code and operator precedence
#   - Assignment, EDIT and PRINT
#   - Declarations, loops and conditionals
#   - Label uniqueness and definition
#   - Syntax mismatches and their reported rule
#   - Repeatability of translation
# =============================================================================

import pytest
from valgol.compiler.emitter import Opcode
from valgol.compiler.lexer import tokenize
from valgol.compiler.translator import Translator, translate
from valgol.errors import SyntaxMismatch, TranslationError


# =============================================================================
# Helper Functions
# =============================================================================

def listing(source: str) -> list[str]:
    """Translate source and return each instruction in its short form."""
    return [str(instr) for instr in translate(source, "<test>")]


def body(statement: str) -> list[str]:
    """Listing of a one-statement block, without the closing HLT/END."""
    lines = listing(f".BEGIN {statement} .END")
    assert lines[-2:] == ["HLT", "END"]
    return lines[:-2]


def mismatch(source: str) -> SyntaxMismatch:
    with pytest.raises(SyntaxMismatch) as exc_info:
        translate(source, "<test>")
    return exc_info.value


SAMPLE_PROGRAMS = [
    ".BEGIN PRINT .END",
    ".BEGIN .REAL x; 5 = x; PRINT .END",
    ".BEGIN .REAL i; 0 = i; .UNTIL i .= 3 .DO .BEGIN PRINT; i + 1 = i .END .END",
    ".BEGIN .IF 1 .THEN PRINT .ELSE .IF 0 .THEN PRINT .ELSE PRINT .END",
    ".BEGIN .REAL a, b; .UNTIL a .DO .IF b .THEN 1 = a .ELSE 1 = b; "
    ".BEGIN .REAL c; a + b = c .END .END",
]


# =============================================================================
# Expression Tests
# =============================================================================

class TestExpressions:
    """Test code emitted for expressions."""

    def test_literal(self):
        assert body("5 = x") == ["LDL 5", "ST x"]

    def test_fractional_literal(self):
        assert body("0.25 = x") == ["LDL 0.25", "ST x"]

    def test_variable(self):
        assert body("y = x") == ["LD y", "ST x"]

    def test_addition_is_left_associative(self):
        assert body("a + b - c = x") == [
            "LD a", "LD b", "ADD", "LD c", "SUB", "ST x",
        ]

    def test_multiplication_binds_tighter(self):
        assert body("1 + 2 * 3 - 4 = x") == [
            "LDL 1", "LDL 2", "LDL 3", "MLT", "ADD", "LDL 4", "SUB", "ST x",
        ]

    def test_repeated_multiplication(self):
        assert body("a * b * c = x") == ["LD a", "LD b", "MLT", "LD c", "MLT", "ST x"]

    def test_parentheses(self):
        assert body("(1 + 2) * 3 = x") == [
            "LDL 1", "LDL 2", "ADD", "LDL 3", "MLT", "ST x",
        ]

    def test_nested_parentheses(self):
        assert body("((a)) = x") == ["LD a", "ST x"]

    def test_equality(self):
        assert body("a + 1 .= b = x") == ["LD a", "LDL 1", "ADD", "LD b", "EQU", "ST x"]

    def test_equality_does_not_chain(self):
        """Only one '.=' is allowed per expression."""
        error = mismatch(".BEGIN a .= b .= c = x .END")
        assert error.rule == "ASSIGNST"
        assert error.expected == "'='"
        assert error.found == "'.='"

    def test_parenthesized_equality(self):
        assert body("(a .= b) .= c = x") == [
            "LD a", "LD b", "EQU", "LD c", "EQU", "ST x",
        ]

    def test_missing_operand(self):
        error = mismatch(".BEGIN 1 + = x .END")
        assert error.rule == "EXP1"
        assert error.expected == "operand"

    def test_unclosed_parenthesis(self):
        error = mismatch(".BEGIN (1 + 2 = x .END")
        assert error.rule == "PRIMARY"
        assert error.expected == "')'"
        assert error.found == "'='"


# =============================================================================
# Simple Statement Tests
# =============================================================================

class TestSimpleStatements:
    """Test assignment and I/O statements."""

    def test_print(self):
        assert body("PRINT") == ["PNT"]

    def test_edit(self):
        assert body("EDIT(x + 1, 'HELLO')") == ["LD x", "LDL 1", "ADD", "EDT 'HELLO'"]

    def test_edit_keeps_string_contents(self):
        instructions = translate(".BEGIN EDIT(0, 'A B') .END")
        assert instructions[1].opcode is Opcode.EDT
        assert instructions[1].operand == "A B"

    def test_edit_requires_string(self):
        error = mismatch(".BEGIN EDIT(1, x) .END")
        assert error.rule == "IOST"
        assert error.expected == "string"
        assert error.found == "'x'"

    def test_edit_requires_parenthesis(self):
        error = mismatch(".BEGIN EDIT 1 .END")
        assert error.rule == "IOST"
        assert error.expected == "'('"

    def test_assignment_requires_target(self):
        error = mismatch(".BEGIN 1 = 2 .END")
        assert error.rule == "ASSIGNST"
        assert error.expected == "identifier"
        assert error.hint is None

    def test_reserved_word_as_target(self):
        error = mismatch(".BEGIN 1 = PRINT .END")
        assert error.rule == "ASSIGNST"
        assert error.hint == "'PRINT' is a reserved word and cannot name a variable"

    def test_reserved_word_in_declaration(self):
        """The hint appears in the rendered message too."""
        error = mismatch(".BEGIN .REAL x, EDIT; PRINT .END")
        assert error.rule == "DEC"
        assert "hint: 'EDIT' is a reserved word" in str(error)

    def test_expression_alone_is_not_a_statement(self):
        error = mismatch(".BEGIN x .END")
        assert error.rule == "ASSIGNST"
        assert error.expected == "'='"
        assert error.found == "'.END'"

    def test_statement_sequence(self):
        assert body("PRINT; 1 = x; PRINT") == ["PNT", "LDL 1", "ST x", "PNT"]


# =============================================================================
# Block and Declaration Tests
# =============================================================================

class TestBlocks:
    """Test blocks and .REAL declarations."""

    def test_program_epilogue(self):
        assert listing(".BEGIN PRINT .END") == ["PNT", "HLT", "END"]

    def test_declaration_layout(self):
        assert listing(".BEGIN .REAL x; 5 = x; PRINT .END") == [
            "B _skip1",
            "x",
            "BLK 1",
            "_skip1",
            "LDL 5",
            "ST x",
            "PNT",
            "HLT",
            "END",
        ]

    def test_multiple_declarations(self):
        assert body(".BEGIN .REAL a, b, c; PRINT .END") == [
            "B _skip1",
            "a", "BLK 1",
            "b", "BLK 1",
            "c", "BLK 1",
            "_skip1",
            "PNT",
        ]

    def test_nested_block_declares_again(self):
        lines = listing(".BEGIN .REAL a; .BEGIN .REAL b; PRINT .END .END")
        assert lines == [
            "B _skip1", "a", "BLK 1", "_skip1",
            "B _skip2", "b", "BLK 1", "_skip2",
            "PNT", "HLT", "END",
        ]

    def test_declaration_needs_semicolon(self):
        error = mismatch(".BEGIN .REAL x PRINT .END")
        assert error.rule == "BLOCK"
        assert error.expected == "';'"
        assert error.found == "'PRINT'"

    def test_declaration_trailing_comma(self):
        error = mismatch(".BEGIN .REAL x, ; PRINT .END")
        assert error.rule == "DEC"
        assert error.expected == "identifier"

    def test_declaration_only_block_rejected(self):
        error = mismatch(".BEGIN .REAL x; .END")
        assert error.rule == "BLOCK"
        assert error.expected == "statement"

    def test_empty_block_rejected(self):
        error = mismatch(".BEGIN .END")
        assert error.rule == "BLOCK"
        assert error.expected == "statement"
        assert error.found == "'.END'"

    def test_missing_end(self):
        error = mismatch(".BEGIN PRINT")
        assert error.rule == "BLOCK"
        assert error.expected == "'.END'"
        assert error.found == "end of input"
        assert error.location.line == 1
        assert error.location.column == 13

    def test_trailing_semicolon_rejected(self):
        """';' separates statements, so one before '.END' needs another statement."""
        error = mismatch(".BEGIN PRINT; .END")
        assert error.rule == "BLOCK"
        assert error.expected == "statement"


# =============================================================================
# Control Flow Tests
# =============================================================================

class TestControlFlow:
    """Test loops and conditionals."""

    def test_until_layout(self):
        assert body(".UNTIL i .= 3 .DO i + 1 = i") == [
            "_loop1",
            "LD i", "LDL 3", "EQU",
            "BTP _exit2",
            "LD i", "LDL 1", "ADD", "ST i",
            "B _loop1",
            "_exit2",
        ]

    def test_conditional_layout(self):
        assert body(".IF a .THEN EDIT(0, 'A') .ELSE EDIT(0, 'B')") == [
            "LD a",
            "BFP _else1",
            "LDL 0", "EDT 'A'",
            "B _join2",
            "_else1",
            "LDL 0", "EDT 'B'",
            "_join2",
        ]

    def test_nested_loops_get_distinct_labels(self):
        lines = body(".UNTIL a .DO .UNTIL b .DO PRINT")
        assert lines == [
            "_loop1", "LD a", "BTP _exit2",
            "_loop3", "LD b", "BTP _exit4",
            "PNT",
            "B _loop3", "_exit4",
            "B _loop1", "_exit2",
        ]

    def test_block_as_loop_body(self):
        lines = body(".UNTIL a .DO .BEGIN PRINT; PRINT .END")
        assert lines.count("PNT") == 2
        assert lines[-2:] == ["B _loop1", "_exit2"]

    def test_else_is_mandatory(self):
        error = mismatch(".BEGIN .IF 1 .THEN PRINT .END")
        assert error.rule == "CONDITIONALST"
        assert error.expected == "'.ELSE'"
        assert error.found == "'.END'"

    def test_do_is_mandatory(self):
        error = mismatch(".BEGIN .UNTIL 1 PRINT .END")
        assert error.rule == "UNTILST"
        assert error.expected == "'.DO'"
        assert error.found == "'PRINT'"

    def test_then_is_mandatory(self):
        error = mismatch(".BEGIN .IF 1 PRINT .ELSE PRINT .END")
        assert error.rule == "CONDITIONALST"
        assert error.expected == "'.THEN'"

    def test_loop_body_required(self):
        error = mismatch(".BEGIN .UNTIL 1 .DO .END")
        assert error.rule == "UNTILST"
        assert error.expected == "statement"


# =============================================================================
# Program-Level Tests
# =============================================================================

class TestProgram:
    """Test whole-program rules and generated-code properties."""

    def test_program_must_start_with_begin(self):
        error = mismatch("PRINT")
        assert error.rule == "PROGRAM"
        assert error.expected == "'.BEGIN'"

    def test_empty_source(self):
        error = mismatch("")
        assert error.rule == "PROGRAM"
        assert error.found == "end of input"

    def test_trailing_input_rejected(self):
        error = mismatch(".BEGIN PRINT .END PRINT")
        assert error.rule == "PROGRAM"
        assert error.expected == "end of input"
        assert error.found == "'PRINT'"

    def test_mismatch_is_translation_error(self):
        with pytest.raises(TranslationError):
            translate(".BEGIN .END")

    def test_mismatch_message(self):
        error = mismatch(".BEGIN\n  .UNTIL i .DO\n.END")
        text = str(error)
        assert text.startswith("<test>:3:1: error: expected statement in UNTILST, found '.END'")
        assert ".END" in text.splitlines()[1]

    @pytest.mark.parametrize("source", SAMPLE_PROGRAMS)
    def test_ends_with_halt(self, source):
        instructions = translate(source)
        assert [i.opcode for i in instructions[-2:]] == [Opcode.HLT, Opcode.END]

    @pytest.mark.parametrize("source", SAMPLE_PROGRAMS)
    def test_every_label_defined_once(self, source):
        instructions = translate(source)
        defined = [i.label_name for i in instructions if i.is_label]
        assert len(defined) == len(set(defined))

    @pytest.mark.parametrize("source", SAMPLE_PROGRAMS)
    def test_every_branch_target_defined(self, source):
        instructions = translate(source)
        defined = {i.label_name for i in instructions if i.is_label}
        targets = {str(i.operand) for i in instructions if i.opcode.is_branch}
        assert targets <= defined

    @pytest.mark.parametrize("source", SAMPLE_PROGRAMS)
    def test_translation_is_repeatable(self, source):
        assert translate(source) == translate(source)

    def test_same_translator_twice(self):
        tokens = tokenize(SAMPLE_PROGRAMS[2])
        translator = Translator(tokens)
        first = translator.translate()
        assert translator.translate() == first

    def test_label_start(self):
        lines = [str(i) for i in translate(".BEGIN .UNTIL a .DO PRINT .END", label_start=10)]
        assert lines[0] == "_loop10"
        assert "BTP _exit11" in lines

    def test_tokens_must_end_with_eof(self):
        tokens = tokenize("PRINT")[:-1]
        with pytest.raises(ValueError):
            Translator(tokens)
