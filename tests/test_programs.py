# =============================================================================
# test_programs.py - End-to-End Program Tests
# =============================================================================
# Whole VALGOL I programs translated, loaded and run on the machine.
# =============================================================================

import pytest
from valgol import Machine, compile_valgol, load_program
from valgol.errors import DuplicateLabelError, MachineError


def run(source: str) -> list[str]:
    """Translate, load and run a program; return the printed lines."""
    program = load_program(compile_valgol(source, "<test>"), "<test>")
    return Machine().run(program)


class TestPrograms:
    """Programs exercising each statement form together."""

    def test_print_only(self):
        assert run(".BEGIN PRINT .END") == [""]

    def test_assignment(self):
        assert run(".BEGIN .REAL x; 5 = x; EDIT(x, 'five'); PRINT .END") == ["     five"]

    def test_countdown_loop(self):
        source = """
        .BEGIN .REAL i;
            0 = i;
            .UNTIL i .= 3 .DO .BEGIN EDIT(i, 'X'); PRINT; i + 1 = i .END
        .END
        """
        assert run(source) == ["X", " X", "  X"]

    def test_loop_with_true_condition_never_runs(self):
        assert run(".BEGIN .UNTIL 1 .DO PRINT; EDIT(0, 'done'); PRINT .END") == ["done"]

    def test_conditional_branches(self):
        source = """
        .BEGIN
            .IF 1 .= 2 .THEN EDIT(0, 'A') .ELSE EDIT(0, 'B');
            .IF 2 .= 2 .THEN EDIT(2, 'C') .ELSE EDIT(2, 'D');
            PRINT
        .END
        """
        assert run(source) == ["B C"]

    def test_factorial(self):
        source = """
        .BEGIN .REAL n, f;
            1 = n; 1 = f;
            .UNTIL n .= 6 .DO .BEGIN f * n = f; n + 1 = n .END;
            EDIT(f .= 120, 'OK'); PRINT
        .END
        """
        assert run(source) == [" OK"]

    def test_subtraction_order(self):
        source = """
        .BEGIN .REAL x;
            10 - 4 = x;
            EDIT(x, '6'); PRINT
        .END
        """
        assert run(source) == ["      6"]

    def test_precedence(self):
        source = ".BEGIN .REAL x; 1 + 2 * 3 - 4 = x; EDIT(x, 'x'); PRINT .END"
        assert run(source) == ["   x"]

    def test_fractional_column(self):
        assert run(".BEGIN EDIT(0.5 + 1, 'h'); PRINT .END") == ["  h"]

    def test_nested_block_sees_outer_variable(self):
        source = """
        .BEGIN .REAL x;
            2 = x;
            .BEGIN .REAL y; x * 3 = y; EDIT(y, '*'); PRINT .END
        .END
        """
        assert run(source) == ["      *"]

    def test_nested_loops(self):
        source = """
        .BEGIN .REAL i, j;
            0 = i;
            .UNTIL i .= 2 .DO .BEGIN
                0 = j;
                .UNTIL j .= 3 .DO .BEGIN EDIT(j + i * 3, '#'); j + 1 = j .END;
                i + 1 = i
            .END;
            PRINT
        .END
        """
        assert run(source) == ["######"]

    def test_unset_variable_reads_zero(self):
        assert run(".BEGIN .REAL x; EDIT(x, 'z'); PRINT .END") == ["z"]

    def test_redeclared_variable_rejected(self):
        with pytest.raises(DuplicateLabelError):
            run(".BEGIN .REAL x; .BEGIN .REAL x; PRINT .END .END")

    def test_tiny_literal(self):
        """Literals too small for plain repr still load and compare equal."""
        source = """
        .BEGIN .REAL x;
            0.00001 = x;
            EDIT(x .= 0.00001, 'tiny');
            EDIT(x * 100000 + 5, 'one');
            PRINT
        .END
        """
        assert run(source) == [" tiny one"]

    def test_overflowing_column(self):
        big = "9" * 200
        with pytest.raises(MachineError, match="not a finite number"):
            run(f".BEGIN EDIT({big} * {big}, 'x'); PRINT .END")
