"""Tests for tableau validation and descriptor construction.

Tests cover:
- Error kinds and their diagnostic context, in check order
- Structural classification into the four tableau kinds
- The implicit scan, which starts at the diagonal position [i][i]
- from_matrix for fixed and adaptive descriptors
- Shape checks on direct descriptor construction
- order() of every named tableau
"""

import pytest

from odejax.integrators import (
    BOGACKI_SHAMPINE,
    DORMAND_PRINCE,
    EULER,
    EULER_HEUN,
    HEUN2,
    HEUN3,
    MIDPOINT,
    RALSTON,
    RK3,
    RK4,
    RK_3_8,
    RK_FEHLBERG,
    AdaptiveRungeKutta,
    EmptyTableauError,
    JaggedTableauError,
    NonSquareTableauError,
    RungeKutta,
    Tableau,
    TableauError,
    TableauKind,
    TooManyColumnsError,
    UnsupportedImplicitError,
    validate,
)

_FIXED = [
    [0.0, 0.0, 0.0],
    [1.0, 0.0, 0.0],
    [0.0, 0.0, 0.0],
]

_ADAPTIVE = [
    [0.0, 0.0, 0.0],
    [1.0, 0.0, 0.0],
    [0.0, 0.0, 0.0],
    [0.0, 0.0, 0.0],
]

_FIXED_TABLEAUX = [EULER, MIDPOINT, HEUN2, RALSTON, RK3, HEUN3, RK4, RK_3_8]
_ADAPTIVE_TABLEAUX = [EULER_HEUN, BOGACKI_SHAMPINE, RK_FEHLBERG, DORMAND_PRINCE]


class TestValidateErrors:
    def test_empty(self):
        with pytest.raises(EmptyTableauError):
            validate([])

    def test_empty_rows(self):
        with pytest.raises(EmptyTableauError):
            validate([[]])

    def test_jagged(self):
        with pytest.raises(JaggedTableauError) as excinfo:
            validate([[0.0, 0.0], [0.0]])
        assert excinfo.value.row == 1
        assert excinfo.value.length == 1
        assert excinfo.value.expected == 2

    def test_jagged_checked_before_empty_columns(self):
        """A zero-length first row followed by a longer row is jagged, not empty."""
        with pytest.raises(JaggedTableauError) as excinfo:
            validate([[], [0.0]])
        assert (excinfo.value.row, excinfo.value.length, excinfo.value.expected) == (1, 1, 0)

    def test_jagged_checked_before_column_count(self):
        """A jagged matrix is reported as jagged even if it is also too wide."""
        with pytest.raises(JaggedTableauError):
            validate([[0.0, 0.0, 0.0], [0.0]])

    def test_too_many_columns(self):
        with pytest.raises(TooManyColumnsError) as excinfo:
            validate([[0.0, 0.0, 0.0], [0.0, 0.0, 0.0]])
        assert excinfo.value.rows == 2
        assert excinfo.value.columns == 3
        assert "2 rows but 3 columns" in str(excinfo.value)

    def test_too_many_weight_rows(self):
        with pytest.raises(NonSquareTableauError) as excinfo:
            validate([[0.0, 0.0]] * 4)
        assert (excinfo.value.rows, excinfo.value.columns) == (4, 2)

    def test_errors_are_value_errors(self):
        for exc in (EmptyTableauError, JaggedTableauError, TooManyColumnsError,
                    NonSquareTableauError, UnsupportedImplicitError):
            assert issubclass(exc, TableauError)
            assert issubclass(exc, ValueError)


class TestClassification:
    def test_fixed(self):
        tableau = validate(_FIXED)
        assert isinstance(tableau, Tableau)
        assert tableau.kind is TableauKind.FIXED
        assert (tableau.rows, tableau.columns) == (3, 3)

    def test_adaptive(self):
        tableau = validate(_ADAPTIVE)
        assert tableau.kind is TableauKind.ADAPTIVE
        assert (tableau.rows, tableau.columns) == (4, 3)

    def test_implicit_above_diagonal(self):
        matrix = [
            [0.0, 0.0, 0.5],
            [1.0, 0.0, 0.0],
            [0.0, 0.0, 0.0],
        ]
        assert validate(matrix).kind is TableauKind.IMPLICIT

    def test_implicit_on_diagonal(self):
        """The scan includes [i][i], so a nonzero diagonal entry is implicit."""
        matrix = [
            [0.0, 0.0, 0.0],
            [1.0, 1.0, 0.0],
            [0.0, 0.0, 0.0],
        ]
        assert validate(matrix).kind is TableauKind.IMPLICIT

    def test_nonzero_first_node_is_implicit(self):
        assert validate([[1.0, 0.0], [0.0, 0.0]]).kind is TableauKind.IMPLICIT

    def test_adaptive_implicit(self):
        assert validate(EULER_HEUN.matrix).kind is TableauKind.ADAPTIVE_IMPLICIT

    def test_named_rk4_is_classified_implicit(self):
        assert validate(RK4.matrix).kind is TableauKind.IMPLICIT

    def test_weight_rows_beyond_square_block_are_not_scanned(self):
        matrix = _ADAPTIVE[:3] + [[0.0, 1.0, 1.0]]
        assert validate(matrix).kind is TableauKind.ADAPTIVE

    def test_kind_flags(self):
        assert TableauKind.ADAPTIVE_IMPLICIT.is_implicit
        assert TableauKind.ADAPTIVE_IMPLICIT.is_adaptive
        assert not TableauKind.FIXED.is_implicit
        assert not TableauKind.FIXED.is_adaptive

    def test_matrix_is_copied(self):
        matrix = [list(row) for row in _FIXED]
        tableau = validate(matrix)
        matrix[1][0] = 99.0
        assert tableau.matrix[1][0] == 1.0
        assert isinstance(tableau.matrix, tuple)


class TestFromMatrix:
    def test_fixed(self):
        rk = RungeKutta.from_matrix(_FIXED)
        assert rk.order() == 2
        assert rk.matrix[1] == (1.0, 0.0, 0.0)

    def test_fixed_rejects_implicit(self):
        with pytest.raises(UnsupportedImplicitError):
            RungeKutta.from_matrix(RK4.matrix)

    def test_fixed_rejects_adaptive(self):
        with pytest.raises(NonSquareTableauError) as excinfo:
            RungeKutta.from_matrix(_ADAPTIVE)
        assert (excinfo.value.rows, excinfo.value.columns) == (4, 3)

    def test_fixed_propagates_validation_errors(self):
        with pytest.raises(EmptyTableauError):
            RungeKutta.from_matrix([])

    def test_adaptive(self):
        rk = AdaptiveRungeKutta.from_matrix(_ADAPTIVE)
        assert rk.order() == 2

    def test_adaptive_rejects_square(self):
        with pytest.raises(TooManyColumnsError) as excinfo:
            AdaptiveRungeKutta.from_matrix(_FIXED)
        assert (excinfo.value.rows, excinfo.value.columns) == (3, 3)

    def test_adaptive_rejects_implicit(self):
        with pytest.raises(UnsupportedImplicitError):
            AdaptiveRungeKutta.from_matrix(EULER_HEUN.matrix)

    def test_adaptive_rejects_fixed_implicit(self):
        with pytest.raises(UnsupportedImplicitError):
            AdaptiveRungeKutta.from_matrix(RK4.matrix)


class TestDirectConstruction:
    def test_fixed_rejects_adaptive_shape(self):
        with pytest.raises(NonSquareTableauError) as excinfo:
            RungeKutta(EULER_HEUN.matrix)
        assert (excinfo.value.rows, excinfo.value.columns) == (4, 3)

    def test_fixed_rejects_jagged(self):
        with pytest.raises(JaggedTableauError):
            RungeKutta([[0.0, 0.0], [0.0]])

    def test_fixed_rejects_empty(self):
        with pytest.raises(EmptyTableauError):
            RungeKutta([])

    def test_fixed_rejects_wide(self):
        with pytest.raises(TooManyColumnsError):
            RungeKutta([[0.0, 0.0, 0.0], [0.0, 0.0, 0.0]])

    def test_adaptive_rejects_square(self):
        with pytest.raises(TooManyColumnsError) as excinfo:
            AdaptiveRungeKutta([[0.0, 0.0], [0.0, 1.0]])
        assert (excinfo.value.rows, excinfo.value.columns) == (2, 2)

    def test_adaptive_rejects_extra_weight_rows(self):
        with pytest.raises(NonSquareTableauError):
            AdaptiveRungeKutta([[0.0, 0.0]] * 4)

    def test_adaptive_rejects_jagged(self):
        with pytest.raises(JaggedTableauError):
            AdaptiveRungeKutta([[0.0, 0.0], [0.0, 0.0], [0.0]])

    def test_implicit_scan_is_skipped(self):
        """Shape-valid tableaux that the scan flags implicit still construct."""
        assert validate(RK4.matrix).kind is TableauKind.IMPLICIT
        assert RungeKutta(RK4.matrix) == RK4
        assert validate(EULER_HEUN.matrix).kind is TableauKind.ADAPTIVE_IMPLICIT
        assert AdaptiveRungeKutta(EULER_HEUN.matrix) == EULER_HEUN


class TestNamedTableaux:
    @pytest.mark.parametrize("rk", _FIXED_TABLEAUX)
    def test_fixed_order(self, rk):
        rows = len(rk.matrix)
        assert all(len(row) == rows for row in rk.matrix)
        assert rk.order() == rows - 1

    @pytest.mark.parametrize("rk", _ADAPTIVE_TABLEAUX)
    def test_adaptive_order(self, rk):
        columns = len(rk.matrix[0])
        assert all(len(row) == columns for row in rk.matrix)
        assert len(rk.matrix) == columns + 1
        assert rk.order() == columns - 1

    @pytest.mark.parametrize("rk", _FIXED_TABLEAUX)
    def test_fixed_weights_sum_to_one(self, rk):
        assert sum(rk.matrix[-1][1:]) == pytest.approx(1.0)

    @pytest.mark.parametrize("rk", _ADAPTIVE_TABLEAUX)
    def test_adaptive_weights_sum_to_one(self, rk):
        assert sum(rk.matrix[-1][1:]) == pytest.approx(1.0)
        assert sum(rk.matrix[-2][1:]) == pytest.approx(1.0)

    @pytest.mark.parametrize("rk", _FIXED_TABLEAUX + _ADAPTIVE_TABLEAUX)
    def test_stage_nodes_match_row_sums(self, rk):
        for i in range(rk.order()):
            row = rk.matrix[i]
            assert row[0] == pytest.approx(sum(row[1:]))

    def test_descriptors_are_hashable_and_comparable(self):
        assert RK4 == RungeKutta([list(row) for row in RK4.matrix])
        assert hash(RK4) == hash(RungeKutta(RK4.matrix))
        assert RK4 != RK_3_8
