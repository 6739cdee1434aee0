"""Validation and classification of Butcher tableaux.

:func:`validate` turns a user-supplied coefficient matrix into an immutable
:class:`~odejax.integrators._types.Tableau`.  Checks run in a fixed order so
that the first structural problem found is the one reported:

1. the matrix is non-empty (:class:`EmptyTableauError`);
2. every row has the length of row 0 (:class:`JaggedTableauError`);
3. there are no more columns than rows (:class:`TooManyColumnsError`);
4. there is at most one extra weight row (:class:`NonSquareTableauError`).

The tableau is then classified by scanning, for each row *i*, columns *j*
from *i* through the last column; any nonzero coefficient there marks the
method as implicit.  The scan starts at the diagonal position ``[i][i]``.
Since column 0 holds ``c_i``, the entry at ``[i][i]`` couples stage *i* to
stage *i - 1*, so this classification is stricter than the textbook notion
of an explicit method: most published tableaux are reported as implicit.
Descriptor constructors run only the structural checks
(:func:`check_structure`), so the named descriptors in
:mod:`~odejax.integrators.runge_kutta` and :mod:`~odejax.integrators.adaptive`
are shape-checked but never classified.
"""

from __future__ import annotations

from collections.abc import Sequence

from odejax.integrators._errors import (
    EmptyTableauError,
    JaggedTableauError,
    NonSquareTableauError,
    TooManyColumnsError,
)
from odejax.integrators._types import Tableau, TableauKind


def freeze_matrix(matrix: Sequence[Sequence[float]]) -> tuple[tuple[float, ...], ...]:
    """Copy a nested sequence into a tuple of tuples of floats."""
    return tuple(tuple(float(value) for value in row) for row in matrix)


def _is_implicit(matrix: tuple[tuple[float, ...], ...]) -> bool:
    columns = len(matrix[0])
    for i, row in enumerate(matrix):
        for j in range(i, columns):
            if row[j] != 0.0:
                return True
    return False


def check_structure(matrix: Sequence[Sequence[float]]) -> tuple[tuple[float, ...], ...]:
    """Run the structural checks of :func:`validate` and return the frozen matrix.

    Descriptors call this on construction, so a malformed matrix is rejected
    before any step is taken.  The implicit scan is not part of it.

    Raises:
        EmptyTableauError: If *matrix* has no rows or no columns.
        JaggedTableauError: If the rows differ in length.
        TooManyColumnsError: If there are more columns than rows.
        NonSquareTableauError: If there is more than one row beyond the
            square block.
    """
    if len(matrix) == 0:
        raise EmptyTableauError()

    frozen = freeze_matrix(matrix)
    rows = len(frozen)
    columns = len(frozen[0])
    for i, row in enumerate(frozen):
        if len(row) != columns:
            raise JaggedTableauError(i, len(row), columns)
    if columns == 0:
        raise EmptyTableauError()

    if columns > rows:
        raise TooManyColumnsError(rows, columns)
    if rows > columns + 1:
        raise NonSquareTableauError(rows, columns)
    return frozen


def validate(matrix: Sequence[Sequence[float]]) -> Tableau:
    """Validate and classify a Runge-Kutta coefficient matrix.

    Args:
        matrix: Rectangular nested sequence of real coefficients.

    Returns:
        Tableau: The frozen matrix and its :class:`TableauKind`.

    Raises:
        EmptyTableauError: If *matrix* has no rows.
        JaggedTableauError: If the rows differ in length.
        TooManyColumnsError: If there are more columns than rows.
        NonSquareTableauError: If there is more than one row beyond the
            square block.

    Examples:
        ```python
        from odejax.integrators import validate
        validate([[0.0, 0.0], [0.0, 0.0]]).kind  # TableauKind.FIXED
        ```
    """
    frozen = check_structure(matrix)
    rows = len(frozen)
    columns = len(frozen[0])
    implicit = _is_implicit(frozen)
    if rows == columns:
        kind = TableauKind.IMPLICIT if implicit else TableauKind.FIXED
    else:
        kind = TableauKind.ADAPTIVE_IMPLICIT if implicit else TableauKind.ADAPTIVE
    return Tableau(kind=kind, matrix=frozen)
