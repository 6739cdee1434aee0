"""Exceptions raised by tableau validation and adaptive stepping.

Every malformed coefficient matrix is reported through a subclass of
:class:`TableauError` (itself a ``ValueError``) that carries the context
needed to diagnose it.  Stepping with a validated descriptor never fails,
except for the opt-in retry cap of the adaptive integrator.
"""

from __future__ import annotations


class TableauError(ValueError):
    """Base class for malformed or unsupported Butcher tableaux."""


class EmptyTableauError(TableauError):
    def __init__(self) -> None:
        super().__init__("Zero-length Runge-Kutta matrix")


class JaggedTableauError(TableauError):
    """Raised when rows of the matrix differ in length."""

    def __init__(self, row: int, length: int, expected: int) -> None:
        self.row = row
        self.length = length
        self.expected = expected
        super().__init__(
            f"Tableau is non-rectangular: row {row} has length {length}, expected {expected}"
        )


class TooManyColumnsError(TableauError):
    def __init__(self, rows: int, columns: int) -> None:
        self.rows = rows
        self.columns = columns
        super().__init__(f"Tableau has {rows} rows but {columns} columns")


class NonSquareTableauError(TableauError):
    def __init__(self, rows: int, columns: int) -> None:
        self.rows = rows
        self.columns = columns
        super().__init__(
            f"Non-square tableau; number of rows is {rows} but there is a row of length {columns}"
        )


class UnsupportedImplicitError(TableauError):
    def __init__(self) -> None:
        super().__init__("Implicit Runge-Kutta not supported")


class ToleranceNotAchievableError(RuntimeError):
    """Raised when an adaptive step exhausts its halving budget.

    Attributes:
        time: Accepted time the step started from.
        dt: Last trial step size attempted.
        error: Error estimate of the last attempt.
        halvings: Number of step-size halvings performed.
    """

    def __init__(self, time, dt, error, halvings: int) -> None:
        self.time = time
        self.dt = dt
        self.error = error
        self.halvings = halvings
        super().__init__(
            f"Adaptive step from t={time} rejected after {halvings} halvings "
            f"(last dt={dt}, error={error})"
        )
