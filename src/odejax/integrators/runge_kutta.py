"""Fixed-step explicit Runge-Kutta integrators.

A :class:`RungeKutta` descriptor wraps a square Butcher tableau and advances
a caller-owned state buffer by one step of size ``dt`` per call.  The
descriptor is immutable and can be shared freely; all mutable integration
state lives in the buffer returned by :meth:`RungeKutta.init`.

For a tableau with ``order`` stages the step is:

.. math::

    k_i = f\\left(t + c_i h,\\; y + h \\sum_{j=1}^{i} a_{ij} k_{j-1}\\right),
    \\qquad
    y_{n+1} = y_n + h \\sum_{j=1}^{order} b_j k_{j-1}

Zero coefficients are skipped rather than multiplied through, so a stage
never touches a slope it does not depend on.

Named methods: :data:`RK1` (:data:`EULER`), :data:`RK2`
(:data:`MIDPOINT`), :data:`HEUN2`, :data:`RALSTON`, :data:`RK3`,
:data:`HEUN3`, :data:`RK4` and :data:`RK_3_8`.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import jax.numpy as jnp

from odejax.config import get_dtype
from odejax.integrators._errors import NonSquareTableauError, UnsupportedImplicitError
from odejax.integrators._tree import tree_axpy, tree_cast
from odejax.integrators._types import Derivative, TableauKind
from odejax.integrators.tableau import check_structure, validate


def compute_stages(matrix, time, state, dt, derivative: Derivative, has_aux: bool = False):
    """Evaluate the stage slopes ``k_0 .. k_{order-1}`` of one step.

    Only the first ``order`` rows of *matrix* are read, where ``order`` is
    the column count minus one, so the same routine serves square and
    adaptive tableaux.

    Args:
        matrix: Tuple-of-tuples coefficient matrix.
        time: Time at the start of the step.
        state: State at the start of the step.
        dt: Step size.
        derivative: ``f(t, y) -> dy/dt``; with *has_aux*, ``f(t, y) -> (aux, dy/dt)``.
        has_aux: Whether *derivative* returns an auxiliary payload.

    Returns:
        tuple: ``(stages, aux)`` where ``aux`` is the payload of the last
        stage evaluation (``None`` without *has_aux*).
    """
    order = len(matrix[0]) - 1
    stages = []
    aux = None

    for i in range(order):
        row = matrix[i]
        t_i = time + dt * row[0]
        y_i = state
        for j in range(1, i + 1):
            if row[j] != 0.0:
                y_i = tree_axpy(dt * row[j], stages[j - 1], y_i)
        k_i = derivative(t_i, y_i)
        if has_aux:
            aux, k_i = k_i
        stages.append(k_i)

    return stages, aux


def combine_stages(weights, state, stages, dt):
    """Return ``state + dt * sum_j weights[j] * stages[j-1]``, skipping zero weights."""
    result = state
    for b, k in zip(weights[1:], stages):
        if b != 0.0:
            result = tree_axpy(dt * b, k, result)
    return result


@dataclass(frozen=True)
class RungeKutta:
    """Explicit fixed-step Runge-Kutta method.

    Constructing the descriptor directly checks only the shape of the
    matrix (non-empty, rectangular and square); :meth:`from_matrix` also
    rejects tableaux classified implicit.

    Attributes:
        matrix: Square coefficient matrix, stage rows followed by the weight row.
    """

    matrix: tuple[tuple[float, ...], ...]

    def __post_init__(self):
        matrix = check_structure(self.matrix)
        if len(matrix) != len(matrix[0]):
            raise NonSquareTableauError(len(matrix), len(matrix[0]))
        object.__setattr__(self, "matrix", matrix)

    @classmethod
    def from_matrix(cls, matrix: Sequence[Sequence[float]]) -> RungeKutta:
        """Build a descriptor from a validated square tableau.

        Raises:
            TableauError: If *matrix* is malformed (see
                :func:`~odejax.integrators.tableau.validate`).
            UnsupportedImplicitError: If the tableau is classified implicit.
            NonSquareTableauError: If the tableau carries an extra weight row.
        """
        tableau = validate(matrix)
        if tableau.kind is TableauKind.FIXED:
            return cls(tableau.matrix)
        if tableau.kind is TableauKind.IMPLICIT:
            raise UnsupportedImplicitError()
        raise NonSquareTableauError(tableau.rows, tableau.columns)

    def order(self) -> int:
        """Number of stages of the method."""
        return len(self.matrix) - 1

    def init(self, state, dt=None, derivative: Derivative | None = None) -> list:
        """Create the single-slot state buffer ``[state]``.

        *dt* and *derivative* are accepted for call-compatibility with other
        integrators and are unused.
        """
        return [tree_cast(state)]

    def step(self, time, buffer: list, dt, derivative: Derivative, has_aux: bool = False):
        """Advance ``buffer[0]`` by one step of size *dt*.

        Args:
            time: Time at the start of the step.
            buffer: Buffer from :meth:`init`; ``buffer[0]`` is replaced.
            dt: Step size. May be negative for backward integration.
            derivative: ODE right-hand side ``f(t, y) -> dy/dt``.
            has_aux: If ``True``, *derivative* returns ``(aux, dy/dt)`` and
                the step returns ``(aux, new_state)`` with the payload of
                the last stage evaluation.

        Returns:
            The new state (or ``(aux, new_state)`` with *has_aux*).

        Examples:
            ```python
            from odejax.integrators import RK4
            buffer = RK4.init(1.0)
            RK4.step(0.0, buffer, 0.1, lambda t, y: y)  # ~exp(0.1)
            ```
        """
        dtype = get_dtype()
        time = jnp.asarray(time, dtype=dtype)
        dt = jnp.asarray(dt, dtype=dtype)
        state = buffer[0]

        stages, aux = compute_stages(self.matrix, time, state, dt, derivative, has_aux)
        buffer[0] = combine_stages(self.matrix[self.order()], state, stages, dt)

        if has_aux:
            return aux, buffer[0]
        return buffer[0]

    def init_with_vel(self, state, dt=None, velocity=None, force=None) -> list:
        """Velocity-augmented init; identical to :meth:`init`."""
        return self.init(state, dt, force)

    def step_with_vel(self, time, buffer: list, dt, velocity, force: Derivative):
        """Velocity-augmented step; *velocity* is ignored and *force* is the derivative."""
        return self.step(time, buffer, dt, force)


# fmt: off

RK1 = RungeKutta(
    ((0.0, 0.0),
     (0.0, 1.0))
)

RK2 = RungeKutta(
    ((0.0, 0.0, 0.0),
     (0.5, 0.5, 0.0),
     (0.0, 0.0, 1.0))
)

HEUN2 = RungeKutta(
    ((0.0, 0.0, 0.0),
     (1.0, 1.0, 0.0),
     (0.0, 0.5, 0.5))
)

RALSTON = RungeKutta(
    ((0.0,       0.0,       0.0),
     (2.0 / 3.0, 2.0 / 3.0, 0.0),
     (0.0,       0.25,      0.75))
)

RK3 = RungeKutta(
    ((0.0,  0.0,       0.0,       0.0),
     (0.5,  0.5,       0.0,       0.0),
     (1.0, -1.0,       2.0,       0.0),
     (0.0,  1.0 / 6.0, 2.0 / 3.0, 1.0 / 6.0))
)

HEUN3 = RungeKutta(
    ((0.0,       0.0,       0.0,       0.0),
     (1.0 / 3.0, 1.0 / 3.0, 0.0,       0.0),
     (2.0 / 3.0, 0.0,       2.0 / 3.0, 0.0),
     (0.0,       0.25,      0.0,       0.75))
)

RK4 = RungeKutta(
    ((0.0, 0.0,       0.0,       0.0,       0.0),
     (0.5, 0.5,       0.0,       0.0,       0.0),
     (0.5, 0.0,       0.5,       0.0,       0.0),
     (1.0, 0.0,       0.0,       1.0,       0.0),
     (0.0, 1.0 / 6.0, 1.0 / 3.0, 1.0 / 3.0, 1.0 / 6.0))
)

RK_3_8 = RungeKutta(
    ((0.0,        0.0,        0.0,   0.0,   0.0),
     (1.0 / 3.0,  1.0 / 3.0,  0.0,   0.0,   0.0),
     (2.0 / 3.0, -1.0 / 3.0,  1.0,   0.0,   0.0),
     (1.0,        1.0,       -1.0,   1.0,   0.0),
     (0.0,        0.125,      0.375, 0.375, 0.125))
)

# fmt: on

EULER = RK1
MIDPOINT = RK2
