"""Adaptive embedded Runge-Kutta integrators.

An :class:`AdaptiveRungeKutta` descriptor wraps a tableau with two trailing
weight rows.  Both rows combine the same stage slopes, giving two estimates
of the next state at no extra cost; the distance between them is the local
error estimate.

Each call to :meth:`AdaptiveRungeKutta.adaptive_step` searches for an
acceptable step size:

1. Evaluate the stages with the carried trial step ``dt``.
2. Combine them with row ``order`` (``est1``) and row ``order + 1`` (``est2``).
3. If ``distance(est1, est2) < ds`` the step is accepted: time advances by
   ``dt``, the state becomes ``est1`` and the trial step grows to ``1.5 dt``.
4. Otherwise ``dt`` is halved and the attempt is repeated.

The search has no built-in bound.  A derivative that produces non-finite
values, or a tolerance the working precision cannot resolve, keeps halving
forever unless ``max_halvings`` is passed, in which case
:class:`~odejax.integrators._errors.ToleranceNotAchievableError` is raised.

Named methods: :data:`EULER_HEUN`, :data:`BOGACKI_SHAMPINE`,
:data:`RK_FEHLBERG` and :data:`DORMAND_PRINCE`.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

import jax.numpy as jnp

from odejax.config import get_dtype
from odejax.integrators._adaptive import is_accepted, next_step_size
from odejax.integrators._errors import (
    ToleranceNotAchievableError,
    TooManyColumnsError,
    UnsupportedImplicitError,
)
from odejax.integrators._tree import tree_cast
from odejax.integrators._types import Derivative, TableauKind
from odejax.integrators.metric import resolve_metric
from odejax.integrators.runge_kutta import combine_stages, compute_stages
from odejax.integrators.tableau import check_structure, validate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdaptiveRungeKutta:
    """Embedded Runge-Kutta pair with bang-bang step-size control.

    Constructing the descriptor directly checks only the shape of the
    matrix (non-empty, rectangular, one row more than columns).

    Attributes:
        matrix: Coefficient matrix with ``columns + 1`` rows: the stage rows
            followed by the propagated and the comparison weight rows.
    """

    matrix: tuple[tuple[float, ...], ...]

    def __post_init__(self):
        matrix = check_structure(self.matrix)
        if len(matrix) == len(matrix[0]):
            raise TooManyColumnsError(len(matrix), len(matrix[0]))
        object.__setattr__(self, "matrix", matrix)

    @classmethod
    def from_matrix(cls, matrix: Sequence[Sequence[float]]) -> AdaptiveRungeKutta:
        """Build a descriptor from a validated adaptive tableau.

        Raises:
            TableauError: If *matrix* is malformed.
            TooManyColumnsError: If the tableau is square (no extra weight row).
            UnsupportedImplicitError: If the tableau is classified implicit.
        """
        tableau = validate(matrix)
        if tableau.kind is TableauKind.ADAPTIVE:
            return cls(tableau.matrix)
        if tableau.kind is TableauKind.FIXED:
            raise TooManyColumnsError(tableau.rows, tableau.columns)
        raise UnsupportedImplicitError()

    def order(self) -> int:
        """Number of stages of the method."""
        return len(self.matrix[0]) - 1

    def adaptive_init(
        self, t0, state, ds, derivative: Derivative | None = None, metric=None
    ) -> list:
        """Create the two-slot buffer ``[(t0, state), (ds, state)]``.

        Args:
            t0: Initial time.
            state: Initial state.
            ds: Initial trial step size.
            derivative: Unused; accepted for call-compatibility.
            metric: Unused; accepted for call-compatibility.

        Returns:
            list: Buffer to pass to :meth:`adaptive_step`.
        """
        dtype = get_dtype()
        state = tree_cast(state)
        return [
            (jnp.asarray(t0, dtype=dtype), state),
            (jnp.asarray(ds, dtype=dtype), state),
        ]

    init = adaptive_init

    def adaptive_step(
        self,
        buffer: list,
        ds,
        derivative: Derivative,
        metric=None,
        has_aux: bool = False,
        max_halvings: int | None = None,
    ):
        """Take one accepted adaptive step, mutating *buffer*.

        Args:
            buffer: Buffer from :meth:`adaptive_init`.
            ds: Absolute error tolerance; an attempt is accepted when the
                distance between the two estimates is strictly below it.
            derivative: ODE right-hand side ``f(t, y) -> dy/dt``.
            metric: Distance between states: a callable, an object with a
                ``distance`` method, or ``None`` for the Euclidean distance.
            has_aux: If ``True``, *derivative* returns ``(aux, dy/dt)`` and
                the call returns ``(aux, (time, state))``.
            max_halvings: Optional cap on consecutive rejections. ``None``
                retries without bound.

        Returns:
            tuple: ``(time, state)`` after the accepted step.

        Raises:
            ToleranceNotAchievableError: If *max_halvings* rejections occur
                without an acceptance. The buffer is left unchanged.

        Examples:
            ```python
            from odejax.integrators import EULER_HEUN
            buffer = EULER_HEUN.adaptive_init(0.0, 1.0, 0.1)
            t, y = EULER_HEUN.adaptive_step(buffer, 1e-3, lambda t, y: y)
            ```
        """
        distance = resolve_metric(metric)
        order = self.order()
        time, state = buffer[0]
        dt = buffer[1][0]
        halvings = 0

        while True:
            stages, aux = compute_stages(self.matrix, time, state, dt, derivative, has_aux)
            est1 = combine_stages(self.matrix[order], state, stages, dt)
            est2 = combine_stages(self.matrix[order + 1], state, stages, dt)
            error = distance(est1, est2)

            if is_accepted(error, ds):
                logger.debug("Accepted step t=%s dt=%s error=%s", time, dt, error)
                buffer[0] = (time + dt, est1)
                buffer[1] = (next_step_size(dt, accepted=True), est2)
                if has_aux:
                    return aux, buffer[0]
                return buffer[0]

            if max_halvings is not None and halvings >= max_halvings:
                logger.warning(
                    "Tolerance %s not reached from t=%s after %d halvings (error=%s)",
                    ds, time, halvings, error,
                )
                raise ToleranceNotAchievableError(time, dt, error, halvings)

            logger.debug("Rejected step t=%s dt=%s error=%s", time, dt, error)
            dt = next_step_size(dt, accepted=False)
            halvings += 1


# fmt: off

EULER_HEUN = AdaptiveRungeKutta(
    ((0.0, 0.0, 0.0),
     (1.0, 1.0, 0.0),
     (0.0, 0.5, 0.5),
     (0.0, 1.0, 0.0))
)

BOGACKI_SHAMPINE = AdaptiveRungeKutta(
    ((0.0,  0.0,       0.0,       0.0,       0.0),
     (0.5,  0.5,       0.0,       0.0,       0.0),
     (0.75, 0.0,       0.75,      0.0,       0.0),
     (1.0,  2.0 / 9.0, 1.0 / 3.0, 4.0 / 9.0, 0.0),
     (0.0,  2.0 / 9.0, 1.0 / 3.0, 4.0 / 9.0, 0.0),
     (0.0,  7.0 / 24.0, 0.25,     1.0 / 3.0, 0.125))
)

RK_FEHLBERG = AdaptiveRungeKutta(
    ((0.0,         0.0,              0.0,              0.0,              0.0,                0.0,         0.0),
     (0.25,        0.25,             0.0,              0.0,              0.0,                0.0,         0.0),
     (0.375,       3.0 / 32.0,       9.0 / 32.0,       0.0,              0.0,                0.0,         0.0),
     (12.0 / 13.0, 1932.0 / 2197.0, -7200.0 / 2197.0,  7296.0 / 2197.0,  0.0,                0.0,         0.0),
     (1.0,         439.0 / 216.0,   -8.0,              3680.0 / 513.0,  -845.0 / 4104.0,     0.0,         0.0),
     (0.5,        -8.0 / 27.0,       2.0,             -3544.0 / 2565.0,  1859.0 / 4104.0,   -11.0 / 40.0, 0.0),
     (0.0,         16.0 / 135.0,     0.0,              6656.0 / 12825.0, 28561.0 / 56430.0, -9.0 / 50.0,  2.0 / 55.0),
     (0.0,         25.0 / 216.0,     0.0,              1408.0 / 2565.0,  2197.0 / 4104.0,   -1.0 / 5.0,   0.0))
)

DORMAND_PRINCE = AdaptiveRungeKutta(
    ((0.0,       0.0,               0.0,              0.0,               0.0,            0.0,                0.0,            0.0),
     (0.2,       0.2,               0.0,              0.0,               0.0,            0.0,                0.0,            0.0),
     (0.3,       3.0 / 40.0,        9.0 / 40.0,       0.0,               0.0,            0.0,                0.0,            0.0),
     (0.8,       44.0 / 45.0,      -56.0 / 15.0,      32.0 / 9.0,        0.0,            0.0,                0.0,            0.0),
     (8.0 / 9.0, 19372.0 / 6561.0, -25360.0 / 2187.0, 64448.0 / 6561.0, -212.0 / 729.0,  0.0,                0.0,            0.0),
     (1.0,       9017.0 / 3168.0,  -355.0 / 33.0,     46732.0 / 5247.0,  49.0 / 176.0,  -5103.0 / 18656.0,   0.0,            0.0),
     (1.0,       35.0 / 384.0,      0.0,              500.0 / 1113.0,    125.0 / 192.0, -2187.0 / 6784.0,    11.0 / 84.0,    0.0),
     (0.0,       35.0 / 384.0,      0.0,              500.0 / 1113.0,    125.0 / 192.0, -2187.0 / 6784.0,    11.0 / 84.0,    0.0),
     (0.0,       5179.0 / 57600.0,  0.0,              7571.0 / 16695.0,  393.0 / 640.0, -92097.0 / 339200.0, 187.0 / 2100.0, 1.0 / 40.0))
)

# fmt: on

RK_FELBERG = RK_FEHLBERG
