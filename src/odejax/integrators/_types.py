"""Type definitions for numerical integrators.

Provides the core data types shared by all integrator implementations:

- :class:`TableauKind`: Structural classification of a Butcher tableau.
- :class:`Tableau`: Immutable, validated coefficient matrix.
- :class:`Metric`: Protocol for distance functions used by adaptive stepping.
- :class:`Integrator`, :class:`VelIntegrator`, :class:`AdaptiveIntegrator`:
  Protocols describing the step-family contracts. Any callable (plain
  function, lambda, ``functools.partial``, object with ``__call__``) can be
  passed wherever a derivative, velocity or force function is expected.

Layout of a tableau matrix: row *i*, column 0 holds the stage time-fraction
``c_i``; columns ``1..i`` hold the stage-coupling coefficients ``a_ij``; the
final row (fixed-step) or final two rows (adaptive) hold the weights ``b_j``.
"""

from __future__ import annotations

import enum
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

Derivative = Callable[[Any, Any], Any]
"""Right-hand side ``f(t, state) -> state`` (or ``-> (aux, state)`` with ``has_aux``)."""


class TableauKind(enum.Enum):
    """Structural classification of a Butcher tableau."""

    FIXED = "fixed"
    ADAPTIVE = "adaptive"
    IMPLICIT = "implicit"
    ADAPTIVE_IMPLICIT = "adaptive_implicit"

    @property
    def is_implicit(self) -> bool:
        return self in (TableauKind.IMPLICIT, TableauKind.ADAPTIVE_IMPLICIT)

    @property
    def is_adaptive(self) -> bool:
        return self in (TableauKind.ADAPTIVE, TableauKind.ADAPTIVE_IMPLICIT)


@dataclass(frozen=True)
class Tableau:
    """A rectangular coefficient matrix together with its classification.

    Instances are produced by :func:`~odejax.integrators.tableau.validate`;
    the matrix is stored as a tuple of tuples of floats and is never mutated.

    Attributes:
        kind: Structural classification.
        matrix: Coefficient rows.
    """

    kind: TableauKind
    matrix: tuple[tuple[float, ...], ...]

    @property
    def rows(self) -> int:
        return len(self.matrix)

    @property
    def columns(self) -> int:
        return len(self.matrix[0])


@runtime_checkable
class Metric(Protocol):
    def distance(self, a: Any, b: Any) -> Any: ...


@runtime_checkable
class Integrator(Protocol):
    """Fixed-step contract: single-slot buffer ``[state]``."""

    def init(self, state: Any, dt: Any = None, derivative: Derivative | None = None) -> list: ...

    def step(self, time: Any, buffer: list, dt: Any, derivative: Derivative) -> Any: ...


@runtime_checkable
class VelIntegrator(Protocol):
    """Velocity-augmented contract taking both a velocity and a force function."""

    def init_with_vel(
        self,
        state: Any,
        dt: Any = None,
        velocity: Derivative | None = None,
        force: Derivative | None = None,
    ) -> list: ...

    def step_with_vel(
        self, time: Any, buffer: list, dt: Any, velocity: Derivative, force: Derivative
    ) -> Any: ...


@runtime_checkable
class AdaptiveIntegrator(Protocol):
    """Adaptive contract: buffer ``[(time, state), (trial_dt, estimate)]``."""

    def adaptive_init(
        self,
        t0: Any,
        state: Any,
        ds: Any,
        derivative: Derivative | None = None,
        metric: Any = None,
    ) -> list: ...

    def adaptive_step(
        self, buffer: list, ds: Any, derivative: Derivative, metric: Any = None
    ) -> tuple: ...
