"""Numerical ODE integrators over abstract vector-space states.

Provides tableau validation, fixed-step and adaptive explicit Runge-Kutta
integrators, and the symplectic Velocity-Verlet stepper.  States are any
JAX pytree; every integrator is an immutable descriptor that advances a
caller-owned buffer in place.

Available integrators:

- :class:`RungeKutta` -- fixed-step explicit RK (:data:`EULER`, :data:`RK4`, ...)
- :class:`AdaptiveRungeKutta` -- embedded pairs (:data:`EULER_HEUN`,
  :data:`DORMAND_PRINCE`, ...)
- :class:`VelocityVerlet` -- two-slot symplectic stepper

Each family shares a common pattern::

    buffer = RK4.init(state)
    for n in range(steps):
        state = RK4.step(t0 + n * dt, buffer, dt, derivative)

where ``derivative(t, x) -> dx`` defines the ODE right-hand side.
"""

from odejax.integrators._errors import (
    EmptyTableauError,
    JaggedTableauError,
    NonSquareTableauError,
    TableauError,
    ToleranceNotAchievableError,
    TooManyColumnsError,
    UnsupportedImplicitError,
)
from odejax.integrators._types import (
    AdaptiveIntegrator,
    Integrator,
    Metric,
    Tableau,
    TableauKind,
    VelIntegrator,
)
from odejax.integrators.adaptive import (
    BOGACKI_SHAMPINE,
    DORMAND_PRINCE,
    EULER_HEUN,
    RK_FEHLBERG,
    RK_FELBERG,
    AdaptiveRungeKutta,
)
from odejax.integrators.metric import euclidean_distance, max_abs_distance
from odejax.integrators.runge_kutta import (
    EULER,
    HEUN2,
    HEUN3,
    MIDPOINT,
    RALSTON,
    RK1,
    RK2,
    RK3,
    RK4,
    RK_3_8,
    RungeKutta,
)
from odejax.integrators.tableau import validate
from odejax.integrators.verlet import VELOCITY_VERLET, VelocityVerlet

__all__ = [
    # Tableaux
    "Tableau",
    "TableauKind",
    "validate",
    # Errors
    "TableauError",
    "EmptyTableauError",
    "JaggedTableauError",
    "TooManyColumnsError",
    "NonSquareTableauError",
    "UnsupportedImplicitError",
    "ToleranceNotAchievableError",
    # Contracts
    "Integrator",
    "VelIntegrator",
    "AdaptiveIntegrator",
    "Metric",
    # Metrics
    "euclidean_distance",
    "max_abs_distance",
    # Fixed-step
    "RungeKutta",
    "EULER",
    "MIDPOINT",
    "RK1",
    "RK2",
    "HEUN2",
    "RALSTON",
    "RK3",
    "HEUN3",
    "RK4",
    "RK_3_8",
    # Adaptive
    "AdaptiveRungeKutta",
    "EULER_HEUN",
    "BOGACKI_SHAMPINE",
    "RK_FEHLBERG",
    "RK_FELBERG",
    "DORMAND_PRINCE",
    # Symplectic
    "VelocityVerlet",
    "VELOCITY_VERLET",
]
