"""
odejax is a small library of explicit Runge-Kutta and Velocity-Verlet ODE integrators implemented in JAX.
"""

from .config import set_dtype, get_dtype, get_machine_epsilon

from .integrators import (
    Tableau,
    TableauKind,
    validate,
    TableauError,
    EmptyTableauError,
    JaggedTableauError,
    TooManyColumnsError,
    NonSquareTableauError,
    UnsupportedImplicitError,
    ToleranceNotAchievableError,
    euclidean_distance,
    max_abs_distance,
    RungeKutta,
    AdaptiveRungeKutta,
    VelocityVerlet,
    VELOCITY_VERLET,
    EULER,
    MIDPOINT,
    RK1,
    RK2,
    HEUN2,
    RALSTON,
    RK3,
    HEUN3,
    RK4,
    RK_3_8,
    EULER_HEUN,
    BOGACKI_SHAMPINE,
    RK_FEHLBERG,
    DORMAND_PRINCE,
)

__all__ = [
    # Config
    "set_dtype",
    "get_dtype",
    "get_machine_epsilon",
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
    # Metrics
    "euclidean_distance",
    "max_abs_distance",
    # Integrators
    "RungeKutta",
    "AdaptiveRungeKutta",
    "VelocityVerlet",
    "VELOCITY_VERLET",
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
    "EULER_HEUN",
    "BOGACKI_SHAMPINE",
    "RK_FEHLBERG",
    "DORMAND_PRINCE",
]
