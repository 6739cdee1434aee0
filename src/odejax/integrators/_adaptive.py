"""Step-size control for embedded Runge-Kutta methods.

The controller is deliberately simple: every accepted step grows the trial
step size by a fixed factor and every rejected attempt halves it.  The error
magnitude only decides acceptance, never the size of the adjustment.
"""

from __future__ import annotations

GROWTH_FACTOR = 1.5
SHRINK_FACTOR = 0.5


def next_step_size(dt, accepted: bool):
    """Return the next trial step size.

    Args:
        dt: Step size of the attempt just evaluated.
        accepted: Whether the attempt met the tolerance.

    Returns:
        ``dt * GROWTH_FACTOR`` after an acceptance, ``dt * SHRINK_FACTOR``
        after a rejection.
    """
    if accepted:
        return dt * GROWTH_FACTOR
    return dt * SHRINK_FACTOR


def is_accepted(error, tolerance) -> bool:
    """Return ``True`` if *error* is strictly below *tolerance*.

    A NaN error compares false and is therefore always rejected.
    """
    return bool(error < tolerance)
