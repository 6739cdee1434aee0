"""Velocity-Verlet integrator for second-order systems.

:class:`VelocityVerlet` is a two-slot symplectic stepper.  The buffer holds
a position-like accumulator ``s`` and a derivative-like accumulator ``a``
carried over from the previous call.  Each step computes:

.. math::

    m &= s + h\\,a + \\tfrac{h^2}{2}\\,v(t, a) \\\\
    s &\\leftarrow s + \\tfrac{h}{2}\\,a \\\\
    a &\\leftarrow F(t + h, m) \\\\
    s &\\leftarrow s + \\tfrac{h}{2}\\,a

where ``v`` is the velocity function and ``F`` the force function.  Nothing
else is assumed about the slots: callers may pack position and velocity
together in ``s`` (as in the harmonic oscillator ``F(t, y) = (y_1, -y_0)``),
in which case ``a`` is the full state derivative rather than an
acceleration.

Being symplectic, the method keeps quadratic invariants of linear
Hamiltonian systems bounded over long horizons instead of letting them
drift.
"""

from __future__ import annotations

from dataclasses import dataclass

import jax.numpy as jnp

from odejax.config import get_dtype
from odejax.integrators._tree import tree_axpy, tree_cast, tree_zeros_like
from odejax.integrators._types import Derivative


@dataclass(frozen=True)
class VelocityVerlet:
    """Stateless Velocity-Verlet descriptor."""

    def init_with_vel(
        self,
        state,
        dt=None,
        velocity: Derivative | None = None,
        force: Derivative | None = None,
    ) -> list:
        """Create the buffer ``[state, zero]``.

        The derivative accumulator starts at the additive identity; *dt*,
        *velocity* and *force* are unused.
        """
        state = tree_cast(state)
        return [state, tree_zeros_like(state)]

    def step_with_vel(self, time, buffer: list, dt, velocity: Derivative, force: Derivative):
        """Advance the buffer by one step of size *dt*.

        Args:
            time: Time at the start of the step.
            buffer: Buffer from :meth:`init_with_vel`; both slots are replaced.
            dt: Step size.
            velocity: ``v(t, a)``, evaluated on the carried accumulator.
            force: ``F(t, y)``, evaluated at ``t + dt`` on the predicted midpoint.

        Returns:
            The new position accumulator ``buffer[0]``.

        Examples:
            ```python
            from odejax.integrators import VELOCITY_VERLET
            force = lambda t, y: (y[1], -y[0])
            velocity = lambda t, y: (y[1], 0.0)
            buffer = VELOCITY_VERLET.init_with_vel((1.0, 0.0))
            VELOCITY_VERLET.step_with_vel(0.0, buffer, 0.1, velocity, force)
            ```
        """
        dtype = get_dtype()
        time = jnp.asarray(time, dtype=dtype)
        dt = jnp.asarray(dt, dtype=dtype)
        half_dt = dt * 0.5
        position, accumulator = buffer[0], buffer[1]

        mid = tree_axpy(dt, accumulator, position)
        mid = tree_axpy(dt * dt * 0.5, velocity(time, accumulator), mid)

        position = tree_axpy(half_dt, accumulator, position)
        accumulator = force(time + dt, mid)
        position = tree_axpy(half_dt, accumulator, position)

        buffer[0] = position
        buffer[1] = accumulator
        return position


VELOCITY_VERLET = VelocityVerlet()
