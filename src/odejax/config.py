"""Float precision used by every odejax integrator.

States and times are cast to a single module-wide dtype when a buffer is
created and when a step begins.  ``jnp.float32`` is the default; selecting
``jnp.float64`` turns on ``jax_enable_x64`` so that the cast is honoured
rather than silently truncated.

The setting is read while tracing.  Change it before the first ``jax.jit``
of a stepping function, or the compiled program keeps the old dtype.
Existing buffers are not converted: only buffers created by later
``init`` calls pick up the new dtype.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp

_DTYPE_NAMES = {
    jnp.float16: "jnp.float16",
    jnp.bfloat16: "jnp.bfloat16",
    jnp.float32: "jnp.float32",
    jnp.float64: "jnp.float64",
}

_dtype = jnp.float32


def set_dtype(dtype) -> None:
    """Select the float dtype for integration states and times.

    Args:
        dtype: ``jnp.float16``, ``jnp.bfloat16``, ``jnp.float32`` or
            ``jnp.float64``.  The last also enables JAX's 64-bit mode.

    Raises:
        ValueError: If *dtype* is not one of the supported float types.
    """
    global _dtype
    if not any(dtype == valid for valid in _DTYPE_NAMES):
        raise ValueError(
            f"Unsupported dtype {dtype}. Must be one of: {', '.join(_DTYPE_NAMES.values())}"
        )
    if dtype == jnp.float64:
        jax.config.update("jax_enable_x64", True)
    _dtype = dtype


def get_dtype():
    """Return the float dtype integrators cast to (default ``jnp.float32``)."""
    return _dtype


def get_machine_epsilon() -> float:
    """Return the machine epsilon of the configured dtype.

    An adaptive tolerance below a few epsilons of the state magnitude cannot
    be met, so this is the floor for ``ds`` in
    :meth:`~odejax.integrators.AdaptiveRungeKutta.adaptive_step`.

    Returns:
        float: Spacing between 1.0 and the next representable value.
    """
    return float(jnp.finfo(_dtype).eps)
