"""Distance functions between integration states.

The adaptive integrator compares its two embedded estimates through a
metric.  A metric is either a plain callable ``distance(a, b) -> scalar`` or
any object exposing a ``distance(a, b)`` method; :func:`resolve_metric`
normalises both forms into a callable.
"""

from __future__ import annotations

from collections.abc import Callable

import jax.numpy as jnp
from jax import Array
from jax.tree_util import tree_leaves, tree_map

from odejax.integrators._types import Metric


def euclidean_distance(a, b) -> Array:
    """Return the Euclidean (L2) distance between two pytree states.

    All leaves are treated as components of a single flat vector.

    Args:
        a: First state.
        b: Second state, same structure as *a*.

    Returns:
        jax.Array: Scalar distance.
    """
    squares = tree_map(lambda x, y: jnp.sum(jnp.square(jnp.asarray(x) - jnp.asarray(y))), a, b)
    return jnp.sqrt(sum(tree_leaves(squares)))


def max_abs_distance(a, b) -> Array:
    """Return the infinity-norm distance between two pytree states."""
    maxima = tree_map(lambda x, y: jnp.max(jnp.abs(jnp.asarray(x) - jnp.asarray(y))), a, b)
    return jnp.max(jnp.stack(tree_leaves(maxima)))


def resolve_metric(metric) -> Callable:
    """Return a ``distance(a, b)`` callable for *metric*.

    Args:
        metric: ``None`` (Euclidean distance), a callable, or an object with
            a ``distance`` method.

    Returns:
        Callable taking two states and returning a scalar.

    Raises:
        TypeError: If *metric* is neither callable nor has ``distance``.
    """
    if metric is None:
        return euclidean_distance
    if isinstance(metric, Metric):
        return metric.distance
    if callable(metric):
        return metric
    raise TypeError(f"Metric must be callable or define distance(a, b), got {type(metric)!r}")
