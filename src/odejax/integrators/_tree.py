"""Leaf-wise vector-space arithmetic over JAX pytrees.

Integration states are arbitrary pytrees (a float, an array, a NamedTuple
of arrays, a dict of arrays, ...).  The step formulas only need addition,
scaling by a scalar and an additive identity, all of which are applied
independently to every leaf with :func:`jax.tree_util.tree_map`.
"""

from __future__ import annotations

import jax.numpy as jnp
from jax.tree_util import tree_map

from odejax.config import get_dtype


def tree_cast(tree):
    """Convert every leaf of *tree* to a JAX array of the configured dtype."""
    dtype = get_dtype()
    return tree_map(lambda leaf: jnp.asarray(leaf, dtype=dtype), tree)


def tree_axpy(alpha, x, y):
    """Return ``y + alpha * x`` leaf-wise.

    Args:
        alpha: Scalar multiplier.
        x: Pytree to scale.
        y: Pytree with the same structure as *x*.

    Returns:
        Pytree with the structure of *y*.
    """
    return tree_map(lambda x_leaf, y_leaf: y_leaf + alpha * x_leaf, x, y)


def tree_zeros_like(tree):
    """Return the additive identity with the structure and dtypes of *tree*."""
    return tree_map(jnp.zeros_like, tree)
