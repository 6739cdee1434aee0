import jax.numpy as jnp
import pytest

from odejax.config import set_dtype


@pytest.fixture(autouse=True)
def _integrate_in_float64():
    """Run every test in float64 so accuracy assertions are not precision-bound.

    tests/test_config.py overrides this with its own float32 fixture.
    """
    set_dtype(jnp.float64)
