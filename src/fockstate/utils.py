"""
The `fockstate.utils` module includes batched counterparts of `FockState` operations over catalogs of Fock basis states.
"""

import jax.numpy as jnp
from jax.scipy.special import factorial
from jax.typing import ArrayLike


def calc_prodnfact(basis: ArrayLike) -> jnp.ndarray:
    """Calculate $\\prod_i n_i!$ for every state of a basis catalog.

    This is the batched counterpart of `FockState.prodnfact`, computed in floating point. A single state of
    $m$ occupations is treated as a catalog of one.

    Args:
        basis: $N\\times m$ array that catalogs $N$ states of $m$ optical modes

    Returns:
        $N$-length array of the products of the factorials of the occupations of each state
    """
    states = jnp.atleast_2d(jnp.asarray(basis))
    return jnp.prod(factorial(states), axis=-1)
