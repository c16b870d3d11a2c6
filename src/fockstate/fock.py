"""
The `fockstate.fock` module includes helpers that catalog the symmetric Fock basis of $n$ photons in $m$ optical modes, in the enumeration order of `FockState`.
"""

from functools import cache

import numpy as np

from fockstate.exceptions import InvalidArgument
from fockstate.state import FockState


@cache
def calc_symm_dim(n: int, m: int) -> int:
    """Calculate the dimension of the symmetric Fock basis.

    Args:
        n: number of photons, $n$
        m: number of optical modes, $m$

    Returns:
        Dimension of the symmetric Fock basis, $N = {n + m - 1 \\choose n}$
    """

    # evaluate {n + m - 1 \choose n} as a falling product over the top n factors
    top = n + m - 1
    numerator = 1
    denominator = 1
    for i in range(n):
        numerator *= top - i
        denominator *= i + 1

    return numerator // denominator


@cache
def build_symm_basis(n: int, m: int) -> np.ndarray:
    """Generate a catalog of all states in the symmetric Fock basis.

    Args:
        n: number of photons, $n$
        m: number of optical modes, $m$

    Returns:
        $N\\times m$ array that catalogs all states in the $N$-dimensional symmetric Fock basis
    """

    # without modes, only the vacuum exists
    if m == 0:
        return np.zeros((calc_symm_dim(n, m), 0), dtype=int)

    return np.array([state.to_vector() for state in FockState.basis(m, n)], dtype=int)


@cache
def build_symm_mode_basis(n: int, m: int) -> np.ndarray:
    """Generate a catalog of all states in the symmetric Fock basis, denoted with $n$ slots where each slot specifies which mode $m$ the photon resides in.

    Args:
        n: number of photons, $n$
        m: number of optical modes, $m$

    Returns:
        $N\\times n$ array that catalogs all states in the $N$-dimensional symmetric Fock basis, expressed in mode-specifying form
    """
    if m == 0:
        return np.zeros((calc_symm_dim(n, m), n), dtype=int)

    return np.array([state.mode_positions() for state in FockState.basis(m, n)], dtype=int).reshape(calc_symm_dim(n, m), n)


def basis_index(state: FockState) -> int:
    """Find the row of a state in the catalog of its symmetric Fock basis.

    Every state that precedes `state` agrees with it up to some mode $i$ and holds more photons in mode $i$; these
    are counted mode by mode, without walking the enumeration.

    Args:
        state: state to locate

    Returns:
        Index of the state in `build_symm_basis(state.n, state.m)`
    """
    if state.is_exhausted:
        raise InvalidArgument(f"the exhausted state {state} has no place in a basis")

    modes = state.to_vector()
    remaining = state.n
    index = 0
    for i, occupation in enumerate(modes[:-1]):
        free_modes = len(modes) - i - 1
        for higher in range(occupation + 1, remaining + 1):
            index += calc_symm_dim(remaining - higher, free_modes)
        remaining -= occupation

    return index
