from itertools import combinations_with_replacement

import numpy as np
import pytest

import fockstate.fock as fock
from fockstate import FockState
from fockstate.exceptions import InvalidArgument


def test_calc_symm_dim():
    n = 2
    m = 4
    N = 10
    assert fock.calc_symm_dim(n, m) == N

    n = 4
    m = 8
    N = 330
    assert fock.calc_symm_dim(n, m) == N

    n = 1
    m = 5
    N = 5
    assert fock.calc_symm_dim(n, m) == N

    n = 3
    m = 5
    N = 35
    assert fock.calc_symm_dim(n, m) == N

    assert fock.calc_symm_dim(0, 0) == 1
    assert fock.calc_symm_dim(2, 0) == 0
    assert fock.calc_symm_dim(5, 1) == 1


def test_build_symm_basis():
    n = 2
    m = 4
    result = np.array(
        [[2, 0, 0, 0], [1, 1, 0, 0], [1, 0, 1, 0], [1, 0, 0, 1], [0, 2, 0, 0], [0, 1, 1, 0], [0, 1, 0, 1], [0, 0, 2, 0], [0, 0, 1, 1], [0, 0, 0, 2]]
    )
    assert np.allclose(fock.build_symm_basis(n, m), result)

    n = 3
    m = 3
    result = np.array([[3, 0, 0], [2, 1, 0], [2, 0, 1], [1, 2, 0], [1, 1, 1], [1, 0, 2], [0, 3, 0], [0, 2, 1], [0, 1, 2], [0, 0, 3]])
    assert np.allclose(fock.build_symm_basis(n, m), result)

    assert fock.build_symm_basis(0, 3).shape == (1, 3)
    assert fock.build_symm_basis(0, 0).shape == (1, 0)


def test_build_symm_mode_basis():
    n = 3
    m = 4
    result = np.array(list(combinations_with_replacement(range(m), n)))
    assert np.allclose(fock.build_symm_mode_basis(n, m), result)

    # each mode-specifying row is the occupation row it labels, photon by photon
    basis = fock.build_symm_basis(n, m)
    for state, modes in zip(basis, fock.build_symm_mode_basis(n, m)):
        assert np.allclose(np.bincount(modes, minlength=m), state)

    assert fock.build_symm_mode_basis(0, 2).shape == (1, 0)


def test_basis_index():
    n = 3
    m = 4
    for i, state in enumerate(FockState.basis(m, n)):
        assert fock.basis_index(state) == i

    assert fock.basis_index(FockState([1, 0, 1])) == 2
    assert fock.basis_index(FockState()) == 0
    with pytest.raises(InvalidArgument):
        fock.basis_index(FockState("|,>"))
