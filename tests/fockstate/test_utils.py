import numpy as np
from jax import config

import fockstate.fock as fock
import fockstate.utils as utils
from fockstate import FockState

config.update("jax_enable_x64", True)


def test_calc_prodnfact():
    basis = fock.build_symm_basis(3, 3)
    result = np.array([FockState(state).prodnfact() for state in basis])
    assert np.allclose(utils.calc_prodnfact(basis), result)

    assert np.allclose(utils.calc_prodnfact(np.array([[1, 2, 3], [0, 0, 0]])), np.array([12, 1]))


def test_calc_prodnfact_single_state():
    assert np.allclose(utils.calc_prodnfact(np.asarray(FockState([4, 0, 2]))), np.array([48]))
