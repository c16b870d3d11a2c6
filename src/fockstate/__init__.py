from fockstate.exceptions import FockStateError, IndexOutOfRange, InvalidArgument, InvalidFormat, IteratorExhausted
from fockstate.fock import basis_index, build_symm_basis, build_symm_mode_basis, calc_symm_dim
from fockstate.state import FockState
from fockstate.utils import calc_prodnfact
