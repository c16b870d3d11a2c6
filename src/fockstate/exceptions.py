"""
The `fockstate.exceptions` module includes the error kinds raised by `FockState` operations.
"""


class FockStateError(Exception):
    """Base class for every error raised by the `fockstate` package."""


class InvalidFormat(FockStateError, ValueError):
    """Raised when a string cannot be parsed as a Fock state."""


class IndexOutOfRange(FockStateError, IndexError):
    """Raised when a mode index or a photon index lies outside the bounds of a state."""


class InvalidArgument(FockStateError, ValueError):
    """Raised for malformed slice ranges, mismatched lengths and other invalid operands."""


class IteratorExhausted(FockStateError, RuntimeError):
    """Raised when a state is advanced past the last state of its enumeration."""
