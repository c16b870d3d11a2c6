"""
The `fockstate.state` module includes the `FockState` class, a label for a Fock basis state of $n$ photons in $m$ optical modes.
"""

import logging
import re
from functools import reduce
from math import factorial
from typing import Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np

from fockstate.exceptions import IndexOutOfRange, InvalidArgument, InvalidFormat, IteratorExhausted

logger = logging.getLogger(__name__)

# closing delimiters accepted for each opening delimiter
_DELIMITERS = {"|": (">", "\u3009", "\u232a", "\u27e9"), "[": ("]",)}
_NUMBER = re.compile(r"[0-9]+")

# polynomial hash over the Mersenne prime 2^61 - 1, then a 64-bit avalanche
_HASH_MODULUS = 2**61 - 1
_HASH_BASE = 1_000_003
_HASH_EXHAUSTED = 0x5F3759DF
_MASK64 = 2**64 - 1
_MASK63 = 2**63 - 1

Modes = Optional[Tuple[int, ...]]


def _parse(text: str) -> Tuple[Modes, int]:
    """Parse the textual form of a Fock state.

    Args:
        text: string such as `|1,0,2>`, `[1, 0, 2]` or `|,,>`

    Returns:
        Tuple of the occupations (`None` for an exhausted state) and the number of modes $m$
    """
    body = text.strip()
    if len(body) < 2 or body[0] not in _DELIMITERS or body[-1] not in _DELIMITERS[body[0]]:
        raise InvalidFormat(f"{text!r} is not enclosed in matching Fock state delimiters")

    inner = body[1:-1].strip()
    if not inner:
        return (), 0

    tokens = [token.strip() for token in inner.split(",")]
    if all(token == "" for token in tokens):
        return None, len(tokens)
    for token in tokens:
        if _NUMBER.fullmatch(token) is None:
            raise InvalidFormat(f"{text!r} contains the invalid occupation {token!r}")

    modes = tuple(int(token) for token in tokens)
    logger.debug("parsed %r into %d modes", text, len(modes))
    return modes, len(modes)


def _successor(modes: Tuple[int, ...]) -> Modes:
    """Compute the next occupation tuple in descending lexicographic order, `None` once the enumeration is over."""
    m = len(modes)
    for i in range(m - 2, -1, -1):
        if modes[i] > 0:
            rest = sum(modes[i + 1 :])
            return modes[:i] + (modes[i] - 1, rest + 1) + (0,) * (m - i - 2)
    return None


def _avalanche(x: int) -> int:
    x = ((x ^ (x >> 30)) * 0xBF58476D1CE4E5B9) & _MASK64
    x = ((x ^ (x >> 27)) * 0x94D049BB133111EB) & _MASK64
    return (x ^ (x >> 31)) & _MASK63


def _is_integer(value: object) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)


class FockState:
    """Occupation numbers of a fixed, ordered set of optical modes.

    A `FockState` is built from one of

    - nothing, giving the state with zero modes `|>`;
    - a number of modes $m$, giving the vacuum on $m$ modes;
    - a number of modes $m$ and a number of photons $n$, giving the first state of the $(m, n)$ enumeration, where all photons sit in mode 0;
    - a sequence of occupations (list, tuple, 1D array or another `FockState`);
    - a string such as `|1,0,2>` or `[1, 0, 2]`.

    States of fixed $(m, n)$ are ordered by descending lexicographic order of their occupations. `increment`
    walks that order in place; once past the last state, where all photons sit in the last mode, the state is
    exhausted: every occupation becomes unspecified and the state renders as `|,,>`.

    Attributes:
        m: number of optical modes, $m$
        n: number of photons, $n$
    """

    __slots__ = ("_m", "_modes")

    def __init__(self, *args: Union[int, str, Sequence[int], "FockState"]) -> None:
        self._m: int = 0
        self._modes: Modes = ()

        if len(args) == 2:
            self._init_first_state(*args)
        elif len(args) == 1:
            arg = args[0]
            if isinstance(arg, FockState):
                self._m, self._modes = arg._m, arg._modes
            elif isinstance(arg, str):
                self._modes, self._m = _parse(arg)
            elif _is_integer(arg):
                self._init_vacuum(int(arg))  # type: ignore
            else:
                self._init_sequence(arg)  # type: ignore
        elif len(args) > 2:
            raise InvalidArgument(f"FockState takes at most 2 arguments, {len(args)} were given")

    def _init_vacuum(self, m: int) -> None:
        if m < 0:
            logger.warning("constructing a FockState with a negative number of modes, m = %d", m)
        self._m = m
        self._modes = (0,) * max(m, 0)

    def _init_first_state(self, m: int, n: int) -> None:
        if not (_is_integer(m) and _is_integer(n)):
            raise InvalidArgument(f"number of modes and photons must be integers, got {m!r} and {n!r}")
        if m < 0 or n < 0:
            raise InvalidArgument(f"number of modes and photons must be non-negative, got m = {m} and n = {n}")
        if m == 0 and n > 0:
            raise InvalidArgument(f"cannot place {n} photons in zero modes")
        self._m = int(m)
        self._modes = (int(n),) + (0,) * (self._m - 1) if self._m > 0 else ()

    def _init_sequence(self, occupations: Sequence[int]) -> None:
        if isinstance(occupations, np.ndarray) and occupations.ndim != 1:
            raise InvalidArgument(f"occupations must form a 1D sequence, got shape {occupations.shape}")
        try:
            values = list(occupations)
        except TypeError as err:
            raise InvalidArgument(f"occupations must form a sequence, got {occupations!r}") from err
        if not all(_is_integer(k) for k in values):
            raise InvalidArgument(f"occupations must be integers, got {values!r}")
        if any(k < 0 for k in values):
            raise InvalidArgument(f"occupations must be non-negative, got {values!r}")
        self._modes = tuple(int(k) for k in values)
        self._m = len(self._modes)

    @classmethod
    def _build(cls, modes: Modes, m: int) -> "FockState":
        state = cls.__new__(cls)
        state._m = m
        state._modes = modes
        return state

    @classmethod
    def basis(cls, m: int, n: int) -> Iterator["FockState"]:
        """Iterate over every state of $n$ photons in $m$ optical modes.

        Args:
            m: number of optical modes, $m$
            n: number of photons, $n$

        Returns:
            Generator of the ${n + m - 1 \\choose n}$ states in enumeration order, each an independent copy
        """
        state = cls(m, n)
        while not state.is_exhausted:
            yield cls(state)
            state.increment()

    @property
    def m(self) -> int:
        return self._m

    @property
    def n(self) -> int:
        """Total number of photons, 0 for an exhausted state."""
        return 0 if self._modes is None else sum(self._modes)

    @property
    def is_exhausted(self) -> bool:
        return self._modes is None

    def _require_populated(self, operation: str) -> Tuple[int, ...]:
        if self._modes is None:
            raise InvalidArgument(f"cannot {operation} the exhausted state {self}")
        return self._modes

    # textual form

    def to_str(self) -> str:
        if self._modes is None:
            return "|" + ",".join([""] * max(self._m, 0)) + ">"
        return "|" + ",".join(str(k) for k in self._modes) + ">"

    def __str__(self) -> str:
        return self.to_str()

    def __repr__(self) -> str:
        return f"FockState({self.to_str()!r})"

    # enumeration

    def increment(self, k: int = 1) -> "FockState":
        """Advance the state in place by $k$ steps of the enumeration order.

        Stepping from the last state, where all photons sit in the last mode, exhausts the state. Stepping from an
        exhausted state raises `IteratorExhausted`; in that case the state is left as it was before the call.

        Args:
            k: number of steps to advance, non-negative

        Returns:
            The state itself, advanced
        """
        if not _is_integer(k) or k < 0:
            raise InvalidArgument(f"can only advance by a non-negative integer number of steps, got {k!r}")

        modes = self._modes
        for step in range(k):
            if modes is None:
                raise IteratorExhausted(f"{self} cannot be advanced by {k} steps, the enumeration ends after {step}")
            modes = _successor(modes)

        if modes is None and self._modes is not None:
            logger.debug("enumeration of %d modes exhausted after %s", self._m, self)
        self._modes = modes
        return self

    def advance(self) -> bool:
        """Advance the state in place by one step of the enumeration order.

        Returns:
            True if the state still holds occupations afterwards, False if it has just been exhausted
        """
        self.increment()
        return self._modes is not None

    # indexing and conversion

    def occupation_at(self, i: int) -> Optional[int]:
        """Return the number of photons in mode $i$, `None` when the state is exhausted."""
        if not _is_integer(i) or not 0 <= i < self._m:
            raise IndexOutOfRange(f"mode index {i!r} is out of range for a state of {self._m} modes")
        return None if self._modes is None else self._modes[i]

    def __getitem__(self, key: Union[int, slice]) -> Union[Optional[int], "FockState"]:
        if isinstance(key, slice):
            start = 0 if key.start is None else key.start
            end = self._m if key.stop is None else key.stop
            step = 1 if key.step is None else key.step
            return self.slice(start, end, step)
        return self.occupation_at(key)

    def __len__(self) -> int:
        return max(self._m, 0)

    def __iter__(self) -> Iterator[Optional[int]]:
        return iter(self.to_vector())

    def to_vector(self, out: Optional[List[Optional[int]]] = None) -> List[Optional[int]]:
        """Copy the occupations into a list.

        Args:
            out: optional list whose contents are replaced by the occupations

        Returns:
            List of the $m$ occupations, `None` entries for an exhausted state
        """
        values: List[Optional[int]] = [None] * len(self) if self._modes is None else list(self._modes)
        if out is None:
            return values
        out[:] = values
        return out

    def __array__(self, dtype: Optional[np.dtype] = None, copy: Optional[bool] = None) -> np.ndarray:
        modes = self._require_populated("convert to an array")
        return np.array(modes, dtype=int if dtype is None else dtype)

    def photon_to_mode(self, k: int) -> int:
        """Find the mode holding a given photon.

        Photons are numbered consecutively from 0, first those of mode 0, then those of mode 1, and so on.

        Args:
            k: index of the photon

        Returns:
            Index of the mode that holds photon $k$
        """
        modes = self._require_populated("locate photons in")
        n = sum(modes)
        if not _is_integer(k) or not 0 <= k < n:
            raise IndexOutOfRange(f"photon index {k!r} is out of range for a state of {n} photons")
        return int(np.searchsorted(np.cumsum(modes), k, side="right"))

    def mode_positions(self) -> np.ndarray:
        """Express the state in mode-specifying form, the mode of each of the $n$ photons in order."""
        modes = self._require_populated("locate photons in")
        return np.repeat(np.arange(len(modes)), modes)

    # slicing

    def _bounds(self, start: int, end: int) -> Tuple[int, int]:
        if not (_is_integer(start) and _is_integer(end)):
            raise InvalidArgument(f"slice bounds must be integers, got {start!r} and {end!r}")
        first = start + self._m if start < 0 else start
        last = end + self._m if end < 0 else end
        if first < 0 or last < 0:
            raise IndexOutOfRange(f"slice [{start}, {end}) is out of range for a state of {self._m} modes")
        if first > last:
            raise InvalidArgument(f"slice start {start} lies after its end {end}")
        if last > self._m:
            raise IndexOutOfRange(f"slice end {end} is out of range for a state of {self._m} modes")
        return first, last

    def slice(self, start: int, end: int, step: int = 1) -> "FockState":
        """Extract the modes `start, start + step, ...` strictly below `end`.

        Negative bounds count from the end of the state, `-1` being the last mode.

        Args:
            start: index of the first mode kept
            end: index past the last mode kept
            step: stride between kept modes, positive

        Returns:
            New state holding the selected modes
        """
        first, last = self._bounds(start, end)
        if not _is_integer(step) or step <= 0:
            raise InvalidArgument(f"slice step must be a positive integer, got {step!r}")
        if self._modes is None:
            return FockState._build(None, len(range(first, last, step)))
        modes = self._modes[first:last:step]
        return FockState._build(modes, len(modes))

    def set_slice(self, other: Union["FockState", Sequence[int]], start: int, end: int) -> "FockState":
        """Replace the modes in `[start, end)` by the modes of another state.

        Args:
            other: state, or sequence of occupations, holding exactly `end - start` modes
            start: index of the first mode replaced
            end: index past the last mode replaced

        Returns:
            New state with the replaced modes
        """
        if not isinstance(other, FockState):
            other = FockState(other)
        first, last = self._bounds(start, end)
        if len(other) != last - first:
            raise InvalidArgument(f"cannot replace {last - first} modes by the {len(other)} modes of {other}")
        modes = self._require_populated("replace modes of")
        replacement = other._require_populated("insert")
        return FockState._build(modes[:first] + replacement + modes[last:], self._m)

    # algebra

    def _sum(self, other: "FockState") -> Tuple[int, ...]:
        left = self._require_populated("add")
        right = other._require_populated("add")
        if self._m != other._m:
            raise InvalidArgument(f"cannot add states of {self._m} and {other._m} modes")
        return tuple(a + b for a, b in zip(left, right))

    def __add__(self, other: "FockState") -> "FockState":
        if not isinstance(other, FockState):
            return NotImplemented
        return FockState._build(self._sum(other), self._m)

    def __iadd__(self, other: Union["FockState", int]) -> "FockState":
        if isinstance(other, FockState):
            self._modes = self._sum(other)
            return self
        if _is_integer(other):
            return self.increment(other)  # type: ignore
        return NotImplemented

    def __mul__(self, other: "FockState") -> "FockState":
        """Tensor product, the modes of `other` appended after the modes of this state."""
        if not isinstance(other, FockState):
            return NotImplemented
        left = self._require_populated("take the tensor product of")
        right = other._require_populated("take the tensor product with")
        return FockState._build(left + right, len(left) + len(right))

    def prodnfact(self) -> int:
        """Calculate the product of the factorials of the occupations, $\\prod_i n_i!$."""
        modes = self._require_populated("normalize")
        return reduce(lambda acc, k: acc * factorial(k), modes, 1)

    # hashing and equality

    def hash(self) -> int:
        """Hash the state to a non-negative 63-bit integer.

        Returns:
            Hash derived from the number of modes and every occupation
        """
        acc = self._m % _HASH_MODULUS
        if self._modes is None:
            acc = (acc * _HASH_BASE + _HASH_EXHAUSTED) % _HASH_MODULUS
        else:
            for k in self._modes:
                acc = (acc * _HASH_BASE + k + 1) % _HASH_MODULUS
        return _avalanche(acc)

    def __hash__(self) -> int:
        return self.hash()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FockState):
            return NotImplemented
        return self._m == other._m and self._modes == other._modes
