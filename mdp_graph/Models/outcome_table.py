"""Per-action weighted outcome table.

An action's result is a discrete distribution over successor states. The
table stores it by *cumulative* probability:

    {0.1: (b, 2.0), 1.0: (a, 3.0)}   # P(b) = 0.1, P(a) = 0.9

so that picking the outcome for a uniform draw x in [0, 1] is a single
ordered search for the smallest key >= x.
"""

import math
from numbers import Real
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, NamedTuple, Sequence, Tuple, Union

import numpy as np

from ..config import DEFAULT_CONFIG, ValidationConfig
from .errors import (
    DanglingReferenceError,
    InvalidArgumentError,
    ProbabilityMassError,
    StructuralMismatchError,
)
from .identity import Identity


class Outcome(NamedTuple):
    """A (successor state, reward) pair."""
    state: Identity
    reward: float


Entry = Tuple[float, Identity, float]
RawTable = Union[Mapping[float, Tuple[Identity, float]], Iterable[Entry]]


def _is_real(value) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _normalize_entries(entries: RawTable) -> list:
    """
    Turn a mapping or an iterable of triples into checked (key, Outcome) pairs.

    A target that is an action rather than a state is a dangling reference;
    any other malformed value is an invalid argument.
    """
    if entries is None:
        raise InvalidArgumentError("outcome table must not be None")

    if isinstance(entries, Mapping):
        raw = []
        for key, pair in entries.items():
            if not isinstance(pair, Sequence) or len(pair) != 2:
                raise InvalidArgumentError(
                    f"entry at cumulative probability {key!r} must be a (state, reward) pair, got {pair!r}"
                )
            raw.append((key, pair[0], pair[1]))
    elif isinstance(entries, Iterable):
        raw = []
        for entry in entries:
            if not isinstance(entry, Sequence) or len(entry) != 3:
                raise InvalidArgumentError(
                    f"entry must be a (cumulative, state, reward) triple, got {entry!r}"
                )
            raw.append(tuple(entry))
    else:
        raise InvalidArgumentError(f"outcome table must be a mapping or iterable, got {entries!r}")

    checked = []
    for key, target, reward in raw:
        if not _is_real(key):
            raise ProbabilityMassError(f"cumulative probability must be a real number, got {key!r}")
        if not isinstance(target, Identity):
            raise InvalidArgumentError(f"outcome target must be a state, got {target!r}")
        if not target.is_state:
            raise DanglingReferenceError(f"outcome target {target!r} is not a state")
        if reward is None:
            raise InvalidArgumentError(f"reward for {target!r} at {key!r} is missing")
        if not _is_real(reward) or not math.isfinite(reward):
            raise InvalidArgumentError(f"reward for {target!r} must be a finite real number, got {reward!r}")
        checked.append((float(key), Outcome(target, float(reward))))

    checked.sort(key=lambda kv: kv[0])
    return checked


class OutcomeTable:
    """
    Immutable cumulative distribution over (successor state, reward) pairs.

    entries : {cumulative -> (state, reward)} or iterable of
              (cumulative, state, reward), in any order
    config  : tolerance for the final key and duplicate-target policy

    Keys must strictly increase within (0, 1] and the last key must be 1.0
    (up to config.probability_tolerance).
    """

    __slots__ = ("_keys", "_outcomes", "_cumulative")

    def __init__(self, entries: RawTable, config: ValidationConfig = DEFAULT_CONFIG):
        checked = _normalize_entries(entries)
        if not checked:
            raise ProbabilityMassError("outcome table is empty; probabilities must sum to 1.0")

        upper = 1.0 + config.probability_tolerance
        previous = 0.0
        for key, outcome in checked:
            if not (previous < key <= upper):
                raise ProbabilityMassError(
                    f"cumulative probability {key!r} for {outcome.state!r} is not in ({previous!r}, 1.0]"
                )
            previous = key
        if not config.terminates(previous):
            raise ProbabilityMassError(
                f"cumulative probabilities end at {previous!r}, expected 1.0"
            )

        outcomes = tuple(outcome for _, outcome in checked)
        if config.reject_duplicate_targets:
            seen = set()
            for outcome in outcomes:
                if outcome.state in seen:
                    raise StructuralMismatchError(
                        f"successor {outcome.state!r} appears more than once in outcome table"
                    )
                seen.add(outcome.state)

        cumulative = np.array([key for key, _ in checked], dtype=float)
        cumulative.flags.writeable = False

        object.__setattr__(self, "_keys", tuple(key for key, _ in checked))
        object.__setattr__(self, "_outcomes", outcomes)
        object.__setattr__(self, "_cumulative", cumulative)

    @classmethod
    def from_probabilities(
        cls,
        entries: Iterable[Tuple[Identity, float, float]],
        config: ValidationConfig = DEFAULT_CONFIG,
    ) -> "OutcomeTable":
        """Build a table from raw (state, probability, reward) triples in enumeration order."""
        entries = list(entries)
        masses = []
        for entry in entries:
            if not isinstance(entry, Sequence) or len(entry) != 3:
                raise InvalidArgumentError(
                    f"entry must be a (state, probability, reward) triple, got {entry!r}"
                )
            p = entry[1]
            if not _is_real(p) or not p > 0.0:
                raise ProbabilityMassError(f"probability of {entry[0]!r} must be positive, got {p!r}")
            masses.append(float(p))
        cumulative = np.cumsum(masses)
        return cls(
            [(float(c), s, r) for c, (s, _, r) in zip(cumulative, entries)],
            config=config,
        )

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __len__(self) -> int:
        return len(self._keys)

    def __iter__(self) -> Iterator[Tuple[float, Outcome]]:
        return iter(zip(self._keys, self._outcomes))

    def __eq__(self, other):
        if not isinstance(other, OutcomeTable):
            return NotImplemented
        return self._keys == other._keys and self._outcomes == other._outcomes

    def __hash__(self):
        return hash((self._keys, self._outcomes))

    def __repr__(self) -> str:
        body = ", ".join(f"{k:g}: ({o.state!r}, {o.reward:g})" for k, o in self)
        return f"OutcomeTable({{{body}}})"

    def keys(self) -> Tuple[float, ...]:
        return self._keys

    def outcomes(self) -> Tuple[Outcome, ...]:
        return self._outcomes

    def items(self) -> Tuple[Tuple[float, Outcome], ...]:
        return tuple(self)

    def targets(self) -> frozenset:
        """Distinct successor states."""
        return frozenset(o.state for o in self._outcomes)

    def probabilities(self) -> Tuple[float, ...]:
        """Per-outcome probability masses, in table order."""
        return tuple(float(p) for p in np.diff(self._cumulative, prepend=0.0))

    def lookup(self, x: float) -> Outcome:
        """
        Return the outcome whose cumulative key is the smallest key >= x.

        With x drawn uniformly from [0, 1) this selects outcome i with
        probability probabilities()[i].
        """
        if not _is_real(x) or not (0.0 <= x <= 1.0):
            raise InvalidArgumentError(f"lookup weight must be in [0, 1], got {x!r}")
        idx = int(np.searchsorted(self._cumulative, x, side="left"))
        # only reachable when the last key sits just below 1.0
        if idx >= len(self._outcomes):
            idx = len(self._outcomes) - 1
        return self._outcomes[idx]

    def reward_map(self) -> Mapping[Identity, float]:
        """
        Successor state -> reward.

        If a successor appears more than once, the entry with the larger
        cumulative key wins.
        """
        return MappingProxyType({o.state: o.reward for o in self._outcomes})

    def probability_map(self) -> Mapping[Identity, float]:
        """
        Successor state -> probability mass.

        Same duplicate resolution as reward_map(): the later entry's mass
        replaces the earlier one rather than being added to it.
        """
        return MappingProxyType(
            {o.state: p for o, p in zip(self._outcomes, self.probabilities())}
        )

    def expected_reward(self) -> float:
        """Sum of mass * reward over every entry."""
        rewards = np.array([o.reward for o in self._outcomes], dtype=float)
        return float(np.dot(np.diff(self._cumulative, prepend=0.0), rewards))
