"""
Incremental construction of a MarkovDecisionProcess.

The builder only collects declarations; all validation happens in
MarkovDecisionProcess.__init__ when build() is called, so a builder
never yields a partially valid MDP.
"""

import logging
from typing import Dict, List, Tuple, Union

from ..config import DEFAULT_CONFIG, ValidationConfig
from .errors import InvalidArgumentError
from .identity import Identity, Kind
from .mdp import MarkovDecisionProcess
from .outcome_table import OutcomeTable

log = logging.getLogger(__name__)

StateLike = Union[Identity, str]
ActionLike = Union[Identity, str]


def _coerce(value, kind: Kind) -> Identity:
    if isinstance(value, Identity):
        if value.kind is not kind:
            raise InvalidArgumentError(f"expected a {kind.value.lower()}, got {value!r}")
        return value
    if isinstance(value, str):
        return Identity(kind, value)
    raise InvalidArgumentError(f"expected a {kind.value.lower()} or a name, got {value!r}")


class MDPBuilder:
    """
    Fluent collector for states, actions and outcomes.

    Example
    -------
    >>> mdp = (MDPBuilder()
    ...        .allow("a", "go")
    ...        .add_state("b")
    ...        .add_transition("go", "b", 1.0, reward=1.0)
    ...        .build())
    """

    def __init__(self, config: ValidationConfig = DEFAULT_CONFIG):
        self.config = config
        # dicts keep declaration order
        self._states: Dict[Identity, None] = {}
        self._actions: Dict[Identity, None] = {}
        self._allowed: Dict[Identity, Dict[Identity, None]] = {}
        self._cumulative: Dict[Identity, List[Tuple[float, Identity, float]]] = {}
        self._masses: Dict[Identity, List[Tuple[Identity, float, float]]] = {}

    def add_state(self, state: StateLike) -> "MDPBuilder":
        self._states.setdefault(_coerce(state, Kind.STATE), None)
        return self

    def add_action(self, action: ActionLike) -> "MDPBuilder":
        self._actions.setdefault(_coerce(action, Kind.ACTION), None)
        return self

    def allow(self, state: StateLike, *actions: ActionLike) -> "MDPBuilder":
        """Make `actions` available at `state`, declaring both if needed."""
        s = _coerce(state, Kind.STATE)
        self._states.setdefault(s, None)
        enabled = self._allowed.setdefault(s, {})
        for action in actions:
            a = _coerce(action, Kind.ACTION)
            self._actions.setdefault(a, None)
            enabled.setdefault(a, None)
        return self

    def add_outcome(self, action: ActionLike, cumulative: float, target: StateLike, reward: float) -> "MDPBuilder":
        """Add an entry keyed by cumulative probability."""
        a = _coerce(action, Kind.ACTION)
        if a in self._masses:
            raise InvalidArgumentError(
                f"{a!r} already has probability-mass transitions; do not mix with cumulative outcomes"
            )
        self._actions.setdefault(a, None)
        self._cumulative.setdefault(a, []).append((cumulative, _coerce(target, Kind.STATE), reward))
        return self

    def add_transition(self, action: ActionLike, target: StateLike, probability: float, reward: float) -> "MDPBuilder":
        """Add an entry by its own probability mass; masses accumulate in call order."""
        a = _coerce(action, Kind.ACTION)
        if a in self._cumulative:
            raise InvalidArgumentError(
                f"{a!r} already has cumulative outcomes; do not mix with probability-mass transitions"
            )
        self._actions.setdefault(a, None)
        self._masses.setdefault(a, []).append((_coerce(target, Kind.STATE), probability, reward))
        return self

    def build(self) -> MarkovDecisionProcess:
        states = set(self._states)
        actions = set(self._actions)
        actions_from_state = {s: set(self._allowed.get(s, ())) for s in states}

        states_from_action = {}
        for a in actions:
            if a in self._masses:
                states_from_action[a] = OutcomeTable.from_probabilities(self._masses[a], config=self.config)
            else:
                states_from_action[a] = list(self._cumulative.get(a, ()))

        log.debug("Building MDP from %d declared states and %d declared actions", len(states), len(actions))
        return MarkovDecisionProcess(
            states, actions, actions_from_state, states_from_action, config=self.config
        )
