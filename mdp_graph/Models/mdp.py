"""Markov Decision Process model."""

import io
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import AbstractSet, Dict, List, Mapping, Tuple, Union

import numpy as np

from ..config import DEFAULT_CONFIG, ValidationConfig
from .errors import (
    DanglingReferenceError,
    InvalidArgumentError,
    StructuralMismatchError,
    UnknownActionError,
    UnknownStateError,
)
from .identity import Identity
from .outcome_table import Outcome, OutcomeTable, RawTable

log = logging.getLogger(__name__)

State = Identity
Action = Identity


@dataclass
class TransitionModel:
    """
    Plain transition view of an MDP.

    states  : list of all states
    actions : mapping from state -> list of enabled actions
    P       : mapping (s, a) -> {s' -> P(s' | s, a)}
    """
    states: List[State]
    actions: Dict[State, List[Action]]
    P: Dict[Tuple[State, Action], Dict[State, float]]

    def _state_index(self) -> Dict[State, int]:
        return {s: i for i, s in enumerate(self.states)}

    def transition_matrix(self, action: Action) -> np.ndarray:
        """
        Returns T_a as an n x n matrix where [i,j] = P(s_j | s_i, a).

        Rows of states where `action` is not enabled are zero.
        """
        idx = self._state_index()
        n = len(self.states)
        Tmat = np.zeros((n, n), dtype=float)
        for s in self.states:
            row = self.P.get((s, action), {})
            i = idx[s]
            for sp, p in row.items():
                Tmat[i, idx[sp]] += float(p)
        return Tmat


def _by_name(identity: Identity) -> str:
    return identity.name


def _freeze(values, label: str) -> frozenset:
    try:
        return frozenset(values)
    except TypeError as e:
        raise InvalidArgumentError(
            f"{label} must be an iterable of identities, got {values!r}"
        ) from e


class MarkovDecisionProcess:
    """
    Immutable, validated finite Markov decision process.

    states             : set of State identities
    actions            : set of Action identities
    actions_from_state : state -> set of actions available there
    states_from_action : action -> OutcomeTable, or a raw
                         {cumulative -> (state, reward)} mapping
    config             : ValidationConfig

    Construction checks the four collections against each other and either
    returns a fully valid object or raises; nothing can be changed
    afterwards, so instances can be shared between threads freely.
    """

    __slots__ = ("_states", "_actions", "_actions_from_state", "_states_from_action")

    def __init__(
        self,
        states: AbstractSet[State],
        actions: AbstractSet[Action],
        actions_from_state: Mapping[State, AbstractSet[Action]],
        states_from_action: Mapping[Action, Union[OutcomeTable, RawTable]],
        config: ValidationConfig = DEFAULT_CONFIG,
    ):
        for label, value in (
            ("states", states),
            ("actions", actions),
            ("actions_from_state", actions_from_state),
            ("states_from_action", states_from_action),
        ):
            if value is None:
                raise InvalidArgumentError(f"{label} must not be None")
        if config is None:
            raise InvalidArgumentError("config must not be None")

        for label, value in (
            ("actions_from_state", actions_from_state),
            ("states_from_action", states_from_action),
        ):
            if not isinstance(value, Mapping):
                raise InvalidArgumentError(f"{label} must be a mapping, got {value!r}")

        states = _freeze(states, "states")
        actions = _freeze(actions, "actions")
        for s in states:
            if not isinstance(s, Identity) or not s.is_state:
                raise InvalidArgumentError(f"{s!r} in states is not a state")
        for a in actions:
            if not isinstance(a, Identity) or not a.is_action:
                raise InvalidArgumentError(f"{a!r} in actions is not an action")

        # Every state must list its available actions.
        if frozenset(actions_from_state.keys()) != states:
            missing = states - frozenset(actions_from_state.keys())
            extra = frozenset(actions_from_state.keys()) - states
            raise StructuralMismatchError(
                f"actions_from_state keys differ from states (missing={sorted(map(repr, missing))}, "
                f"undeclared={sorted(map(repr, extra))})"
            )

        frozen_actions_from_state = {}
        for s, available in actions_from_state.items():
            if available is None:
                raise InvalidArgumentError(f"action set for {s!r} must not be None")
            available = _freeze(available, f"action set for {s!r}")
            for a in available:
                if a not in actions:
                    raise DanglingReferenceError(f"{s!r} offers undeclared action {a!r}")
            frozen_actions_from_state[s] = available

        # Every action must carry an outcome table.
        if frozenset(states_from_action.keys()) != actions:
            missing = actions - frozenset(states_from_action.keys())
            extra = frozenset(states_from_action.keys()) - actions
            raise StructuralMismatchError(
                f"states_from_action keys differ from actions (missing={sorted(map(repr, missing))}, "
                f"undeclared={sorted(map(repr, extra))})"
            )

        tables = {}
        for a, raw in states_from_action.items():
            if raw is None:
                raise InvalidArgumentError(f"outcome table for {a!r} must not be None")
            if isinstance(raw, OutcomeTable):
                # tables built elsewhere are rechecked under this MDP's config
                raw = [(key, o.state, o.reward) for key, o in raw]
            table = OutcomeTable(raw, config=config)
            for target in table.targets():
                if target not in states:
                    raise DanglingReferenceError(f"{a!r} leads to undeclared state {target!r}")
            tables[a] = table

        object.__setattr__(self, "_states", states)
        object.__setattr__(self, "_actions", actions)
        object.__setattr__(self, "_actions_from_state", MappingProxyType(frozen_actions_from_state))
        object.__setattr__(self, "_states_from_action", MappingProxyType(tables))

        log.debug(
            "Built MDP with %d states, %d actions, %d outcomes",
            len(states), len(actions), sum(len(t) for t in tables.values()),
        )

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__} is immutable")

    # ------------------------------------------------------------------
    # Membership
    # ------------------------------------------------------------------

    def states(self) -> frozenset:
        """All states in the MDP."""
        return self._states

    def actions(self) -> frozenset:
        """All actions in the MDP."""
        return self._actions

    def _check_state(self, state: State):
        if state not in self._states:
            raise UnknownStateError(f"{state!r} is not a state of this MDP")

    def _table(self, action: Action) -> OutcomeTable:
        table = self._states_from_action.get(action)
        if table is None:
            raise UnknownActionError(f"{action!r} is not an action of this MDP")
        return table

    # ------------------------------------------------------------------
    # Forward queries
    # ------------------------------------------------------------------

    def actions_from_state(self, state: State) -> frozenset:
        """Actions that can be taken from `state`."""
        self._check_state(state)
        return self._actions_from_state[state]

    def states_from_action(self, action: Action) -> frozenset:
        """Successor states reachable by taking `action`."""
        return self._table(action).targets()

    def state_reward_map(self, action: Action) -> Mapping[State, float]:
        """Successor state -> reward for `action` (later duplicate entries win)."""
        return self._table(action).reward_map()

    def state_probability_map(self, action: Action) -> Mapping[State, float]:
        """Successor state -> probability for `action` (later duplicate entries win)."""
        return self._table(action).probability_map()

    def outcome_table(self, action: Action) -> OutcomeTable:
        return self._table(action)

    def outcome_at(self, action: Action, x: float) -> Outcome:
        """Outcome of `action` selected by cumulative weight `x` in [0, 1]."""
        return self._table(action).lookup(x)

    def expected_reward(self, action: Action) -> float:
        return self._table(action).expected_reward()

    # ------------------------------------------------------------------
    # Inverse queries (linear scans)
    # ------------------------------------------------------------------

    def actions_to_state(self, state: State) -> frozenset:
        """
        Actions that can lead to `state`.

        Scans every action's outcome table: O(actions x outcomes).
        """
        self._check_state(state)
        return frozenset(
            a for a in self._actions if state in self.states_from_action(a)
        )

    def states_to_action(self, action: Action) -> frozenset:
        """
        States from which `action` can be taken.

        Scans every state's action set: O(states x actions).
        """
        self._table(action)
        return frozenset(
            s for s in self._states if action in self.actions_from_state(s)
        )

    # ------------------------------------------------------------------
    # Export / display
    # ------------------------------------------------------------------

    def to_transition_model(self) -> TransitionModel:
        """Flatten into (s, a) -> {s' -> p} form, states ordered by name."""
        states = sorted(self._states, key=_by_name)
        enabled = {
            s: sorted(self._actions_from_state[s], key=_by_name) for s in states
        }
        P = {}
        for s in states:
            for a in enabled[s]:
                row: Dict[State, float] = {}
                table = self._states_from_action[a]
                for outcome, p in zip(table.outcomes(), table.probabilities()):
                    row[outcome.state] = row.get(outcome.state, 0.0) + p
                P[(s, a)] = row
        return TransitionModel(states, enabled, P)

    def render(self) -> str:
        """One line per (state, action, successor) edge."""
        out = io.StringIO()
        for s in self._states:
            for a in self._actions_from_state[s]:
                probabilities = self.state_probability_map(a)
                rewards = self.state_reward_map(a)
                for target, p in probabilities.items():
                    out.write("%s -- (%s, P=%f, R=%f) --> %s\n" % (s, a, p, rewards[target], target))
        return out.getvalue()

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(states={len(self._states)}, "
            f"actions={len(self._actions)})"
        )
