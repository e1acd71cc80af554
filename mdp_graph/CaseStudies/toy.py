"""Three-state, two-action example MDP."""

from typing import Tuple

from ..Models import MarkovDecisionProcess, state, action


def build_toy_mdp(final_key: float = 1.0, **kwargs) -> MarkovDecisionProcess:
    """
    Build the toy MDP

        a -> {one},  b -> {two},  c -> {one, two}
        one: 0.1 -> (b, 2.0), 1.0 -> (a, 3.0)
        two: 1.0 -> (a, 5.0)

    final_key : last cumulative key of `one`; anything but 1.0 makes the
                model invalid
    kwargs    : forwarded to MarkovDecisionProcess (e.g. config)
    """
    a, b, c = state("a"), state("b"), state("c")
    one, two = action("one"), action("two")

    actions_from_state = {
        a: {one},
        b: {two},
        c: {two, one},
    }
    states_from_action = {
        one: {0.1: (b, 2.0), final_key: (a, 3.0)},
        two: {1.0: (a, 5.0)},
    }
    return MarkovDecisionProcess({a, b, c}, {one, two}, actions_from_state, states_from_action, **kwargs)


def toy_identities() -> Tuple:
    """Return (a, b, c, one, two)."""
    return state("a"), state("b"), state("c"), action("one"), action("two")
