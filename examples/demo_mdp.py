"""Example: build the toy MDP and exercise its query API.

This script demonstrates:
1. Building a validated MDP from raw collections
2. Rendering every state -- action --> successor edge
3. Forward and inverse queries
4. Picking outcomes by cumulative weight
5. Building the same model with MDPBuilder
"""

import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from mdp_graph import MDPBuilder, action, state
from mdp_graph.CaseStudies import build_toy_mdp
from mdp_graph.Models import ProbabilityMassError


def main():
    print("=" * 60)
    print("Toy MDP")
    print("=" * 60)

    mdp = build_toy_mdp()
    print(mdp)
    print(f"States:  {sorted(mdp.states(), key=lambda s: s.name)}")
    print(f"Actions: {sorted(mdp.actions(), key=lambda a: a.name)}")
    print(f"P(. | two):          {dict(mdp.state_probability_map(action('two')))}")
    print(f"States taking one:   {sorted(mdp.states_to_action(action('one')), key=lambda s: s.name)}")
    print(f"Actions reaching a:  {sorted(mdp.actions_to_state(state('a')), key=lambda a: a.name)}")
    print(f"E[R | one]:          {mdp.expected_reward(action('one')):.3f}")

    print("\nOutcome of 'one' by cumulative weight:")
    for x in (0.0, 0.05, 0.1, 0.5, 0.99):
        outcome = mdp.outcome_at(action("one"), x)
        print(f"  x={x:<5} -> {outcome.state} (R={outcome.reward})")

    print("\nSame model via MDPBuilder:")
    built = (MDPBuilder()
             .allow("a", "one")
             .allow("b", "two")
             .allow("c", "one", "two")
             .add_transition("one", "b", 0.1, reward=2.0)
             .add_transition("one", "a", 0.9, reward=3.0)
             .add_transition("two", "a", 1.0, reward=5.0)
             .build())
    print(f"  {built!r}")
    print(f"  same transition model: {built.to_transition_model() == mdp.to_transition_model()}")

    print("\nInvalid model (final cumulative key 0.95):")
    try:
        build_toy_mdp(final_key=0.95)
    except ProbabilityMassError as e:
        print(f"  rejected: {e}")


if __name__ == "__main__":
    main()
