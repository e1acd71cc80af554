"""Tests for OutcomeTable and ValidationConfig."""

import pytest

from mdp_graph.config import ValidationConfig
from mdp_graph.Models import (
    DanglingReferenceError,
    InvalidArgumentError,
    Outcome,
    OutcomeTable,
    ProbabilityMassError,
    StructuralMismatchError,
    action,
    state,
)

A, B, C = state("a"), state("b"), state("c")


def test_entries_are_sorted_by_cumulative_key():
    """Insertion order does not matter; the table is ordered by key."""
    table = OutcomeTable({1.0: (A, 3.0), 0.1: (B, 2.0)})
    assert table.keys() == (0.1, 1.0)
    assert table.outcomes() == (Outcome(B, 2.0), Outcome(A, 3.0))
    assert len(table) == 2
    assert list(table) == [(0.1, Outcome(B, 2.0)), (1.0, Outcome(A, 3.0))]


def test_accepts_triples():
    table = OutcomeTable([(1.0, A, 1.0), (0.25, B, -1.0)])
    assert table.keys() == (0.25, 1.0)
    assert table.outcomes()[0].reward == -1.0


def test_probabilities_are_successive_differences():
    table = OutcomeTable({0.2: (A, 0.0), 0.5: (B, 0.0), 1.0: (C, 0.0)})
    assert table.probabilities() == pytest.approx((0.2, 0.3, 0.5))
    assert sum(table.probabilities()) == pytest.approx(1.0)


def test_lookup_finds_smallest_key_at_or_above_weight():
    table = OutcomeTable({0.2: (A, 1.0), 0.5: (B, 2.0), 1.0: (C, 3.0)})
    assert table.lookup(0.0).state == A
    assert table.lookup(0.2).state == A
    assert table.lookup(0.2000001).state == B
    assert table.lookup(0.5).state == B
    assert table.lookup(0.75).state == C
    assert table.lookup(1.0).state == C


def test_lookup_past_final_key_within_tolerance():
    """A final key just below 1.0 still maps the top of [0, 1] to the last outcome."""
    table = OutcomeTable({0.5: (A, 0.0), 1.0 - 1e-12: (B, 0.0)})
    assert table.lookup(1.0).state == B


@pytest.mark.parametrize("x", [-0.1, 1.5, None, "0.3"])
def test_lookup_rejects_out_of_range_weight(x):
    table = OutcomeTable({1.0: (A, 0.0)})
    with pytest.raises(InvalidArgumentError):
        table.lookup(x)


@pytest.mark.parametrize("entries", [
    {0.5: (A, 0.0), 0.95: (B, 0.0)},          # does not reach 1.0
    {0.0: (A, 0.0), 1.0: (B, 0.0)},           # zero key
    {-0.2: (A, 0.0), 1.0: (B, 0.0)},          # negative key
    {0.5: (A, 0.0), 1.2: (B, 0.0)},           # past 1.0
    [(0.5, A, 0.0), (0.5, B, 0.0), (1.0, C, 0.0)],  # repeated key
    {float("nan"): (A, 0.0), 1.0: (B, 0.0)},
    {},
])
def test_invalid_probability_mass(entries):
    with pytest.raises(ProbabilityMassError):
        OutcomeTable(entries)


def test_non_numeric_key_rejected():
    with pytest.raises(ProbabilityMassError):
        OutcomeTable({"1.0": (A, 0.0)})


def test_missing_reward_rejected():
    with pytest.raises(InvalidArgumentError):
        OutcomeTable({1.0: (A, None)})


def test_malformed_pair_rejected():
    with pytest.raises(InvalidArgumentError):
        OutcomeTable({1.0: (A,)})
    with pytest.raises(InvalidArgumentError):
        OutcomeTable({1.0: None})
    with pytest.raises(InvalidArgumentError):
        OutcomeTable({1.0: 5})


def test_malformed_triples_rejected():
    with pytest.raises(InvalidArgumentError):
        OutcomeTable([7])
    with pytest.raises(InvalidArgumentError):
        OutcomeTable([(1.0, A)])
    with pytest.raises(InvalidArgumentError):
        OutcomeTable(5)
    with pytest.raises(InvalidArgumentError):
        OutcomeTable.from_probabilities([A])


def test_target_must_be_a_state():
    """An action as successor is a dangling state reference; a bare name is malformed."""
    with pytest.raises(DanglingReferenceError):
        OutcomeTable({1.0: (action("a"), 1.0)})
    with pytest.raises(InvalidArgumentError):
        OutcomeTable({1.0: ("a", 1.0)})


@pytest.mark.parametrize("reward", [float("nan"), float("inf"), -float("inf")])
def test_non_finite_reward_rejected(reward):
    with pytest.raises(InvalidArgumentError):
        OutcomeTable({1.0: (A, reward)})
    with pytest.raises(InvalidArgumentError):
        OutcomeTable.from_probabilities([(A, 1.0, reward)])


def test_none_table_rejected():
    with pytest.raises(InvalidArgumentError):
        OutcomeTable(None)


def test_tolerance_for_final_key():
    """Rounding drift at the end is accepted up to the configured tolerance."""
    drift = sum([0.1] * 10)  # 0.9999999999999999
    OutcomeTable({0.1: (A, 0.0), 0.3: (B, 0.0), drift: (C, 0.0)})

    strict = ValidationConfig(probability_tolerance=0.0)
    with pytest.raises(ProbabilityMassError):
        OutcomeTable({0.1: (A, 0.0), 0.3: (B, 0.0), drift: (C, 0.0)}, config=strict)
    OutcomeTable({0.1: (A, 0.0), 1.0: (B, 0.0)}, config=strict)

    loose = ValidationConfig(probability_tolerance=0.1)
    OutcomeTable({0.5: (A, 0.0), 0.95: (B, 0.0)}, config=loose)


def test_negative_tolerance_rejected():
    with pytest.raises(InvalidArgumentError):
        ValidationConfig(probability_tolerance=-1e-3)


def test_from_probabilities_accumulates_masses():
    table = OutcomeTable.from_probabilities([(B, 0.1, 2.0), (A, 0.9, 3.0)])
    assert table.keys() == pytest.approx((0.1, 1.0))
    assert table.lookup(0.05).state == B
    assert table.lookup(0.5).state == A
    assert dict(table.probability_map()) == pytest.approx({B: 0.1, A: 0.9})


def test_from_probabilities_handles_rounding_drift():
    table = OutcomeTable.from_probabilities([(A, 0.1, 0.0)] * 10)
    assert sum(table.probabilities()) == pytest.approx(1.0)


@pytest.mark.parametrize("p", [0.0, -0.5, None])
def test_from_probabilities_rejects_non_positive_mass(p):
    with pytest.raises(ProbabilityMassError):
        OutcomeTable.from_probabilities([(A, p, 0.0), (B, 1.0, 0.0)])


def test_duplicate_targets_last_entry_wins():
    """reward_map/probability_map keep the later entry for a repeated successor."""
    table = OutcomeTable({0.3: (A, 1.0), 0.6: (B, 2.0), 1.0: (A, 5.0)})
    assert table.targets() == frozenset({A, B})
    assert dict(table.reward_map()) == {A: 5.0, B: 2.0}
    assert dict(table.probability_map()) == pytest.approx({A: 0.4, B: 0.3})
    # the full distribution is still intact
    assert table.probabilities() == pytest.approx((0.3, 0.3, 0.4))
    assert table.expected_reward() == pytest.approx(0.3 * 1.0 + 0.3 * 2.0 + 0.4 * 5.0)


def test_duplicate_targets_rejected_when_configured():
    config = ValidationConfig(reject_duplicate_targets=True)
    with pytest.raises(StructuralMismatchError):
        OutcomeTable({0.3: (A, 1.0), 1.0: (A, 5.0)}, config=config)


def test_views_are_read_only():
    table = OutcomeTable({1.0: (A, 1.0)})
    with pytest.raises(TypeError):
        table.reward_map()[A] = 2.0
    with pytest.raises(TypeError):
        table.probability_map()[B] = 0.0
    with pytest.raises(AttributeError):
        table._keys = (0.5,)
    with pytest.raises(ValueError):
        table._cumulative[0] = 0.5


def test_equality_and_hash():
    t1 = OutcomeTable({0.1: (B, 2.0), 1.0: (A, 3.0)})
    t2 = OutcomeTable([(1.0, A, 3.0), (0.1, B, 2.0)])
    assert t1 == t2
    assert hash(t1) == hash(t2)
    assert t1 != OutcomeTable({1.0: (A, 3.0)})
