"""Tests for the enumeration of equilibria reachable by Lemke-Howson paths."""

import pathlib, sys
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from lemkehowson.exceptions import PreconditionError
from lemkehowson.solvers.enumeration import (
    EnumerationStats, all_reachable, enumerate_equilibria,
)
from lemkehowson.solvers.pivoting import lemke_howson
from lemkehowson.utils.equilibrium_store import EquilibriumStore


def _assert_normalized(eq, dim1):
    total_a = sum(p for label, p in eq if label <= dim1)
    total_b = sum(p for label, p in eq if label > dim1)
    assert total_a == pytest.approx(1.0, abs=1e-9)
    assert total_b == pytest.approx(1.0, abs=1e-9)


def test_matching_pennies_enumeration(matching_pennies):
    result = matching_pennies.enumerate_equilibria()
    assert len(result) == 1
    eq = result.equilibria[0]
    assert eq.labels == (1, 2, 3, 4)
    assert all(p == pytest.approx(0.5) for p in eq.probabilities)
    _assert_normalized(eq, 2)
    # 4 runs + 4 restorations at the top, 3 + 3 from the mixed equilibrium
    assert result.stats.pivot_runs == 14
    assert result.stats.max_depth == 1


def test_battle_of_sexes_finds_all_three(battle_of_sexes):
    result = battle_of_sexes.enumerate_equilibria()
    assert result.store.supports() == [(1, 2, 3, 4), (1, 3), (2, 4)]
    mixed = result.equilibria[0]
    assert mixed.probabilities == pytest.approx((0.6, 0.4, 0.4, 0.6))
    for eq in result:
        _assert_normalized(eq, 2)
        assert battle_of_sexes.equilibrium_regret(eq) < 1e-9


def test_unique_equilibrium_reached_from_every_label(prisoners_dilemma):
    result = prisoners_dilemma.enumerate_equilibria()
    assert result.store.supports() == [(2, 4)]
    game = prisoners_dilemma.rectified()
    for label in range(1, game.num_labels + 1):
        eq, _ = lemke_howson(game.create_tableaus(), label)
        assert eq.labels == (2, 4)


def test_enumeration_restores_tableaus(battle_of_sexes):
    t = battle_of_sexes.rectified().create_tableaus()
    initial = t.clone()
    store = all_reachable(t)
    assert len(store) == 3
    assert t.allclose(initial, atol=1e-9)


def test_taboo_label_is_skipped(matching_pennies):
    t = matching_pennies.rectified().create_tableaus()
    stats = EnumerationStats()
    store = all_reachable(t, taboo=1, stats=stats)
    assert store.supports() == [(1, 2, 3, 4)]
    # labels 2, 3, 4 at the top (run + restore each), then 3 + 3 from the equilibrium
    assert stats.pivot_runs == 12


def test_existing_store_is_extended(battle_of_sexes):
    t = battle_of_sexes.rectified().create_tableaus()
    store = EquilibriumStore()
    returned = all_reachable(t, store=store)
    assert returned is store
    assert len(store) == 3


def test_trivial_game_enumeration(trivial_game):
    result = enumerate_equilibria(trivial_game.payoff_a, trivial_game.payoff_b)
    assert [eq.pairs for eq in result] == [((1, 1.0), (2, 1.0))]


def test_enumeration_requires_positive_payoffs():
    with pytest.raises(PreconditionError):
        enumerate_equilibria([[0.0, 1.0]], [[1.0, 1.0]])


def test_enumeration_observer_sees_every_step(matching_pennies):
    game = matching_pennies.rectified()
    steps = []
    result = enumerate_equilibria(game.payoff_a, game.payoff_b,
                                  on_step=lambda step, entering, leaving, t: steps.append(step))
    assert len(steps) == result.stats.pivot_steps
    assert steps.count(1) == result.stats.pivot_runs
