"""
Unit tests for the pivoting engine: single pivot steps, full Lemke-Howson
runs, apply/undo and the precondition checks.
"""

import pathlib, sys
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
import torch

from lemkehowson.config import SolverConfig
from lemkehowson.core.labels import TABLEAU_A, TABLEAU_B
from lemkehowson.core.tableau import TableauPair
from lemkehowson.exceptions import PivotingError, PreconditionError
from lemkehowson.solvers.pivoting import (
    UndoToken, apply, lemke_howson, pivot_step, resolve_pivot, run_lemke_howson, undo,
)


def _close(eq, expected, tol=1e-9):
    assert eq.labels == tuple(label for label, _ in expected)
    for (_, p), (_, q) in zip(eq, expected):
        assert abs(p - q) <= tol


# ---------------------------------------------------------------------------
# Single pivot step
# ---------------------------------------------------------------------------

def test_pivot_step_on_trivial_game():
    t = TableauPair.from_payoffs([[1.0]], [[1.0]])
    leaving = pivot_step(t, 1)
    assert leaving == -2
    assert t[TABLEAU_B][0].tolist() == [1.0, 1.0, -1.0, 0.0]
    # other tableau untouched
    assert t[TABLEAU_A][0].tolist() == [-1.0, 1.0, 0.0, -1.0]


def test_pivot_step_minimum_ratio_and_elimination():
    # matching pennies, rectified
    t = TableauPair.from_payoffs([[3.0, 1.0], [1.0, 3.0]], [[1.0, 3.0], [3.0, 1.0]])
    leaving = pivot_step(t, 1)
    # row 1 of tableau B has ratio 1/3 < 1 and leaves
    assert leaving == -4
    assert t.labels(TABLEAU_B) == [-3, 1]
    expected_row1 = [1.0, 1 / 3, 0.0, -1 / 3, 0.0, -1 / 3]
    expected_row0 = [-3.0, 2 / 3, 0.0, 1 / 3, 0.0, -8 / 3]
    assert torch.allclose(t[TABLEAU_B][1], torch.tensor(expected_row1, dtype=torch.float64))
    assert torch.allclose(t[TABLEAU_B][0], torch.tensor(expected_row0, dtype=torch.float64))


def test_minimum_ratio_tie_goes_to_first_row():
    # both rows of tableau B have ratio 1/2 for label 1
    t = TableauPair.from_payoffs([[1.0, 1.0], [1.0, 1.0]], [[2.0, 2.0], [1.0, 1.0]])
    assert pivot_step(t, 1) == -3


def test_pivot_step_without_eligible_row_raises():
    t = TableauPair(torch.tensor([[-1.0, 1.0, 0.0, -1.0]], dtype=torch.float64),
                    torch.tensor([[-2.0, 1.0, 0.0, 1.0]], dtype=torch.float64),
                    1, 1)
    with pytest.raises(PivotingError):
        pivot_step(t, 1)


def test_resolve_pivot():
    t = TableauPair.from_payoffs([[1.0]], [[1.0]])
    assert resolve_pivot(t, 1) == 1
    pivot_step(t, 1)
    assert resolve_pivot(t, 1) == -1
    assert resolve_pivot(t, 2) == 2


# ---------------------------------------------------------------------------
# Full runs
# ---------------------------------------------------------------------------

def test_trivial_game_run(trivial_game):
    t = trivial_game.create_tableaus()
    equilibrium, steps = lemke_howson(t, 1)
    # -2 leaves first, then -1 closes the path
    assert steps == 2
    assert equilibrium.pairs == ((1, 1.0), (2, 1.0))
    assert t.is_complementary()


def test_trivial_game_run_from_second_label(trivial_game):
    equilibrium, steps = lemke_howson(trivial_game.create_tableaus(), 2)
    assert steps == 2
    assert equilibrium.pairs == ((1, 1.0), (2, 1.0))


def test_matching_pennies_run(matching_pennies):
    equilibrium, steps = matching_pennies.lemke_howson(1)
    assert steps == 4
    _close(equilibrium, [(1, 0.5), (2, 0.5), (3, 0.5), (4, 0.5)])


def test_prisoners_dilemma_from_every_label(prisoners_dilemma):
    for label in range(1, 5):
        equilibrium, steps = prisoners_dilemma.lemke_howson(label)
        _close(equilibrium, [(2, 1.0), (4, 1.0)])
        assert steps >= 1
    _, steps = prisoners_dilemma.lemke_howson(1)
    assert steps == 3


def test_battle_of_sexes_equilibria_have_zero_regret(battle_of_sexes):
    for label in range(1, 5):
        equilibrium, _ = battle_of_sexes.lemke_howson(label)
        assert not equilibrium.is_artificial
        assert battle_of_sexes.equilibrium_regret(equilibrium) < 1e-9


def test_runs_are_deterministic(battle_of_sexes):
    game = battle_of_sexes.rectified()
    for label in range(1, 5):
        first = lemke_howson(game.create_tableaus(), label)
        second = lemke_howson(game.create_tableaus(), label)
        assert first.steps == second.steps
        assert first.equilibrium == second.equilibrium


@pytest.mark.parametrize("label", [0, 3, -1])
def test_out_of_range_start_label_is_rejected(label):
    with pytest.raises(PreconditionError):
        run_lemke_howson([[1.0]], [[1.0]], label)


def test_rejected_start_label_leaves_tableaus_untouched(trivial_game):
    t = trivial_game.create_tableaus()
    before = t.clone()
    with pytest.raises(PreconditionError):
        lemke_howson(t, 3)
    assert t.allclose(before)


def test_game_rejects_start_label_before_rectifying(prisoners_dilemma):
    with pytest.raises(PreconditionError):
        prisoners_dilemma.lemke_howson(0)
    with pytest.raises(PreconditionError):
        prisoners_dilemma.lemke_howson(prisoners_dilemma.num_labels + 1)


def test_run_requires_positive_payoffs():
    with pytest.raises(PreconditionError):
        run_lemke_howson([[1.0, -1.0], [-1.0, 1.0]], [[-1.0, 1.0], [1.0, -1.0]], 1)


def test_almost_complementary_path(battle_of_sexes):
    t = battle_of_sexes.rectified().create_tableaus()
    start = 2
    seen = []

    def observer(step, entering, leaving, tableaus):
        seen.append((step, entering, leaving))
        if leaving in (start, -start):
            assert tableaus.is_complementary()
        else:
            # start label and its complement are both basic, one label is missing
            assert tableaus.duplicated_labels() == [start]
            assert len(tableaus.missing_labels()) == 1

    _, steps = lemke_howson(t, start, on_step=observer)
    assert [s for s, _, _ in seen] == list(range(1, steps + 1))
    # complementary pivoting rule
    for (_, _, leaving), (_, entering, _) in zip(seen, seen[1:]):
        assert entering == -leaving


@pytest.mark.parametrize("label", [1, 2, 3, 4])
def test_basic_values_stay_feasible_on_large_payoffs(label):
    # coefficients scale like 1/payoff, here around 1e-13
    payoff_a = [[1e13, 2e13], [3e13, 1.0]]
    payoff_b = [[2e13, 1.0], [1e13, 3e13]]
    lowest = []

    def observer(step, entering, leaving, tableaus):
        lowest.append(min(tableaus[TABLEAU_A][:, 1].min().item(),
                          tableaus[TABLEAU_B][:, 1].min().item()))
        assert lowest[-1] >= -tableaus.eps

    equilibrium, steps = run_lemke_howson(payoff_a, payoff_b, label, on_step=observer)
    assert len(lowest) == steps
    assert not equilibrium.is_artificial
    x, y = equilibrium.strategies(2, 2)
    assert x.sum() == pytest.approx(1.0)
    assert y.sum() == pytest.approx(1.0)


def test_trace_tableaus_logs(caplog, matching_pennies):
    t = matching_pennies.rectified().create_tableaus()
    with caplog.at_level("DEBUG", logger="lemkehowson.solvers.pivoting"):
        lemke_howson(t, 1, trace_tableaus=True)
    assert "First Tableau" in caplog.text
    assert "Label out of basis" in caplog.text


# ---------------------------------------------------------------------------
# Reversibility
# ---------------------------------------------------------------------------

def test_running_twice_restores_initial_tableaus(battle_of_sexes):
    game = battle_of_sexes.rectified()
    for label in range(1, 5):
        t = game.create_tableaus()
        initial = t.clone()
        lemke_howson(t, label)
        assert not t.allclose(initial, atol=1e-9)
        lemke_howson(t, label)
        assert t.allclose(initial, atol=1e-9)


def test_apply_undo_from_a_real_equilibrium(battle_of_sexes):
    t = battle_of_sexes.rectified().create_tableaus()
    lemke_howson(t, 1)
    snapshot = t.clone()
    for label in range(2, 5):
        equilibrium, token = apply(t, label)
        assert token == UndoToken(label, token.steps)
        restore_steps = undo(t, token)
        assert restore_steps == token.steps
        assert t.allclose(snapshot, atol=1e-9)


def test_config_eps_reaches_tableaus(trivial_game):
    config = SolverConfig(eps=1e-8)
    t = trivial_game.create_tableaus(config)
    assert t.eps == 1e-8


def test_config_rejects_non_positive_eps():
    with pytest.raises(ValueError):
        SolverConfig(eps=0.0)
