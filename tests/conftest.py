"""Shared fixtures: small textbook games with known equilibria."""

# ---------------------------------------------------------------------------
# Ensure project root is on sys.path no matter where pytest is invoked from
# ---------------------------------------------------------------------------
import pathlib, sys
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import matplotlib
matplotlib.use("Agg")

import pytest

from lemkehowson.game.bimatrix_game import BimatrixGame


@pytest.fixture
def matching_pennies():
    """Zero-sum game whose only equilibrium is fully mixed."""
    return BimatrixGame([[1, -1], [-1, 1]], [[-1, 1], [1, -1]])


@pytest.fixture
def battle_of_sexes():
    """Two pure equilibria (1,3), (2,4) and one mixed equilibrium."""
    return BimatrixGame([[3, 0], [0, 2]], [[2, 0], [0, 3]])


@pytest.fixture
def prisoners_dilemma():
    """Strictly dominant strategies: unique equilibrium (defect, defect) = labels (2, 4)."""
    return BimatrixGame([[3, 0], [5, 1]], [[3, 5], [0, 1]])


@pytest.fixture
def trivial_game():
    """1x1 game with a single positive payoff per player."""
    return BimatrixGame([[1.0]], [[1.0]])
