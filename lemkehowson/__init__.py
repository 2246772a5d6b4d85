"""
Nash equilibria of bimatrix games with the Lemke-Howson algorithm.

Public symbols are imported lazily the first time they are accessed so that
importing the package does not pull in torch, tabulate or matplotlib.
"""

from importlib import import_module
from typing import Any

__version__ = "0.1.0"

__all__ = [
    # Games
    "BimatrixGame",

    # Tableaus and equilibria
    "TableauPair", "Equilibrium", "EquilibriumStore", "normalize",

    # Solvers
    "lemke_howson", "pivot_step", "resolve_pivot", "apply", "undo",
    "run_lemke_howson", "all_reachable", "enumerate_equilibria",

    # Configuration and errors
    "SolverConfig", "EPSILON",
    "LemkeHowsonError", "PreconditionError", "PivotingError", "NFGFormatError",
]

_LOCATIONS = {
    "BimatrixGame": "lemkehowson.game.bimatrix_game",
    "TableauPair": "lemkehowson.core.tableau",
    "Equilibrium": "lemkehowson.utils.equilibrium",
    "normalize": "lemkehowson.utils.equilibrium",
    "EquilibriumStore": "lemkehowson.utils.equilibrium_store",
    "lemke_howson": "lemkehowson.solvers.pivoting",
    "pivot_step": "lemkehowson.solvers.pivoting",
    "resolve_pivot": "lemkehowson.solvers.pivoting",
    "apply": "lemkehowson.solvers.pivoting",
    "undo": "lemkehowson.solvers.pivoting",
    "run_lemke_howson": "lemkehowson.solvers.pivoting",
    "all_reachable": "lemkehowson.solvers.enumeration",
    "enumerate_equilibria": "lemkehowson.solvers.enumeration",
    "SolverConfig": "lemkehowson.config",
    "EPSILON": "lemkehowson.config",
    "LemkeHowsonError": "lemkehowson.exceptions",
    "PreconditionError": "lemkehowson.exceptions",
    "PivotingError": "lemkehowson.exceptions",
    "NFGFormatError": "lemkehowson.exceptions",
}


def __getattr__(name: str) -> Any:
    """Dynamically import sub-symbols on first access."""
    if name in _LOCATIONS:
        return getattr(import_module(_LOCATIONS[name]), name)
    raise AttributeError(f"module 'lemkehowson' has no attribute '{name}'")
