"""
Text rendering of games, tableaus and equilibria.
"""
from typing import Iterable, List

import torch
from tabulate import tabulate

from lemkehowson.core.labels import TABLEAU_A, TABLEAU_B
from lemkehowson.utils.equilibrium import Equilibrium

ORDINAL_SUFFIXES = ["st", "nd", "rd", "th"]


def format_equilibrium(equilibrium: Equilibrium, tablefmt: str = "plain") -> str:
    """Strategy / probability table of one equilibrium."""
    rows = [[label, prob] for label, prob in equilibrium]
    return tabulate(rows, headers=["Strategy", "Probability"], tablefmt=tablefmt, floatfmt=".7f")


def format_gambit(equilibrium: Equilibrium, dim1: int, dim2: int) -> str:
    """
    One comma separated line "NE,p1,...,pn" with a probability per label
    slot, zero outside the support, as printed by Gambit's solvers.
    """
    fields = ["NE"]
    for label in range(1, dim1 + dim2 + 1):
        prob = equilibrium.probability(label)
        fields.append(f"{prob:.8f}" if label in equilibrium.labels else "0")
    return ",".join(fields)


def format_summary(steps: int, equilibrium: Equilibrium) -> str:
    return f"{steps} {equilibrium.support_size}"


def ordinal(k: int) -> str:
    return f"{k}{ORDINAL_SUFFIXES[min(k, 4) - 1]}"


def format_equilibrium_list(equilibria: Iterable[Equilibrium], tablefmt: str = "plain") -> str:
    """Numbered listing ("1st equilibrium:", ...) of several equilibria."""
    blocks = []
    for k, equilibrium in enumerate(equilibria, start=1):
        blocks.append(f"{ordinal(k)} equilibrium:\n{format_equilibrium(equilibrium, tablefmt)}\n")
    return "\n".join(blocks)


def format_gambit_list(equilibria: Iterable[Equilibrium], dim1: int, dim2: int) -> str:
    return "\n".join(format_gambit(eq, dim1, dim2) for eq in equilibria)


def _matrix_rows(matrix: torch.Tensor) -> List[List[float]]:
    return matrix.detach().cpu().tolist()


def format_bimatrix(payoff_a: torch.Tensor, payoff_b: torch.Tensor, floatfmt: str = ".6f") -> str:
    """Both payoff matrices, one block per player."""
    return "\n\n".join([
        "Player A:\n" + tabulate(_matrix_rows(payoff_a), tablefmt="plain", floatfmt=floatfmt),
        "Player B:\n" + tabulate(_matrix_rows(payoff_b), tablefmt="plain", floatfmt=floatfmt),
    ])


def format_tableau(tableau: torch.Tensor, floatfmt: str = ".6f") -> str:
    headers = ["basis", "value"] + [f"c{j}" for j in range(2, tableau.shape[1])]
    rows = []
    for row in _matrix_rows(tableau):
        rows.append([int(row[0])] + row[1:])
    return tabulate(rows, headers=headers, tablefmt="simple", floatfmt=floatfmt)


def format_tableaus(tableaus, floatfmt: str = ".6f") -> str:
    return "\n\n".join([
        "First Tableau:\n" + format_tableau(tableaus[TABLEAU_A], floatfmt),
        "Second Tableau:\n" + format_tableau(tableaus[TABLEAU_B], floatfmt),
    ])
