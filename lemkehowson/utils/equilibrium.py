"""
Equilibrium representation and extraction from converged tableaus.
"""
from dataclasses import dataclass
from typing import Iterator, List, Tuple

import numpy as np

from lemkehowson.core.labels import TABLEAU_A, TABLEAU_B, player_of
from lemkehowson.exceptions import PivotingError


@dataclass(frozen=True)
class Equilibrium:
    """
    A mixed-strategy pair as (label, probability) pairs sorted by label.

    Labels 1..dim1 are player A's strategies, dim1+1..dim1+dim2 player B's.
    Labels not listed are played with probability zero. The empty
    equilibrium is the artificial starting point, not a Nash equilibrium.
    """
    pairs: Tuple[Tuple[int, float], ...] = ()

    @classmethod
    def from_pairs(cls, pairs) -> "Equilibrium":
        ordered = sorted((int(label), float(prob)) for label, prob in pairs)
        labels = [label for label, _ in ordered]
        if len(labels) != len(set(labels)):
            raise ValueError(f"duplicate labels in equilibrium: {labels}")
        if any(label < 1 for label in labels):
            raise ValueError(f"equilibrium labels must be positive: {labels}")
        return cls(tuple(ordered))

    @property
    def labels(self) -> Tuple[int, ...]:
        """Support as a label sequence; this is the identity used by the store."""
        return tuple(label for label, _ in self.pairs)

    @property
    def probabilities(self) -> Tuple[float, ...]:
        return tuple(prob for _, prob in self.pairs)

    @property
    def is_artificial(self) -> bool:
        return len(self.pairs) == 0

    @property
    def support_size(self) -> int:
        return len(self.pairs)

    def probability(self, label: int) -> float:
        for l, prob in self.pairs:
            if l == label:
                return prob
        return 0.0

    def strategies(self, dim1: int, dim2: int) -> Tuple[np.ndarray, np.ndarray]:
        """Dense mixed strategies (x for player A, y for player B)."""
        x = np.zeros(dim1)
        y = np.zeros(dim2)
        for label, prob in self.pairs:
            if player_of(label, dim1) == 0:
                x[label - 1] = prob
            else:
                y[label - dim1 - 1] = prob
        return x, y

    def to_vector(self, num_labels: int) -> np.ndarray:
        """One probability per label slot 1..num_labels, zero outside the support."""
        vector = np.zeros(num_labels)
        for label, prob in self.pairs:
            vector[label - 1] = prob
        return vector

    def same_support(self, other: "Equilibrium") -> bool:
        return self.labels == other.labels

    def __iter__(self) -> Iterator[Tuple[int, float]]:
        return iter(self.pairs)

    def __len__(self) -> int:
        return len(self.pairs)


ARTIFICIAL_EQUILIBRIUM = Equilibrium()


def _player_pairs(tableau, eps: float) -> List[Tuple[int, float]]:
    labels = [int(x) for x in tableau[:, 0].tolist()]
    values = tableau[:, 1].tolist()
    support = [(label, value) for label, value in zip(labels, values) if label > 0]
    if not support:
        return []
    total = sum(value for _, value in support)
    if total <= eps:
        raise PivotingError(
            f"strategy total {total} is not positive for support {[l for l, _ in support]}; "
            "normalize called on a tableau that has not converged"
        )
    return [(label, value / total) for label, value in support]


def normalize(tableaus) -> Equilibrium:
    """
    Build the equilibrium encoded by converged tableaus.

    Rows with a positive basic label carry the unnormalized weights of a
    player's support; each player's weights are scaled to sum to one.

    Args:
        tableaus: Converged TableauPair

    Returns:
        Equilibrium sorted by label, empty if no strategy variable is basic
    """
    pairs = _player_pairs(tableaus[TABLEAU_A], tableaus.eps) + _player_pairs(tableaus[TABLEAU_B], tableaus.eps)
    return Equilibrium(tuple(sorted(pairs)))
