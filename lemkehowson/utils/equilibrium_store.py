"""
Sorted, support-deduplicated collection of equilibria.
"""
import bisect
import logging
from typing import Iterator, List, Tuple

import numpy as np

from lemkehowson.utils.equilibrium import Equilibrium

logger = logging.getLogger(__name__)


class EquilibriumStore:
    """
    Equilibria kept in ascending lexicographic order of their label sequence.

    Two equilibria with the same support compare equal whatever their
    probabilities are, so only the first one found is retained. For
    degenerate games this can merge distinct equilibria that share a support.
    """

    def __init__(self):
        self._keys: List[Tuple[int, ...]] = []
        self._equilibria: List[Equilibrium] = []

    def insert(self, equilibrium: Equilibrium) -> bool:
        """
        Insert an equilibrium unless one with the same support is present.

        Args:
            equilibrium: Equilibrium to add

        Returns:
            True if an equal-by-labels equilibrium was already stored (the
            argument is then not retained), False if it was inserted
        """
        key = equilibrium.labels
        index = bisect.bisect_left(self._keys, key)
        if self._matches(index, equilibrium):
            existing = self._equilibria[index]
            if not np.allclose(existing.probabilities, equilibrium.probabilities, atol=1e-6):
                logger.warning("Equilibria with support %s differ in probabilities; keeping the first one found",
                               list(key))
            return True
        self._keys.insert(index, key)
        self._equilibria.insert(index, equilibrium)
        return False

    def _matches(self, index: int, equilibrium: Equilibrium) -> bool:
        return index < len(self._equilibria) and self._equilibria[index].same_support(equilibrium)

    def __contains__(self, equilibrium: Equilibrium) -> bool:
        return self._matches(bisect.bisect_left(self._keys, equilibrium.labels), equilibrium)

    def __iter__(self) -> Iterator[Equilibrium]:
        return iter(self._equilibria)

    def __len__(self) -> int:
        return len(self._equilibria)

    def __getitem__(self, index: int) -> Equilibrium:
        return self._equilibria[index]

    def supports(self) -> List[Tuple[int, ...]]:
        return list(self._keys)

    def to_list(self) -> List[Equilibrium]:
        return list(self._equilibria)

    def __repr__(self):
        return f"EquilibriumStore(supports={self._keys})"
