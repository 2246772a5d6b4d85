"""
The pair of linear tableaus mutated in place by the pivoting engine.

Every row has dim1 + dim2 + 2 cells:
    cell 0      label of the variable basic in that row
    cell 1      current value of that basic variable
    cells 2..   coefficients of the other variables, at column_of(label)

Tableau A starts with player A's slacks in basis, tableau B with player B's.
"""
import logging
from typing import List, Optional, Set, Tuple

import numpy as np
import torch

from lemkehowson.config import EPSILON, DEFAULT_DEVICE, DEFAULT_DTYPE
from lemkehowson.core.labels import TABLEAU_A, TABLEAU_B, num_labels, row_length
from lemkehowson.exceptions import PreconditionError

logger = logging.getLogger(__name__)


def as_payoff_tensor(payoffs, device: str = DEFAULT_DEVICE, dtype: torch.dtype = DEFAULT_DTYPE) -> torch.Tensor:
    """Convert a payoff matrix (tensor, array or nested list) to a 2D float tensor."""
    if torch.is_tensor(payoffs):
        tensor = payoffs.detach().to(device=device, dtype=dtype)
    else:
        try:
            tensor = torch.as_tensor(np.asarray(payoffs, dtype=np.float64), dtype=dtype, device=device)
        except (TypeError, ValueError) as exc:
            raise PreconditionError(f"payoff matrix is not numeric: {exc}") from exc
    if tensor.dim() != 2:
        raise PreconditionError(f"payoff matrix must be 2-dimensional, got shape {tuple(tensor.shape)}")
    if tensor.shape[0] < 1 or tensor.shape[1] < 1:
        raise PreconditionError(f"payoff matrix dimensions must be >= 1, got shape {tuple(tensor.shape)}")
    if not torch.isfinite(tensor).all():
        raise PreconditionError("payoff matrix contains non-finite entries")
    return tensor


class TableauPair:
    """
    The two tableaus (T_A, T_B) plus the game dimensions and tolerance.

    A pair is owned by whoever is pivoting on it; the pivoting and
    enumeration routines mutate it in place and are not safe to interleave.
    """

    def __init__(self,
                 tableau_a: torch.Tensor,
                 tableau_b: torch.Tensor,
                 dim1: int,
                 dim2: int,
                 eps: float = EPSILON):
        width = row_length(dim1, dim2)
        if tuple(tableau_a.shape) != (dim1, width):
            raise PreconditionError(f"tableau A must have shape {(dim1, width)}, got {tuple(tableau_a.shape)}")
        if tuple(tableau_b.shape) != (dim2, width):
            raise PreconditionError(f"tableau B must have shape {(dim2, width)}, got {tuple(tableau_b.shape)}")
        self.tableaus = (tableau_a, tableau_b)
        self.dim1 = dim1
        self.dim2 = dim2
        self.eps = eps

    @classmethod
    def from_payoffs(cls,
                     payoff_a,
                     payoff_b,
                     eps: float = EPSILON,
                     device: str = DEFAULT_DEVICE,
                     dtype: torch.dtype = DEFAULT_DTYPE) -> "TableauPair":
        """
        Build the initial (artificial equilibrium) tableaus from two payoff matrices.

        Args:
            payoff_a: Player A's payoffs, shape (dim1, dim2), all entries > 0
            payoff_b: Player B's payoffs, shape (dim1, dim2), all entries > 0
            eps: Tolerance carried by the pair
            device: PyTorch device
            dtype: Floating point type

        Returns:
            TableauPair with every slack variable in basis at value 1
        """
        a = as_payoff_tensor(payoff_a, device, dtype)
        b = as_payoff_tensor(payoff_b, device, dtype)
        if a.shape != b.shape:
            raise PreconditionError(
                f"payoff matrices must have the same shape, got {tuple(a.shape)} and {tuple(b.shape)}"
            )
        if not (a > 0).all() or not (b > 0).all():
            raise PreconditionError("payoff entries must be strictly positive; rectify the game first")

        dim1, dim2 = a.shape
        width = row_length(dim1, dim2)

        tableau_a = torch.zeros((dim1, width), dtype=dtype, device=device)
        tableau_a[:, 0] = -torch.arange(1, dim1 + 1, dtype=dtype, device=device)
        tableau_a[:, 1] = 1.0
        tableau_a[:, dim1 + 2:] = -a

        tableau_b = torch.zeros((dim2, width), dtype=dtype, device=device)
        tableau_b[:, 0] = -torch.arange(dim1 + 1, dim1 + dim2 + 1, dtype=dtype, device=device)
        tableau_b[:, 1] = 1.0
        tableau_b[:, dim2 + 2:] = -b.T

        logger.debug("Built tableaus for a %dx%d game on %s", dim1, dim2, device)
        return cls(tableau_a, tableau_b, dim1, dim2, eps=eps)

    @property
    def num_labels(self) -> int:
        return num_labels(self.dim1, self.dim2)

    @property
    def device(self):
        return self.tableaus[TABLEAU_A].device

    def __getitem__(self, index: int) -> torch.Tensor:
        return self.tableaus[index]

    def num_rows(self, index: int) -> int:
        return self.dim1 if index == TABLEAU_A else self.dim2

    def labels(self, index: int) -> List[int]:
        """Basic labels of one tableau, in row order."""
        return [int(x) for x in self.tableaus[index][:, 0].tolist()]

    def basic_labels(self) -> Set[int]:
        return set(self.labels(TABLEAU_A)) | set(self.labels(TABLEAU_B))

    def is_basic(self, label: int) -> bool:
        return label in self.labels(TABLEAU_A) or label in self.labels(TABLEAU_B)

    def is_complementary(self) -> bool:
        """True iff for every l in 1..n exactly one of {l, -l} is basic."""
        basic = self.labels(TABLEAU_A) + self.labels(TABLEAU_B)
        if len(basic) != len(set(basic)):
            return False
        present = set(basic)
        return all((l in present) != (-l in present) for l in range(1, self.num_labels + 1))

    def duplicated_labels(self) -> List[int]:
        """Magnitudes l for which both l and -l are basic."""
        present = self.basic_labels()
        return [l for l in range(1, self.num_labels + 1) if l in present and -l in present]

    def missing_labels(self) -> List[int]:
        """Magnitudes l for which neither l nor -l is basic."""
        present = self.basic_labels()
        return [l for l in range(1, self.num_labels + 1) if l not in present and -l not in present]

    def support(self) -> Tuple[List[int], List[int]]:
        """Positive basic labels of each tableau (player A's, player B's)."""
        # strategies of player A are basic in tableau B and vice versa
        support_a = sorted(l for l in self.labels(TABLEAU_B) if l > 0)
        support_b = sorted(l for l in self.labels(TABLEAU_A) if l > 0)
        return support_a, support_b

    def clone(self) -> "TableauPair":
        return TableauPair(self.tableaus[TABLEAU_A].clone(),
                           self.tableaus[TABLEAU_B].clone(),
                           self.dim1, self.dim2, eps=self.eps)

    def allclose(self, other: "TableauPair", atol: Optional[float] = None) -> bool:
        """Same dimensions, same basic label in every row, and numerically equal cells."""
        if (self.dim1, self.dim2) != (other.dim1, other.dim2):
            return False
        atol = self.eps if atol is None else atol
        for mine, theirs in zip(self.tableaus, other.tableaus):
            if not torch.equal(mine[:, 0], theirs[:, 0]):
                return False
            if not torch.allclose(mine, theirs, rtol=0.0, atol=atol):
                return False
        return True

    def __repr__(self):
        return (f"TableauPair(dim1={self.dim1}, dim2={self.dim2}, "
                f"basis_a={self.labels(TABLEAU_A)}, basis_b={self.labels(TABLEAU_B)})")
