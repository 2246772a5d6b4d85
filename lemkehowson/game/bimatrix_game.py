"""
Two-player game given by one payoff matrix per player.
"""
import logging
from typing import List, Optional

import numpy as np
import torch

from lemkehowson.config import DEFAULT_DEVICE, DEFAULT_DTYPE, SolverConfig
from lemkehowson.core.labels import validate_start_label
from lemkehowson.core.tableau import TableauPair, as_payoff_tensor
from lemkehowson.exceptions import PreconditionError
from lemkehowson.game.abstract_game import AbstractGame
from lemkehowson.game.nfg import read_nfg
from lemkehowson.solvers.enumeration import EnumerationResult, enumerate_equilibria
from lemkehowson.solvers.pivoting import LemkeHowsonResult, run_lemke_howson
from lemkehowson.utils.equilibrium import Equilibrium

logger = logging.getLogger(__name__)


class BimatrixGame(AbstractGame):
    """
    Bimatrix game. Player A picks a row, player B a column; payoff_a and
    payoff_b both have shape (dim1, dim2).

    Strategy labels follow the solver convention: A's strategies are
    1..dim1 and B's are dim1+1..dim1+dim2.
    """
    def __init__(self, payoff_a, payoff_b, strategy_names: Optional[List[List[str]]] = None,
                 device: str = DEFAULT_DEVICE, dtype: torch.dtype = DEFAULT_DTYPE):
        """
        inputs:
            payoff_a: Player A's payoffs (dim1 x dim2)
            payoff_b: Player B's payoffs (dim1 x dim2)
            strategy_names: Optional [names of A's strategies, names of B's strategies]
            device: PyTorch device
            dtype: Floating point type
        """
        self.device = device
        self.dtype = dtype
        self.payoff_a = as_payoff_tensor(payoff_a, device, dtype)
        self.payoff_b = as_payoff_tensor(payoff_b, device, dtype)
        if self.payoff_a.shape != self.payoff_b.shape:
            raise PreconditionError(
                f"payoff matrices must have the same shape, got {tuple(self.payoff_a.shape)} "
                f"and {tuple(self.payoff_b.shape)}"
            )
        self.dim1, self.dim2 = self.payoff_a.shape

        if strategy_names is None:
            strategy_names = [[f"A{i + 1}" for i in range(self.dim1)],
                              [f"B{j + 1}" for j in range(self.dim2)]]
        if len(strategy_names) != 2 or len(strategy_names[0]) != self.dim1 or len(strategy_names[1]) != self.dim2:
            raise PreconditionError("strategy_names must list dim1 names for A and dim2 names for B")
        self.strategy_names = [list(strategy_names[0]), list(strategy_names[1])]

    @classmethod
    def random(cls, dim1: int, dim2: int, seed: Optional[int] = None,
               low: float = -1.0, high: float = 1.0, device: str = DEFAULT_DEVICE) -> "BimatrixGame":
        """
        game with payoffs drawn uniformly from [low, high)
        """
        if dim1 < 1 or dim2 < 1:
            raise PreconditionError(f"game dimensions must be >= 1, got {dim1}x{dim2}")
        rng = np.random.default_rng(seed)
        payoff_a = rng.uniform(low, high, size=(dim1, dim2))
        payoff_b = rng.uniform(low, high, size=(dim1, dim2))
        return cls(payoff_a, payoff_b, device=device)

    @classmethod
    def from_nfg(cls, source, device: str = DEFAULT_DEVICE) -> "BimatrixGame":
        """
        reads a game from an .nfg file path, an open file, or the (multi-line) file text
        """
        payoff_a, payoff_b, strategy_names = read_nfg(source)
        return cls(payoff_a, payoff_b, strategy_names=strategy_names, device=device)

    @property
    def num_labels(self) -> int:
        return self.dim1 + self.dim2

    def min_payoff(self) -> float:
        return min(self.payoff_a.min().item(), self.payoff_b.min().item())

    def is_positive(self) -> bool:
        return bool((self.payoff_a > 0).all() and (self.payoff_b > 0).all())

    def rectified(self) -> "BimatrixGame":
        """
        copy of the game with every payoff shifted so the smallest becomes 1;
        equilibria are unchanged by a uniform shift
        """
        offset = 1.0 - self.min_payoff()
        logger.info("Rectifying payoffs with offset %.6f", offset)
        return BimatrixGame(self.payoff_a + offset, self.payoff_b + offset,
                            strategy_names=self.strategy_names, device=self.device, dtype=self.dtype)

    def create_tableaus(self, config: Optional[SolverConfig] = None) -> TableauPair:
        config = config or SolverConfig()
        return TableauPair.from_payoffs(self.payoff_a, self.payoff_b, eps=config.eps,
                                        device=config.device, dtype=config.dtype)

    def deviation_payoffs(self, x, y):
        x, y = self._as_mixtures(x, y)
        return self.payoff_a @ y, self.payoff_b.T @ x

    def equilibrium_regret(self, equilibrium: Equilibrium) -> float:
        x, y = equilibrium.strategies(self.dim1, self.dim2)
        return self.regret(x, y)

    def strategy_name(self, label: int) -> str:
        if 1 <= label <= self.dim1:
            return self.strategy_names[0][label - 1]
        if self.dim1 < label <= self.num_labels:
            return self.strategy_names[1][label - self.dim1 - 1]
        raise PreconditionError(f"label {label} is not a strategy of this game")

    def lemke_howson(self, start_label: int, config: Optional[SolverConfig] = None) -> LemkeHowsonResult:
        """
        rectifies the game and runs Lemke-Howson once from start_label
        """
        validate_start_label(start_label, self.dim1, self.dim2)
        game = self.rectified()
        return run_lemke_howson(game.payoff_a, game.payoff_b, start_label, config=config)

    def enumerate_equilibria(self, config: Optional[SolverConfig] = None) -> EnumerationResult:
        """
        rectifies the game and enumerates the equilibria reachable by Lemke-Howson
        """
        game = self.rectified()
        return enumerate_equilibria(game.payoff_a, game.payoff_b, config=config)

    def __repr__(self):
        return f"BimatrixGame(dim1={self.dim1}, dim2={self.dim2})"
