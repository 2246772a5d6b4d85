import torch
from abc import ABC, abstractmethod


class AbstractGame(ABC):
    """
    abstract base class for two-player games.
    """
    @abstractmethod
    def deviation_payoffs(self, x, y):
        '''
        calculates expected payoff of every pure strategy against the opponent's mixture
        arguments:
            x: player A's mixed strategy
            y: player B's mixed strategy
        returns:
            (payoffs of A's pure strategies against y, payoffs of B's pure strategies against x)
        '''
        pass

    def expected_payoffs(self, x, y):
        """
        expected payoff of each player when both play their mixtures
        """
        x, y = self._as_mixtures(x, y)
        dev_a, dev_b = self.deviation_payoffs(x, y)
        return torch.dot(x, dev_a).item(), torch.dot(y, dev_b).item()

    def deviation_gains(self, x, y):
        """
        calculate the gain from deviating to each pure strategy
        args:
            x: player A's mixed strategy
            y: player B's mixed strategy
        returns:
            non-negative gains for each of A's and each of B's pure strategies
        """
        x, y = self._as_mixtures(x, y)
        dev_a, dev_b = self.deviation_payoffs(x, y)
        gains_a = torch.clamp(dev_a - torch.dot(x, dev_a), min=0)
        gains_b = torch.clamp(dev_b - torch.dot(y, dev_b), min=0)
        return gains_a, gains_b

    def regret(self, x, y):
        """
        largest gain any player can get by a unilateral pure deviation;
        zero (up to round-off) at a Nash equilibrium
        """
        gains_a, gains_b = self.deviation_gains(x, y)
        return max(gains_a.max().item(), gains_b.max().item())

    def _as_mixtures(self, x, y):
        x = torch.as_tensor(x, dtype=self.dtype, device=self.device)
        y = torch.as_tensor(y, dtype=self.dtype, device=self.device)
        return x, y
