"""
Numeric constants and solver configuration.
"""
from dataclasses import dataclass

import torch

# Single tolerance shared by every zero/sign test of the pivoting engine:
# row eligibility in the minimum-ratio test, strict ratio improvement,
# the nonzero-coefficient test of the elimination step and the zero-total
# check of normalization. All of them must use the same value.
EPSILON = 1e-20

DEFAULT_DTYPE = torch.float64
DEFAULT_DEVICE = "cpu"

# Default size of a randomly generated game (matches the command line default)
DEFAULT_DIM = 10


@dataclass
class SolverConfig:
    """
    Settings for a Lemke-Howson run or enumeration.

    Attributes:
        eps: Tolerance used uniformly by the pivoting engine
        device: PyTorch device the tableaus live on
        dtype: Floating point type of the tableaus
        trace_tableaus: Log the full tableaus at every pivot step (DEBUG level)
    """
    eps: float = EPSILON
    device: str = DEFAULT_DEVICE
    dtype: torch.dtype = DEFAULT_DTYPE
    trace_tableaus: bool = False

    def __post_init__(self):
        if not self.eps > 0:
            raise ValueError(f"eps must be strictly positive, got {self.eps}")
