"""
Game representation module.
This module provides the two-player game classes consumed by the solvers.
"""

from lemkehowson.game.abstract_game import AbstractGame
from lemkehowson.game.bimatrix_game import BimatrixGame
