"""
Equilibrium containers and text rendering.
"""
from .equilibrium import Equilibrium, ARTIFICIAL_EQUILIBRIUM, normalize
from .equilibrium_store import EquilibriumStore

__all__ = [
    'Equilibrium',
    'ARTIFICIAL_EQUILIBRIUM',
    'normalize',
    'EquilibriumStore',
]
