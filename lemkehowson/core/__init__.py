"""
Tableau state and variable indexing for the pivoting engine.
"""
from lemkehowson.core.labels import TABLEAU_A, TABLEAU_B, tableau_of, column_of, validate_start_label
from lemkehowson.core.tableau import TableauPair

__all__ = [
    'TABLEAU_A',
    'TABLEAU_B',
    'tableau_of',
    'column_of',
    'validate_start_label',
    'TableauPair',
]
