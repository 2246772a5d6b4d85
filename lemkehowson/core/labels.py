"""
Variable indexing for the tableau pair.

A label is a signed integer l with 1 <= |l| <= dim1 + dim2. Magnitudes
1..dim1 are player A's strategies, dim1+1..dim1+dim2 are player B's.
A positive label is the mixed-strategy variable, a negative one is its
slack. Each label lives in exactly one tableau, at a fixed column.
"""
import numbers

from lemkehowson.exceptions import PreconditionError

TABLEAU_A = 0
TABLEAU_B = 1


def num_labels(dim1: int, dim2: int) -> int:
    """Number of primary variables n = dim1 + dim2."""
    return dim1 + dim2


def row_length(dim1: int, dim2: int) -> int:
    """Cells per tableau row: label, value and one coefficient per variable."""
    return dim1 + dim2 + 2


def tableau_of(label: int, dim1: int, dim2: int) -> int:
    """
    Index of the tableau holding the equation of a variable.

    Tableau A holds player A's slacks and player B's strategy variables,
    tableau B holds player B's slacks and player A's strategy variables.
    """
    if label > dim1 or -dim1 <= label < 0:
        return TABLEAU_A
    if label < -dim1 or 0 < label <= dim1:
        return TABLEAU_B
    raise PreconditionError(f"label {label} is not a valid variable label")


def column_of(label: int, dim1: int, dim2: int) -> int:
    """Column of a variable inside its tableau."""
    if 0 < label <= dim1:
        return 1 + dim2 + label
    if label > dim1:
        return 1 + label
    if -dim1 <= label < 0:
        return 1 - label
    if label < -dim1:
        return 1 - label - dim1
    raise PreconditionError(f"label {label} is not a valid variable label")


def player_of(label: int, dim1: int) -> int:
    """0 for player A's strategies (and their slacks), 1 for player B's."""
    return 0 if abs(label) <= dim1 else 1


def validate_start_label(label, dim1: int, dim2: int) -> int:
    """
    Check that a start label is an integer in [1, dim1 + dim2].

    Raises:
        PreconditionError: for anything else; out of range values are never clamped
    """
    if isinstance(label, bool) or not isinstance(label, numbers.Integral):
        raise PreconditionError(f"start label must be an integer, got {label!r}")
    n = num_labels(dim1, dim2)
    if not 1 <= label <= n:
        raise PreconditionError(
            f"Starting pivot must be a number between 1 and {n} (DIM1 + DIM2), got {label}"
        )
    return int(label)
