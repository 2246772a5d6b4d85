"""
Lemke-Howson complementary pivoting on a TableauPair.

A run starts by bringing a chosen variable into the basis and then always
pivots on the complement of the variable that just left, until the start
label (or its complement) leaves the basis. The tableaus are left in the
state of the equilibrium reached, so running again from the same label
walks the same path backwards and restores the previous state.
"""
import logging
from dataclasses import dataclass
from typing import Callable, NamedTuple, Optional, Tuple

from lemkehowson.config import SolverConfig
from lemkehowson.core.labels import column_of, tableau_of, validate_start_label
from lemkehowson.core.tableau import TableauPair
from lemkehowson.exceptions import PivotingError
from lemkehowson.utils.equilibrium import Equilibrium, normalize
from lemkehowson.utils.formatting import format_tableaus

logger = logging.getLogger(__name__)

# on_step(step, entering_label, leaving_label, tableaus)
StepObserver = Callable[[int, int, int, TableauPair], None]


class LemkeHowsonResult(NamedTuple):
    equilibrium: Equilibrium
    steps: int


@dataclass(frozen=True)
class UndoToken:
    """Restores the tableaus to their state before an apply() call."""
    start_label: int
    steps: int


def resolve_pivot(tableaus: TableauPair, start_label: int) -> int:
    """
    Variable that actually enters the basis first.

    If start_label is already basic (we start from a real equilibrium
    rather than the artificial one) its complement enters instead.
    """
    if tableaus.is_basic(start_label):
        return -start_label
    return start_label


def _select_row(coefficients, values, eps: float) -> Optional[int]:
    """Minimum-ratio test; the first row attaining the minimum wins ties."""
    best_row = None
    best_ratio = 0.0
    for i, coeff in enumerate(coefficients):
        if coeff > -eps:
            continue
        ratio = -values[i] / coeff
        if best_row is None or ratio < best_ratio - eps:
            best_row = i
            best_ratio = ratio
    return best_row


def _pivot(tableaus: TableauPair, entering: int) -> Tuple[int, int]:
    dim1, dim2, eps = tableaus.dim1, tableaus.dim2, tableaus.eps
    tableau = tableaus[tableau_of(entering, dim1, dim2)]
    column = column_of(entering, dim1, dim2)

    index = _select_row(tableau[:, column].tolist(), tableau[:, 1].tolist(), eps)
    if index is None:
        raise PivotingError(
            f"minimum ratio test failed: no row has a negative coefficient for entering label {entering}; "
            "payoffs must be strictly positive"
        )

    leaving = int(tableau[index, 0].item())

    # Solve the selected equation for the entering variable
    row = tableau[index]
    row[column_of(leaving, dim1, dim2)] = -1.0
    row[0] = entering
    coeff = -row[column].item()
    row[1:] /= coeff
    row[column] = 0.0

    # Substitute it into every other equation of the tableau
    factors = tableau[:, column].clone()
    mask = factors.abs() > eps
    if mask.any():
        tableau[mask, 1:] += factors[mask].unsqueeze(1) * row[1:].unsqueeze(0)
        tableau[mask, column] = 0.0

    return leaving, index


def pivot_step(tableaus: TableauPair, entering: int) -> int:
    """
    Bring one variable into the basis.

    Args:
        tableaus: Tableaus to update in place
        entering: Label of the variable entering the basis

    Returns:
        Label of the variable that left the basis

    Raises:
        PivotingError: if no row passes the minimum-ratio test
    """
    leaving, _ = _pivot(tableaus, entering)
    return leaving


def lemke_howson(tableaus: TableauPair,
                 start_label: int,
                 on_step: Optional[StepObserver] = None,
                 trace_tableaus: bool = False) -> LemkeHowsonResult:
    """
    Run the Lemke-Howson algorithm from the current tableau state.

    Args:
        tableaus: Tableaus to pivot on; left at the equilibrium reached
        start_label: Label in [1, dim1 + dim2] to drop first
        on_step: Optional observer called after every pivot
        trace_tableaus: Log both tableaus before every pivot (DEBUG level)

    Returns:
        LemkeHowsonResult(equilibrium, steps)
    """
    start_label = validate_start_label(start_label, tableaus.dim1, tableaus.dim2)
    pivot = resolve_pivot(tableaus, start_label)
    logger.debug("Lemke-Howson from label %d, first pivot on %d", start_label, pivot)

    steps = 0
    while True:
        steps += 1
        if trace_tableaus and logger.isEnabledFor(logging.DEBUG):
            logger.debug("Step no. %d\n%s", steps, format_tableaus(tableaus))

        leaving, index = _pivot(tableaus, pivot)
        logger.debug("Step %d. Label in basis: %d. Label out of basis: %d. Index of row: %d",
                     steps, pivot, leaving, index)
        if on_step is not None:
            on_step(steps, pivot, leaving, tableaus)

        # complementary pivoting rule
        pivot = -leaving

        # the path closed: a real equilibrium, not an almost-complementary point
        if leaving == start_label or leaving == -start_label:
            break

    if trace_tableaus and logger.isEnabledFor(logging.DEBUG):
        logger.debug("Tableaus after Lemke-Howson execution\n%s", format_tableaus(tableaus))

    equilibrium = normalize(tableaus)
    logger.debug("Reached support %s in %d steps", list(equilibrium.labels), steps)
    return LemkeHowsonResult(equilibrium, steps)


def apply(tableaus: TableauPair,
          start_label: int,
          on_step: Optional[StepObserver] = None,
          trace_tableaus: bool = False) -> Tuple[Equilibrium, UndoToken]:
    """Run from start_label and return the equilibrium with a token that undoes the run."""
    equilibrium, steps = lemke_howson(tableaus, start_label, on_step=on_step, trace_tableaus=trace_tableaus)
    return equilibrium, UndoToken(start_label, steps)


def undo(tableaus: TableauPair,
         token: UndoToken,
         on_step: Optional[StepObserver] = None,
         trace_tableaus: bool = False) -> int:
    """
    Restore the tableaus to their state before the apply() that produced token.

    Pivoting again from the same label retraces the path in reverse.

    Returns:
        Number of pivot steps of the restoring run
    """
    _, steps = lemke_howson(tableaus, token.start_label, on_step=on_step, trace_tableaus=trace_tableaus)
    return steps


def run_lemke_howson(payoff_a,
                     payoff_b,
                     start_label: int,
                     config: Optional[SolverConfig] = None,
                     on_step: Optional[StepObserver] = None) -> LemkeHowsonResult:
    """
    Single Lemke-Howson run on a game with strictly positive payoffs.

    Args:
        payoff_a: Player A's payoff matrix (dim1 x dim2), all entries > 0
        payoff_b: Player B's payoff matrix (dim1 x dim2), all entries > 0
        start_label: Label in [1, dim1 + dim2] to drop first
        config: Solver settings, defaults to SolverConfig()

    Returns:
        LemkeHowsonResult(equilibrium, steps)

    Raises:
        PreconditionError: bad payoffs or start label, before any pivoting
    """
    config = config or SolverConfig()
    tableaus = TableauPair.from_payoffs(payoff_a, payoff_b, eps=config.eps,
                                        device=config.device, dtype=config.dtype)
    validate_start_label(start_label, tableaus.dim1, tableaus.dim2)
    result = lemke_howson(tableaus, start_label, on_step=on_step, trace_tableaus=config.trace_tableaus)
    logger.info("Lemke-Howson from label %d: %d steps, support size %d",
                start_label, result.steps, result.equilibrium.support_size)
    return result
