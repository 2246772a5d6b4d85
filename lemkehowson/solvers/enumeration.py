"""
Enumeration of the equilibria reachable by Lemke-Howson paths.

Starting from the artificial equilibrium we pivot on every label, store
each equilibrium found and, when it is new, recurse from it with the label
we just used as taboo (pivoting on it again would only lead back). The
tableaus are shared by the whole search: after each branch they are
restored by pivoting again on the same label, which retraces the path, so
no copy of the tableaus is ever made.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from lemkehowson.config import SolverConfig
from lemkehowson.core.tableau import TableauPair
from lemkehowson.solvers.pivoting import StepObserver, apply, undo
from lemkehowson.utils.equilibrium import Equilibrium
from lemkehowson.utils.equilibrium_store import EquilibriumStore

logger = logging.getLogger(__name__)


@dataclass
class EnumerationStats:
    pivot_runs: int = 0
    pivot_steps: int = 0
    max_depth: int = 0


@dataclass
class EnumerationResult:
    """
    Attributes:
        store: Distinct equilibria found, sorted by support
        stats: Counters of the search (runs include the restoring ones)
    """
    store: EquilibriumStore
    stats: EnumerationStats = field(default_factory=EnumerationStats)

    @property
    def equilibria(self) -> List[Equilibrium]:
        return self.store.to_list()

    def __len__(self):
        return len(self.store)

    def __iter__(self):
        return iter(self.store)


def _explore(tableaus: TableauPair,
             taboo: Optional[int],
             store: EquilibriumStore,
             stats: EnumerationStats,
             depth: int,
             on_step: Optional[StepObserver],
             trace_tableaus: bool) -> EquilibriumStore:
    stats.max_depth = max(stats.max_depth, depth)
    logger.debug("Exploring at depth %d (taboo=%s)", depth, taboo)

    for label in range(1, tableaus.num_labels + 1):
        if label == taboo:
            continue

        equilibrium, token = apply(tableaus, label, on_step=on_step, trace_tableaus=trace_tableaus)
        stats.pivot_runs += 1
        stats.pivot_steps += token.steps

        if not equilibrium.is_artificial:
            found = store.insert(equilibrium)
            if not found:
                logger.debug("New equilibrium %s from label %d at depth %d",
                             list(equilibrium.labels), label, depth)
                _explore(tableaus, label, store, stats, depth + 1, on_step, trace_tableaus)

        # back to the state this level started from
        stats.pivot_steps += undo(tableaus, token, on_step=on_step, trace_tableaus=trace_tableaus)
        stats.pivot_runs += 1

    return store


def all_reachable(tableaus: TableauPair,
                  taboo: Optional[int] = None,
                  store: Optional[EquilibriumStore] = None,
                  on_step: Optional[StepObserver] = None,
                  trace_tableaus: bool = False,
                  stats: Optional[EnumerationStats] = None) -> EquilibriumStore:
    """
    Collect every equilibrium reachable from the current tableau state.

    Args:
        tableaus: Tableaus at a known equilibrium (artificial at top level);
            mutated during the search and restored before returning
        taboo: Label not to pivot on, None for no restriction
        store: Store to add to, a new one by default
        on_step: Optional observer called after every pivot
        trace_tableaus: Log tableaus at every pivot (DEBUG level)
        stats: Optional counters updated in place

    Returns:
        The store, holding distinct equilibria (never the artificial one)
    """
    store = EquilibriumStore() if store is None else store
    stats = EnumerationStats() if stats is None else stats
    return _explore(tableaus, taboo, store, stats, 0, on_step, trace_tableaus)


def enumerate_equilibria(payoff_a,
                         payoff_b,
                         config: Optional[SolverConfig] = None,
                         on_step: Optional[StepObserver] = None) -> EnumerationResult:
    """
    All equilibria reachable from the artificial equilibrium.

    Args:
        payoff_a: Player A's payoff matrix (dim1 x dim2), all entries > 0
        payoff_b: Player B's payoff matrix (dim1 x dim2), all entries > 0
        config: Solver settings, defaults to SolverConfig()

    Returns:
        EnumerationResult with the sorted, deduplicated equilibria
    """
    config = config or SolverConfig()
    tableaus = TableauPair.from_payoffs(payoff_a, payoff_b, eps=config.eps,
                                        device=config.device, dtype=config.dtype)
    stats = EnumerationStats()
    store = all_reachable(tableaus, taboo=None, on_step=on_step,
                          trace_tableaus=config.trace_tableaus, stats=stats)
    logger.info("Found %d equilibria with %d pivot runs (%d steps, max depth %d)",
                len(store), stats.pivot_runs, stats.pivot_steps, stats.max_depth)
    return EnumerationResult(store, stats)
