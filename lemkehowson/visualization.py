"""
Visualization utilities for Lemke-Howson results.
This module provides functions for plotting equilibria and pivot paths.
"""
import logging
from typing import List, Optional, Sequence, Tuple

import numpy as np
import matplotlib.pyplot as plt

from lemkehowson.game.bimatrix_game import BimatrixGame
from lemkehowson.utils.equilibrium import Equilibrium

logger = logging.getLogger(__name__)


def plot_equilibria(game: BimatrixGame,
                    equilibria: Sequence[Equilibrium],
                    path: Optional[str] = None,
                    show: bool = False):
    """
    Plot the probability of every strategy in each equilibrium.

    Args:
        game: The game the equilibria belong to
        equilibria: Equilibria to display, one group of bars each
        path: If given, save the figure there
        show: Call plt.show() after drawing

    Returns:
        The matplotlib figure, or None if there is nothing to plot
    """
    if not equilibria:
        logger.warning("No equilibria to display")
        return None

    n_equilibria = len(equilibria)
    labels = list(range(1, game.num_labels + 1))
    names = [game.strategy_name(label) for label in labels]

    fig, ax = plt.subplots(figsize=(max(6, game.num_labels * 0.8), 5))

    x = np.arange(len(labels))
    width = 0.8 / n_equilibria

    for i, equilibrium in enumerate(equilibria):
        probs = equilibrium.to_vector(game.num_labels)
        offset = (i - n_equilibria / 2 + 0.5) * width
        ax.bar(x + offset, probs, width, alpha=0.7,
               label=f'Eq {i+1} (support {len(equilibrium)})')

    # separate the two players' strategies
    ax.axvline(game.dim1 - 0.5, color='grey', linestyle='--', linewidth=1)

    ax.set_xlabel('Strategy')
    ax.set_ylabel('Probability')
    ax.set_title('Equilibria reachable by Lemke-Howson')
    ax.set_xticks(x)
    ax.set_xticklabels(names, rotation=45, ha='right')
    ax.set_ylim(0, 1.05)
    ax.legend()

    fig.tight_layout()
    if path is not None:
        fig.savefig(path)
        logger.info("Saved equilibrium plot to %s", path)
    if show:
        plt.show()
    return fig


def plot_pivot_path(steps: List[Tuple[int, int, int]],
                    title: str = 'Pivot Path',
                    path: Optional[str] = None,
                    show: bool = False):
    """
    Plot the entering and leaving labels of a run, step by step.

    Args:
        steps: (step, entering, leaving) triples, e.g. recorded with an on_step observer
        title: Title for the plot
        path: If given, save the figure there
        show: Call plt.show() after drawing
    """
    if not steps:
        logger.warning("No pivot steps to display")
        return None

    trace = np.array(steps)

    fig, ax = plt.subplots(figsize=(10, 5))
    ax.plot(trace[:, 0], trace[:, 1], marker='o', linewidth=2, label='entering')
    ax.plot(trace[:, 0], trace[:, 2], marker='x', linewidth=2, label='leaving')
    ax.axhline(0, color='grey', linewidth=1)

    ax.set_xlabel('Step')
    ax.set_ylabel('Label (negative = slack)')
    ax.set_title(title)
    ax.legend()

    fig.tight_layout()
    if path is not None:
        fig.savefig(path)
    if show:
        plt.show()
    return fig
