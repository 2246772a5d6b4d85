"""
Command line front end.

Runs the Lemke-Howson algorithm once from a chosen label (-p) or enumerates
every equilibrium reachable from the artificial one (-a), on a game read
from an .nfg file (-i) or a uniformly random game of size DIM1 x DIM2.
"""
import argparse
import logging
import sys
from typing import Optional, Sequence

from lemkehowson.config import DEFAULT_DIM, EPSILON, SolverConfig
from lemkehowson.exceptions import LemkeHowsonError, PivotingError
from lemkehowson.game.bimatrix_game import BimatrixGame
from lemkehowson.utils.formatting import (
    format_bimatrix, format_equilibrium, format_equilibrium_list,
    format_gambit, format_gambit_list, format_summary,
)
from lemkehowson.visualization import plot_equilibria

logger = logging.getLogger(__name__)

DEBUG_STEPS = 0x01
DEBUG_TABLEAUS = 0x02


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='lemkehowson',
        description='Nash equilibria of bimatrix games with the Lemke-Howson algorithm'
    )

    # Game source
    parser.add_argument('-i', '--input', type=str, default=None,
                        help='Game file in .nfg payoff format (by default generates a random game)')
    parser.add_argument('-w', '--dim1', type=int, default=DEFAULT_DIM,
                        help='Number of strategies of the first player of a random game')
    parser.add_argument('-l', '--dim2', type=int, default=DEFAULT_DIM,
                        help='Number of strategies of the second player of a random game')
    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed for the generated game')

    # What to compute
    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument('-p', '--pivot', type=int, default=None,
                      help='Execute the Lemke-Howson algorithm once, pivoting first on label PIVOT')
    mode.add_argument('-a', '--all', action='store_true',
                      help='Search all equilibria reachable by the Lemke-Howson algorithm')

    # Output
    parser.add_argument('-d', '--debug', type=int, default=0,
                        help='Debug mask: 1 logs entering/leaving labels, 2 also logs the tableaus')
    parser.add_argument('-G', '--gambit', action='store_true',
                        help='Gambit-style output, one "NE,..." line per equilibrium')
    parser.add_argument('-s', '--summary', action='store_true',
                        help='Print only the number of steps and the support size (single run only)')
    parser.add_argument('--plot', type=str, default=None,
                        help='Save a bar chart of the equilibria to this file')

    # Solver
    parser.add_argument('--eps', type=float, default=EPSILON,
                        help='Numerical tolerance of the pivoting engine')
    parser.add_argument('--device', type=str, default='cpu',
                        help='PyTorch device for the tableaus')

    return parser.parse_args(argv)


def configure_logging(debug_mask: int):
    level = logging.DEBUG if debug_mask else logging.WARNING
    logging.basicConfig(level=level, format='%(levelname)s %(name)s: %(message)s')


def load_game(args: argparse.Namespace) -> BimatrixGame:
    if args.input is not None:
        return BimatrixGame.from_nfg(args.input, device=args.device)
    return BimatrixGame.random(args.dim1, args.dim2, seed=args.seed, device=args.device)


def single_lemke_exec(game: BimatrixGame, args: argparse.Namespace, config: SolverConfig):
    equilibrium, steps = game.lemke_howson(args.pivot, config=config)

    if args.summary:
        print(format_summary(steps, equilibrium))
    elif args.gambit:
        print(format_gambit(equilibrium, game.dim1, game.dim2))
    else:
        print()
        print(format_equilibrium(equilibrium))
        print()

    if not args.summary:
        print(f"Number of complementary pivoting steps performed by the algorithm: {steps}")

    if args.plot:
        plot_equilibria(game, [equilibrium], path=args.plot)


def all_lemke_exec(game: BimatrixGame, args: argparse.Namespace, config: SolverConfig):
    result = game.enumerate_equilibria(config=config)

    if args.gambit:
        print(format_gambit_list(result.equilibria, game.dim1, game.dim2))
    else:
        print(format_equilibrium_list(result.equilibria))

    if args.plot:
        plot_equilibria(game, result.equilibria, path=args.plot)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.debug)

    try:
        config = SolverConfig(eps=args.eps, device=args.device,
                              trace_tableaus=bool(args.debug & DEBUG_TABLEAUS))
    except ValueError as exc:
        print(f"Invalid solver settings: {exc}", file=sys.stderr)
        return 1

    try:
        game = load_game(args)
        if args.debug & DEBUG_STEPS:
            logger.debug("Game read:\n%s", format_bimatrix(game.payoff_a, game.payoff_b))

        if args.pivot is not None:
            single_lemke_exec(game, args, config)
        else:
            all_lemke_exec(game, args, config)
    except PivotingError:
        logger.exception("Lemke-Howson aborted on an internal invariant violation")
        return 2
    except (LemkeHowsonError, OSError) as exc:
        print(str(exc), file=sys.stderr)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
