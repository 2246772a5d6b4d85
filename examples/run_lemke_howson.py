"""
Example script for computing equilibria of classic bimatrix games.

Runs Lemke-Howson from every label on a small textbook game, enumerates the
equilibria reachable from the artificial one and saves them as JSON.
"""
import argparse
import json
import os

from lemkehowson.game.bimatrix_game import BimatrixGame
from lemkehowson.utils.formatting import format_equilibrium_list
from lemkehowson.visualization import plot_equilibria

GAMES = {
    'matching_pennies': ([[1, -1], [-1, 1]], [[-1, 1], [1, -1]]),
    'battle_of_sexes': ([[3, 0], [0, 2]], [[2, 0], [0, 3]]),
    'prisoners_dilemma': ([[3, 0], [5, 1]], [[3, 5], [0, 1]]),
    'rock_paper_scissors': ([[0, -1, 1], [1, 0, -1], [-1, 1, 0]],
                            [[0, 1, -1], [-1, 0, 1], [1, -1, 0]]),
}


def parse_args():
    parser = argparse.ArgumentParser(
        description='Run Lemke-Howson on a textbook bimatrix game'
    )
    parser.add_argument('--game', type=str, default='battle_of_sexes', choices=sorted(GAMES),
                        help='Which game to solve')
    parser.add_argument('--output_dir', type=str, default='results/lemke_howson',
                        help='Directory to save equilibria and plots')
    parser.add_argument('--visualize', action='store_true',
                        help='Save a bar chart of the equilibria found')
    return parser.parse_args()


def main():
    args = parse_args()
    os.makedirs(args.output_dir, exist_ok=True)

    payoff_a, payoff_b = GAMES[args.game]
    game = BimatrixGame(payoff_a, payoff_b)

    print(f"Single runs on {args.game}:")
    for label in range(1, game.num_labels + 1):
        equilibrium, steps = game.lemke_howson(label)
        print(f"  label {label}: support {list(equilibrium.labels)} after {steps} steps, "
              f"regret {game.equilibrium_regret(equilibrium):.2e}")

    result = game.enumerate_equilibria()
    print(f"\nEquilibria reachable from the artificial equilibrium "
          f"({result.stats.pivot_runs} pivot runs):\n")
    print(format_equilibrium_list(result.equilibria))

    with open(os.path.join(args.output_dir, f'{args.game}.json'), 'w') as f:
        json.dump({
            'game': args.game,
            'equilibria': [[[label, prob] for label, prob in eq] for eq in result.equilibria],
            'pivot_runs': result.stats.pivot_runs,
        }, f, indent=2)

    if args.visualize:
        plot_equilibria(game, result.equilibria,
                        path=os.path.join(args.output_dir, f'{args.game}.png'))


if __name__ == '__main__':
    main()
