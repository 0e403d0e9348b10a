"""plot_plausibility.py
Draw the plausibility of a bid as its quantity grows, for a given hand and dice count,
with every AI tier's challenge threshold and safety margin overlaid.

Usage: python scripts/plot_plausibility.py --dice 10 --hand 3,3,1,5,6 --face 3 --wild
"""
import argparse
import os

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from liars_dice.core.bid import Bid
from liars_dice.core.config import DEFAULT_STRATEGY_PARAMS
from liars_dice.core.probability import bid_is_plausible


def plausibility_curve(hand, total_dice, face, wild):
    unknown = total_dice - len(hand)
    quantities = list(range(1, total_dice + 1))
    return quantities, [bid_is_plausible(Bid(q, face), hand, unknown, wild) for q in quantities]


def plot(hand, total_dice, face, wild, out_path):
    quantities, values = plausibility_curve(hand, total_dice, face, wild)
    plt.figure(figsize=(8, 4))
    plt.plot(quantities, values, marker='o', color='C0', label=f'face {face}')
    for i, (tier, params) in enumerate(DEFAULT_STRATEGY_PARAMS.items(), start=1):
        plt.axhline(params.challenge_threshold, color=f'C{i}', linestyle='--', linewidth=1,
                    label=f'{tier} challenge < {params.challenge_threshold:.2f}')
        plt.axhline(params.safety_margin, color=f'C{i}', linestyle=':', linewidth=1,
                    label=f'{tier} raise >= {params.safety_margin:.2f}')
    plt.xlabel('Bid quantity')
    plt.ylabel('Plausibility')
    plt.ylim(0, 1.05)
    plt.title(f'Hand {tuple(hand)}, {total_dice} dice in play, ones wild: {wild}')
    plt.legend(fontsize=7, loc='upper right')
    plt.tight_layout()
    plt.savefig(out_path)
    plt.close()
    return out_path


def main():
    parser = argparse.ArgumentParser(description='Plot bid plausibility against AI tier thresholds')
    parser.add_argument('--dice', type=int, default=10, help='Total dice in play')
    parser.add_argument('--hand', type=str, default='3,3,1,5,6', help='Comma-separated own dice')
    parser.add_argument('--face', type=int, default=3, help='Declared face')
    parser.add_argument('--wild', action='store_true', help='Ones are wild')
    parser.add_argument('--data-dir', type=str, default='data', help='Directory to save the chart')
    args = parser.parse_args()

    hand = [int(x) for x in args.hand.split(',') if x.strip()]
    os.makedirs(args.data_dir, exist_ok=True)
    out_path = os.path.join(args.data_dir, f'plausibility_face{args.face}_{args.dice}dice.png')
    print(f"Chart saved to {plot(hand, args.dice, args.face, args.wild, out_path)}")


if __name__ == '__main__':
    main()
