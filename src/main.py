import argparse
import logging
import sys
from collections import Counter
from typing import List

from tqdm import trange

from evaluator.play import play_game
from evaluator.weights import HeuristicWeights


def run_benchmark(games: int, seed: int, max_steps: int, weights: HeuristicWeights) -> dict:
    scores: List[int] = []
    max_tiles: Counter = Counter()
    wins = 0

    for game in trange(games, desc="Playing"):
        board, score, _ = play_game(seed=seed + game, max_steps=max_steps, weights=weights)
        scores.append(score)
        max_tiles[board.max_tile()] += 1
        if board.is_win():
            wins += 1
        logging.debug("game %d: score=%d max_tile=%d", game, score, board.max_tile())

    return {
        "games": games,
        "mean_score": sum(scores) / len(scores) if scores else 0.0,
        "best_score": max(scores, default=0),
        "win_rate": wins / games if games else 0.0,
        "max_tiles": dict(sorted(max_tiles.items())),
    }


def main():
    parser = argparse.ArgumentParser(description="Benchmark the greedy heuristic player over seeded games")
    parser.add_argument("--games", type=int, default=20)
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--max-steps", type=int, default=4000)
    parser.add_argument("--smooth-weight", type=float, default=0.1)
    parser.add_argument("--mono-weight", type=float, default=1.0)
    parser.add_argument("--empty-weight", type=float, default=2.7)
    parser.add_argument("--max-weight", type=float, default=1.0)
    parser.add_argument("--islands-weight", type=float, default=0.0)
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    weights = HeuristicWeights(
        smoothness=args.smooth_weight,
        monotonicity2=args.mono_weight,
        empty=args.empty_weight,
        max_value=args.max_weight,
        islands=args.islands_weight,
    )
    summary = run_benchmark(args.games, args.seed, args.max_steps, weights)

    print(f"Games: {summary['games']}, mean score: {summary['mean_score']:.1f}, "
          f"best score: {summary['best_score']}, win rate: {summary['win_rate']:.0%}")
    for tile, count in summary["max_tiles"].items():
        print(f"  max tile {tile:>5}: {count}")


if __name__ == "__main__":
    main()
