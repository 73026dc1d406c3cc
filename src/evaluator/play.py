import argparse
import time
from typing import Optional, Tuple

from board_core import ACTION_NAMES, ACTIONS, Board
from evaluator.weights import HeuristicWeights, evaluate


def choose_direction(board: Board, weights: Optional[HeuristicWeights] = None) -> Optional[int]:
    """
    Greedy one-ply choice: simulate every direction on a clone and keep the
    best-scoring result. Returns None when no direction moves a tile.
    """
    best: Optional[Tuple[float, int]] = None
    for direction in ACTIONS:
        candidate = board.clone()
        result = candidate.move(direction)
        if not result.moved:
            continue
        value = evaluate(candidate, weights) + result.score
        if best is None or value > best[0]:
            best = (value, direction)
    return None if best is None else best[1]


def play_game(
    seed: Optional[int] = None,
    max_steps: int = 4000,
    weights: Optional[HeuristicWeights] = None,
    render: bool = False,
    delay: float = 0.0,
) -> Tuple[Board, int, int]:
    """Play one game to the end (or max_steps); returns (board, score, steps)."""
    board = Board(seed=seed)
    board.add_start_tiles()
    score = 0
    steps = 0

    while steps < max_steps and board.moves_available():
        direction = choose_direction(board, weights)
        if direction is None:
            break
        result = board.move(direction)
        score += result.score
        board.computer_move()
        steps += 1
        if render:
            print(f"#{steps} {ACTION_NAMES[direction]}  score={score}")
            print(board)
            if delay:
                time.sleep(delay)

    return board, score, steps


def main(args):
    weights = HeuristicWeights(
        smoothness=args.smooth_weight,
        monotonicity2=args.mono_weight,
        empty=args.empty_weight,
        max_value=args.max_weight,
    )
    board, score, steps = play_game(
        seed=args.seed,
        max_steps=args.max_steps,
        weights=weights,
        render=True,
        delay=args.delay,
    )
    print(f"Final score: {score}, max tile: {board.max_tile()}, steps: {steps}, won: {board.is_win()}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("--max-steps", type=int, default=4000)
    parser.add_argument("--delay", type=float, default=0.05)
    parser.add_argument("--seed", type=int, default=123)
    parser.add_argument("--smooth-weight", type=float, default=0.1)
    parser.add_argument("--mono-weight", type=float, default=1.0)
    parser.add_argument("--empty-weight", type=float, default=2.7)
    parser.add_argument("--max-weight", type=float, default=1.0)
    args = parser.parse_args()
    main(args)
