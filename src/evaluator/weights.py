from __future__ import annotations
from dataclasses import asdict, dataclass
from typing import Dict, Optional
import math

from board_core import Board
from . import heuristics


@dataclass(frozen=True)
class HeuristicWeights:
    smoothness: float = 0.1
    monotonicity2: float = 1.0
    empty: float = 2.7
    max_value: float = 1.0
    islands: float = 0.0
    monotonicity: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


DEFAULT_WEIGHTS = HeuristicWeights()


def feature_vector(board: Board) -> Dict[str, float]:
    return {name: fn(board) for name, fn in heuristics.HEURISTICS.items()}


def evaluate(board: Board, weights: Optional[HeuristicWeights] = None) -> float:
    """
    Weighted static score of a board, higher is better.

    Free space enters as log(empty cells); a full board contributes 0 for
    that term instead of -inf. Features with a zero weight are not computed.
    """
    w = weights or DEFAULT_WEIGHTS
    score = 0.0
    if w.smoothness:
        score += w.smoothness * heuristics.smoothness(board)
    if w.monotonicity2:
        score += w.monotonicity2 * heuristics.monotonicity2(board)
    if w.empty:
        empty = heuristics.empty_cells(board)
        score += w.empty * (math.log(empty) if empty else 0.0)
    if w.max_value:
        score += w.max_value * heuristics.max_value(board)
    if w.islands:
        score += w.islands * heuristics.islands(board)
    if w.monotonicity:
        score += w.monotonicity * heuristics.monotonicity(board)
    return score
