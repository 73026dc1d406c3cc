from typing import List

from .heuristics import (
    HEURISTICS,
    empty_cells,
    islands,
    max_value,
    monotonicity,
    monotonicity2,
    smoothness,
)
from .weights import DEFAULT_WEIGHTS, HeuristicWeights, evaluate, feature_vector

__all__ = [
    "DEFAULT_WEIGHTS",
    "HEURISTICS",
    "HeuristicWeights",
    "empty_cells",
    "evaluate",
    "feature_vector",
    "heuristic_names",
    "islands",
    "max_value",
    "monotonicity",
    "monotonicity2",
    "smoothness",
]


def heuristic_names() -> List[str]:
    return list(HEURISTICS)
