from __future__ import annotations
from typing import Any, Dict, List, Optional, Tuple
import logging
import random

from board_core import ACTION_NAMES, ACTIONS, GRID_SIZE, Board
from evaluator.weights import feature_vector


logger = logging.getLogger(__name__)


class GameSession:
    """
    Minimal env interface over a Board:
    - reset(seed: Optional[int]) -> state
    - step(direction: int) -> (state, reward, done, info)
    - get_state() -> state (rows of tile values, 0 = empty)
    - legal_actions() -> List[int]
    - score / won properties
    """
    def __init__(self, size: int = GRID_SIZE, seed: Optional[int] = None):
        self.size = size
        self.rng = random.Random(seed)
        self.board = Board(size, rng=self.rng)
        self._score = 0
        self._won = False
        self.done = False

    @property
    def score(self) -> int:
        return self._score

    @property
    def won(self) -> bool:
        return self._won

    def reset(self, seed: Optional[int] = None) -> List[List[int]]:
        if seed is not None:
            self.rng.seed(seed)
        self.board = Board(self.size, rng=self.rng)
        self.board.add_start_tiles()
        self._score = 0
        self._won = False
        self.done = False
        logger.debug("New game (seed=%s)", seed)
        return self.get_state()

    def get_state(self) -> List[List[int]]:
        return self.board.values()

    def is_over(self) -> bool:
        return self.done

    def step(self, direction: int) -> Tuple[List[List[int]], int, bool, Dict[str, Any]]:
        if self.done:
            return self.get_state(), 0, True, {"score": self._score, "moved": False}

        result = self.board.move(direction)
        if result.moved:
            self.board.computer_move()
        self._score += result.score
        self._won = self._won or result.won
        self.done = not self.board.moves_available()
        if self.done:
            logger.debug("Game over: score=%d max_tile=%d", self._score, self.board.max_tile())
        info = {"score": self._score, "moved": result.moved, "won": self._won}
        return self.get_state(), result.score, self.done, info

    def legal_actions(self) -> List[int]:
        # Directions that change the board, probed on clones
        legal = []
        for a in ACTIONS:
            if self.board.clone().move(a).moved:
                legal.append(a)
        return legal

    def features(self) -> Dict[str, float]:
        return feature_vector(self.board)


__all__ = ["GameSession", "ACTIONS", "ACTION_NAMES"]
