from __future__ import annotations
from enum import IntEnum
from typing import Any, Dict, Iterator, List, NamedTuple, Optional, Set, Tuple
import logging
import math
import random

import numpy as np


logger = logging.getLogger(__name__)

GRID_SIZE: int = 4
START_TILES: int = 2
WIN_VALUE: int = 2048
FOUR_PROBABILITY: float = 0.1


class Direction(IntEnum):
    UP = 0
    RIGHT = 1
    DOWN = 2
    LEFT = 3


# Direction codes: 0=UP, 1=RIGHT, 2=DOWN, 3=LEFT
ACTIONS: Tuple[int, int, int, int] = (0, 1, 2, 3)
ACTION_NAMES: Dict[int, str] = {d.value: d.name for d in Direction}


class Position(NamedTuple):
    x: int
    y: int


VECTORS: Dict[int, Position] = {
    Direction.UP: Position(0, -1),
    Direction.RIGHT: Position(1, 0),
    Direction.DOWN: Position(0, 1),
    Direction.LEFT: Position(-1, 0),
}


class MalformedSnapshotError(ValueError):
    """Raised when a serialized board cannot be turned back into cells."""


class MoveResult(NamedTuple):
    moved: bool
    score: int
    won: bool


def get_vector(direction: int) -> Position:
    try:
        return VECTORS[Direction(direction)]
    except ValueError:
        raise ValueError(f"Invalid direction: {direction!r}") from None


class Tile:
    def __init__(self, position: Tuple[int, int], value: int = 2):
        self.x, self.y = position
        self.value = value
        self.previous_position: Optional[Position] = None
        self.merged_from: Optional[Tuple[Tile, Tile]] = None

    @property
    def position(self) -> Position:
        return Position(self.x, self.y)

    def save_position(self) -> None:
        self.previous_position = Position(self.x, self.y)

    def update_position(self, position: Tuple[int, int]) -> None:
        self.x, self.y = position

    def clone(self) -> "Tile":
        # Provenance is per move, a copy starts clean
        return Tile(self.position, self.value)

    def serialize(self) -> Dict[str, Any]:
        return {"position": {"x": self.x, "y": self.y}, "value": self.value}

    def __repr__(self) -> str:
        return f"Tile(({self.x}, {self.y}), {self.value})"


def _is_tile_value(value: Any) -> bool:
    return (
        isinstance(value, (int, np.integer))
        and not isinstance(value, bool)
        and value >= 2
        and (int(value) & (int(value) - 1)) == 0
    )


class Board:
    """
    A square grid of optional tiles, indexed cells[x][y].

    The board owns its turn flag and its random source; branching for
    hypothetical play goes through clone(), which shares no tiles with the
    original.
    """

    def __init__(
        self,
        size: int = GRID_SIZE,
        previous_state: Optional[Any] = None,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
    ):
        self.size = size
        self.start_tiles = START_TILES
        self.rng = rng if rng is not None else random.Random(seed)
        self.cells: List[List[Optional[Tile]]] = (
            self.from_state(previous_state) if previous_state is not None else self.empty()
        )
        self.player_turn = True

    # ---------- construction ----------
    def empty(self) -> List[List[Optional[Tile]]]:
        return [[None] * self.size for _ in range(self.size)]

    def from_state(self, state: Any) -> List[List[Optional[Tile]]]:
        if isinstance(state, dict):
            if state.get("size", self.size) != self.size:
                raise self._malformed(f"snapshot size {state.get('size')!r} != board size {self.size}")
            if "cells" not in state:
                raise self._malformed("snapshot has no 'cells'")
            state = state["cells"]

        if not isinstance(state, (list, tuple)) or len(state) != self.size:
            raise self._malformed(f"expected {self.size} columns of cells")

        cells = self.empty()
        for x in range(self.size):
            column = state[x]
            if not isinstance(column, (list, tuple)) or len(column) != self.size:
                raise self._malformed(f"column {x} does not hold {self.size} cells")
            for y in range(self.size):
                entry = column[y]
                if entry is None:
                    continue
                cells[x][y] = self._tile_from_entry(entry, x, y)
        return cells

    def _tile_from_entry(self, entry: Any, x: int, y: int) -> Tile:
        try:
            position = entry["position"]
            px, py = position["x"], position["y"]
            value = entry["value"]
        except (KeyError, TypeError):
            raise self._malformed(f"cell ({x}, {y}) is not a {{position, value}} record") from None
        if (px, py) != (x, y):
            raise self._malformed(f"cell ({x}, {y}) holds a tile positioned at ({px}, {py})")
        if not _is_tile_value(value):
            raise self._malformed(f"cell ({x}, {y}) has invalid value {value!r}")
        return Tile(Position(x, y), int(value))

    @staticmethod
    def _malformed(message: str) -> MalformedSnapshotError:
        logger.debug("Rejected snapshot: %s", message)
        return MalformedSnapshotError(message)

    @classmethod
    def from_snapshot(
        cls,
        state: Any,
        size: int = GRID_SIZE,
        rng: Optional[random.Random] = None,
    ) -> "Board":
        return cls(size=size, previous_state=state, rng=rng)

    @classmethod
    def from_array(
        cls,
        values: Any,
        rng: Optional[random.Random] = None,
    ) -> "Board":
        """Build a board from a row-major value grid (rows are y, 0 = empty)."""
        arr = np.asarray(values)
        if arr.ndim != 2 or arr.shape[0] != arr.shape[1]:
            raise cls._malformed(f"expected a square grid, got shape {arr.shape}")
        board = cls(size=arr.shape[0], rng=rng)
        for y in range(board.size):
            for x in range(board.size):
                value = arr[y, x]
                if value == 0:
                    continue
                if not _is_tile_value(value):
                    raise cls._malformed(f"cell ({x}, {y}) has invalid value {value!r}")
                board.insert_tile(Tile(Position(x, y), int(value)))
        return board

    # ---------- queries ----------
    def each_cell(self) -> Iterator[Tuple[int, int, Optional[Tile]]]:
        for x in range(self.size):
            for y in range(self.size):
                yield x, y, self.cells[x][y]

    def tiles(self) -> List[Tile]:
        return [tile for _, _, tile in self.each_cell() if tile]

    def available_cells(self) -> List[Position]:
        return [Position(x, y) for x, y, tile in self.each_cell() if not tile]

    def cells_available(self) -> bool:
        return bool(self.available_cells())

    def random_available_cell(self) -> Optional[Position]:
        cells = self.available_cells()
        if cells:
            return self.rng.choice(cells)
        return None

    def within_bounds(self, position: Tuple[int, int]) -> bool:
        x, y = position
        return 0 <= x < self.size and 0 <= y < self.size

    def cell_content(self, position: Tuple[int, int]) -> Optional[Tile]:
        if self.within_bounds(position):
            x, y = position
            return self.cells[x][y]
        return None

    def cell_occupied(self, position: Tuple[int, int]) -> bool:
        return self.cell_content(position) is not None

    def cell_available(self, position: Tuple[int, int]) -> bool:
        return not self.cell_occupied(position)

    # ---------- mutation ----------
    def insert_tile(self, tile: Tile) -> None:
        self.cells[tile.x][tile.y] = tile

    def remove_tile(self, tile: Tile) -> None:
        self.cells[tile.x][tile.y] = None

    def move_tile(self, tile: Tile, position: Tuple[int, int]) -> None:
        self.cells[tile.x][tile.y] = None
        x, y = position
        self.cells[x][y] = tile
        tile.update_position(position)

    def add_random_tile(self) -> None:
        if self.cells_available():
            value = 2 if self.rng.random() < 1 - FOUR_PROBABILITY else 4
            self.insert_tile(Tile(self.random_available_cell(), value))

    def add_start_tiles(self, count: Optional[int] = None) -> None:
        for _ in range(self.start_tiles if count is None else count):
            self.add_random_tile()

    def computer_move(self) -> None:
        self.add_random_tile()
        self.player_turn = True

    def clone(self, rng: Optional[random.Random] = None) -> "Board":
        if rng is None:
            # Own generator in the same state, draws on the copy leave ours alone
            rng = random.Random()
            rng.setstate(self.rng.getstate())
        board = Board(self.size, rng=rng)
        board.start_tiles = self.start_tiles
        board.player_turn = self.player_turn
        for tile in self.tiles():
            board.insert_tile(tile.clone())
        return board

    # ---------- move simulation ----------
    def prepare_tiles(self) -> None:
        for tile in self.tiles():
            tile.merged_from = None
            tile.save_position()

    def build_traversals(self, vector: Position) -> Tuple[List[int], List[int]]:
        trav_x = list(range(self.size))
        trav_y = list(range(self.size))
        # Start from the side the tiles are moving toward
        if vector.x == 1:
            trav_x.reverse()
        if vector.y == 1:
            trav_y.reverse()
        return trav_x, trav_y

    def find_farthest_position(
        self, cell: Tuple[int, int], vector: Position
    ) -> Tuple[Position, Position]:
        """Return (farthest, next): last free cell along vector and the obstacle after it."""
        previous = Position(*cell)
        nxt = Position(previous.x + vector.x, previous.y + vector.y)
        while self.within_bounds(nxt) and self.cell_available(nxt):
            previous = nxt
            nxt = Position(previous.x + vector.x, previous.y + vector.y)
        return previous, nxt

    def move(self, direction: int) -> MoveResult:
        vector = get_vector(direction)
        trav_x, trav_y = self.build_traversals(vector)
        moved = False
        score = 0
        won = False
        merged_cells: Set[Position] = set()

        self.prepare_tiles()

        for x in trav_x:
            for y in trav_y:
                tile = self.cells[x][y]
                if not tile:
                    continue
                origin = Position(x, y)
                farthest, nxt = self.find_farthest_position(origin, vector)
                other = self.cell_content(nxt)

                if other and other.value == tile.value and nxt not in merged_cells:
                    merged = Tile(nxt, tile.value * 2)
                    merged.merged_from = (tile, other)
                    self.insert_tile(merged)
                    self.remove_tile(tile)
                    merged_cells.add(nxt)

                    # Source tile converges on the merge cell, off the board
                    tile.update_position(nxt)

                    score += merged.value
                    if merged.value == WIN_VALUE:
                        won = True
                else:
                    self.move_tile(tile, farthest)

                if tile.position != origin:
                    self.player_turn = False
                    moved = True

        return MoveResult(moved, score, won)

    def tile_matches_available(self) -> bool:
        for x, y, tile in self.each_cell():
            if not tile:
                continue
            for vector in VECTORS.values():
                other = self.cell_content((x + vector.x, y + vector.y))
                if other and other.value == tile.value:
                    return True
        return False

    def moves_available(self) -> bool:
        return self.cells_available() or self.tile_matches_available()

    def is_win(self) -> bool:
        return any(tile.value >= WIN_VALUE for tile in self.tiles())

    def max_tile(self) -> int:
        return max((tile.value for tile in self.tiles()), default=0)

    # ---------- export ----------
    def serialize(self) -> Dict[str, Any]:
        cells = [
            [tile.serialize() if tile else None for tile in column]
            for column in self.cells
        ]
        return {"size": self.size, "cells": cells}

    def to_array(self) -> np.ndarray:
        arr = np.zeros((self.size, self.size), dtype=np.int64)
        for tile in self.tiles():
            arr[tile.y, tile.x] = tile.value
        return arr

    def values(self) -> List[List[int]]:
        return self.to_array().tolist()

    # Observation for learning agents: log2(value)/16 per cell, empty is 0
    def observation(self) -> np.ndarray:
        arr = self.to_array()
        obs = np.zeros(arr.shape, dtype=np.float32)
        nonzero = arr > 0
        if np.any(nonzero):
            obs[nonzero] = np.log2(arr[nonzero]).astype(np.float32) / 16.0
        return obs.flatten()

    def __str__(self) -> str:
        lines = []
        for y in range(self.size):
            row = ""
            for x in range(self.size):
                tile = self.cells[x][y]
                row += f"{tile.value} " if tile else "_ "
            lines.append(row)
        return "\n".join(lines) + "\n"

    def __repr__(self) -> str:
        return f"Board(size={self.size}, tiles={len(self.tiles())})"


def log2_value(tile: Optional[Tile]) -> float:
    return math.log2(tile.value) if tile else 0.0
