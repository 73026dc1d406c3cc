"""
Board features for an external search procedure.

Every function takes a Board, leaves it untouched and returns a float.
Values are compared in log space, so a difference of 1 is one merge apart.
"""

from __future__ import annotations
from collections import deque
from typing import Deque, List, Set, Tuple
import math

from board_core import Board, Direction, Position, VECTORS, get_vector, log2_value


LN2 = math.log(2)


def smoothness(board: Board) -> float:
    """
    Sum of -|log(a) - log(b)| over each tile and the next occupied cell to
    its right and below it (empty cells in between are skipped).
    """
    total = 0.0
    for x, y, tile in board.each_cell():
        if not tile:
            continue
        value = math.log(tile.value)
        for direction in (Direction.RIGHT, Direction.DOWN):
            _, target_cell = board.find_farthest_position((x, y), get_vector(direction))
            target = board.cell_content(target_cell)
            if target:
                total -= abs(value - math.log(target.value))
    return total / LN2


def islands(board: Board) -> float:
    """Number of 4-connected groups of equal-valued tiles."""
    visited: Set[Position] = set()

    def mark(start: Position, value: int) -> None:
        stack: List[Position] = [start]
        while stack:
            cell = stack.pop()
            if cell in visited:
                continue
            tile = board.cell_content(cell)
            if not tile or tile.value != value:
                continue
            visited.add(cell)
            for vector in VECTORS.values():
                stack.append(Position(cell.x + vector.x, cell.y + vector.y))

    count = 0
    for x, y, tile in board.each_cell():
        if tile and Position(x, y) not in visited:
            count += 1
            mark(Position(x, y), tile.value)
    return float(count)


def monotonicity(board: Board) -> float:
    """
    Breadth-first walk outward from the highest tile, penalising every step
    toward a neighbour with a higher value.

    Cells are marked only once the whole current wave has been scored, so
    neighbours within the same wave still see each other. Returns the
    negated sum of increases (0 for a perfect gradient).
    """
    highest_value = 0
    highest = Position(0, 0)
    for x, y, tile in board.each_cell():
        if tile and tile.value > highest_value:
            highest_value = tile.value
            highest = Position(x, y)

    marked: Set[Position] = set()
    queued: Set[Position] = {highest}
    queue: Deque[Position] = deque([highest])
    mark_list: List[Position] = [highest]
    mark_after = 1
    increases = 0.0

    while queue:
        mark_after -= 1
        cell = queue.popleft()
        mark_list.append(cell)
        value = log2_value(board.cell_content(cell))
        for vector in VECTORS.values():
            target = Position(cell.x + vector.x, cell.y + vector.y)
            if not board.within_bounds(target) or target in marked:
                continue
            target_tile = board.cell_content(target)
            if target_tile:
                target_value = log2_value(target_tile)
                if target_value > value:
                    increases += target_value - value
            if target not in queued:
                queue.append(target)
                queued.add(target)
        if mark_after == 0:
            marked.update(mark_list)
            mark_list.clear()
            mark_after = len(queue)

    return -increases


def line_totals(values: List[float]) -> Tuple[float, float]:
    """Walk one line linking over empty cells; return (increasing, decreasing) penalties."""
    increasing = 0.0
    decreasing = 0.0
    size = len(values)
    current = 0
    nxt = current + 1
    while nxt < size:
        while nxt < size and values[nxt] == 0:
            nxt += 1
        if nxt >= size:
            nxt -= 1
        current_value = values[current]
        next_value = values[nxt]
        if current_value > next_value:
            increasing += next_value - current_value
        elif next_value > current_value:
            decreasing += current_value - next_value
        current = nxt
        nxt += 1
    return increasing, decreasing


def monotonicity2(board: Board) -> float:
    """
    Row and column monotonicity.

    Per axis two non-positive totals are kept: one penalising drops
    (increasing) and one penalising rises (decreasing). Each axis scores
    its better total; the two axis scores are summed.
    """
    totals = [0.0, 0.0, 0.0, 0.0]

    def ln(x: int, y: int) -> float:
        tile = board.cells[x][y]
        return math.log(tile.value) if tile else 0.0

    # up/down
    for x in range(board.size):
        inc, dec = line_totals([ln(x, y) for y in range(board.size)])
        totals[0] += inc
        totals[1] += dec

    # left/right
    for y in range(board.size):
        inc, dec = line_totals([ln(x, y) for x in range(board.size)])
        totals[2] += inc
        totals[3] += dec

    return (max(totals[0], totals[1]) + max(totals[2], totals[3])) / LN2


def max_value(board: Board) -> float:
    """log2 of the largest tile; 0 on an empty board."""
    highest = board.max_tile()
    return math.log2(highest) if highest else 0.0


def empty_cells(board: Board) -> float:
    return float(len(board.available_cells()))


HEURISTICS = {
    "smoothness": smoothness,
    "monotonicity": monotonicity,
    "monotonicity2": monotonicity2,
    "islands": islands,
    "max_value": max_value,
    "empty": empty_cells,
}
