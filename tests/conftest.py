import pytest

from board_core import Board


@pytest.fixture
def board_from_rows():
    """Build a board from display rows (rows are y, columns are x, 0 = empty)."""
    def build(rows, seed=0):
        board = Board.from_array(rows)
        board.rng.seed(seed)
        return board
    return build


@pytest.fixture
def empty_board():
    return Board(seed=0)
