import random

import pytest

from board_core import ACTIONS, Board, Direction, Position

EMPTY_ROWS = [[0] * 4] * 3


def top_row(board):
    return board.values()[0]


def test_pair_then_slide_left(board_from_rows):
    board = board_from_rows([[2, 2, 4, 0]] + EMPTY_ROWS)
    result = board.move(Direction.LEFT)
    assert result.moved
    assert result.score == 4
    assert not result.won
    assert top_row(board) == [4, 4, 0, 0]


def test_four_equal_tiles_merge_pairwise(board_from_rows):
    board = board_from_rows([[2, 2, 2, 2]] + EMPTY_ROWS)
    result = board.move(Direction.LEFT)
    assert result == (True, 8, False)
    assert top_row(board) == [4, 4, 0, 0]


def test_four_equal_tiles_merge_right(board_from_rows):
    board = board_from_rows([[2, 2, 2, 2]] + EMPTY_ROWS)
    assert board.move(Direction.RIGHT).score == 8
    assert top_row(board) == [0, 0, 4, 4]


def test_merge_result_does_not_merge_again(board_from_rows):
    board = board_from_rows([[4, 4, 8, 0]] + EMPTY_ROWS)
    result = board.move(Direction.LEFT)
    assert result.score == 8
    assert top_row(board) == [8, 8, 0, 0]


def test_slid_tile_can_still_be_merge_target(board_from_rows):
    board = board_from_rows([[0, 2, 0, 2]] + EMPTY_ROWS)
    result = board.move(Direction.LEFT)
    assert result.score == 4
    assert top_row(board) == [4, 0, 0, 0]


@pytest.mark.parametrize(
    "direction, expected",
    [
        (Direction.UP, [[4, 0, 0, 0], [0] * 4, [0] * 4, [0] * 4]),
        (Direction.DOWN, [[0] * 4, [0] * 4, [0] * 4, [4, 0, 0, 0]]),
    ],
)
def test_vertical_moves(board_from_rows, direction, expected):
    board = board_from_rows([[0, 0, 0, 0], [2, 0, 0, 0], [0, 0, 0, 0], [2, 0, 0, 0]])
    result = board.move(direction)
    assert result.moved
    assert result.score == 4
    assert board.values() == expected


def test_packed_direction_is_a_noop(board_from_rows):
    board = board_from_rows([[2, 4, 8, 16]] + EMPTY_ROWS)
    result = board.move(Direction.LEFT)
    assert result == (False, 0, False)
    assert board.player_turn is True
    assert top_row(board) == [2, 4, 8, 16]


def test_win_flag(board_from_rows):
    board = board_from_rows([[1024, 1024, 0, 0]] + EMPTY_ROWS)
    result = board.move(Direction.LEFT)
    assert result.won
    assert result.score == 2048
    assert board.is_win()


def test_move_records_positions_and_provenance(board_from_rows):
    board = board_from_rows([[0, 0, 2, 2]] + EMPTY_ROWS)
    board.move(Direction.LEFT)
    (merged,) = board.tiles()
    assert merged.position == Position(0, 0)
    assert merged.value == 4
    assert merged.previous_position is None
    sources = merged.merged_from
    assert sorted(t.previous_position for t in sources) == [(2, 0), (3, 0)]
    assert all(t.position == (0, 0) for t in sources)

    board.move(Direction.RIGHT)
    (tile,) = board.tiles()
    assert tile.merged_from is None
    assert tile.previous_position == (0, 0)
    assert tile.position == (3, 0)


def test_tiles_keep_their_cell_coordinates(board_from_rows):
    board = board_from_rows([[2, 0, 2, 4], [0, 4, 4, 0], [8, 0, 0, 8], [2, 2, 2, 0]])
    for direction in ACTIONS:
        board.move(direction)
        for x, y, tile in board.each_cell():
            if tile:
                assert tile.position == (x, y)


def test_traversals_start_from_the_far_side(empty_board):
    assert empty_board.build_traversals(Position(1, 0)) == ([3, 2, 1, 0], [0, 1, 2, 3])
    assert empty_board.build_traversals(Position(0, 1)) == ([0, 1, 2, 3], [3, 2, 1, 0])
    assert empty_board.build_traversals(Position(-1, 0)) == ([0, 1, 2, 3], [0, 1, 2, 3])


def test_find_farthest_position(board_from_rows):
    board = board_from_rows([[2, 0, 0, 8]] + EMPTY_ROWS)
    farthest, nxt = board.find_farthest_position((0, 0), Position(1, 0))
    assert farthest == (2, 0)
    assert nxt == (3, 0)
    farthest, nxt = board.find_farthest_position((3, 0), Position(0, 1))
    assert farthest == (3, 3)
    assert nxt == (3, 4)


@pytest.mark.parametrize("seed", range(25))
def test_tile_count_drops_by_merges_only(seed):
    rng = random.Random(seed)
    board = Board(rng=rng)
    for _ in range(rng.randint(4, 14)):
        board.add_random_tile()

    for _ in range(30):
        direction = rng.choice(ACTIONS)
        before = len(board.tiles())
        result = board.move(direction)
        after = board.tiles()
        merges = [t for t in after if t.merged_from is not None]
        assert before - len(after) == len(merges)
        assert result.score == sum(t.value for t in merges)
        # no tile produced this move was fed into a second merge
        for t in merges:
            assert all(src.merged_from is None for src in t.merged_from)
        if result.moved:
            board.computer_move()
        if not board.moves_available():
            break
