from board_api import GameSession
from board_core import Board, Direction
from evaluator.play import choose_direction, play_game


def count_tiles(state):
    return sum(1 for row in state for v in row if v)


def test_reset_places_start_tiles():
    session = GameSession(seed=3)
    state = session.reset()
    assert count_tiles(state) == 2
    assert session.score == 0
    assert not session.is_over()


def test_reset_with_seed_is_reproducible():
    a = GameSession()
    b = GameSession()
    assert a.reset(seed=11) == b.reset(seed=11)
    for direction in (Direction.LEFT, Direction.UP, Direction.RIGHT, Direction.DOWN):
        assert a.step(direction) == b.step(direction)


def test_step_adds_tile_after_move():
    session = GameSession(seed=1)
    session.reset()
    session.board = Board.from_array([[2, 2, 0, 0]] + [[0] * 4] * 3, rng=session.rng)
    state, reward, done, info = session.step(Direction.LEFT)
    assert reward == 4
    assert info["moved"]
    assert session.score == 4
    assert count_tiles(state) == 2
    assert not done
    assert session.board.player_turn is True


def test_noop_step_adds_nothing():
    session = GameSession(seed=1)
    session.board = Board.from_array([[2, 4, 0, 0]] + [[0] * 4] * 3, rng=session.rng)
    state, reward, done, info = session.step(Direction.LEFT)
    assert reward == 0
    assert not info["moved"]
    assert count_tiles(state) == 2


def test_legal_actions_probe_clones():
    session = GameSession(seed=1)
    session.board = Board.from_array([[2, 4, 0, 0]] + [[0] * 4] * 3, rng=session.rng)
    before = session.get_state()
    assert session.legal_actions() == [Direction.RIGHT, Direction.DOWN]
    assert session.get_state() == before


def test_locked_board_is_over():
    session = GameSession(seed=1)
    session.board = Board.from_array(
        [[2, 4, 2, 4], [4, 2, 4, 2], [2, 4, 2, 4], [4, 2, 4, 2]], rng=session.rng
    )
    state, reward, done, info = session.step(Direction.RIGHT)
    assert done
    assert session.is_over()
    assert session.legal_actions() == []
    assert session.step(Direction.LEFT)[2] is True


def test_features_cover_all_heuristics():
    session = GameSession(seed=5)
    session.reset()
    features = session.features()
    assert features["empty"] == 14
    assert features["max_value"] >= 1


def test_choose_direction_prefers_merge():
    board = Board.from_array([[0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0], [128, 128, 0, 0]])
    assert choose_direction(board) in (Direction.LEFT, Direction.RIGHT)
    assert choose_direction(Board.from_array([[2, 4], [4, 2]])) is None


def test_play_game_runs_to_completion():
    board, score, steps = play_game(seed=0, max_steps=200)
    assert steps > 0
    assert score >= 0
    assert board.max_tile() >= 4
