"""Unit tests for tic-tac-toe game rules."""

import pytest

from tictactoe.game import (
    Cell,
    CellOccupied,
    EmptyMark,
    GameNotInProgress,
    GameState,
    InvalidIndex,
    OutOfTurn,
    Status,
)


def test_initial_state():
    game = GameState()
    assert game.available_moves() == list(range(9))
    assert game.active_mark is Cell.X
    assert game.move_count == 0
    assert game.status is Status.IN_PROGRESS


def test_move_flips_turn_and_counts():
    game = GameState()
    game.apply_move(4)
    assert game.board[4] is Cell.X
    assert game.active_mark is Cell.O
    assert game.move_count == 1
    assert 4 not in game.available_moves()


def test_move_count_tracks_occupied_cells():
    game = GameState()
    for index in (4, 0, 8, 2, 1, 7, 6, 3, 5):
        game.apply_move(index)
        occupied = sum(1 for c in game.board if c is not Cell.EMPTY)
        assert game.move_count == occupied
        assert len(game.available_moves()) + game.move_count == 9


def test_row_win_detection():
    game = GameState.from_board(["X", "X", "", "O", "O", "", "", "", ""])
    assert game.active_mark is Cell.X
    game.apply_move(2, Cell.X)
    assert game.status is Status.WON
    assert game.winner is Cell.X
    assert game.winning_line == (0, 1, 2)
    assert game.active_mark is Cell.X


def test_full_board_without_line_is_draw():
    game = GameState()
    # X O X / X O O / O X X
    for index in (0, 1, 2, 4, 3, 5, 7, 6, 8):
        assert game.status is Status.IN_PROGRESS
        game.apply_move(index)
    assert game.status is Status.DRAW
    assert game.winner is None
    assert game.available_moves() == []


def test_win_on_last_cell_is_not_a_draw():
    # X O X / O X O / O X _
    game = GameState.from_board(["X", "O", "X", "O", "X", "O", "O", "X", ""])
    assert game.status is Status.IN_PROGRESS
    assert game.active_mark is Cell.X
    game.apply_move(8)
    assert game.status is Status.WON
    assert game.winner is Cell.X


def test_occupied_cell_rejected_and_state_unchanged():
    game = GameState()
    game.apply_move(0)
    before = game.clone()
    with pytest.raises(CellOccupied):
        game.apply_move(0)
    assert game == before


def test_move_after_game_over_rejected():
    game = GameState.from_board(["X", "X", "X", "O", "O", "", "", "", ""])
    assert game.status is Status.WON
    with pytest.raises(GameNotInProgress):
        game.apply_move(5)
    assert game.status is Status.WON


@pytest.mark.parametrize("index", [-1, 9, 100, "4", None, True])
def test_invalid_index_rejected(index):
    game = GameState()
    with pytest.raises(InvalidIndex):
        game.apply_move(index)
    assert game == GameState()


def test_out_of_turn_rejected():
    game = GameState()
    with pytest.raises(OutOfTurn):
        game.apply_move(0, Cell.O)
    assert game.move_count == 0


def test_errors_are_value_errors():
    game = GameState()
    game.apply_move(0)
    with pytest.raises(ValueError):
        game.apply_move(0)


def test_status_never_returns_to_in_progress():
    game = GameState()
    seen = []
    for index in (0, 3, 1, 4, 2):
        game.apply_move(index)
        seen.append(game.status)
    assert seen[-1] is Status.WON
    with pytest.raises(GameNotInProgress):
        game.apply_move(8)
    assert game.status is Status.WON


def test_reset_returns_fresh_state():
    game = GameState()
    game.apply_move(4)
    fresh = game.reset()
    assert fresh == GameState()
    assert game.move_count == 1


def test_from_board_rejects_impossible_counts():
    with pytest.raises(ValueError):
        GameState.from_board(["O", "", "", "", "", "", "", "", ""])
    with pytest.raises(ValueError):
        GameState.from_board(["X", "X", "", "", "", "", "", "", ""])
    with pytest.raises(ValueError):
        GameState.from_board(["X"] * 8)


def test_cell_opponent():
    assert Cell.X.opponent() is Cell.O
    assert Cell.O.opponent() is Cell.X
    with pytest.raises(ValueError):
        Cell.EMPTY.opponent()


def test_from_board_rejects_two_winners():
    with pytest.raises(ValueError):
        GameState.from_board(["X", "X", "X", "O", "O", "O", "", "", ""])


def test_from_board_winner_must_have_moved_last():
    # X has a line but O has as many marks
    with pytest.raises(ValueError):
        GameState.from_board(["X", "X", "X", "O", "O", "", "O", "", ""])
    # O has a line but X has moved since
    with pytest.raises(ValueError):
        GameState.from_board(["O", "O", "O", "X", "X", "", "X", "X", ""])


def test_from_board_accepts_o_win():
    game = GameState.from_board(["O", "O", "O", "X", "X", "", "X", "", ""])
    assert game.status is Status.WON
    assert game.winner is Cell.O
    assert game.active_mark is Cell.O


def test_empty_mark_rejected():
    game = GameState()
    with pytest.raises(EmptyMark):
        game.apply_move(0, "")
    assert game == GameState()
