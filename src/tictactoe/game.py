"""Core rules for classic 3x3 tic-tac-toe."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple, Union

BOARD_SIZE = 9

WINNING_LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)


class Cell(str, Enum):
    EMPTY = ""
    X = "X"
    O = "O"

    def opponent(self) -> "Cell":
        if self is Cell.X:
            return Cell.O
        if self is Cell.O:
            return Cell.X
        raise ValueError("An empty cell has no opponent")


class Status(str, Enum):
    IN_PROGRESS = "in_progress"
    WON = "won"
    DRAW = "draw"


# ---------- Errors ----------


class MoveError(ValueError):
    """Base class for moves the rules refuse."""


class InvalidIndex(MoveError):
    def __init__(self, index: object) -> None:
        super().__init__(f"Cell index {index!r} is outside the board")
        self.index = index


class GameNotInProgress(MoveError):
    def __init__(self) -> None:
        super().__init__("Game already finished")


class CellOccupied(MoveError):
    def __init__(self, index: int) -> None:
        super().__init__(f"Cell {index} already occupied")
        self.index = index


class EmptyMark(MoveError):
    def __init__(self) -> None:
        super().__init__("A move must place X or O")


class OutOfTurn(MoveError):
    def __init__(self, mark: Cell) -> None:
        super().__init__(f"It is not {mark.value}'s turn")
        self.mark = mark


# ---------- Board helpers ----------
# These work on any 9-cell sequence, so the search can use a scratch list.


def find_winning_line(cells: Sequence[Cell]) -> Optional[Tuple[int, int, int]]:
    for line in WINNING_LINES:
        a, b, c = line
        v = cells[a]
        if v is not Cell.EMPTY and v == cells[b] == cells[c]:
            return line
    return None


def has_won(cells: Sequence[Cell], mark: Cell) -> bool:
    return any(
        cells[a] == mark and cells[b] == mark and cells[c] == mark
        for a, b, c in WINNING_LINES
    )


def is_full(cells: Sequence[Cell]) -> bool:
    return all(c is not Cell.EMPTY for c in cells)


def empty_indices(cells: Sequence[Cell]) -> List[int]:
    return [i for i, c in enumerate(cells) if c is Cell.EMPTY]


def _to_cell(value: Union[Cell, str, None]) -> Cell:
    if isinstance(value, Cell):
        return value
    if value in (None, "", " ", "."):
        return Cell.EMPTY
    return Cell(str(value).upper())


# ---------- Game ----------


@dataclass
class GameState:
    board: Tuple[Cell, ...] = field(default_factory=lambda: (Cell.EMPTY,) * BOARD_SIZE)
    active_mark: Cell = Cell.X
    move_count: int = 0
    status: Status = Status.IN_PROGRESS
    winner: Optional[Cell] = None
    winning_line: Optional[Tuple[int, int, int]] = None

    @classmethod
    def from_board(cls, cells: Iterable[Union[Cell, str, None]]) -> "GameState":
        """Build a reachable position from nine cells (X always moves first)."""
        board = tuple(_to_cell(c) for c in cells)
        if len(board) != BOARD_SIZE:
            raise ValueError(f"Board needs {BOARD_SIZE} cells, got {len(board)}")
        xs = board.count(Cell.X)
        os_ = board.count(Cell.O)
        if xs - os_ not in (0, 1):
            raise ValueError("X moves first, so X must have as many marks as O or one more")
        x_won = has_won(board, Cell.X)
        o_won = has_won(board, Cell.O)
        if x_won and o_won:
            raise ValueError("Both X and O cannot have a completed line")
        if x_won and xs != os_ + 1:
            raise ValueError("X completed a line, so X must have made the last move")
        if o_won and xs != os_:
            raise ValueError("O completed a line, so O must have made the last move")

        state = cls(board=board, move_count=xs + os_)
        state.active_mark = Cell.X if xs == os_ else Cell.O
        state._update_status()
        if state.winner is not None:
            # the winner made the last move
            state.active_mark = state.winner
        return state

    # ---- API used by the session and the AI ----

    @property
    def is_over(self) -> bool:
        return self.status is not Status.IN_PROGRESS

    def available_moves(self) -> List[int]:
        return empty_indices(self.board)

    def apply_move(self, index: int, mark: Optional[Cell] = None) -> "GameState":
        """Place ``mark`` (default: the side to move) and update the result.

        The state is left untouched when a ``MoveError`` is raised.
        """
        if isinstance(index, bool) or not isinstance(index, int):
            raise InvalidIndex(index)
        if not 0 <= index < BOARD_SIZE:
            raise InvalidIndex(index)
        if self.is_over:
            raise GameNotInProgress()
        if self.board[index] is not Cell.EMPTY:
            raise CellOccupied(index)
        mark = self.active_mark if mark is None else _to_cell(mark)
        if mark is Cell.EMPTY:
            raise EmptyMark()
        if mark is not self.active_mark:
            raise OutOfTurn(mark)

        cells = list(self.board)
        cells[index] = mark
        self.board = tuple(cells)
        self.move_count += 1
        self._update_status()
        if not self.is_over:
            self.active_mark = mark.opponent()
        return self

    def reset(self) -> "GameState":
        return GameState()

    def clone(self) -> "GameState":
        return replace(self)

    # ---- helpers ----

    def _update_status(self) -> None:
        line = find_winning_line(self.board)
        if line is not None:
            self.status = Status.WON
            self.winner = self.board[line[0]]
            self.winning_line = line
            return
        if is_full(self.board):
            self.status = Status.DRAW
