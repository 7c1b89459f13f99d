"""Computer opponent: exhaustive minimax with alpha-beta pruning plus random tiers."""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import List, MutableSequence, Optional, Tuple, Union

from .game import Cell, GameState, empty_indices, has_won, is_full

logger = logging.getLogger(__name__)

WIN_SCORE = 10
# Chance that a medium opponent plays the optimal move on a given turn
MEDIUM_OPTIMAL_PROBABILITY = 0.7


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass
class MoveSelector:
    """Picks the computer's move for a position.

    The selector never keeps a reference to the ``GameState`` it is given and
    never mutates it; the search works on a scratch copy of the board.

      - MoveSelector(rng=random.Random(seed))
      - select_move(state, difficulty, computer_mark) -> index or None
    """

    rng: random.Random = field(default_factory=random.Random, repr=False)
    nodes_evaluated: int = 0

    # ---- public API ----

    def select_move(
        self,
        state: GameState,
        difficulty: Union[Difficulty, str],
        computer_mark: Cell,
    ) -> Optional[int]:
        moves = state.available_moves()
        if not moves:
            return None

        difficulty = Difficulty(difficulty)
        computer_mark = Cell(computer_mark)
        if difficulty is Difficulty.EASY:
            return self.random_move(state)
        if difficulty is Difficulty.MEDIUM:
            if self.rng.random() < MEDIUM_OPTIMAL_PROBABILITY:
                return self.best_move(state, computer_mark)
            return self.random_move(state)
        return self.best_move(state, computer_mark)

    def random_move(self, state: GameState) -> Optional[int]:
        moves = state.available_moves()
        if not moves:
            return None
        return self.rng.choice(moves)

    def best_move(self, state: GameState, computer_mark: Cell) -> Optional[int]:
        computer_mark = Cell(computer_mark)
        scored = self.score_moves(state, computer_mark)

        best_score = -math.inf
        best_move: Optional[int] = None
        # Strict ">" keeps the lowest index among equal scores
        for move, score in scored:
            if score > best_score:
                best_score, best_move = score, move

        logger.debug(
            "best move %s for %s (score %s, %d nodes)",
            best_move,
            computer_mark.value,
            best_score,
            self.nodes_evaluated,
        )
        return best_move

    def score_moves(
        self, state: GameState, computer_mark: Cell
    ) -> List[Tuple[int, int]]:
        """Minimax score of every available move, in ascending move order."""
        me = Cell(computer_mark)
        opponent = me.opponent()
        board: List[Cell] = list(state.board)
        self.nodes_evaluated = 0

        scored: List[Tuple[int, int]] = []
        for move in state.available_moves():
            board[move] = me
            score = self.minimax(board, 0, False, -math.inf, math.inf, me, opponent)
            board[move] = Cell.EMPTY
            scored.append((move, score))
        return scored

    # ---- core search ----

    def minimax(
        self,
        board: MutableSequence[Cell],
        depth: int,
        maximizing: bool,
        alpha: float,
        beta: float,
        me: Cell,
        opponent: Cell,
    ) -> int:
        self.nodes_evaluated += 1

        # Terminal: faster wins and slower losses score better
        if has_won(board, me):
            return WIN_SCORE - depth
        if has_won(board, opponent):
            return depth - WIN_SCORE
        if is_full(board):
            return 0

        moves = empty_indices(board)

        if maximizing:
            value = -math.inf
            for move in moves:
                board[move] = me
                score = self.minimax(board, depth + 1, False, alpha, beta, me, opponent)
                board[move] = Cell.EMPTY
                value = max(value, score)
                alpha = max(alpha, score)
                if beta <= alpha:
                    break
            return value

        value = math.inf
        for move in moves:
            board[move] = opponent
            score = self.minimax(board, depth + 1, True, alpha, beta, me, opponent)
            board[move] = Cell.EMPTY
            value = min(value, score)
            beta = min(beta, score)
            if beta <= alpha:
                break
        return value
