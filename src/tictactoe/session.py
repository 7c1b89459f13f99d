"""Human-vs-computer session wrapped around a single ``GameState``."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Union

from .ai import Difficulty, MoveSelector
from .game import Cell, GameState, OutOfTurn, Status

logger = logging.getLogger(__name__)


class Outcome(str, Enum):
    PLAYER = "player"
    AI = "ai"
    DRAW = "draw"


@dataclass
class Scoreboard:
    player: int = 0
    ai: int = 0
    draws: int = 0

    @property
    def games_played(self) -> int:
        return self.player + self.ai + self.draws

    def record(self, outcome: Outcome) -> None:
        if outcome is Outcome.PLAYER:
            self.player += 1
        elif outcome is Outcome.AI:
            self.ai += 1
        else:
            self.draws += 1


@dataclass
class GameSession:
    """One player's series of games against the computer.

    The session owns its ``GameState``; the selector only sees it for the
    duration of a single move computation.
    """

    state: GameState = field(default_factory=GameState)
    difficulty: Difficulty = Difficulty.HARD
    selector: MoveSelector = field(default_factory=MoveSelector, repr=False)
    human_mark: Cell = Cell.X
    computer_mark: Cell = Cell.O
    scores: Scoreboard = field(default_factory=Scoreboard)
    move_log: List[Dict[str, Union[int, str]]] = field(default_factory=list)
    _recorded: bool = field(default=False, init=False, repr=False)

    @property
    def outcome(self) -> Optional[Outcome]:
        if self.state.status is Status.DRAW:
            return Outcome.DRAW
        if self.state.status is Status.WON:
            return Outcome.PLAYER if self.state.winner is self.human_mark else Outcome.AI
        return None

    @property
    def computer_should_move(self) -> bool:
        return not self.state.is_over and self.state.active_mark is self.computer_mark

    def set_difficulty(self, difficulty: Union[Difficulty, str]) -> None:
        self.difficulty = Difficulty(difficulty)

    def play_human_move(self, index: int) -> None:
        if not self.state.is_over and self.state.active_mark is not self.human_mark:
            raise OutOfTurn(self.human_mark)
        self.state.apply_move(index, self.human_mark)
        self._log_move(self.human_mark, index)

    def play_computer_move(self) -> Optional[int]:
        if not self.computer_should_move:
            return None
        index = self.selector.select_move(
            self.state, self.difficulty, self.computer_mark
        )
        if index is None:
            return None
        self.state.apply_move(index, self.computer_mark)
        self._log_move(self.computer_mark, index)
        return index

    def new_game(self) -> None:
        self.state = self.state.reset()
        self.move_log.clear()
        self._recorded = False

    def reset_scores(self) -> None:
        self.scores = Scoreboard()

    # ---- helpers ----

    def _log_move(self, mark: Cell, index: int) -> None:
        self.move_log.append({"player": mark.value, "index": index})
        outcome = self.outcome
        if outcome is not None and not self._recorded:
            self.scores.record(outcome)
            self._recorded = True
            logger.info(
                "game over after %d moves: %s (%s)",
                self.state.move_count,
                outcome.value,
                self.difficulty.value,
            )
