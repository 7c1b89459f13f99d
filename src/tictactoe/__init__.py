"""Tic-tac-toe package exposing game rules, the AI opponent, and the web application."""

from .ai import Difficulty, MoveSelector
from .game import GameState
from .session import GameSession
from .ui import app

__all__ = ["Difficulty", "GameSession", "GameState", "MoveSelector", "app"]
