"""In-memory session registry for two-player Tic Tac Toe games."""

from .core import GameRegistry, Game, ResultCode, DuplicatePlayerError, is_code

__all__ = ["GameRegistry", "Game", "ResultCode", "DuplicatePlayerError", "is_code"]

__version__ = "0.1.0"
