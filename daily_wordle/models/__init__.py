"""
Data Models Package

Contains all data models and schemas used throughout the application.
"""

from .game import (
    Board, BoardRow, ComputedLetter, Game, GameResult, GameStatus, GameSummary,
    Guess, LetterState, Ok, Rejected, RejectionReason, is_game_complete,
)
from .user import User

__all__ = [
    'Board', 'BoardRow', 'ComputedLetter', 'Game', 'GameResult', 'GameStatus',
    'GameSummary', 'Guess', 'LetterState', 'Ok', 'Rejected', 'RejectionReason',
    'is_game_complete', 'User'
]
