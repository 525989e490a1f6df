"""
Services Package

Contains all business logic and service classes. Service instances are
built by the application factory and stored on ``app.extensions``; the
accessors below fetch them for the current application.
"""

from typing import Optional

from flask import current_app

from .auth_service import AuthService
from .dictionary import WordDictionary
from .game_service import GameService
from .repository import GameRepository, InMemoryGameRepository, MongoGameRepository
from .scheduler import CompletionScheduler, CompletionWorker, InMemoryJobStore, MongoJobStore


def get_game_service() -> Optional[GameService]:
    """Get the game service of the current application."""
    return current_app.extensions.get('game_service')


def get_auth_service() -> Optional[AuthService]:
    """Get the auth service of the current application."""
    return current_app.extensions.get('auth_service')


__all__ = [
    'AuthService', 'get_auth_service',
    'GameService', 'get_game_service',
    'WordDictionary',
    'GameRepository', 'InMemoryGameRepository', 'MongoGameRepository',
    'CompletionScheduler', 'CompletionWorker', 'InMemoryJobStore', 'MongoJobStore'
]
