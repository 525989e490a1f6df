"""
Utilities Package

Contains utility functions, decorators, and helper modules.
"""

from .decorators import require_auth, get_bearer_token
from .helpers import get_user_identity, status_code_for
from .game_logger import game_logger

__all__ = ['require_auth', 'get_bearer_token', 'get_user_identity', 'status_code_for', 'game_logger']
