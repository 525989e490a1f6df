"""
Game Logger Module

This module provides structured logging for user actions, server responses,
and game events. Entries are JSON lines in a daily log file; warnings and
errors are also echoed to the console.
"""

import logging
import json
from datetime import datetime
from typing import Dict, Any, Optional
from pathlib import Path

from ..config.app_config import Config
from .helpers import get_user_identity


class GameLogger:
    """
    Centralized logging system for the daily word game server.

    Features:
    - User action tracking with IP/user identification
    - Server response logging
    - Game event logging (created, won, lost, expired)
    - JSON structured logs for easy parsing
    """

    def __init__(self, log_dir: str = "logs", level: str = "INFO"):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.level = getattr(logging, str(level).upper(), logging.INFO)

        # Setup main game logger
        self.logger = self._setup_logger()

    def _log_file(self) -> Path:
        return self.log_dir / f"game_log_{datetime.now().strftime('%Y-%m-%d')}.log"

    def _setup_logger(self) -> logging.Logger:
        """Setup the main game logger with file and console handlers."""
        logger = logging.getLogger('daily_wordle')
        logger.setLevel(self.level)

        # Prevent duplicate handlers
        if logger.handlers:
            logger.handlers.clear()

        file_handler = logging.FileHandler(self._log_file(), encoding='utf-8')
        file_handler.setLevel(self.level)

        # Console handler for only important messages (WARNING and above)
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.WARNING)

        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s | %(levelname)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))

        logger.addHandler(file_handler)
        logger.addHandler(console_handler)

        return logger

    def _create_log_entry(self,
                          event_type: str,
                          action: str,
                          user_info: Dict[str, Optional[str]],
                          details: Dict[str, Any]) -> str:
        """Create a structured log entry."""
        log_entry = {
            'timestamp': datetime.now().isoformat(),
            'event_type': event_type,
            'action': action,
            'user': user_info,
            'details': details
        }
        return json.dumps(log_entry, ensure_ascii=False, default=str)

    def log_user_action(self, request, action: str, game_id: Optional[str] = None, **kwargs):
        """
        Log user actions with full context.

        Args:
            request: Flask request object
            action: Type of action (e.g., 'get_today', 'submit_guess', 'get_history')
            game_id: Game identifier if applicable
            **kwargs: Additional details to log
        """
        details = {
            'game_id': game_id,
            'endpoint': request.endpoint,
            'method': request.method,
            'url': request.url,
            **kwargs
        }

        log_message = self._create_log_entry('USER_ACTION', action, get_user_identity(request), details)
        self.logger.info(log_message)

    def log_server_response(self,
                            request,
                            action: str,
                            success: bool,
                            response_data: Dict[str, Any],
                            game_id: Optional[str] = None,
                            **kwargs):
        """
        Log server responses with full context.

        Args:
            request: Flask request object
            action: Action that was performed
            success: Whether the action succeeded
            response_data: Data being returned to client
            game_id: Game identifier if applicable
            **kwargs: Additional details to log
        """
        details = {
            'game_id': game_id,
            'success': success,
            'response_data': self._sanitize_response_data(response_data),
            **kwargs
        }

        event_type = 'SERVER_RESPONSE_SUCCESS' if success else 'SERVER_RESPONSE_ERROR'
        log_message = self._create_log_entry(event_type, action, get_user_identity(request), details)

        if success:
            self.logger.info(log_message)
        else:
            self.logger.warning(log_message)

    def log_game_event(self, game_id: Optional[str], event: str, user_id: Optional[str] = None, **kwargs):
        """
        Log game-specific events (created, won, lost, expired).

        Args:
            game_id: Game identifier
            event: Type of game event
            user_id: Owner of the game, if known
            **kwargs: Additional game details
        """
        user_info = {'user_ip': None, 'user_id': user_id, 'username': None}
        details = {'game_id': game_id, **kwargs}

        log_message = self._create_log_entry('GAME_EVENT', event, user_info, details)
        self.logger.info(log_message)

    def log_error(self, request, error: Exception, action: str, game_id: Optional[str] = None):
        """
        Log errors with full context.

        Args:
            request: Flask request object
            error: Exception that occurred
            action: Action that was being performed
            game_id: Game identifier if applicable
        """
        details = {
            'game_id': game_id,
            'error_type': type(error).__name__,
            'error_message': str(error),
            'action': action
        }

        log_message = self._create_log_entry('ERROR', action, get_user_identity(request), details)
        self.logger.error(log_message)

    def _sanitize_response_data(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Remove tokens and shrink boards before they are written to the log."""
        if not isinstance(data, dict):
            return {'data_type': type(data).__name__}

        sanitized = data.copy()
        if 'token' in sanitized:
            sanitized['token'] = '***'

        board = sanitized.get('board')
        if isinstance(board, dict):
            sanitized['board'] = {
                'game_id': board.get('game_id'),
                'status': board.get('status'),
                'current_guess': board.get('current_guess'),
                'word_revealed': board.get('word') is not None
            }

        if isinstance(sanitized.get('games'), list):
            sanitized['games'] = {'count': len(sanitized['games'])}

        return sanitized

    def get_log_stats(self) -> Dict[str, Any]:
        """Get statistics about today's logged events (useful for monitoring)."""
        try:
            log_file = self._log_file()
            if not log_file.exists():
                return {'error': 'No log file found for today'}

            stats = {
                'log_file': str(log_file),
                'file_size_mb': round(log_file.stat().st_size / (1024 * 1024), 2),
                'total_entries': 0,
                'user_actions': 0,
                'server_responses': 0,
                'game_events': 0,
                'errors': 0
            }

            with open(log_file, 'r', encoding='utf-8') as f:
                for line in f:
                    if not line.strip():
                        continue
                    stats['total_entries'] += 1
                    if 'USER_ACTION' in line:
                        stats['user_actions'] += 1
                    elif 'SERVER_RESPONSE' in line:
                        stats['server_responses'] += 1
                    elif 'GAME_EVENT' in line:
                        stats['game_events'] += 1
                    elif 'ERROR' in line:
                        stats['errors'] += 1

            return stats

        except OSError as e:
            return {'error': f'Failed to get stats: {str(e)}'}


# Global logger instance
game_logger = GameLogger(Config.LOG_DIR, Config.LOG_LEVEL)
