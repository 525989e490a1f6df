"""
Game Controller

Handles all game-related HTTP endpoints: today's board, guesses, and the
player's history.
"""

from flask import Blueprint, current_app, request, jsonify
from ..models.game import Ok
from ..services import get_auth_service, get_game_service
from ..services.board import board_to_emoji, project
from ..utils.decorators import require_auth
from ..utils.game_logger import game_logger
from ..utils.helpers import status_code_for

game_bp = Blueprint('game', __name__)


def _board_response(board):
    response_data = {
        'success': True,
        'board': board.to_dict()
    }
    if board.word is not None:
        response_data['share'] = board_to_emoji(board)
    return response_data


def _service_unavailable():
    return jsonify({
        'success': False,
        'error': 'Game service unavailable'
    }), 500


@game_bp.route('/game', methods=['GET'])
@require_auth
def get_today():
    """Get (or start) today's game for the current user."""
    try:
        game_service = get_game_service()
        if not game_service:
            return _service_unavailable()

        game_logger.log_user_action(request, 'get_today')

        board = game_service.get_todays_board(request.user['id'])
        response_data = _board_response(board)

        game_logger.log_server_response(request, 'get_today', True, response_data, board.game_id)
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'get_today')
        return jsonify({'success': False, 'error': 'Failed to load game'}), 500


@game_bp.route('/game/guess', methods=['POST'])
@require_auth
def make_guess():
    """Submit a guess for today's game."""
    try:
        game_service = get_game_service()
        if not game_service:
            return _service_unavailable()

        data = request.get_json(silent=True)
        if not data or not isinstance(data.get('guess'), str):
            error_response = {
                'success': False,
                'error': 'Guess is required'
            }
            game_logger.log_server_response(request, 'submit_guess', False, error_response)
            return jsonify(error_response), 400

        guess = data['guess']
        game_logger.log_user_action(request, 'submit_guess', guess=guess, guess_length=len(guess))

        result = game_service.create_guess(request.user['id'], guess)

        if not isinstance(result, Ok):
            error_response = {
                'success': False,
                'error': result.message,
                'reason': result.reason.value
            }
            game_logger.log_server_response(
                request, 'submit_guess', False, error_response,
                attempted_guess=guess
            )
            return jsonify(error_response), status_code_for(result.reason)

        board = project(result.game)
        response_data = _board_response(board)

        game_logger.log_server_response(
            request, 'submit_guess', True, response_data, board.game_id,
            guess=guess, round=board.current_guess, status=board.status.value
        )
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'submit_guess')
        return jsonify({'success': False, 'error': 'Failed to process guess'}), 500


@game_bp.route('/history', methods=['GET'])
@require_auth
def get_history():
    """List all of the current user's games, newest first."""
    try:
        game_service = get_game_service()
        if not game_service:
            return _service_unavailable()

        game_logger.log_user_action(request, 'get_history')

        games = game_service.list_games(request.user['id'])
        response_data = {
            'success': True,
            'games': [summary.to_dict() for summary in games]
        }

        game_logger.log_server_response(request, 'get_history', True, response_data)
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'get_history')
        return jsonify({'success': False, 'error': 'Failed to load history'}), 500


@game_bp.route('/history/<game_id>', methods=['GET'])
@require_auth
def get_historical_game(game_id):
    """Get the board of one of the current user's games."""
    try:
        game_service = get_game_service()
        if not game_service:
            return _service_unavailable()

        game_logger.log_user_action(request, 'get_game', game_id)

        result = game_service.get_game_for_user(request.user['id'], game_id)
        if not isinstance(result, Ok):
            error_response = {
                'success': False,
                'error': result.message,
                'reason': result.reason.value
            }
            game_logger.log_server_response(request, 'get_game', False, error_response, game_id)
            return jsonify(error_response), status_code_for(result.reason)

        response_data = _board_response(project(result.game))

        game_logger.log_server_response(request, 'get_game', True, response_data, game_id)
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'get_game', game_id)
        return jsonify({'success': False, 'error': 'Failed to load game'}), 500


@game_bp.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    try:
        dictionary = current_app.extensions.get('word_dictionary')
        scheduler = current_app.extensions.get('completion_scheduler')
        auth_service = get_auth_service()

        response_data = {
            'status': 'healthy',
            'words': dictionary.get_statistics() if dictionary else {},
            'pending_completion_jobs': scheduler.pending_count() if scheduler else 0,
            'active_sessions': auth_service.get_active_sessions_count() if auth_service else 0,
            'log_stats': game_logger.get_log_stats()
        }
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'health_check')
        return jsonify({'status': 'error', 'error': 'Health check failed'}), 500
