"""
Authentication Controller

Handles all authentication-related HTTP endpoints.
"""

from flask import Blueprint, request, jsonify
from ..services import get_auth_service
from ..utils.decorators import require_auth, get_bearer_token
from ..utils.game_logger import game_logger

auth_bp = Blueprint('auth', __name__)


def _service_unavailable():
    return jsonify({
        'success': False,
        'error': 'Authentication service unavailable'
    }), 500


@auth_bp.route('/register', methods=['POST'])
def register():
    """Register a new user."""
    try:
        auth_service = get_auth_service()
        if not auth_service:
            return _service_unavailable()

        data = request.get_json(silent=True)
        if not data:
            return jsonify({
                'success': False,
                'error': 'Request body is required'
            }), 400

        username = data.get('username')
        game_logger.log_user_action(request, 'register', username=username)

        result = auth_service.register_user(username, data.get('password'))

        game_logger.log_server_response(request, 'register', result['success'], result)
        return jsonify(result), 201 if result['success'] else 400

    except Exception as e:
        game_logger.log_error(request, e, 'register')
        return jsonify({'success': False, 'error': 'Registration failed'}), 500


@auth_bp.route('/login', methods=['POST'])
def login():
    """Login a user and return JWT token."""
    try:
        auth_service = get_auth_service()
        if not auth_service:
            return _service_unavailable()

        data = request.get_json(silent=True)
        if not data:
            return jsonify({
                'success': False,
                'error': 'Request body is required'
            }), 400

        username = data.get('username')
        game_logger.log_user_action(request, 'login', username=username)

        result = auth_service.login_user(username, data.get('password'))

        game_logger.log_server_response(request, 'login', result['success'], result)
        if result['success']:
            return jsonify(result)
        return jsonify(result), 401

    except Exception as e:
        game_logger.log_error(request, e, 'login')
        return jsonify({'success': False, 'error': 'Login failed'}), 500


@auth_bp.route('/verify', methods=['GET'])
@require_auth
def verify_token():
    """Verify JWT token and return user info."""
    return jsonify({
        'success': True,
        'user': request.user
    })


@auth_bp.route('/logout', methods=['POST'])
@require_auth
def logout():
    """Logout a user and invalidate their session."""
    try:
        auth_service = get_auth_service()
        game_logger.log_user_action(request, 'logout')

        result = auth_service.logout_user(get_bearer_token())

        game_logger.log_server_response(request, 'logout', result['success'], result)
        if result['success']:
            return jsonify(result)
        return jsonify(result), 400

    except Exception as e:
        game_logger.log_error(request, e, 'logout')
        return jsonify({'success': False, 'error': 'Logout failed'}), 500
