"""
Authentication Decorators

Contains the decorator that guards HTTP endpoints with a bearer token.
"""

from functools import wraps
from flask import request, jsonify


def require_auth(f):
    """
    Decorator to require authentication for protected HTTP endpoints.

    On success the verified user dict is available as ``request.user``.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        from ..services import get_auth_service

        auth_service = get_auth_service()
        if not auth_service:
            return jsonify({
                'success': False,
                'error': 'Authentication service unavailable'
            }), 500

        token = get_bearer_token()
        if not token:
            return jsonify({
                'success': False,
                'error': 'Authorization token required'
            }), 401

        result = auth_service.verify_token(token)
        if not result['success']:
            return jsonify({
                'success': False,
                'error': result['error']
            }), 401

        request.user = result['user']
        return f(*args, **kwargs)

    return decorated_function


def get_bearer_token():
    """Token from an ``Authorization: Bearer <token>`` header, or None."""
    auth_header = request.headers.get('Authorization')
    if not auth_header or not auth_header.startswith('Bearer '):
        return None
    return auth_header.split(' ', 1)[1].strip() or None
