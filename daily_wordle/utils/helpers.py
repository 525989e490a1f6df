"""
Helper Functions

Contains utility functions used throughout the application.
"""

from typing import Dict, Optional

from flask import request

from ..models.game import RejectionReason

# HTTP status for each kind of rejected game operation
REJECTION_STATUS_CODES = {
    RejectionReason.INVALID_LENGTH: 400,
    RejectionReason.UNKNOWN_WORD: 400,
    RejectionReason.DUPLICATE_GUESS: 409,
    RejectionReason.GAME_ALREADY_COMPLETE: 409,
    RejectionReason.NOT_FOUND: 404,
    RejectionReason.UNEXPECTED: 500,
}


def get_user_identity(request_obj=None) -> Dict[str, Optional[str]]:
    """Extract user identity information from request."""
    if request_obj is None:
        request_obj = request

    user = getattr(request_obj, 'user', None) or {}
    return {
        'user_ip': request_obj.remote_addr or 'unknown',
        'user_id': user.get('id'),
        'username': user.get('username')
    }


def status_code_for(reason: RejectionReason) -> int:
    return REJECTION_STATUS_CODES.get(reason, 400)
