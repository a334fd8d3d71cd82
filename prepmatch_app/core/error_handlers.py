"""
Error Handlers for PrepMatch

Every failure of the JSON API leaves as the same envelope::

    {"success": false, "code": "INVALID_COLUMN", "message": "...", "details": {...}}

Domain errors derive from ``PrepMatchError`` and carry their own HTTP
status; werkzeug errors on ``/api/`` paths are converted to the same shape.
"""

from typing import Any, Dict, Optional

from flask import current_app, jsonify, request
from werkzeug.exceptions import HTTPException


class PrepMatchError(Exception):
    """Base exception class for PrepMatch."""

    def __init__(
        self,
        message: str,
        code: str = 'UNKNOWN_ERROR',
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        body = {'success': False, 'code': self.code, 'message': self.message}
        if self.details:
            body['details'] = self.details
        return body


class NotFoundError(PrepMatchError):
    """Resource not found."""

    def __init__(self, message: str = 'Resource not found', resource: str = None):
        super().__init__(
            message=message,
            code='NOT_FOUND',
            status_code=404,
            details={'resource': resource} if resource else None
        )


class ValidationError(PrepMatchError):
    """Request payload rejected before reaching a game."""

    def __init__(self, message: str = 'Validation failed', errors: Any = None):
        super().__init__(
            message=message,
            code='VALIDATION_ERROR',
            status_code=400,
            details={'errors': errors} if errors else None
        )


def error_response(error: PrepMatchError) -> tuple:
    return jsonify(error.to_dict()), error.status_code


def success_response(data: Any = None, message: str = None) -> dict:
    """Create a standardized success response."""
    response = {'success': True}
    if data is not None:
        response['data'] = data
    if message:
        response['message'] = message
    return response


def _http_code(error: HTTPException) -> str:
    # "Method Not Allowed" -> "METHOD_NOT_ALLOWED"
    return (error.name or 'HTTP error').upper().replace(' ', '_')


def register_error_handlers(app):
    """Register error handlers with Flask app."""

    @app.errorhandler(PrepMatchError)
    def handle_prepmatch_error(error):
        log = current_app.logger.error if error.status_code >= 500 else current_app.logger.warning
        log("%s %s -> %s: %s", request.method, request.path, error.code, error.message)
        return error_response(error)

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        if '/api/' not in request.path:
            return error
        return error_response(PrepMatchError(error.description, _http_code(error), error.code))

    @app.errorhandler(500)
    def handle_internal_error(error):
        current_app.logger.exception('Internal server error on %s %s', request.method, request.path)
        if '/api/' in request.path:
            return error_response(PrepMatchError('Internal server error', 'SERVER_ERROR', 500))
        return error
