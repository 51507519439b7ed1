"""
Error Handling

Exceptions raised by the handlers and the process-wide error responders.
"""

from flask import jsonify, request
from pymongo.errors import DuplicateKeyError
from werkzeug.exceptions import HTTPException

from .api_logger import api_logger


class ValidationError(Exception):
    """Client supplied an unusable request body."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def register_error_handlers(app) -> None:
    @app.errorhandler(ValidationError)
    def handle_validation_error(error):
        return jsonify({'message': error.message}), error.status_code

    @app.errorhandler(DuplicateKeyError)
    def handle_duplicate_key(error):
        api_logger.logger.warning(f"Duplicate key on {request.method} {request.path}")
        return jsonify({'message': 'Username already exists'}), 409

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        return error

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        api_logger.log_error(request, error, request.endpoint or 'unknown')
        return jsonify({'message': 'Internal server error'}), 500
