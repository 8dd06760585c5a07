from flask import jsonify
from sqlalchemy.exc import IntegrityError


class AppError(Exception):
    status_code = 400

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(AppError):
    status_code = 400


class UnauthorizedError(AppError):
    status_code = 403


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    status_code = 409


class AlreadyPaidError(ConflictError):
    pass


class InvalidStateError(AppError):
    status_code = 409


class InfrastructureError(AppError):
    """Storage or gateway fault. Never returned as a business result."""

    status_code = 503


def _error_response(message, status_code):
    return jsonify({"success": False, "message": message}), status_code


def register_error_handlers(app):
    @app.errorhandler(AppError)
    def handle_app_error(err):
        return _error_response(err.message, err.status_code)

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(_err):
        app.logger.warning("Database integrity error")
        return _error_response("Conflict. Resource already exists.", 409)

    @app.errorhandler(400)
    def bad_request(_err):
        return _error_response("Bad request", 400)

    @app.errorhandler(401)
    def unauthorized(_err):
        return _error_response("Unauthorized", 401)

    @app.errorhandler(403)
    def forbidden(_err):
        return _error_response("Forbidden", 403)

    @app.errorhandler(404)
    def not_found(_err):
        return _error_response("Not found", 404)

    @app.errorhandler(429)
    def too_many_requests(_err):
        return _error_response("Too many requests", 429)

    @app.errorhandler(500)
    def server_error(_err):
        app.logger.exception("Internal server error")
        return _error_response("Internal server error", 500)
