from flask import Blueprint, current_app, jsonify
from pymongo.errors import PyMongoError
from werkzeug.exceptions import HTTPException

from .errors import (
    AppError,
    NotFoundError,
    ServerError,
    UnauthorizedError,
    ValidationError,
)

error_handlers_bp = Blueprint("error_handlers", __name__)


@error_handlers_bp.app_errorhandler(ValidationError)
def handle_validation_error(error):
    """Handles validation errors."""
    current_app.logger.warning(f"Validation Error: {error.message}")
    return jsonify({"message": error.message}), error.status_code


@error_handlers_bp.app_errorhandler(UnauthorizedError)
def handle_unauthorized_error(error):
    """Handles failed authorization. No details are returned."""
    current_app.logger.warning("Unauthorized request.")
    return jsonify({"message": error.message}), error.status_code


@error_handlers_bp.app_errorhandler(NotFoundError)
def handle_not_found_error(error):
    """Handles not found errors."""
    current_app.logger.warning(f"Not Found Error: {error.message}")
    return jsonify({"message": error.message}), error.status_code


@error_handlers_bp.app_errorhandler(ServerError)
def handle_server_error(error):
    """Handles missing configuration."""
    current_app.logger.error(f"Server Error: {error.message}")
    return jsonify({"message": error.message}), error.status_code


@error_handlers_bp.app_errorhandler(AppError)
def handle_app_error(error):
    """Handles generic application errors."""
    current_app.logger.error(f"Application Error: {error.message}")
    return jsonify({"message": error.message}), error.status_code


@error_handlers_bp.app_errorhandler(PyMongoError)
def handle_db_error(e):
    """Handles document store errors."""
    current_app.logger.error(f"Database Error: {e}")
    # Avoid exposing raw database error details to the caller
    return jsonify({"message": "A database error occurred."}), 500


@error_handlers_bp.app_errorhandler(HTTPException)
def handle_http_exception(e):
    """Handles unknown routes, wrong methods and other HTTP errors as JSON."""
    return jsonify({"message": e.description}), e.code


@error_handlers_bp.app_errorhandler(Exception)
def handle_unexpected_error(e):
    """Handles unexpected server errors."""
    current_app.logger.exception(f"Internal Server Error: {e}")
    return jsonify({"message": "Internal server error."}), 500
