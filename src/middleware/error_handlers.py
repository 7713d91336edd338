"""
Error handling middleware.
Provides consistent error responses for the buyer, email list and user APIs.
"""
from flask import jsonify
from sqlalchemy.exc import OperationalError, IntegrityError
from werkzeug.exceptions import HTTPException

from src.infra.db import db
from src.infra.log import get_logger
from src.services.request_context import with_request_id
from src.utils.errors import LandivoError, ConflictError, InternalError

logger = get_logger(__name__)

INTERNAL_ERROR_MESSAGE = 'An error occurred while processing the request.'


def error_response(error: LandivoError):
    """Serialize a service error as `{error, message, request_id, ...}`."""
    return jsonify(with_request_id(error.to_dict())), error.status_code


def _database_message(e) -> str:
    return str(e.orig) if getattr(e, 'orig', None) is not None else str(e)


def register_error_handlers(app):
    """Register error handlers for service and database errors"""

    @app.errorhandler(LandivoError)
    def handle_service_error(e):
        if e.status_code >= 500:
            logger.error(f"Request failed: {e.message}", error_type=e.error)
        return error_response(e)

    @app.errorhandler(OperationalError)
    def handle_operational_error(e):
        """Database failures (connection, locking, missing table) are internal errors."""
        db.session.rollback()
        error_msg = _database_message(e)
        logger.error("Database operational error", error_message=error_msg)
        return error_response(InternalError(INTERNAL_ERROR_MESSAGE, payload={'details': error_msg}))

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(e):
        """Unique violations are conflicts; any other constraint failure is internal."""
        db.session.rollback()
        error_msg = _database_message(e)
        logger.error("Database integrity error", error_message=error_msg)

        if 'unique' in error_msg.lower() or 'duplicate' in error_msg.lower():
            return error_response(ConflictError('This entry already exists', payload={'details': error_msg}))

        return error_response(InternalError(INTERNAL_ERROR_MESSAGE, payload={'details': error_msg}))

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        return jsonify(with_request_id({
            'error': e.name.lower().replace(' ', '_'),
            'message': e.description,
        })), e.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        """Pass the message of unexpected failures through to the admin client."""
        db.session.rollback()
        logger.exception(f"Unhandled error: {e}")
        return error_response(InternalError(INTERNAL_ERROR_MESSAGE, payload={'details': str(e)}))
