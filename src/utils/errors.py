# -*- coding: utf-8 -*-
"""Exception classes raised by the Landivo services and mapped to HTTP responses."""


class LandivoError(Exception):
    """Base exception for all service-level errors."""

    status_code = 500
    error = 'internal_error'

    def __init__(self, message: str, payload: dict = None):
        super().__init__(message)
        self.message = message
        self.payload = payload or {}

    def to_dict(self) -> dict:
        body = {'error': self.error, 'message': self.message}
        body.update(self.payload)
        return body


class ValidationError(LandivoError):
    """Raised when a required field is missing or invalid (400)."""
    status_code = 400
    error = 'validation_error'


class NotFoundError(LandivoError):
    """Raised when the requested record does not exist (404)."""
    status_code = 404
    error = 'not_found'


class ConflictError(LandivoError):
    """Raised when a unique field is already taken (409)."""
    status_code = 409
    error = 'conflict'


class InternalError(LandivoError):
    """Raised for unexpected or database failures (500)."""
    pass
