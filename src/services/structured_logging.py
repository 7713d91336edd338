"""
Structured JSON logging service for the Landivo buyer API.

Provides structured logging with:
- JSON format output when enabled
- Request context integration (request_id, method, path)
- Consistent log structure across the application
- Request and best-effort failure event logging

Logs include: timestamp, level, message, request_id, method, path, status,
duration_ms, and any keyword context passed by the caller.
"""

import os
import json
import logging
from datetime import datetime, timezone
from flask import Flask, has_request_context
from src.services.request_context import elapsed_ms, get_request_context, get_request_id


class StructuredFormatter(logging.Formatter):
    """Custom formatter for structured JSON logging."""

    def __init__(self, json_enabled: bool = True):
        super().__init__()
        self.json_enabled = json_enabled

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON or plain text."""
        if not self.json_enabled:
            return super().format(record)

        log_entry = {
            'timestamp': datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        if has_request_context():
            log_entry.update(get_request_context())

        if hasattr(record, 'extra_fields'):
            log_entry.update(record.extra_fields)

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


class StructuredLogger:
    """Structured logger with request context integration."""

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def _log_with_context(self, level: int, message: str, exc_info=False, **kwargs):
        extra_fields = kwargs.copy()

        if 'request_id' not in extra_fields and has_request_context():
            extra_fields['request_id'] = get_request_id()

        self.logger.log(level, message, exc_info=exc_info, extra={'extra_fields': extra_fields})

    def debug(self, message: str, **kwargs):
        self._log_with_context(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs):
        self._log_with_context(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs):
        self._log_with_context(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs):
        self._log_with_context(logging.ERROR, message, **kwargs)

    def exception(self, message: str, **kwargs):
        """Log error message with the active exception's traceback."""
        self._log_with_context(logging.ERROR, message, exc_info=True, **kwargs)

    def log_request_start(self, method: str, path: str, **kwargs):
        self.info(
            f"Request started: {method} {path}",
            event_type='request_start',
            method=method,
            path=path,
            **kwargs
        )

    def log_request_end(self, method: str, path: str, status_code: int, duration_ms: float, **kwargs):
        self.info(
            f"Request completed: {method} {path} - {status_code} ({duration_ms}ms)",
            event_type='request_end',
            method=method,
            path=path,
            status_code=status_code,
            duration_ms=duration_ms,
            **kwargs
        )

    def log_best_effort_failure(self, operation: str, error: str, **kwargs):
        """Log a swallowed failure of a side effect that must not fail its caller."""
        self.warning(
            f"Best-effort {operation} failed: {error}",
            event_type='best_effort_failure',
            operation=operation,
            error_message=error,
            **kwargs
        )


def get_logger(name: str) -> StructuredLogger:
    """Get structured logger instance."""
    return StructuredLogger(name)


def configure_logging(app: Flask):
    """Configure structured logging for Flask application."""
    json_enabled = os.environ.get('LANDIVO_LOG_JSON', 'true').lower() == 'true'
    log_level = os.environ.get('LOG_LEVEL', 'INFO').upper()

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level, logging.INFO))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(StructuredFormatter(json_enabled=json_enabled))
    root_logger.addHandler(console_handler)

    app.logger.setLevel(getattr(logging, log_level, logging.INFO))

    loggers_to_configure = [
        'landivo.buyers',
        'landivo.vip',
        'landivo.import',
        'landivo.activity',
        'landivo.email_lists',
        'landivo.users',
    ]

    for logger_name in loggers_to_configure:
        logging.getLogger(logger_name).setLevel(getattr(logging, log_level, logging.INFO))

    get_logger('landivo.config').info(
        "Logging configured",
        json_enabled=json_enabled,
        log_level=log_level,
        loggers_configured=loggers_to_configure
    )


class LoggingMiddleware:
    """Middleware for automatic request/response logging."""

    def __init__(self, app: Flask):
        self.app = app
        self.logger = get_logger('landivo.requests')

        app.before_request(self._before_request)
        app.after_request(self._after_request)

    def _before_request(self):
        from flask import request

        # Skip health checks and metrics to reduce noise
        if request.path in ['/healthz', '/readyz', '/metrics']:
            return

        self.logger.log_request_start(
            method=request.method,
            path=request.path,
            remote_addr=request.remote_addr,
            user_agent=request.headers.get('User-Agent', ''),
            content_length=request.content_length
        )

    def _after_request(self, response):
        from flask import request

        if request.path in ['/healthz', '/readyz', '/metrics']:
            return response

        duration_ms = elapsed_ms()

        self.logger.log_request_end(
            method=request.method,
            path=request.path,
            status_code=response.status_code,
            duration_ms=duration_ms,
            content_length=response.content_length
        )

        return response


def init_logging(app: Flask):
    """Initialize structured logging for Flask application."""
    configure_logging(app)
    LoggingMiddleware(app)

    get_logger('landivo.startup').info(
        "Application starting",
        debug=app.debug,
        testing=app.testing
    )
