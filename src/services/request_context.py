# -*- coding: utf-8 -*-
"""
Request ids for the Landivo API.

Every request carries an id: the caller's X-Request-ID when it is a valid
UUID, otherwise a fresh one. The id is echoed on the response and attached
to log records and error bodies.
"""

import time
import uuid
from typing import Any, Dict, Optional
from flask import Flask, Response, g, has_request_context, request

REQUEST_ID_HEADER = 'X-Request-ID'


def _incoming_request_id() -> Optional[str]:
    value = request.headers.get(REQUEST_ID_HEADER)
    if not value:
        return None
    try:
        return str(uuid.UUID(value))
    except ValueError:
        return None


def _begin_request():
    g.request_id = _incoming_request_id() or str(uuid.uuid4())
    g.request_start_time = time.time()


def _tag_response(response: Response) -> Response:
    request_id = get_request_id()
    if request_id:
        response.headers[REQUEST_ID_HEADER] = request_id
    return response


def get_request_id() -> Optional[str]:
    if not has_request_context():
        return None
    return g.get('request_id')


def elapsed_ms() -> float:
    """Milliseconds since the current request started, 0 outside a request."""
    start = g.get('request_start_time') if has_request_context() else None
    return round((time.time() - start) * 1000, 2) if start else 0


def get_request_context() -> Dict[str, Any]:
    """Fields merged into every log record written during a request."""
    if not has_request_context():
        return {}
    return {
        'request_id': get_request_id(),
        'method': request.method,
        'path': request.path,
        'remote_addr': request.remote_addr,
    }


def with_request_id(body: Dict[str, Any]) -> Dict[str, Any]:
    """Stamp an error body with the current request id."""
    body['request_id'] = get_request_id()
    return body


def init_request_context(app: Flask):
    """Register before this app's other request hooks so logs see the id."""
    app.before_request(_begin_request)
    app.after_request(_tag_response)
