# -*- coding: utf-8 -*-

from flask import Blueprint, jsonify
import time
from sqlalchemy import text

from src.infra.db import db
from src.infra.log import get_logger

logger = get_logger(__name__)
health_bp = Blueprint('health', __name__)

SERVICE_NAME = 'landivo-api'


@health_bp.route('/health', methods=['GET', 'HEAD'])
@health_bp.route('/healthz', methods=['GET', 'HEAD'])
def healthz():
    """Liveness check (available at both /health and /healthz)."""
    return jsonify({
        'status': 'healthy',
        'service': SERVICE_NAME,
        'timestamp': time.time()
    }), 200


@health_bp.route('/readyz', methods=['GET', 'HEAD'])
def readyz():
    """Readiness check; fails with 503 when the database does not answer."""
    database_ok = True
    try:
        db.session.execute(text('SELECT 1'))
    except Exception as e:
        db.session.rollback()
        logger.error("Readiness database check failed", error=str(e))
        database_ok = False

    return jsonify({
        'status': 'ready' if database_ok else 'not_ready',
        'service': SERVICE_NAME,
        'timestamp': time.time(),
        'checks': {
            'database': database_ok
        }
    }), 200 if database_ok else 503
