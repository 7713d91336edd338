"""
Infrastructure package: database and logging entry points.
"""

from src.infra.db import db
from src.infra.log import configure_logging, init_logging, get_logger

__all__ = [
    "db",
    "configure_logging",
    "init_logging",
    "get_logger",
]
