"""
Logging entry point.

Services obtain their structured loggers from here.
"""

from src.services.structured_logging import (
    configure_logging,
    init_logging,
    get_logger,
)

__all__ = ["configure_logging", "init_logging", "get_logger"]
