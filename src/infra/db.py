"""
Database entry point.

Models and services import the shared SQLAlchemy instance from here.
"""

from src.database import db

__all__ = ["db"]
