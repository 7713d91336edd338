# -*- coding: utf-8 -*-
"""
Middleware package for the Landivo API
"""

from .error_handlers import register_error_handlers, error_response

__all__ = [
    'register_error_handlers',
    'error_response'
]
