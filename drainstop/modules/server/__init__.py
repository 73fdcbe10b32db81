"""HTTP server whose listener is governed by the shutdown controller."""

from .app import create_app
from .client import AioSessionCache
from .errors import AppError, Errors, error_response
from .runner import serve

__all__ = ['create_app', 'AioSessionCache', 'AppError', 'Errors', 'error_response', 'serve']
