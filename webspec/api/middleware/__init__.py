"""
API Middleware - Exception handlers shared by all routes.
"""

from webspec.api.middleware.error_handler import (
    AppException,
    PayloadTooLargeError,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler,
)

__all__ = [
    "AppException",
    "PayloadTooLargeError",
    "app_exception_handler",
    "http_exception_handler",
    "validation_exception_handler",
    "generic_exception_handler",
]
