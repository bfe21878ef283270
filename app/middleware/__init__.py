"""Middleware module"""

from app.middleware.error_handler import (
    register_error_handlers,
    registration_error_handler,
    validation_error_handler,
)

__all__ = [
    "register_error_handlers",
    "registration_error_handler",
    "validation_error_handler",
]
