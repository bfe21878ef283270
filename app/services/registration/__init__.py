# app/services/registration/__init__.py
from .lifecycle_service import (
    RegistrationLifecycleService,
    registration_lifecycle_service,
)

__all__ = [
    "RegistrationLifecycleService",
    "registration_lifecycle_service",
]
