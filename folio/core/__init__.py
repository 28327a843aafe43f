"""Core infrastructure: settings, logging, exceptions."""

from .config import settings
from .exceptions import (
    AppException,
    BadRequestError,
    ExternalServiceError,
    NotFoundError,
    RepositoryError,
    ValidationError,
)


__all__ = [
    "AppException",
    "BadRequestError",
    "ExternalServiceError",
    "NotFoundError",
    "RepositoryError",
    "ValidationError",
    "settings",
]
