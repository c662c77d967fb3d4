"""
Utility modules for the Dealer Listings API.
"""

from .auth import (
    TokenService,
    TokenPayload,
    hash_password,
    verify_password,
    dummy_verify,
    password_fits_bcrypt
)

from .exceptions import (
    APIException,
    ValidationError,
    NotFoundError,
    UnauthorizedError,
    ForbiddenError,
    BadRequestError,
    StoreError,
    InvalidCredentialsError,
    TokenMissingError,
    TokenExpiredError,
    InvalidTokenError,
    DuplicateEmailError,
    PropertyNotFoundError,
    FileUploadError
)

# Dependencies are imported directly where needed to avoid circular imports

__all__ = [
    # Auth utilities
    "TokenService",
    "TokenPayload",
    "hash_password",
    "verify_password",
    "dummy_verify",
    "password_fits_bcrypt",

    # Exceptions
    "APIException",
    "ValidationError",
    "NotFoundError",
    "UnauthorizedError",
    "ForbiddenError",
    "BadRequestError",
    "StoreError",
    "InvalidCredentialsError",
    "TokenMissingError",
    "TokenExpiredError",
    "InvalidTokenError",
    "DuplicateEmailError",
    "PropertyNotFoundError",
    "FileUploadError",
]
