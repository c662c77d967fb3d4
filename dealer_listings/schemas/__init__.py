"""
Pydantic schemas for request/response validation.
"""

# Authentication schemas
from .auth import (
    RegisterRequest,
    LoginRequest,
    TokenResponse,
    RegisterResponse
)

# Property schemas
from .property import (
    PropertyForm,
    PropertyResponse,
    MessageResponse,
    PropertyCreatedResponse
)

# Error schemas
from .error import (
    ErrorDetail,
    ErrorResponse,
    APIErrorResponse
)

__all__ = [
    # Authentication schemas
    "RegisterRequest",
    "LoginRequest",
    "TokenResponse",
    "RegisterResponse",

    # Property schemas
    "PropertyForm",
    "PropertyResponse",
    "MessageResponse",
    "PropertyCreatedResponse",

    # Error schemas
    "ErrorDetail",
    "ErrorResponse",
    "APIErrorResponse",
]
