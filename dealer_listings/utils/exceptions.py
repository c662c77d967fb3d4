"""
Custom exception classes for the Dealer Listings API.
Provides structured error handling with appropriate HTTP status codes.
"""

from typing import Any, Dict, Optional, List
from fastapi import HTTPException, status


class APIException(HTTPException):
    """Base API exception class."""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: Optional[str] = None,
        headers: Optional[Dict[str, Any]] = None
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code


class ValidationError(APIException):
    """Validation error exception."""

    def __init__(
        self,
        detail: str,
        field_errors: Optional[List[Dict[str, str]]] = None
    ):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=detail,
            error_code="VALIDATION_ERROR"
        )
        self.field_errors = field_errors or []


class NotFoundError(APIException):
    """Resource not found exception."""

    def __init__(self, resource: str, resource_id: Optional[str] = None):
        detail = f"{resource} not found"
        if resource_id:
            detail += f" with ID: {resource_id}"

        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            error_code="NOT_FOUND"
        )


class UnauthorizedError(APIException):
    """Authentication required exception."""

    def __init__(self, detail: str = "Authentication required"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            error_code="UNAUTHORIZED",
            headers={"WWW-Authenticate": "Bearer"}
        )


class ForbiddenError(APIException):
    """Access forbidden exception."""

    def __init__(self, detail: str = "Access forbidden"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
            error_code="FORBIDDEN"
        )


class BadRequestError(APIException):
    """Bad request exception."""

    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            error_code="BAD_REQUEST"
        )


class StoreError(APIException):
    """Underlying data-store failure. The message shown to clients is fixed."""

    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Database operation failed",
            error_code="DATABASE_ERROR"
        )
        self.operation = operation
        self.cause = cause


# Authentication specific exceptions
class InvalidCredentialsError(UnauthorizedError):
    """Invalid login credentials exception."""

    def __init__(self, detail: str = "Invalid email or password."):
        super().__init__(detail)
        self.error_code = "INVALID_CREDENTIALS"


class TokenMissingError(ForbiddenError):
    """No bearer token on a protected request."""

    def __init__(self, detail: str = "Access denied, token missing."):
        super().__init__(detail)
        self.error_code = "TOKEN_MISSING"


class TokenExpiredError(UnauthorizedError):
    """JWT token expired exception."""

    def __init__(self, detail: str = "Token has expired."):
        super().__init__(detail)
        self.error_code = "TOKEN_EXPIRED"


class InvalidTokenError(UnauthorizedError):
    """Invalid JWT token exception."""

    def __init__(self, detail: str = "Invalid token."):
        super().__init__(detail)
        self.error_code = "INVALID_TOKEN"


class DuplicateEmailError(APIException):
    """A dealer with this email is already registered. Reported as a store failure."""

    def __init__(self, email: str):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Registration failed",
            error_code="DUPLICATE_EMAIL"
        )
        self.email = email


# Property specific exceptions
class PropertyNotFoundError(NotFoundError):
    """Property does not exist or is owned by another dealer."""

    def __init__(self, property_id: int):
        super().__init__("Property", str(property_id))
        self.error_code = "NOT_FOUND_OR_NOT_OWNED"


# File upload exceptions
class FileUploadError(BadRequestError):
    """File upload error exception."""

    def __init__(self, detail: str):
        super().__init__(f"File upload error: {detail}")
