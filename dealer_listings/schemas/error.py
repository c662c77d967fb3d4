"""
Error response schemas for API documentation and consistent error formatting.
"""

from pydantic import BaseModel, Field
from typing import List, Optional, Any, Dict


class ErrorDetail(BaseModel):
    """Schema for individual error detail."""

    field: Optional[str] = Field(
        None,
        description="Field name that caused the error",
        examples=["body -> email"]
    )

    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["value is not a valid email address"]
    )

    type: Optional[str] = Field(
        None,
        description="Error type identifier",
        examples=["value_error"]
    )

    input: Optional[Any] = Field(
        None,
        description="Input value that caused the error"
    )


class ErrorResponse(BaseModel):
    """Schema for standardized error responses."""

    code: str = Field(..., description="Error code identifier", examples=["VALIDATION_ERROR"])
    message: str = Field(..., description="Human-readable error message")
    timestamp: str = Field(..., description="Error timestamp in ISO format", examples=["2024-01-01T00:00:00Z"])
    request_id: Optional[str] = Field(None, description="Request identifier for tracking", examples=["abc12345"])
    details: Optional[List[ErrorDetail]] = Field(None, description="Per-field validation errors")


class APIErrorResponse(BaseModel):
    """Schema for API error response wrapper."""

    error: ErrorResponse = Field(..., description="Error information")


def _example(code: str, message: str) -> Dict[str, Any]:
    return {
        "application/json": {
            "example": {
                "error": {
                    "code": code,
                    "message": message,
                    "timestamp": "2024-01-01T00:00:00Z",
                    "request_id": "abc12345"
                }
            }
        }
    }


COMMON_ERROR_RESPONSES = {
    401: {
        "description": "Unauthorized - bad credentials or an invalid/expired token",
        "model": APIErrorResponse,
        "content": _example("INVALID_TOKEN", "Invalid token."),
    },
    403: {
        "description": "Forbidden - bearer token missing",
        "model": APIErrorResponse,
        "content": _example("TOKEN_MISSING", "Access denied, token missing."),
    },
    404: {
        "description": "Not Found - property missing or owned by another dealer",
        "model": APIErrorResponse,
        "content": _example("NOT_FOUND_OR_NOT_OWNED", "Property not found with ID: 42"),
    },
    422: {
        "description": "Validation Error - missing or malformed fields",
        "model": APIErrorResponse,
        "content": _example("VALIDATION_ERROR", "Request validation failed"),
    },
    500: {
        "description": "Internal Server Error - data store failure",
        "model": APIErrorResponse,
        "content": _example("DATABASE_ERROR", "Database operation failed"),
    },
}


def get_error_responses(*status_codes: int) -> Dict[int, Dict[str, Any]]:
    """
    Get error response schemas for specific status codes.

    Args:
        status_codes: HTTP status codes to include

    Returns:
        Dictionary of error response schemas
    """
    return {
        code: COMMON_ERROR_RESPONSES[code]
        for code in status_codes
        if code in COMMON_ERROR_RESPONSES
    }


def get_auth_error_responses() -> Dict[int, Dict[str, Any]]:
    """Get authentication and authorization error response schemas."""
    return get_error_responses(401, 403, 422, 500)


def get_owned_resource_error_responses() -> Dict[int, Dict[str, Any]]:
    """Get error response schemas for dealer-scoped mutations."""
    return get_error_responses(401, 403, 404, 422, 500)
