"""
Error handling service for consistent error response formatting and logging.
Every error leaves the API as {"error": {code, message, timestamp, request_id, details?}}.
"""

from datetime import datetime, timezone
from typing import Dict, Any, Optional, List
from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError, IntegrityError
from dealer_listings.utils.exceptions import APIException, StoreError
import logging
import uuid

logger = logging.getLogger(__name__)

_PLAIN_INPUT_TYPES = (str, int, float, bool, type(None))


class ErrorHandlerService:
    """
    Service for handling and formatting errors consistently across the application.
    Data-store failures are logged in full and reported with a fixed message.
    """

    @staticmethod
    def format_error_response(
        error_code: str,
        message: str,
        details: Optional[List[Dict[str, Any]]] = None,
        request_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Format error response in a consistent structure.

        Args:
            error_code: Error code identifier
            message: Human-readable error message
            details: Optional list of detailed error information
            request_id: Optional request identifier for tracking

        Returns:
            Formatted error response dictionary
        """
        response = {
            "error": {
                "code": error_code,
                "message": message,
                "timestamp": ErrorHandlerService._get_current_timestamp(),
            }
        }

        if details:
            response["error"]["details"] = details

        if request_id:
            response["error"]["request_id"] = request_id

        return response

    @staticmethod
    def handle_api_exception(
        exception: APIException,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """
        Handle custom API exceptions with structured response.

        Args:
            exception: API exception instance
            request: Optional FastAPI request object

        Returns:
            JSON response with formatted error
        """
        request_id = ErrorHandlerService._get_request_id(request)
        path = request.url.path if request else None

        if isinstance(exception, StoreError):
            logger.error(
                f"Store Error [{request_id}] {path}: {exception.operation} failed: {exception.cause}",
                exc_info=exception.cause
            )
        else:
            logger.warning(f"API Exception [{request_id}] {path}: {exception.error_code} - {exception.detail}")

        details = getattr(exception, "field_errors", None)

        error_response = ErrorHandlerService.format_error_response(
            error_code=exception.error_code or "API_ERROR",
            message=exception.detail,
            details=details,
            request_id=request_id
        )

        return JSONResponse(
            status_code=exception.status_code,
            content=error_response,
            headers=exception.headers
        )

    @staticmethod
    def handle_validation_error(
        exception: Exception,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """
        Handle request validation errors with per-field information.

        Args:
            exception: FastAPI RequestValidationError or pydantic ValidationError
            request: Optional FastAPI request object

        Returns:
            JSON response with validation error details
        """
        request_id = ErrorHandlerService._get_request_id(request)

        validation_details = []
        for error in exception.errors():
            field_path = " -> ".join(str(loc) for loc in error["loc"])
            detail = {
                "field": field_path,
                "message": error["msg"],
                "type": error["type"],
            }
            # Uploaded files, nested bodies and passwords are not echoed back
            if isinstance(error.get("input"), _PLAIN_INPUT_TYPES) and "password" not in error["loc"]:
                detail["input"] = error.get("input")
            validation_details.append(detail)

        logger.warning(
            f"Validation Error [{request_id}]: {len(validation_details)} field errors "
            f"on {request.url.path if request else None}"
        )

        error_response = ErrorHandlerService.format_error_response(
            error_code="VALIDATION_ERROR",
            message="Request validation failed",
            details=validation_details,
            request_id=request_id
        )

        return JSONResponse(
            status_code=422,
            content=error_response
        )

    @staticmethod
    def handle_database_error(
        exception: SQLAlchemyError,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """
        Handle database errors that escaped the repositories.

        Args:
            exception: SQLAlchemy error
            request: Optional FastAPI request object

        Returns:
            JSON response without any driver detail
        """
        request_id = ErrorHandlerService._get_request_id(request)

        error_code = "INTEGRITY_ERROR" if isinstance(exception, IntegrityError) else "DATABASE_ERROR"

        logger.error(
            f"Database Error [{request_id}]: {error_code} - {str(exception)}",
            exc_info=exception
        )

        error_response = ErrorHandlerService.format_error_response(
            error_code=error_code,
            message="Database operation failed",
            request_id=request_id
        )

        return JSONResponse(
            status_code=500,
            content=error_response
        )

    @staticmethod
    def handle_http_exception(
        exception: HTTPException,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """
        Handle framework HTTP exceptions (unknown routes, wrong methods).

        Args:
            exception: HTTP exception
            request: Optional FastAPI request object

        Returns:
            JSON response with HTTP error information
        """
        request_id = ErrorHandlerService._get_request_id(request)

        logger.warning(f"HTTP Exception [{request_id}]: {exception.status_code} - {exception.detail}")

        error_response = ErrorHandlerService.format_error_response(
            error_code=f"HTTP_{exception.status_code}",
            message=str(exception.detail),
            request_id=request_id
        )

        return JSONResponse(
            status_code=exception.status_code,
            content=error_response,
            headers=getattr(exception, "headers", None)
        )

    @staticmethod
    def handle_unexpected_error(
        exception: Exception,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """
        Handle unexpected errors with secure error responses.

        Args:
            exception: Unexpected exception
            request: Optional FastAPI request object

        Returns:
            JSON response with generic error message
        """
        request_id = ErrorHandlerService._get_request_id(request)

        logger.error(
            f"Unexpected Error [{request_id}]: {type(exception).__name__} - {str(exception)}",
            exc_info=exception
        )

        error_response = ErrorHandlerService.format_error_response(
            error_code="INTERNAL_SERVER_ERROR",
            message="An unexpected error occurred. Please try again later.",
            request_id=request_id
        )

        return JSONResponse(
            status_code=500,
            content=error_response
        )

    @staticmethod
    def _get_request_id(request: Optional[Request] = None) -> str:
        """Request ID assigned by the logging middleware, or a fresh one."""
        if request is not None:
            request_id = getattr(request.state, "request_id", None)
            if request_id:
                return request_id
        return str(uuid.uuid4())[:8]

    @staticmethod
    def _get_current_timestamp() -> str:
        """Get current UTC timestamp in ISO format."""
        return datetime.now(timezone.utc).replace(tzinfo=None).isoformat() + "Z"
