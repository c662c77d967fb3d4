"""
Request logging middleware.
Tags every request with a short id, rejects oversized bodies and logs timing.
"""

from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp
import logging
import time
import uuid

from dealer_listings.services.error_handler import ErrorHandlerService
from dealer_listings.utils.exceptions import BadRequestError

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware for request tracking.

    Sets request.state.request_id (reused by the error handlers) and adds
    X-Request-ID and X-Processing-Time to every response.
    """

    def __init__(
        self,
        app: ASGIApp,
        max_request_size: int = 11 * 1024 * 1024,
        slow_request_threshold: float = 1.0
    ):
        super().__init__(app)
        self.max_request_size = max_request_size
        self.slow_request_threshold = slow_request_threshold

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """
        Process request through the logging middleware.

        Args:
            request: FastAPI request object
            call_next: Next middleware/handler in chain

        Returns:
            Response object with tracking headers
        """
        request_id = str(uuid.uuid4())[:8]
        request.state.request_id = request_id

        start_time = time.time()

        try:
            self._validate_request_size(request)
            logger.info(f"Request [{request_id}]: {request.method} {request.url.path}")
            response = await call_next(request)
        except BadRequestError as exc:
            response = ErrorHandlerService.handle_api_exception(exc, request)
        except Exception as exc:
            response = ErrorHandlerService.handle_unexpected_error(exc, request)

        processing_time = time.time() - start_time
        self._log_response(request, response, request_id, processing_time)

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Processing-Time"] = f"{processing_time:.3f}"
        return response

    def _validate_request_size(self, request: Request) -> None:
        """
        Validate request content length.

        Raises:
            BadRequestError: If the declared size exceeds the limit or is malformed
        """
        content_length = request.headers.get("content-length")
        if not content_length:
            return

        try:
            size = int(content_length)
        except ValueError:
            raise BadRequestError("Invalid content-length header")

        if size > self.max_request_size:
            raise BadRequestError(
                f"Request size {size} bytes exceeds maximum allowed size {self.max_request_size} bytes"
            )

    def _log_response(
        self,
        request: Request,
        response: Response,
        request_id: str,
        processing_time: float
    ) -> None:
        message = (
            f"Response [{request_id}]: {request.method} {request.url.path} "
            f"-> {response.status_code} ({processing_time:.3f}s)"
        )

        if response.status_code >= 500:
            logger.error(message)
        elif processing_time > self.slow_request_threshold:
            logger.warning(f"Slow request {message}")
        else:
            logger.info(message)
