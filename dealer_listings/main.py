"""
FastAPI application entry point.
The application factory wires settings, the database engine and the token service into app.state.
"""

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from pathlib import Path
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine
from pydantic import ValidationError as PydanticValidationError
from typing import Optional
import logging

from dealer_listings.config import Settings, get_settings
from dealer_listings.database import (
    create_engine,
    create_session_factory,
    check_database_connection,
    create_tables
)
from dealer_listings.routers import auth_router, properties_router
from dealer_listings.utils.auth import TokenService
from dealer_listings.utils.exceptions import APIException
from dealer_listings.services.error_handler import ErrorHandlerService
from dealer_listings.middleware import RequestLoggingMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    settings: Settings = app.state.settings
    engine: AsyncEngine = app.state.engine

    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")

    db_connected = await check_database_connection(engine)
    if not db_connected:
        logger.error("Failed to connect to database on startup")
    elif settings.create_tables_on_startup:
        await create_tables(engine)

    yield

    # Shutdown
    logger.info("Shutting down application")
    await engine.dispose()


def register_exception_handlers(app: FastAPI) -> None:
    """Route every error type through ErrorHandlerService."""

    @app.exception_handler(APIException)
    async def api_exception_handler(request: Request, exc: APIException):
        """Handle custom API exceptions with structured error responses."""
        return ErrorHandlerService.handle_api_exception(exc, request)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle FastAPI request validation errors with detailed field information."""
        return ErrorHandlerService.handle_validation_error(exc, request)

    @app.exception_handler(PydanticValidationError)
    async def pydantic_validation_exception_handler(request: Request, exc: PydanticValidationError):
        """Handle model validation errors raised while building form schemas."""
        return ErrorHandlerService.handle_validation_error(exc, request)

    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(request: Request, exc: SQLAlchemyError):
        """Handle database errors with appropriate error responses."""
        return ErrorHandlerService.handle_database_error(exc, request)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle FastAPI HTTP exceptions with structured error responses."""
        return ErrorHandlerService.handle_http_exception(exc, request)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions with secure error responses."""
        return ErrorHandlerService.handle_unexpected_error(exc, request)


def create_app(settings: Optional[Settings] = None, engine: Optional[AsyncEngine] = None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Settings to use; read from the environment when omitted
        engine: Existing async engine to use instead of one built from settings

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()

    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="""
    Listing backend for property dealers.

    ## Features

    * **Dealer accounts**: registration and login with bearer tokens
    * **Listing management**: dealers add, update and delete their own properties, with an optional image
    * **Public listing**: exact-match amenity filters, name/location search and pagination

    ## Authentication

    Use `/register` or `/login` to obtain a token, then send it as
    `Authorization: Bearer <token>` on the dealer endpoints.
    """,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_tags=[
            {
                "name": "Authentication",
                "description": "Dealer registration and login"
            },
            {
                "name": "Properties",
                "description": "Dealer listing management and public search"
            },
            {
                "name": "Health",
                "description": "Service health endpoints"
            }
        ],
        lifespan=lifespan,
    )

    # Shared state for request handlers
    engine = engine or create_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.token_service = TokenService(
        secret_key=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expire_minutes=settings.access_token_expire_minutes
    )

    app.add_middleware(
        RequestLoggingMiddleware,
        max_request_size=settings.max_file_size + 1024 * 1024,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Processing-Time"],
    )

    app.include_router(auth_router, prefix=settings.api_prefix)
    app.include_router(properties_router, prefix=settings.api_prefix)

    Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
    app.mount(settings.upload_url_prefix, StaticFiles(directory=settings.upload_dir), name="uploads")

    register_exception_handlers(app)

    @app.get("/", tags=["Health"])
    async def root():
        """Liveness message with basic API information."""
        return {
            "message": "Server is working!",
            "service": settings.app_name,
            "version": settings.app_version,
            "documentation": {
                "swagger_ui": "/docs",
                "redoc": "/redoc",
                "openapi_json": "/openapi.json"
            }
        }

    @app.get("/health", tags=["Health"])
    async def health_check(request: Request):
        """
        Health check endpoint with database connectivity test.
        Used by container health checks and load balancers.
        """
        db_healthy = await check_database_connection(request.app.state.engine)

        if not db_healthy:
            raise HTTPException(
                status_code=503,
                detail="Database connection failed"
            )

        return {
            "status": "healthy",
            "service": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment,
            "database": "connected"
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "dealer_listings.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
