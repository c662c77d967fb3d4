"""
FastAPI dependency injection utilities for authentication and services.
Everything is resolved from the application state built by create_app.
"""

from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from dealer_listings.config import Settings
from dealer_listings.database import get_db
from dealer_listings.services.auth import AuthService
from dealer_listings.services.property import PropertyService
from dealer_listings.utils.auth import TokenService
from dealer_listings.utils.exceptions import TokenMissingError
from dealer_listings.utils.file_utils import FileStorage


# HTTP Bearer token security scheme
security = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    """Settings the running application was created with."""
    return request.app.state.settings


def get_token_service(request: Request) -> TokenService:
    """Token issuer/verifier owned by the running application."""
    return request.app.state.token_service


def get_file_storage(settings: Settings = Depends(get_app_settings)) -> FileStorage:
    """Upload storage rooted at the configured upload directory."""
    return FileStorage(
        base_dir=settings.upload_dir,
        url_prefix=settings.upload_url_prefix,
        max_file_size=settings.max_file_size
    )


async def get_auth_service(
    db: AsyncSession = Depends(get_db),
    token_service: TokenService = Depends(get_token_service)
) -> AuthService:
    """
    Get authentication service instance.

    Args:
        db: Database session
        token_service: Application token service

    Returns:
        AuthService instance
    """
    return AuthService(db, token_service)


async def get_property_service(
    db: AsyncSession = Depends(get_db),
    storage: FileStorage = Depends(get_file_storage)
) -> PropertyService:
    """
    Get property service instance.

    Args:
        db: Database session
        storage: Upload storage

    Returns:
        PropertyService instance
    """
    return PropertyService(db, storage)


async def get_current_dealer_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    token_service: TokenService = Depends(get_token_service)
) -> int:
    """
    Authenticated dealer id from the bearer token.

    A request without a bearer token is refused with 403; a token that is
    malformed, tampered with or expired is refused with 401.

    Raises:
        TokenMissingError: If no bearer token was sent
        InvalidTokenError: If the token does not verify
        TokenExpiredError: If the token has expired
    """
    if not credentials or not credentials.credentials:
        raise TokenMissingError()

    return token_service.verify(credentials.credentials)
