"""
Authentication API endpoints for dealer registration and login.
"""

from fastapi import APIRouter, Depends, status
from dealer_listings.services.auth import AuthService
from dealer_listings.schemas.auth import (
    RegisterRequest,
    LoginRequest,
    TokenResponse,
    RegisterResponse
)
from dealer_listings.schemas.error import get_error_responses
from dealer_listings.utils.dependencies import get_auth_service


router = APIRouter(tags=["Authentication"])


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_200_OK,
    summary="Register dealer",
    description="Create a dealer account and return a bearer token",
    responses=get_error_responses(422, 500)
)
async def register(
    register_data: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> RegisterResponse:
    """
    Register a new dealer.

    Raises:
        DuplicateEmailError: If the email is already registered
        StoreError: If the account cannot be stored
    """
    _, token = await auth_service.register(
        name=register_data.name,
        email=register_data.email,
        password=register_data.password
    )
    return RegisterResponse(token=token)


@router.post(
    "/login",
    response_model=TokenResponse,
    status_code=status.HTTP_200_OK,
    summary="Dealer login",
    description="Authenticate with email and password, returns a bearer token",
    responses=get_error_responses(401, 422, 500)
)
async def login(
    login_data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> TokenResponse:
    """
    Authenticate a dealer.

    Raises:
        InvalidCredentialsError: If the email is unknown or the password is wrong
    """
    token = await auth_service.login(
        email=login_data.email,
        password=login_data.password
    )
    return TokenResponse(token=token)
