"""
Authentication service for dealer registration and login.
Handles password hashing, credential checks and token issuance.
"""

from typing import Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from dealer_listings.repositories.dealer import DealerRepository
from dealer_listings.models.dealer import Dealer
from dealer_listings.utils.auth import (
    TokenService,
    hash_password,
    verify_password,
    dummy_verify,
    password_fits_bcrypt,
    BCRYPT_MAX_PASSWORD_BYTES
)
from dealer_listings.utils.exceptions import InvalidCredentialsError, ValidationError
import logging

logger = logging.getLogger(__name__)


class AuthService:
    """
    Authentication service for dealer accounts.
    Registration and login both end with a freshly issued bearer token.
    """

    def __init__(self, db_session: AsyncSession, token_service: TokenService):
        self.dealer_repo = DealerRepository(db_session)
        self.token_service = token_service

    async def register(self, name: str, email: str, password: str) -> Tuple[Dealer, str]:
        """
        Create a dealer account and log it in.

        Args:
            name: Dealer display name
            email: Email address, unique across dealers
            password: Plain text password

        Returns:
            Tuple of (created dealer, access token)

        Raises:
            ValidationError: If a required field is empty or the password is too long
            DuplicateEmailError: If the email is already registered
            StoreError: If the insert fails
        """
        if not name or not email or not password:
            raise ValidationError("Name, email and password are required")
        if not password_fits_bcrypt(password):
            raise ValidationError(f"Password cannot exceed {BCRYPT_MAX_PASSWORD_BYTES} bytes")

        password_hash = hash_password(password)
        dealer = await self.dealer_repo.create_dealer(name, email, password_hash)

        token = self.token_service.issue(dealer.id)
        logger.info(f"Dealer registered: {dealer.email} (ID: {dealer.id})")
        return dealer, token

    async def verify_credentials(self, email: str, password: str) -> int:
        """
        Check an email/password pair.

        Unknown emails and wrong passwords fail the same way, and an unknown
        email still pays for one hash comparison.

        Returns:
            ID of the authenticated dealer

        Raises:
            InvalidCredentialsError: If the credentials do not match
        """
        dealer = await self.dealer_repo.get_by_email(email)

        if not dealer:
            dummy_verify()
            logger.warning(f"Failed login attempt for unknown email: {email}")
            raise InvalidCredentialsError()

        if not verify_password(password, dealer.password_hash):
            logger.warning(f"Failed login attempt for dealer {dealer.id}")
            raise InvalidCredentialsError()

        return dealer.id

    async def login(self, email: str, password: str) -> str:
        """
        Authenticate a dealer and issue a token.

        Returns:
            Access token for the dealer

        Raises:
            InvalidCredentialsError: If the credentials do not match
        """
        dealer_id = await self.verify_credentials(email, password)
        token = self.token_service.issue(dealer_id)
        logger.info(f"Dealer {dealer_id} logged in")
        return token
