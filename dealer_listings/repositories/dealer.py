"""
Dealer repository for registration and credential lookups.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from dealer_listings.repositories.base import BaseRepository
from dealer_listings.models.dealer import Dealer
from dealer_listings.utils.exceptions import DuplicateEmailError, StoreError
from typing import Optional
import logging

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    """Lower-case and strip an email address for storage and lookup."""
    return email.strip().lower()


class DealerRepository(BaseRepository[Dealer]):
    """
    Repository for dealer accounts.
    Email uniqueness is enforced by the database; a violation surfaces as DuplicateEmailError.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Dealer, db)

    async def get_by_email(self, email: str) -> Optional[Dealer]:
        """
        Get dealer by email address.

        Args:
            email: Email address to search for

        Returns:
            Dealer instance if found, None otherwise
        """
        return await self.get_by_field("email", normalize_email(email))

    async def create_dealer(self, name: str, email: str, password_hash: str) -> Dealer:
        """
        Insert a new dealer.

        Args:
            name: Dealer display name
            email: Email address (normalized before storage)
            password_hash: Already hashed password

        Returns:
            Created dealer instance

        Raises:
            DuplicateEmailError: If the email is already registered
            StoreError: If the insert fails for any other reason
        """
        email = normalize_email(email)

        existing = await self.get_by_email(email)
        if existing:
            raise DuplicateEmailError(email)

        try:
            dealer = await self.create({
                "name": name,
                "email": email,
                "password_hash": password_hash,
            })
        except IntegrityError as e:
            # Concurrent registration with the same email won the race
            logger.info(f"Duplicate email rejected by unique constraint: {email}")
            raise DuplicateEmailError(email) from e
        except SQLAlchemyError as e:
            raise StoreError("create Dealer", e) from e

        logger.info(f"Created dealer: {dealer.email} (ID: {dealer.id})")
        return dealer
