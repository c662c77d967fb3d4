"""
Dealer model holding the identity and password hash of a listing owner.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column
from dealer_listings.database import Base


class Dealer(Base):
    """
    Dealer account.
    Created on registration and not modified afterwards.
    """

    __tablename__ = "dealers"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Dealer display name"
    )

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        comment="Dealer email address - unique, stored lower-cased"
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password"
    )

    def __repr__(self) -> str:
        """String representation of the dealer."""
        return f"<Dealer(id={self.id}, email={self.email})>"
