"""
Property model for dealer listings.
Amenity flags are stored as 0/1 small integers.
"""

from sqlalchemy import String, Integer, SmallInteger, DateTime, ForeignKey, CheckConstraint, func
from sqlalchemy.orm import Mapped, mapped_column
from dealer_listings.database import Base
from datetime import datetime
from typing import Optional


AMENITY_FIELDS = ("kitchen", "ac", "wifi", "parking", "food")


def _flag_column(comment: str) -> Mapped[int]:
    return mapped_column(SmallInteger, nullable=False, default=0, comment=comment)


class Property(Base):
    """
    Property listing owned by exactly one dealer.
    """

    __tablename__ = "properties"
    __table_args__ = tuple(
        CheckConstraint(f"{field} IN (0, 1)", name=f"ck_properties_{field}_flag")
        for field in AMENITY_FIELDS
    )

    dealer_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("dealers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="ID of the dealer who owns this property"
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Property listing name"
    )

    location: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Property location/address"
    )

    image: Mapped[Optional[str]] = mapped_column(
        String(512),
        nullable=True,
        comment="Relative path of the uploaded image"
    )

    bedrooms: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        index=True,
        comment="Number of bedrooms"
    )

    bathrooms: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Number of bathrooms"
    )

    kitchen: Mapped[int] = _flag_column("Has kitchen (0/1)")
    ac: Mapped[int] = _flag_column("Has air conditioning (0/1)")
    wifi: Mapped[int] = _flag_column("Has wifi (0/1)")
    parking: Mapped[int] = _flag_column("Has parking (0/1)")
    food: Mapped[int] = _flag_column("Food included (0/1)")

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation of the property."""
        return f"<Property(id={self.id}, name={self.name[:30]}, dealer_id={self.dealer_id})>"

    def image_url(self, base_url: Optional[str] = None) -> Optional[str]:
        """
        Absolute URL of the image, or None when the property has no image.

        Args:
            base_url: Scheme and host the request arrived on, e.g. "http://example.com/"

        Returns:
            The stored relative path prefixed with base_url, or the bare path if no base is given
        """
        if not self.image:
            return None
        if not base_url:
            return self.image
        return f"{base_url.rstrip('/')}/{self.image.lstrip('/')}"

    def to_dict(self, base_url: Optional[str] = None) -> dict:
        """
        Convert property to dictionary.

        Args:
            base_url: When given, the image is rendered as an absolute URL

        Returns:
            Dictionary representation of property
        """
        return {
            "id": self.id,
            "dealer_id": self.dealer_id,
            "name": self.name,
            "location": self.location,
            "image": self.image_url(base_url),
            "bedrooms": self.bedrooms,
            "bathrooms": self.bathrooms,
            "kitchen": int(self.kitchen),
            "ac": int(self.ac),
            "wifi": int(self.wifi),
            "parking": int(self.parking),
            "food": int(self.food),
        }
