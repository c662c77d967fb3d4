"""
Database models for the Dealer Listings API.
Includes the Dealer and Property models.
"""

from dealer_listings.models.dealer import Dealer
from dealer_listings.models.property import Property, AMENITY_FIELDS

# Export all models for easy importing
__all__ = [
    "Dealer",
    "Property",
    "AMENITY_FIELDS",
]
