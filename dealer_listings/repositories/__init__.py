"""
Repository layer for data access operations.
"""

from dealer_listings.repositories.base import BaseRepository
from dealer_listings.repositories.dealer import DealerRepository
from dealer_listings.repositories.property import (
    PropertyRepository,
    PropertySearchFilters,
    build_search_query
)

__all__ = [
    "BaseRepository",
    "DealerRepository",
    "PropertyRepository",
    "PropertySearchFilters",
    "build_search_query"
]
