"""
Property repository for dealer-scoped listing management and public search.
Builds the filtered, searched and paginated listing query.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import Select, String, select, or_, func
from dealer_listings.repositories.base import BaseRepository
from dealer_listings.models.property import Property
from dealer_listings.utils.exceptions import StoreError
from dealer_listings.utils.validators import ValidationUtils
from typing import Optional, List, Dict, Any
import logging

logger = logging.getLogger(__name__)


EXACT_MATCH_FILTERS = ("bedrooms", "kitchen", "wifi", "parking", "food")


class PropertySearchFilters:
    """
    Public listing search parameters.

    Every filter is optional; flags are normalized to 0/1 and pagination is
    validated on construction.
    """

    def __init__(
        self,
        bedrooms: Optional[int] = None,
        kitchen: Optional[Any] = None,
        wifi: Optional[Any] = None,
        parking: Optional[Any] = None,
        food: Optional[Any] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
        max_limit: int = 100
    ):
        self.bedrooms = (
            ValidationUtils.validate_integer(bedrooms, "bedrooms", min_value=0)
            if bedrooms is not None else None
        )
        self.kitchen = self._flag(kitchen, "kitchen")
        self.wifi = self._flag(wifi, "wifi")
        self.parking = self._flag(parking, "parking")
        self.food = self._flag(food, "food")
        self.search = search.strip() if search and search.strip() else None
        self.page, self.limit = ValidationUtils.validate_pagination(page, limit, max_limit)

    @staticmethod
    def _flag(value: Optional[Any], field_name: str) -> Optional[int]:
        if value is None:
            return None
        return ValidationUtils.validate_flag(value, field_name)

    @property
    def offset(self) -> int:
        """Rows to skip for the requested page."""
        return (self.page - 1) * self.limit

    def exact_matches(self) -> Dict[str, int]:
        """Column/value pairs for the filters that are present."""
        return {
            field: getattr(self, field)
            for field in EXACT_MATCH_FILTERS
            if getattr(self, field) is not None
        }


def build_filter_conditions(filters: PropertySearchFilters) -> List:
    """
    Build SQLAlchemy filter conditions from search filters.

    Args:
        filters: PropertySearchFilters instance

    Returns:
        List of conditions to AND together; empty means match all
    """
    conditions = []

    for field, value in filters.exact_matches().items():
        conditions.append(getattr(Property, field) == value)

    # Case-insensitive substring match on name or location, wildcards taken literally
    if filters.search:
        term = filters.search.lower()
        conditions.append(
            or_(
                func.lower(Property.name, type_=String).contains(term, autoescape=True),
                func.lower(Property.location, type_=String).contains(term, autoescape=True)
            )
        )

    return conditions


def build_search_query(filters: PropertySearchFilters) -> Select:
    """
    Compose the public listing query: filters, search, then limit/offset.
    Rows come back in insertion (primary key) order so pages never overlap.
    """
    query = select(Property)

    conditions = build_filter_conditions(filters)
    if conditions:
        query = query.where(*conditions)

    return (
        query.order_by(Property.id.asc())
        .limit(filters.limit)
        .offset(filters.offset)
    )


class PropertyRepository(BaseRepository[Property]):
    """
    Repository for property listings.
    Mutations are scoped to the owning dealer in the statement predicate itself.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Property, db)

    async def create_property(
        self,
        dealer_id: int,
        fields: Dict[str, Any],
        image: Optional[str] = None
    ) -> Property:
        """
        Create a property owned by a dealer.

        Args:
            dealer_id: Owning dealer
            fields: Listing fields (name, location, bedrooms, bathrooms and 0/1 flags)
            image: Relative path of the stored upload, if any

        Returns:
            Created property instance

        Raises:
            StoreError: If the insert fails
        """
        try:
            created = await self.create({**fields, "dealer_id": dealer_id, "image": image})
        except SQLAlchemyError as e:
            raise StoreError("create Property", e) from e

        logger.info(f"Created property {created.id} for dealer {dealer_id}")
        return created

    async def list_by_dealer(self, dealer_id: int) -> List[Property]:
        """Every property owned by the dealer, in insertion order."""
        return await self.list_where(Property.dealer_id == dealer_id)

    async def update_owned(
        self,
        property_id: int,
        dealer_id: int,
        fields: Dict[str, Any],
        image: Optional[str] = None
    ) -> bool:
        """
        Update a property only if the dealer owns it.

        The stored image is replaced only when a new one is given.

        Returns:
            True if a row was updated, False if the property is missing or owned by someone else
        """
        values = dict(fields)
        if image is not None:
            values["image"] = image

        updated = await self.update_where(
            values,
            Property.id == property_id,
            Property.dealer_id == dealer_id
        )
        return updated > 0

    async def delete_owned(self, property_id: int, dealer_id: int) -> bool:
        """
        Delete a property only if the dealer owns it.

        Returns:
            True if a row was deleted, False if the property is missing or owned by someone else
        """
        deleted = await self.delete_where(
            Property.id == property_id,
            Property.dealer_id == dealer_id
        )
        return deleted > 0

    async def search_properties(self, filters: PropertySearchFilters) -> List[Property]:
        """
        Run the public listing search.

        Args:
            filters: PropertySearchFilters instance with search criteria

        Returns:
            The requested page of matching properties

        Raises:
            StoreError: If the query fails
        """
        query = build_search_query(filters)

        try:
            result = await self.db.execute(query.execution_options(populate_existing=True))
            properties = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to search properties: {e}")
            raise StoreError("search Property", e) from e

        logger.debug(
            f"Property search page {filters.page} (limit {filters.limit}) returned {len(properties)} results"
        )
        return list(properties)
