"""
Property service for dealer listing management and public search.
Coordinates image storage with the property repository.
"""

from typing import Optional, List, Dict, Any
from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from dealer_listings.repositories.property import PropertyRepository, PropertySearchFilters
from dealer_listings.models.property import Property
from dealer_listings.utils.file_utils import FileStorage
from dealer_listings.utils.exceptions import PropertyNotFoundError, StoreError
import logging

logger = logging.getLogger(__name__)


class PropertyService:
    """
    Business logic for property listings.

    Ownership is always taken from the authenticated dealer id, never from
    request data. An upload is written before the row that references it,
    and removed again if that row cannot be written.
    """

    def __init__(self, db_session: AsyncSession, storage: FileStorage):
        self.property_repo = PropertyRepository(db_session)
        self.storage = storage

    async def _store_image(self, image: Optional[UploadFile]) -> Optional[str]:
        if image is None or not image.filename:
            return None
        return await self.storage.save_upload(image)

    def _discard_image(self, image_path: Optional[str]) -> None:
        if image_path and self.storage.delete_upload(image_path):
            logger.info(f"Removed unreferenced upload {image_path}")

    async def add_property(
        self,
        dealer_id: int,
        fields: Dict[str, Any],
        image: Optional[UploadFile] = None
    ) -> Property:
        """
        Create a property owned by the dealer.

        Args:
            dealer_id: Authenticated dealer
            fields: Listing fields with flags already normalized to 0/1
            image: Optional uploaded image

        Returns:
            Created property

        Raises:
            ValidationError: If the upload is not an acceptable image
            StoreError: If the insert fails
        """
        image_path = await self._store_image(image)

        try:
            created = await self.property_repo.create_property(dealer_id, fields, image_path)
        except StoreError:
            self._discard_image(image_path)
            raise

        logger.info(f"Dealer {dealer_id} added property {created.id}")
        return created

    async def list_dealer_properties(self, dealer_id: int) -> List[Property]:
        """All properties owned by the dealer, oldest first."""
        return await self.property_repo.list_by_dealer(dealer_id)

    async def update_property(
        self,
        property_id: int,
        dealer_id: int,
        fields: Dict[str, Any],
        image: Optional[UploadFile] = None
    ) -> None:
        """
        Replace the listing fields of an owned property.

        The image changes only when a new file is uploaded.

        Raises:
            PropertyNotFoundError: If the property is missing or owned by another dealer
            ValidationError: If the upload is not an acceptable image
            StoreError: If the update fails
        """
        image_path = await self._store_image(image)

        try:
            updated = await self.property_repo.update_owned(property_id, dealer_id, fields, image_path)
        except StoreError:
            self._discard_image(image_path)
            raise

        if not updated:
            self._discard_image(image_path)
            logger.warning(f"Dealer {dealer_id} cannot update property {property_id}: missing or not owned")
            raise PropertyNotFoundError(property_id)

        logger.info(f"Dealer {dealer_id} updated property {property_id}")

    async def delete_property(self, property_id: int, dealer_id: int) -> None:
        """
        Delete an owned property.

        Raises:
            PropertyNotFoundError: If the property is missing or owned by another dealer
            StoreError: If the delete fails
        """
        deleted = await self.property_repo.delete_owned(property_id, dealer_id)

        if not deleted:
            logger.warning(f"Dealer {dealer_id} cannot delete property {property_id}: missing or not owned")
            raise PropertyNotFoundError(property_id)

        logger.info(f"Dealer {dealer_id} deleted property {property_id}")

    async def search_properties(self, filters: PropertySearchFilters) -> List[Property]:
        """Public filtered, searched and paginated listing."""
        return await self.property_repo.search_properties(filters)
