"""
Base repository class with common CRUD operations using async SQLAlchemy.
Provides generic database operations that can be extended by specific repositories.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete
from sqlalchemy.exc import SQLAlchemyError
from dealer_listings.database import Base
from dealer_listings.utils.exceptions import StoreError
from typing import TypeVar, Generic, Optional, List, Dict, Any, Type
import logging

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository class providing common CRUD operations.
    Database failures are rolled back and re-raised as StoreError with the original cause attached.
    """

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        """
        Initialize repository with model class and database session.

        Args:
            model: SQLAlchemy model class
            db: Async database session
        """
        self.model = model
        self.db = db

    async def create(self, obj_in: Dict[str, Any]) -> ModelType:
        """
        Create a new record in the database.

        Args:
            obj_in: Dictionary of field values for the new record

        Returns:
            Created model instance

        Raises:
            SQLAlchemyError: If the insert fails; callers decide how to map it
        """
        try:
            db_obj = self.model(**obj_in)
            self.db.add(db_obj)
            await self.db.commit()
            await self.db.refresh(db_obj)
            logger.debug(f"Created {self.model.__name__} with id: {db_obj.id}")
            return db_obj
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to create {self.model.__name__}: {e}")
            raise

    async def get_by_id(self, id: int) -> Optional[ModelType]:
        """
        Get a record by its ID.

        Args:
            id: Primary key of the record to retrieve

        Returns:
            Model instance if found, None otherwise
        """
        return await self.get_by_field("id", id)

    async def get_by_field(self, field: str, value: Any) -> Optional[ModelType]:
        """
        Get a record by a specific field value.

        Args:
            field: Field name to search by
            value: Value to search for

        Returns:
            Model instance if found, None otherwise
        """
        if not hasattr(self.model, field):
            raise ValueError(f"Field '{field}' does not exist on {self.model.__name__}")

        try:
            query = (
                select(self.model)
                .where(getattr(self.model, field) == value)
                .execution_options(populate_existing=True)
            )
            result = await self.db.execute(query)
            obj = result.scalar_one_or_none()

            if obj:
                logger.debug(f"Retrieved {self.model.__name__} by {field}")
            else:
                logger.debug(f"{self.model.__name__} with {field} not found")

            return obj
        except SQLAlchemyError as e:
            logger.error(f"Failed to get {self.model.__name__} by {field}: {e}")
            raise StoreError(f"get {self.model.__name__}", e) from e

    async def list_where(self, *conditions, skip: int = 0, limit: Optional[int] = None) -> List[ModelType]:
        """
        Get records matching all conditions in primary key order.

        Args:
            conditions: SQLAlchemy boolean expressions, ANDed together
            skip: Number of records to skip
            limit: Maximum number of records to return, None for no limit

        Returns:
            List of model instances
        """
        try:
            query = select(self.model)
            if conditions:
                query = query.where(*conditions)
            query = query.order_by(self.model.id.asc())
            if skip:
                query = query.offset(skip)
            if limit is not None:
                query = query.limit(limit)

            result = await self.db.execute(query.execution_options(populate_existing=True))
            objects = result.scalars().all()

            logger.debug(f"Retrieved {len(objects)} {self.model.__name__} records")
            return list(objects)
        except SQLAlchemyError as e:
            logger.error(f"Failed to list {self.model.__name__} records: {e}")
            raise StoreError(f"list {self.model.__name__}", e) from e

    async def update_where(self, values: Dict[str, Any], *conditions) -> int:
        """
        Update every record matching the conditions in one statement.

        Args:
            values: Column values to set
            conditions: SQLAlchemy boolean expressions, ANDed together

        Returns:
            Number of rows the statement matched
        """
        try:
            stmt = (
                update(self.model)
                .where(*conditions)
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            result = await self.db.execute(stmt)
            await self.db.commit()

            logger.debug(f"Updated {result.rowcount} {self.model.__name__} records")
            return result.rowcount
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to update {self.model.__name__} records: {e}")
            raise StoreError(f"update {self.model.__name__}", e) from e

    async def delete_where(self, *conditions) -> int:
        """
        Delete every record matching the conditions in one statement.

        Args:
            conditions: SQLAlchemy boolean expressions, ANDed together

        Returns:
            Number of rows deleted
        """
        try:
            stmt = (
                delete(self.model)
                .where(*conditions)
                .execution_options(synchronize_session=False)
            )
            result = await self.db.execute(stmt)
            await self.db.commit()

            logger.debug(f"Deleted {result.rowcount} {self.model.__name__} records")
            return result.rowcount
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to delete {self.model.__name__} records: {e}")
            raise StoreError(f"delete {self.model.__name__}", e) from e
