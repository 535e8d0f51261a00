import logging
from typing import Generic, TypeVar, Type, Optional, List, Dict, Any, Union
from uuid import UUID

from sqlmodel import SQLModel, Session, select, delete, func
from sqlalchemy.exc import SQLAlchemyError

from ....core.exceptions import DatabaseError, NotFoundError

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=SQLModel)


class BaseRepository(Generic[ModelType]):
    """
    Base repository class with common CRUD operations.

    Write operations commit immediately: a repository call is the unit of
    work for both the API and the import pipeline.
    """

    def __init__(self, model: Type[ModelType], session: Session):
        self.model = model
        self.session = session

    async def create(self, obj_in: Union[ModelType, Dict[str, Any]]) -> ModelType:
        """
        Create a new record.

        Args:
            obj_in: Model instance or dictionary with field values

        Returns:
            Created model instance

        Raises:
            DatabaseError: If creation fails
        """
        try:
            if isinstance(obj_in, dict):
                db_obj = self.model(**obj_in)
            else:
                db_obj = obj_in

            self.session.add(db_obj)
            self.session.commit()
            self.session.refresh(db_obj)

            logger.debug(f"Created {self.model.__name__} with ID: {db_obj.id}")
            return db_obj

        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Failed to create {self.model.__name__}: {e}")
            raise DatabaseError(f"Failed to create {self.model.__name__}", operation="create") from e

    async def get(self, id: UUID) -> Optional[ModelType]:
        """
        Get a record by ID.

        Returns:
            Model instance or None if not found
        """
        try:
            return self.session.get(self.model, id)

        except SQLAlchemyError as e:
            logger.error(f"Failed to get {self.model.__name__} by ID {id}: {e}")
            raise DatabaseError(f"Failed to get {self.model.__name__}", operation="get") from e

    async def get_or_404(self, id: UUID) -> ModelType:
        """
        Get a record by ID or raise 404 error.

        Raises:
            NotFoundError: If record not found
        """
        obj = await self.get(id)
        if not obj:
            raise NotFoundError(self.model.__name__, resource_id=str(id))
        return obj

    async def save(self, db_obj: ModelType) -> ModelType:
        """Persist changes made to an attached instance."""
        try:
            self.session.add(db_obj)
            self.session.commit()
            self.session.refresh(db_obj)
            return db_obj

        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Failed to update {self.model.__name__}: {e}")
            raise DatabaseError(f"Failed to update {self.model.__name__}", operation="update") from e

    async def delete(self, id: UUID) -> bool:
        """
        Delete a record.

        Returns:
            True if deleted, False if not found
        """
        try:
            statement = delete(self.model).where(self.model.id == id)
            result = self.session.execute(statement)
            self.session.commit()

            deleted = result.rowcount > 0
            if deleted:
                logger.debug(f"Deleted {self.model.__name__} with ID: {id}")

            return deleted

        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Failed to delete {self.model.__name__} {id}: {e}")
            raise DatabaseError(f"Failed to delete {self.model.__name__}", operation="delete") from e

    async def delete_all(self) -> int:
        """Delete every record of the model, returns the number removed."""
        try:
            result = self.session.execute(delete(self.model))
            self.session.commit()
            return result.rowcount

        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Failed to clear {self.model.__name__}: {e}")
            raise DatabaseError(f"Failed to clear {self.model.__name__}", operation="delete_all") from e

    async def bulk_create(self, objects: List[ModelType]) -> int:
        """Insert many records in one transaction."""
        try:
            self.session.add_all(objects)
            self.session.commit()
            return len(objects)

        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Failed to bulk insert {self.model.__name__}: {e}")
            raise DatabaseError(f"Failed to insert {self.model.__name__} records", operation="bulk_create") from e

    async def count(self, *conditions) -> int:
        """
        Count records matching the given SQL conditions.
        """
        try:
            statement = select(func.count()).select_from(self.model)
            if conditions:
                statement = statement.where(*conditions)
            return self.session.exec(statement).one()

        except SQLAlchemyError as e:
            logger.error(f"Failed to count {self.model.__name__}: {e}")
            raise DatabaseError(f"Failed to count {self.model.__name__}", operation="count") from e
