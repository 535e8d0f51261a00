import logging
from typing import Optional

from sqlmodel import Session, select
from sqlalchemy.exc import SQLAlchemyError

from ..models.schema_registry import SchemaVersion
from ....core.exceptions import DatabaseError

logger = logging.getLogger(__name__)


class SchemaRepository:
    """Schema registry: one row per import run, newest version wins."""

    def __init__(self, session: Session):
        self.session = session

    async def latest(self, entity: str) -> Optional[SchemaVersion]:
        try:
            statement = (
                select(SchemaVersion)
                .where(SchemaVersion.entity == entity)
                .order_by(SchemaVersion.version.desc())
                .limit(1)
            )
            return self.session.exec(statement).first()

        except SQLAlchemyError as e:
            logger.error(f"Failed to read schema registry: {e}")
            raise DatabaseError("Failed to read schema registry", operation="latest") from e

    async def register(self, version: SchemaVersion) -> SchemaVersion:
        try:
            self.session.add(version)
            self.session.commit()
            self.session.refresh(version)
            logger.info(f"Registered schema version {version.version} for {version.entity}")
            return version

        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Failed to register schema version: {e}")
            raise DatabaseError("Failed to register schema version", operation="register") from e
