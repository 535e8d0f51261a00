import logging
from datetime import datetime
from typing import Any, List, Optional, Sequence

from sqlmodel import Session, select, or_
from sqlalchemy.exc import SQLAlchemyError

from .base import BaseRepository
from ..models.trasporto import Trasporto
from ....core.enums import FieldType
from ....core.exceptions import DatabaseError

logger = logging.getLogger(__name__)

SYSTEM_SORT_FIELDS = {
    "id": "id",
    "created_at": "created_at",
    "createdAt": "created_at",
    "updated_at": "updated_at",
    "updatedAt": "updated_at",
}


class TrasportoRepository(BaseRepository[Trasporto]):
    """Queries over the transport collection."""

    def __init__(self, session: Session):
        super().__init__(Trasporto, session)

    @staticmethod
    def field(name: str):
        """Text expression for one record field stored in the JSON document."""
        return Trasporto.data[name].as_string()

    def contains(self, name: str, value: str):
        """Case-insensitive substring match on a record field."""
        return self.field(name).icontains(value, autoescape=True)

    def contains_any(self, names: Sequence[str], value: str):
        return or_(*[self.contains(name, value) for name in names])

    def between(self, name: str, start: Optional[datetime], end: Optional[datetime]) -> List[Any]:
        """Range conditions on a date field stored as ISO text."""
        conditions = []
        if start is not None:
            conditions.append(self.field(name) >= start.isoformat())
        if end is not None:
            conditions.append(self.field(name) <= end.isoformat())
        return conditions

    @staticmethod
    def created_since(moment: datetime):
        return Trasporto.created_at >= moment

    def order_by(self, sort: str, field_type: Optional[FieldType] = None):
        """
        Translate ``-field`` / ``field`` into an ORDER BY expression.

        Number fields sort numerically, Date fields are ISO text and sort
        as strings like Text fields.
        """
        descending = sort.startswith("-")
        name = sort.lstrip("-+")
        if name in SYSTEM_SORT_FIELDS:
            column = getattr(Trasporto, SYSTEM_SORT_FIELDS[name])
        elif field_type == FieldType.NUMBER:
            column = Trasporto.data[name].as_float()
        else:
            column = self.field(name)
        return column.desc() if descending else column.asc()

    async def find(
        self,
        conditions: Sequence[Any] = (),
        sort: str = "-created_at",
        skip: int = 0,
        limit: Optional[int] = None,
        field_type: Optional[FieldType] = None,
    ) -> List[Trasporto]:
        try:
            statement = select(Trasporto)
            if conditions:
                statement = statement.where(*conditions)
            statement = statement.order_by(self.order_by(sort, field_type), Trasporto.id).offset(skip)
            if limit is not None:
                statement = statement.limit(limit)
            return list(self.session.exec(statement).all())

        except SQLAlchemyError as e:
            logger.error(f"Failed to query trasporti: {e}")
            raise DatabaseError("Failed to query trasporti", operation="find") from e
