"""
Transport records service: listing, filtering and validated writes.
"""

import math
import re
from datetime import datetime, time, timedelta
from typing import Any, Dict, List, Mapping, Optional
from uuid import UUID

from sqlmodel import Session

from trasporti.core.constants import (
    CLIENT_FIELD,
    DEFAULT_PAGE_SIZE,
    DRIVER_FIELDS,
    ENTITY_NAME,
    PLATE_FIELD,
    RECENT_DAYS,
    REGION_FIELD,
    TEXT_SEARCH_FIELDS,
)
from trasporti.core.enums import FieldType
from trasporti.core.exceptions import BadRequestError, NotFoundError
from trasporti.infrastructure.db.models import Trasporto
from trasporti.infrastructure.db.models.base import utcnow
from trasporti.infrastructure.db.models.trasporto import encode_value
from trasporti.infrastructure.db.repositories import SchemaRepository, TrasportoRepository
from trasporti.infrastructure.db.repositories.trasporto_repository import SYSTEM_SORT_FIELDS
from trasporti.schemas.trasporto import TrasportoFilters
from trasporti.transformers import SchemaDescriptor, cell_text, default_schema, parse_date, parse_number
from .base import BaseService

# Permissive plate check, letters digits spaces and dashes only
PLATE_RE = re.compile(r"^[A-Z0-9\s\-]{1,20}$", re.IGNORECASE)

READ_ONLY_FIELDS = {"id", "_id", "created_at", "updated_at", "createdAt", "updatedAt"}


def validate_plate(value: Any) -> str:
    plate = str(value).strip()
    if not PLATE_RE.match(plate):
        raise BadRequestError("Invalid plate", field=PLATE_FIELD, value=value)
    return plate


def validate_payload(body: Mapping[str, Any], schema: SchemaDescriptor) -> Dict[str, Any]:
    """
    Keep the fields declared by ``schema`` and coerce them to their types.

    Unknown keys are dropped. Empty values are stored as ``None``; a value
    that does not parse as its field type is rejected with a 400, unlike the
    importer which falls back silently.
    """
    values: Dict[str, Any] = {}
    for name, value in body.items():
        if name in READ_ONLY_FIELDS:
            continue
        field_type = schema.field_type(name)
        if field_type is None:
            continue

        if value is None or (isinstance(value, str) and not value.strip()):
            values[name] = None if field_type != FieldType.TEXT else value
            continue

        if field_type == FieldType.DATE:
            result = parse_date(value)
            if result.is_defaulted:
                raise BadRequestError("Invalid date", field=name, value=value)
            values[name] = encode_value(result.value)
        elif field_type == FieldType.NUMBER:
            result = parse_number(value)
            if result.is_defaulted:
                raise BadRequestError("Invalid number", field=name, value=value)
            values[name] = result.value
        else:
            values[name] = value if isinstance(value, str) else cell_text(value)

    if values.get(PLATE_FIELD):
        values[PLATE_FIELD] = validate_plate(values[PLATE_FIELD])

    return values


class TrasportoService(BaseService):
    """CRUD over the transport collection, shaped by the latest schema."""

    def __init__(self, db_session: Session):
        super().__init__(db_session)
        self.repository = TrasportoRepository(db_session)
        self.schema_repository = SchemaRepository(db_session)

    def get_service_name(self) -> str:
        return "TrasportoService"

    async def get_schema(self) -> SchemaDescriptor:
        """Latest registered schema, or the default schema before any import."""
        latest = await self.schema_repository.latest(ENTITY_NAME)
        if latest is None:
            return default_schema()
        return SchemaDescriptor.from_dict(
            {"entity": latest.entity, "fields": latest.fields, "annotations": latest.annotations},
            version=latest.version,
        )

    def build_conditions(self, filters: TrasportoFilters, schema: SchemaDescriptor) -> List[Any]:
        """Translate query filters into SQL conditions, all of them ANDed."""
        repo = self.repository
        conditions: List[Any] = []

        if filters.cliente:
            conditions.append(repo.contains(CLIENT_FIELD, filters.cliente))
        if filters.targa:
            conditions.append(repo.contains(PLATE_FIELD, filters.targa))
        if filters.autista:
            conditions.append(repo.contains_any(DRIVER_FIELDS, filters.autista))
        if filters.regione:
            conditions.append(repo.contains(REGION_FIELD, filters.regione))

        if filters.data_from or filters.data_to:
            date_field = schema.date_field()
            if date_field is None:
                raise BadRequestError("No date field available for filtering", field="data_from")
            start = datetime.combine(filters.data_from, time.min) if filters.data_from else None
            end = datetime.combine(filters.data_to, time.max) if filters.data_to else None
            conditions.extend(repo.between(date_field, start, end))

        if filters.q:
            fields = [name for name in TEXT_SEARCH_FIELDS if schema.has_field(name)]
            fields = fields or schema.fields_of_type(FieldType.TEXT)
            if fields:
                conditions.append(repo.contains_any(fields, filters.q))

        return conditions

    def check_sort(self, sort: str, schema: SchemaDescriptor) -> str:
        name = sort.lstrip("-+")
        if name not in SYSTEM_SORT_FIELDS and not schema.has_field(name):
            raise BadRequestError(f"Cannot sort by '{name}'", field="sort", value=sort)
        return sort

    async def list_trasporti(
        self,
        filters: Optional[TrasportoFilters] = None,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
        sort: str = "-created_at",
    ) -> Dict[str, Any]:
        """
        Paginated, filtered listing.

        Returns:
            ``{"meta": {total, page, limit, pages}, "data": [...]}``
        """
        filters = filters or TrasportoFilters()
        self.log_operation("list_trasporti", {"filters": filters.active(), "page": page, "limit": limit})

        schema = await self.get_schema()
        conditions = self.build_conditions(filters, schema)
        sort = self.check_sort(sort, schema)

        total = await self.repository.count(*conditions)
        records = await self.repository.find(
            conditions,
            sort=sort,
            skip=(page - 1) * limit,
            limit=limit,
            field_type=schema.field_type(sort.lstrip("-+")),
        )

        return {
            "meta": {
                "total": total,
                "page": page,
                "limit": limit,
                "pages": math.ceil(total / limit) if limit else 0,
            },
            "data": [record.to_document() for record in records],
        }

    async def recent(self, limit: int = DEFAULT_PAGE_SIZE) -> List[Dict[str, Any]]:
        """Records created in the last days, newest first."""
        since = utcnow() - timedelta(days=RECENT_DAYS)
        records = await self.repository.find(
            [self.repository.created_since(since)], sort="-created_at", limit=limit
        )
        return [record.to_document() for record in records]

    async def _get_record(self, record_id: str) -> Trasporto:
        try:
            uuid = UUID(str(record_id))
        except ValueError:
            raise NotFoundError("Trasporto", resource_id=record_id)
        return await self.repository.get_or_404(uuid)

    async def get(self, record_id: str) -> Dict[str, Any]:
        record = await self._get_record(record_id)
        return record.to_document()

    async def create(self, body: Mapping[str, Any]) -> Dict[str, Any]:
        schema = await self.get_schema()
        values = validate_payload(body, schema)

        data = schema.defaults()
        data.update(values)
        record = await self.repository.create(Trasporto(data=data))

        self.log_operation("create", {"id": str(record.id)})
        return record.to_document()

    async def update(self, record_id: str, body: Mapping[str, Any], partial: bool = False) -> Dict[str, Any]:
        """
        Replace (PUT) or merge (PATCH) the fields of a record.

        A full update resets every field missing from ``body`` to its default.
        """
        record = await self._get_record(record_id)
        schema = await self.get_schema()
        values = validate_payload(body, schema)

        data = dict(record.data or {}) if partial else schema.defaults()
        data.update(values)
        # JSON columns are not change-tracked, assign a new mapping
        record.data = data
        record.touch()
        record = await self.repository.save(record)

        self.log_operation("update", {"id": str(record.id), "partial": partial})
        return record.to_document()

    async def delete(self, record_id: str) -> None:
        record = await self._get_record(record_id)
        await self.repository.delete(record.id)
        self.log_operation("delete", {"id": record_id})
