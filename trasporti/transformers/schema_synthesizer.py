# ==============================================
# trasporti/transformers/schema_synthesizer.py
# ==============================================
import json
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from trasporti.core.constants import (
    ALLOWED_HEADERS,
    DATE_FIELD,
    ENTITY_NAME,
    FORCE_TEXT_HEADERS,
    NOTE_FIELD,
    ROW_COLOR_FIELD,
)
from trasporti.core.enums import FieldType
from trasporti.core.logging import get_logger
from .header_normalizer import normalize_header
from .type_inference import infer_field_type, sample

logger = get_logger(__name__)


@dataclass(frozen=True)
class ColumnDescriptor:
    """One imported column: source label, record field name and inferred type."""
    raw_header: str
    field: str
    type: FieldType

    def to_dict(self) -> Dict[str, Any]:
        return {"header": self.raw_header, "field": self.field, "type": self.type.value}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ColumnDescriptor":
        return cls(raw_header=data["header"], field=data["field"], type=FieldType(data["type"]))


@dataclass(frozen=True)
class AnnotationField:
    """Free-text field every record accepts besides the imported columns."""
    field: str
    default: Optional[str]
    type: FieldType = FieldType.TEXT

    def to_dict(self) -> Dict[str, Any]:
        return {"field": self.field, "type": self.type.value, "default": self.default}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AnnotationField":
        return cls(field=data["field"], default=data.get("default"), type=FieldType(data.get("type", "Text")))


DEFAULT_ANNOTATIONS = (
    AnnotationField(NOTE_FIELD, None),
    AnnotationField(ROW_COLOR_FIELD, ""),
)


@dataclass(frozen=True)
class SchemaDescriptor:
    """
    Shape of a transport record.

    Built by the importer from the workbook headers, stored in the schema
    registry and read back by the CRUD API to validate request bodies.
    Records carry automatic ``created_at`` / ``updated_at`` timestamps.
    """
    columns: Tuple[ColumnDescriptor, ...]
    annotations: Tuple[AnnotationField, ...] = field(default=DEFAULT_ANNOTATIONS)
    entity: str = ENTITY_NAME
    version: Optional[int] = None

    @property
    def fields(self) -> List[str]:
        """Imported field names, in column order."""
        return [column.field for column in self.columns]

    @property
    def all_fields(self) -> List[str]:
        return self.fields + [annotation.field for annotation in self.annotations]

    def field_type(self, name: str) -> Optional[FieldType]:
        for column in self.columns:
            if column.field == name:
                return column.type
        for annotation in self.annotations:
            if annotation.field == name:
                return annotation.type
        return None

    def has_field(self, name: str) -> bool:
        return self.field_type(name) is not None

    def fields_of_type(self, field_type: FieldType) -> List[str]:
        return [column.field for column in self.columns if column.type == field_type]

    def date_field(self) -> Optional[str]:
        """Field used for date range filtering."""
        if self.has_field(DATE_FIELD):
            return DATE_FIELD
        dates = self.fields_of_type(FieldType.DATE)
        return dates[0] if dates else None

    def defaults(self) -> Dict[str, Any]:
        """Empty record: every field null, annotations at their default."""
        values: Dict[str, Any] = {name: None for name in self.fields}
        for annotation in self.annotations:
            values[annotation.field] = annotation.default
        return values

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entity": self.entity,
            "fields": [column.to_dict() for column in self.columns],
            "annotations": [annotation.to_dict() for annotation in self.annotations],
            "timestamps": True,
        }

    def to_json(self) -> str:
        """Stable serialization: identical schemas give identical text."""
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False, sort_keys=True) + "\n"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], version: Optional[int] = None) -> "SchemaDescriptor":
        return cls(
            columns=tuple(ColumnDescriptor.from_dict(item) for item in data.get("fields", [])),
            annotations=tuple(AnnotationField.from_dict(item) for item in data.get("annotations", [])),
            entity=data.get("entity", ENTITY_NAME),
            version=version,
        )


def filter_headers(headers: Sequence[Any], allowed: Sequence[str] = ALLOWED_HEADERS) -> List[str]:
    """
    Keep the allow-listed headers, in sheet order.

    Headers missing from the allow-list are dropped silently, as are
    repeated occurrences of the same label.
    """
    allowed_set = set(allowed)
    kept: List[str] = []
    for header in headers:
        label = str(header)
        if label in allowed_set and label not in kept:
            kept.append(label)
    return kept


def _unique_field(name: str, taken: Dict[str, int]) -> str:
    if name not in taken:
        taken[name] = 1
        return name

    counter = taken[name]
    candidate = name
    while candidate in taken:
        counter += 1
        candidate = f"{name}_{counter}"
    taken[name] = counter
    taken[candidate] = 1
    return candidate


def synthesize_schema(
    headers: Sequence[str],
    columns: Mapping[str, Sequence[Any]],
    force_text: Sequence[str] = FORCE_TEXT_HEADERS,
    sample_size: Optional[int] = 200,
    entity: str = ENTITY_NAME,
) -> SchemaDescriptor:
    """
    Build the schema for the given allow-listed headers.

    Args:
        headers: Retained headers, in first-occurrence order
        columns: Column values keyed by raw header
        force_text: Headers always classified as Text
        sample_size: Number of leading values inspected per column

    Returns:
        Schema descriptor with one column per header, same order
    """
    taken: Dict[str, int] = {}
    descriptors = []
    for header in headers:
        name = _unique_field(normalize_header(header), taken)
        if name != normalize_header(header):
            logger.warning(f"Field name collision for header '{header}', renamed to '{name}'")

        values = sample(list(columns.get(header, [])), sample_size)
        descriptors.append(ColumnDescriptor(header, name, infer_field_type(header, values, force_text)))

    declared = {descriptor.field for descriptor in descriptors}
    annotations = tuple(a for a in DEFAULT_ANNOTATIONS if a.field not in declared)

    return SchemaDescriptor(columns=tuple(descriptors), annotations=annotations, entity=entity)


def default_schema(allowed: Sequence[str] = ALLOWED_HEADERS) -> SchemaDescriptor:
    """
    Schema used before any import.

    Every allow-listed column is Text except the ``data`` column, which is
    a Date.
    """
    schema = synthesize_schema(filter_headers(allowed, allowed), {}, force_text=allowed)
    columns = tuple(
        replace(column, type=FieldType.DATE) if column.field == DATE_FIELD else column
        for column in schema.columns
    )
    return replace(schema, columns=columns)


def write_schema_artifact(schema: SchemaDescriptor, path: Union[str, Path]) -> Path:
    """Write the schema definition file, overwriting the previous one."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(schema.to_json(), encoding="utf-8")
    logger.info(f"Schema definition written to {path}")
    return path
