# ==============================================
# trasporti/transformers/record_transformer.py
# ==============================================
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Tuple

from trasporti.core.logging import get_logger
from .schema_synthesizer import SchemaDescriptor
from .type_inference import coerce

logger = get_logger(__name__)


@dataclass
class TransformedRecord:
    """Normalized record plus the fields that received a fallback value."""
    data: Dict[str, Any]
    defaulted: List[str] = field(default_factory=list)


def transform_row(row: Mapping[str, Any], schema: SchemaDescriptor) -> TransformedRecord:
    """
    Convert one raw sheet row into a record conforming to ``schema``.

    Cells are looked up by raw header. Missing cells behave like blank ones.
    Never raises: unparseable dates become ``None`` and unparseable numbers
    become ``0``.
    """
    record = TransformedRecord(data={})
    for column in schema.columns:
        result = coerce(row.get(column.raw_header), column.type)
        record.data[column.field] = result.value
        if result.is_defaulted:
            record.defaulted.append(column.field)
    return record


def transform_rows(
    rows: Iterable[Mapping[str, Any]], schema: SchemaDescriptor
) -> Tuple[List[Dict[str, Any]], Dict[str, int]]:
    """
    Transform every row.

    Returns:
        Tuple of (records, fallback count per field)
    """
    records = []
    fallbacks: Counter = Counter()
    for row in rows:
        transformed = transform_row(row, schema)
        records.append(transformed.data)
        fallbacks.update(transformed.defaulted)

    if fallbacks:
        logger.info(f"Fallback values applied: {dict(fallbacks)}")
    return records, dict(fallbacks)
