from .base_transformer import Coercion, cell_text, is_empty
from .header_normalizer import normalize_header
from .record_transformer import TransformedRecord, transform_row, transform_rows
from .schema_synthesizer import (
    AnnotationField,
    ColumnDescriptor,
    SchemaDescriptor,
    default_schema,
    filter_headers,
    synthesize_schema,
    write_schema_artifact,
)
from .type_inference import coerce, infer_field_type, parse_date, parse_number

__all__ = [
    "AnnotationField",
    "Coercion",
    "ColumnDescriptor",
    "SchemaDescriptor",
    "TransformedRecord",
    "cell_text",
    "coerce",
    "default_schema",
    "filter_headers",
    "infer_field_type",
    "is_empty",
    "normalize_header",
    "parse_date",
    "parse_number",
    "synthesize_schema",
    "transform_row",
    "transform_rows",
    "write_schema_artifact",
]
