from enum import Enum


class FieldType(str, Enum):
    """Inferred type of an imported column"""
    TEXT = "Text"
    NUMBER = "Number"
    DATE = "Date"


class CoercionStatus(str, Enum):
    """Outcome of coercing one raw cell value"""
    PARSED = "PARSED"
    DEFAULTED = "DEFAULTED"


class UserRole(str, Enum):
    ADMIN = "admin"
    USER = "user"


class ImportStage(str, Enum):
    """Steps of the Excel import pipeline, in execution order."""
    READ_SOURCE = "ReadSource"
    FILTER_COLUMNS = "FilterColumns"
    SYNTHESIZE_SCHEMA = "SynthesizeSchema"
    TRANSFORM_ROWS = "TransformRows"
    CLEAR_COLLECTION = "ClearCollection"
    BULK_INSERT = "BulkInsert"
    DONE = "Done"
