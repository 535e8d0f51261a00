# ==============================================
# trasporti/transformers/base_transformer.py
# ==============================================
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from trasporti.core.enums import CoercionStatus


@dataclass(frozen=True)
class Coercion:
    """
    Result of coercing one raw cell value.

    ``value`` is always usable: on a failed parse it holds the fallback
    for the target type and ``status`` is DEFAULTED.
    """
    value: Any
    status: CoercionStatus

    @classmethod
    def parsed(cls, value: Any) -> "Coercion":
        return cls(value, CoercionStatus.PARSED)

    @classmethod
    def defaulted(cls, value: Any) -> "Coercion":
        return cls(value, CoercionStatus.DEFAULTED)

    @property
    def is_parsed(self) -> bool:
        return self.status == CoercionStatus.PARSED

    @property
    def is_defaulted(self) -> bool:
        return self.status == CoercionStatus.DEFAULTED


def is_empty(value: Any) -> bool:
    """Blank cell: None, NaN/NaT or a whitespace-only string."""
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    # pandas.NaT compares unequal to itself
    if isinstance(value, datetime) and value != value:
        return True
    return isinstance(value, str) and not value.strip()


def cell_text(value: Any) -> str:
    """
    Textual form of a raw cell.

    Integral floats lose their ``.0`` (spreadsheets store 12 as 12.0) and
    timestamps without a time component are written as plain dates.
    """
    if is_empty(value):
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        if value.hour == value.minute == value.second == value.microsecond == 0:
            return value.date().isoformat()
        return value.isoformat()
    return str(value).strip()
