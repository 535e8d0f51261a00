# ==============================================
# trasporti/transformers/type_inference.py
# ==============================================
import math
import re
from datetime import date, datetime
from typing import Any, Iterable, Optional, Sequence

from dateutil import parser as date_parser

from trasporti.core.constants import FORCE_TEXT_HEADERS, INFERENCE_THRESHOLD
from trasporti.core.enums import FieldType
from .base_transformer import Coercion, cell_text, is_empty

_NUMERIC_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")
_YEAR_RE = re.compile(r"^\d{4}$")

# dateutil fills missing components from this value, keeps parsing deterministic
_DATE_DEFAULT = datetime(1970, 1, 1)

NUMBER_FALLBACK = 0
DATE_FALLBACK = None


def parse_number(value: Any) -> Coercion:
    """
    Parse a cell as a number.

    Integral values come back as ``int``. Anything that is not a finite
    decimal number falls back to ``0``.
    """
    if isinstance(value, bool) or is_empty(value):
        return Coercion.defaulted(NUMBER_FALLBACK)

    if isinstance(value, int):
        return Coercion.parsed(value)

    if isinstance(value, float):
        if not math.isfinite(value):
            return Coercion.defaulted(NUMBER_FALLBACK)
        return Coercion.parsed(int(value) if value.is_integer() else value)

    text = cell_text(value)
    if not _NUMERIC_RE.match(text):
        return Coercion.defaulted(NUMBER_FALLBACK)

    number = float(text)
    if not math.isfinite(number):
        return Coercion.defaulted(NUMBER_FALLBACK)
    return Coercion.parsed(int(number) if number.is_integer() else number)


def parse_date(value: Any) -> Coercion:
    """
    Parse a cell as a calendar date.

    Native spreadsheet dates are taken as they are. Strings go through
    dateutil with day-first ordering (``15/01/2024`` is 15 January). A bare
    four digit number is read as a year, any other bare number is not a date.
    Unparseable values fall back to ``None``.

    Parsing is lenient: a bare month name (``"Mar"``), a time (``"10:30"``)
    or a pair like ``"1 2"`` is accepted, missing parts taken from
    1970-01-01, so a column of such values can be inferred as Date.
    """
    if isinstance(value, bool) or is_empty(value):
        return Coercion.defaulted(DATE_FALLBACK)

    if isinstance(value, datetime):
        if hasattr(value, "to_pydatetime"):
            value = value.to_pydatetime()
        return Coercion.parsed(value.replace(tzinfo=None))

    if isinstance(value, date):
        return Coercion.parsed(datetime(value.year, value.month, value.day))

    text = cell_text(value)
    if _NUMERIC_RE.match(text):
        if _YEAR_RE.match(text):
            return Coercion.parsed(datetime(int(text), 1, 1))
        return Coercion.defaulted(DATE_FALLBACK)

    try:
        parsed = date_parser.parse(text, dayfirst=True, default=_DATE_DEFAULT)
    except (ValueError, OverflowError):
        return Coercion.defaulted(DATE_FALLBACK)

    return Coercion.parsed(parsed.replace(tzinfo=None))


def infer_field_type(
    header: str,
    values: Iterable[Any],
    force_text: Sequence[str] = FORCE_TEXT_HEADERS,
    threshold: float = INFERENCE_THRESHOLD,
) -> FieldType:
    """
    Classify a column as Text, Number or Date from a sample of its values.

    Empty values are ignored. Number and date parsing are tested
    independently; the date ratio is checked first, so a column of years
    such as ``"2024"`` is a Date column rather than a Number column.
    """
    if header in force_text:
        return FieldType.TEXT

    total = 0
    numbers = 0
    dates = 0
    for value in values:
        if is_empty(value):
            continue
        total += 1
        if parse_number(value).is_parsed:
            numbers += 1
        if parse_date(value).is_parsed:
            dates += 1

    if total == 0:
        return FieldType.TEXT
    if dates / total > threshold:
        return FieldType.DATE
    if numbers / total > threshold:
        return FieldType.NUMBER
    return FieldType.TEXT


def coerce(value: Any, field_type: FieldType) -> Coercion:
    """Coerce a raw cell to the runtime representation of ``field_type``."""
    if field_type == FieldType.DATE:
        return parse_date(value)
    if field_type == FieldType.NUMBER:
        return parse_number(value)
    return Coercion.parsed(cell_text(value))


def sample(values: Sequence[Any], size: Optional[int]) -> Sequence[Any]:
    """First ``size`` values of a column, all of them when size is None."""
    return values if size is None else values[:size]
