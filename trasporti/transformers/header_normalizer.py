"""Turn raw spreadsheet column labels into safe record field names."""
import re
import unicodedata
from typing import Any, Optional

from trasporti.core.constants import FALLBACK_FIELD_NAME, FIELD_PREFIX

_DISALLOWED_RE = re.compile(r"[^a-zA-Z0-9_ ]")
_SPACES_RE = re.compile(r"\s+")


def strip_accents(value: str) -> str:
    decomposed = unicodedata.normalize("NFD", value)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_header(name: Optional[Any]) -> str:
    """
    Normalize a column label into a bare identifier.

    ``"n° FATTURA"`` becomes ``"n_fattura"``, ``"Città"`` becomes ``"citta"``.
    Labels not starting with a letter get the ``f_`` prefix; a label made only
    of symbols degenerates to ``"f_"`` and may collide with others. Already
    normalized names are returned unchanged.
    """
    if name is None or name == "":
        return FALLBACK_FIELD_NAME

    s = str(name).strip()
    s = strip_accents(s)
    s = _DISALLOWED_RE.sub("", s)
    s = _SPACES_RE.sub("_", s)
    s = s.lower()

    if not re.match(r"[a-z]", s):
        s = FIELD_PREFIX + s

    return s
