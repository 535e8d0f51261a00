import re

import pytest

from trasporti.core.constants import ALLOWED_HEADERS
from trasporti.transformers import normalize_header


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("CLIENTE", "cliente"),
        ("n° FATTURA", "n_fattura"),
        ("REGIONE CARICO", "regione_carico"),
        ("  Indirizzo   Ritiro ", "indirizzo_ritiro"),
        ("Città", "citta"),
        ("123abc", "f_123abc"),
        ("_private", "f__private"),
        ("#", "f_"),
        ("", "field"),
        (None, "field"),
    ],
)
def test_normalize_header(raw, expected):
    assert normalize_header(raw) == expected


def test_non_string_labels():
    assert normalize_header(2024) == "f_2024"


def test_idempotent():
    samples = ALLOWED_HEADERS + ["Città di Carico", "  mixed_Case  Label", "@@@", "f_", "field"]
    for raw in samples:
        once = normalize_header(raw)
        assert normalize_header(once) == once


def test_identifier_shape():
    pattern = re.compile(r"^[a-z][a-z0-9_]*$")
    for raw in ALLOWED_HEADERS:
        assert pattern.match(normalize_header(raw))
