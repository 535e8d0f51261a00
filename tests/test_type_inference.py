from datetime import date, datetime

import pandas as pd

from trasporti.core.enums import CoercionStatus, FieldType
from trasporti.transformers import coerce, infer_field_type, parse_date, parse_number


class TestInferFieldType:
    def test_mostly_numbers(self):
        assert infer_field_type("PAGAMENTO", ["1", "2", "3", "x"]) == FieldType.NUMBER

    def test_all_empty_is_text(self):
        assert infer_field_type("NOTE", [None, "", "   "]) == FieldType.TEXT

    def test_no_values_is_text(self):
        assert infer_field_type("NOTE", []) == FieldType.TEXT

    def test_forced_text_header(self):
        assert infer_field_type("AUTISTA CARICO", ["1", "2", "3"]) == FieldType.TEXT
        assert infer_field_type("AUTISTA SCARICO", [datetime(2024, 1, 1)]) == FieldType.TEXT

    def test_years_are_dates(self):
        assert infer_field_type("DATA", ["2024", "2023", "2022"]) == FieldType.DATE

    def test_native_dates(self):
        values = [datetime(2024, 1, 15), datetime(2024, 2, 1), None]
        assert infer_field_type("DATA", values) == FieldType.DATE

    def test_date_strings(self):
        assert infer_field_type("DATA", ["15/01/2024", "2024-02-01", "01.03.2024"]) == FieldType.DATE

    def test_mixed_is_text(self):
        assert infer_field_type("CLIENTE", ["Acme", "Beta", "12", "Gamma"]) == FieldType.TEXT

    def test_ratio_must_exceed_threshold(self):
        # 3 out of 5 is exactly 0.6
        assert infer_field_type("X", ["1", "2", "3", "abc", "xyz"]) == FieldType.TEXT

    def test_empty_values_ignored(self):
        assert infer_field_type("X", ["1", None, "", "2"]) == FieldType.NUMBER


class TestParseNumber:
    def test_text_fallback(self):
        result = parse_number("abc")
        assert result.value == 0
        assert result.status == CoercionStatus.DEFAULTED

    def test_integral_values(self):
        assert parse_number("42").value == 42
        assert parse_number(12.0).value == 12
        assert isinstance(parse_number(12.0).value, int)

    def test_decimals(self):
        assert parse_number("3.5").value == 3.5
        assert parse_number(" -1e3 ").value == -1000

    def test_empty_and_bool(self):
        assert parse_number(None).is_defaulted
        assert parse_number("").is_defaulted
        assert parse_number(True).is_defaulted

    def test_not_finite(self):
        assert parse_number(float("inf")).is_defaulted
        assert parse_number("nan").is_defaulted


class TestParseDate:
    def test_text_fallback(self):
        result = parse_date("abc")
        assert result.value is None
        assert result.is_defaulted

    def test_iso_string(self):
        assert parse_date("2024-01-15").value == datetime(2024, 1, 15)

    def test_day_first(self):
        assert parse_date("05/01/2024").value == datetime(2024, 1, 5)

    def test_native_values(self):
        assert parse_date(date(2024, 1, 15)).value == datetime(2024, 1, 15)
        assert parse_date(pd.Timestamp("2024-01-15 10:30")).value == datetime(2024, 1, 15, 10, 30)

    def test_bare_numbers(self):
        assert parse_date("2024").value == datetime(2024, 1, 1)
        assert parse_date("12").is_defaulted
        assert parse_date(45000).is_defaulted

    def test_partial_values_are_lenient(self):
        assert parse_date("Mar").value == datetime(1970, 3, 1)
        assert parse_date("10:30").value == datetime(1970, 1, 1, 10, 30)

    def test_empty(self):
        assert parse_date(None).is_defaulted
        assert parse_date(pd.NaT).is_defaulted


class TestCoerce:
    def test_text_never_fails(self):
        assert coerce(12.0, FieldType.TEXT).value == "12"
        assert coerce(None, FieldType.TEXT).value == ""
        assert coerce(datetime(2024, 1, 15), FieldType.TEXT).value == "2024-01-15"
        assert coerce(" Acme ", FieldType.TEXT).is_parsed

    def test_asymmetric_fallbacks(self):
        assert coerce("abc", FieldType.NUMBER).value == 0
        assert coerce("abc", FieldType.DATE).value is None
