from datetime import datetime

import pytest

from trasporti.core.enums import ImportStage
from trasporti.core.exceptions import ImportAbortedError
from trasporti.processors import ExcelProcessor


def test_read_sheet(make_workbook):
    path = make_workbook(
        ["CLIENTE", "TARGA", "DATA", "PAGAMENTO"],
        [
            ["Acme", "AB123CD", datetime(2024, 1, 15), 100],
            [None, None, None, None],
            ["Beta", None, "15/02/2024", 12.5],
        ],
    )

    sheet = ExcelProcessor().read_sheet(path)

    assert sheet.headers == ["CLIENTE", "TARGA", "DATA", "PAGAMENTO"]
    assert len(sheet) == 2
    assert sheet.rows[0]["CLIENTE"] == "Acme"
    assert sheet.rows[0]["DATA"] == datetime(2024, 1, 15)
    assert sheet.rows[1]["TARGA"] is None
    assert sheet.column("PAGAMENTO") == [100, 12.5]


def test_missing_file(tmp_path):
    with pytest.raises(ImportAbortedError) as exc_info:
        ExcelProcessor().read_sheet(tmp_path / "missing.xlsx")

    assert exc_info.value.stage == ImportStage.READ_SOURCE


def test_headers_only(make_workbook):
    path = make_workbook(["CLIENTE", "TARGA"], [])

    with pytest.raises(ImportAbortedError) as exc_info:
        ExcelProcessor().read_sheet(path)

    assert exc_info.value.stage == ImportStage.READ_SOURCE


def test_not_a_workbook(tmp_path):
    path = tmp_path / "usato.xlsx"
    path.write_text("not a spreadsheet")

    is_valid, message = ExcelProcessor().validate_file_format(path)

    assert not is_valid
    assert "Cannot open" in message
