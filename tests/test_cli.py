import json

import pytest

from trasporti.interfaces.cli.main import CLIManager, main


def test_commands_are_discovered():
    assert set(CLIManager().available_commands) == {"create_master", "import_excel", "runserver"}


def test_help_lists_commands(capsys):
    main(["help"])

    out = capsys.readouterr().out
    assert "import_excel" in out
    assert "create_master" in out


def test_import_excel(tmp_path, make_workbook, capsys):
    source = make_workbook(["CLIENTE", "DATA"], [["Acme", "2024-01-15"]])
    schema_path = tmp_path / "out" / "trasporto.json"

    main(["import_excel", "--source", str(source), "--schema-path", str(schema_path)])

    assert "Imported 1 records" in capsys.readouterr().out
    assert json.loads(schema_path.read_text(encoding="utf-8"))["entity"] == "Trasporto"


def test_import_excel_exits_non_zero(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(["import_excel", "--source", str(tmp_path / "missing.xlsx"), "--schema-path", str(tmp_path / "s.json")])

    assert exc_info.value.code == 1
    assert "ReadSource" in capsys.readouterr().out


def test_unknown_command():
    with pytest.raises(SystemExit) as exc_info:
        main(["nope"])

    assert exc_info.value.code == 1
