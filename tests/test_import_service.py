import asyncio
import json
from datetime import datetime
from pathlib import Path

import pytest
from sqlmodel import select

from trasporti.core.config import DatabaseSettings
from trasporti.core.enums import ImportStage
from trasporti.core.exceptions import DatabaseError, ImportAbortedError
from trasporti.infrastructure.db.connection import DatabaseManager
from trasporti.infrastructure.db.models import SchemaVersion, Trasporto
from trasporti.infrastructure.db.repositories import TrasportoRepository
from trasporti.services import ImportService


def run_import(database, import_settings, **kwargs):
    return asyncio.run(ImportService(database, import_settings).run(**kwargs))


def stored_records(database):
    with database.get_session() as session:
        return [record.data for record in session.exec(select(Trasporto)).all()]


def seed_record(database, data):
    with database.get_session() as session:
        session.add(Trasporto(data=data))


@pytest.fixture
def connected_database(memory_database):
    asyncio.run(memory_database.connect())
    yield memory_database
    asyncio.run(memory_database.disconnect())


def test_single_row_replaces_collection(connected_database, import_settings, make_workbook):
    seed_record(connected_database, {"cliente": "Old"})
    make_workbook(["CLIENTE", "TARGA", "DATA"], [["Acme", "AB123CD", "2024-01-15"]])

    summary = run_import(connected_database, import_settings)

    assert summary.stage == ImportStage.DONE
    assert summary.records_removed == 1
    assert stored_records(connected_database) == [
        {"cliente": "Acme", "targa": "AB123CD", "data": datetime(2024, 1, 15).isoformat()}
    ]


def test_records_match_schema_fields(connected_database, import_settings, make_workbook):
    make_workbook(
        ["#", "CLIENTE", "EXTRA", "PAGAMENTO", "AUTISTA CARICO", "n° FATTURA"],
        [
            [1, "Acme", "ignored", 100, 123, "F-1"],
            [2, "Beta", "ignored", "n/d", "Mario", None],
            [3, "Gamma", None, 50.5, None, "F-3"],
        ],
    )

    summary = run_import(connected_database, import_settings)
    records = stored_records(connected_database)

    assert summary.fields == {
        "f_": "Number",
        "cliente": "Text",
        "pagamento": "Number",
        "autista_carico": "Text",
        "n_fattura": "Text",
    }
    assert len(records) == summary.rows_read == 3
    assert all(set(record) == set(summary.fields) for record in records)
    assert sorted(r["pagamento"] for r in records) == [0, 50.5, 100]
    assert summary.fallbacks == {"pagamento": 1}


def test_schema_is_registered_and_written(connected_database, import_settings, make_workbook):
    make_workbook(["CLIENTE", "DATA"], [["Acme", "2024-01-15"]])

    first = run_import(connected_database, import_settings)
    artifact = Path(import_settings.schema_path).read_bytes()
    second = run_import(connected_database, import_settings)

    assert second.schema_version == first.schema_version + 1
    assert Path(import_settings.schema_path).read_bytes() == artifact
    assert [f["field"] for f in json.loads(artifact)["fields"]] == ["cliente", "data"]

    with connected_database.get_session() as session:
        versions = session.exec(select(SchemaVersion)).all()
        assert len(versions) == 2
        assert versions[-1].fields[1]["type"] == "Date"


def test_no_allowed_headers_leaves_store_untouched(connected_database, import_settings, make_workbook):
    seed_record(connected_database, {"cliente": "Old"})
    make_workbook(["FOO", "BAR"], [["x", "y"]])

    with pytest.raises(ImportAbortedError) as exc_info:
        run_import(connected_database, import_settings)

    assert exc_info.value.stage == ImportStage.FILTER_COLUMNS
    assert stored_records(connected_database) == [{"cliente": "Old"}]


def test_failed_insert_leaves_collection_empty(connected_database, import_settings, make_workbook, monkeypatch):
    seed_record(connected_database, {"cliente": "Old"})
    make_workbook(["CLIENTE"], [["Acme"]])

    async def failing_bulk_create(self, objects):
        raise DatabaseError("Failed to insert Trasporto records", operation="bulk_create")

    monkeypatch.setattr(TrasportoRepository, "bulk_create", failing_bulk_create)

    with pytest.raises(ImportAbortedError) as exc_info:
        run_import(connected_database, import_settings)

    # the clear is committed before the insert runs
    assert exc_info.value.stage == ImportStage.BULK_INSERT
    assert stored_records(connected_database) == []
    assert connected_database.is_connected


def test_missing_source(memory_database, import_settings):
    with pytest.raises(ImportAbortedError) as exc_info:
        run_import(memory_database, import_settings)

    assert exc_info.value.stage == ImportStage.READ_SOURCE
    assert not memory_database.is_connected


def test_missing_connection_string(import_settings, make_workbook):
    make_workbook(["CLIENTE"], [["Acme"]])
    database = DatabaseManager(DatabaseSettings(url=None))

    with pytest.raises(ImportAbortedError) as exc_info:
        run_import(database, import_settings)

    assert exc_info.value.stage == ImportStage.CLEAR_COLLECTION


def test_file_store_is_opened_and_closed(tmp_path, import_settings, make_workbook):
    make_workbook(["CLIENTE", "TARGA"], [["Acme", "AB123CD"], ["Beta", "EF456GH"]])
    database = DatabaseManager(DatabaseSettings(url=f"sqlite:///{tmp_path / 'store.db'}"))

    summary = run_import(database, import_settings, source=import_settings.source_path)

    assert summary.records_inserted == 2
    assert not database.is_connected

    asyncio.run(database.connect())
    try:
        assert len(stored_records(database)) == 2
    finally:
        asyncio.run(database.disconnect())
