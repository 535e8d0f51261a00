"""
Excel import pipeline.

ReadSource -> FilterColumns -> SynthesizeSchema -> TransformRows ->
ClearCollection -> BulkInsert -> Done. Any stage can abort the run with an
``ImportAbortedError`` naming the stage.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

from trasporti.core.config import ImportSettings, get_settings
from trasporti.core.constants import ALLOWED_HEADERS
from trasporti.core.enums import ImportStage
from trasporti.core.exceptions import DatabaseError, ImportAbortedError
from trasporti.infrastructure.db.connection import DatabaseManager
from trasporti.infrastructure.db.models import SchemaVersion, Trasporto
from trasporti.infrastructure.db.models.trasporto import encode_document
from trasporti.infrastructure.db.repositories import SchemaRepository, TrasportoRepository
from trasporti.processors import ExcelProcessor
from trasporti.transformers import (
    SchemaDescriptor,
    filter_headers,
    synthesize_schema,
    transform_rows,
    write_schema_artifact,
)
from .base import BaseService


@dataclass
class ImportSummary:
    source: str
    schema_path: str
    stage: ImportStage = ImportStage.READ_SOURCE
    schema_version: Optional[int] = None
    rows_read: int = 0
    records_removed: int = 0
    records_inserted: int = 0
    fields: Dict[str, str] = field(default_factory=dict)
    fallbacks: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "schema_path": self.schema_path,
            "stage": self.stage.value,
            "schema_version": self.schema_version,
            "rows_read": self.rows_read,
            "records_removed": self.records_removed,
            "records_inserted": self.records_inserted,
            "fields": self.fields,
            "fallbacks": self.fallbacks,
        }


class ImportService(BaseService):
    """
    One-shot replacement of the transport collection from a workbook.

    The store is only opened right before the collection is cleared, so a
    broken workbook never touches existing data. A handle that is already
    open is used as is and left open. Clearing is committed on its
    own: if the insert then fails the collection stays empty.
    """

    def __init__(
        self,
        database: DatabaseManager,
        settings: Optional[ImportSettings] = None,
        processor: Optional[ExcelProcessor] = None,
    ):
        super().__init__()
        self.database = database
        self.settings = settings or get_settings().importer
        self.processor = processor or ExcelProcessor()

    def get_service_name(self) -> str:
        return "ImportService"

    async def run(
        self,
        source: Optional[Union[str, Path]] = None,
        schema_path: Optional[Union[str, Path]] = None,
    ) -> ImportSummary:
        """
        Execute the whole pipeline.

        Raises:
            ImportAbortedError: on any fatal failure, ``stage`` tells where
        """
        source = str(source or self.settings.source_path)
        schema_path = str(schema_path or self.settings.schema_path)
        summary = ImportSummary(source=source, schema_path=schema_path)
        opened = False
        self.log_operation("import", {"source": source, "schema_path": schema_path})

        try:
            sheet = self.processor.read_sheet(source)
            summary.rows_read = len(sheet)

            summary.stage = ImportStage.FILTER_COLUMNS
            headers = filter_headers(sheet.headers, ALLOWED_HEADERS)
            if not headers:
                raise ImportAbortedError(
                    "None of the expected headers is present in the sheet",
                    stage=summary.stage,
                    details={"headers": sheet.headers},
                )
            self.logger.info(f"Accepted headers: {headers}")

            summary.stage = ImportStage.SYNTHESIZE_SCHEMA
            schema = synthesize_schema(
                headers,
                {header: sheet.column(header) for header in headers},
                sample_size=self.settings.sample_size,
            )
            summary.fields = {column.field: column.type.value for column in schema.columns}
            self.logger.info(f"Field mapping: {summary.fields}")
            try:
                write_schema_artifact(schema, schema_path)
            except OSError as e:
                raise ImportAbortedError(
                    f"Cannot write schema definition to {schema_path}: {e}", stage=summary.stage
                ) from e

            summary.stage = ImportStage.TRANSFORM_ROWS
            records, summary.fallbacks = transform_rows(sheet.rows, schema)

            summary.stage = ImportStage.CLEAR_COLLECTION
            if not self.database.is_connected:
                await self.database.connect()
                opened = True
            summary.schema_version = await self._register_schema(schema, source)
            summary.records_removed = await self._clear_collection()

            summary.stage = ImportStage.BULK_INSERT
            summary.records_inserted = await self._bulk_insert(records)

        except DatabaseError as e:
            self.logger.error(f"Import aborted at {summary.stage.value}: {e.message}")
            raise ImportAbortedError(e.message, stage=summary.stage, details=e.details) from e

        except ImportAbortedError as e:
            self.logger.error(f"Import aborted at {summary.stage.value}: {e.message}")
            raise

        finally:
            if opened:
                await self.database.disconnect()

        summary.stage = ImportStage.DONE
        self.logger.info(
            f"Import completed: {summary.records_inserted} records inserted, "
            f"{summary.records_removed} removed, schema version {summary.schema_version}"
        )
        return summary

    async def _register_schema(self, schema: SchemaDescriptor, source: str) -> Optional[int]:
        data = schema.to_dict()
        with self.database.get_session() as session:
            version = await SchemaRepository(session).register(
                SchemaVersion(
                    entity=schema.entity,
                    fields=data["fields"],
                    annotations=data["annotations"],
                    source=source,
                )
            )
            return version.version

    async def _clear_collection(self) -> int:
        with self.database.get_session() as session:
            removed = await TrasportoRepository(session).delete_all()
        self.logger.info(f"Collection cleared, {removed} records removed")
        return removed

    async def _bulk_insert(self, records) -> int:
        with self.database.get_session() as session:
            return await TrasportoRepository(session).bulk_create(
                [Trasporto(data=encode_document(record)) for record in records]
            )
