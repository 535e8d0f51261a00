"""
Replace the transport collection with the content of the Excel workbook
"""

import asyncio

from trasporti.core.config import get_settings
from trasporti.core.exceptions import ImportAbortedError
from trasporti.core.logging import setup_logging
from trasporti.infrastructure.db.connection import DatabaseManager
from trasporti.services import ImportService
from .base import BaseCommand


class Command(BaseCommand):
    description = "Import the Excel workbook, regenerate the schema and replace all records"

    def add_arguments(self, parser):
        parser.add_argument(
            '--source',
            help='Workbook to import (default: IMPORT_SOURCE_PATH)'
        )
        parser.add_argument(
            '--schema-path',
            dest='schema_path',
            help='Where to write the schema definition (default: IMPORT_SCHEMA_PATH)'
        )

    def handle(self, **kwargs):
        settings = get_settings()
        setup_logging(settings)

        service = ImportService(DatabaseManager(settings.database), settings.importer)
        self.print_info(f"Importing {kwargs.get('source') or settings.importer.source_path}...")

        try:
            summary = asyncio.run(service.run(kwargs.get('source'), kwargs.get('schema_path')))
        except ImportAbortedError as e:
            self.fail(f"Import aborted at {e.details.get('stage', 'unknown')}: {e.message}")

        for field, field_type in summary.fields.items():
            print(f"  {field:<24} {field_type}")
        if summary.fallbacks:
            self.print_warning(f"Fallback values applied: {summary.fallbacks}")
        self.print_success(
            f"Imported {summary.records_inserted} records "
            f"(schema version {summary.schema_version}, written to {summary.schema_path})"
        )
