# ==============================================
# trasporti/processors/excel_processor.py
# ==============================================
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

import openpyxl
import pandas as pd

from trasporti.core.enums import ImportStage
from trasporti.core.exceptions import ImportAbortedError
from trasporti.core.logging import get_logger

logger = get_logger(__name__)

VALID_EXTENSIONS = [".xlsx", ".xlsm"]


@dataclass
class SheetData:
    """Header row and data rows of a worksheet."""
    name: str
    headers: List[str]
    rows: List[Dict[str, Any]] = field(default_factory=list)

    def column(self, header: str) -> List[Any]:
        """Values of one column, in row order."""
        return [row.get(header) for row in self.rows]

    def __len__(self) -> int:
        return len(self.rows)


class ExcelProcessor:
    """
    Reads the first worksheet of an XLSX workbook.

    The first row holds the headers. Cells keep their native types
    (text, numbers, datetimes); blank cells become ``None`` and fully
    blank rows are skipped.
    """

    def __init__(self, sheet_name: Union[int, str] = 0, header_row: int = 0):
        self.sheet_name = sheet_name
        self.header_row = header_row

    def validate_file_format(self, file_path: Union[str, Path]) -> Tuple[bool, str]:
        """
        Check that the file exists and opens as a workbook.

        Returns:
            Tuple of (is_valid, error_message)
        """
        path = Path(file_path)
        if not path.exists():
            return False, f"File does not exist: {path}"

        if path.suffix.lower() not in VALID_EXTENSIONS:
            return False, f"Invalid file extension: {path.suffix}. Expected: {VALID_EXTENSIONS}"

        if path.stat().st_size == 0:
            return False, "File is empty"

        try:
            workbook = openpyxl.load_workbook(path, read_only=True)
        except Exception as e:
            return False, f"Cannot open Excel file: {str(e)}"

        try:
            if not workbook.sheetnames:
                return False, "No sheets found in Excel file"
        finally:
            workbook.close()

        return True, "Valid Excel file"

    def read_sheet(self, file_path: Union[str, Path]) -> SheetData:
        """
        Load headers and rows.

        Raises:
            ImportAbortedError: file missing, unreadable or without data rows
        """
        is_valid, message = self.validate_file_format(file_path)
        if not is_valid:
            raise ImportAbortedError(message, stage=ImportStage.READ_SOURCE)

        try:
            df = pd.read_excel(
                file_path,
                sheet_name=self.sheet_name,
                header=self.header_row,
                dtype=object,
                engine="openpyxl",
            )
        except Exception as e:
            logger.error(f"Error reading Excel file {file_path}: {str(e)}")
            raise ImportAbortedError(
                f"Failed to read Excel file: {str(e)}", stage=ImportStage.READ_SOURCE
            ) from e

        df = df.dropna(how="all")
        if df.empty:
            raise ImportAbortedError(
                f"No data rows found in {file_path}", stage=ImportStage.READ_SOURCE
            )

        headers = [str(column) for column in df.columns]
        df.columns = headers
        df = df.astype(object).where(pd.notna(df), None)

        sheet = SheetData(
            name=str(self.sheet_name),
            headers=headers,
            rows=df.to_dict(orient="records"),
        )
        logger.info(f"Read {len(sheet)} rows and {len(headers)} columns from {file_path}")
        return sheet
