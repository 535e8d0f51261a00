from .excel_processor import ExcelProcessor, SheetData

__all__ = ["ExcelProcessor", "SheetData"]
