"""
Data models for the Excel helper.

Contains the in-memory workbook value model, the conversion session and
Pydantic models for response validation and serialization.
"""

from excel_helper.models.excel_models import (
    AnalyzeResponse,
    CellRange,
    CellValueType,
    ConvertResponse,
    ExcelErrorResponse,
    SheetInfo,
    SpreadsheetFormat,
    WorkbookInfo,
)
from excel_helper.models.session import (
    OUTPUT_MEDIA_TYPE,
    ConversionSession,
    ExportResult,
    SessionState,
)
from excel_helper.models.workbook import Cell, Sheet, Workbook, render_value

__all__ = [
    "AnalyzeResponse",
    "Cell",
    "CellRange",
    "CellValueType",
    "ConversionSession",
    "ConvertResponse",
    "ExcelErrorResponse",
    "ExportResult",
    "OUTPUT_MEDIA_TYPE",
    "SessionState",
    "Sheet",
    "SheetInfo",
    "SpreadsheetFormat",
    "Workbook",
    "WorkbookInfo",
    "render_value",
]
