"""
Custom exceptions for the Excel helper.

Provides type-safe, descriptive exceptions for error handling throughout
the application.
"""

from excel_helper.exceptions.excel_exceptions import (
    ExcelServiceError,
    ExportError,
    FileTooLargeError,
    ParseError,
    UnsupportedFormatError,
    WorkbookNotLoadedError,
)
from excel_helper.exceptions.excel_exceptions import (
    FileNotFoundError as ExcelFileNotFoundError,
)

__all__ = [
    "ExcelServiceError",
    "ExcelFileNotFoundError",
    "UnsupportedFormatError",
    "ParseError",
    "ExportError",
    "FileTooLargeError",
    "WorkbookNotLoadedError",
]
