"""
Adapters for spreadsheet file operations.

Implements the adapter pattern for different engines:
- CalamineAdapter: High-performance reading of .xlsx/.xls using python-calamine
- CsvAdapter: Raw-text reading of delimited files
- XlsxWriterAdapter: Default in-memory .xlsx writer using XlsxWriter
- OpenpyxlAdapter: Alternative .xlsx writer using openpyxl
"""

from excel_helper.adapters.calamine_adapter import CalamineAdapter
from excel_helper.adapters.csv_adapter import CsvAdapter
from excel_helper.adapters.openpyxl_adapter import OpenpyxlAdapter
from excel_helper.adapters.xlsxwriter_adapter import XlsxWriterAdapter

__all__ = [
    "CalamineAdapter",
    "CsvAdapter",
    "XlsxWriterAdapter",
    "OpenpyxlAdapter",
]
