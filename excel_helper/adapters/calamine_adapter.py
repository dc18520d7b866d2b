"""
Calamine adapter for high-performance spreadsheet reading.

This module provides the CalamineAdapter class that wraps python-calamine
for reading workbooks from raw bytes. python-calamine is a Rust-based
library with very good performance on large files.

Supported formats:
    - .xlsx (Excel 2007+)
    - .xls (Excel 97-2003)

Example:
    adapter = CalamineAdapter()
    workbook = adapter.read_workbook(data, file_name="report.xlsx")
"""

import io
from typing import Any

from python_calamine import CalamineWorkbook

from excel_helper.exceptions.excel_exceptions import ParseError
from excel_helper.models.excel_models import SpreadsheetFormat
from excel_helper.models.workbook import Sheet, Workbook
from excel_helper.utils.logging import get_logger

logger = get_logger(__name__)


class CalamineAdapter:
    """
    Adapter for python-calamine reading operations.

    Reads every sheet of a workbook into the in-memory value model. Sheets
    are read without skipping the empty top-left area, so row and column
    indices are absolute positions in the sheet.

    Attributes:
        SUPPORTED_FORMATS: Formats this adapter can parse.

    Example:
        adapter = CalamineAdapter()
        workbook = adapter.read_workbook(Path("report.xlsx").read_bytes())
        print(workbook.sheet_names)
    """

    SUPPORTED_FORMATS = (SpreadsheetFormat.XLSX, SpreadsheetFormat.XLS)

    def _open_workbook(
        self,
        data: bytes,
        file_name: str | None,
        source_format: SpreadsheetFormat,
    ) -> CalamineWorkbook:
        """
        Open a workbook from bytes using calamine.

        Raises:
            ParseError: If the bytes cannot be parsed.
        """
        try:
            return CalamineWorkbook.from_filelike(io.BytesIO(data))
        except Exception as e:
            raise ParseError(
                file_name=file_name,
                source_format=source_format.value,
                cause=e,
            ) from e

    def _normalize_cell_value(self, value: Any) -> Any:
        """
        Normalize a cell value from calamine to Python types.

        Empty strings denote empty cells and become None; integral floats
        become ints.

        Args:
            value: Raw cell value from calamine.

        Returns:
            Normalized Python value.
        """
        if value is None or value == "":
            return None

        if isinstance(value, float):
            if value.is_integer():
                return int(value)
            return value

        return value

    def _read_sheet(self, workbook: CalamineWorkbook, name: str) -> Sheet:
        raw_rows = workbook.get_sheet_by_name(name).to_python(skip_empty_area=False)

        sheet = Sheet(name=name)
        for row_idx, row in enumerate(raw_rows):
            for col_idx, raw_value in enumerate(row):
                value = self._normalize_cell_value(raw_value)
                if value is not None:
                    sheet.set_cell(row_idx, col_idx, value)
        return sheet

    def read_workbook(
        self,
        data: bytes,
        file_name: str | None = None,
        source_format: SpreadsheetFormat = SpreadsheetFormat.XLSX,
    ) -> Workbook:
        """
        Parse workbook bytes into a Workbook.

        Args:
            data: Raw .xlsx or .xls bytes.
            file_name: Original file name, used in error messages.
            source_format: The format the bytes were detected as.

        Returns:
            Workbook with all sheets in their original order.

        Raises:
            ParseError: If the bytes are not a readable workbook.
        """
        calamine_workbook = self._open_workbook(data, file_name, source_format)
        workbook = Workbook(source_format=source_format)

        try:
            for name in calamine_workbook.sheet_names:
                workbook.add_sheet(self._read_sheet(calamine_workbook, name))
        except Exception as e:
            raise ParseError(
                file_name=file_name,
                source_format=source_format.value,
                cause=e,
            ) from e

        logger.debug(
            "Read %s workbook %s with %d sheet(s)",
            source_format.value,
            file_name or "<bytes>",
            len(workbook.sheets),
        )
        return workbook
