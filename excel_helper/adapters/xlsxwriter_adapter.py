"""
XlsxWriter adapter for high-performance Excel writing.

This module provides the XlsxWriterAdapter class that wraps XlsxWriter for
serializing a Workbook to .xlsx bytes in memory. It is the default export
engine.

Features:
    - In-memory output, nothing touches the disk
    - Sheet names and order preserved
    - Text cells always written as strings, never as formulas
    - Per-cell horizontal alignment

Example:
    adapter = XlsxWriterAdapter()
    content = adapter.write_workbook(workbook)
"""

import io
from datetime import date, datetime, time, timedelta

import xlsxwriter
from xlsxwriter.format import Format
from xlsxwriter.worksheet import Worksheet

from excel_helper.exceptions.excel_exceptions import ExportError
from excel_helper.models.excel_models import (
    MAX_COLUMNS,
    MAX_ROWS,
    MAX_STRING_LENGTH,
    CellValueType,
    column_index_to_letter,
)
from excel_helper.models.workbook import Cell, Workbook
from excel_helper.utils.logging import get_logger

logger = get_logger(__name__)

# Negative return codes of the XlsxWriter write_* methods
STATUS_OUT_OF_RANGE = -1
STATUS_STRING_TRUNCATED = -2


class XlsxWriterAdapter:
    """
    Adapter for XlsxWriter writing operations.

    Attributes:
        DATETIME_FORMAT: Number format used for temporal values.

    Example:
        adapter = XlsxWriterAdapter()
        content = adapter.write_workbook(workbook)
        Path("out.xlsx").write_bytes(content)
    """

    DATETIME_FORMAT = "yyyy-mm-dd hh:mm:ss"

    def __init__(self) -> None:
        """Initialize the XlsxWriterAdapter."""
        self._formats: dict[tuple[str | None, bool], Format] = {}

    def _get_format(
        self,
        writer: xlsxwriter.Workbook,
        alignment: str | None,
        temporal: bool = False,
    ) -> Format | None:
        """Return a cached format for the alignment/temporal combination."""
        if alignment is None and not temporal:
            return None

        key = (alignment, temporal)
        if key not in self._formats:
            properties: dict[str, str] = {}
            if alignment:
                properties["align"] = alignment
            if temporal:
                properties["num_format"] = self.DATETIME_FORMAT
            self._formats[key] = writer.add_format(properties)
        return self._formats[key]

    def _write_cell(
        self,
        writer: xlsxwriter.Workbook,
        worksheet: Worksheet,
        row: int,
        col: int,
        cell: Cell,
    ) -> int:
        """
        Write a cell with type-specific handling.

        Args:
            writer: The workbook being written, for format creation.
            worksheet: The worksheet to write to.
            row: Row index (0-based).
            col: Column index (0-based).
            cell: Cell to write.

        Returns:
            The XlsxWriter status code: 0 on success, -1 when the position
            is outside the worksheet, -2 when a string was truncated.
        """
        value = cell.value

        if cell.value_type is CellValueType.TEXT:
            return worksheet.write_string(
                row, col, cell.rendered, self._get_format(writer, cell.alignment)
            )
        elif cell.value_type is CellValueType.BOOLEAN:
            return worksheet.write_boolean(
                row, col, bool(value), self._get_format(writer, cell.alignment)
            )
        elif isinstance(value, (datetime, date, time, timedelta)):
            return worksheet.write_datetime(
                row, col, value, self._get_format(writer, cell.alignment, temporal=True)
            )
        elif isinstance(value, (int, float)):
            return worksheet.write_number(
                row, col, value, self._get_format(writer, cell.alignment)
            )
        return worksheet.write_string(
            row, col, cell.rendered, self._get_format(writer, cell.alignment)
        )

    def _status_reason(self, status: int, sheet_name: str, row: int, col: int) -> str:
        ref = f"{sheet_name}!{column_index_to_letter(col)}{row + 1}"
        if status == STATUS_OUT_OF_RANGE:
            return (
                f"Cell {ref} is outside the worksheet limits "
                f"({MAX_ROWS} rows, {MAX_COLUMNS} columns)"
            )
        if status == STATUS_STRING_TRUNCATED:
            return f"Text in cell {ref} exceeds {MAX_STRING_LENGTH} characters"
        return f"Cell {ref} could not be written (status {status})"

    def write_workbook(self, workbook: Workbook) -> bytes:
        """
        Serialize a workbook to .xlsx bytes.

        Every write is checked: a cell XlsxWriter would drop or truncate
        fails the whole export instead of producing a partial file.

        Args:
            workbook: The workbook to write.

        Returns:
            The complete .xlsx file content.

        Raises:
            ExportError: If XlsxWriter rejects the workbook, a cell, or
                fails to assemble the file.
        """
        output = io.BytesIO()
        self._formats = {}
        writer = None

        try:
            writer = xlsxwriter.Workbook(output, {"in_memory": True, "remove_timezone": True})
            for sheet in workbook.sheets:
                worksheet = writer.add_worksheet(sheet.name)
                for row, col, cell in sheet.populated_cells():
                    status = self._write_cell(writer, worksheet, row, col, cell)
                    if status < 0:
                        raise ExportError(
                            operation="serialize",
                            reason=self._status_reason(status, sheet.name, row, col),
                        )
            writer.close()
            writer = None
        except ExportError:
            raise
        except Exception as e:
            raise ExportError(operation="serialize", cause=e) from e
        finally:
            self._formats = {}
            if writer is not None:
                try:
                    writer.close()
                except Exception as close_error:
                    logger.debug("Discarding unfinished workbook: %s", close_error)

        return output.getvalue()
