"""
Openpyxl adapter for Excel writing.

This module provides the OpenpyxlAdapter class that wraps openpyxl for
serializing a Workbook to .xlsx bytes. openpyxl is a pure Python library;
it is the alternative export engine, selected with
``EXCEL_HELPER_EXPORT_ENGINE=openpyxl``.

Use cases where openpyxl is preferred:
    - When XlsxWriter is not available on the target platform
    - When the output is post-processed with openpyxl anyway

Example:
    adapter = OpenpyxlAdapter()
    content = adapter.write_workbook(workbook)
"""

import io
from datetime import date, datetime, time, timedelta

from openpyxl import Workbook as OpenpyxlWorkbook
from openpyxl.cell.cell import Cell as OpenpyxlCell
from openpyxl.styles import Alignment

from excel_helper.exceptions.excel_exceptions import ExportError
from excel_helper.models.excel_models import (
    MAX_COLUMNS,
    MAX_ROWS,
    MAX_STRING_LENGTH,
    CellValueType,
    column_index_to_letter,
)
from excel_helper.models.workbook import Cell, Workbook


class OpenpyxlAdapter:
    """
    Adapter for openpyxl writing operations.

    Attributes:
        DATETIME_FORMAT: Number format used for temporal values.

    Example:
        adapter = OpenpyxlAdapter()
        Path("out.xlsx").write_bytes(adapter.write_workbook(workbook))
    """

    DATETIME_FORMAT = "yyyy-mm-dd hh:mm:ss"

    def _write_cell(self, target: OpenpyxlCell, cell: Cell) -> None:
        """
        Copy a value model cell onto an openpyxl cell.

        Text is stored with data type "s" so that strings starting with
        "=" are not turned into formulas.

        Args:
            target: The openpyxl cell to fill.
            cell: Source cell.
        """
        value = cell.value

        if cell.value_type is CellValueType.TEXT:
            target.value = cell.rendered
            target.data_type = "s"
        elif cell.value_type is CellValueType.BOOLEAN:
            target.value = bool(value)
        elif isinstance(value, (datetime, date, time, timedelta)):
            target.value = value
            target.number_format = self.DATETIME_FORMAT
        elif isinstance(value, (int, float)):
            target.value = value
        else:
            target.value = cell.rendered
            target.data_type = "s"

        if cell.alignment:
            target.alignment = Alignment(horizontal=cell.alignment)

    def _check_limits(self, sheet_name: str, row: int, col: int, cell: Cell) -> None:
        """
        Reject cells openpyxl would write but Excel cannot open.

        Raises:
            ExportError: If the position or the text length exceeds the
                worksheet limits.
        """
        ref = f"{sheet_name}!{column_index_to_letter(col)}{row + 1}"
        if row >= MAX_ROWS or col >= MAX_COLUMNS:
            raise ExportError(
                operation="serialize",
                reason=(
                    f"Cell {ref} is outside the worksheet limits "
                    f"({MAX_ROWS} rows, {MAX_COLUMNS} columns)"
                ),
            )
        if cell.value_type is CellValueType.TEXT and len(cell.rendered) > MAX_STRING_LENGTH:
            raise ExportError(
                operation="serialize",
                reason=f"Text in cell {ref} exceeds {MAX_STRING_LENGTH} characters",
            )

    def write_workbook(self, workbook: Workbook) -> bytes:
        """
        Serialize a workbook to .xlsx bytes.

        Args:
            workbook: The workbook to write.

        Returns:
            The complete .xlsx file content.

        Raises:
            ExportError: If openpyxl rejects a sheet name or value, or
                fails to save.
        """
        output = io.BytesIO()

        try:
            target_workbook = OpenpyxlWorkbook()
            target_workbook.remove(target_workbook.active)

            for sheet in workbook.sheets:
                worksheet = target_workbook.create_sheet(title=sheet.name)
                for row, col, cell in sheet.populated_cells():
                    self._check_limits(sheet.name, row, col, cell)
                    self._write_cell(worksheet.cell(row=row + 1, column=col + 1), cell)

            if not target_workbook.worksheets:
                target_workbook.create_sheet(title="Sheet1")

            target_workbook.save(output)
        except ExportError:
            raise
        except Exception as e:
            raise ExportError(operation="serialize", cause=e) from e

        return output.getvalue()
