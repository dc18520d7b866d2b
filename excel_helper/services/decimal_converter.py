"""
Comma-decimal detection and conversion.

This module holds the conversion core: a predicate that recognizes numbers
written with a decimal comma ("11,2", "-3,5"), a scanner over a sheet's
occupied rectangle, a read-only counter, and the conversion pass that
produces a dot-decimal copy of a workbook.

Example:
    count = count_convertible(workbook)
    converted, converted_count = convert_workbook(workbook)
"""

import re
from collections.abc import Callable, Iterator
from typing import Any

from excel_helper.models.excel_models import CellValueType
from excel_helper.models.workbook import Cell, Sheet, Workbook, render_value

# Optional minus, digits, exactly one comma, digits. ASCII digits only.
COMMA_DECIMAL_PATTERN = re.compile(r"-?[0-9]+,[0-9]+", re.ASCII)

EXPORT_ALIGNMENT = "right"

CellVisitor = Callable[[int, int, Cell | None], None]


def is_comma_decimal(value: Any) -> bool:
    """
    Check whether a value is a number written with a decimal comma.

    The value is rendered to text and stripped of surrounding whitespace;
    the remainder must be exactly an optional minus sign, one or more
    digits, a single comma and one or more digits.

    Args:
        value: Any cell value.

    Returns:
        True if the value qualifies for conversion.
    """
    text = render_value(value).strip()
    if not text:
        return False
    return COMMA_DECIMAL_PATTERN.fullmatch(text) is not None


def to_dot_decimal(text: str) -> str:
    """Replace the first comma in ``text`` with a dot."""
    return text.replace(",", ".", 1)


def iter_positions(sheet: Sheet) -> Iterator[tuple[int, int, Cell | None]]:
    """
    Yield every position of the sheet's occupied rectangle in row-major order.

    Positions without a populated cell are yielded with ``None``.

    Args:
        sheet: The sheet to scan.

    Yields:
        Tuples of (row, col, cell or None).
    """
    bounds = sheet.occupied_range
    for row in range(bounds.start_row, bounds.end_row + 1):
        for col in range(bounds.start_col, bounds.end_col + 1):
            cell = sheet.get_cell(row, col)
            if cell is not None and not cell.is_populated:
                cell = None
            yield row, col, cell


def iter_populated_cells(sheet: Sheet) -> Iterator[tuple[int, int, Cell]]:
    """Yield (row, col, cell) for the populated cells inside the occupied rectangle."""
    for row, col, cell in iter_positions(sheet):
        if cell is not None:
            yield row, col, cell


def for_each_cell(sheet: Sheet, visit: CellVisitor) -> None:
    """
    Call ``visit(row, col, cell)`` once per position of the occupied rectangle.

    Absent positions are visited with ``cell=None``, so the number of calls
    always equals the area of the rectangle.
    """
    for row, col, cell in iter_positions(sheet):
        visit(row, col, cell)


def count_convertible(workbook: Workbook) -> int:
    """
    Count the cells an export would convert, across all sheets.

    Read-only: the workbook is not modified.

    Args:
        workbook: The workbook to inspect.

    Returns:
        Number of comma-decimal cells.
    """
    return sum(count_sheet_convertible(sheet) for sheet in workbook.sheets)


def count_sheet_convertible(sheet: Sheet) -> int:
    return sum(1 for _, _, cell in iter_populated_cells(sheet) if is_comma_decimal(cell.value))


def convert_sheet(sheet: Sheet, text_only: bool = True) -> int:
    """
    Rewrite comma decimals in a sheet in place.

    Matching cells get the dot form as TEXT. With ``text_only`` every other
    populated cell is normalized to its textual rendering as well. Every
    populated cell is right-aligned.

    Args:
        sheet: The sheet to modify.
        text_only: Whether to retype non-matching cells to TEXT.

    Returns:
        Number of converted cells.
    """
    converted = 0
    for _, _, cell in iter_populated_cells(sheet):
        text = cell.rendered
        if is_comma_decimal(text):
            cell.value = to_dot_decimal(text)
            cell.value_type = CellValueType.TEXT
            converted += 1
        elif text_only and cell.value_type is not CellValueType.TEXT:
            cell.value = text
            cell.value_type = CellValueType.TEXT
        cell.alignment = EXPORT_ALIGNMENT
    return converted


def convert_workbook(workbook: Workbook, text_only: bool = True) -> tuple[Workbook, int]:
    """
    Produce a converted copy of a workbook.

    The input workbook is left untouched so that a failed export can be
    retried from the original state.

    Args:
        workbook: The source workbook.
        text_only: Whether every exported cell is stored as text.

    Returns:
        Tuple of (converted workbook, number of converted cells).
    """
    converted = workbook.copy()
    count = sum(convert_sheet(sheet, text_only=text_only) for sheet in converted.sheets)
    return converted, count
