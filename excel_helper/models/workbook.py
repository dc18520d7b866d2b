"""
In-memory workbook value model.

A Workbook is an ordered list of uniquely named Sheets. A Sheet is a sparse
grid of Cells bounded by a declared occupied rectangle. Cells hold a scalar
value tagged with a CellValueType; classification always works on the
canonical textual rendering produced by ``render_value``.
"""

import copy
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Any

from excel_helper.models.excel_models import CellRange, CellValueType, SpreadsheetFormat

CellScalar = str | int | float | bool | datetime | date | time | timedelta | None


def infer_value_type(value: Any) -> CellValueType:
    """Map a Python scalar onto a CellValueType."""
    if value is None:
        return CellValueType.EMPTY
    if isinstance(value, bool):
        return CellValueType.BOOLEAN
    if isinstance(value, (int, float, datetime, date, time, timedelta)):
        return CellValueType.NUMBER
    return CellValueType.TEXT


def render_value(value: Any) -> str:
    """
    Return the canonical textual rendering of a cell value.

    Integral floats render without a fractional part so that a numeric 100
    read back as 100.0 still renders as "100". Strings are returned as-is,
    surrounding whitespace included.

    Args:
        value: Any scalar cell value.

    Returns:
        The textual form used for classification and text export.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return str(value)


@dataclass
class Cell:
    """
    A single populated position in a sheet.

    Attributes:
        value: The scalar value.
        value_type: Kind of the value; TEXT cells are never re-interpreted.
        alignment: Optional horizontal alignment applied on export.
    """

    value: CellScalar
    value_type: CellValueType
    alignment: str | None = None

    @classmethod
    def from_value(cls, value: Any) -> "Cell":
        return cls(value=value, value_type=infer_value_type(value))

    @classmethod
    def text(cls, value: str, alignment: str | None = None) -> "Cell":
        return cls(value=value, value_type=CellValueType.TEXT, alignment=alignment)

    @property
    def is_populated(self) -> bool:
        return self.value_type is not CellValueType.EMPTY

    @property
    def rendered(self) -> str:
        """Canonical textual rendering of the value."""
        return render_value(self.value)


@dataclass
class Sheet:
    """
    A sparse grid of cells.

    Attributes:
        name: Sheet name, unique within its workbook.
        cells: Populated cells keyed by (row, col), both 0-based.
        dimensions: Declared occupied rectangle, or None if never declared.
    """

    name: str
    cells: dict[tuple[int, int], Cell] = field(default_factory=dict)
    dimensions: CellRange | None = None

    @property
    def occupied_range(self) -> CellRange:
        """The declared rectangle, defaulting to the single cell A1."""
        return self.dimensions or CellRange.single()

    def get_cell(self, row: int, col: int) -> Cell | None:
        return self.cells.get((row, col))

    def populated_cells(self) -> Iterator[tuple[int, int, Cell]]:
        """Yield populated cells inside the occupied rectangle, row-major."""
        bounds = self.occupied_range
        for (row, col), cell in sorted(self.cells.items()):
            if cell.is_populated and bounds.contains(row, col):
                yield row, col, cell

    def set_cell(self, row: int, col: int, value: Any) -> Cell | None:
        """
        Store a value at (row, col), growing the declared rectangle.

        Passing a Cell stores it as-is; any other value is wrapped with
        ``Cell.from_value``. Passing None removes the cell.

        Returns:
            The stored Cell, or None when the position was cleared.
        """
        if value is None:
            self.cells.pop((row, col), None)
            return None

        cell = value if isinstance(value, Cell) else Cell.from_value(value)
        self.cells[(row, col)] = cell

        if self.dimensions is None:
            self.dimensions = CellRange.single(row, col)
        elif not self.dimensions.contains(row, col):
            self.dimensions = self.dimensions.expanded_to(row, col)
        return cell

    @classmethod
    def from_rows(cls, name: str, rows: list[list[Any]]) -> "Sheet":
        """Build a sheet from a list of rows; None and "" entries are absent."""
        sheet = cls(name=name)
        for row_idx, row in enumerate(rows):
            for col_idx, value in enumerate(row):
                if value is None or value == "":
                    continue
                sheet.set_cell(row_idx, col_idx, value)
        return sheet


@dataclass
class Workbook:
    """
    An ordered collection of uniquely named sheets.

    Attributes:
        sheets: Sheets in workbook order.
        source_format: Format the workbook was parsed from, if any.
    """

    sheets: list[Sheet] = field(default_factory=list)
    source_format: SpreadsheetFormat | None = None

    @property
    def sheet_names(self) -> list[str]:
        return [sheet.name for sheet in self.sheets]

    def get_sheet(self, name: str) -> Sheet:
        for sheet in self.sheets:
            if sheet.name == name:
                return sheet
        raise KeyError(name)

    def add_sheet(self, sheet: Sheet | str) -> Sheet:
        """Append a sheet (or a new empty sheet with the given name)."""
        if isinstance(sheet, str):
            sheet = Sheet(name=sheet)
        if sheet.name in self.sheet_names:
            raise ValueError(f"Duplicate sheet name: {sheet.name}")
        self.sheets.append(sheet)
        return sheet

    def copy(self) -> "Workbook":
        return copy.deepcopy(self)
