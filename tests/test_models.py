"""
Tests for the workbook value model and the API models.
"""

from datetime import date, datetime, time

import pytest
from pydantic import ValidationError

from excel_helper.models.excel_models import (
    CellRange,
    CellValueType,
    column_index_to_letter,
)
from excel_helper.models.session import ConversionSession, SessionState
from excel_helper.models.workbook import Cell, Sheet, Workbook, infer_value_type, render_value


class TestRenderValue:
    """Tests for the canonical textual rendering."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, ""),
            ("11,2", "11,2"),
            (" padded ", " padded "),
            (100, "100"),
            (100.0, "100"),
            (-3.0, "-3"),
            (2.5, "2.5"),
            (True, "true"),
            (False, "false"),
            (date(2024, 3, 1), "2024-03-01"),
            (datetime(2024, 3, 1, 12, 30), "2024-03-01T12:30:00"),
            (time(8, 15), "08:15:00"),
        ],
    )
    def test_render(self, value: object, expected: str) -> None:
        """Test the rendering of each scalar kind."""
        assert render_value(value) == expected

    def test_infer_value_type(self) -> None:
        """Test the mapping from Python scalars to value types."""
        assert infer_value_type(None) is CellValueType.EMPTY
        assert infer_value_type(True) is CellValueType.BOOLEAN
        assert infer_value_type(3) is CellValueType.NUMBER
        assert infer_value_type(date(2024, 1, 1)) is CellValueType.NUMBER
        assert infer_value_type("x") is CellValueType.TEXT


class TestCellRange:
    """Tests for CellRange."""

    def test_single_cell(self) -> None:
        """Test the default single-cell range."""
        cell_range = CellRange.single()

        assert cell_range.area == 1
        assert cell_range.to_a1() == "A1"

    def test_to_a1(self) -> None:
        """Test A1 rendering of a multi-cell range."""
        cell_range = CellRange(start_row=1, end_row=9, start_col=0, end_col=27)

        assert cell_range.to_a1() == "A2:AB10"
        assert cell_range.row_count == 9
        assert cell_range.column_count == 28

    def test_end_before_start_rejected(self) -> None:
        """Test that an inverted range is invalid."""
        with pytest.raises(ValidationError):
            CellRange(start_row=5, end_row=1, start_col=0, end_col=0)

    def test_expanded_to(self) -> None:
        """Test growing a range to include a new position."""
        expanded = CellRange.single(2, 2).expanded_to(0, 4)

        assert (expanded.start_row, expanded.end_row) == (0, 2)
        assert (expanded.start_col, expanded.end_col) == (2, 4)

    @pytest.mark.parametrize(
        ("index", "letters"),
        [(0, "A"), (25, "Z"), (26, "AA"), (701, "ZZ"), (702, "AAA")],
    )
    def test_column_letters(self, index: int, letters: str) -> None:
        """Test column index to letter conversion."""
        assert column_index_to_letter(index) == letters


class TestSheetAndWorkbook:
    """Tests for Sheet and Workbook."""

    def test_set_cell_grows_dimensions(self) -> None:
        """Test that storing a value grows the occupied rectangle."""
        sheet = Sheet(name="Data")
        sheet.set_cell(1, 1, "a")
        sheet.set_cell(3, 0, "b")

        assert sheet.occupied_range.to_a1() == "A2:B4"

    def test_set_cell_none_removes(self) -> None:
        """Test that storing None clears the position."""
        sheet = Sheet.from_rows("Data", [["a", "b"]])

        assert sheet.set_cell(0, 0, None) is None
        assert sheet.get_cell(0, 0) is None

    def test_from_rows_skips_blanks(self) -> None:
        """Test that None and empty strings are not stored."""
        sheet = Sheet.from_rows("Data", [["a", None, ""], [None, 1]])

        assert sorted(sheet.cells) == [(0, 0), (1, 1)]

    def test_duplicate_sheet_name_rejected(self) -> None:
        """Test that sheet names are unique within a workbook."""
        workbook = Workbook()
        workbook.add_sheet("Data")

        with pytest.raises(ValueError):
            workbook.add_sheet("Data")

    def test_get_missing_sheet(self) -> None:
        """Test that a missing sheet raises KeyError."""
        with pytest.raises(KeyError):
            Workbook().get_sheet("Nope")

    def test_copy_is_deep(self) -> None:
        """Test that copies do not share cells."""
        workbook = Workbook()
        workbook.add_sheet(Sheet.from_rows("Data", [["1,5"]]))

        copy = workbook.copy()
        copy.get_sheet("Data").get_cell(0, 0).value = "changed"

        assert workbook.get_sheet("Data").get_cell(0, 0).value == "1,5"

    def test_text_cell(self) -> None:
        """Test the TEXT constructor."""
        cell = Cell.text("100", alignment="right")

        assert cell.value_type is CellValueType.TEXT
        assert cell.rendered == "100"


class TestConversionSession:
    """Tests for the session object."""

    def test_new_session_is_unloaded(self) -> None:
        """Test the initial session state."""
        session = ConversionSession()

        assert session.state is SessionState.UNLOADED
        assert session.is_loaded is False
        assert session.cells_to_convert == 0
