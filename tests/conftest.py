"""
Test fixtures and utilities for the conversion tests.

This module provides shared fixtures including temporary files,
in-memory workbooks, spreadsheet bytes, and service instances.
"""

import io
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest
import xlsxwriter

from excel_helper.adapters.calamine_adapter import CalamineAdapter
from excel_helper.adapters.csv_adapter import CsvAdapter
from excel_helper.adapters.openpyxl_adapter import OpenpyxlAdapter
from excel_helper.adapters.xlsxwriter_adapter import XlsxWriterAdapter
from excel_helper.config import Settings
from excel_helper.models.excel_models import SpreadsheetFormat
from excel_helper.models.workbook import Sheet, Workbook
from excel_helper.services.excel_service import ConversionService

XlsxBuilder = Callable[[dict[str, list[list[Any]]]], bytes]


@pytest.fixture
def test_settings() -> Settings:
    """
    Create Settings isolated from the environment and any .env file.

    Returns:
        Settings instance with defaults.
    """
    return Settings(_env_file=None)


@pytest.fixture
def conversion_service(test_settings: Settings) -> ConversionService:
    """
    Create a ConversionService instance for testing.

    Returns:
        ConversionService instance.
    """
    return ConversionService(settings=test_settings)


@pytest.fixture
def calamine_adapter() -> CalamineAdapter:
    """
    Create a CalamineAdapter instance for testing.

    Returns:
        CalamineAdapter instance.
    """
    return CalamineAdapter()


@pytest.fixture
def csv_adapter() -> CsvAdapter:
    """
    Create a CsvAdapter instance for testing.

    Returns:
        CsvAdapter instance.
    """
    return CsvAdapter()


@pytest.fixture
def xlsxwriter_adapter() -> XlsxWriterAdapter:
    """
    Create an XlsxWriterAdapter instance for testing.

    Returns:
        XlsxWriterAdapter instance.
    """
    return XlsxWriterAdapter()


@pytest.fixture
def openpyxl_adapter() -> OpenpyxlAdapter:
    """
    Create an OpenpyxlAdapter instance for testing.

    Returns:
        OpenpyxlAdapter instance.
    """
    return OpenpyxlAdapter()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """
    Create a temporary directory for test files.

    Yields:
        Path to the temporary directory.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def xlsx_builder() -> XlsxBuilder:
    """
    Return a function that builds .xlsx bytes from {sheet name: rows}.

    Strings are written as strings, so "11,2" is stored as text exactly as
    a spreadsheet application would store a comma decimal it did not parse.
    None entries are left empty.
    """

    def build(sheets: dict[str, list[list[Any]]]) -> bytes:
        output = io.BytesIO()
        workbook = xlsxwriter.Workbook(output, {"in_memory": True})
        for name, rows in sheets.items():
            worksheet = workbook.add_worksheet(name)
            for row_idx, row in enumerate(rows):
                for col_idx, value in enumerate(row):
                    if value is None:
                        continue
                    if isinstance(value, str):
                        worksheet.write_string(row_idx, col_idx, value)
                    else:
                        worksheet.write(row_idx, col_idx, value)
        workbook.close()
        return output.getvalue()

    return build


@pytest.fixture
def sample_rows() -> list[list[Any]]:
    """
    Rows of the reference scenario: two comma decimals and one integer.

    Returns:
        Single-column rows A1:A3.
    """
    return [["11,2"], ["100"], ["-3,5"]]


@pytest.fixture
def sample_workbook(sample_rows: list[list[Any]]) -> Workbook:
    """
    Create an in-memory workbook holding the reference scenario.

    Returns:
        Workbook with one sheet named "Sheet1".
    """
    workbook = Workbook(source_format=SpreadsheetFormat.XLSX)
    workbook.add_sheet(Sheet.from_rows("Sheet1", sample_rows))
    return workbook


@pytest.fixture
def sample_xlsx_bytes(xlsx_builder: XlsxBuilder) -> bytes:
    """
    Create .xlsx bytes with two sheets of mixed content.

    "Prices" holds two comma decimals, one dot decimal, one number and a
    header; "Notes" holds one comma decimal and text.
    """
    return xlsx_builder(
        {
            "Prices": [
                ["Item", "Price", "Qty"],
                ["Apple", "11,2", 5],
                ["Pear", "-3,75", 2.5],
                ["Plum", "4.5", None],
            ],
            "Notes": [
                ["1,5", "see 1,5 above"],
            ],
        }
    )


@pytest.fixture
def sample_excel_file(temp_dir: Path, sample_xlsx_bytes: bytes) -> Path:
    """
    Write the sample workbook to disk.

    Returns:
        Path to "prices.xlsx" in the temporary directory.
    """
    file_path = temp_dir / "prices.xlsx"
    file_path.write_bytes(sample_xlsx_bytes)
    return file_path


@pytest.fixture
def sample_csv_bytes() -> bytes:
    """Semicolon-delimited text with comma decimals."""
    return "name;value\nfoo;11,2\nbar;7\nbaz;-0,5\n".encode("utf-8")


@pytest.fixture
def sample_csv_file(temp_dir: Path, sample_csv_bytes: bytes) -> Path:
    """
    Write the sample CSV to disk.

    Returns:
        Path to "values.csv" in the temporary directory.
    """
    file_path = temp_dir / "values.csv"
    file_path.write_bytes(sample_csv_bytes)
    return file_path
