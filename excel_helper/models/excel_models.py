"""
Pydantic models for the Excel helper.

This module contains the enums shared by the value model and all data
models used for response validation and serialization in the FastAPI,
MCP and CLI interfaces.

All models use Pydantic v2 for validation, serialization, and
JSON Schema generation for OpenAPI documentation.
"""

from enum import Enum

from pydantic import BaseModel, Field, field_validator


class CellValueType(str, Enum):
    """
    Enumeration of cell value types.

    Every reader maps its native values onto these four kinds; temporal
    values are NUMBER because spreadsheets store them as serial numbers.
    """

    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"
    EMPTY = "empty"


class SpreadsheetFormat(str, Enum):
    """Container formats accepted as input."""

    XLSX = "xlsx"
    XLS = "xls"
    CSV = "csv"


EXTENSION_TO_FORMAT: dict[str, SpreadsheetFormat] = {
    ".xlsx": SpreadsheetFormat.XLSX,
    ".xls": SpreadsheetFormat.XLS,
    ".csv": SpreadsheetFormat.CSV,
}

SUPPORTED_EXTENSIONS = tuple(EXTENSION_TO_FORMAT)

# Worksheet limits of the .xlsx format
MAX_ROWS = 1_048_576
MAX_COLUMNS = 16_384
MAX_STRING_LENGTH = 32_767


def column_index_to_letter(index: int) -> str:
    """
    Convert a 0-based column index to Excel column letters.

    Args:
        index: 0-based column index.

    Returns:
        Column letters like "A", "Z", "AA".
    """
    letters = ""
    index += 1
    while index > 0:
        index, remainder = divmod(index - 1, 26)
        letters = chr(ord("A") + remainder) + letters
    return letters


class CellRange(BaseModel):
    """
    Represents an inclusive rectangular cell range.

    A sheet's occupied rectangle is stored as a CellRange. All indices are
    0-based and both ends are inclusive.

    Attributes:
        start_row: Starting row index (0-based).
        end_row: Ending row index (0-based, inclusive).
        start_col: Starting column index (0-based).
        end_col: Ending column index (0-based, inclusive).
    """

    start_row: int = Field(
        ge=0,
        description="Starting row index (0-based)",
    )
    end_row: int = Field(
        ge=0,
        description="Ending row index (0-based, inclusive)",
    )
    start_col: int = Field(
        ge=0,
        description="Starting column index (0-based)",
    )
    end_col: int = Field(
        ge=0,
        description="Ending column index (0-based, inclusive)",
    )

    @field_validator("end_row")
    @classmethod
    def validate_end_row(cls, v: int, info) -> int:
        """Ensure end_row is greater than or equal to start_row."""
        if "start_row" in info.data and v < info.data["start_row"]:
            raise ValueError("end_row must be >= start_row")
        return v

    @field_validator("end_col")
    @classmethod
    def validate_end_col(cls, v: int, info) -> int:
        """Ensure end_col is greater than or equal to start_col."""
        if "start_col" in info.data and v < info.data["start_col"]:
            raise ValueError("end_col must be >= start_col")
        return v

    @classmethod
    def single(cls, row: int = 0, col: int = 0) -> "CellRange":
        """Build the one-cell range at (row, col)."""
        return cls(start_row=row, end_row=row, start_col=col, end_col=col)

    @property
    def row_count(self) -> int:
        return self.end_row - self.start_row + 1

    @property
    def column_count(self) -> int:
        return self.end_col - self.start_col + 1

    @property
    def area(self) -> int:
        """Number of (row, column) positions in the range."""
        return self.row_count * self.column_count

    def contains(self, row: int, col: int) -> bool:
        return self.start_row <= row <= self.end_row and self.start_col <= col <= self.end_col

    def expanded_to(self, row: int, col: int) -> "CellRange":
        """Return the smallest range covering this range and (row, col)."""
        return CellRange(
            start_row=min(self.start_row, row),
            end_row=max(self.end_row, row),
            start_col=min(self.start_col, col),
            end_col=max(self.end_col, col),
        )

    def to_a1(self) -> str:
        """Render the range in A1 notation, e.g. "A1:C10" or "B2"."""
        start = f"{column_index_to_letter(self.start_col)}{self.start_row + 1}"
        if self.area == 1:
            return start
        end = f"{column_index_to_letter(self.end_col)}{self.end_row + 1}"
        return f"{start}:{end}"


class SheetInfo(BaseModel):
    """
    Metadata about a single worksheet.

    Attributes:
        name: The name of the sheet.
        index: The 0-based index of the sheet in the workbook.
        dimensions: Occupied rectangle in A1 notation.
        row_count: Number of rows in the occupied rectangle.
        column_count: Number of columns in the occupied rectangle.
        cell_count: Number of populated cells.
        cells_to_convert: Number of comma-decimal cells in the sheet.
    """

    name: str = Field(
        description="The name of the sheet",
    )
    index: int = Field(
        ge=0,
        description="The 0-based index of the sheet in the workbook",
    )
    dimensions: str = Field(
        default="A1",
        description="Occupied rectangle in A1 notation",
    )
    row_count: int = Field(
        default=0,
        ge=0,
        description="Number of rows in the occupied rectangle",
    )
    column_count: int = Field(
        default=0,
        ge=0,
        description="Number of columns in the occupied rectangle",
    )
    cell_count: int = Field(
        default=0,
        ge=0,
        description="Number of populated cells",
    )
    cells_to_convert: int = Field(
        default=0,
        ge=0,
        description="Number of comma-decimal cells in the sheet",
    )


class WorkbookInfo(BaseModel):
    """
    Metadata about a loaded workbook.

    Attributes:
        file_name: Name of the source file.
        source_format: Format the input was parsed as.
        file_size_bytes: Size of the input in bytes.
        sheet_count: Number of sheets in the workbook.
        sheets: List of sheet metadata.
        cells_to_convert: Total comma-decimal cells across all sheets.
    """

    file_name: str | None = Field(
        default=None,
        description="Name of the source file",
    )
    source_format: SpreadsheetFormat | None = Field(
        default=None,
        description="Format the input was parsed as",
    )
    file_size_bytes: int | None = Field(
        default=None,
        ge=0,
        description="Size of the input in bytes",
    )
    sheet_count: int = Field(
        ge=0,
        description="Number of sheets in the workbook",
    )
    sheets: list[SheetInfo] = Field(
        default_factory=list,
        description="List of sheet metadata",
    )
    cells_to_convert: int = Field(
        default=0,
        ge=0,
        description="Total comma-decimal cells across all sheets",
    )


class AnalyzeResponse(BaseModel):
    """
    Response model for loading a file and counting convertible cells.

    Attributes:
        success: Whether the load was successful.
        workbook_info: Metadata about the workbook.
        cells_to_convert: Number of cells that an export would convert.
        processing_time_ms: Time taken to process the request in milliseconds.
        message: Human-readable status line.
    """

    success: bool = Field(
        default=True,
        description="Whether the load was successful",
    )
    workbook_info: WorkbookInfo = Field(
        description="Metadata about the workbook",
    )
    cells_to_convert: int = Field(
        ge=0,
        description="Number of cells that an export would convert",
    )
    processing_time_ms: float | None = Field(
        default=None,
        ge=0,
        description="Time taken to process the request in milliseconds",
    )
    message: str | None = Field(
        default=None,
        description="Human-readable status line",
    )


class ConvertResponse(BaseModel):
    """
    Response model for a conversion written to disk.

    Attributes:
        success: Whether the conversion was successful.
        source_file: Path or name of the input file.
        output_file: Path of the written .xlsx file.
        converted_count: Number of cells rewritten from comma to dot form.
        file_size_bytes: Size of the written file in bytes.
        processing_time_ms: Time taken to process the request in milliseconds.
        message: Human-readable status line.
    """

    success: bool = Field(
        default=True,
        description="Whether the conversion was successful",
    )
    source_file: str = Field(
        description="Path or name of the input file",
    )
    output_file: str = Field(
        description="Path of the written .xlsx file",
    )
    converted_count: int = Field(
        ge=0,
        description="Number of cells rewritten from comma to dot form",
    )
    file_size_bytes: int | None = Field(
        default=None,
        ge=0,
        description="Size of the written file in bytes",
    )
    processing_time_ms: float | None = Field(
        default=None,
        ge=0,
        description="Time taken to process the request in milliseconds",
    )
    message: str | None = Field(
        default=None,
        description="Human-readable status line",
    )


class ExcelErrorResponse(BaseModel):
    """
    Standard error response model for the API.

    Attributes:
        success: Always False for error responses.
        error_code: Machine-readable error code.
        message: Human-readable error description.
        details: Additional error context.
    """

    success: bool = Field(
        default=False,
        description="Always False for error responses",
    )
    error_code: str = Field(
        description="Machine-readable error code",
    )
    message: str = Field(
        description="Human-readable error description",
    )
    details: dict | None = Field(
        default=None,
        description="Additional error context",
    )
