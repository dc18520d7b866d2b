"""
Core conversion service layer.

This module provides the ConversionService class which encapsulates all
conversion operations and serves as the single entry point for the FastAPI,
MCP and CLI interfaces. It implements the Service Layer pattern to keep the
conversion logic separate from the transport layers.

The service coordinates the readers (CalamineAdapter for .xlsx/.xls,
CsvAdapter for delimited text), the conversion core and a writer
(XlsxWriterAdapter or OpenpyxlAdapter).

Example:
    service = ConversionService()
    session = ConversionSession()

    analysis = service.load(session, data, "prices.xlsx")
    print(analysis.message)          # File loaded successfully. To convert: 3 cells

    result = service.export(session)
    Path(result.file_name).write_bytes(result.content)
"""

import os
import re
import tempfile
import time
from pathlib import Path, PurePath

from excel_helper.adapters.calamine_adapter import CalamineAdapter
from excel_helper.adapters.csv_adapter import CsvAdapter
from excel_helper.adapters.openpyxl_adapter import OpenpyxlAdapter
from excel_helper.adapters.xlsxwriter_adapter import XlsxWriterAdapter
from excel_helper.config import Settings
from excel_helper.config import settings as default_settings
from excel_helper.exceptions.excel_exceptions import (
    ExcelServiceError,
    ExportError,
    FileTooLargeError,
    ParseError,
    WorkbookNotLoadedError,
)
from excel_helper.exceptions.excel_exceptions import FileNotFoundError as ExcelFileNotFoundError
from excel_helper.models.excel_models import (
    AnalyzeResponse,
    ConvertResponse,
    SheetInfo,
    SpreadsheetFormat,
    WorkbookInfo,
)
from excel_helper.models.session import ConversionSession, ExportResult, SessionState
from excel_helper.models.workbook import Workbook
from excel_helper.services.decimal_converter import (
    convert_workbook,
    count_convertible,
    count_sheet_convertible,
)
from excel_helper.services.format_detector import detect_format
from excel_helper.utils.logging import get_logger, timed_operation

logger = get_logger(__name__)

DEFAULT_OUTPUT_SUFFIX = "_converted"


def build_output_file_name(file_name: str, suffix: str = DEFAULT_OUTPUT_SUFFIX) -> str:
    """
    Build the suggested name of the converted file.

    The last extension of the base name is stripped and
    ``<suffix>.xlsx`` is appended: "prices.csv" -> "prices_converted.xlsx".

    Args:
        file_name: Original file name or path.
        suffix: Text inserted before the .xlsx extension.

    Returns:
        The output file name (no directory part).
    """
    base_name = re.sub(r"\.[^/.]+$", "", PurePath(file_name).name)
    return f"{base_name}{suffix}.xlsx"


class ConversionService:
    """
    Service layer for comma-decimal conversion.

    Provides one interface for loading a spreadsheet, counting the cells
    that would be converted, and exporting the converted workbook. It is
    consumed by the REST API, the MCP server and the CLI.

    Attributes:
        settings: Settings in effect for this service.
        calamine_adapter: Reader for .xlsx/.xls content.
        csv_adapter: Reader for delimited text.
        write_adapter: Writer producing the .xlsx output.

    Example:
        service = ConversionService()
        workbook = service.load_workbook(data, "prices.csv")
        content, converted = service.convert_and_export(workbook)
    """

    def __init__(
        self,
        settings: Settings | None = None,
        calamine_adapter: CalamineAdapter | None = None,
        csv_adapter: CsvAdapter | None = None,
        write_adapter: XlsxWriterAdapter | OpenpyxlAdapter | None = None,
    ) -> None:
        """
        Initialize the ConversionService.

        Args:
            settings: Optional Settings. If None, uses the module settings.
            calamine_adapter: Optional CalamineAdapter instance.
            csv_adapter: Optional CsvAdapter instance.
            write_adapter: Optional writer. If None, one is created for
                ``settings.export_engine``.
        """
        self.settings = settings or default_settings
        self.calamine_adapter = calamine_adapter or CalamineAdapter()
        self.csv_adapter = csv_adapter or CsvAdapter(
            fallback_encoding=self.settings.csv_fallback_encoding,
        )
        self.write_adapter = write_adapter or self._create_write_adapter(
            self.settings.export_engine,
        )

    @staticmethod
    def _create_write_adapter(engine: str) -> XlsxWriterAdapter | OpenpyxlAdapter:
        if engine == "openpyxl":
            return OpenpyxlAdapter()
        return XlsxWriterAdapter()

    # ------------------------------------------------------------------
    # Core operations
    # ------------------------------------------------------------------

    def load_workbook(self, data: bytes, file_name: str | None = None) -> Workbook:
        """
        Parse raw file bytes into a Workbook.

        Args:
            data: Raw file content.
            file_name: Original file name; its extension is checked.

        Returns:
            The parsed Workbook.

        Raises:
            UnsupportedFormatError: If the extension or content is not supported.
            FileTooLargeError: If the input exceeds the configured limit.
            ParseError: If the content is malformed.
        """
        limit = self.settings.max_file_size_bytes
        if len(data) > limit:
            raise FileTooLargeError(size_bytes=len(data), limit_bytes=limit, file_name=file_name)

        source_format = detect_format(data, file_name)

        with timed_operation(logger, f"Loading {file_name or '<bytes>'}"):
            try:
                if source_format is SpreadsheetFormat.CSV:
                    return self.csv_adapter.read_workbook(data, file_name)
                return self.calamine_adapter.read_workbook(data, file_name, source_format)
            except ExcelServiceError:
                raise
            except Exception as e:
                raise ParseError(
                    file_name=file_name,
                    source_format=source_format.value,
                    cause=e,
                ) from e

    def count_convertible(self, workbook: Workbook) -> int:
        """Count the comma-decimal cells of a workbook without modifying it."""
        return count_convertible(workbook)

    def _convert(self, workbook: Workbook) -> tuple[Workbook, bytes, int]:
        """
        Convert a workbook and serialize the result.

        Returns:
            Tuple of (converted workbook, .xlsx bytes, converted count).

        Raises:
            ExportError: If conversion or serialization fails.
        """
        with timed_operation(logger, "Export"):
            try:
                converted, count = convert_workbook(
                    workbook,
                    text_only=self.settings.text_only_export,
                )
                content = self.write_adapter.write_workbook(converted)
            except ExcelServiceError:
                raise
            except Exception as e:
                raise ExportError(operation="convert", cause=e) from e

        logger.info("Converted %d cell(s)", count)
        return converted, content, count

    def convert_and_export(self, workbook: Workbook) -> tuple[bytes, int]:
        """
        Convert comma decimals and serialize the workbook as .xlsx.

        The given workbook is not modified.

        Args:
            workbook: The loaded workbook.

        Returns:
            Tuple of (.xlsx bytes, number of converted cells).

        Raises:
            ExportError: If serialization fails; no bytes are returned.
        """
        _, content, count = self._convert(workbook)
        return content, count

    def get_workbook_info(
        self,
        workbook: Workbook,
        file_name: str | None = None,
        file_size_bytes: int | None = None,
    ) -> WorkbookInfo:
        """
        Describe a loaded workbook.

        Args:
            workbook: The workbook to describe.
            file_name: Name of the source file.
            file_size_bytes: Size of the source file.

        Returns:
            WorkbookInfo with per-sheet dimensions and counts.
        """
        sheets: list[SheetInfo] = []
        for index, sheet in enumerate(workbook.sheets):
            bounds = sheet.occupied_range
            sheets.append(
                SheetInfo(
                    name=sheet.name,
                    index=index,
                    dimensions=bounds.to_a1(),
                    row_count=bounds.row_count,
                    column_count=bounds.column_count,
                    cell_count=sum(1 for _ in sheet.populated_cells()),
                    cells_to_convert=count_sheet_convertible(sheet),
                )
            )

        return WorkbookInfo(
            file_name=file_name,
            source_format=workbook.source_format,
            file_size_bytes=file_size_bytes,
            sheet_count=len(workbook.sheets),
            sheets=sheets,
            cells_to_convert=sum(sheet.cells_to_convert for sheet in sheets),
        )

    # ------------------------------------------------------------------
    # Session workflow
    # ------------------------------------------------------------------

    def load(
        self,
        session: ConversionSession,
        data: bytes,
        file_name: str | None = None,
    ) -> AnalyzeResponse:
        """
        Load a file into a session and count the cells to convert.

        On failure the session is left exactly as it was.

        Args:
            session: The caller's session.
            data: Raw file content.
            file_name: Original file name.

        Returns:
            AnalyzeResponse with workbook info and the count to convert.

        Raises:
            UnsupportedFormatError: If the extension or content is not supported.
            FileTooLargeError: If the input exceeds the configured limit.
            ParseError: If the content is malformed.
        """
        start_time = time.time()

        workbook = self.load_workbook(data, file_name)
        workbook_info = self.get_workbook_info(workbook, file_name, len(data))
        cells_to_convert = workbook_info.cells_to_convert
        message = f"File loaded successfully. To convert: {cells_to_convert} cells"

        session.state = SessionState.LOADED
        session.file_name = file_name
        session.workbook = workbook
        session.cells_to_convert = cells_to_convert
        session.last_message = message

        processing_time = (time.time() - start_time) * 1000

        return AnalyzeResponse(
            success=True,
            workbook_info=workbook_info,
            cells_to_convert=cells_to_convert,
            processing_time_ms=round(processing_time, 2),
            message=message,
        )

    def export(self, session: ConversionSession) -> ExportResult:
        """
        Convert and serialize the session's workbook.

        On success the converted workbook replaces the loaded one, the
        session becomes EXPORTED and its count to convert drops to 0. On
        failure the session keeps its loaded workbook so the export can be
        retried.

        Args:
            session: The caller's session.

        Returns:
            ExportResult with the .xlsx bytes and suggested file name.

        Raises:
            WorkbookNotLoadedError: If nothing has been loaded.
            ExportError: If serialization fails.
        """
        if not session.is_loaded:
            raise WorkbookNotLoadedError()

        converted, content, count = self._convert(session.workbook)

        message = f"{count} cells converted and saved!"
        session.workbook = converted
        session.state = SessionState.EXPORTED
        session.cells_to_convert = 0
        session.last_message = message

        return ExportResult(
            content=content,
            file_name=build_output_file_name(
                session.file_name or "workbook",
                self.settings.output_suffix,
            ),
            converted_count=count,
        )

    # ------------------------------------------------------------------
    # File path helpers
    # ------------------------------------------------------------------

    def _read_file(self, file_path: str) -> bytes:
        path = Path(file_path)
        if not path.is_file():
            raise ExcelFileNotFoundError(file_path)
        try:
            return path.read_bytes()
        except OSError as e:
            raise ParseError(file_name=path.name, cause=e) from e

    def _write_output(self, target: Path, content: bytes, overwrite: bool) -> None:
        """
        Write bytes to ``target`` atomically.

        The content goes to a temporary file in the target directory which
        is then renamed over the target; the temporary file is removed on
        every failure path.

        Raises:
            ExportError: If the target exists without ``overwrite`` or
                cannot be written.
        """
        if target.exists() and not overwrite:
            raise ExportError(
                file_name=str(target),
                operation="save",
                reason="File already exists and overwrite is False",
            )

        temp_path: str | None = None
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                dir=target.parent,
                prefix=f".{target.stem}-",
                suffix=".tmp",
                delete=False,
            ) as temp_file:
                temp_path = temp_file.name
                temp_file.write(content)
            os.replace(temp_path, target)
            temp_path = None
        except OSError as e:
            raise ExportError(file_name=str(target), operation="save", cause=e) from e
        finally:
            if temp_path is not None and os.path.exists(temp_path):
                os.unlink(temp_path)

    def analyze_file(self, file_path: str) -> AnalyzeResponse:
        """
        Load a file from disk and count the cells to convert.

        Args:
            file_path: Path to a .xlsx, .xls or .csv file.

        Returns:
            AnalyzeResponse for the file.

        Raises:
            FileNotFoundError: If the file does not exist.
            UnsupportedFormatError: If the file is not supported.
            ParseError: If the file is malformed.
        """
        data = self._read_file(file_path)
        return self.load(ConversionSession(), data, Path(file_path).name)

    def convert_file(
        self,
        file_path: str,
        output_path: str | None = None,
        overwrite: bool = False,
    ) -> ConvertResponse:
        """
        Convert a file on disk and write the .xlsx result next to it.

        Args:
            file_path: Path to a .xlsx, .xls or .csv file.
            output_path: Where to write the result. Defaults to
                ``<base><suffix>.xlsx`` in the input's directory.
            overwrite: Whether to replace an existing output file.

        Returns:
            ConvertResponse describing the written file.

        Raises:
            FileNotFoundError: If the input does not exist.
            UnsupportedFormatError: If the input is not supported.
            ParseError: If the input is malformed.
            ExportError: If the output cannot be produced or written.
        """
        start_time = time.time()
        source = Path(file_path)

        session = ConversionSession()
        self.load(session, self._read_file(file_path), source.name)
        result = self.export(session)

        target = Path(output_path) if output_path else source.with_name(result.file_name)
        self._write_output(target, result.content, overwrite)

        processing_time = (time.time() - start_time) * 1000

        return ConvertResponse(
            success=True,
            source_file=str(source),
            output_file=str(target.absolute()),
            converted_count=result.converted_count,
            file_size_bytes=result.size_bytes,
            processing_time_ms=round(processing_time, 2),
            message=session.last_message,
        )
