"""
Custom exceptions for spreadsheet conversion operations.

This module defines a hierarchy of exceptions for handling the error
conditions of loading, converting and exporting a workbook. All exceptions
inherit from ExcelServiceError for consistent error handling.

Example:
    try:
        workbook = service.load_workbook(data, "report.xlsx")
    except ParseError as e:
        logger.error(f"Parse error: {e.cause}")
    except ExcelServiceError as e:
        logger.error(f"General error: {e}")
"""

from excel_helper.models.excel_models import SUPPORTED_EXTENSIONS


class ExcelServiceError(Exception):
    """
    Base exception for all Excel helper errors.

    All custom exceptions in this module inherit from this class,
    allowing consumers to catch all conversion-related errors with a single
    except clause.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code for API responses.
        details: Optional additional context about the error.
    """

    def __init__(
        self,
        message: str,
        error_code: str = "EXCEL_ERROR",
        details: dict | None = None,
    ) -> None:
        """
        Initialize the ExcelServiceError.

        Args:
            message: Human-readable error description.
            error_code: Machine-readable error code for API responses.
            details: Optional additional context about the error.
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> dict:
        """
        Convert exception to a dictionary for API responses.

        Returns:
            Dictionary containing error_code, message, and details.
        """
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class FileNotFoundError(ExcelServiceError):
    """
    Raised when the specified input file does not exist.

    Attributes:
        file_path: Path to the file that was not found.
    """

    def __init__(self, file_path: str) -> None:
        self.file_path = file_path
        super().__init__(
            message=f"Excel file not found: {file_path}",
            error_code="FILE_NOT_FOUND",
            details={"file_path": file_path},
        )


class UnsupportedFormatError(ExcelServiceError):
    """
    Raised when the input is not one of the supported formats.

    Covers both the extension pre-filter and content that is recognizably
    binary but not a spreadsheet container.

    Attributes:
        file_name: Name of the rejected file, if known.
        expected_formats: List of supported extensions.
        reason: Specific reason for the rejection.
    """

    def __init__(
        self,
        file_name: str | None = None,
        reason: str | None = None,
        expected_formats: list[str] | None = None,
    ) -> None:
        """
        Initialize the UnsupportedFormatError.

        Args:
            file_name: Name of the rejected file, if known.
            reason: Specific reason for the rejection.
            expected_formats: List of supported extensions.
        """
        self.file_name = file_name
        self.reason = reason
        self.expected_formats = expected_formats or list(SUPPORTED_EXTENSIONS)

        message = "Please select a valid file (.xlsx, .xls or .csv)"
        if reason:
            message += f" - {reason}"

        super().__init__(
            message=message,
            error_code="UNSUPPORTED_FORMAT",
            details={
                "file_name": file_name,
                "expected_formats": self.expected_formats,
                "reason": reason,
            },
        )


class ParseError(ExcelServiceError):
    """
    Raised when input bytes are malformed for the inferred format.

    The underlying library exception is kept in ``cause`` and is also
    chained as ``__cause__`` by the raiser.

    Attributes:
        file_name: Name of the file being parsed, if known.
        source_format: The format the bytes were parsed as.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        file_name: str | None = None,
        source_format: str | None = None,
        cause: BaseException | None = None,
        reason: str | None = None,
    ) -> None:
        """
        Initialize the ParseError.

        Args:
            file_name: Name of the file being parsed, if known.
            source_format: The format the bytes were parsed as.
            cause: The underlying exception, if any.
            reason: Explicit reason; defaults to the text of ``cause``.
        """
        self.file_name = file_name
        self.source_format = source_format
        self.cause = cause
        self.reason = reason or (str(cause) if cause is not None else None)

        message = "Error loading file"
        if file_name:
            message += f" {file_name}"
        if self.reason:
            message += f": {self.reason}"

        super().__init__(
            message=message,
            error_code="PARSE_ERROR",
            details={
                "file_name": file_name,
                "source_format": source_format,
                "reason": self.reason,
            },
        )


class ExportError(ExcelServiceError):
    """
    Raised when the converted workbook cannot be serialized or saved.

    Attributes:
        file_name: Output file name, if known.
        operation: The export step that failed (serialize, save).
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        file_name: str | None = None,
        operation: str = "serialize",
        cause: BaseException | None = None,
        reason: str | None = None,
    ) -> None:
        """
        Initialize the ExportError.

        Args:
            file_name: Output file name, if known.
            operation: The export step that failed.
            cause: The underlying exception, if any.
            reason: Explicit reason; defaults to the text of ``cause``.
        """
        self.file_name = file_name
        self.operation = operation
        self.cause = cause
        self.reason = reason or (str(cause) if cause is not None else None)

        message = "Save error"
        if self.reason:
            message += f": {self.reason}"

        super().__init__(
            message=message,
            error_code="EXPORT_ERROR",
            details={
                "file_name": file_name,
                "operation": operation,
                "reason": self.reason,
            },
        )


class FileTooLargeError(ExcelServiceError):
    """
    Raised when the input exceeds the configured size limit.

    Attributes:
        file_name: Name of the rejected file, if known.
        size_bytes: Actual input size.
        limit_bytes: Configured limit.
    """

    def __init__(
        self,
        size_bytes: int,
        limit_bytes: int,
        file_name: str | None = None,
    ) -> None:
        self.file_name = file_name
        self.size_bytes = size_bytes
        self.limit_bytes = limit_bytes

        super().__init__(
            message=f"File is too large: {size_bytes} bytes (limit {limit_bytes} bytes)",
            error_code="FILE_TOO_LARGE",
            details={
                "file_name": file_name,
                "size_bytes": size_bytes,
                "limit_bytes": limit_bytes,
            },
        )


class WorkbookNotLoadedError(ExcelServiceError):
    """Raised when an export is requested before any workbook was loaded."""

    def __init__(self) -> None:
        super().__init__(
            message="Please load a file first",
            error_code="WORKBOOK_NOT_LOADED",
        )
