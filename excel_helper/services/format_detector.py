"""Input format detection.

This module checks file names against the supported extensions and infers
the actual container format from the file content (signature bytes), so
a mislabelled upload is still parsed by the right reader.
"""

from pathlib import PurePath

from excel_helper.exceptions.excel_exceptions import ParseError, UnsupportedFormatError
from excel_helper.models.excel_models import (
    EXTENSION_TO_FORMAT,
    SUPPORTED_EXTENSIONS,
    SpreadsheetFormat,
)
from excel_helper.utils.logging import get_logger

logger = get_logger(__name__)

__all__ = [
    "EXTENSION_TO_FORMAT",
    "SUPPORTED_EXTENSIONS",
    "check_extension",
    "detect_format",
]

# ZIP local file header (Office Open XML containers)
ZIP_SIGNATURE = b"PK\x03\x04"
# OLE2 compound document (legacy binary Excel)
OLE2_SIGNATURE = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"

BINARY_SNIFF_BYTES = 4096


def check_extension(file_name: str) -> SpreadsheetFormat:
    """
    Check that a file name carries a supported extension.

    Args:
        file_name: File name or path.

    Returns:
        The format the extension announces.

    Raises:
        UnsupportedFormatError: If the extension is not supported.
    """
    suffix = PurePath(file_name).suffix.lower()
    if suffix not in EXTENSION_TO_FORMAT:
        raise UnsupportedFormatError(
            file_name=file_name,
            reason=f"Unsupported file extension: {suffix or '(none)'}",
        )
    return EXTENSION_TO_FORMAT[suffix]


def detect_format(data: bytes, file_name: str | None = None) -> SpreadsheetFormat:
    """
    Infer the container format from the file content.

    When a file name is given its extension is checked first; the content
    decides the format either way.

    Args:
        data: Raw file bytes.
        file_name: Optional original file name.

    Returns:
        The detected format.

    Raises:
        UnsupportedFormatError: If the extension is not supported, or the
            content is binary but not a known spreadsheet container.
        ParseError: If the input is empty.
    """
    announced = check_extension(file_name) if file_name else None

    if not data:
        raise ParseError(file_name=file_name, reason="File is empty")

    if data.startswith(ZIP_SIGNATURE):
        detected = SpreadsheetFormat.XLSX
    elif data.startswith(OLE2_SIGNATURE):
        detected = SpreadsheetFormat.XLS
    elif b"\x00" in data[:BINARY_SNIFF_BYTES] and not _has_utf16_bom(data):
        raise UnsupportedFormatError(
            file_name=file_name,
            reason="Content is not a spreadsheet or delimited text file",
        )
    else:
        detected = SpreadsheetFormat.CSV

    if announced is not None and announced is not detected:
        logger.warning(
            "%s has a %s extension but %s content; reading as %s",
            file_name,
            announced.value,
            detected.value,
            detected.value,
        )

    return detected


def _has_utf16_bom(data: bytes) -> bool:
    return data.startswith((b"\xff\xfe", b"\xfe\xff"))
