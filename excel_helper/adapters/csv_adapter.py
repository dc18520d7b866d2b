"""
Delimited-text adapter.

This module provides the CsvAdapter class that reads CSV/TSV bytes into a
single-sheet Workbook. Fields are kept as raw text: nothing is interpreted
as a number, so "11,2" stays the string "11,2".

Supports:
    - Comma, semicolon, tab and pipe delimiters (auto-detected)
    - BOM markers (UTF-8, UTF-16 LE/BE)
    - UTF-8, then chardet detection, then a configurable fallback encoding

Example:
    adapter = CsvAdapter()
    workbook = adapter.read_workbook(Path("prices.csv").read_bytes())
"""

import codecs
import csv
import io
from collections import Counter

import chardet

from excel_helper.exceptions.excel_exceptions import ParseError
from excel_helper.models.excel_models import SpreadsheetFormat
from excel_helper.models.workbook import Sheet, Workbook
from excel_helper.utils.logging import get_logger

logger = get_logger(__name__)

_BOM_MAP: dict[bytes, str] = {
    b"\xef\xbb\xbf": "utf-8-sig",
    b"\xff\xfe": "utf-16",
    b"\xfe\xff": "utf-16",
}


class CsvAdapter:
    """
    Adapter for reading delimited text files.

    Attributes:
        DEFAULT_SHEET_NAME: Name given to the single sheet.
        DELIMITER_CANDIDATES: Delimiters tried, in tie-break order.
        SAMPLE_LINES: Number of leading lines used for delimiter detection.
    """

    DEFAULT_SHEET_NAME = "Sheet1"
    # Semicolon first: files that write decimals with a comma usually
    # separate fields with a semicolon.
    DELIMITER_CANDIDATES = (";", "\t", "|", ",")
    SAMPLE_LINES = 20
    DETECTION_SAMPLE_BYTES = 64 * 1024
    MIN_ENCODING_CONFIDENCE = 0.5

    def __init__(self, fallback_encoding: str = "cp1252") -> None:
        """
        Initialize the CsvAdapter.

        Args:
            fallback_encoding: Encoding used when the bytes are not UTF-8 and
                chardet gives no confident guess.
        """
        self.fallback_encoding = fallback_encoding

    def _detect_encoding(self, data: bytes) -> str | None:
        """
        Guess the encoding of non-UTF-8 bytes with chardet.

        Returns:
            The Python codec name, or None when chardet is not confident
            enough or names a codec Python does not know.
        """
        result = chardet.detect(data[: self.DETECTION_SAMPLE_BYTES])
        encoding = result.get("encoding")
        confidence = result.get("confidence") or 0.0

        if not encoding or confidence < self.MIN_ENCODING_CONFIDENCE:
            logger.debug("No confident encoding guess (%s, %.2f)", encoding, confidence)
            return None

        try:
            codec_name = codecs.lookup(encoding).name
        except LookupError:
            logger.debug("chardet suggested unknown encoding %s", encoding)
            return None

        logger.debug("Detected encoding %s (confidence %.2f)", codec_name, confidence)
        return codec_name

    def _decode(self, data: bytes, file_name: str | None) -> str:
        """
        Decode bytes to text.

        Tries, in order: a byte order mark, UTF-8, the chardet guess and
        the configured fallback encoding.

        Raises:
            ParseError: If no candidate encoding can decode the bytes.
        """
        for bom, encoding in _BOM_MAP.items():
            if data.startswith(bom):
                try:
                    return data.decode(encoding)
                except UnicodeDecodeError as e:
                    raise ParseError(
                        file_name=file_name,
                        source_format=SpreadsheetFormat.CSV.value,
                        cause=e,
                    ) from e

        try:
            return data.decode("utf-8")
        except UnicodeDecodeError:
            logger.debug("Input is not UTF-8, detecting encoding")

        detected = self._detect_encoding(data)
        if detected is not None:
            try:
                return data.decode(detected)
            except UnicodeDecodeError:
                logger.debug("Detected encoding %s does not decode the input", detected)

        try:
            return data.decode(self.fallback_encoding)
        except UnicodeDecodeError as e:
            raise ParseError(
                file_name=file_name,
                source_format=SpreadsheetFormat.CSV.value,
                cause=e,
            ) from e

    def _count_unquoted_delimiters(self, line: str, delimiter: str) -> int:
        """Count delimiter occurrences outside double-quoted fields."""
        count = 0
        in_quotes = False
        for char in line:
            if char == '"':
                in_quotes = not in_quotes
            elif char == delimiter and not in_quotes:
                count += 1
        return count

    def detect_delimiter(self, text: str) -> str:
        """
        Detect the most likely delimiter by frequency analysis.

        Each candidate is scored by its average count per sample line times
        the share of lines that have the most common count. Ties go to the
        earlier candidate.

        Args:
            text: Decoded text content.

        Returns:
            Detected delimiter; "," when no candidate occurs.
        """
        lines = [line for line in text.splitlines()[: self.SAMPLE_LINES] if line.strip()]
        if not lines:
            return ","

        best_delimiter = ","
        best_score = 0.0

        for delimiter in self.DELIMITER_CANDIDATES:
            counts = [self._count_unquoted_delimiters(line, delimiter) for line in lines]
            if max(counts) == 0:
                continue

            avg_count = sum(counts) / len(counts)
            most_common = Counter(counts).most_common(1)[0][1]
            score = avg_count * (most_common / len(counts))

            if score > best_score:
                best_score = score
                best_delimiter = delimiter

        logger.debug("Detected delimiter %r (score=%.3f)", best_delimiter, best_score)
        return best_delimiter

    def read_workbook(self, data: bytes, file_name: str | None = None) -> Workbook:
        """
        Parse delimited text into a single-sheet Workbook.

        Args:
            data: Raw file bytes.
            file_name: Original file name, used in error messages.

        Returns:
            Workbook with one sheet named "Sheet1".

        Raises:
            ParseError: If the bytes cannot be decoded or parsed.
        """
        text = self._decode(data, file_name)
        delimiter = self.detect_delimiter(text)

        sheet = Sheet(name=self.DEFAULT_SHEET_NAME)
        try:
            reader = csv.reader(io.StringIO(text, newline=""), delimiter=delimiter)
            for row_idx, row in enumerate(reader):
                for col_idx, value in enumerate(row):
                    if value != "":
                        sheet.set_cell(row_idx, col_idx, value)
        except csv.Error as e:
            raise ParseError(
                file_name=file_name,
                source_format=SpreadsheetFormat.CSV.value,
                cause=e,
            ) from e

        workbook = Workbook(source_format=SpreadsheetFormat.CSV)
        workbook.add_sheet(sheet)
        return workbook
