"""
Caller-owned conversion session.

The session replaces process-wide "current workbook" state: a caller keeps
one ConversionSession and passes it to ConversionService.load/export.
"""

from dataclasses import dataclass
from enum import Enum

from excel_helper.models.workbook import Workbook

OUTPUT_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


class SessionState(str, Enum):
    """Caller-visible lifecycle of a session."""

    UNLOADED = "unloaded"
    LOADED = "loaded"
    EXPORTED = "exported"


@dataclass
class ConversionSession:
    """
    State of one load/export cycle.

    Attributes:
        state: Current lifecycle state.
        file_name: Name of the loaded file.
        workbook: The loaded (or, after export, converted) workbook.
        cells_to_convert: Count shown to the user; reset to 0 after export.
        last_message: Last human-readable status line.
    """

    state: SessionState = SessionState.UNLOADED
    file_name: str | None = None
    workbook: Workbook | None = None
    cells_to_convert: int = 0
    last_message: str | None = None

    @property
    def is_loaded(self) -> bool:
        return self.workbook is not None and self.state is not SessionState.UNLOADED


@dataclass
class ExportResult:
    """
    A serialized, converted workbook ready to hand to the caller.

    Attributes:
        content: The .xlsx bytes.
        file_name: Suggested download name.
        converted_count: Number of cells rewritten from comma to dot form.
        media_type: MIME type of ``content``.
    """

    content: bytes
    file_name: str
    converted_count: int
    media_type: str = OUTPUT_MEDIA_TYPE

    @property
    def size_bytes(self) -> int:
        return len(self.content)
