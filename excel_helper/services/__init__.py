"""
Service layer for spreadsheet conversion.

Contains the conversion core and the service that ties readers, the core
and writers together, decoupled from transport layers (HTTP/MCP/CLI).
"""

from excel_helper.services.excel_service import ConversionService, build_output_file_name

__all__ = [
    "ConversionService",
    "build_output_file_name",
]
