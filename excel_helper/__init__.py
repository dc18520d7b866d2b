"""
Excel Helper: comma-decimal to dot-decimal spreadsheet converter.

This package loads spreadsheet files (.xlsx, .xls, .csv), finds cells whose
text is a number written with a decimal comma (e.g. "11,2") and re-exports
the workbook as .xlsx with those values rewritten in dot form ("11.2").

Architecture:
    - Service Layer pattern for clean separation of concerns
    - python-calamine for fast reading of .xlsx/.xls (Rust-based)
    - XlsxWriter (default) or openpyxl for writing the converted workbook
    - REST (FastAPI), MCP and CLI boundaries over the same service
"""

__version__ = "0.1.0"
