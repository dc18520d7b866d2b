"""
Command-line interface for excel_helper.

Usage:
  excel-helper <input_file> [-o OUTPUT] [--overwrite] [--dry-run] [--engine ENGINE]
"""

import argparse
import sys

from excel_helper.config import settings
from excel_helper.exceptions.excel_exceptions import ExcelServiceError
from excel_helper.services.excel_service import ConversionService
from excel_helper.utils.logging import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="excel-helper",
        description="Convert comma decimals (11,2) to dot decimals (11.2) in a spreadsheet",
    )
    parser.add_argument("input_file", help="Path to a .xlsx, .xls or .csv file")
    parser.add_argument(
        "--output",
        "-o",
        help=f"Output file path (default: <name>{settings.output_suffix}.xlsx next to the input)",
    )
    parser.add_argument("--overwrite", action="store_true", help="Replace an existing output file")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only count the cells to convert, do not write anything",
    )
    parser.add_argument(
        "--engine",
        choices=["xlsxwriter", "openpyxl"],
        help=f"Backend used to write the .xlsx (default: {settings.export_engine})",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging("DEBUG" if args.verbose else settings.log_level)

    run_settings = settings
    if args.engine:
        run_settings = settings.model_copy(update={"export_engine": args.engine})
    service = ConversionService(settings=run_settings)

    try:
        if args.dry_run:
            analysis = service.analyze_file(args.input_file)
            print(analysis.message)
            for sheet in analysis.workbook_info.sheets:
                print(f"  {sheet.name} ({sheet.dimensions}): {sheet.cells_to_convert}")
        else:
            result = service.convert_file(
                args.input_file,
                output_path=args.output,
                overwrite=args.overwrite,
            )
            print(result.message)
            print(f"Output file: {result.output_file}")
    except ExcelServiceError as e:
        print(e.message, file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
