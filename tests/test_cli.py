"""
Tests for the command-line interface.
"""

import logging
from collections.abc import Generator
from pathlib import Path

import pytest
from openpyxl import load_workbook

from excel_helper.cli import main


@pytest.fixture(autouse=True)
def restore_root_logging() -> Generator[None, None, None]:
    """Restore the root logger handlers replaced by the CLI."""
    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level
    yield
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


class TestCli:
    """Tests for excel-helper."""

    def test_dry_run_writes_nothing(
        self,
        sample_excel_file: Path,
        temp_dir: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Test that --dry-run only reports the count."""
        exit_code = main([str(sample_excel_file), "--dry-run"])

        output = capsys.readouterr().out
        assert exit_code == 0
        assert "To convert: 3 cells" in output
        assert "Prices (A1:C4): 2" in output
        assert [path.name for path in temp_dir.iterdir()] == ["prices.xlsx"]

    def test_convert(
        self,
        sample_csv_file: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Test converting next to the input."""
        exit_code = main([str(sample_csv_file)])

        output = capsys.readouterr().out
        assert exit_code == 0
        assert "2 cells converted and saved!" in output
        assert sample_csv_file.with_name("values_converted.xlsx").exists()

    def test_convert_with_engine_and_output(
        self,
        sample_csv_file: Path,
        temp_dir: Path,
    ) -> None:
        """Test --engine and --output together."""
        target = temp_dir / "custom.xlsx"

        exit_code = main([str(sample_csv_file), "-o", str(target), "--engine", "openpyxl"])

        assert exit_code == 0
        assert load_workbook(target)["Sheet1"]["B2"].value == "11.2"

    def test_error_exit_code(
        self,
        temp_dir: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Test that service errors print a message and exit with 1."""
        notes = temp_dir / "notes.txt"
        notes.write_text("hello")

        exit_code = main([str(notes)])

        assert exit_code == 1
        assert "Please select a valid file (.xlsx, .xls or .csv)" in capsys.readouterr().err

    def test_existing_output_requires_overwrite(
        self,
        sample_csv_file: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Test that a second run fails until --overwrite is given."""
        assert main([str(sample_csv_file)]) == 0
        assert main([str(sample_csv_file)]) == 1
        assert "Save error" in capsys.readouterr().err
        assert main([str(sample_csv_file), "--overwrite"]) == 0
