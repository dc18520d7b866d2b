"""
Tests for the FastAPI REST API.

Tests the HTTP endpoints for analyzing and converting uploaded files.
"""

import io

import pytest
from fastapi.testclient import TestClient
from openpyxl import load_workbook

from excel_helper.main import app
from excel_helper.models.session import OUTPUT_MEDIA_TYPE

XLSX_CONTENT_TYPE = OUTPUT_MEDIA_TYPE


@pytest.fixture(scope="module")
def client():
    """Create a test client for the FastAPI app."""
    with TestClient(app) as c:
        yield c


class TestHealthEndpoint:
    """Tests for the health check endpoint."""

    def test_health_check(self, client: TestClient) -> None:
        """Test the health check endpoint."""
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "timestamp" in data


class TestAnalyzeEndpoint:
    """Tests for POST /convert/analyze."""

    def test_analyze_xlsx(self, client: TestClient, sample_xlsx_bytes: bytes) -> None:
        """Test analyzing an uploaded workbook."""
        response = client.post(
            "/convert/analyze",
            files={"file": ("prices.xlsx", sample_xlsx_bytes, XLSX_CONTENT_TYPE)},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["cells_to_convert"] == 3
        assert data["workbook_info"]["sheet_count"] == 2
        assert data["workbook_info"]["sheets"][0]["name"] == "Prices"
        assert data["message"] == "File loaded successfully. To convert: 3 cells"

    def test_analyze_csv(self, client: TestClient, sample_csv_bytes: bytes) -> None:
        """Test analyzing uploaded delimited text."""
        response = client.post(
            "/convert/analyze",
            files={"file": ("values.csv", sample_csv_bytes, "text/csv")},
        )

        assert response.status_code == 200
        assert response.json()["cells_to_convert"] == 2

    def test_analyze_unsupported_extension(self, client: TestClient) -> None:
        """Test that unsupported files return 415."""
        response = client.post(
            "/convert/analyze",
            files={"file": ("notes.txt", b"hello", "text/plain")},
        )

        assert response.status_code == 415
        data = response.json()
        assert data["success"] is False
        assert data["error_code"] == "UNSUPPORTED_FORMAT"

    def test_analyze_malformed_file(self, client: TestClient) -> None:
        """Test that corrupt content returns 400."""
        response = client.post(
            "/convert/analyze",
            files={"file": ("broken.xlsx", b"PK\x03\x04corrupt", XLSX_CONTENT_TYPE)},
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "PARSE_ERROR"


class TestExportEndpoint:
    """Tests for POST /convert/export."""

    def test_export_xlsx(self, client: TestClient, sample_xlsx_bytes: bytes) -> None:
        """Test downloading the converted workbook."""
        response = client.post(
            "/convert/export",
            files={"file": ("prices.xlsx", sample_xlsx_bytes, XLSX_CONTENT_TYPE)},
        )

        assert response.status_code == 200
        assert response.headers["content-type"] == XLSX_CONTENT_TYPE
        assert response.headers["x-converted-count"] == "3"
        assert 'filename="prices_converted.xlsx"' in response.headers["content-disposition"]

        workbook = load_workbook(io.BytesIO(response.content))
        assert workbook.sheetnames == ["Prices", "Notes"]
        assert workbook["Prices"]["B2"].value == "11.2"
        assert workbook["Prices"]["B3"].value == "-3.75"
        assert workbook["Prices"]["C2"].value == "5"
        assert workbook["Notes"]["A1"].value == "1.5"
        assert workbook["Notes"]["B1"].value == "see 1,5 above"

    def test_export_csv(self, client: TestClient, sample_csv_bytes: bytes) -> None:
        """Test that a CSV upload is returned as .xlsx."""
        response = client.post(
            "/convert/export",
            files={"file": ("values.csv", sample_csv_bytes, "text/csv")},
        )

        assert response.status_code == 200
        assert 'filename="values_converted.xlsx"' in response.headers["content-disposition"]
        worksheet = load_workbook(io.BytesIO(response.content))["Sheet1"]
        assert worksheet["B4"].value == "-0.5"

    def test_export_unsupported_binary(self, client: TestClient) -> None:
        """Test that binary content that is not a spreadsheet returns 415."""
        response = client.post(
            "/convert/export",
            files={"file": ("image.csv", b"\x89PNG\r\n\x1a\n\x00\x00", "text/csv")},
        )

        assert response.status_code == 415
        assert "Please select a valid file" in response.json()["message"]
