"""
Tests for the MCP server.

Tests the MCP protocol implementation for the conversion tools.
"""

from pathlib import Path

import pytest

from excel_helper.mcp_server import MCPExcelServer
from excel_helper.services.excel_service import ConversionService


@pytest.fixture
def mcp_server(conversion_service: ConversionService) -> MCPExcelServer:
    """Create an MCPExcelServer instance for testing."""
    return MCPExcelServer(service=conversion_service)


class TestMCPServerTools:
    """Tests for MCP tool listing."""

    def test_get_tools_returns_all_tools(
        self,
        mcp_server: MCPExcelServer,
    ) -> None:
        """Test that all expected tools are returned."""
        tools = mcp_server._get_tools()

        tool_names = [tool.name for tool in tools]

        assert tool_names == ["analyze_file", "convert_file"]

    def test_tools_have_required_fields(
        self,
        mcp_server: MCPExcelServer,
    ) -> None:
        """Test that all tools have required fields."""
        tools = mcp_server._get_tools()

        for tool in tools:
            assert tool.name is not None
            assert tool.description is not None
            assert tool.inputSchema is not None
            assert "properties" in tool.inputSchema
            assert tool.inputSchema["required"] == ["file_path"]


class TestMCPServerToolExecution:
    """Tests for MCP tool execution."""

    @pytest.mark.asyncio
    async def test_execute_analyze_file(
        self,
        mcp_server: MCPExcelServer,
        sample_excel_file: Path,
    ) -> None:
        """Test executing analyze_file."""
        result = await mcp_server._execute_tool(
            "analyze_file",
            {"file_path": str(sample_excel_file)},
        )

        assert result["success"] is True
        assert result["data"]["cells_to_convert"] == 3
        assert result["data"]["workbook_info"]["source_format"] == "xlsx"

    @pytest.mark.asyncio
    async def test_execute_convert_file(
        self,
        mcp_server: MCPExcelServer,
        sample_csv_file: Path,
        temp_dir: Path,
    ) -> None:
        """Test executing convert_file with an explicit output path."""
        output_path = temp_dir / "converted.xlsx"

        result = await mcp_server._execute_tool(
            "convert_file",
            {"file_path": str(sample_csv_file), "output_path": str(output_path)},
        )

        assert result["success"] is True
        assert result["data"]["converted_count"] == 2
        assert output_path.exists()

    @pytest.mark.asyncio
    async def test_execute_convert_file_without_overwrite(
        self,
        mcp_server: MCPExcelServer,
        sample_csv_file: Path,
    ) -> None:
        """Test that converting twice to the default output fails without overwrite."""
        arguments = {"file_path": str(sample_csv_file)}

        first = await mcp_server._execute_tool("convert_file", arguments)
        second = await mcp_server._execute_tool("convert_file", arguments)

        assert first["success"] is True
        assert second["success"] is False
        assert second["error"]["error_code"] == "EXPORT_ERROR"

    @pytest.mark.asyncio
    async def test_file_not_found_error(
        self,
        mcp_server: MCPExcelServer,
    ) -> None:
        """Test that a missing file is reported as an error result."""
        result = await mcp_server._execute_tool(
            "analyze_file",
            {"file_path": "/nonexistent/file.xlsx"},
        )

        assert result["success"] is False
        assert result["error"]["error_code"] == "FILE_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_unknown_tool_error(
        self,
        mcp_server: MCPExcelServer,
    ) -> None:
        """Test that an unknown tool returns an error."""
        result = await mcp_server._execute_tool("unknown_tool", {})

        assert result["success"] is False
        assert result["error"]["error_code"] == "UNKNOWN_TOOL"
