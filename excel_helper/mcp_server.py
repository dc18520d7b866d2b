"""
MCP (Model Context Protocol) server for comma-decimal conversion.

This module implements an MCP server that exposes the conversion service as
tools that can be called by AI agents. It provides the same functionality as
the REST API but works on files on the local filesystem.

MCP Tools:
    - analyze_file: Count the comma-decimal cells of a spreadsheet
    - convert_file: Convert a spreadsheet and write the .xlsx result

Example:
    To run the MCP server:
        python -m excel_helper.mcp_server

    Or programmatically:
        from excel_helper.mcp_server import run_mcp_server
        run_mcp_server()
"""

import asyncio
import json
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import (
    TextContent,
    Tool,
)

from excel_helper.config import settings
from excel_helper.exceptions.excel_exceptions import ExcelServiceError
from excel_helper.services.excel_service import ConversionService
from excel_helper.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


class MCPExcelServer:
    """
    MCP server implementation for comma-decimal conversion.

    This class wraps the ConversionService and exposes it through the MCP
    protocol, allowing AI agents to analyze and convert spreadsheets using
    standardized tool calls.

    Attributes:
        service: The underlying ConversionService instance.
        server: The MCP Server instance.

    Example:
        mcp_server = MCPExcelServer()
        await mcp_server.run()
    """

    def __init__(self, service: ConversionService | None = None) -> None:
        """
        Initialize the MCP Excel Server.

        Args:
            service: Optional ConversionService instance. If None, creates a new one.
        """
        self.service = service or ConversionService()
        self.server = Server("excel-helper")
        self._setup_handlers()

    def _setup_handlers(self) -> None:
        """Set up MCP request handlers."""

        @self.server.list_tools()
        async def list_tools() -> list[Tool]:
            """Return the list of available conversion tools."""
            return self._get_tools()

        @self.server.call_tool()
        async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
            """Execute a tool and return the result."""
            result = await self._execute_tool(name, arguments)
            return [TextContent(type="text", text=json.dumps(result, default=str, indent=2))]

    def _get_tools(self) -> list[Tool]:
        """
        Get the list of available conversion tools.

        Returns:
            List of MCP Tool definitions.
        """
        return [
            Tool(
                name="analyze_file",
                description=(
                    "Load a .xlsx, .xls or .csv file and count the cells holding "
                    "comma decimals such as '11,2' or '-3,75'. Nothing is written."
                ),
                inputSchema={
                    "type": "object",
                    "properties": {
                        "file_path": {
                            "type": "string",
                            "description": "Path to the spreadsheet",
                        },
                    },
                    "required": ["file_path"],
                },
            ),
            Tool(
                name="convert_file",
                description=(
                    "Convert comma decimals to dot decimals and write the result as "
                    "an .xlsx file. Every cell is written as right-aligned text."
                ),
                inputSchema={
                    "type": "object",
                    "properties": {
                        "file_path": {
                            "type": "string",
                            "description": "Path to the spreadsheet",
                        },
                        "output_path": {
                            "type": "string",
                            "description": (
                                "Where to write the result "
                                f"(default: '<name>{settings.output_suffix}.xlsx' next to the input)"
                            ),
                        },
                        "overwrite": {
                            "type": "boolean",
                            "description": "Whether to overwrite an existing output file (default: false)",
                        },
                    },
                    "required": ["file_path"],
                },
            ),
        ]

    async def _execute_tool(self, name: str, arguments: dict[str, Any]) -> dict[str, Any]:
        """
        Execute a tool by name with the given arguments.

        Args:
            name: The name of the tool to execute.
            arguments: The arguments to pass to the tool.

        Returns:
            Dictionary containing the tool execution result.
        """
        try:
            if name == "analyze_file":
                result = self.service.analyze_file(arguments["file_path"])
                return {"success": True, "data": result.model_dump(mode="json")}

            elif name == "convert_file":
                result = self.service.convert_file(
                    file_path=arguments["file_path"],
                    output_path=arguments.get("output_path"),
                    overwrite=arguments.get("overwrite", False),
                )
                return {"success": True, "data": result.model_dump(mode="json")}

            else:
                return {
                    "success": False,
                    "error": {
                        "error_code": "UNKNOWN_TOOL",
                        "message": f"Unknown tool: {name}",
                    },
                }

        except ExcelServiceError as e:
            return {
                "success": False,
                "error": e.to_dict(),
            }
        except Exception as e:
            logger.exception("Tool %s failed", name)
            return {
                "success": False,
                "error": {
                    "error_code": "INTERNAL_ERROR",
                    "message": str(e),
                },
            }

    async def run(self) -> None:
        """
        Run the MCP server using stdio transport.

        This method starts the server and blocks until it is terminated.
        It uses stdin/stdout for communication with the MCP client.
        """
        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options(),
            )


def run_mcp_server() -> None:
    """
    Run the MCP conversion server.

    This is the entry point for running the MCP server from the command line.
    Logs go to stderr so they never mix with the stdio protocol stream.

    Example:
        python -m excel_helper.mcp_server
    """
    configure_logging(settings.log_level)
    server = MCPExcelServer()
    asyncio.run(server.run())


if __name__ == "__main__":
    run_mcp_server()
