"""
FastAPI application for the comma-decimal converter.

This module exposes the conversion service over REST. Files are uploaded,
analyzed or converted in memory, and the converted workbook is streamed
back as an .xlsx attachment.

API Endpoints:
    - GET /health: Health check
    - POST /convert/analyze: Upload a file and count the cells to convert
    - POST /convert/export: Upload a file and download the converted .xlsx

Example:
    To run the server:
        uvicorn excel_helper.main:app --reload

    Or programmatically:
        from excel_helper.main import run_server
        run_server()
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Annotated, Any

import uvicorn
from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from excel_helper import __version__
from excel_helper.config import settings
from excel_helper.exceptions.excel_exceptions import ExcelServiceError, UnsupportedFormatError
from excel_helper.models.excel_models import AnalyzeResponse, ExcelErrorResponse
from excel_helper.models.session import ConversionSession
from excel_helper.services.excel_service import ConversionService
from excel_helper.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)

conversion_service: ConversionService | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Initializes the conversion service on startup and cleans up on shutdown.

    Args:
        app: The FastAPI application instance.
    """
    global conversion_service
    conversion_service = ConversionService()
    logger.info("Conversion service started (engine=%s)", settings.export_engine)
    yield
    conversion_service = None


app = FastAPI(
    title="Excel Helper",
    description="""
    Convert comma decimal separators in spreadsheets to dot decimals.

    ## Features

    - **Analyze**: Count the cells holding values such as `11,2` or `-3,75`
    - **Export**: Download an .xlsx copy where those cells read `11.2` / `-3.75`
    - **Formats**: .xlsx and .xls via python-calamine, delimited .csv text

    Every exported cell is written as text and right-aligned.
    """,
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_service() -> ConversionService:
    """
    Get the conversion service instance.

    Returns:
        The global ConversionService instance.

    Raises:
        HTTPException: If the service is not initialized.
    """
    if conversion_service is None:
        raise HTTPException(
            status_code=503,
            detail="Conversion service is not initialized",
        )
    return conversion_service


def handle_excel_error(error: ExcelServiceError) -> JSONResponse:
    """
    Convert ExcelServiceError to appropriate HTTP response.

    Args:
        error: The ExcelServiceError to convert.

    Returns:
        JSONResponse with appropriate status code and error details.
    """
    status_code_map = {
        "FILE_NOT_FOUND": 404,
        "UNSUPPORTED_FORMAT": 415,
        "FILE_TOO_LARGE": 413,
        "PARSE_ERROR": 400,
        "WORKBOOK_NOT_LOADED": 409,
        "EXPORT_ERROR": 500,
    }

    status_code = status_code_map.get(error.error_code, 500)
    if status_code >= 500:
        logger.error("%s: %s", error.error_code, error.message)
    else:
        logger.warning("%s: %s", error.error_code, error.message)

    return JSONResponse(
        status_code=status_code,
        content=ExcelErrorResponse(
            success=False,
            error_code=error.error_code,
            message=error.message,
            details=error.details,
        ).model_dump(),
    )


async def _read_upload(file: UploadFile) -> tuple[str, bytes]:
    if not file.filename:
        raise UnsupportedFormatError(reason="No file provided")
    return file.filename, await file.read()


@app.get(
    "/health",
    tags=["System"],
    summary="Health check",
    response_model=dict,
)
async def health_check() -> dict[str, Any]:
    """
    Check the health status of the service.

    Returns:
        Dictionary containing status and timestamp.
    """
    return {
        "status": "healthy",
        "service": "Excel Helper",
        "version": __version__,
        "export_engine": settings.export_engine,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.post(
    "/convert/analyze",
    tags=["Conversion"],
    summary="Count cells to convert",
    response_model=AnalyzeResponse,
    responses={
        400: {"model": ExcelErrorResponse, "description": "Malformed file"},
        413: {"model": ExcelErrorResponse, "description": "File too large"},
        415: {"model": ExcelErrorResponse, "description": "Unsupported format"},
    },
)
async def analyze_upload(
    file: Annotated[UploadFile, File(description="Spreadsheet to analyze (.xlsx, .xls or .csv)")],
):
    """
    Upload a spreadsheet and count its comma-decimal cells.

    Nothing is converted; the response carries per-sheet dimensions and
    the number of cells an export would rewrite.

    Args:
        file: The uploaded spreadsheet.

    Returns:
        AnalyzeResponse with workbook info and the count to convert.
    """
    service = get_service()

    try:
        file_name, data = await _read_upload(file)
        return service.load(ConversionSession(), data, file_name)
    except ExcelServiceError as e:
        return handle_excel_error(e)


@app.post(
    "/convert/export",
    tags=["Conversion"],
    summary="Convert and download",
    response_class=Response,
    responses={
        200: {
            "content": {"application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": {}},
            "description": "The converted workbook",
        },
        400: {"model": ExcelErrorResponse, "description": "Malformed file"},
        413: {"model": ExcelErrorResponse, "description": "File too large"},
        415: {"model": ExcelErrorResponse, "description": "Unsupported format"},
        500: {"model": ExcelErrorResponse, "description": "Export error"},
    },
)
async def export_upload(
    file: Annotated[UploadFile, File(description="Spreadsheet to convert (.xlsx, .xls or .csv)")],
):
    """
    Upload a spreadsheet and download the converted .xlsx.

    The attachment name is ``<base><suffix>.xlsx`` and the number of
    rewritten cells is returned in the ``X-Converted-Count`` header.

    Args:
        file: The uploaded spreadsheet.

    Returns:
        The converted workbook as an .xlsx attachment.
    """
    service = get_service()
    session = ConversionSession()

    try:
        file_name, data = await _read_upload(file)
        service.load(session, data, file_name)
        result = service.export(session)
    except ExcelServiceError as e:
        return handle_excel_error(e)

    return Response(
        content=result.content,
        media_type=result.media_type,
        headers={
            "Content-Disposition": f'attachment; filename="{result.file_name}"',
            "X-Converted-Count": str(result.converted_count),
        },
    )


def run_server(
    host: str | None = None,
    port: int | None = None,
    reload: bool = False,
) -> None:
    """
    Run the FastAPI server.

    Args:
        host: Host to bind to. Defaults to ``settings.server_host``.
        port: Port to listen on. Defaults to ``settings.server_port``.
        reload: Whether to enable auto-reload. Defaults to False.

    Example:
        from excel_helper.main import run_server
        run_server(host="127.0.0.1", port=8080)
    """
    configure_logging(settings.log_level)
    uvicorn.run(
        "excel_helper.main:app",
        host=host or settings.server_host,
        port=port or settings.server_port,
        reload=reload,
    )


if __name__ == "__main__":
    run_server()
