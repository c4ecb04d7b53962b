from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from qash.logging.logger import Log
from qash.storage.exceptions import StoreError


class ApiError(Exception):
    """Request-level failure rendered as ``{"error": ..., "details": ...}``."""

    def __init__(self, status_code: int, error: str, details: str | None = None) -> None:
        super().__init__(error)
        self.status_code = status_code
        self.error = error
        self.details = details


def error_body(request: Request, error: str, details: str | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"error": error}
    if details and request.app.state.settings.app_env == "dev":
        body["details"] = details
    return body


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ApiError)
    async def handle_api_error(request: Request, exc: ApiError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(request, exc.error, exc.details),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content=error_body(request, "Invalid request", str(exc.errors())),
        )

    @app.exception_handler(StoreError)
    async def handle_store_error(request: Request, exc: StoreError) -> JSONResponse:
        Log.error(f"Storage error: {exc}", path=request.url.path)
        return JSONResponse(
            status_code=500,
            content=error_body(request, "Storage unavailable", str(exc)),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        Log.error(f"Server error: {exc}", path=request.url.path)
        return JSONResponse(
            status_code=500,
            content=error_body(request, "Internal server error", str(exc)),
        )
