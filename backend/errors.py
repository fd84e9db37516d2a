"""Custom exceptions and centralized FastAPI error handlers."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class GSCDataError(Exception):
    """Base exception with HTTP status code."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code


class PropertyNotSelectedError(GSCDataError):
    def __init__(self):
        super().__init__(
            "No Search Console property selected. Set GSCD_SELECTED_PROPERTY.",
            status_code=409,
        )


class SiteURLNotConfiguredError(GSCDataError):
    def __init__(self):
        super().__init__("Site URL is not configured. Set GSCD_SITE_URL.", status_code=409)


class SearchConsoleAPIError(GSCDataError):
    """Error response from the Search Console API.

    ``upstream_status`` keeps the API's own code (401, 403, 429, ...);
    the HTTP status reported to our callers is always 502.
    """

    def __init__(self, message: str, upstream_status: int | None = None):
        super().__init__(message, status_code=502)
        self.upstream_status = upstream_status

    @property
    def is_auth_error(self) -> bool:
        return self.upstream_status in (401, 403)


def register_error_handlers(app: FastAPI) -> None:
    """Register centralized exception handlers on the FastAPI app."""

    @app.exception_handler(GSCDataError)
    async def handle_gscd_error(_request: Request, exc: GSCDataError):
        return JSONResponse({"error": str(exc)}, status_code=exc.status_code)

    @app.exception_handler(ValueError)
    async def handle_value_error(_request: Request, exc: ValueError):
        return JSONResponse({"error": str(exc)}, status_code=400)

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception):
        logger.exception("Unhandled error: %s", exc)
        return JSONResponse(
            {"error": "Internal server error"},
            status_code=500,
        )
