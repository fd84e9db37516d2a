"""FastAPI application entry point for the Search Console data API."""

import logging

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from config import settings
from errors import register_error_handlers
from logs import configure_logging

configure_logging(settings.is_production, settings.debug_log_path)

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(title="Search Console Data API", version="1.0.0")

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Security headers
    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response: Response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        if settings.is_production:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response

    # Centralized error handlers
    register_error_handlers(app)

    from routes.admin import router as admin_router
    from routes.health import router as health_router
    from routes.performance import router as performance_router

    app.include_router(health_router)
    app.include_router(performance_router)
    app.include_router(admin_router)

    @app.on_event("startup")
    async def _validate_config() -> None:
        missing = settings.validate()
        if missing:
            logger.warning("Missing env vars (Search Console data unavailable): %s", ", ".join(missing))

    return app


app = create_app()
