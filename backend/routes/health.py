"""Health and readiness check routes."""

import logging

from fastapi import APIRouter, Depends

from config import settings
from dependencies import get_service
from services.search_console import SearchConsoleService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/ready")
def ready() -> dict:
    """Lightweight readiness check — no external calls."""
    return {"status": "ok", "service": "gsc-data-api", "commit": settings.git_sha}


@router.get("/health")
def health(service: SearchConsoleService = Depends(get_service)) -> dict:
    """Report auth state and cache size. Builds the API client if needed, but never calls the API."""
    authenticated = service.auth.is_authenticated()
    return {
        "status": "ok" if authenticated else "degraded",
        "service": "gsc-data-api",
        "commit": settings.git_sha,
        "auth": service.auth.state.value,
        "cache_entries": service.cache_count(),
    }
