"""Administrative routes: property discovery, cache and debug log maintenance."""

import html
import logging

from fastapi import APIRouter, Depends

from config import settings
from dependencies import get_service
from logs import clear_debug_log
from models import FetchError, Unauthenticated
from services.search_console import SearchConsoleService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin")


@router.get("/sites")
def list_sites(service: SearchConsoleService = Depends(get_service)) -> dict:
    """Properties visible to the service account that match this site."""
    result = service.get_filtered_sites()
    if isinstance(result, Unauthenticated):
        return {"status": "not_connected", "sites": []}
    if isinstance(result, FetchError):
        return {"status": "error", "message": html.escape(result.message), "sites": []}
    return {
        "status": "ok",
        "sites": result,
        "selected_property": service.config.selected_property,
    }


@router.get("/cache")
def cache_status(service: SearchConsoleService = Depends(get_service)) -> dict:
    return {"entries": service.cache_count()}


@router.delete("/cache")
def clear_cache(service: SearchConsoleService = Depends(get_service)) -> dict:
    return {"cleared": service.clear_cache()}


@router.delete("/log")
def clear_log() -> dict:
    cleared = clear_debug_log(settings.debug_log_path)
    if cleared:
        logger.info("Debug log cleared")
    return {"cleared": cleared}
