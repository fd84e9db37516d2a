"""Performance data routes — what the admin bar and post list columns consume.

GET /performance        → summary for one page over the configured range
GET /performance/query  → raw cached lookup for an explicit property/range
"""

import logging
from datetime import date

from fastapi import APIRouter, Depends, Query

from dependencies import get_service
from services.presenter import summarize
from services.search_console import SearchConsoleService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/performance")
def page_performance(
    page_url: str | None = Query(None),
    days: int | None = Query(None),
    service: SearchConsoleService = Depends(get_service),
) -> dict:
    """Summary for a page (or the whole property when page_url is omitted)."""
    result, start, end = service.get_performance_for_page(page_url, days)
    config = service.config
    return {
        "property": config.selected_property,
        "page_url": page_url,
        "start_date": start.isoformat(),
        "end_date": end.isoformat(),
        "columns": {
            "show_extra_columns": config.show_extra_columns,
            "combine_clicks_impressions": config.combine_clicks_impressions,
        },
        **summarize(result),
    }


@router.get("/performance/query")
def query_performance(
    property: str = Query(..., min_length=1),
    start_date: date = Query(...),
    end_date: date = Query(...),
    page_url: str | None = Query(None),
    service: SearchConsoleService = Depends(get_service),
) -> dict:
    result = service.get_performance_data(property, start_date, end_date, page_url)
    return {
        "property": property,
        "page_url": page_url,
        "start_date": start_date.isoformat(),
        "end_date": end_date.isoformat(),
        **summarize(result),
    }
