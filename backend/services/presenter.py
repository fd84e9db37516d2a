"""Turn a performance result into the labeled summary the admin UI shows."""

import html

from models import FetchError, PerformanceData, PerformanceResult, Unauthenticated

STATUS_OK = "ok"
STATUS_NO_DATA = "no_data"
STATUS_ERROR = "error"
STATUS_NOT_CONNECTED = "not_connected"


def summarize(result: PerformanceResult) -> dict:
    """Summarize the first row (a page-filtered query returns at most one)."""
    if isinstance(result, Unauthenticated):
        return {"status": STATUS_NOT_CONNECTED, "label": "Not connected"}

    if isinstance(result, FetchError):
        return {
            "status": STATUS_ERROR,
            "label": "API Error",
            "error_kind": result.kind.value,
            "message": html.escape(result.message),
        }

    if not isinstance(result, PerformanceData):
        raise TypeError(f"Unexpected result type: {type(result).__name__}")

    if result.is_empty:
        return {"status": STATUS_NO_DATA, "label": "No Data", "rows": []}

    row = result.rows[0]
    return {
        "status": STATUS_OK,
        "label": f"{row.clicks:,} Clicks / {row.impressions:,} Impr.",
        "clicks": row.clicks,
        "impressions": row.impressions,
        "ctr_percent": round(row.ctr * 100, 2),
        "position": round(row.position, 1),
        "rows": [r.to_dict() for r in result.rows],
    }
