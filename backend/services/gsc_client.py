"""Google Search Console (Webmasters v3) REST client.

Endpoints:
    GET  https://www.googleapis.com/webmasters/v3/sites
    POST https://www.googleapis.com/webmasters/v3/sites/{siteUrl}/searchAnalytics/query

Auth:
    Service account credentials → OAuth access token sent as Bearer
    Scope: https://www.googleapis.com/auth/webmasters.readonly
"""

import logging
from urllib.parse import quote

import httpx
from google.auth.exceptions import GoogleAuthError, RefreshError
from google.auth.transport.requests import Request as GoogleAuthRequest

from errors import SearchConsoleAPIError
from models import Row

logger = logging.getLogger(__name__)

API_BASE_URL = "https://www.googleapis.com/webmasters/v3"
WEBMASTERS_READONLY_SCOPE = "https://www.googleapis.com/auth/webmasters.readonly"


def _error_message(resp: httpx.Response) -> str:
    """Pull the human message out of a Google API error body."""
    try:
        body = resp.json()
    except ValueError:
        return resp.text or resp.reason_phrase
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return error["message"]
    return resp.text or resp.reason_phrase


class SearchConsoleClient:
    """Thin synchronous wrapper around the two API calls we need."""

    def __init__(self, credentials, timeout: float = 30.0, http: httpx.Client | None = None):
        self._credentials = credentials
        self._http = http or httpx.Client(base_url=API_BASE_URL, timeout=timeout)

    def _token(self) -> str:
        # Service account tokens last ~1h; refresh lazily when stale.
        if not self._credentials.valid:
            try:
                self._credentials.refresh(GoogleAuthRequest())
            except RefreshError as e:
                raise SearchConsoleAPIError(f"Could not obtain access token: {e}", upstream_status=401) from e
            except GoogleAuthError as e:
                raise SearchConsoleAPIError(f"Token refresh failed: {e}") from e
        return self._credentials.token

    def _request(self, method: str, path: str, **kwargs) -> dict:
        headers = {"Authorization": f"Bearer {self._token()}"}
        try:
            resp = self._http.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            raise SearchConsoleAPIError(f"Search Console request failed: {e}") from e
        if resp.is_error:
            raise SearchConsoleAPIError(_error_message(resp), upstream_status=resp.status_code)
        if not resp.content:
            return {}
        try:
            data = resp.json()
        except ValueError as e:
            raise SearchConsoleAPIError(f"Unexpected non-JSON response from Search Console (HTTP {resp.status_code})") from e
        if not isinstance(data, dict):
            raise SearchConsoleAPIError(f"Unexpected response shape from Search Console: {type(data).__name__}")
        return data

    def list_sites(self) -> list[str]:
        """Return every property URL the credentials can see."""
        data = self._request("GET", "/sites")
        return [entry["siteUrl"] for entry in data.get("siteEntry", []) if entry.get("siteUrl")]

    def query_search_analytics(self, site_url: str, body: dict) -> list[Row]:
        """Run searchAnalytics.query for a property. Rows keep API order."""
        path = f"/sites/{quote(site_url, safe='')}/searchAnalytics/query"
        logger.info(
            "Querying searchAnalytics: %s (%s to %s, limit=%s)",
            site_url, body.get("startDate"), body.get("endDate"), body.get("rowLimit"),
        )
        data = self._request("POST", path, json=body)
        return [Row.from_api(raw) for raw in data.get("rows", [])]

    def close(self) -> None:
        self._http.close()
