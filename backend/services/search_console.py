"""Cached access to Search Console performance data.

Every lookup goes auth check → cache key → cache → (miss) one API call.
Successful responses are cached for the long TTL; failures are cached for
the short TTL so a broken or quota-exhausted API is retried at most once
per window for each distinct query.
"""

import logging
from datetime import date, timedelta
from urllib.parse import urlparse

import httpx

from config import ALLOWED_DATE_RANGES, DEFAULT_DATE_RANGE, ServiceConfig
from errors import PropertyNotSelectedError, SearchConsoleAPIError, SiteURLNotConfiguredError
from models import (
    UNAUTHENTICATED,
    ErrorKind,
    FetchError,
    PerformanceData,
    PerformanceResult,
    QueryParams,
    Unauthenticated,
)
from services.cache import MISSING, generate_key

logger = logging.getLogger(__name__)

DOMAIN_PROPERTY_PREFIX = "sc-domain:"

# Search Console data lags by a few days.
REPORTING_DELAY_DAYS = 3


def _as_date(value: date | str) -> date:
    return value if isinstance(value, date) else date.fromisoformat(value)


def _strip_www(host: str) -> str:
    host = host.lower()
    return host[4:] if host.startswith("www.") else host


def default_date_range(days: int | None = None, today: date | None = None) -> tuple[date, date]:
    """Return (start, end) ending REPORTING_DELAY_DAYS before today."""
    if days not in ALLOWED_DATE_RANGES:
        days = DEFAULT_DATE_RANGE
    today = today or date.today()
    end = today - timedelta(days=REPORTING_DELAY_DAYS)
    return end - timedelta(days=days), end


def filter_sites(site_urls: list[str], site_url: str) -> list[str]:
    """Keep the properties that belong to ``site_url``'s base domain.

    Handles domain properties (sc-domain:example.com) and URL-prefix
    properties (https://www.example.com/). A leading www. is ignored on
    both sides; the comparison is an exact, case-insensitive match.
    """
    wp_host = urlparse(site_url).hostname or ""
    base_domain = _strip_www(wp_host)
    if not base_domain:
        return []

    matched = []
    for gsc_url in site_urls:
        if gsc_url.lower().startswith(DOMAIN_PROPERTY_PREFIX):
            if gsc_url[len(DOMAIN_PROPERTY_PREFIX):].lower() == base_domain:
                matched.append(gsc_url)
            continue

        gsc_host = urlparse(gsc_url).hostname
        if gsc_host and _strip_www(gsc_host) == base_domain:
            matched.append(gsc_url)
    return matched


def build_query_body(start_date: date, end_date: date, page_url: str | None, row_limit: int) -> dict:
    body = {
        "startDate": start_date.isoformat(),
        "endDate": end_date.isoformat(),
        "dimensions": ["page"],
        "rowLimit": row_limit,
    }
    if page_url:
        body["dimensionFilterGroups"] = [
            {"filters": [{"dimension": "page", "operator": "equals", "expression": page_url}]}
        ]
    return body


def _to_fetch_error(exc: Exception, action: str) -> FetchError:
    if not isinstance(exc, (SearchConsoleAPIError, httpx.HTTPError)):
        logger.exception("General error %s: %s", action, exc)
        return FetchError(ErrorKind.UPSTREAM, str(exc))

    status = getattr(exc, "upstream_status", None)
    logger.error("Search Console API error %s: (%s) %s", action, status, exc)
    if isinstance(exc, SearchConsoleAPIError) and exc.is_auth_error:
        logger.warning(
            "Authentication error (%s) %s. Check the service account key and its property permissions.",
            status, action,
        )
        return FetchError(ErrorKind.AUTH, str(exc), status)
    return FetchError(ErrorKind.UPSTREAM, str(exc), status)


class SearchConsoleService:
    def __init__(self, auth, store, config: ServiceConfig | None = None):
        self.auth = auth
        self.store = store
        self.config = config or ServiceConfig()

    def _store_result(self, key: str, value, ttl_seconds: int) -> None:
        try:
            stored = self.store.set(key, value, ttl_seconds)
        except Exception as e:
            logger.warning("Cache write failed for key %s: %s", key, e)
            return
        if not stored:
            logger.warning("Cache write rejected for key %s", key)

    def get_performance_data(
        self,
        property: str,
        start_date: date | str,
        end_date: date | str,
        page_url: str | None = None,
    ) -> PerformanceResult:
        """Return performance rows for a property, optionally for one page.

        Returns UNAUTHENTICATED without touching the cache when no client is
        available. Never raises for upstream or cache failures.
        """
        client = self.auth.get_client()
        if client is None:
            return UNAUTHENTICATED

        params = QueryParams(property, _as_date(start_date), _as_date(end_date), page_url or None)
        key = generate_key(params.as_key_params())
        logger.debug("Checking cache for key %s (params=%s)", key, params.as_key_params())

        try:
            cached = self.store.get(key)
        except Exception as e:
            logger.warning("Cache read failed for key %s: %s", key, e)
            cached = MISSING
        if cached is not MISSING:
            logger.debug("Cache HIT for key %s", key)
            return cached
        logger.debug("Cache MISS for key %s", key)

        body = build_query_body(params.start_date, params.end_date, params.page_url, self.config.row_limit)
        try:
            logger.info(
                "Calling searchAnalytics.query for %s page=%s (%s to %s)",
                property, params.page_url, params.start_date, params.end_date,
            )
            rows = client.query_search_analytics(property, body)
        except Exception as e:
            error = _to_fetch_error(e, "fetching performance data")
            self._store_result(key, error, self.config.error_ttl_seconds)
            return error

        result = PerformanceData(tuple(rows[: self.config.row_limit]))
        self._store_result(key, result, self.config.cache_ttl_seconds)
        logger.info("API call successful (%d rows), cached under %s", len(result.rows), key)
        return result

    def get_performance_for_page(
        self, page_url: str | None = None, days: int | None = None, today: date | None = None
    ) -> tuple[PerformanceResult, date, date]:
        """Lookup for the configured property over the default date range."""
        if not self.config.selected_property:
            raise PropertyNotSelectedError()
        start, end = default_date_range(days or self.config.date_range, today)
        result = self.get_performance_data(self.config.selected_property, start, end, page_url)
        return result, start, end

    def get_filtered_sites(self) -> list[str] | FetchError | Unauthenticated:
        """List properties the credentials can see that match the site URL."""
        if not self.config.site_url:
            raise SiteURLNotConfiguredError()
        client = self.auth.get_client()
        if client is None:
            return UNAUTHENTICATED

        logger.info("Fetching site list from API")
        try:
            all_sites = client.list_sites()
        except Exception as e:
            return _to_fetch_error(e, "fetching sites")

        matched = filter_sites(all_sites, self.config.site_url)
        logger.info("Fetched site list: %d of %d properties match", len(matched), len(all_sites))
        return matched

    def clear_cache(self) -> int:
        removed = self.store.clear_all()
        logger.info("Cleared %d cached entries", removed)
        return removed

    def cache_count(self) -> int:
        return self.store.count()
