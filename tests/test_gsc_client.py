"""Tests for the Search Console REST client using httpx.MockTransport."""

import json
from unittest.mock import MagicMock, patch

import httpx
import pytest
from google.auth.exceptions import RefreshError, TransportError

from errors import SearchConsoleAPIError
from models import Row
from services.gsc_client import API_BASE_URL, SearchConsoleClient


def _credentials(valid: bool = True, token: str = "tok-123"):
    creds = MagicMock()
    creds.valid = valid
    creds.token = token
    return creds


def _client(handler, credentials=None) -> SearchConsoleClient:
    http = httpx.Client(base_url=API_BASE_URL, transport=httpx.MockTransport(handler))
    return SearchConsoleClient(credentials or _credentials(), http=http)


class TestListSites:
    def test_returns_site_urls_with_bearer_token(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers["Authorization"]
            seen["path"] = request.url.path
            return httpx.Response(200, json={"siteEntry": [
                {"siteUrl": "sc-domain:example.com", "permissionLevel": "siteOwner"},
                {"siteUrl": "https://other.com/", "permissionLevel": "siteRestrictedUser"},
            ]})

        sites = _client(handler).list_sites()

        assert sites == ["sc-domain:example.com", "https://other.com/"]
        assert seen["auth"] == "Bearer tok-123"
        assert seen["path"] == "/webmasters/v3/sites"

    def test_no_sites(self):
        assert _client(lambda r: httpx.Response(200, json={})).list_sites() == []


class TestQuerySearchAnalytics:
    def test_posts_body_and_parses_rows(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["raw_path"] = request.url.raw_path
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"rows": [
                {"keys": ["https://example.com/a/"], "clicks": 12, "impressions": 340, "ctr": 0.035, "position": 4.2},
            ], "responseAggregationType": "byPage"})

        body = {"startDate": "2024-01-01", "endDate": "2024-01-31", "dimensions": ["page"], "rowLimit": 10}
        rows = _client(handler).query_search_analytics("https://example.com/", body)

        assert rows == [Row("https://example.com/a/", 12, 340, 0.035, 4.2)]
        assert seen["method"] == "POST"
        assert b"/sites/https%3A%2F%2Fexample.com%2F/searchAnalytics/query" in seen["raw_path"]
        assert seen["body"] == body

    def test_no_rows_key_means_empty(self):
        client = _client(lambda r: httpx.Response(200, json={"responseAggregationType": "byPage"}))
        assert client.query_search_analytics("sc-domain:example.com", {}) == []


class TestErrors:
    def test_google_error_body(self):
        def handler(request):
            return httpx.Response(403, json={"error": {
                "code": 403,
                "message": "User does not have sufficient permission for site 'https://example.com/'.",
                "status": "PERMISSION_DENIED",
            }})

        with pytest.raises(SearchConsoleAPIError) as exc_info:
            _client(handler).list_sites()

        assert exc_info.value.upstream_status == 403
        assert exc_info.value.is_auth_error
        assert "sufficient permission" in str(exc_info.value)

    def test_non_json_error_body(self):
        with pytest.raises(SearchConsoleAPIError) as exc_info:
            _client(lambda r: httpx.Response(503, text="Service Unavailable")).list_sites()
        assert exc_info.value.upstream_status == 503
        assert not exc_info.value.is_auth_error

    def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused")

        with pytest.raises(SearchConsoleAPIError) as exc_info:
            _client(handler).list_sites()
        assert exc_info.value.upstream_status is None


class TestTokenRefresh:
    def test_refreshes_stale_token(self):
        creds = _credentials(valid=False)
        with patch("services.gsc_client.GoogleAuthRequest"):
            _client(lambda r: httpx.Response(200, json={}), creds).list_sites()
        creds.refresh.assert_called_once()

    def test_refresh_failure_is_auth_error(self):
        creds = _credentials(valid=False)
        creds.refresh.side_effect = RefreshError("invalid_grant: Invalid JWT Signature.")
        with patch("services.gsc_client.GoogleAuthRequest"):
            with pytest.raises(SearchConsoleAPIError) as exc_info:
                _client(lambda r: httpx.Response(200, json={}), creds).list_sites()
        assert exc_info.value.upstream_status == 401

    def test_refresh_transport_failure_is_api_error(self):
        creds = _credentials(valid=False)
        creds.refresh.side_effect = TransportError("network unreachable")
        with patch("services.gsc_client.GoogleAuthRequest"):
            with pytest.raises(SearchConsoleAPIError) as exc_info:
                _client(lambda r: httpx.Response(200, json={}), creds).list_sites()
        assert exc_info.value.upstream_status is None
        assert "network unreachable" in str(exc_info.value)


class TestUnexpectedBodies:
    def test_non_json_success_body(self):
        client = _client(lambda r: httpx.Response(200, text="<html>proxy</html>"))
        with pytest.raises(SearchConsoleAPIError) as exc_info:
            client.query_search_analytics("https://example.com/", {})
        assert "non-JSON" in str(exc_info.value)

    def test_non_object_json_body(self):
        client = _client(lambda r: httpx.Response(200, json=["not", "an", "object"]))
        with pytest.raises(SearchConsoleAPIError):
            client.list_sites()
