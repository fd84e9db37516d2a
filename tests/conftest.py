"""Shared fixtures: fake upstream client, fake auth, controllable clock."""

import pytest

from config import ServiceConfig
from errors import SearchConsoleAPIError
from models import AuthState, Row
from services.cache import TTLCache
from services.search_console import SearchConsoleService


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeClient:
    """Stands in for SearchConsoleClient and counts API calls."""

    def __init__(self, rows=None, error: Exception | None = None, sites=None):
        self.rows = rows if rows is not None else []
        self.error = error
        self.sites = sites or []
        self.query_calls: list[tuple[str, dict]] = []
        self.list_calls = 0

    def query_search_analytics(self, site_url: str, body: dict) -> list[Row]:
        self.query_calls.append((site_url, body))
        if self.error:
            raise self.error
        return list(self.rows)

    def list_sites(self) -> list[str]:
        self.list_calls += 1
        if self.error:
            raise self.error
        return list(self.sites)


class FakeAuth:
    def __init__(self, client=None):
        self.client = client
        self.calls = 0

    @property
    def state(self) -> AuthState:
        return AuthState.READY if self.client else AuthState.FAILED

    def get_client(self):
        self.calls += 1
        return self.client

    def is_authenticated(self) -> bool:
        return self.client is not None


THREE_ROWS = [
    Row(page="https://example.com/a/", clicks=12, impressions=340, ctr=0.0353, position=4.21),
    Row(page="https://example.com/b/", clicks=5, impressions=120, ctr=0.0417, position=7.9),
    Row(page="https://example.com/c/", clicks=0, impressions=33, ctr=0.0, position=18.0),
]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return TTLCache(clock=clock)


@pytest.fixture
def client():
    return FakeClient(rows=THREE_ROWS)


@pytest.fixture
def config():
    return ServiceConfig(
        selected_property="https://example.com/",
        site_url="https://www.example.com",
    )


@pytest.fixture
def service(client, store, config):
    return SearchConsoleService(FakeAuth(client), store, config)


@pytest.fixture
def api_error():
    return SearchConsoleAPIError("Quota exceeded for quota metric 'Queries'", upstream_status=429)
