"""Process-wide service wiring, injected into routes via FastAPI Depends."""

from functools import lru_cache

from config import settings
from services.auth import ServiceAccountAuth
from services.cache import cache
from services.search_console import SearchConsoleService


@lru_cache(maxsize=1)
def get_auth() -> ServiceAccountAuth:
    return ServiceAccountAuth(
        key_path=settings.service_account_key_path,
        key_json=settings.service_account_key,
        timeout=settings.http_timeout,
    )


@lru_cache(maxsize=1)
def get_service() -> SearchConsoleService:
    return SearchConsoleService(get_auth(), cache, settings.service_config())
