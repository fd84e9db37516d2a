"""Result and query types shared by the Search Console services.

A performance lookup returns exactly one of:
    PerformanceData  — rows from the API (possibly empty)
    FetchError       — the upstream call failed; message kept for diagnostics
    UNAUTHENTICATED  — no usable credentials, nothing was looked up
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Union


class ErrorKind(str, Enum):
    UPSTREAM = "upstream"
    AUTH = "auth"


class AuthState(str, Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class QueryParams:
    property: str
    start_date: date
    end_date: date
    page_url: str | None = None
    action: str = "performance_data"

    def as_key_params(self) -> dict:
        """Plain scalar mapping used to build the cache key."""
        return {
            "property": self.property,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "page_url": self.page_url,
            "action": self.action,
        }


@dataclass(frozen=True)
class Row:
    page: str
    clicks: int = 0
    impressions: int = 0
    ctr: float = 0.0
    position: float = 0.0

    @classmethod
    def from_api(cls, raw: dict) -> "Row":
        """Build a row from a searchAnalytics.query response row."""
        keys = raw.get("keys") or [""]
        return cls(
            page=keys[0],
            clicks=int(raw.get("clicks", 0)),
            impressions=int(raw.get("impressions", 0)),
            ctr=float(raw.get("ctr", 0.0)),
            position=float(raw.get("position", 0.0)),
        )

    def to_dict(self) -> dict:
        return {
            "page": self.page,
            "clicks": self.clicks,
            "impressions": self.impressions,
            "ctr": self.ctr,
            "position": self.position,
        }


@dataclass(frozen=True)
class PerformanceData:
    rows: tuple[Row, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.rows


@dataclass(frozen=True)
class FetchError:
    kind: ErrorKind
    message: str
    status_code: int | None = None


class Unauthenticated:
    """Sentinel type: no authenticated client could be obtained."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNAUTHENTICATED"

    def __bool__(self) -> bool:
        return False


UNAUTHENTICATED = Unauthenticated()

PerformanceResult = Union[PerformanceData, FetchError, Unauthenticated]
