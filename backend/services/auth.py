"""Service account authentication for the Search Console API.

The provider is a small state machine:

    UNINITIALIZED --first access--> READY   (client built)
    UNINITIALIZED --first access--> FAILED  (no key, bad key or build error)

FAILED is sticky: accessors do not retry on every call. Call ``reload()``
after the credentials change to go back to UNINITIALIZED.
"""

import json
import logging
import os
import threading

from google.oauth2 import service_account

from models import AuthState
from services.gsc_client import WEBMASTERS_READONLY_SCOPE, SearchConsoleClient

logger = logging.getLogger(__name__)

REQUIRED_KEY_FIELDS = ("client_email", "private_key")


def load_key_info(key_path: str | None = None, key_json: str | None = None) -> dict | None:
    """Read and validate the service account JSON. File path takes priority."""
    content = None
    if key_path and os.path.isfile(key_path):
        with open(key_path, encoding="utf-8") as fh:
            content = fh.read()
    elif key_json:
        content = key_json

    if not content:
        return None

    try:
        info = json.loads(content)
    except ValueError:
        logger.error("Invalid service account JSON provided")
        return None
    if not isinstance(info, dict) or not all(info.get(field) for field in REQUIRED_KEY_FIELDS):
        logger.error("Service account JSON is missing client_email or private_key")
        return None
    return info


class ServiceAccountAuth:
    def __init__(
        self,
        key_path: str | None = None,
        key_json: str | None = None,
        timeout: float = 30.0,
        client_factory=None,
    ):
        self._key_path = key_path
        self._key_json = key_json
        self._timeout = timeout
        self._client_factory = client_factory or self._build_client
        self._client: SearchConsoleClient | None = None
        self._state = AuthState.UNINITIALIZED
        self._lock = threading.Lock()

    @property
    def state(self) -> AuthState:
        return self._state

    def _build_client(self, info: dict) -> SearchConsoleClient:
        credentials = service_account.Credentials.from_service_account_info(
            info, scopes=[WEBMASTERS_READONLY_SCOPE]
        )
        return SearchConsoleClient(credentials, timeout=self._timeout)

    def _initialize(self) -> None:
        info = load_key_info(self._key_path, self._key_json)
        if info is None:
            logger.info("No valid service account key configured")
            self._state = AuthState.FAILED
            return
        try:
            self._client = self._client_factory(info)
        except Exception as e:
            logger.error("Error initializing Search Console client: %s", e)
            self._client = None
            self._state = AuthState.FAILED
            return
        logger.info("Search Console client ready for %s", info["client_email"])
        self._state = AuthState.READY

    def get_client(self) -> SearchConsoleClient | None:
        """Return the client, building it on first access."""
        if self._state is AuthState.UNINITIALIZED:
            with self._lock:
                if self._state is AuthState.UNINITIALIZED:
                    self._initialize()
        return self._client if self._state is AuthState.READY else None

    def is_authenticated(self) -> bool:
        return self.get_client() is not None

    def reload(self, key_path: str | None = None, key_json: str | None = None) -> AuthState:
        """Drop the current client and re-read credentials."""
        with self._lock:
            if key_path is not None:
                self._key_path = key_path
            if key_json is not None:
                self._key_json = key_json
            if self._client is not None:
                self._client.close()
            self._client = None
            self._state = AuthState.UNINITIALIZED
        self.get_client()
        return self._state
