import logging
import threading
from typing import Any, Optional

import requests

from app.domain.exceptions import ConfigurationError, FetchError

logger = logging.getLogger(__name__)

Row = dict[str, Any]


class PostgRESTHandler:
    """Thread-safe PostgREST (Supabase REST) client decoupled from Flask globals.

    One ``requests.Session`` is kept per thread. Every transport, HTTP or
    decoding failure surfaces as ``FetchError``.
    """

    def __init__(self, base_url: str, api_key: str, timeout: float = 10.0) -> None:
        if not base_url:
            raise ConfigurationError("Supabase URL is not configured (SMARTFARM_SUPABASE_URL)")
        if not api_key:
            raise ConfigurationError("Supabase API key is not configured (SMARTFARM_SUPABASE_KEY)")
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout
        self._local = threading.local()
        self._sessions: list[requests.Session] = []
        self._sessions_lock = threading.Lock()

    # --- Lifecycle ------------------------------------------------------------
    @property
    def session(self) -> requests.Session:
        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            session.headers.update(
                {
                    "apikey": self._api_key,
                    "Authorization": f"Bearer {self._api_key}",
                    "Accept": "application/json",
                }
            )
            self._local.session = session
            with self._sessions_lock:
                self._sessions.append(session)
        return session

    def close(self) -> None:
        """Close the sessions of every thread that used this handler."""
        with self._sessions_lock:
            sessions, self._sessions = self._sessions, []
            self._local = threading.local()
        for session in sessions:
            try:
                session.close()
            except Exception as exc:
                logger.warning("Error closing backend session: %s", exc)

    def table_url(self, table: str) -> str:
        return f"{self._base_url}/rest/v1/{table}"

    # --- Verbs ----------------------------------------------------------------
    def select(self, table: str, params: Optional[dict[str, str]] = None) -> list[Row]:
        """GET rows of ``table`` filtered by PostgREST query ``params``."""
        response = self._request("GET", table, params=params)
        try:
            payload = response.json()
        except ValueError as exc:
            raise FetchError(f"Malformed response from {table}", detail={"table": table}) from exc
        if not isinstance(payload, list):
            raise FetchError(f"Unexpected response shape from {table}", detail={"table": table})
        return payload

    def insert(self, table: str, row: Row) -> None:
        self._request("POST", table, json=row, headers={"Prefer": "return=minimal"})

    def update(self, table: str, filters: dict[str, str], values: Row) -> None:
        self._request("PATCH", table, params=filters, json=values, headers={"Prefer": "return=minimal"})

    def _request(self, method: str, table: str, **kwargs: Any) -> requests.Response:
        url = self.table_url(table)
        try:
            response = self.session.request(method, url, timeout=self._timeout, **kwargs)
        except requests.RequestException as exc:
            logger.debug("%s %s failed: %s", method, url, exc)
            raise FetchError(f"Could not reach backend table {table}", detail={"table": table}) from exc

        if not response.ok:
            logger.debug("%s %s returned %s: %s", method, url, response.status_code, response.text[:200])
            raise FetchError(
                f"Backend returned HTTP {response.status_code} for {table}",
                detail={"table": table, "status": response.status_code},
            )
        return response
