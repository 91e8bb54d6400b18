"""Thin Firebase Realtime Database REST client (no firebase-admin).

Uses google-auth for service account tokens and the Realtime Database REST
API (GET {database_url}/{path}.json). Read-only: the approval write-side
lives in the web client.
All HTTP calls use httpx.AsyncClient so they do not block the event loop.
"""

from __future__ import annotations

import asyncio
from typing import Any
from urllib.parse import quote

import httpx
from google.auth import exceptions as google_auth_exceptions

from hse_approvals.domain.exceptions import StoreUnavailableError

_RTDB_SCOPES = [
    "https://www.googleapis.com/auth/firebase.database",
    "https://www.googleapis.com/auth/userinfo.email",
]


def _get_credentials(key_dict: dict):
    """Return google.oauth2.service_account.Credentials for the Realtime Database."""
    from google.oauth2 import service_account

    return service_account.Credentials.from_service_account_info(
        key_dict, scopes=_RTDB_SCOPES
    )


def _get_access_token(credentials) -> str:
    from google.auth.transport.requests import Request

    if not credentials.valid:
        credentials.refresh(Request())
    return credentials.token


class DatabaseReference:
    """Reference to a single node; matches the firebase-admin db.Reference style."""

    def __init__(self, client: "RealtimeDatabaseRESTClient", path: str):
        self._client = client
        self._path = path.strip("/")

    @property
    def path(self) -> str:
        return self._path

    async def get(self) -> Any:
        """Fetch the node's JSON value; None when the node does not exist."""
        return await self._client.get_json(self._path)


class RealtimeDatabaseRESTClient:
    """Lightweight Realtime Database client using the REST API."""

    def __init__(
        self,
        database_url: str,
        credentials=None,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._base = database_url.rstrip("/")
        self._credentials = credentials
        self._http = (
            http_client if http_client is not None else httpx.AsyncClient(timeout=timeout)
        )
        self._owns_http = http_client is None

    async def aclose(self) -> None:
        """Close the HTTP client only if we created it (do not close injected client)."""
        if self._owns_http:
            await self._http.aclose()

    async def get_token(self) -> str | None:
        """Return a valid access token; refreshes in thread pool to avoid blocking.

        None when the client has no credentials (emulator or public rules).
        """
        if self._credentials is None:
            return None
        return await asyncio.to_thread(_get_access_token, self._credentials)

    def reference(self, path: str) -> DatabaseReference:
        return DatabaseReference(self, path)

    async def get_json(self, path: str) -> Any:
        """GET a node. Transport errors and non-2xx responses raise StoreUnavailableError."""
        url = f"{self._base}/{quote(path, safe='/')}.json"
        headers = {"Accept": "application/json"}
        try:
            token = await self.get_token()
        except google_auth_exceptions.GoogleAuthError as e:
            raise StoreUnavailableError(path, f"token refresh failed: {e}") from e
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            resp = await self._http.get(url, headers=headers)
        except httpx.TimeoutException as e:
            raise StoreUnavailableError(path, "timeout") from e
        except httpx.HTTPError as e:
            raise StoreUnavailableError(path, type(e).__name__) from e

        if not resp.is_success:
            raise StoreUnavailableError(path, f"HTTP {resp.status_code}")
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise StoreUnavailableError(path, "response is not valid JSON") from e
