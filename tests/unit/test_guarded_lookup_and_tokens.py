"""Tests for LookupGuard and Firebase ID token verification."""

import asyncio

import pytest
from google.auth import exceptions as google_auth_exceptions

from hse_approvals.application.services import LookupGuard
from hse_approvals.core.config import get_settings
from hse_approvals.domain.exceptions import StoreUnavailableError
from hse_approvals.infrastructure.security import firebase_tokens


class TestLookupGuard:
    async def test_success_passes_value_through(self) -> None:
        guard = LookupGuard(timeout=1)

        async def lookup() -> int:
            return 7

        assert await guard.run("position_level:Manager", lookup, None) == 7
        assert guard.degraded == ()

    async def test_failures_return_fallback_and_are_named_once(self) -> None:
        guard = LookupGuard(timeout=0.01)

        async def unavailable():
            raise StoreUnavailableError("users/U1", "HTTP 500")

        async def slow():
            await asyncio.sleep(1)

        assert await guard.run("directory_user:U1", unavailable, None) is None
        assert await guard.run("directory_user:U1", slow, None) is None
        assert await guard.run("function_name:hse", slow, "fallback") == "fallback"
        assert guard.degraded == ("directory_user:U1", "function_name:hse")

    async def test_cancellation_is_not_absorbed(self) -> None:
        guard = LookupGuard(timeout=1)

        async def cancelled():
            raise asyncio.CancelledError

        with pytest.raises(asyncio.CancelledError):
            await guard.run("approval_state", cancelled, None)
        assert guard.degraded == ()


class TestVerifyFirebaseIdToken:
    @pytest.fixture(autouse=True)
    def project(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("FIREBASE_PROJECT_ID", "demo-hse")
        get_settings.cache_clear()
        yield
        get_settings.cache_clear()

    def test_returns_claims(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls = []

        def verify(token, request, audience=None):
            calls.append((token, audience))
            return {"sub": "U1", "aud": audience}

        monkeypatch.setattr(firebase_tokens.id_token, "verify_firebase_token", verify)

        claims = firebase_tokens.verify_firebase_id_token("tok")

        assert claims["sub"] == "U1"
        assert calls == [("tok", "demo-hse")]

    def test_auth_error_becomes_value_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def verify(token, request, audience=None):
            raise google_auth_exceptions.GoogleAuthError("Token expired")

        monkeypatch.setattr(firebase_tokens.id_token, "verify_firebase_token", verify)

        with pytest.raises(ValueError, match="Could not verify"):
            firebase_tokens.verify_firebase_id_token("tok")

    def test_missing_subject(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(
            firebase_tokens.id_token, "verify_firebase_token", lambda *a, **kw: {"sub": ""}
        )
        with pytest.raises(ValueError, match="no subject"):
            firebase_tokens.verify_firebase_id_token("tok")

    def test_requires_project_id(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("FIREBASE_PROJECT_ID")
        get_settings.cache_clear()
        with pytest.raises(ValueError, match="FIREBASE_PROJECT_ID"):
            firebase_tokens.verify_firebase_id_token("tok")
