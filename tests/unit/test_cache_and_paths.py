"""Tests for cache keys, CacheService, database paths and settings validation."""

import json
from unittest.mock import AsyncMock

import pytest
import redis.asyncio as redis
from pydantic import ValidationError

from hse_approvals.core.config import Settings
from hse_approvals.domain.exceptions import InvalidPathComponentError
from hse_approvals.infrastructure.cache import (
    CacheService,
    flow_definition_key,
    function_name_key,
    org_level_key,
)
from hse_approvals.infrastructure.firebase import paths


class TestCacheKeys:
    def test_formats(self) -> None:
        assert flow_definition_key("ACME", "recruitment") == "flow:ACME:recruitment"
        assert flow_definition_key(None, "access") == "flow:_global:access"
        assert org_level_key("Manager") == "org_level:Manager"
        assert function_name_key("ACME", "hse") == "function:ACME:hse"

    @pytest.mark.parametrize(
        "build",
        [
            lambda: flow_definition_key("a:b", "access"),
            lambda: org_level_key("x:y"),
            lambda: function_name_key("ACME", "f:1"),
        ],
    )
    def test_separator_rejected(self, build) -> None:
        with pytest.raises(ValueError, match="separator"):
            build()


class TestCacheService:
    def _service(self) -> tuple[CacheService, AsyncMock]:
        client = AsyncMock()
        return CacheService(redis_client=client), client

    async def test_get_deserializes(self) -> None:
        service, client = self._service()
        client.get.return_value = json.dumps({"value": None})
        assert await service.get("flow:_global:staff") == {"value": None}

    async def test_get_miss(self) -> None:
        service, client = self._service()
        client.get.return_value = None
        assert await service.get("missing") is None

    async def test_set_uses_ttl(self) -> None:
        service, client = self._service()
        assert await service.set("k", {"value": 3}, ttl=900)
        client.setex.assert_awaited_once_with("k", 900, '{"value": 3}')

    async def test_redis_error_is_a_miss(self) -> None:
        service, client = self._service()
        client.get.side_effect = redis.RedisError("bad")
        assert await service.get("k") is None

    async def test_unavailable_without_client(self) -> None:
        service = CacheService()
        assert not service.is_available()
        assert await service.get("k") is None
        assert await service.set("k", 1) is False

    async def test_undecodable_entry_is_dropped(self) -> None:
        service, client = self._service()
        client.get.return_value = "{not json"
        assert await service.get("flow:ACME:staff") is None
        client.delete.assert_awaited_once_with("flow:ACME:staff")

    async def test_disconnect(self) -> None:
        service, client = self._service()
        await service.disconnect()
        client.aclose.assert_awaited_once()
        assert not service.is_available()


class TestPaths:
    def test_builders(self) -> None:
        assert paths.company_flow_path("ACME", "recruitment") == "companies/ACME/approvalFlows/recruitment"
        assert paths.global_flow_path("access") == "approvalFlows/access"
        assert paths.company_user_path("ACME", "U1") == "companies/ACME/users/U1"
        assert paths.global_user_path("U1") == "users/U1"
        assert paths.company_function_path("ACME", "hse") == "companies/ACME/functions/hse"
        assert paths.position_level_path("Manager") == "organizationStructure/positions/Manager/level"
        assert paths.approval_state_path("recruit", "R1") == "recruit/R1/approvals"

    @pytest.mark.parametrize("value", ["", "  ", "a/b", "a.b", "$x", "#1", "[0]", "tab\there"])
    def test_invalid_components(self, value: str) -> None:
        with pytest.raises(InvalidPathComponentError):
            paths.validate_path_component("user_id", value)

    def test_error_names_field(self) -> None:
        with pytest.raises(InvalidPathComponentError) as exc_info:
            paths.subject_path("recruit", "../R1")
        assert exc_info.value.details == {"field": "subject_id"}


class TestSettings:
    def test_database_url_normalized(self) -> None:
        settings = Settings(firebase_database_url="https://demo.firebaseio.com/", _env_file=None)
        assert settings.firebase_database_url == "https://demo.firebaseio.com"

    def test_database_url_requires_https(self) -> None:
        with pytest.raises(ValidationError, match="https"):
            Settings(firebase_database_url="http://demo.firebaseio.com", _env_file=None)

    def test_timeout_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            Settings(store_read_timeout_seconds=0, _env_file=None)

    def test_default_subject_collections(self) -> None:
        settings = Settings(_env_file=None)
        assert settings.subject_collections["recruitment"] == "recruit"
