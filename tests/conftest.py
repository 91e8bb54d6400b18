"""Pytest configuration and fixtures for hse-approvals.

Resolver and API tests run against an in-memory data source holding raw
records in the same shape the Realtime Database stores them. HTTP tests use
hse_approvals.main.create_app with the data source dependency overridden.
"""

import asyncio
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from hse_approvals.api.v1.dependencies import get_data_source
from hse_approvals.application.services import ApprovalFlowResolver
from hse_approvals.core.config import get_settings
from hse_approvals.domain.entities import (
    ApprovalState,
    ApprovalSubject,
    DirectoryUser,
    FlowDefinition,
)
from hse_approvals.domain.enums import FlowScope
from hse_approvals.main import create_app


class InMemoryApprovalDataSource:
    """IApprovalDataSource over plain dicts.

    failures maps a lookup name ("flow_definition.company", "approval_state",
    "directory_user", ...) to the exception it should raise; delays maps a
    lookup name to seconds to sleep first.
    """

    def __init__(self) -> None:
        self.company_flows: dict[tuple[str, str], dict[str, Any]] = {}
        self.global_flows: dict[str, dict[str, Any]] = {}
        self.company_users: dict[tuple[str, str], dict[str, Any]] = {}
        self.users: dict[str, dict[str, Any]] = {}
        self.position_levels: dict[str, int] = {}
        self.states: dict[str, dict[str, Any]] = {}
        self.function_names: dict[tuple[str, str], str] = {}
        self.subjects: dict[tuple[str, str], dict[str, Any]] = {}
        self.failures: dict[str, BaseException] = {}
        self.delays: dict[str, float] = {}
        self.calls: list[str] = []

    async def _enter(self, name: str) -> None:
        self.calls.append(name)
        if name in self.delays:
            await asyncio.sleep(self.delays[name])
        if name in self.failures:
            raise self.failures[name]

    async def get_flow_definition(
        self, scope: FlowScope, scope_id: str | None, process_type: str
    ) -> FlowDefinition | None:
        await self._enter(f"flow_definition.{scope.value}")
        if scope == FlowScope.COMPANY:
            record = self.company_flows.get((scope_id, process_type))
        else:
            record = self.global_flows.get(process_type)
        return FlowDefinition.from_record(process_type, record) if record else None

    async def get_directory_user(
        self, user_id: str, *, company_id: str | None = None
    ) -> DirectoryUser | None:
        await self._enter("directory_user")
        record = self.company_users.get((company_id, user_id)) or self.users.get(user_id)
        return DirectoryUser.from_record(user_id, record) if record else None

    async def get_org_position_level(self, position_name: str) -> int | None:
        await self._enter("position_level")
        return self.position_levels.get(position_name)

    async def get_approval_state(
        self, subject_id: str, *, process_type: str
    ) -> ApprovalState:
        await self._enter("approval_state")
        return ApprovalState.from_record(self.states.get(subject_id))

    async def get_company_function_display_name(
        self, company_id: str, function_id: str
    ) -> str | None:
        await self._enter("function_name")
        return self.function_names.get((company_id, function_id))

    async def get_subject(
        self, process_type: str, subject_id: str
    ) -> ApprovalSubject | None:
        await self._enter("subject")
        record = self.subjects.get((process_type, subject_id))
        return ApprovalSubject.from_record(subject_id, record) if record is not None else None


@pytest.fixture
def data_source() -> InMemoryApprovalDataSource:
    return InMemoryApprovalDataSource()


@pytest.fixture
def resolver(data_source: InMemoryApprovalDataSource) -> ApprovalFlowResolver:
    return ApprovalFlowResolver(data_source, read_timeout=0.5)


@pytest.fixture
def subject() -> ApprovalSubject:
    return ApprovalSubject(id="R1", creator_id="C1", status="pending")


@pytest.fixture
def dev_auth_settings(monkeypatch: pytest.MonkeyPatch):
    """Settings with ID-token verification off (caller taken from X-User-ID)."""
    monkeypatch.setenv("AUTH_ENABLED", "false")
    monkeypatch.setenv("TELEMETRY_ENABLED", "false")
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


@pytest.fixture
async def client(dev_auth_settings, data_source: InMemoryApprovalDataSource) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI) backed by data_source."""
    app = create_app()
    app.dependency_overrides[get_data_source] = lambda: data_source
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
