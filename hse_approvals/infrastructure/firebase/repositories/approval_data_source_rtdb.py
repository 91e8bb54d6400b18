"""Realtime Database-backed approval data source (implements IApprovalDataSource).

One instance per request. Every path is read at most once per instance
(request-scoped memo). Configuration records (flow definitions, position
levels, function names) are additionally cached in Redis when a cache is
given; approval state and directory users always come from the database.
Cached entries are never invalidated from here: the per-kind TTL is the
whole freshness policy, absent records included, so a flow created in the
admin UI shows up once the cached miss expires.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from hse_approvals.application.interfaces.services import ICacheService
from hse_approvals.domain.entities import (
    ApprovalState,
    ApprovalSubject,
    DirectoryUser,
    FlowDefinition,
)
from hse_approvals.domain.enums import FlowScope
from hse_approvals.domain.exceptions import InvalidPathComponentError, StoreUnavailableError
from hse_approvals.infrastructure.cache.keys import (
    flow_definition_key,
    function_name_key,
    org_level_key,
)
from hse_approvals.infrastructure.firebase import paths
from hse_approvals.infrastructure.firebase._rest_client import RealtimeDatabaseRESTClient
from hse_approvals.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


def _cache_key(builder: Callable[..., str], *args: Any) -> str | None:
    """Key from builder, or None when a component cannot be used in a key."""
    try:
        return builder(*args)
    except ValueError:
        return None


def _as_level(raw: Any) -> int | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float) and raw.is_integer():
        return int(raw)
    if isinstance(raw, str) and raw.strip().lstrip("-").isdigit():
        return int(raw.strip())
    return None


class FirebaseApprovalDataSource:
    """Reads flows, directory records and approval state from the Realtime Database."""

    def __init__(
        self,
        client: RealtimeDatabaseRESTClient,
        *,
        cache: ICacheService | None = None,
        subject_collections: Mapping[str, str] | None = None,
        flow_ttl: int = 300,
        org_level_ttl: int = 900,
        function_name_ttl: int = 900,
    ) -> None:
        self._client = client
        self.cache = cache
        self._subject_collections = dict(subject_collections or {})
        self._flow_ttl = flow_ttl
        self._org_level_ttl = org_level_ttl
        self._function_name_ttl = function_name_ttl
        self._memo: dict[str, Any] = {}

    def collection_for(self, process_type: str) -> str:
        """Top-level node holding subjects of a process type."""
        return self._subject_collections.get(process_type, process_type)

    async def get_flow_definition(
        self, scope: FlowScope, scope_id: str | None, process_type: str
    ) -> FlowDefinition | None:
        if scope == FlowScope.COMPANY:
            if not scope_id:
                return None
            path = paths.company_flow_path(scope_id, process_type)
            key = _cache_key(flow_definition_key, scope_id, process_type)
        elif scope == FlowScope.GLOBAL:
            path = paths.global_flow_path(process_type)
            key = _cache_key(flow_definition_key, None, process_type)
        else:
            return None
        record = await self._read_cached(path, key, self._flow_ttl)
        if not isinstance(record, dict):
            return None
        return FlowDefinition.from_record(process_type, record)

    async def get_directory_user(
        self, user_id: str, *, company_id: str | None = None
    ) -> DirectoryUser | None:
        """Company directory first, then the global users node.

        An unreadable company record does not stop the global read; only a
        failure of the global read itself propagates.
        """
        try:
            global_path = paths.global_user_path(user_id)
            company_path = (
                paths.company_user_path(company_id, user_id) if company_id else None
            )
        except InvalidPathComponentError:
            logger.debug("User id %r is not a valid database key", user_id)
            return None
        if company_path is not None:
            try:
                record = await self._read(company_path)
            except StoreUnavailableError as e:
                logger.warning(
                    "Company directory read failed for %s, trying global users: %s",
                    user_id,
                    e.message,
                )
            else:
                if isinstance(record, dict):
                    return DirectoryUser.from_record(user_id, record)
        record = await self._read(global_path)
        if isinstance(record, dict):
            return DirectoryUser.from_record(user_id, record)
        return None

    async def get_org_position_level(self, position_name: str) -> int | None:
        try:
            path = paths.position_level_path(position_name)
        except InvalidPathComponentError:
            logger.debug("Position %r is not a valid database key", position_name)
            return None
        raw = await self._read_cached(
            path, _cache_key(org_level_key, position_name), self._org_level_ttl
        )
        return _as_level(raw)

    async def get_approval_state(
        self, subject_id: str, *, process_type: str
    ) -> ApprovalState:
        collection = self.collection_for(process_type)
        subject_record = self._memo.get(paths.subject_path(collection, subject_id))
        if isinstance(subject_record, dict):
            return ApprovalState.from_record(subject_record.get(paths.NODE_APPROVALS))
        raw = await self._read(paths.approval_state_path(collection, subject_id))
        return ApprovalState.from_record(raw)

    async def get_company_function_display_name(
        self, company_id: str, function_id: str
    ) -> str | None:
        try:
            path = paths.company_function_path(company_id, function_id)
        except InvalidPathComponentError:
            return None
        record = await self._read_cached(
            path,
            _cache_key(function_name_key, company_id, function_id),
            self._function_name_ttl,
        )
        if not isinstance(record, dict):
            return None
        for field in ("displayName", "name"):
            value = record.get(field)
            if isinstance(value, str) and value.strip():
                return value.strip()
        return None

    async def get_subject(
        self, process_type: str, subject_id: str
    ) -> ApprovalSubject | None:
        """Load the subject record; raises InvalidPathComponentError for unsafe ids."""
        record = await self._read(
            paths.subject_path(self.collection_for(process_type), subject_id)
        )
        if not isinstance(record, dict):
            return None
        return ApprovalSubject.from_record(subject_id, record)

    async def _read(self, path: str) -> Any:
        if path in self._memo:
            return self._memo[path]
        value = await self._client.reference(path).get()
        self._memo[path] = value
        return value

    async def _read_cached(self, path: str, key: str | None, ttl: int) -> Any:
        """Memo, then Redis, then the database. Absent nodes are cached too."""
        if path in self._memo:
            return self._memo[path]
        use_cache = key is not None and self.cache is not None and self.cache.is_available()
        if use_cache:
            hit = await self.cache.get(key)
            if isinstance(hit, dict) and "value" in hit:
                self._memo[path] = hit["value"]
                return hit["value"]
        value = await self._read(path)
        if use_cache:
            await self.cache.set(key, {"value": value}, ttl=ttl)
        return value
