"""Tests for FirebaseApprovalDataSource (paths, fallbacks, memo and cache)."""

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from hse_approvals.domain.enums import FlowScope
from hse_approvals.domain.exceptions import InvalidPathComponentError, StoreUnavailableError
from hse_approvals.infrastructure.firebase.repositories import FirebaseApprovalDataSource


class FakeDatabase:
    """Stands in for RealtimeDatabaseRESTClient; records every path read."""

    def __init__(self, tree: dict[str, Any], *, failing: tuple[str, ...] = ()) -> None:
        self.tree = tree
        self.failing = failing
        self.reads: list[str] = []

    def reference(self, path: str):
        ref = MagicMock()
        ref.path = path

        async def get() -> Any:
            self.reads.append(path)
            if path in self.failing:
                raise StoreUnavailableError(path, "HTTP 503")
            return self.tree.get(path)

        ref.get = get
        return ref


def _cache(hit: Any = None) -> MagicMock:
    cache = MagicMock()
    cache.is_available.return_value = True
    cache.get = AsyncMock(return_value=hit)
    cache.set = AsyncMock(return_value=True)
    cache.delete = AsyncMock(return_value=True)
    return cache


class TestFlowDefinitions:
    async def test_company_and_global_paths(self) -> None:
        db = FakeDatabase(
            {
                "companies/ACME/approvalFlows/recruitment": {"approvalOrder": "parallel"},
                "approvalFlows/recruitment": {"approvalOrder": "sequential"},
            }
        )
        source = FirebaseApprovalDataSource(db)

        company = await source.get_flow_definition(FlowScope.COMPANY, "ACME", "recruitment")
        global_ = await source.get_flow_definition(FlowScope.GLOBAL, None, "recruitment")

        assert not company.is_sequential
        assert global_.is_sequential
        assert await source.get_flow_definition(FlowScope.COMPANY, "OTHER", "recruitment") is None

    async def test_non_object_record_is_absent(self) -> None:
        source = FirebaseApprovalDataSource(FakeDatabase({"approvalFlows/access": "broken"}))
        assert await source.get_flow_definition(FlowScope.GLOBAL, None, "access") is None

    async def test_unsafe_company_id_raises(self) -> None:
        source = FirebaseApprovalDataSource(FakeDatabase({}))
        with pytest.raises(InvalidPathComponentError):
            await source.get_flow_definition(FlowScope.COMPANY, "../x", "recruitment")

    async def test_cache_hit_skips_database(self) -> None:
        db = FakeDatabase({})
        cache = _cache(hit={"value": {"approvalOrder": "parallel"}})
        source = FirebaseApprovalDataSource(db, cache=cache)

        definition = await source.get_flow_definition(FlowScope.COMPANY, "ACME", "recruitment")

        assert not definition.is_sequential
        assert db.reads == []
        cache.get.assert_awaited_once_with("flow:ACME:recruitment")

    async def test_cache_miss_stores_wrapped_value(self) -> None:
        db = FakeDatabase({})
        cache = _cache(hit=None)
        source = FirebaseApprovalDataSource(db, cache=cache, flow_ttl=60)

        assert await source.get_flow_definition(FlowScope.GLOBAL, None, "staff") is None

        cache.set.assert_awaited_once_with("flow:_global:staff", {"value": None}, ttl=60)

    async def test_unavailable_cache_is_ignored(self) -> None:
        db = FakeDatabase({"approvalFlows/staff": {}})
        cache = _cache()
        cache.is_available.return_value = False
        source = FirebaseApprovalDataSource(db, cache=cache)

        await source.get_flow_definition(FlowScope.GLOBAL, None, "staff")

        cache.get.assert_not_awaited()
        assert db.reads == ["approvalFlows/staff"]


class TestDirectoryAndOrganization:
    async def test_company_directory_first_then_global(self) -> None:
        db = FakeDatabase(
            {
                "companies/ACME/users/U1": {"displayName": "Company Alice"},
                "users/U2": {"displayName": "Global Bob"},
            }
        )
        source = FirebaseApprovalDataSource(db)

        alice = await source.get_directory_user("U1", company_id="ACME")
        bob = await source.get_directory_user("U2", company_id="ACME")

        assert alice.resolved_name() == "Company Alice"
        assert bob.resolved_name() == "Global Bob"
        assert db.reads == ["companies/ACME/users/U1", "companies/ACME/users/U2", "users/U2"]

    async def test_unreadable_company_directory_falls_back_to_global(self) -> None:
        db = FakeDatabase(
            {"users/U1": {"displayName": "Global Alice"}},
            failing=("companies/ACME/users/U1",),
        )
        source = FirebaseApprovalDataSource(db)

        user = await source.get_directory_user("U1", company_id="ACME")

        assert user.resolved_name() == "Global Alice"
        assert db.reads == ["companies/ACME/users/U1", "users/U1"]

    async def test_unreadable_global_directory_propagates(self) -> None:
        db = FakeDatabase({}, failing=("companies/ACME/users/U1", "users/U1"))
        source = FirebaseApprovalDataSource(db)

        with pytest.raises(StoreUnavailableError):
            await source.get_directory_user("U1", company_id="ACME")

    async def test_invalid_user_id_is_absent(self) -> None:
        db = FakeDatabase({})
        source = FirebaseApprovalDataSource(db)
        assert await source.get_directory_user("a.b") is None
        assert db.reads == []

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [(3, 3), (4.0, 4), ("5", 5), (True, None), ("high", None), (None, None)],
    )
    async def test_position_level_values(self, raw, expected) -> None:
        source = FirebaseApprovalDataSource(
            FakeDatabase({"organizationStructure/positions/Manager/level": raw})
        )
        assert await source.get_org_position_level("Manager") == expected

    async def test_invalid_position_is_absent(self) -> None:
        source = FirebaseApprovalDataSource(FakeDatabase({}))
        assert await source.get_org_position_level("Sr. Manager") is None

    async def test_function_display_name(self) -> None:
        db = FakeDatabase(
            {
                "companies/ACME/functions/hse": {"displayName": " HSE Manager "},
                "companies/ACME/functions/ops": {"name": "Operations"},
            }
        )
        source = FirebaseApprovalDataSource(db)
        assert await source.get_company_function_display_name("ACME", "hse") == "HSE Manager"
        assert await source.get_company_function_display_name("ACME", "ops") == "Operations"
        assert await source.get_company_function_display_name("ACME", "none") is None


class TestSubjectsAndState:
    async def test_subject_collection_mapping(self) -> None:
        db = FakeDatabase({"recruit/R1": {"createdBy": "C1", "status": "pending"}})
        source = FirebaseApprovalDataSource(db, subject_collections={"recruitment": "recruit"})

        subject = await source.get_subject("recruitment", "R1")

        assert subject.creator_id == "C1"
        assert await source.get_subject("recruitment", "R2") is None

    async def test_state_reuses_loaded_subject_record(self) -> None:
        db = FakeDatabase(
            {
                "recruit/R1": {
                    "createdBy": "C1",
                    "approvals": {"level1": {"isCompleted": True}},
                }
            }
        )
        source = FirebaseApprovalDataSource(db, subject_collections={"recruitment": "recruit"})

        await source.get_subject("recruitment", "R1")
        state = await source.get_approval_state("R1", process_type="recruitment")

        assert state.is_level_completed("level1")
        assert db.reads == ["recruit/R1"]

    async def test_state_read_directly(self) -> None:
        db = FakeDatabase({"access/A1/approvals": {"level1": {"isCompleted": False}}})
        source = FirebaseApprovalDataSource(db)

        state = await source.get_approval_state("A1", process_type="access")

        assert state.for_level("level1") is not None
        assert db.reads == ["access/A1/approvals"]

    async def test_reads_are_memoized(self) -> None:
        db = FakeDatabase({"users/U1": {"displayName": "Alice"}})
        source = FirebaseApprovalDataSource(db)
        await source.get_directory_user("U1")
        await source.get_directory_user("U1")
        assert db.reads == ["users/U1"]
