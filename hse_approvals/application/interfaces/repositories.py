"""Data-access interfaces (ports) for the application layer.

The resolver never performs I/O itself; it consumes these protocols.
Infrastructure implementations read the Firebase Realtime Database, tests
provide in-memory versions. No infrastructure imports here.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from hse_approvals.domain.enums import FlowScope

if TYPE_CHECKING:
    from hse_approvals.domain.entities import (
        ApprovalState,
        ApprovalSubject,
        DirectoryUser,
        FlowDefinition,
    )


class IApprovalDataSource(Protocol):
    """Read access to flow definitions, the directory and approval state.

    Implementations may raise StoreUnavailableError (or time out); the
    resolver treats every call as fallible and substitutes fallbacks.
    """

    async def get_flow_definition(
        self, scope: FlowScope, scope_id: str | None, process_type: str
    ) -> FlowDefinition | None:
        """Return the definition at company scope (scope_id = company id) or global scope."""

    async def get_directory_user(
        self, user_id: str, *, company_id: str | None = None
    ) -> DirectoryUser | None:
        """Return the user record, company directory first when company_id is given."""

    async def get_org_position_level(self, position_name: str) -> int | None:
        """Return the organizational level of a position name."""

    async def get_approval_state(
        self, subject_id: str, *, process_type: str
    ) -> ApprovalState:
        """Return recorded approval facts for the subject (empty if none)."""

    async def get_company_function_display_name(
        self, company_id: str, function_id: str
    ) -> str | None:
        """Return the company's display name for a job function."""

    async def get_subject(
        self, process_type: str, subject_id: str
    ) -> ApprovalSubject | None:
        """Return the approval subject record."""
