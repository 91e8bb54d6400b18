"""DTOs for resolved approval flows (read models returned to the UI layer)."""

from dataclasses import dataclass
from datetime import datetime

from hse_approvals.domain.enums import (
    ApprovalOrder,
    ApproverStatus,
    FlowScope,
    LevelStatus,
)


@dataclass(frozen=True)
class ApproverIdentity:
    """Display identity of a role specifier."""

    name: str
    title: str = ""
    department: str = ""
    role: str = ""


@dataclass(frozen=True)
class SpecifierResolution:
    """Result of resolving one role specifier against a context."""

    matches_acting_user: bool
    identity: ApproverIdentity
    resolved_user_id: str | None = None


@dataclass(frozen=True)
class ResolvedApprover:
    """One approver slot in a level, with its projected status."""

    name: str
    title: str
    department: str
    status: ApproverStatus
    date: datetime | None
    comments: str
    role: str
    specifier_value: str
    resolved_user_id: str | None = None


@dataclass(frozen=True)
class ResolvedLevel:
    """One level of a resolved flow."""

    name: str
    level_number: int
    status: LevelStatus
    total_approvers: int
    approved_count: int
    rejected_count: int
    approvers: tuple[ResolvedApprover, ...]
    comments: str
    assignment_types: tuple[str, ...] = ()


@dataclass(frozen=True)
class FlowView:
    """Resolved approval flow for one subject.

    An empty levels tuple means no actions are possible (no flow configured,
    flow disabled, or resolution failed; type says which).
    """

    type: str
    approval_order: ApprovalOrder | None
    company_id: str | None
    process_type: str
    scope: FlowScope = FlowScope.NONE
    levels: tuple[ResolvedLevel, ...] = ()
    degraded_lookups: tuple[str, ...] = ()


@dataclass(frozen=True)
class ApproverActions:
    """What the acting user may do on a subject."""

    is_approver: bool
    level_name: str | None
    actions: tuple[str, ...]
