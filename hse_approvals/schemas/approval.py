"""Approval flow API schemas (read-only views)."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from hse_approvals.domain.enums import (
    ApprovalOrder,
    ApproverStatus,
    FlowScope,
    LevelStatus,
)


class ApproverResponse(BaseModel):
    """One approver slot of a level."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    title: str
    department: str
    status: ApproverStatus
    date: datetime | None = None
    comments: str = ""
    role: str
    specifier_value: str
    resolved_user_id: str | None = None


class LevelResponse(BaseModel):
    """One level of a resolved flow."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    level_number: int
    status: LevelStatus
    total_approvers: int
    approved_count: int
    rejected_count: int
    approvers: list[ApproverResponse]
    comments: str = ""
    assignment_types: list[str] = Field(default_factory=list)


class FlowViewResponse(BaseModel):
    """Resolved approval flow for a subject."""

    model_config = ConfigDict(from_attributes=True)

    type: str = Field(..., description='e.g. "Sequential Approval (Company Scope)" or "Not Configured"')
    approval_order: ApprovalOrder | None = None
    company_id: str | None = None
    process_type: str
    scope: FlowScope
    levels: list[LevelResponse]
    degraded_lookups: list[str] = Field(
        default_factory=list,
        description="Lookups that failed and were replaced by fallbacks",
    )


class ApproverActionsResponse(BaseModel):
    """Whether the caller may act on the subject, and which actions to offer."""

    model_config = ConfigDict(from_attributes=True)

    is_approver: bool
    level_name: str | None = None
    actions: list[str] = Field(default_factory=list)
