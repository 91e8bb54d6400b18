"""Approval flow API: thin routes delegating to ApprovalFlowResolver."""

from typing import Annotated

from fastapi import APIRouter, Depends

from hse_approvals.api.v1.dependencies import (
    get_acting_user_id,
    get_approval_flow_resolver,
    get_company_id,
    get_subject,
)
from hse_approvals.application.services import ApprovalFlowResolver
from hse_approvals.domain.entities import ApprovalSubject
from hse_approvals.schemas.approval import ApproverActionsResponse, FlowViewResponse

router = APIRouter()


@router.get(
    "/{process_type}/subjects/{subject_id}",
    response_model=FlowViewResponse,
)
async def get_approval_flow(
    process_type: str,
    _user_id: Annotated[str, Depends(get_acting_user_id)],
    subject: Annotated[ApprovalSubject, Depends(get_subject)],
    company_id: Annotated[str | None, Depends(get_company_id)],
    resolver: Annotated[ApprovalFlowResolver, Depends(get_approval_flow_resolver)],
) -> FlowViewResponse:
    """Resolved approval flow for a subject (levels, approvers, statuses)."""
    view = await resolver.build_approval_view(process_type, subject, company_id)
    return FlowViewResponse.model_validate(view)


@router.get(
    "/{process_type}/subjects/{subject_id}/approver",
    response_model=ApproverActionsResponse,
)
async def get_approver_actions(
    process_type: str,
    user_id: Annotated[str, Depends(get_acting_user_id)],
    subject: Annotated[ApprovalSubject, Depends(get_subject)],
    company_id: Annotated[str | None, Depends(get_company_id)],
    resolver: Annotated[ApprovalFlowResolver, Depends(get_approval_flow_resolver)],
) -> ApproverActionsResponse:
    """Whether the caller may act on the subject now, and which actions to show."""
    actions = await resolver.resolve_actions(
        user_id, process_type, subject, company_id=company_id
    )
    return ApproverActionsResponse.model_validate(actions)
