"""Projection of recorded approval facts onto approver and level statuses."""

from __future__ import annotations

from hse_approvals.domain.entities import ApprovalAction, LevelState
from hse_approvals.domain.enums import (
    ApprovalOrder,
    ApproverStatus,
    LevelStatus,
    RecordedActionStatus,
)

_APPROVED_ACTION_STATUSES = frozenset(
    {RecordedActionStatus.APPROVED.value, RecordedActionStatus.COMPLETED.value}
)


def project_approver_status(
    action: ApprovalAction | None,
    level_state: LevelState | None,
    *,
    level_number: int,
    approval_order: ApprovalOrder,
    gate_open: bool,
) -> ApproverStatus:
    """Status of one approver slot. First matching rule wins:

    1. recorded action rejected -> rejected (terminal, even if the level is
       later marked completed)
    2. level completed, or action completed/approved -> approved
    3. recorded action pending -> pending
    4. sequential, not level 1, gate closed -> locked
    5. otherwise -> waiting
    """
    status = action.status if action is not None else None
    if status == RecordedActionStatus.REJECTED.value:
        return ApproverStatus.REJECTED
    if (level_state is not None and level_state.is_completed) or (
        action is not None
        and (action.is_completed or status in _APPROVED_ACTION_STATUSES)
    ):
        return ApproverStatus.APPROVED
    if status == RecordedActionStatus.PENDING.value:
        return ApproverStatus.PENDING
    if approval_order == ApprovalOrder.SEQUENTIAL and level_number > 1 and not gate_open:
        return ApproverStatus.LOCKED
    return ApproverStatus.WAITING


def derive_level_status(
    level_state: LevelState | None,
    *,
    total_approvers: int,
    approval_order: ApprovalOrder,
    gate_open: bool,
) -> LevelStatus:
    """Aggregate status of a level from its recorded facts.

    Approved when the write-side marked it completed, rejected as soon as any
    recorded action is a rejection, locked while a sequential gate is closed,
    partially approved while some but not all approvers have approved.
    """
    if level_state is not None and level_state.is_completed:
        return LevelStatus.APPROVED
    approved = level_state.approved_count if level_state is not None else 0
    rejected = level_state.rejected_count if level_state is not None else 0
    if rejected > 0:
        return LevelStatus.REJECTED
    if approval_order == ApprovalOrder.SEQUENTIAL and not gate_open:
        return LevelStatus.LOCKED
    if 0 < approved < total_approvers:
        return LevelStatus.PARTIALLY_APPROVED
    return LevelStatus.PENDING
