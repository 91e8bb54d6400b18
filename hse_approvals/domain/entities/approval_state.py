"""Approval state domain entity (read side only).

Per subject and per level, the facts recorded by the approve/decline
write-side: whether the level is completed and the individual actions taken.
isCompleted is owned by the write-side and is never derived here.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from hse_approvals.domain.enums import RecordedActionStatus
from hse_approvals.domain.value_objects.role_specifier import (
    RoleSpecifier,
    UserSpecifier,
)
from hse_approvals.shared.utils.datetime import parse_store_timestamp


def _as_list(raw: Any) -> list[Any]:
    """Stored arrays come back as lists or as push-id keyed maps."""
    if isinstance(raw, list):
        return [item for item in raw if item is not None]
    if isinstance(raw, dict):
        return [raw[k] for k in sorted(raw, key=str) if raw[k] is not None]
    return []


@dataclass(frozen=True)
class ApprovalAction:
    """One recorded approver action within a level."""

    approver_id: str | None = None
    approver_role: str | None = None
    status: str | None = None
    approved_at: datetime | None = None
    comments: str = ""
    is_completed: bool = False

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "ApprovalAction":
        status = record.get("status")
        approved_at = parse_store_timestamp(record.get("approvedAt"))
        if approved_at is None:
            approved_at = parse_store_timestamp(record.get("approvedDateTime"))
        comments = record.get("comments")
        return cls(
            approver_id=record.get("approverId") if isinstance(record.get("approverId"), str) else None,
            approver_role=record.get("approverRole") if isinstance(record.get("approverRole"), str) else None,
            status=status.strip().lower() if isinstance(status, str) else None,
            approved_at=approved_at,
            comments=comments if isinstance(comments, str) else "",
            is_completed=record.get("isCompleted") is True,
        )

    def belongs_to(self, specifier: RoleSpecifier) -> bool:
        """Whether this action was taken under the given specifier."""
        if self.approver_role is not None and self.approver_role == specifier.value:
            return True
        return (
            isinstance(specifier, UserSpecifier)
            and self.approver_id is not None
            and self.approver_id == specifier.user_id
        )


@dataclass(frozen=True)
class LevelState:
    """Recorded facts for a single level."""

    is_completed: bool = False
    actions: tuple[ApprovalAction, ...] = ()
    comments: str = ""

    @property
    def approved_count(self) -> int:
        return sum(1 for a in self.actions if a.status == RecordedActionStatus.APPROVED.value)

    @property
    def rejected_count(self) -> int:
        return sum(1 for a in self.actions if a.status == RecordedActionStatus.REJECTED.value)

    def action_for(self, specifier: RoleSpecifier) -> ApprovalAction | None:
        """First recorded action taken under the specifier, if any."""
        return next((a for a in self.actions if a.belongs_to(specifier)), None)

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "LevelState":
        comments = record.get("comments")
        return cls(
            is_completed=record.get("isCompleted") is True,
            actions=tuple(
                ApprovalAction.from_record(a)
                for a in _as_list(record.get("approvals"))
                if isinstance(a, dict)
            ),
            comments=comments if isinstance(comments, str) else "",
        )


@dataclass(frozen=True)
class ApprovalState:
    """All recorded level facts for one subject. Empty for a brand-new subject."""

    levels: dict[str, LevelState] = field(default_factory=dict)

    def for_level(self, level_key: str) -> LevelState | None:
        return self.levels.get(level_key)

    def is_level_completed(self, level_key: str) -> bool:
        state = self.levels.get(level_key)
        return state is not None and state.is_completed

    @classmethod
    def from_record(cls, record: Any) -> "ApprovalState":
        if not isinstance(record, dict):
            return cls()
        return cls(
            levels={
                str(key): LevelState.from_record(value)
                for key, value in record.items()
                if isinstance(value, dict)
            }
        )
