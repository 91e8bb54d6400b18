"""Domain enumerations for approval flow resolution.

Enums represent fixed sets of domain values (ordering mode, approver and
level statuses, definition scope).
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class ApprovalOrder(_ValuesMixin, str, Enum):
    """Ordering discipline between levels of a flow.

    Sequential: level N cannot be acted upon until every earlier level is
    completed. Parallel: every level is actionable at once.
    """

    SEQUENTIAL = "sequential"
    PARALLEL = "parallel"

    @classmethod
    def from_record(cls, record: dict) -> "ApprovalOrder":
        """Read the canonical order from a stored flow record.

        Older records carry approvalSequence instead of approvalOrder; both
        name the same concept. Missing or unknown values mean sequential.
        """
        for field in ("approvalOrder", "approvalSequence"):
            raw = record.get(field)
            if isinstance(raw, str) and raw.strip().lower() in cls.values():
                return cls(raw.strip().lower())
        return cls.SEQUENTIAL


class ApproverStatus(_ValuesMixin, str, Enum):
    """Projected status of a single approver."""

    APPROVED = "approved"
    REJECTED = "rejected"
    PENDING = "pending"
    LOCKED = "locked"
    WAITING = "waiting"


class LevelStatus(_ValuesMixin, str, Enum):
    """Aggregate status of a level.

    Initial state is LOCKED (sequential, not the first level) or PENDING;
    APPROVED and REJECTED are terminal.
    """

    LOCKED = "locked"
    PENDING = "pending"
    PARTIALLY_APPROVED = "partially-approved"
    APPROVED = "approved"
    REJECTED = "rejected"


class FlowScope(_ValuesMixin, str, Enum):
    """Where a flow definition was found."""

    COMPANY = "company"
    GLOBAL = "global"
    NONE = "none"


class RecordedActionStatus(_ValuesMixin, str, Enum):
    """Status values written by the approval write-side on an action record."""

    APPROVED = "approved"
    COMPLETED = "completed"
    REJECTED = "rejected"
    PENDING = "pending"
