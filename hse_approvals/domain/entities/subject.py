"""Approval subject domain entity.

The thing being approved (recruitment request, access request, ...). Only
the fields the resolver needs are modelled: who created it, where they sit,
and the subject's own workflow status.
"""

from dataclasses import dataclass
from typing import Any

# Creator fields in the order the web client populates them.
_CREATOR_FIELDS = ("createdBy", "requesterId", "ownerId", "submittedBy")

CLOSED_SUBJECT_STATUSES = frozenset({"approved", "declined"})


@dataclass(frozen=True)
class ApprovalSubject:
    """Reference to an approval subject."""

    id: str
    creator_id: str | None = None
    department: str | None = None
    position: str | None = None
    status: str | None = None

    @property
    def is_closed(self) -> bool:
        """Whether the subject already reached a final decision."""
        return (self.status or "").strip().lower() in CLOSED_SUBJECT_STATUSES

    @classmethod
    def from_record(cls, subject_id: str, record: dict[str, Any]) -> "ApprovalSubject":
        creator_id = next(
            (
                record[f]
                for f in _CREATOR_FIELDS
                if isinstance(record.get(f), str) and record[f].strip()
            ),
            None,
        )
        return cls(
            id=subject_id,
            creator_id=creator_id,
            department=record.get("department") if isinstance(record.get("department"), str) else None,
            position=record.get("position") if isinstance(record.get("position"), str) else None,
            status=record.get("status") if isinstance(record.get("status"), str) else None,
        )
