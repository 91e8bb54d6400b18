"""Domain entities.

Pure domain models built from stored records; no persistence concerns.
"""

from hse_approvals.domain.entities.approval_state import (
    ApprovalAction,
    ApprovalState,
    LevelState,
)
from hse_approvals.domain.entities.directory_user import DirectoryUser
from hse_approvals.domain.entities.flow_definition import (
    FlowDefinition,
    FlowLevel,
    level_number,
)
from hse_approvals.domain.entities.subject import ApprovalSubject

__all__ = [
    "ApprovalAction",
    "ApprovalState",
    "ApprovalSubject",
    "DirectoryUser",
    "FlowDefinition",
    "FlowLevel",
    "LevelState",
    "level_number",
]
