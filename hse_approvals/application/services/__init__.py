"""Application services: approval flow resolution and its components."""

from hse_approvals.application.services.approval_flow_resolver import (
    SUBJECT_ACTIONS,
    ApprovalFlowResolver,
    view_type,
)
from hse_approvals.application.services.approver_status import (
    derive_level_status,
    project_approver_status,
)
from hse_approvals.application.services.guarded_lookup import LookupGuard
from hse_approvals.application.services.level_gate import (
    is_level_actionable,
    level_gate_open,
)
from hse_approvals.application.services.role_specifier_resolver import (
    ResolutionContext,
    RoleSpecifierResolver,
)

__all__ = [
    "SUBJECT_ACTIONS",
    "ApprovalFlowResolver",
    "LookupGuard",
    "ResolutionContext",
    "RoleSpecifierResolver",
    "derive_level_status",
    "is_level_actionable",
    "level_gate_open",
    "project_approver_status",
    "view_type",
]
