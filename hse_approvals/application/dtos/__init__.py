"""Application DTOs (no persistence dependency)."""

from hse_approvals.application.dtos.approval_flow import (
    ApproverActions,
    ApproverIdentity,
    FlowView,
    ResolvedApprover,
    ResolvedLevel,
    SpecifierResolution,
)

__all__ = [
    "ApproverActions",
    "ApproverIdentity",
    "FlowView",
    "ResolvedApprover",
    "ResolvedLevel",
    "SpecifierResolution",
]
