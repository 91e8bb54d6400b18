"""Realtime Database implementations of application data-source ports."""

from hse_approvals.infrastructure.firebase.repositories.approval_data_source_rtdb import (
    FirebaseApprovalDataSource,
)

__all__ = ["FirebaseApprovalDataSource"]
