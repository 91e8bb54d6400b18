"""Application layer: interfaces, services, DTOs.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (data source, cache).
"""

from hse_approvals.application.interfaces import IApprovalDataSource, ICacheService
from hse_approvals.application.services import ApprovalFlowResolver

__all__ = [
    "ApprovalFlowResolver",
    "IApprovalDataSource",
    "ICacheService",
]
