"""Application interfaces (ports): data-source and cache protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from hse_approvals.infrastructure or hse_approvals.api.
"""

from hse_approvals.application.interfaces.repositories import IApprovalDataSource
from hse_approvals.application.interfaces.services import ICacheService

__all__ = [
    "IApprovalDataSource",
    "ICacheService",
]
