"""Domain layer: entities, value objects, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from hse_approvals.domain.entities import (
    ApprovalState,
    ApprovalSubject,
    DirectoryUser,
    FlowDefinition,
    FlowLevel,
    LevelState,
)
from hse_approvals.domain.enums import (
    ApprovalOrder,
    ApproverStatus,
    FlowScope,
    LevelStatus,
)
from hse_approvals.domain.exceptions import (
    ApprovalFlowException,
    AuthenticationException,
    InvalidPathComponentError,
    ResourceNotFoundException,
    StoreUnavailableError,
    SubjectNotFoundException,
    ValidationException,
)
from hse_approvals.domain.value_objects import (
    FunctionSpecifier,
    HierarchySpecifier,
    RoleSpecifier,
    UnknownSpecifier,
    UserSpecifier,
    parse_role_specifier,
)

__all__ = [
    # Entities
    "ApprovalState",
    "ApprovalSubject",
    "DirectoryUser",
    "FlowDefinition",
    "FlowLevel",
    "LevelState",
    # Enums
    "ApprovalOrder",
    "ApproverStatus",
    "FlowScope",
    "LevelStatus",
    # Exceptions
    "ApprovalFlowException",
    "AuthenticationException",
    "InvalidPathComponentError",
    "ResourceNotFoundException",
    "StoreUnavailableError",
    "SubjectNotFoundException",
    "ValidationException",
    # Value objects
    "FunctionSpecifier",
    "HierarchySpecifier",
    "RoleSpecifier",
    "UnknownSpecifier",
    "UserSpecifier",
    "parse_role_specifier",
]
