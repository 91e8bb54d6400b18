"""Domain value objects: role specifiers and their parser."""

from hse_approvals.domain.value_objects.role_specifier import (
    FunctionSpecifier,
    HierarchySpecifier,
    RoleSpecifier,
    UnknownSpecifier,
    UserSpecifier,
    parse_role_specifier,
)

__all__ = [
    "FunctionSpecifier",
    "HierarchySpecifier",
    "RoleSpecifier",
    "UnknownSpecifier",
    "UserSpecifier",
    "parse_role_specifier",
]
