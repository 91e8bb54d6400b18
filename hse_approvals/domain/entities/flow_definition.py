"""Flow definition domain entity.

A flow definition is the per-process approval configuration: an ordering
mode and an ordered set of levels, each holding one or more role specifiers.
Definitions are edited by the admin UI and are read-only here.
"""

import re
from dataclasses import dataclass
from typing import Any

from hse_approvals.domain.enums import ApprovalOrder
from hse_approvals.domain.value_objects.role_specifier import (
    RoleSpecifier,
    parse_role_specifier,
)

_LEVEL_SUFFIX_RE = re.compile(r"(\d+)$")


def level_number(level_key: str) -> int | None:
    """Numeric suffix of a level key ("level3" -> 3), or None if there is none."""
    match = _LEVEL_SUFFIX_RE.search(level_key.strip())
    return int(match.group(1)) if match else None


@dataclass(frozen=True)
class FlowLevel:
    """One stage of a flow."""

    key: str
    number: int
    specifiers: tuple[RoleSpecifier, ...]

    @property
    def name(self) -> str:
        return f"Level {self.number}"


@dataclass(frozen=True)
class FlowDefinition:
    """Approval configuration for one process type (company or global scope).

    Levels are ordered by the numeric suffix of their key. Gaps in the
    numbering are allowed; a sequential level still waits on every lower
    number, defined or not.
    """

    process_type: str
    approval_order: ApprovalOrder
    levels: tuple[FlowLevel, ...]
    enabled: bool = True

    @property
    def is_sequential(self) -> bool:
        return self.approval_order == ApprovalOrder.SEQUENTIAL

    @classmethod
    def from_record(cls, process_type: str, record: dict[str, Any]) -> "FlowDefinition":
        """Build a definition from the stored flow record.

        Specifiers live under selectedRoles (levelN -> list of specifiers).
        A level stored as a single object is read as a one-element list;
        keys without a numeric suffix are skipped.
        """
        raw_levels = record.get("selectedRoles")
        if not isinstance(raw_levels, dict):
            raw_levels = record.get("levels") if isinstance(record.get("levels"), dict) else {}

        levels: list[FlowLevel] = []
        for key, raw_roles in raw_levels.items():
            number = level_number(str(key))
            if number is None:
                continue
            if isinstance(raw_roles, dict) and "value" not in raw_roles:
                # Realtime Database returns arrays with gaps as index-keyed maps.
                raw_roles = [raw_roles[k] for k in sorted(raw_roles, key=str)]
            elif not isinstance(raw_roles, list):
                raw_roles = [raw_roles]
            specifiers = tuple(
                parse_role_specifier(raw) for raw in raw_roles if raw is not None
            )
            levels.append(FlowLevel(key=str(key), number=number, specifiers=specifiers))
        levels.sort(key=lambda lv: (lv.number, lv.key))

        return cls(
            process_type=record.get("processType") or process_type,
            approval_order=ApprovalOrder.from_record(record),
            levels=tuple(levels),
            enabled=record.get("enabled") is not False,
        )
