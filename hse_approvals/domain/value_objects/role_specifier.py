"""Role specifiers: typed references to who may approve a level.

Stored flow definitions encode specifiers as strings with a prefix
convention (user_<id>, function_<id>, L+<N>). parse_role_specifier turns the
stored form into one of four immutable variants at the storage boundary, so
the resolver never inspects raw prefixes.
"""

import re
from dataclasses import dataclass
from typing import Any, TypeAlias

USER_PREFIX = "user_"
FUNCTION_PREFIX = "function_"
HIERARCHY_PREFIX = "L+"

_HIERARCHY_RE = re.compile(r"^L\+(\d+)$")


class _SpecifierText:
    """Display-text fallback shared by every variant."""

    text: str | None
    label: str | None

    @property
    def display_text(self) -> str | None:
        """First non-blank of text, label (stripped), or None."""
        for candidate in (self.text, self.label):
            if isinstance(candidate, str) and candidate.strip():
                return candidate.strip()
        return None


@dataclass(frozen=True)
class UserSpecifier(_SpecifierText):
    """A directly named approver (user_<userId>)."""

    value: str
    user_id: str
    text: str | None = None
    label: str | None = None

    @property
    def assignment_type(self) -> str:
        return "Name"


@dataclass(frozen=True)
class FunctionSpecifier(_SpecifierText):
    """Anyone whose job title matches the function (function_<functionId>)."""

    value: str
    function_id: str
    text: str | None = None
    label: str | None = None

    @property
    def assignment_type(self) -> str:
        return "Function"


@dataclass(frozen=True)
class HierarchySpecifier(_SpecifierText):
    """Same-department approver N position levels above the subject's creator (L+<N>)."""

    value: str
    levels_above: int
    text: str | None = None
    label: str | None = None

    def __post_init__(self) -> None:
        if self.levels_above < 1:
            raise ValueError("levels_above must be a positive integer")

    @property
    def assignment_type(self) -> str:
        return f"Level+{self.levels_above}"


@dataclass(frozen=True)
class UnknownSpecifier(_SpecifierText):
    """Any other stored value. Display-only; never matches a user."""

    value: str
    text: str | None = None
    label: str | None = None

    @property
    def assignment_type(self) -> str:
        return "Unknown"


RoleSpecifier: TypeAlias = (
    UserSpecifier | FunctionSpecifier | HierarchySpecifier | UnknownSpecifier
)


def _optional_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def parse_role_specifier(raw: Any) -> RoleSpecifier:
    """Parse a stored specifier ({value, text, label, ...} or a bare string).

    Never raises: anything that is not a recognised prefix with a non-empty
    remainder becomes an UnknownSpecifier.
    """
    if isinstance(raw, dict):
        value = raw.get("value")
        text = _optional_str(raw.get("text"))
        label = _optional_str(raw.get("label"))
    else:
        value, text, label = raw, None, None
    if not isinstance(value, str):
        return UnknownSpecifier(value="", text=text, label=label)
    value = value.strip()

    if value.startswith(USER_PREFIX) and len(value) > len(USER_PREFIX):
        return UserSpecifier(
            value=value,
            user_id=value[len(USER_PREFIX):],
            text=text,
            label=label,
        )
    if value.startswith(FUNCTION_PREFIX) and len(value) > len(FUNCTION_PREFIX):
        return FunctionSpecifier(
            value=value,
            function_id=value[len(FUNCTION_PREFIX):],
            text=text,
            label=label,
        )
    match = _HIERARCHY_RE.match(value)
    if match and int(match.group(1)) >= 1:
        return HierarchySpecifier(
            value=value,
            levels_above=int(match.group(1)),
            text=text,
            label=label,
        )
    return UnknownSpecifier(value=value, text=text, label=label)
