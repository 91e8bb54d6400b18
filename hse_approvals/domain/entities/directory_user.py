"""Directory user domain entity (user record as stored by the web client)."""

from dataclasses import dataclass
from typing import Any

from hse_approvals.shared.utils.text import name_from_email


def _clean(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


@dataclass(frozen=True)
class DirectoryUser:
    """A user record from the company or global directory."""

    id: str
    display_name: str | None = None
    name: str | None = None
    full_name: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    username: str | None = None
    email: str | None = None
    job_title: str | None = None
    department: str | None = None
    position: str | None = None

    def resolved_name(self) -> str | None:
        """Best available display name, or None when the record has none.

        Order: displayName, name, fullName, first + last name, username,
        then a name derived from the email's local part.
        """
        for candidate in (self.display_name, self.name, self.full_name):
            if candidate:
                return candidate
        if self.first_name or self.last_name:
            joined = f"{self.first_name or ''} {self.last_name or ''}".strip()
            if joined:
                return joined
        if self.username:
            return self.username
        return name_from_email(self.email)

    def has_job_title(self, function_id: str) -> bool:
        """Case-insensitive job title comparison used for function specifiers."""
        if not self.job_title:
            return False
        return self.job_title.casefold() == function_id.strip().casefold()

    @classmethod
    def from_record(cls, user_id: str, record: dict[str, Any]) -> "DirectoryUser":
        return cls(
            id=user_id,
            display_name=_clean(record.get("displayName")),
            name=_clean(record.get("name")),
            full_name=_clean(record.get("fullName")),
            first_name=_clean(record.get("firstName")),
            last_name=_clean(record.get("lastName")),
            username=_clean(record.get("username")),
            email=_clean(record.get("email")),
            job_title=_clean(record.get("jobTitle")),
            department=_clean(record.get("department")),
            position=_clean(record.get("position")),
        )
