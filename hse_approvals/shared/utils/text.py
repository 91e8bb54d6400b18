"""Display-name helpers for identities that have no stored name."""

import re

_SEPARATORS_RE = re.compile(r"[._-]+")


def humanize_identifier(value: str) -> str:
    """Turn an id or email local part into a readable name.

    Separators (., _, -) become spaces and each word is title-cased
    ("john.doe" -> "John Doe"). Returns "" when nothing readable remains.
    """
    words = _SEPARATORS_RE.sub(" ", value).split()
    return " ".join(word[:1].upper() + word[1:].lower() for word in words)


def name_from_email(email: str | None) -> str | None:
    """Derive a display name from an email's local part, or None if not an email."""
    if not email or "@" not in email:
        return None
    return humanize_identifier(email.split("@", 1)[0]) or None
