"""Firebase Realtime Database integration (REST + google-auth)."""

from hse_approvals.infrastructure.firebase.client import (
    close_firebase,
    get_database_client,
    init_firebase,
)

__all__ = [
    "close_firebase",
    "get_database_client",
    "init_firebase",
]
