"""Firebase ID token verification for authentication.

Tokens are issued by Firebase Authentication to the web client and sent as
Authorization: Bearer <token>. Verification fetches Google's public certs,
so it is blocking; call it from a worker thread.
"""

from typing import Any

from google.auth import exceptions as google_auth_exceptions
from google.auth.transport.requests import Request
from google.oauth2 import id_token

from hse_approvals.core.config import get_settings


def verify_firebase_id_token(token: str) -> dict[str, Any]:
    """Verify a Firebase ID token and return its claims.

    The audience is FIREBASE_PROJECT_ID; claims must carry a non-empty
    "sub" (the Firebase uid).

    Raises:
        ValueError: If the token is invalid, expired, issued for another
            project, or missing the subject claim.
    """
    project_id = get_settings().firebase_project_id
    if not project_id:
        raise ValueError("FIREBASE_PROJECT_ID is not configured")
    try:
        claims = id_token.verify_firebase_token(token, Request(), audience=project_id)
    except google_auth_exceptions.GoogleAuthError as e:
        raise ValueError(f"Could not verify ID token: {e}") from e
    if not claims or not claims.get("sub"):
        raise ValueError("ID token has no subject")
    return claims
