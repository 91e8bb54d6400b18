"""Process-wide Realtime Database client.

Created at startup from FIREBASE_DATABASE_URL plus service account
credentials, taken from FIREBASE_SERVICE_ACCOUNT_KEY (JSON string) or else
FIREBASE_SERVICE_ACCOUNT_PATH (file). With no credentials the client reads
unauthenticated, which is what the Firebase emulator expects.
"""

import json
import logging
from pathlib import Path

from hse_approvals.core.config import Settings, get_settings
from hse_approvals.infrastructure.firebase._rest_client import (
    RealtimeDatabaseRESTClient,
    _get_credentials,
)

logger = logging.getLogger(__name__)

_database_client: RealtimeDatabaseRESTClient | None = None


def _service_account_info(settings: Settings) -> dict | None:
    """Service account JSON from the env key, else the key file; None if neither."""
    if settings.firebase_service_account_key:
        raw = settings.firebase_service_account_key.get_secret_value()
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValueError("FIREBASE_SERVICE_ACCOUNT_KEY is not valid JSON") from e
    if not settings.firebase_service_account_path:
        return None
    key_file = Path(settings.firebase_service_account_path).expanduser()
    if not key_file.is_file():
        logger.warning("Service account file not found: %s", key_file)
        return None
    return json.loads(key_file.read_text(encoding="utf-8"))


def init_firebase() -> bool:
    """Create the client if FIREBASE_DATABASE_URL is set. Idempotent.

    Returns False (after logging) when the URL is missing or credentials
    cannot be loaded; the app still starts and approval endpoints answer 503.
    """
    global _database_client
    if _database_client is not None:
        return True
    settings = get_settings()
    if not settings.firebase_database_url:
        logger.info("FIREBASE_DATABASE_URL not set; approval data store disabled")
        return False
    try:
        info = _service_account_info(settings)
        credentials = _get_credentials(info) if info else None
    except (ValueError, OSError):
        logger.exception("Could not load Firebase service account credentials")
        return False
    if credentials is None:
        logger.warning("No Firebase service account configured; reading unauthenticated")
    _database_client = RealtimeDatabaseRESTClient(
        settings.firebase_database_url,
        credentials,
        timeout=settings.store_read_timeout_seconds,
    )
    logger.info("Realtime Database client ready: %s", settings.firebase_database_url)
    return True


def get_database_client() -> RealtimeDatabaseRESTClient | None:
    return _database_client


async def close_firebase() -> None:
    """Close the client's connection pool (app shutdown)."""
    global _database_client
    if _database_client is None:
        return
    client, _database_client = _database_client, None
    await client.aclose()
    logger.info("Realtime Database client closed")
