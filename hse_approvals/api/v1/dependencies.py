"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for the per-request data source, the resolver,
the company context and the acting user. Routes depend only on these
dependencies, not on infrastructure directly.
"""

from __future__ import annotations

import asyncio
from typing import Annotated

from fastapi import Depends, Path, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from hse_approvals.application.interfaces.repositories import IApprovalDataSource
from hse_approvals.application.services import ApprovalFlowResolver
from hse_approvals.core.config import get_settings
from hse_approvals.domain.entities import ApprovalSubject
from hse_approvals.domain.exceptions import (
    AuthenticationException,
    StoreNotConfiguredException,
    SubjectNotFoundException,
)
from hse_approvals.infrastructure.firebase.client import get_database_client
from hse_approvals.infrastructure.firebase.paths import validate_path_component
from hse_approvals.infrastructure.firebase.repositories import (
    FirebaseApprovalDataSource,
)
from hse_approvals.infrastructure.security.firebase_tokens import (
    verify_firebase_id_token,
)
from hse_approvals.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

# Used only when AUTH_ENABLED is false (local development, emulator).
DEV_USER_HEADER = "X-User-ID"

_http_bearer = HTTPBearer(auto_error=False)


def get_data_source(request: Request) -> IApprovalDataSource:
    """Request-scoped Realtime Database data source (shares app.state.cache)."""
    client = get_database_client()
    if client is None:
        raise StoreNotConfiguredException()
    settings = get_settings()
    return FirebaseApprovalDataSource(
        client,
        cache=getattr(request.app.state, "cache", None),
        subject_collections=settings.subject_collections,
        flow_ttl=settings.cache_ttl_flow_definitions,
        org_level_ttl=settings.cache_ttl_org_levels,
        function_name_ttl=settings.cache_ttl_function_names,
    )


def get_approval_flow_resolver(
    data_source: Annotated[IApprovalDataSource, Depends(get_data_source)],
) -> ApprovalFlowResolver:
    return ApprovalFlowResolver(
        data_source, read_timeout=get_settings().store_read_timeout_seconds
    )


def get_company_id(request: Request) -> str | None:
    """Company context from the company header; None when absent or blank."""
    name = get_settings().company_header_name
    value = (request.headers.get(name) or "").strip()
    if not value:
        return None
    return validate_path_component("company_id", value)


async def get_acting_user_id(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
) -> str:
    """Firebase uid of the caller, from a verified ID token."""
    if not get_settings().auth_enabled:
        user_id = (request.headers.get(DEV_USER_HEADER) or "").strip()
        if not user_id:
            raise AuthenticationException(f"Missing {DEV_USER_HEADER} header")
        return user_id
    if not credentials:
        raise AuthenticationException("Missing bearer token")
    try:
        claims = await asyncio.to_thread(verify_firebase_id_token, credentials.credentials)
    except ValueError as e:
        logger.info("Rejected ID token: %s", e)
        raise AuthenticationException("Invalid or expired ID token") from e
    return str(claims["sub"])


async def get_subject(
    data_source: Annotated[IApprovalDataSource, Depends(get_data_source)],
    process_type: Annotated[str, Path(min_length=1, max_length=128)],
    subject_id: Annotated[str, Path(min_length=1, max_length=256)],
) -> ApprovalSubject:
    """Load the subject named in the path, or 404."""
    validate_path_component("process_type", process_type)
    validate_path_component("subject_id", subject_id)
    subject = await data_source.get_subject(process_type, subject_id)
    if subject is None:
        raise SubjectNotFoundException(process_type, subject_id)
    return subject
