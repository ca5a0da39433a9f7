"""Upstream credential injection."""

import base64
from typing import Dict

import httpx
import structlog

from ..config import Settings
from ..models import AuthType

logger = structlog.get_logger(__name__)


def resolve_auth_type(settings: Settings) -> AuthType:
    """Map the configured auth type to a known scheme, unknown values to NONE."""
    try:
        return AuthType(settings.normalized_auth_type)
    except ValueError:
        logger.warning(
            "Unknown auth type, sending no credentials", auth_type=settings.auth_type
        )
        return AuthType.NONE


def resolve_auth_headers(settings: Settings) -> Dict[str, str]:
    """Return the headers the configured auth scheme contributes."""
    auth_type = resolve_auth_type(settings)

    if auth_type is AuthType.BEARER:
        return {"Authorization": f"Bearer {settings.auth_token}"}

    if auth_type is AuthType.BASIC:
        credentials = f"{settings.auth_user}:{settings.auth_pass}".encode("utf-8")
        token = base64.b64encode(credentials).decode("ascii")
        return {"Authorization": f"Basic {token}"}

    return {}


def apply_auth(headers: httpx.Headers, settings: Settings) -> httpx.Headers:
    """Add configured credentials unless the caller already sent their own.

    Mutates and returns ``headers``.
    """
    for name, value in resolve_auth_headers(settings).items():
        if name in headers:
            continue
        headers[name] = value
    return headers
