"""Outbound URL resolution."""

from typing import Optional
from urllib.parse import unquote_plus, urlsplit

from ..errors import InvalidTarget, MissingTarget

ALLOWED_SCHEMES = {"http", "https"}


def choose_base(configured_base: Optional[str], caller_base: Optional[str]) -> str:
    """Pick the base URL: caller-supplied wins over the configured default."""
    if caller_base:
        return caller_base
    if configured_base:
        return configured_base
    raise MissingTarget()


def validate_base(base: str) -> str:
    """Ensure ``base`` is an absolute http(s) URL."""
    try:
        parts = urlsplit(base)
    except ValueError as e:
        raise InvalidTarget(f"invalid base URL: {base}") from e

    if parts.scheme.lower() not in ALLOWED_SCHEMES or not parts.netloc:
        raise InvalidTarget(f"invalid base URL: {base}")
    if any(ch.isspace() for ch in base):
        raise InvalidTarget(f"invalid base URL: {base}")
    return base


def join_url(base: str, path: str) -> str:
    """Join base and path with exactly one slash between them."""
    return base.rstrip("/") + "/" + path.lstrip("/")


def strip_mount_prefix(path: str, prefix: str) -> str:
    """Remove the gateway mount prefix from an inbound path."""
    prefix = "/" + prefix.strip("/") if prefix.strip("/") else ""
    if prefix and (path == prefix or path.startswith(prefix + "/")):
        return path[len(prefix):]
    return path


def strip_query_param(query: str, name: str) -> str:
    """Drop every ``name`` parameter, keeping the rest in original encoding."""
    if not query:
        return ""
    kept = []
    for part in query.split("&"):
        if not part:
            continue
        key = part.split("=", 1)[0]
        if unquote_plus(key) == name:
            continue
        kept.append(part)
    return "&".join(kept)


def resolve_target(
    configured_base: Optional[str],
    caller_base: Optional[str],
    path: str,
    query: str = "",
) -> str:
    """Build the absolute outbound URL for one call.

    Raises MissingTarget when no base is available and InvalidTarget when the
    chosen base is not an absolute http(s) URL. ``query`` is expected to have
    the base-selecting parameter already removed.
    """
    base = validate_base(choose_base(configured_base, caller_base))
    target = join_url(base, path)
    if query:
        target += "?" + query
    return target
