"""Services module for mcp-res-proxy."""

from .auth import apply_auth, resolve_auth_headers
from .engine import ForwardingEngine
from .forwarder import Forwarder
from .normalizer import normalize
from .target import resolve_target, strip_mount_prefix, strip_query_param

__all__ = [
    "ForwardingEngine",
    "Forwarder",
    "apply_auth",
    "normalize",
    "resolve_auth_headers",
    "resolve_target",
    "strip_mount_prefix",
    "strip_query_param",
]
