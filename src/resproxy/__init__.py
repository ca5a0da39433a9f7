"""mcp-res-proxy - forwarding gateway with HTTP and JSON-RPC front-ends."""

__version__ = "0.1.0"

from .config import Settings
from .models import ForwardOutcome, ForwardRequest, ForwardResult, ProxyResponse
from .services import ForwardingEngine, Forwarder

__all__ = [
    "Settings",
    "ForwardingEngine",
    "Forwarder",
    "ForwardOutcome",
    "ForwardRequest",
    "ForwardResult",
    "ProxyResponse",
]
