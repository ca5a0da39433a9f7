"""JSON-RPC front-end."""

from .server import RPCDispatcher, run_stdio
from .tools import TOOL_METHODS, list_tools, method_for_tool

__all__ = [
    "RPCDispatcher",
    "TOOL_METHODS",
    "list_tools",
    "method_for_tool",
    "run_stdio",
]
