"""Error types raised by the forwarding engine and its front-ends."""


class ProxyError(Exception):
    """Base class for gateway failures.

    Each subclass knows the HTTP status and the JSON-RPC error code it maps
    to, so front-ends translate errors without knowing every kind.
    """

    status_code: int = 500
    rpc_code: int = -32603
    default_message: str = "Internal error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingTarget(ProxyError):
    status_code = 400
    rpc_code = -32602
    default_message = (
        "missing base URL (provide ?base=API_URL, args.base or TARGET_BASE_URL)"
    )


class InvalidTarget(ProxyError):
    status_code = 400
    rpc_code = -32602
    default_message = "invalid base URL"


class UpstreamUnreachable(ProxyError):
    status_code = 502
    rpc_code = -32001
    default_message = "upstream unreachable"


class DecodeFailure(ProxyError):
    status_code = 500
    rpc_code = -32002
    default_message = "failed to decode gzip response"


class InvalidParams(ProxyError):
    status_code = 400
    rpc_code = -32602
    default_message = "Invalid params"


class MethodNotFound(ProxyError):
    status_code = 404
    rpc_code = -32601
    default_message = "Method not found"


class InternalError(ProxyError):
    status_code = 500
    rpc_code = -32603
    default_message = "Internal error"


PARSE_ERROR_CODE = -32700
