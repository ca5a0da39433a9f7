"""Line-oriented JSON-RPC dispatcher for stdio tool runners."""

import asyncio
import json
import sys
from typing import Any, Awaitable, Callable, Dict, Optional, TextIO

import structlog
from pydantic import ValidationError

from .. import __version__
from ..config import Settings
from ..errors import (
    PARSE_ERROR_CODE,
    InternalError,
    InvalidParams,
    MethodNotFound,
    ProxyError,
)
from ..models import ForwardRequest, RPCError, RPCRequest, RPCResponse
from ..services import ForwardingEngine
from .tools import ToolRunParams, list_tools, method_for_tool

logger = structlog.get_logger(__name__)

INVALID_REQUEST_CODE = -32600
PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "mcp-res-proxy"

Handler = Callable[[Any], Awaitable[Any]]


class RPCDispatcher:
    """Dispatches JSON-RPC requests to control methods or the forwarding engine.

    Requests are handled one at a time; every request carrying an id gets
    exactly one reply on that id.
    """

    def __init__(self, settings: Settings, engine: ForwardingEngine):
        self.settings = settings
        self.engine = engine
        self.logger = logger.bind(component="RPCDispatcher")
        self.handlers: Dict[str, Handler] = {
            "ping": self._ping,
            "initialize": self._initialize,
            "resource/list": self._list_resources,
            "resources/list": self._list_resources,
            "tool/list": self._list_tools,
            "tools/list": self._list_tools,
            "tool/run": self._run_tool,
            "tools/run": self._run_tool,
            "tools/call": self._run_tool,
        }

    async def serve(self, reader: TextIO, writer: TextIO) -> None:
        """Read requests line by line until EOF, writing one reply per request."""
        self.logger.info("MCP stdio server started")
        while True:
            line = await asyncio.to_thread(reader.readline)
            if not line:
                break
            reply = await self.handle_line(line)
            if reply is None:
                continue
            writer.write(reply + "\n")
            writer.flush()
        self.logger.info("MCP connection closed")

    async def handle_line(self, line: str) -> Optional[str]:
        line = line.strip()
        if not line:
            return None

        try:
            message = json.loads(line)
        except ValueError as e:
            self.logger.warning("JSON parse error", error=str(e))
            reply = RPCResponse(
                id=None, error=RPCError(code=PARSE_ERROR_CODE, message="Parse error")
            )
            return json.dumps(reply.to_wire())

        reply = await self.handle(message)
        if reply is None:
            return None
        return json.dumps(reply, ensure_ascii=False)

    async def handle(self, message: Any) -> Optional[Dict[str, Any]]:
        """Dispatch one decoded message. Returns None for notifications."""
        try:
            request = RPCRequest.model_validate(message)
        except ValidationError:
            request_id = message.get("id") if isinstance(message, dict) else None
            if not isinstance(request_id, (int, str)):
                request_id = None
            reply = RPCResponse(
                id=request_id,
                error=RPCError(code=INVALID_REQUEST_CODE, message="Invalid Request"),
            )
            return reply.to_wire()

        self.logger.debug("Dispatching", method=request.method, id=request.id)
        handler = self.handlers.get(request.method)
        try:
            if handler is None:
                raise MethodNotFound()
            result = await handler(request.params)
        except ProxyError as e:
            reply = RPCResponse(
                id=request.id, error=RPCError(code=e.rpc_code, message=e.message)
            )
        except Exception as e:
            self.logger.exception("Request handling failed", method=request.method)
            error = InternalError(str(e))
            reply = RPCResponse(
                id=request.id,
                error=RPCError(code=error.rpc_code, message=error.message),
            )
        else:
            reply = RPCResponse(id=request.id, result=result)

        if request.is_notification:
            return None
        return reply.to_wire()

    async def _ping(self, params: Any) -> Dict[str, str]:
        return {"status": "ok"}

    async def _initialize(self, params: Any) -> Dict[str, Any]:
        return {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": {"resources": True, "tools": True},
            "serverInfo": {"name": SERVER_NAME, "version": __version__},
        }

    async def _list_resources(self, params: Any) -> list:
        if not self.settings.target_base_url:
            return []
        return [{"uri": self.settings.target_base_url, "name": "default"}]

    async def _list_tools(self, params: Any) -> Dict[str, Any]:
        return {"tools": [tool.to_wire() for tool in list_tools()]}

    async def _run_tool(self, params: Any) -> Any:
        if params is None:
            raise InvalidParams("missing params")
        if isinstance(params, str):
            try:
                params = json.loads(params)
            except ValueError as e:
                raise InvalidParams(str(e)) from e

        try:
            run = ToolRunParams.model_validate(params)
        except ValidationError as e:
            raise InvalidParams(_describe_validation_error(e)) from e

        method = method_for_tool(run.name, strict=self.settings.strict_tool_names)
        args = run.arguments
        try:
            request = ForwardRequest(
                method=method,
                base=args.base or None,
                path=args.path,
                headers=args.headers,
                body=args.body,
            )
        except ValidationError as e:
            raise InvalidParams(_describe_validation_error(e)) from e

        outcome = await self.engine.forward(request)
        if outcome.error is not None:
            raise outcome.error

        if self.settings.wrap_response:
            return outcome.envelope.to_wire()
        return {
            "status": outcome.status_code,
            "headers": outcome.header_map(),
            "body": outcome.body.decode("utf-8", errors="replace"),
        }


def _describe_validation_error(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "params"
        parts.append(f"{location}: {item['msg']}")
    return "; ".join(parts)


def run_stdio(settings: Settings, engine: Optional[ForwardingEngine] = None) -> None:
    """Serve JSON-RPC on stdin/stdout until the host closes the stream."""
    dispatcher = RPCDispatcher(settings, engine or ForwardingEngine(settings))
    asyncio.run(dispatcher.serve(sys.stdin, sys.stdout))
