"""Data models for mcp-res-proxy."""

import json
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .errors import ProxyError

HeaderPairs = List[Tuple[str, str]]


class AuthType(str, Enum):
    """Upstream authentication schemes."""

    NONE = "none"
    BEARER = "bearer"
    BASIC = "basic"


class ForwardRequest(BaseModel):
    """One inbound call, in the shape the forwarding engine consumes."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    method: str = Field("GET", description="HTTP method")
    base: Optional[str] = Field(None, description="Explicit base URL override")
    path: str = Field("", description="Path below the base URL")
    query: str = Field("", description="Raw query string, original encoding")
    headers: httpx.Headers = Field(
        default_factory=httpx.Headers, description="Inbound headers"
    )
    body: Any = Field(None, description="Raw bytes, text or a JSON-serializable value")

    @field_validator("method")
    @classmethod
    def _upper_method(cls, value: str) -> str:
        return value.upper()

    @field_validator("headers", mode="before")
    @classmethod
    def _coerce_headers(cls, value: Any) -> httpx.Headers:
        return httpx.Headers(value or {})

    def body_bytes(self) -> bytes:
        """Serialize the body to the bytes sent upstream."""
        if self.body is None:
            return b""
        if isinstance(self.body, bytes):
            return self.body
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return json.dumps(self.body).encode("utf-8")


class ForwardResult(BaseModel):
    """Raw upstream response, body still in its transfer coding."""

    status_code: int = Field(..., ge=100, le=599, description="Upstream status code")
    headers: HeaderPairs = Field(default_factory=list, description="Upstream headers")
    content: bytes = Field(b"", description="Raw body bytes")

    def header(self, name: str) -> Optional[str]:
        lowered = name.lower()
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return None

    def parsed(self) -> Any:
        return json.loads(self.content)


class ProxyResponse(BaseModel):
    """Wrapped-mode envelope: exactly one of data/error is populated."""

    success: bool
    data: Any = None
    error: Optional[str] = None

    @model_validator(mode="after")
    def _check_exclusive(self) -> "ProxyResponse":
        if self.success and self.error is not None:
            raise ValueError("a successful response cannot carry an error")
        if not self.success and self.error is None:
            raise ValueError("a failed response must carry an error")
        if not self.success and self.data is not None:
            raise ValueError("a failed response cannot carry data")
        return self

    def to_wire(self) -> Dict[str, Any]:
        if self.success:
            return {"success": True, "data": self.data}
        return {"success": False, "error": self.error}

    def to_json_bytes(self) -> bytes:
        return json.dumps(
            self.to_wire(), separators=(",", ":"), ensure_ascii=False, allow_nan=False
        ).encode("utf-8")


class ForwardOutcome(BaseModel):
    """The single result the engine produces for a call."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    status_code: int
    headers: HeaderPairs = Field(default_factory=list)
    body: bytes = b""
    envelope: Optional[ProxyResponse] = None
    error: Optional[ProxyError] = None
    target: Optional[str] = None
    elapsed: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None

    def header(self, name: str) -> Optional[str]:
        lowered = name.lower()
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return None

    def header_map(self) -> Dict[str, List[str]]:
        grouped: Dict[str, List[str]] = {}
        for key, value in self.headers:
            grouped.setdefault(key, []).append(value)
        return grouped


class Tool(BaseModel):
    """Tool descriptor reported by tools/list."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., description="Tool name")
    description: str = Field(..., description="Human readable description")
    input_schema: Optional[Dict[str, Any]] = Field(
        None, alias="inputSchema", description="JSON schema of the arguments"
    )

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class RPCRequest(BaseModel):
    """JSON-RPC request or notification."""

    model_config = ConfigDict(extra="ignore")

    jsonrpc: str = "2.0"
    id: Union[int, str, None] = None
    method: str
    params: Any = None

    @property
    def is_notification(self) -> bool:
        return "id" not in self.model_fields_set


class RPCError(BaseModel):
    code: int
    message: str


class RPCResponse(BaseModel):
    """JSON-RPC reply; carries either result or error."""

    jsonrpc: str = "2.0"
    id: Union[int, str, None] = None
    result: Any = None
    error: Optional[RPCError] = None

    def to_wire(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            payload["error"] = self.error.model_dump()
        else:
            payload["result"] = self.result
        return payload
