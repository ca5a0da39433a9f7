"""Static tool catalog for the JSON-RPC front-end."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..errors import InvalidParams
from ..models import Tool

TOOL_METHODS = {
    "api_get": "GET",
    "api_post": "POST",
    "api_put": "PUT",
    "api_delete": "DELETE",
}


class ToolArguments(BaseModel):
    """Arguments accepted by every api_* tool."""

    model_config = ConfigDict(extra="ignore")

    base: Optional[str] = Field(
        None, description="Base URL, defaults to TARGET_BASE_URL"
    )
    path: str = Field("", description="Path appended to the base URL")
    headers: Dict[str, str] = Field(
        default_factory=dict, description="Extra request headers"
    )
    body: Any = Field(None, description="Request body, sent as JSON unless a string")

    @field_validator("headers", mode="before")
    @classmethod
    def _stringify_headers(cls, value: Any) -> Any:
        if value is None:
            return {}
        if not isinstance(value, dict):
            return value
        stringified = {}
        for name, item in value.items():
            if isinstance(item, bool):
                item = "true" if item else "false"
            stringified[name] = item if isinstance(item, str) else str(item)
        return stringified


class ToolRunParams(BaseModel):
    """Params of tool/run: {name, arguments}."""

    name: str
    arguments: ToolArguments


def _input_schema(with_body: bool) -> Dict[str, Any]:
    properties: Dict[str, Any] = {
        "base": {"type": "string", "description": "Base URL of the target API"},
        "path": {"type": "string", "description": "Path below the base URL"},
        "headers": {"type": "object", "description": "Extra request headers"},
    }
    if with_body:
        properties["body"] = {"description": "Request body, JSON value or raw string"}
    return {"type": "object", "properties": properties, "required": ["path"]}


def list_tools() -> List[Tool]:
    """Build the catalog. Identical on every call."""
    return [
        Tool(
            name="api_get",
            description="Perform a GET request against the target API",
            input_schema=_input_schema(with_body=False),
        ),
        Tool(
            name="api_post",
            description="Perform a POST request against the target API",
            input_schema=_input_schema(with_body=True),
        ),
        Tool(
            name="api_put",
            description="Perform a PUT request against the target API",
            input_schema=_input_schema(with_body=True),
        ),
        Tool(
            name="api_delete",
            description="Perform a DELETE request against the target API",
            input_schema=_input_schema(with_body=True),
        ),
    ]


def method_for_tool(name: str, strict: bool = False) -> str:
    """Map a tool name to its HTTP method.

    Unknown names fall back to GET unless ``strict`` is set.
    """
    method = TOOL_METHODS.get(name.lower())
    if method is not None:
        return method
    if strict:
        raise InvalidParams(f"unknown tool: {name}")
    return "GET"
