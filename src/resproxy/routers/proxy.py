"""Path-prefix proxy endpoint."""

import structlog
from fastapi import APIRouter, Request, Response

from ..models import ForwardOutcome, ForwardRequest
from ..services import ForwardingEngine, strip_mount_prefix, strip_query_param

logger = structlog.get_logger(__name__)
router = APIRouter(tags=["proxy"])

PROXY_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


def _raw_path(request: Request) -> str:
    """Inbound path in its original percent-encoding."""
    raw_path = request.scope.get("raw_path")
    if raw_path:
        return raw_path.decode("latin-1")
    return request.url.path


def _build_response(outcome: ForwardOutcome) -> Response:
    response = Response(content=outcome.body, status_code=outcome.status_code)
    for name, value in outcome.headers:
        response.headers.append(name, value)
    return response


@router.api_route("/{path:path}", methods=PROXY_METHODS)
async def proxy(request: Request):
    """Forward the request to the upstream API."""
    engine: ForwardingEngine = request.app.state.engine
    settings = engine.settings

    forward_request = ForwardRequest(
        method=request.method,
        base=request.query_params.get("base"),
        path=strip_mount_prefix(_raw_path(request), settings.mount_prefix),
        query=strip_query_param(request.url.query, "base"),
        headers=request.headers.raw,
        body=await request.body(),
    )

    outcome = await engine.forward(forward_request)
    return _build_response(outcome)
