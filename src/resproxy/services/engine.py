"""Forwarding engine shared by the HTTP and JSON-RPC front-ends."""

import time
from typing import Optional

import structlog

from ..config import Settings
from ..errors import InternalError, ProxyError
from ..models import ForwardOutcome, ForwardRequest, ProxyResponse
from .auth import apply_auth
from .forwarder import Forwarder
from .normalizer import JSON_CONTENT_TYPE, normalize
from .target import resolve_target

logger = structlog.get_logger(__name__)


def error_outcome(error: ProxyError, target: Optional[str] = None) -> ForwardOutcome:
    """Outcome for a gateway-level failure, always an error envelope."""
    envelope = ProxyResponse(success=False, error=error.message)
    return ForwardOutcome(
        status_code=error.status_code,
        headers=[("content-type", JSON_CONTENT_TYPE)],
        body=envelope.to_json_bytes(),
        envelope=envelope,
        error=error,
        target=target,
    )


class ForwardingEngine:
    """Resolve target, attach auth, forward, normalize.

    One instance serves every request; it only reads its settings.
    """

    def __init__(self, settings: Settings, forwarder: Optional[Forwarder] = None):
        self.settings = settings
        self.forwarder = forwarder or Forwarder(timeout=settings.request_timeout)
        self.logger = logger.bind(component="ForwardingEngine")

    async def forward(self, request: ForwardRequest) -> ForwardOutcome:
        start = time.perf_counter()
        outcome = await self._forward(request)
        outcome.elapsed = time.perf_counter() - start

        log = self.logger.warning if outcome.error else self.logger.info
        log(
            "Forwarded request",
            method=request.method,
            target=outcome.target,
            status=outcome.status_code,
            duration_ms=round(outcome.elapsed * 1000, 2),
            error=outcome.error.message if outcome.error else None,
        )
        return outcome

    async def _forward(self, request: ForwardRequest) -> ForwardOutcome:
        try:
            target = resolve_target(
                self.settings.target_base_url, request.base, request.path, request.query
            )
        except ProxyError as e:
            return error_outcome(e)

        headers = request.headers.copy()
        apply_auth(headers, self.settings)
        body = request.body_bytes()
        if body and "content-type" not in headers:
            headers["Content-Type"] = "application/json"

        try:
            result = await self.forwarder.send(request.method, target, headers, body)
        except ProxyError as e:
            return error_outcome(e, target)

        try:
            outcome = normalize(
                result.status_code,
                result.headers,
                result.content,
                self.settings.wrap_response,
            )
        except ProxyError as e:
            return error_outcome(e, target)
        except Exception as e:
            self.logger.exception("Unexpected normalize failure", target=target)
            return error_outcome(InternalError(str(e)), target)

        outcome.target = target
        return outcome
