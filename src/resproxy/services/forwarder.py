"""Outbound HTTP execution."""

import asyncio
from typing import Optional

import httpx
import structlog

from ..errors import UpstreamUnreachable
from ..models import ForwardResult

logger = structlog.get_logger(__name__)

DEFAULT_TIMEOUT = 15.0

# Recomputed by httpx for the outbound connection.
TRANSPORT_HEADERS = frozenset(
    {
        "host",
        "content-length",
        "transfer-encoding",
        "connection",
        "keep-alive",
        "te",
        "trailer",
        "upgrade",
        "proxy-connection",
    }
)


def outbound_headers(headers: httpx.Headers) -> httpx.Headers:
    """Copy inbound headers, dropping the transport-level ones."""
    cleaned = httpx.Headers(
        [
            (name, value)
            for name, value in headers.multi_items()
            if name.lower() not in TRANSPORT_HEADERS
        ]
    )
    # gzip is the only coding the normalizer decodes
    cleaned["Accept-Encoding"] = "gzip"
    return cleaned


class Forwarder:
    """Sends one request upstream and returns the undecoded response."""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self._transport = transport
        self.logger = logger.bind(component="Forwarder")

    async def send(
        self,
        method: str,
        url: str,
        headers: httpx.Headers,
        body: bytes = b"",
    ) -> ForwardResult:
        """Execute the call. Any transport failure raises UpstreamUnreachable.

        ``timeout`` bounds the whole exchange, body included, not each
        individual read.
        """
        try:
            return await asyncio.wait_for(
                self._exchange(method, url, headers, body), timeout=self.timeout
            )
        except asyncio.TimeoutError as e:
            self.logger.error("Upstream request timed out", method=method, url=url)
            raise UpstreamUnreachable(
                f"upstream timeout after {self.timeout}s"
            ) from e

    async def _exchange(
        self,
        method: str,
        url: str,
        headers: httpx.Headers,
        body: bytes,
    ) -> ForwardResult:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                request = client.build_request(
                    method,
                    url,
                    headers=outbound_headers(headers),
                    content=body or None,
                )
                response = await client.send(request, stream=True)
                try:
                    chunks = [chunk async for chunk in response.aiter_raw()]
                finally:
                    await response.aclose()
        except httpx.TimeoutException as e:
            self.logger.error("Upstream request timed out", method=method, url=url)
            raise UpstreamUnreachable(
                f"upstream timeout after {self.timeout}s"
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            self.logger.error(
                "Upstream request failed", method=method, url=url, error=str(e)
            )
            raise UpstreamUnreachable(str(e) or type(e).__name__) from e

        return ForwardResult(
            status_code=response.status_code,
            headers=list(response.headers.multi_items()),
            content=b"".join(chunks),
        )
