"""Response shaping: gzip decoding plus pass-through or wrapped output."""

import gzip
import json
import math
import zlib
from typing import Iterable, Tuple

import structlog

from ..errors import DecodeFailure, InternalError
from ..models import ForwardOutcome, HeaderPairs, ProxyResponse

logger = structlog.get_logger(__name__)

JSON_CONTENT_TYPE = "application/json; charset=utf-8"

# Never forwarded: the body is re-framed by the server writing the reply.
DROPPED_RESPONSE_HEADERS = frozenset(
    {"content-length", "transfer-encoding", "connection", "keep-alive"}
)


def is_gzip(headers: Iterable[Tuple[str, str]]) -> bool:
    for name, value in headers:
        if name.lower() != "content-encoding":
            continue
        if value.strip().lower() in ("gzip", "x-gzip"):
            return True
    return False


def decode_body(headers: HeaderPairs, raw_body: bytes) -> Tuple[HeaderPairs, bytes]:
    """Decompress a gzip body and drop the headers describing the encoded bytes."""
    if not is_gzip(headers):
        return list(headers), raw_body

    try:
        body = gzip.decompress(raw_body)
    except (OSError, EOFError, zlib.error) as e:
        raise DecodeFailure(f"failed to decode gzip: {e}") from e

    remaining = [
        (name, value)
        for name, value in headers
        if name.lower() not in ("content-encoding", "content-length")
    ]
    return remaining, body


def forwardable_headers(headers: HeaderPairs) -> HeaderPairs:
    return [
        (name, value)
        for name, value in headers
        if name.lower() not in DROPPED_RESPONSE_HEADERS
    ]


def _reject_constant(name: str):
    raise ValueError(f"invalid JSON constant: {name}")


def _parse_float(text: str) -> float:
    value = float(text)
    if math.isinf(value):
        raise ValueError(f"number out of range: {text}")
    return value


def wrap_body(status_code: int, body: bytes) -> ProxyResponse:
    """Build the envelope for an upstream reply."""
    if 200 <= status_code < 300:
        try:
            data = json.loads(
                body, parse_constant=_reject_constant, parse_float=_parse_float
            )
        except ValueError as e:
            raise InternalError(f"JSON unmarshal error: {e}") from e
        return ProxyResponse(success=True, data=data)

    text = body.decode("utf-8", errors="replace")
    return ProxyResponse(success=False, error=f"status {status_code}: {text}")


def normalize(
    status_code: int,
    headers: HeaderPairs,
    raw_body: bytes,
    wrap: bool,
) -> ForwardOutcome:
    """Turn a raw upstream response into the outcome written back to the caller.

    Raises DecodeFailure when a gzip body cannot be decompressed and
    InternalError when a 2xx body is not JSON in wrapped mode.
    """
    headers, body = decode_body(headers, raw_body)
    headers = forwardable_headers(headers)

    if not wrap:
        return ForwardOutcome(status_code=status_code, headers=headers, body=body)

    envelope = wrap_body(status_code, body)
    if envelope.success:
        preview = body.decode("utf-8", errors="replace")
        if len(preview) > 200:
            preview = preview[:200] + "..."
        logger.debug("Response preview", preview=preview)

    headers = [
        (name, value) for name, value in headers if name.lower() != "content-type"
    ]
    headers.append(("content-type", JSON_CONTENT_TYPE))
    return ForwardOutcome(
        status_code=200,
        headers=headers,
        body=envelope.to_json_bytes(),
        envelope=envelope,
    )
