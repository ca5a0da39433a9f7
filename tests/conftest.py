"""Pytest configuration and fixtures."""

import gzip
import json
from typing import Callable, List

import httpx
import pytest

from resproxy.config import Settings
from resproxy.services import Forwarder, ForwardingEngine


def upstream_response(
    status_code: int = 200,
    body: bytes = b"",
    headers=None,
) -> httpx.Response:
    """Build an upstream response whose raw stream has not been consumed."""
    return httpx.Response(
        status_code, headers=headers or {}, stream=httpx.ByteStream(body)
    )


def json_response(payload, status_code: int = 200) -> httpx.Response:
    return upstream_response(
        status_code,
        json.dumps(payload).encode(),
        {"Content-Type": "application/json"},
    )


def gzip_response(payload: bytes, status_code: int = 200) -> httpx.Response:
    return upstream_response(
        status_code,
        gzip.compress(payload),
        {"Content-Type": "application/json", "Content-Encoding": "gzip"},
    )


class RecordingUpstream:
    """MockTransport handler that records every request it receives."""

    def __init__(self, respond: Callable[[httpx.Request], httpx.Response]):
        self.respond = respond
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.respond(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def make_settings():
    """Settings factory that ignores the surrounding environment."""

    def _make(**overrides) -> Settings:
        values = {"target_base_url": "", "auth_type": "none", "wrap_response": True}
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture
def mock_settings(make_settings):
    """Settings with a default upstream."""
    return make_settings(target_base_url="https://api.example.com")


@pytest.fixture
def upstream():
    """Upstream answering 200 with a JSON list unless reconfigured."""
    return RecordingUpstream(lambda request: json_response([{"id": 1}]))


@pytest.fixture
def make_engine(upstream):
    def _make(settings: Settings) -> ForwardingEngine:
        return ForwardingEngine(settings, Forwarder(transport=upstream.transport()))

    return _make


@pytest.fixture(autouse=True)
def setup_test_env(monkeypatch):
    """Keep the host environment out of Settings."""
    for key in (
        "TARGET_BASE_URL",
        "AUTH_TYPE",
        "AUTH_TOKEN",
        "AUTH_USER",
        "AUTH_PASS",
        "WRAP_RESPONSE",
        "MOUNT_PREFIX",
        "REQUEST_TIMEOUT",
        "STRICT_TOOL_NAMES",
        "PORT",
        "DEBUG",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)
