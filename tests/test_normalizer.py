"""Tests for response normalization."""

import gzip
import json

import pytest

from resproxy.errors import DecodeFailure, InternalError
from resproxy.services.normalizer import normalize


class TestPassThrough:
    """Tests for pass-through mode."""

    def test_status_headers_and_body_are_preserved(self):
        outcome = normalize(
            201,
            [
                ("Content-Type", "text/plain"),
                ("Set-Cookie", "a=1"),
                ("Set-Cookie", "b=2"),
                ("Content-Length", "5"),
            ],
            b"hello",
            wrap=False,
        )

        assert outcome.status_code == 201
        assert outcome.body == b"hello"
        assert outcome.headers == [
            ("Content-Type", "text/plain"),
            ("Set-Cookie", "a=1"),
            ("Set-Cookie", "b=2"),
        ]
        assert outcome.envelope is None

    def test_error_status_is_preserved(self):
        outcome = normalize(404, [], b"not found", wrap=False)

        assert outcome.status_code == 404
        assert outcome.body == b"not found"

    def test_gzip_body_is_decompressed(self):
        outcome = normalize(
            200,
            [
                ("Content-Type", "application/json"),
                ("Content-Encoding", "gzip"),
                ("Content-Length", "31"),
            ],
            gzip.compress(b'{"ok":true}'),
            wrap=False,
        )

        assert outcome.body == b'{"ok":true}'
        assert outcome.header("content-encoding") is None
        assert outcome.header("content-length") is None
        assert outcome.header("content-type") == "application/json"

    def test_hop_by_hop_headers_are_dropped(self):
        headers = [("Transfer-Encoding", "chunked"), ("Connection", "close")]

        outcome = normalize(200, headers, b"x", wrap=False)

        assert outcome.headers == []


class TestWrapped:
    """Tests for wrapped mode."""

    def test_success_envelope(self):
        outcome = normalize(
            200, [("Content-Type", "application/json")], b'[{"id":1}]', wrap=True
        )

        assert outcome.status_code == 200
        assert json.loads(outcome.body) == {"success": True, "data": [{"id": 1}]}
        assert outcome.envelope.success is True

    def test_non_2xx_keeps_raw_body_in_error(self):
        outcome = normalize(
            404, [("Content-Type", "text/plain")], b"not found", wrap=True
        )

        assert json.loads(outcome.body) == {
            "success": False,
            "error": "status 404: not found",
        }
        assert outcome.status_code == 200

    def test_non_2xx_json_body_is_not_parsed(self):
        outcome = normalize(500, [], b'{"message": "boom"}', wrap=True)

        assert outcome.envelope.error == 'status 500: {"message": "boom"}'

    def test_content_type_is_always_json(self):
        outcome = normalize(200, [("Content-Type", "text/html")], b"{}", wrap=True)

        content_types = [
            value for name, value in outcome.headers if name.lower() == "content-type"
        ]
        assert content_types == ["application/json; charset=utf-8"]

    def test_other_headers_are_kept(self):
        outcome = normalize(200, [("X-Request-Id", "abc")], b"{}", wrap=True)

        assert outcome.header("x-request-id") == "abc"

    @pytest.mark.parametrize("body", [b"<html>nope</html>", b"", b"\xff\xfe"])
    def test_2xx_that_is_not_json_is_an_internal_error(self, body):
        with pytest.raises(InternalError):
            normalize(200, [], body, wrap=True)

    @pytest.mark.parametrize(
        "body", [b"NaN", b"Infinity", b"-Infinity", b'{"v": NaN}', b"[1e999]"]
    )
    def test_2xx_with_non_finite_numbers_is_an_internal_error(self, body):
        with pytest.raises(InternalError):
            normalize(200, [], body, wrap=True)

    def test_non_finite_numbers_pass_through_unwrapped(self):
        outcome = normalize(200, [], b"NaN", wrap=False)

        assert outcome.body == b"NaN"

    def test_gzip_then_wrap(self):
        payload = gzip.compress(b'{"ok":true}')

        outcome = normalize(200, [("Content-Encoding", "gzip")], payload, wrap=True)

        assert outcome.envelope.data == {"ok": True}
        assert outcome.header("content-encoding") is None

    @pytest.mark.parametrize("status", [200, 404])
    def test_envelope_has_exactly_one_side(self, status):
        outcome = normalize(status, [], b'{"a":1}', wrap=True)
        wire = json.loads(outcome.body)

        assert ("data" in wire) != ("error" in wire)
        assert wire["success"] == ("data" in wire)


class TestDecoding:
    def test_broken_gzip_is_a_decode_failure(self):
        with pytest.raises(DecodeFailure):
            normalize(
                200, [("Content-Encoding", "gzip")], b"definitely not gzip", wrap=False
            )

    def test_truncated_gzip_is_a_decode_failure(self):
        payload = gzip.compress(b'{"ok":true}')[:-6]

        with pytest.raises(DecodeFailure):
            normalize(200, [("Content-Encoding", "gzip")], payload, wrap=True)


@pytest.mark.parametrize("wrap", [True, False])
@pytest.mark.parametrize(
    "status,body", [(200, b'{"b":2,"a":[1,"x"]}'), (503, b"unavailable")]
)
def test_normalizing_twice_is_byte_identical(wrap, status, body):
    headers = [("Content-Type", "application/json"), ("Content-Encoding", "gzip")]
    raw = gzip.compress(body)

    first = normalize(status, headers, raw, wrap)
    second = normalize(status, headers, raw, wrap)

    assert first.status_code == second.status_code
    assert first.headers == second.headers
    assert first.body == second.body
