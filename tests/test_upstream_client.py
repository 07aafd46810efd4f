"""Tests for upstream request construction and outcome classification."""

import asyncio

import requests

from midgen2api.config import Settings
from midgen2api.core.results import Blocked, GenerationRequest, Success, UpstreamError
from midgen2api.image.client import (
    build_headers,
    build_payload,
    classify_payload,
    send_generation_request,
)
from midgen2api.image.service import generate

from conftest import FAKE_IMAGE, make_upstream_response


class TestRequestEnvelope:
    """The outbound request carries the fixed envelope and headers."""

    def test_payload_fields(self):
        payload = build_payload(GenerationRequest("a fox", "16:9", 30, 7), Settings())
        assert payload == {
            "prompt": "a fox",
            "negative_prompt": "",
            "aspect_ratio": "16:9",
            "steps": 30,
            "seed": 7,
        }

    def test_falsy_fields_use_defaults(self):
        payload = build_payload(GenerationRequest("a fox", "", 0, 0), Settings())
        assert payload["aspect_ratio"] == "1:1"
        assert payload["steps"] == 100
        assert payload["seed"] == 0

    def test_static_headers(self):
        headers = build_headers(Settings())
        assert headers["Origin"] == "https://www.midgenai.com"
        assert headers["Referer"] == "https://www.midgenai.com/text-to-image"
        assert "Chrome/120.0.0.0" in headers["User-Agent"]
        assert headers["Accept-Language"] == "zh-CN,zh;q=0.9,en;q=0.8"

    def test_post_target_and_timeout(self, upstream):
        settings = Settings(upstream_timeout=12.5)
        send_generation_request(GenerationRequest("a fox", "1:1", 100, 0), settings)

        args, kwargs = upstream.call_args
        assert args[0] == "https://www.midgenai.com/api/image-generate"
        assert kwargs["json"]["prompt"] == "a fox"
        assert kwargs["timeout"] == 12.5

    def test_no_timeout_by_default(self, upstream):
        send_generation_request(GenerationRequest("a fox", "1:1", 100, 0), Settings())
        assert upstream.call_args.kwargs["timeout"] is None


class TestClassification:
    """Upstream bodies map onto exactly one result variant."""

    def test_success(self):
        assert classify_payload({"image": FAKE_IMAGE}) == Success(FAKE_IMAGE)

    def test_blocked_carries_reason(self):
        result = classify_payload({"blocked": True, "error": "nsfw content"})
        assert result == Blocked("nsfw content")

    def test_blocked_wins_over_image(self):
        result = classify_payload({"blocked": True, "error": "nope", "image": FAKE_IMAGE})
        assert isinstance(result, Blocked)

    def test_missing_image(self):
        assert classify_payload({"status": "ok"}) == UpstreamError("upstream returned no image data")

    def test_non_json_body(self):
        assert classify_payload("<html>oops</html>") == UpstreamError("upstream returned no image data")

    def test_empty_body(self):
        assert classify_payload("") == UpstreamError("upstream returned no data")


class TestTransportFailures:
    """Transport and HTTP failures become `UpstreamError` values."""

    def test_non_2xx_includes_status_and_body(self, upstream):
        upstream.return_value = make_upstream_response(status_code=502, text="bad gateway")
        result = send_generation_request(GenerationRequest("a", "1:1", 100, 0), Settings())
        assert result == UpstreamError("HTTP 502: bad gateway")

    def test_connection_error(self, upstream):
        upstream.side_effect = requests.exceptions.ConnectionError("refused")
        result = send_generation_request(GenerationRequest("a", "1:1", 100, 0), Settings())
        assert isinstance(result, UpstreamError)
        assert "refused" in result.message

    def test_single_attempt(self, upstream):
        upstream.return_value = make_upstream_response(status_code=500, text="boom")
        send_generation_request(GenerationRequest("a", "1:1", 100, 0), Settings())
        assert upstream.call_count == 1


class TestAsyncService:
    def test_generate_runs_client(self, upstream):
        result = asyncio.run(generate("a fox", "9:16", 100, 0, Settings()))
        assert result == Success(FAKE_IMAGE)
        assert upstream.call_args.kwargs["json"]["aspect_ratio"] == "9:16"
