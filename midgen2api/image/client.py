"""Midgen AI upstream HTTP client.

Processing flow:
    1. Build the fixed request envelope from a `GenerationRequest`.
    2. Attach the static browser-like headers the upstream expects.
    3. Submit one JSON POST to the configured upstream URL.
    4. Classify the response into a `GenerationResult` variant.

Base64 handling:
    The `image` field is treated as an opaque base64 string; it is neither
    decoded nor validated here.

Retry behavior:
    No retry loop is implemented. Each request is attempted exactly once.
    No timeout is applied unless `UPSTREAM_TIMEOUT` is configured, so a hung
    upstream hangs its owning request.

Error handling strategy:
    Transport and HTTP failures are returned as `UpstreamError` values rather
    than raised, so callers must handle every outcome explicitly.

Security considerations:
    Error messages include raw upstream response bodies and are surfaced to
    API callers verbatim.
"""

import logging

import requests

from midgen2api.config import Settings
from midgen2api.core.results import (
    Blocked,
    GenerationRequest,
    GenerationResult,
    Success,
    UpstreamError,
)


logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


def build_headers(settings: Settings) -> dict:
    """Return the static upstream compatibility headers."""
    return {
        "Origin": settings.origin_url,
        "Referer": settings.referer_url,
        "User-Agent": USER_AGENT,
        "Accept": "*/*",
        "Accept-Language": "zh-CN,zh;q=0.9,en;q=0.8",
        "Priority": "u=1, i",
    }


def build_payload(request: GenerationRequest, settings: Settings) -> dict:
    """Build the upstream JSON envelope, filling falsy fields with defaults."""
    return {
        "prompt": request.prompt,
        "negative_prompt": "",
        "aspect_ratio": request.aspect_ratio or settings.default_aspect_ratio,
        "steps": request.steps or settings.default_steps,
        "seed": request.seed or settings.default_seed,
    }


def classify_payload(data) -> GenerationResult:
    """Map a decoded upstream body to a `GenerationResult`.

    Args:
        data: Parsed JSON body, or raw text when the body was not JSON.

    Returns:
        - `UpstreamError` for an empty body.
        - `Blocked` when the upstream flags the prompt (`blocked: true`).
        - `UpstreamError` when no `image` field is present.
        - `Success` otherwise.
    """
    if data is None or data == "":
        return UpstreamError("upstream returned no data")

    if not isinstance(data, dict):
        return UpstreamError("upstream returned no image data")

    if data.get("blocked"):
        return Blocked(reason=str(data.get("error") or "no reason given"))

    image = data.get("image")
    if not image:
        return UpstreamError("upstream returned no image data")

    return Success(image_base64=str(image))


def _decode_body(response: requests.Response):
    try:
        return response.json()
    except ValueError:
        return response.text


def send_generation_request(request: GenerationRequest, settings: Settings) -> GenerationResult:
    """Perform one blocking upstream generation call.

    Args:
        request: Normalized generation parameters.
        settings: Process configuration (endpoint, headers, defaults, timeout).

    Returns:
        A `GenerationResult` variant; this function does not raise for
        transport or HTTP failures.
    """
    payload = build_payload(request, settings)
    logger.debug(
        "Upstream request aspect_ratio=%s steps=%s seed=%s prompt_chars=%d",
        payload["aspect_ratio"],
        payload["steps"],
        payload["seed"],
        len(payload["prompt"] or ""),
    )

    try:
        response = requests.post(
            settings.upstream_url,
            json=payload,
            headers=build_headers(settings),
            timeout=settings.upstream_timeout,
        )
    except requests.exceptions.RequestException as err:
        logger.error("Upstream transport failure: %s", err)
        return UpstreamError(f"upstream request failed: {err}")

    if not 200 <= response.status_code < 300:
        logger.warning("Upstream returned HTTP %s", response.status_code)
        return UpstreamError(f"HTTP {response.status_code}: {response.text}")

    result = classify_payload(_decode_body(response))
    logger.info("Upstream generation finished: %s", type(result).__name__)
    return result
