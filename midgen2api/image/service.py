"""Async entry point for upstream image generation.

Role in pipeline:
    Receives already-normalized parameters from the HTTP handlers, builds a
    `GenerationRequest`, and runs the blocking upstream client in a worker
    thread so concurrent requests are not serialized on the event loop.

Error handling strategy:
    Outcomes are returned as `GenerationResult` values; nothing is raised for
    upstream failures.
"""

import asyncio

from midgen2api.config import Settings
from midgen2api.core.results import GenerationRequest, GenerationResult
from midgen2api.image.client import send_generation_request


async def generate(
    prompt: str,
    aspect_ratio: str,
    steps: int,
    seed: int,
    settings: Settings,
) -> GenerationResult:
    """Generate one image through the upstream service.

    Args:
        prompt: Cleaned prompt text (may be empty; the upstream decides).
        aspect_ratio: Resolved aspect-ratio token.
        steps: Inference steps.
        seed: Generation seed (`0` lets the upstream choose).
        settings: Process configuration.

    Returns:
        `Success`, `Blocked`, or `UpstreamError`.
    """
    request = GenerationRequest(
        prompt=prompt,
        aspect_ratio=aspect_ratio,
        steps=steps,
        seed=seed,
    )
    return await asyncio.to_thread(send_generation_request, request, settings)
