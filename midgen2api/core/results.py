"""Upstream generation outcome contracts.

Architectural role:
    Defines the tagged union returned by `midgen2api.image.service.generate`
    and consumed by the response shapers in `midgen2api.api.shapers`.

Control-flow interaction:
    Shapers match on the concrete variant. `Success` is the only variant that
    produces an OpenAI payload; `Blocked` and `UpstreamError` are converted to
    `GenerationFailed` at the shaping layer.

Determinism:
    The data classes are purely structural and state-free.
"""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Success:
    """Upstream produced an image.

    Attributes:
        image_base64: Opaque base64 string as returned by the upstream service.
    """

    image_base64: str


@dataclass(frozen=True)
class Blocked:
    """Upstream refused the prompt (content moderation)."""

    reason: str


@dataclass(frozen=True)
class UpstreamError:
    """Transport failure, non-2xx status, or an unusable upstream payload."""

    message: str


GenerationResult = Union[Success, Blocked, UpstreamError]


@dataclass(frozen=True)
class GenerationRequest:
    """Normalized parameters for one upstream call."""

    prompt: str
    aspect_ratio: str
    steps: int
    seed: int = 0
