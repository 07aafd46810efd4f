"""OpenAI response shaping for upstream generation outcomes.

Architectural role:
    Converts a `GenerationResult` into the two OpenAI response contracts the
    adapter serves: `chat.completion` (single object or two stream chunks) and
    `images.generations`.

Response formatting:
    - Chat content is a Markdown image with an inline `data:` URI.
    - Streaming is simulated: the full content arrives in the first chunk and
      the second chunk only carries `finish_reason: "stop"`.
    - SSE framing is `data: <json>\\n\\n` terminated by `data: [DONE]\\n\\n`.

Error handling strategy:
    `Blocked` and `UpstreamError` raise `GenerationFailed`; no partial OpenAI
    shape is ever produced for a failed generation.

Determinism considerations:
    Output depends on wall-clock time (`created`) and caller-supplied ids.
"""

import json
import time

from midgen2api.config import Settings
from midgen2api.core.errors import GenerationFailed
from midgen2api.core.results import Blocked, GenerationResult, Success, UpstreamError


def _unwrap_image(result: GenerationResult) -> str:
    """Return the base64 image of a `Success` or raise for failure variants."""
    if isinstance(result, Success):
        return result.image_base64
    if isinstance(result, Blocked):
        raise GenerationFailed(f"content blocked: {result.reason}")
    if isinstance(result, UpstreamError):
        raise GenerationFailed(result.message)
    raise TypeError(f"Unknown generation result: {type(result).__name__}")


def markdown_image(image_base64: str) -> str:
    return f"![Generated Image](data:image/jpeg;base64,{image_base64})"


def _chunk(request_id: str, model_id: str, created: int, delta: dict, finish_reason):
    return {
        "id": request_id,
        "object": "chat.completion.chunk",
        "created": created,
        "model": model_id,
        "choices": [
            {
                "index": 0,
                "delta": delta,
                "finish_reason": finish_reason,
            }
        ],
    }


def shape_chat(result: GenerationResult, request_id: str, model_id: str, stream: bool):
    """Build the chat-completion response for a generation outcome.

    Args:
        result: Upstream outcome.
        request_id: Per-request correlation id.
        model_id: Model id echoed back to the client.
        stream: Whether the client asked for a streamed response.

    Returns:
        - `stream=False`: one `chat.completion` dict.
        - `stream=True`: list of exactly two `chat.completion.chunk` dicts.

    Raises:
        GenerationFailed: For `Blocked` / `UpstreamError` outcomes.
    """
    content = markdown_image(_unwrap_image(result))
    created = int(time.time())

    if stream:
        return [
            _chunk(request_id, model_id, created, {"content": content}, None),
            _chunk(request_id, model_id, created, {}, "stop"),
        ]

    return {
        "id": request_id,
        "object": "chat.completion",
        "created": created,
        "model": model_id,
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
    }


def shape_image(result: GenerationResult) -> dict:
    """Build the `images.generations` response for a generation outcome.

    Raises:
        GenerationFailed: For `Blocked` / `UpstreamError` outcomes.
    """
    image_base64 = _unwrap_image(result)
    return {
        "created": int(time.time()),
        "data": [{"b64_json": image_base64}],
    }


def shape_model_list(settings: Settings) -> dict:
    """Return the configured models in OpenAI model-list format."""
    created = int(time.time())
    return {
        "object": "list",
        "data": [
            {
                "id": model_id,
                "object": "model",
                "created": created,
                "owned_by": settings.project_name,
            }
            for model_id in settings.models
        ],
    }


def format_sse(chunks):
    """Yield SSE frames for `chunks` followed by the `[DONE]` sentinel."""
    for chunk in chunks:
        yield f"data: {json.dumps(chunk)}\n\n"
    yield "data: [DONE]\n\n"
