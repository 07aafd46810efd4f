"""Request-flow error taxonomy.

Each error carries the HTTP status and machine-readable `code` used by the
router boundary in `midgen2api.api.http_api` to render the OpenAI-style error
body `{"error": {"message", "type": "api_error", "code"}}`.

Malformed bodies intentionally map to 500 `generation_failed` (there is no
dedicated 400 path).
"""


class AdapterError(Exception):
    """Base class for all errors surfaced to API callers."""

    status_code = 500
    code = "generation_failed"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MalformedRequest(AdapterError):
    """Body is not valid JSON or lacks a required field."""


class GenerationFailed(AdapterError):
    """Upstream blocked the prompt, failed, or no user message was supplied."""


class Unauthorized(AdapterError):
    status_code = 401
    code = "unauthorized"


class Forbidden(AdapterError):
    status_code = 403
    code = "invalid_api_key"


class NotFound(AdapterError):
    status_code = 404
    code = "not_found"
