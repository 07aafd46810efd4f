"""
HTTP API adapter for the Midgen AI upstream.

Architectural role:
- Expose OpenAI-compatible HTTP interfaces.
- Gate `/v1/*` with the static bearer-token check.
- Translate requests into upstream generation parameters and delegate the
  call to `midgen2api.image.service.generate`.
- Normalize upstream outcomes to response transport contracts (JSON or SSE).

Endpoint responsibilities:
- `GET /health`: liveness probe with version.
- `GET /`: HTML landing page.
- `GET /v1/models`: static model catalog, no upstream call.
- `POST /v1/chat/completions`: last user message -> directive parsing ->
  upstream -> chat completion (JSON or two-chunk SSE).
- `POST /v1/images/generations`: prompt + size -> upstream -> `b64_json`.

API request lifecycle (`/v1/*`):
1. Pre-flight `OPTIONS` short-circuits with 204 before anything else.
2. Authorization gate (skipped when the master key is the unset sentinel).
3. Routing; unknown paths or methods become 404 `not_found`.
4. Handler flow; `AdapterError`s become `{"error": {...}}` JSON bodies.

Error handling strategy:
- All failures inside a request flow are converted to JSON error responses
  at this boundary; none crash the process.
- Malformed JSON and missing fields map to 500 `generation_failed`; there is
  no dedicated 400 path.

Side effects:
- Performs one outbound upstream call per generation request.
- Adds CORS headers to every response.

Determinism considerations:
- Request ids (`req-<uuid4>`) and timestamps are generated per request.
"""

import json
import logging
import secrets
import uuid

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse, Response, StreamingResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from midgen2api.api.schemas import ChatCompletionRequest, ImageGenerationRequest
from midgen2api.api.shapers import format_sse, shape_chat, shape_image, shape_model_list
from midgen2api.config import Settings, load_settings
from midgen2api.core.errors import (
    AdapterError,
    Forbidden,
    GenerationFailed,
    MalformedRequest,
    NotFound,
    Unauthorized,
)
from midgen2api.image.service import generate
from midgen2api.prompting.aspect_ratio import resolve_aspect_ratio
from midgen2api.prompting.directives import parse_directives


logger = logging.getLogger(__name__)

API_PREFIX = "/v1/"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}

STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}

router = APIRouter()


# ============================================================
# Helpers
# ============================================================

def error_response(status_code: int, message: str, code: str) -> JSONResponse:
    """Render the OpenAI-style error body."""
    return JSONResponse(
        status_code=status_code,
        content={"error": {"message": message, "type": "api_error", "code": code}},
    )


def new_request_id() -> str:
    return f"req-{uuid.uuid4()}"


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def authorize(authorization: str | None, settings: Settings) -> None:
    """Validate the bearer token for `/v1/*` requests.

    Raises:
        Unauthorized: Header missing or not a `Bearer` credential.
        Forbidden: Token does not match the configured master key.
    """
    if not settings.auth_enabled:
        return

    if not authorization or not authorization.startswith("Bearer "):
        raise Unauthorized("Bearer token authentication is required.")

    token = authorization[len("Bearer "):]
    if not secrets.compare_digest(token.encode(), settings.api_master_key.encode()):
        raise Forbidden("Invalid API key.")


def not_found_for(path: str) -> NotFound:
    if path.startswith(API_PREFIX):
        return NotFound(f"Unsupported API path: {path}")
    return NotFound(f"Path not found: {path}")


async def read_json_body(request: Request) -> dict:
    """Parse the request body as a JSON object (empty body -> `{}`).

    Raises:
        MalformedRequest: Body is not valid JSON or not a JSON object.
    """
    raw = await request.body()
    if not raw:
        return {}

    try:
        body = json.loads(raw)
    except ValueError as err:
        raise MalformedRequest("Invalid JSON") from err

    if not isinstance(body, dict):
        raise MalformedRequest("Request body must be a JSON object")
    return body


def validate_body(model, body: dict):
    try:
        return model.model_validate(body)
    except ValidationError as err:
        first = err.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        raise MalformedRequest(f"Invalid request body at '{location}': {first['msg']}") from err


def render_landing_page(settings: Settings) -> str:
    return (
        '<!DOCTYPE html><html><head><meta charset="utf-8">'
        "<title>Midgen AI 2 API</title></head><body>"
        "<h1>Midgen AI to OpenAI API Adapter</h1>"
        f"<p>Version: {settings.project_version}</p>"
        "<p>API Endpoints:</p><ul>"
        "<li>GET /v1/models</li>"
        "<li>POST /v1/chat/completions</li>"
        "<li>POST /v1/images/generations</li>"
        "</ul></body></html>"
    )


# ============================================================
# Service Endpoints
# ============================================================

@router.get("/health")
def health(request: Request):
    return {"status": "ok", "version": get_settings(request).project_version}


@router.get("/", response_class=HTMLResponse)
def landing_page(request: Request):
    return HTMLResponse(render_landing_page(get_settings(request)))


# ============================================================
# Model Listing
# ============================================================

@router.get("/v1/models")
def list_models(request: Request):
    """Return the configured models as OpenAI-style model metadata."""
    return shape_model_list(get_settings(request))


# ============================================================
# OpenAI-Compatible Chat Completions
# ============================================================

@router.post("/v1/chat/completions")
async def chat_completions(request: Request):
    """
    Generate an image from the latest user message.

    Flow:
    - Locate the most recent `user` message (absence -> `GenerationFailed`).
    - Strip `--ar` directives to resolve the aspect ratio.
    - Call the upstream once with default steps and seed `0`.
    - Return a Markdown image as a completion or as two SSE chunks.

    Streaming is simulated: the upstream call completes before the first
    byte is sent, so failures always surface as JSON errors, never as a
    broken stream.
    """
    settings = get_settings(request)
    request_id = new_request_id()
    body = validate_body(ChatCompletionRequest, await read_json_body(request))

    last_message = body.last_user_message()
    if last_message is None:
        raise GenerationFailed("No user message found")

    parsed = parse_directives(last_message.text())
    model_id = body.model or settings.default_model
    stream = bool(body.stream)

    logger.debug(
        "Chat request id=%s model=%s stream=%s aspect_ratio=%s",
        request_id,
        model_id,
        stream,
        parsed.aspect_ratio,
    )

    result = await generate(
        parsed.clean_prompt,
        parsed.aspect_ratio,
        settings.default_steps,
        settings.default_seed,
        settings,
    )
    shaped = shape_chat(result, request_id, model_id, stream)

    if stream:
        return StreamingResponse(
            format_sse(shaped),
            media_type="text/event-stream",
            headers=STREAM_HEADERS,
        )
    return shaped


# ============================================================
# OpenAI-Compatible Image Generations
# ============================================================

@router.post("/v1/images/generations")
async def image_generations(request: Request):
    """Generate one image and return it as `b64_json`."""
    settings = get_settings(request)
    request_id = new_request_id()
    body = validate_body(ImageGenerationRequest, await read_json_body(request))

    if not body.prompt:
        raise MalformedRequest("prompt is required")

    aspect_ratio = resolve_aspect_ratio(body.size or settings.default_image_size)

    logger.debug("Image request id=%s size=%s aspect_ratio=%s", request_id, body.size, aspect_ratio)

    result = await generate(
        body.prompt,
        aspect_ratio,
        settings.default_steps,
        settings.default_seed,
        settings,
    )
    return shape_image(result)


# ============================================================
# Boundary: error handlers and gateway middleware
# ============================================================

async def handle_adapter_error(request: Request, exc: AdapterError):
    if exc.status_code >= 500:
        logger.error("Request %s %s failed: %s", request.method, request.url.path, exc.message)
    return error_response(exc.status_code, exc.message, exc.code)


async def handle_http_exception(request: Request, exc: StarletteHTTPException):
    # Unknown routes and unsupported methods on known routes are both 404s.
    if exc.status_code in (404, 405):
        err = not_found_for(request.url.path)
        return error_response(err.status_code, err.message, err.code)
    return error_response(exc.status_code, str(exc.detail), "api_error")


async def gateway(request: Request, call_next):
    """Pre-flight, authorization gate, last-resort error mapping and CORS."""
    if request.method == "OPTIONS":
        return Response(status_code=204, headers=CORS_HEADERS)

    if request.url.path.startswith(API_PREFIX):
        try:
            authorize(request.headers.get("authorization"), get_settings(request))
            response = await call_next(request)
        except AdapterError as exc:
            response = error_response(exc.status_code, exc.message, exc.code)
        except Exception as exc:
            logger.exception("Unhandled error for %s %s", request.method, request.url.path)
            response = error_response(500, str(exc), "generation_failed")
    else:
        response = await call_next(request)

    response.headers.update(CORS_HEADERS)
    return response


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application around an immutable `Settings` value.

    Args:
        settings: Configuration to inject; loaded from the environment when
            omitted.

    Returns:
        Configured `FastAPI` instance. Interactive docs routes are disabled
        so that every path outside the documented surface is a 404, and
        trailing-slash variants of known routes are not redirected.
    """
    settings = settings or load_settings()

    app = FastAPI(
        title=settings.project_name,
        version=settings.project_version,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        redirect_slashes=False,
    )
    app.state.settings = settings

    app.add_exception_handler(AdapterError, handle_adapter_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.middleware("http")(gateway)
    app.include_router(router)
    return app


app = create_app()
