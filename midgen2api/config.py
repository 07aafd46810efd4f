"""Process-wide runtime configuration for the adapter.

Architectural role:
    Centralizes the upstream endpoint, model catalog, default generation
    parameters, and the master API key consumed by `midgen2api.image` and
    `midgen2api.api`.

Lifecycle:
    `load_settings()` is called once at startup (or once per test app) and the
    resulting `Settings` value is injected into the HTTP app via
    `app.state.settings`. Nothing mutates it afterwards.

Relevant environment variables:
    - `API_MASTER_KEY` (sentinel `"1"` disables authorization)
    - `PORT`
    - `HOST`
    - `UPSTREAM_TIMEOUT` (seconds; unset means no timeout)
    - `DEBUG`

Determinism:
    Deterministic for a fixed process environment and `.env` file.
"""

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()

PROJECT_NAME = "midgenai-2api"
PROJECT_VERSION = "1.0.0"

# Master key value meaning "no authorization required".
UNSET_API_KEY = "1"

UPSTREAM_URL = "https://www.midgenai.com/api/image-generate"
ORIGIN_URL = "https://www.midgenai.com"
REFERER_URL = "https://www.midgenai.com/text-to-image"

MODELS = (
    "midgen-v1",
    "midgen-flux",
    "midgen-turbo",
)
DEFAULT_MODEL = "midgen-v1"

DEFAULT_STEPS = 100
DEFAULT_SEED = 0
DEFAULT_ASPECT_RATIO = "1:1"
DEFAULT_IMAGE_SIZE = "1024x1024"


def _parse_timeout(raw):
    """Return a positive float timeout, or `None` when unset/invalid."""
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if value > 0 else None


@dataclass(frozen=True)
class Settings:
    """Immutable adapter configuration.

    Fields mirror the module-level constants so tests can build variants
    (for example with a real master key) without touching the environment.
    """

    api_master_key: str = UNSET_API_KEY
    host: str = "0.0.0.0"
    port: int = 3000
    debug: bool = False

    project_name: str = PROJECT_NAME
    project_version: str = PROJECT_VERSION

    upstream_url: str = UPSTREAM_URL
    origin_url: str = ORIGIN_URL
    referer_url: str = REFERER_URL
    upstream_timeout: float | None = None

    models: tuple[str, ...] = field(default=MODELS)
    default_model: str = DEFAULT_MODEL
    default_steps: int = DEFAULT_STEPS
    default_seed: int = DEFAULT_SEED
    default_aspect_ratio: str = DEFAULT_ASPECT_RATIO
    default_image_size: str = DEFAULT_IMAGE_SIZE

    @property
    def auth_enabled(self) -> bool:
        """Whether `/v1/*` requests must carry a matching bearer token."""
        return bool(self.api_master_key) and self.api_master_key != UNSET_API_KEY


def load_settings() -> Settings:
    """Build `Settings` from the current process environment.

    Returns:
        Frozen `Settings` instance.

    Edge cases:
        - Non-numeric `PORT` raises `ValueError` at startup.
        - Invalid or non-positive `UPSTREAM_TIMEOUT` is treated as unset.
    """
    return Settings(
        api_master_key=os.getenv("API_MASTER_KEY", UNSET_API_KEY),
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "3000")),
        debug=os.getenv("DEBUG") == "true",
        upstream_timeout=_parse_timeout(os.getenv("UPSTREAM_TIMEOUT")),
    )
