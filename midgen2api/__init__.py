"""OpenAI-compatible adapter in front of the Midgen AI image generator."""

from midgen2api.config import PROJECT_VERSION

__version__ = PROJECT_VERSION
