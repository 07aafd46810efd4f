"""Shared fixtures: app factories and a patched upstream transport."""

from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from midgen2api.api.http_api import create_app
from midgen2api.config import Settings


FAKE_IMAGE = "aGVsbG8taW1hZ2U="


def make_upstream_response(status_code=200, payload=None, text=None):
    """Build a stand-in for `requests.Response`."""
    response = MagicMock()
    response.status_code = status_code
    if payload is not None:
        response.json.return_value = payload
        response.text = text if text is not None else str(payload)
    else:
        response.json.side_effect = ValueError("not json")
        response.text = text or ""
    return response


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def secured_settings() -> Settings:
    return Settings(api_master_key="sk-test-key")


@pytest.fixture
def client(settings):
    return TestClient(create_app(settings))


@pytest.fixture
def secured_client(secured_settings):
    return TestClient(create_app(secured_settings))


@pytest.fixture
def upstream():
    """Patch the upstream POST; defaults to a successful image response."""
    with patch("midgen2api.image.client.requests.post") as mock_post:
        mock_post.return_value = make_upstream_response(payload={"image": FAKE_IMAGE})
        yield mock_post
