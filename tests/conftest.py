"""Shared fixtures for orchestration, API and console tests."""

import json
import time

import pytest
import requests

from app.core import engine
from app.image.providers import ImageProvider


class FakeProvider(ImageProvider):
    """In-memory provider recording prompts; optional delay and failure."""

    def __init__(self, name, payload="ZmFrZQ==", error=None, delay=0.0):
        self.name = name
        self.payload = payload
        self.error = error
        self.delay = delay
        self.prompts = []

    def generate(self, prompt):
        self.prompts.append(prompt)
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.payload


def make_requests_response(status_code=200, json_body=None, text=None, reason="OK"):
    """Build a real `requests.Response` without network access."""
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    if text is None:
        text = json.dumps(json_body if json_body is not None else {})
    response._content = text.encode("utf-8")
    response.headers["Content-Type"] = "application/json"
    return response


@pytest.fixture(autouse=True)
def reset_providers():
    engine.set_image_providers(None)
    yield
    engine.set_image_providers(None)


@pytest.fixture
def no_credentials(monkeypatch, tmp_path):
    """Remove provider keys from env and key-file lookup."""
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("STABILITY_API_KEY", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def fake_provider():
    return FakeProvider


@pytest.fixture
def requests_response():
    return make_requests_response
