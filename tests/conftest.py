"""Pytest configuration and fixtures."""

import httpx
import pytest

from genai_clients.config import Settings


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings with fake credentials writing into a temporary directory."""
    return Settings(
        openai_api_key="sk-test",
        stability_api_key="sk-stability",
        picogen_api_key="pico-token",
        output_dir=str(tmp_path / "images"),
        poll_interval=5.0,
        request_timeout=10.0,
    )


class RecordingTransport(httpx.MockTransport):
    """MockTransport that remembers every request it served."""

    def __init__(self, handler):
        self.requests = []

        def _record(request: httpx.Request):
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)

    def paths(self):
        return [r.url.path for r in self.requests]


@pytest.fixture
def make_transport():
    return RecordingTransport
