"""Shared pytest fixtures for PFP Generator tests."""

import asyncio
import shutil
import tempfile
from pathlib import Path
from typing import Any, Callable, Generator

import pytest
from fastapi.testclient import TestClient

from pfpgen.api.main import create_app
from pfpgen.core.config import PfpgenConfig
from pfpgen.core.providers import ImageProvider
from pfpgen.core.reference import ReferenceImage


def gemini_response(
    data: Any = "AAAA",
    mime_type: str | None = "image/png",
    *,
    camel_case: bool = True,
    leading_text: str | None = None,
) -> dict:
    """Build a REST-shaped Gemini response with one inline image part.

    Args:
        data: Inline payload value.
        mime_type: Declared MIME type, or ``None`` to omit it.
        camel_case: Use ``inlineData``/``mimeType`` (REST) instead of
            ``inline_data``/``mime_type``.
        leading_text: Optional text part placed before the image part.

    Returns:
        Response dictionary.
    """
    inline_key, mime_key = ("inlineData", "mimeType") if camel_case else ("inline_data", "mime_type")
    inline: dict = {"data": data}
    if mime_type is not None:
        inline[mime_key] = mime_type

    parts: list[dict] = []
    if leading_text is not None:
        parts.append({"text": leading_text})
    parts.append({inline_key: inline})
    return {"candidates": [{"content": {"role": "model", "parts": parts}}]}


class FakeProvider(ImageProvider):
    """In-memory provider that records calls and replays a canned outcome."""

    name = "fake"
    model = "fake-image-model"

    def __init__(
        self,
        response: Any = None,
        error: BaseException | None = None,
        delay: float = 0.0,
    ) -> None:
        self.response = response if response is not None else gemini_response()
        self.error = error
        self.delay = delay
        self.calls: list[tuple[str, ReferenceImage | None]] = []

    async def generate_content(self, prompt: str, reference: ReferenceImage | None = None) -> Any:
        self.calls.append((prompt, reference))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def test_config() -> PfpgenConfig:
    """Create a test configuration that ignores any local .env file.

    Returns:
        PfpgenConfig instance for testing
    """
    return PfpgenConfig(
        _env_file=None,
        gemini_api_key=None,
        model="gemini-test-image",
        request_timeout=2.0,
        max_concept_length=200,
        reference_image_path=None,
    )


@pytest.fixture
def fake_provider() -> FakeProvider:
    """Provider returning a 1-part PNG response with payload ``AAAA``."""
    return FakeProvider()


@pytest.fixture
def make_provider() -> Callable[..., FakeProvider]:
    """Factory fixture for providers with custom responses or errors."""
    return FakeProvider


@pytest.fixture
def make_response() -> Callable[..., dict]:
    """Factory fixture for REST-shaped Gemini responses."""
    return gemini_response


@pytest.fixture
def make_client(test_config: PfpgenConfig) -> Generator[Callable[..., TestClient], None, None]:
    """Factory fixture building TestClients around injected providers.

    Clients are entered (lifespan started) on creation and closed on teardown.
    """
    clients: list[TestClient] = []

    def _make(
        provider: ImageProvider | None = None,
        settings: PfpgenConfig | None = None,
        reference: ReferenceImage | None = None,
    ) -> TestClient:
        app = create_app(settings=settings or test_config, provider=provider, reference=reference)
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def test_client(make_client, fake_provider) -> TestClient:
    """TestClient wired to :func:`fake_provider`."""
    return make_client(fake_provider)
