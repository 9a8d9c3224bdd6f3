"""Image provider abstraction and the Gemini implementation.

The request handler never talks to an SDK directly.  It receives an
:class:`ImageProvider` instance, constructed once at application startup and
injected through ``app.state``, so tests can substitute a fake provider.

Provider Contract
-----------------
``generate_content(prompt, reference=None)`` sends one prompt (plus an
optional reference image) and returns the provider's raw response.  Shape
normalization is left to :func:`pfpgen.core.response.extract_image`.

Providers translate their own transport errors into the
:mod:`pfpgen.core.errors` taxonomy where they can classify them (rate limit
vs. rejection).  Anything they let through is wrapped by the handler.

Usage Example
-------------
    >>> from pfpgen.core.config import config
    >>> provider = create_provider(config)
    >>> raw = await provider.generate_content("a neon samurai PFP")
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from pfpgen.core.config import PfpgenConfig
from pfpgen.core.errors import (
    GenerationFailedError,
    ProviderRejectedError,
    RateLimitedError,
    is_rate_limit_error,
)
from pfpgen.core.reference import ReferenceImage

logger = logging.getLogger(__name__)


class ImageProvider(ABC):
    """Abstract base class for image generation providers.

    Attributes
    ----------
    name : str
        Short provider name used in logs and the health endpoint.
    model : str
        Model identifier requests are sent to.
    """

    name: str = "base"
    model: str = ""

    @abstractmethod
    async def generate_content(
        self,
        prompt: str,
        reference: ReferenceImage | None = None,
    ) -> Any:
        """Send *prompt* (and *reference*, if given) and return the raw response."""


class GeminiImageProvider(ImageProvider):
    """Google Gemini image generation through the ``google-genai`` SDK.

    Args:
        api_key: Gemini API key.
        model: Image-capable Gemini model identifier.
        base_url: Optional endpoint override (e.g. a proxy).
    """

    name = "gemini"

    def __init__(self, api_key: str, model: str, base_url: str | None = None) -> None:
        http_options = types.HttpOptions(base_url=base_url) if base_url else None
        self.client = genai.Client(api_key=api_key, http_options=http_options)
        self.model = model
        logger.info(f"Gemini provider initialised (model={model}, custom_base_url={bool(base_url)})")

    def _build_contents(self, prompt: str, reference: ReferenceImage | None) -> list:
        parts = []
        if reference is not None:
            parts.append(types.Part.from_bytes(data=reference.data, mime_type=reference.mime_type))
        parts.append(types.Part.from_text(text=prompt))
        return [types.Content(role="user", parts=parts)]

    async def generate_content(
        self,
        prompt: str,
        reference: ReferenceImage | None = None,
    ) -> Any:
        """Request an image-only response for *prompt*.

        Raises:
            RateLimitedError: The API answered 429 / ``RESOURCE_EXHAUSTED``.
            ProviderRejectedError: The API answered any other error status.
        """
        try:
            return await self.client.aio.models.generate_content(
                model=self.model,
                contents=self._build_contents(prompt, reference),
                config=types.GenerateContentConfig(response_modalities=["IMAGE"]),
            )
        except genai_errors.APIError as e:
            if is_rate_limit_error(e, scan_message=False):
                raise RateLimitedError() from e
            # Malformed or unsupported requests are the caller-visible 400s;
            # auth, permission and server faults are ours to own.
            status_code = 400 if e.code == 400 else 500
            raise ProviderRejectedError(
                f"Gemini API error {e.code}: {e.message or e}",
                status_code=status_code,
            ) from e


def create_provider(settings: PfpgenConfig) -> ImageProvider:
    """Build the configured provider.

    Args:
        settings: Application configuration.

    Returns:
        A ready-to-use :class:`GeminiImageProvider`.

    Raises:
        GenerationFailedError: If no API key is configured.
    """
    if not settings.gemini_api_key:
        raise GenerationFailedError("GEMINI_API_KEY is not configured")
    return GeminiImageProvider(
        api_key=settings.gemini_api_key,
        model=settings.model,
        base_url=settings.api_base_url,
    )
