"""The PFP generation pipeline.

``generate_pfp`` is the whole request handler minus HTTP:

1. Clean the concept (reject before any network traffic).
2. Compile the prompt.
3. Call the provider, bounded by an explicit timeout.
4. Normalise the response into a :class:`GeneratedImage`.

There is no retry and no caching: every call makes exactly one provider
request, so the same concept twice yields two independent generations.

Every failure leaves this function as a :class:`~pfpgen.core.errors.PfpError`
subclass.  Unclassified exceptions are checked for a rate-limit signal and
otherwise wrapped in :class:`~pfpgen.core.errors.GenerationFailedError`.
"""

from __future__ import annotations

import asyncio
import logging

from pfpgen.core.errors import (
    GenerationFailedError,
    PfpError,
    RateLimitedError,
    is_rate_limit_error,
)
from pfpgen.core.prompt_builder import build_prompt, clean_concept
from pfpgen.core.providers import ImageProvider
from pfpgen.core.reference import ReferenceImage
from pfpgen.core.response import GeneratedImage, extract_image

logger = logging.getLogger(__name__)


async def generate_pfp(
    concept: object,
    provider: ImageProvider | None,
    *,
    max_concept_length: int = 200,
    timeout: float = 60.0,
    reference: ReferenceImage | None = None,
) -> GeneratedImage:
    """Generate a profile picture for *concept*.

    Args:
        concept: Raw concept value from the caller.
        provider: Provider to call.  ``None`` means the service has no
            provider configured.
        max_concept_length: Concepts are cut to this many characters.
        timeout: Seconds to wait for the provider.
        reference: Optional identity-anchor image sent with the prompt.

    Returns:
        The generated image.

    Raises:
        InvalidInputError: Bad concept; the provider is not contacted.
        ProviderRejectedError: Provider answered with an error status.
        RateLimitedError: Provider signalled quota exhaustion.
        NoImageReturnedError: Provider answered without an inline image.
        GenerationFailedError: Anything else, including timeouts and a
            missing provider.
    """
    cleaned = clean_concept(concept, max_length=max_concept_length)

    if provider is None:
        raise GenerationFailedError("No image provider configured (is GEMINI_API_KEY set?)")

    logger.info(f"Generating PFP with {provider.name}:{provider.model} for concept {cleaned!r}")

    try:
        prompt = build_prompt(cleaned, with_reference=reference is not None)
        response = await asyncio.wait_for(
            provider.generate_content(prompt, reference=reference),
            timeout=timeout,
        )
        image = extract_image(response)
    except PfpError as e:
        logger.warning(f"PFP generation failed ({e.code}): {e.details}")
        raise
    except asyncio.TimeoutError as e:
        logger.warning(f"Provider {provider.name} timed out after {timeout}s")
        raise GenerationFailedError(f"Image provider did not respond within {timeout:g} seconds") from e
    except Exception as e:
        if is_rate_limit_error(e):
            logger.warning(f"Provider {provider.name} rate limited the request: {e}")
            raise RateLimitedError() from e
        logger.error(f"Unexpected error generating PFP: {e}", exc_info=True)
        raise GenerationFailedError(str(e) or type(e).__name__) from e

    logger.info(f"PFP generated ({image.mime_type}, {len(image.data)} base64 chars)")
    return image
