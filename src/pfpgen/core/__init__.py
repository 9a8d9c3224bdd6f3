"""Core functionality for PFP generation.

Architecture Overview
---------------------
1. **Configuration Layer** (config.py):
   - Environment-based configuration using Pydantic Settings
   - Settings prefixed with PFPGEN_ (API key also read from GEMINI_API_KEY)

2. **Prompt Layer** (prompt_builder.py, reference.py):
   - Concept validation, truncation and templating
   - Optional identity reference image

3. **Provider Layer** (providers.py, response.py):
   - ImageProvider interface and the Gemini implementation
   - Normalisation of provider responses into GeneratedImage

4. **Pipeline** (generator.py, errors.py):
   - generate_pfp(), the single request pipeline
   - The error taxonomy surfaced to HTTP callers
"""

from .config import PfpgenConfig, config
from .errors import (
    GenerationFailedError,
    InvalidInputError,
    NoImageReturnedError,
    PfpError,
    ProviderRejectedError,
    RateLimitedError,
)
from .generator import generate_pfp
from .providers import GeminiImageProvider, ImageProvider, create_provider
from .reference import ReferenceImage, load_reference_image
from .response import GeneratedImage, extract_image

__all__ = [
    "PfpgenConfig",
    "config",
    "PfpError",
    "InvalidInputError",
    "ProviderRejectedError",
    "RateLimitedError",
    "NoImageReturnedError",
    "GenerationFailedError",
    "generate_pfp",
    "ImageProvider",
    "GeminiImageProvider",
    "create_provider",
    "ReferenceImage",
    "load_reference_image",
    "GeneratedImage",
    "extract_image",
]
