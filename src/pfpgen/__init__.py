"""PFP Generator - concept-to-profile-picture service backed by Gemini image models."""

__version__ = "0.3.0"

from pfpgen.core.config import PfpgenConfig, config
from pfpgen.core.errors import PfpError
from pfpgen.core.generator import generate_pfp

__all__ = [
    "PfpError",
    "PfpgenConfig",
    "config",
    "generate_pfp",
]
