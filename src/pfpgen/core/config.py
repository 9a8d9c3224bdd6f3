"""Configuration management for the PFP Generator.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the PFPGEN_ prefix,
allowing easy customization without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (PFPGEN_* prefix)
2. .env file in the working directory
3. Default values defined in PfpgenConfig

The provider API key is the one exception to the prefix rule: it is also read
from a plain ``GEMINI_API_KEY`` variable, which is what Google's own tooling
and most deployments already export.

Example .env file:
    GEMINI_API_KEY=your-key
    PFPGEN_MODEL=gemini-2.5-flash-image
    PFPGEN_REQUEST_TIMEOUT=45
    PFPGEN_REFERENCE_IMAGE_PATH=assets/reference.jpg

Global Configuration Instance
------------------------------
A global `config` instance is created automatically at module import time.
The API layer reads it when no explicit settings object is passed to
``create_app()``; tests build their own instances instead.

Usage Example
-------------
    from pfpgen.core.config import config

    print(config.model)
    print(config.request_timeout)
"""

from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PfpgenConfig(BaseSettings):
    """Main configuration for the PFP Generator.

    Attributes
    ----------
    Provider Settings:
        gemini_api_key : str | None
            API key for the Gemini image provider.  ``None`` leaves the
            service up (``/health`` still answers) but every ``/pfp`` call
            fails with ``generation_failed``.
        model : str
            Gemini model identifier used for image generation.
        api_base_url : str | None
            Optional base URL override, e.g. for a proxy in front of Google.
        request_timeout : float
            Seconds to wait for the provider before giving up.

    Prompt Settings:
        max_concept_length : int
            Concepts longer than this are truncated before prompting.
        reference_image_path : Path | None
            Optional identity-anchor image sent with every prompt.

    Server Settings:
        server_host : str
            Bind address for uvicorn.
        server_port : int
            Port for uvicorn (1024-65535).
        cors_origins : list[str]
            Allowed CORS origins.
        log_level : str
            uvicorn log level.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PFPGEN_",
        case_sensitive=False,
        extra="ignore",
    )

    # Provider settings
    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "gemini_api_key",
            "pfpgen_gemini_api_key",
        ),
        description="API key for the Gemini image provider",
    )
    model: str = Field(
        default="gemini-2.5-flash-image",
        description="Gemini model identifier used for image generation",
    )
    api_base_url: str | None = Field(
        default=None,
        description="Optional provider base URL override (proxy)",
    )
    request_timeout: float = Field(
        default=60.0,
        gt=0,
        description="Seconds to wait for the provider before failing the request",
    )

    # Prompt settings
    max_concept_length: int = Field(
        default=200,
        ge=1,
        le=2000,
        description="Concepts are truncated to this many characters",
    )
    reference_image_path: Path | None = Field(
        default=None,
        description="Identity-anchor image attached to every prompt",
    )

    # Server settings
    server_host: str = Field(
        default="0.0.0.0",
        description="Server bind address",
    )
    server_port: int = Field(
        default=3000,
        ge=1024,
        le=65535,
        description="Server port",
    )
    cors_origins: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins",
    )
    log_level: Literal["critical", "error", "warning", "info", "debug"] = Field(
        default="info",
        description="uvicorn log level",
    )


# Global configuration instance
# Loads values from environment variables (PFPGEN_* prefix, plus GEMINI_API_KEY)
# and the .env file.
config = PfpgenConfig()
