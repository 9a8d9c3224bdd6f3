"""Pydantic request and response models for the PFP Generator API.

FastAPI uses these for request validation, serialisation, and OpenAPI
documentation.  A request that fails validation never reaches the handler;
the application turns the validation error into a 400 ``invalid_input``
failure body.

Models
------
PfpRequest
    Payload for ``POST /pfp``.
PfpResponse
    Success body for ``POST /pfp``.
ErrorResponse
    Failure body for every endpoint.
HealthResponse
    Body for ``GET /health``.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class PfpRequest(BaseModel):
    """Request body for the ``POST /pfp`` endpoint.

    Attributes:
        concept: Short text describing the picture's theme.  Trimming,
            emptiness checks and truncation happen in
            :func:`~pfpgen.core.prompt_builder.clean_concept`.
    """

    concept: str = Field(
        ...,
        description="Short text describing the desired PFP theme.",
        examples=["cyberpunk samurai with a glowing katana"],
    )


class PfpResponse(BaseModel):
    """Success body for ``POST /pfp``."""

    ok: Literal[True] = True
    image: str = Field(..., description="Generated image as a base64 data URL.")


class ErrorResponse(BaseModel):
    """Failure body shared by all endpoints."""

    ok: Literal[False] = False
    error: str = Field(..., description="Machine-readable error code.")
    details: str = Field(..., description="Human-readable explanation.")


class HealthResponse(BaseModel):
    """Body for ``GET /health``."""

    ok: Literal[True] = True
    service: str
    version: str
    model: str
