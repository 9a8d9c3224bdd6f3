"""PFP Generator — FastAPI Application.

This module defines the application factory, the module-level ``app``
instance served by uvicorn, all routes, and the ``main()`` CLI function.

Architecture
------------
The application is stateless between requests:

- **Configuration** comes from :class:`~pfpgen.core.config.PfpgenConfig`
  (environment variables / ``.env``).
- **The image provider** is built once in the lifespan handler and stored on
  ``app.state``.  Tests inject a fake provider through ``create_app()``.
- **Generation** is delegated to :func:`~pfpgen.core.generator.generate_pfp`;
  this module only maps its result or error onto HTTP.

Endpoints
---------
========  ============  ==========================================
Method    Path          Purpose
========  ============  ==========================================
GET       ``/``         Liveness check (alias of ``/health``)
GET       ``/health``   Liveness check
POST      ``/pfp``      Generate a PFP from a concept
========  ============  ==========================================

Failure bodies always look like ``{"ok": false, "error": ..., "details": ...}``
with HTTP 400 (bad input or provider rejection), 429 (rate limited) or 500.

Usage
-----
CLI (installed entry point)::

    pfpgen

Direct invocation::

    python -m pfpgen.api.main
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pfpgen import __version__
from pfpgen.api.models import ErrorResponse, HealthResponse, PfpRequest, PfpResponse
from pfpgen.core.config import PfpgenConfig, config
from pfpgen.core.errors import GenerationFailedError, InvalidInputError, PfpError
from pfpgen.core.generator import generate_pfp
from pfpgen.core.providers import ImageProvider, create_provider
from pfpgen.core.reference import ReferenceImage, load_reference_image

logger = logging.getLogger(__name__)

SERVICE_NAME = "pfpgen"


def _error_response(error: PfpError) -> JSONResponse:
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


# ---------------------------------------------------------------------------
# Application lifecycle — provider and reference image setup.
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the provider and load the reference image on startup.

    Anything already injected through :func:`create_app` is left alone.  A
    missing API key is not fatal: the health check keeps working and
    ``POST /pfp`` answers ``generation_failed`` until the key is set.  An
    unreadable reference image is logged and generation uses the text-only
    prompt.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control back to the application for the duration of its lifetime.
    """
    settings: PfpgenConfig = app.state.settings

    if app.state.provider is None:
        if settings.gemini_api_key:
            app.state.provider = create_provider(settings)
        else:
            logger.warning("GEMINI_API_KEY is not set; POST /pfp will fail until it is.")

    if app.state.reference is None and settings.reference_image_path is not None:
        try:
            app.state.reference = load_reference_image(settings.reference_image_path)
        except (OSError, ValueError) as e:
            logger.error(
                f"Could not load reference image {settings.reference_image_path}: {e}; "
                "falling back to text-only prompts."
            )

    yield  # Application runs here.

    logger.info("PFP generator shutting down.")


# ---------------------------------------------------------------------------
# Application factory.
# ---------------------------------------------------------------------------


def create_app(
    settings: PfpgenConfig | None = None,
    provider: ImageProvider | None = None,
    reference: ReferenceImage | None = None,
) -> FastAPI:
    """Create a configured FastAPI application.

    Args:
        settings: Configuration to use.  Defaults to the global ``config``.
        provider: Pre-built provider.  When ``None`` one is created from
            *settings* at startup.
        reference: Pre-loaded reference image.  When ``None`` it is loaded
            from ``settings.reference_image_path`` at startup, if set.

    Returns:
        The application instance.
    """
    settings = settings or config

    app = FastAPI(
        title="PFP Generator",
        description="Turns a short concept into a profile picture via a generative image model.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.provider = provider
    app.state.reference = reference

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        # Missing body, malformed JSON or a non-string concept all land here.
        messages = "; ".join(
            f"{'.'.join(str(loc) for loc in err.get('loc', ()))}: {err.get('msg', 'invalid')}"
            for err in exc.errors()
        )
        logger.info(f"Rejected invalid request to {request.url.path}: {messages}")
        return _error_response(InvalidInputError(f"Invalid request: {messages or 'bad body'}"))

    @app.get("/", response_model=HealthResponse, include_in_schema=False)
    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        """Report liveness.

        Always answers 200 regardless of provider configuration or
        availability; no outbound call is made.
        """
        return HealthResponse(
            service=SERVICE_NAME,
            version=__version__,
            model=settings.model,
        )

    @app.post(
        "/pfp",
        response_model=PfpResponse,
        responses={
            400: {"model": ErrorResponse},
            429: {"model": ErrorResponse},
            500: {"model": ErrorResponse},
        },
    )
    async def create_pfp(req: PfpRequest, request: Request):
        """Generate a PFP for the submitted concept.

        Args:
            req: Validated :class:`PfpRequest` payload.

        Returns:
            ``{"ok": true, "image": "data:<mime>;base64,<data>"}`` on success,
            otherwise a failure body with the matching status code.
        """
        state = request.app.state
        try:
            image = await generate_pfp(
                req.concept,
                state.provider,
                max_concept_length=settings.max_concept_length,
                timeout=settings.request_timeout,
                reference=state.reference,
            )
        except PfpError as e:
            return _error_response(e)
        except Exception as e:
            logger.error(f"Unhandled error in /pfp: {e}", exc_info=True)
            return _error_response(GenerationFailedError(str(e) or type(e).__name__))

        return PfpResponse(image=image.data_url)

    return app


app = create_app()


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn ASGI server.

    Reads host, port and log level from :data:`~pfpgen.core.config.config`
    (``PFPGEN_SERVER_HOST``, ``PFPGEN_SERVER_PORT``, ``PFPGEN_LOG_LEVEL``).
    Defaults to ``0.0.0.0:3000``.

    This function is registered as the ``pfpgen`` console script in
    ``pyproject.toml``.
    """
    import uvicorn

    uvicorn.run(
        "pfpgen.api.main:app",
        host=config.server_host,
        port=config.server_port,
        log_level=config.log_level,
        reload=False,
    )


if __name__ == "__main__":
    main()
