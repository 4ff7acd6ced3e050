"""AvikonAI — FastAPI Application.

This module defines the FastAPI ``app`` instance, the generation routes, and
the ``main()`` function that launches the uvicorn server.

Architecture
------------
The server is a thin, stateless boundary in front of Gemini:

- **Configuration** comes from :data:`avikon.core.config.config` and is
  injected into routes through :func:`get_config`.
- **Prompt composition** is delegated to
  :func:`avikon.core.prompt_composer.compose_prompt`.
- **Image generation** is one awaited call through
  :class:`avikon.core.gemini.GeminiImageGenerator`, created at startup and
  stored on ``app.state``.
- **Errors** are :class:`avikon.api.errors.APIError` subclasses rendered by a
  single exception handler as ``{"error": ..., "code": ...}``.

Nothing is persisted server-side; the gallery lives with the client.

Endpoints
---------
========  ======================  ======================================
Method    Path                    Purpose
========  ======================  ======================================
POST      ``/api/generate-image`` Generate one image
GET       ``/api/generate-image`` Liveness and Gemini configuration probe
GET       ``/api/config``         Style presets, aspect ratios, editor info
========  ======================  ======================================

Usage
-----
CLI::

    avikon serve

Direct invocation::

    python -m avikon.api.main
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from avikon import __version__
from avikon.api.errors import (
    APIError,
    ApiKeyNotConfiguredError,
    InvalidPromptError,
    InvalidRequestError,
    PromptTooLongError,
    UnknownError,
    classify_generation_error,
)
from avikon.api.models import (
    ConfigResponse,
    EditorInfo,
    ErrorResponse,
    GenerateImageResponse,
    StatusResponse,
)
from avikon.core.config import AvikonConfig, config
from avikon.core.errors import GenerationError, InvalidReferenceImageError
from avikon.core.gemini import GeminiImageGenerator, decode_base64_image
from avikon.core.models import ASPECT_RATIOS, MAX_PROMPT_LENGTH, GenerationRequest
from avikon.core.prompt_composer import compose_prompt
from avikon.core.styles import SAMPLE_PROMPTS, STYLE_PRESETS

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Application lifecycle.
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the Gemini generator on startup and release it on shutdown.

    The SDK client itself is created lazily on the first generation, so
    startup succeeds even when no API key is configured.
    """
    app.state.generator = GeminiImageGenerator(config.gemini_model)
    logger.info(f"Generator initialised for model {config.gemini_model}.")

    yield

    app.state.generator.close()
    logger.info("Generator closed on shutdown.")


app = FastAPI(
    title="AvikonAI",
    description="AI profile picture generation backed by Gemini.",
    version=__version__,
    lifespan=lifespan,
)

# The browser UI may be served from another origin during development.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Dependencies.
# ---------------------------------------------------------------------------


def get_config() -> AvikonConfig:
    """Return the active configuration (overridden in tests)."""
    return config


def get_generator(request: Request) -> GeminiImageGenerator:
    """Return the generator created by :func:`lifespan`."""
    return request.app.state.generator


def require_gemini_configured(cfg: AvikonConfig = Depends(get_config)) -> AvikonConfig:
    """Reject generation requests while no usable Gemini key is configured.

    Runs before the request body is validated, so an unconfigured server
    answers ``API_KEY_NOT_CONFIGURED`` regardless of the payload.

    Raises:
        ApiKeyNotConfiguredError: If the key is missing or the placeholder.
    """
    if not cfg.gemini_configured:
        raise ApiKeyNotConfiguredError()
    return cfg


# ---------------------------------------------------------------------------
# Exception handlers.
# ---------------------------------------------------------------------------


@app.exception_handler(APIError)
async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Render any :class:`APIError` as ``{error, code}``."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Turn body validation failures into 400 responses.

    A missing or non-string ``prompt`` gets the same message as an empty
    one; any other problem is reported as ``INVALID_REQUEST`` with the first
    validation message.

    FastAPI decodes the JSON body before resolving dependencies, so a body
    that is not valid JSON lands here without :func:`require_gemini_configured`
    having run.  The key check is repeated first to keep
    ``API_KEY_NOT_CONFIGURED`` ahead of any body error.
    """
    cfg = request.app.dependency_overrides.get(get_config, get_config)()
    if not cfg.gemini_configured:
        error: APIError = ApiKeyNotConfiguredError()
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    errors = exc.errors()
    locations = [tuple(err.get("loc", ())) for err in errors]
    if any(loc[-1:] == ("prompt",) or loc == ("body",) for loc in locations):
        error = InvalidPromptError()
    else:
        first = errors[0] if errors else {}
        field = ".".join(str(part) for part in first.get("loc", ())[1:])
        detail = first.get("msg", "Invalid request body")
        error = InvalidRequestError(f"{field}: {detail}" if field else detail)
    logger.warning(f"Rejected generation request: {error.message}")
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


# ---------------------------------------------------------------------------
# Routes.
# ---------------------------------------------------------------------------


@app.post(
    "/api/generate-image",
    response_model=GenerateImageResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def generate_image(
    req: GenerationRequest,
    cfg: AvikonConfig = Depends(require_gemini_configured),
    generator: GeminiImageGenerator = Depends(get_generator),
) -> GenerateImageResponse:
    """Generate a single image with Gemini.

    This endpoint:

    1. Checks that a Gemini key is configured (before body validation).
    2. Validates that the prompt is non-empty and at most 2000 characters.
    3. Composes the enhanced prompt from the trimmed prompt and settings.
    4. Sends it, with the optional reference image, to Gemini.
    5. Returns the first inline image of the first candidate.

    Args:
        req: Validated :class:`GenerationRequest` payload.
        cfg: Active configuration (guaranteed to have a usable key).
        generator: The shared Gemini generator.

    Returns:
        ``{"success": true, "imageData": ..., "mimeType": ...}``.

    Raises:
        APIError: For every failure; see :mod:`avikon.api.errors`.
    """
    if not req.prompt.strip():
        raise InvalidPromptError()
    if len(req.prompt) > MAX_PROMPT_LENGTH:
        raise PromptTooLongError()

    reference_image: bytes | None = None
    if req.reference_image_base64:
        try:
            reference_image = decode_base64_image(req.reference_image_base64)
        except InvalidReferenceImageError as e:
            raise InvalidRequestError(str(e)) from e

    trimmed = req.model_copy(update={"prompt": req.prompt.strip()})
    enhanced_prompt = compose_prompt(trimmed)

    try:
        result = await generator.generate(
            enhanced_prompt,
            api_key=cfg.gemini_api_key,
            reference_image=reference_image,
        )
    except GenerationError as e:
        logger.error(f"Image generation failed: {e}")
        raise classify_generation_error(str(e)) from e
    except Exception as e:
        logger.error(f"Unexpected error during image generation: {e}", exc_info=True)
        raise UnknownError() from e

    return GenerateImageResponse(image_data=result.image_data, mime_type=result.mime_type)


@app.get("/api/generate-image", response_model=StatusResponse)
async def generation_status(cfg: AvikonConfig = Depends(get_config)) -> StatusResponse:
    """Report liveness and whether Gemini is configured.  No side effects."""
    return StatusResponse(
        gemini_configured=cfg.gemini_configured,
        timestamp=datetime.now(timezone.utc),
    )


@app.get("/api/config", response_model=ConfigResponse)
async def get_app_config(cfg: AvikonConfig = Depends(get_config)) -> ConfigResponse:
    """Return the options a client needs to build generation requests.

    The Pixo key itself is never exposed here, only whether one is set.
    """
    return ConfigResponse(
        version=__version__,
        style_presets=[preset.to_dict() for preset in STYLE_PRESETS],
        sample_prompts=list(SAMPLE_PROMPTS),
        aspect_ratios=list(ASPECT_RATIOS),
        editor=EditorInfo(configured=cfg.editor_configured, script_url=cfg.pixo_script_url),
    )


# ---------------------------------------------------------------------------
# Server entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn ASGI server.

    Reads host and port from :data:`~avikon.core.config.config`
    (``AVIKON_SERVER_HOST`` / ``AVIKON_SERVER_PORT``).  Defaults to
    ``0.0.0.0:3000``.
    """
    import uvicorn

    uvicorn.run(
        "avikon.api.main:app",
        host=config.server_host,
        port=config.server_port,
        reload=False,
    )


if __name__ == "__main__":
    main()
