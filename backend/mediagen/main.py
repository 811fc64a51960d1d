"""mediagen — FastAPI application entry point.

Mounts the API routes, configures CORS and error translation, and sets up
the credentials and the shared Vertex AI client on startup.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mediagen import __version__
from mediagen.api.router import api_router
from mediagen.config import Settings, get_settings
from mediagen.errors import MediaGenError
from mediagen.services.credentials import (
    AuthContextHolder,
    authenticate,
    authenticate_ambient,
)
from mediagen.services.vertex_client import VertexClient

logger = logging.getLogger(__name__)


async def _initial_credentials(settings: Settings, holder: AuthContextHolder) -> None:
    """Authenticate from configuration, if any is present.

    Failure is logged, not raised: /api/auth can still establish credentials.
    """
    try:
        if settings.GOOGLE_SERVICE_ACCOUNT_B64:
            holder.replace(await authenticate(settings.GOOGLE_SERVICE_ACCOUNT_B64, settings))
        elif settings.USE_AMBIENT_CREDENTIALS:
            holder.replace(await authenticate_ambient(settings))
        else:
            logger.info("No credentials configured; waiting for /api/auth")
    except MediaGenError as e:
        logger.warning("Startup authentication failed (non-fatal): [%s] %s", e.code, e.message)


def create_app(
    settings: Settings | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> FastAPI:
    """Build the application. ``http_client`` replaces the outbound transport."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("%s starting up...", settings.APP_NAME)
        logger.info(
            "Vertex AI: %s (image=%s, video=%s)",
            settings.vertex_base_url, settings.IMAGE_MODEL, settings.VIDEO_MODEL,
        )
        await _initial_credentials(settings, app.state.auth)

        yield

        await app.state.vertex.aclose()
        logger.info("%s shut down", settings.APP_NAME)

    app = FastAPI(
        title="mediagen API",
        description="Launch image/video generations on Vertex AI and track them by operation id",
        version=__version__,
        lifespan=lifespan,
        redirect_slashes=False,
    )
    app.state.settings = settings
    app.state.auth = AuthContextHolder()
    app.state.vertex = VertexClient(settings, http_client=http_client)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(MediaGenError)
    async def mediagen_error_handler(request: Request, exc: MediaGenError):
        logger.warning(
            "%s %s failed: [%s] %s", request.method, request.url.path, exc.code, exc.message,
        )
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"error": "VALIDATION_ERROR", "detail": jsonable_encoder(exc.errors())},
        )

    app.include_router(api_router)

    @app.get("/health")
    async def health():
        """Liveness check."""
        return {"status": "ok"}

    return app


_settings = get_settings()

logging.basicConfig(
    level=logging.DEBUG if _settings.DEBUG else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

app = create_app(_settings)
