"""FastAPI application factory.

Lifespan
--------
On startup the app builds the chat model once from ``settings`` and wraps
it, together with the default fetchers, in a single
:class:`~digestor.pipeline.PipelineOrchestrator` shared by every request via
``request.app.state.pipeline``.  Nothing needs tearing down on shutdown.

Routers
-------
    /api/scrape          — page fetch, extraction and summary
    /api/analyze-reddit  — Reddit persona synthesis
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from digestor.config import settings
from digestor.llm.client import build_chat_model
from digestor.llm.summarizer import Summarizer
from digestor.pipeline import PipelineOrchestrator

from digestor.api.routers import persona as persona_router
from digestor.api.routers import scrape as scrape_router


def build_pipeline() -> PipelineOrchestrator:
    """Create the process-wide orchestrator from ``settings``."""
    model = build_chat_model(settings)
    summarizer = Summarizer(model, settings.llm_provider) if model is not None else None
    return PipelineOrchestrator.from_settings(settings, summarizer)


_BODY_ERRORS = {
    "/api/scrape": (scrape_router.MISSING_URL_ERROR, scrape_router.FAILURE_PREFIX),
    "/api/analyze-reddit": (persona_router.MISSING_URL_ERROR, persona_router.FAILURE_PREFIX),
}


async def _body_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Answer request-body problems in the endpoints' ``{"error": ...}`` shape.

    A body that is not JSON at all is a 500 like any other unreadable
    request; a missing body or a non-string URL is the missing-URL 400.
    """
    missing, failure = _BODY_ERRORS.get(
        request.url.path.rstrip("/"), ("Invalid request body", "Failed to process request")
    )
    if any(err.get("type") == "json_invalid" for err in exc.errors()):
        return JSONResponse({"error": f"{failure}: invalid JSON body"}, status_code=500)
    return JSONResponse({"error": missing}, status_code=400)


def create_app(pipeline: PipelineOrchestrator | None = None) -> FastAPI:
    """Return a fully-configured FastAPI application instance.

    Args:
        pipeline: Use this orchestrator instead of building one from
            ``settings`` at startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.pipeline = pipeline if pipeline is not None else build_pipeline()
        yield

    app = FastAPI(
        title="Digestor API",
        description=(
            "Turns an arbitrary page URL into a cleaned, summarised article and "
            "a Reddit profile URL into a structured user persona."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )

    # Allow browser frontends on any origin (tighten for production).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, _body_validation_error)

    app.include_router(scrape_router.router, prefix="/api/scrape", tags=["scrape"])
    app.include_router(persona_router.router, prefix="/api/analyze-reddit", tags=["persona"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn digestor.api.app:app --reload
app = create_app()
