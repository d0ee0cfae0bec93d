"""SaralCredit Relay - FastAPI Application.

This module defines the FastAPI application, its routes, and the ``main()``
CLI function that launches the uvicorn server.

Architecture
------------
- **Configuration** comes from :data:`~saralcredit.core.config.config`
  (environment variables and ``.env``).
- **Completions** go through :mod:`saralcredit.core.completion`.  The
  Gemini client handle is built once in the lifespan, stored on
  ``app.state`` and injected into the route with a FastAPI dependency.
- **Prompt rendering** is done by :mod:`saralcredit.api.prompt_templates`.
- **The front end** is a single-page application.  Every GET outside
  ``/api`` serves a file from the frontend directory when one matches, and
  ``index.html`` otherwise, so client-side routes survive a page reload.
- **Errors** from every API route use the ``{"error": "..."}`` envelope,
  including framework errors such as malformed bodies and unknown paths.

Endpoints
---------
========  ====================  ==========================================
Method    Path                  Purpose
========  ====================  ==========================================
POST      ``/api/gemini``       Render a prompt and return Gemini's reply
GET       ``/api/config``       Version, model, gateway status, types
GET       ``/{path}``           Front-end assets, falling back to index
========  ====================  ==========================================

Completion pipeline
-------------------
``POST /api/gemini`` runs three gates in order and stops at the first
failure; nothing is retried:

1. **Validate** - ``prompt`` and ``type`` must both be non-empty (400).
2. **Render** - ``type`` must name a known template (400).
3. **Complete** - the gateway must be initialised (500) and the upstream
   call must succeed (500).  Upstream error detail is logged, never returned.

Usage
-----
CLI (installed entry point)::

    saralcredit

Direct invocation::

    python -m saralcredit.api.main
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, Response
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from saralcredit import __version__
from saralcredit.api.models import CompletionRequest, CompletionResponse, ErrorResponse
from saralcredit.api.prompt_templates import available_types, render_prompt
from saralcredit.core.completion import (
    CompletionClient,
    CompletionFailure,
    complete,
    initialize_gateway,
)
from saralcredit.core.config import SaralCreditConfig, config

logger = logging.getLogger(__name__)

API_PREFIX = "/api"

MISSING_FIELDS_MESSAGE = "Missing required fields: prompt and type."
INVALID_BODY_MESSAGE = "Invalid request body."
GATEWAY_UNAVAILABLE_MESSAGE = "Gemini client not initialized on server. Check server logs."
UPSTREAM_ERROR_MESSAGE = "Failed to get response from Gemini model. See server logs."

GatewayFactory = Callable[[SaralCreditConfig], CompletionClient | None]


# ---------------------------------------------------------------------------
# Application lifecycle - gateway construction and front-end discovery.
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build process-wide state on startup.

    On startup:
        Calls the gateway factory exactly once and stores the resulting
        :class:`CompletionClient` (or ``None``) on ``app.state``.  Reads the
        front-end entry document once and builds the ``StaticFiles`` app for
        its assets; when the document is missing the error is logged and the
        API keeps working without it.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control back to the application for the duration of its lifetime.
    """
    settings: SaralCreditConfig = app.state.settings

    # --- Startup -----------------------------------------------------------
    app.state.completion_client = app.state.gateway_factory(settings)
    if app.state.completion_client is None:
        logger.error("Completion gateway unavailable; /api/gemini will answer with 500.")

    app.state.index_html = None
    app.state.frontend_files = None
    index_path = settings.index_path
    try:
        app.state.index_html = index_path.read_text(encoding="utf-8")
    except OSError as e:
        logger.error(
            "Frontend file not found at expected path: %s (%s). Only the API will be served.",
            index_path,
            e,
        )
    else:
        logger.info("Frontend found at: %s", settings.frontend_dir)
        app.state.frontend_files = StaticFiles(directory=str(settings.frontend_dir))

    yield  # Application runs here.

    # --- Shutdown ----------------------------------------------------------
    logger.info("SaralCredit relay shutting down.")


# ---------------------------------------------------------------------------
# Dependencies and response helpers.
# ---------------------------------------------------------------------------


def get_completion_client(request: Request) -> CompletionClient | None:
    """Return the gateway handle built at startup (``None`` when disabled)."""
    return getattr(request.app.state, "completion_client", None)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
    )


# ---------------------------------------------------------------------------
# API routes.
# ---------------------------------------------------------------------------

api_router = APIRouter(prefix=API_PREFIX)


@api_router.post(
    "/gemini",
    response_model=CompletionResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def generate_completion(
    req: CompletionRequest | None = None,
    client: CompletionClient | None = Depends(get_completion_client),
):
    """Render the prompt for the requested type and return Gemini's reply.

    Args:
        req: Validated :class:`CompletionRequest` payload.  An absent body is
            treated like an empty object.
        client: Gateway handle injected by :func:`get_completion_client`.

    Returns:
        ``{"response": text}`` on success, otherwise an ``{"error": ...}``
        response with status 400 or 500.
    """
    req = req or CompletionRequest()

    # --- Validate ----------------------------------------------------------
    if not req.prompt or not req.type:
        return _error(400, MISSING_FIELDS_MESSAGE)

    # --- Render ------------------------------------------------------------
    rendered = render_prompt(req.type, req.prompt)
    if rendered is None:
        return _error(400, f"Invalid request type: {req.type}")

    # --- Complete ----------------------------------------------------------
    if client is None:
        return _error(500, GATEWAY_UNAVAILABLE_MESSAGE)

    logger.info("Generating content for type: %s", req.type)
    result = await complete(client, rendered)
    if result.failure is CompletionFailure.GATEWAY_UNAVAILABLE:
        return _error(500, GATEWAY_UNAVAILABLE_MESSAGE)
    if not result.ok:
        return _error(500, UPSTREAM_ERROR_MESSAGE)

    return CompletionResponse(response=result.text)


@api_router.get("/config")
async def get_config(request: Request) -> dict:
    """Return relay metadata for the front end.

    Returns:
        Dictionary with ``version``, ``model``, ``gateway_ready`` (whether
        completions can currently succeed) and ``types`` (accepted request
        types).
    """
    settings: SaralCreditConfig = request.app.state.settings
    return {
        "version": __version__,
        "model": settings.gemini_model,
        "gateway_ready": get_completion_client(request) is not None,
        "types": available_types(),
    }


@api_router.api_route(
    "/{path:path}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
async def unknown_api_route(path: str) -> None:
    """Answer unknown API paths with a JSON 404 so the SPA fallback never sees them."""
    raise HTTPException(status_code=404, detail="Not Found")


# ---------------------------------------------------------------------------
# Single-page application fallback.
# ---------------------------------------------------------------------------

frontend_router = APIRouter()


@frontend_router.get("/{full_path:path}", include_in_schema=False)
async def serve_frontend(full_path: str, request: Request) -> Response:
    """Serve a front-end asset, or ``index.html`` for any other path.

    Args:
        full_path: Request path without the leading slash.
        request: Incoming request, used to reach ``app.state``.

    Returns:
        The matching file inside the frontend directory, or the entry
        document read at startup.

    Raises:
        HTTPException: 404 for any path starting with the API prefix, or
            when the entry document was missing at startup.
    """
    if full_path.startswith(API_PREFIX.strip("/")):
        raise HTTPException(status_code=404, detail="Not Found")

    index_html = getattr(request.app.state, "index_html", None)
    if index_html is None:
        raise HTTPException(status_code=404, detail="Frontend not available")

    if full_path:
        frontend_files: StaticFiles = request.app.state.frontend_files
        try:
            return await frontend_files.get_response(full_path, request.scope)
        except StarletteHTTPException as exc:
            if exc.status_code != 404:
                raise

    return HTMLResponse(content=index_html)


# ---------------------------------------------------------------------------
# Error envelopes.
# ---------------------------------------------------------------------------


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=str(exc.detail)).model_dump(),
        headers=getattr(exc, "headers", None),
    )


async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Only locations and error types; the submitted input may hold user text.
    problems = [(".".join(str(part) for part in err["loc"]), err["type"]) for err in exc.errors()]
    logger.warning("Rejected request body on %s: %s", request.url.path, problems)
    return _error(400, INVALID_BODY_MESSAGE)


# ---------------------------------------------------------------------------
# Application factory.
# ---------------------------------------------------------------------------


def create_app(
    settings: SaralCreditConfig = config,
    gateway_factory: GatewayFactory = initialize_gateway,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Configuration to serve with.  Defaults to the global
            :data:`~saralcredit.core.config.config`.
        gateway_factory: Callable that builds the completion client handle
            from *settings*.  Called once, in the lifespan.

    Returns:
        A configured :class:`FastAPI` instance.
    """
    app = FastAPI(
        title="SaralCredit Relay",
        description="Prompt templating relay between the SaralCredit front end and Gemini.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.gateway_factory = gateway_factory

    # The front end may be served from another origin during development.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info("%s %s", request.method, request.url.path)
        return await call_next(request)

    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)

    # Order matters: the front-end catch-all must be registered last.
    app.include_router(api_router)
    app.include_router(frontend_router)
    return app


app = create_app()


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn ASGI server.

    Reads host, port and log level from :data:`~saralcredit.core.config.config`
    (``SARALCREDIT_SERVER_HOST``, ``PORT`` / ``SARALCREDIT_SERVER_PORT`` and
    ``SARALCREDIT_LOG_LEVEL``).  Defaults to ``0.0.0.0:3000``.

    This function is registered as the ``saralcredit`` console script in
    ``pyproject.toml``.
    """
    import uvicorn

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info("SaralCredit relay starting on http://localhost:%d", config.server_port)

    uvicorn.run(
        "saralcredit.api.main:app",
        host=config.server_host,
        port=config.server_port,
        log_level=config.log_level.lower(),
        reload=False,
    )


if __name__ == "__main__":
    main()
