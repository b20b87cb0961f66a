"""
Main API module for shortlink.

Responsibilities:
    - Expose REST endpoints for creating, listing, inspecting and deleting links
    - Redirect visitors from a short code to its target URL (302)
    - Record clicks in the background so the redirect never waits on storage

Architecture:
    - App Factory pattern (create_app) for test isolation and DI.
    - In-memory storage by default; PostgreSQL via SHORTLINK_STORAGE_BACKEND.
    - LinkManager owns validation and code allocation; RedirectResolver owns
      lookups and click recording. Routes only translate HTTP.
    - Engine errors carry their own status code; one exception handler turns
      them into `{"error": ...}` JSON bodies. Anything unexpected is logged
      and answered with 500 `{"error": "Server error"}`.
"""

import logging
from typing import List, Optional

from fastapi import BackgroundTasks, FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse

from shortlink.config import settings
from shortlink.errors import ShortlinkError, StoreError
from shortlink.manager.link_manager import LinkManager
from shortlink.manager.resolver import RedirectResolver
from shortlink.schemas import ErrorOut, LinkCreate, LinkOut
from shortlink.storage.base import BaseStorage
from shortlink.storage.storage_factory import get_storage, selected_backend


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def create_app(storage: Optional[BaseStorage] = None) -> FastAPI:
    """
    Factory function to build and configure a new FastAPI app instance.

    Args:
        storage (Optional[BaseStorage]): Backend to use. When omitted the
            backend is chosen from SHORTLINK_STORAGE_BACKEND.

    Returns:
        FastAPI: A fully configured application with its own storage,
                 manager and resolver instances.
    """
    # basic console logging (optional)
    if not logging.getLogger().handlers:
        logging.basicConfig(level=settings.LOG_LEVEL)
    log = logging.getLogger("shortlink.api")

    app = FastAPI(
        title="shortlink",
        description="URL shortener: random or custom codes, 302 redirects, click counts",
        docs_url="/docs",
    )

    # ----------------------------------------------------------------
    # Per-app instances (isolated for tests, swappable for production)
    # ----------------------------------------------------------------
    backend = "custom" if storage is not None else selected_backend()
    if storage is None:
        storage = get_storage()
    manager = LinkManager(storage=storage)
    resolver = RedirectResolver(storage=storage)
    app.state.storage = storage
    app.state.manager = manager
    app.state.resolver = resolver
    log.info("shortlink storage backend: %s", backend)

    # ----------------------------------------------------------------
    # Error translation
    # ----------------------------------------------------------------
    @app.exception_handler(ShortlinkError)
    async def _shortlink_error(request: Request, exc: ShortlinkError) -> JSONResponse:
        if exc.status_code >= 500:
            log.error("%s %s failed: %s", request.method, request.url.path, exc)
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def _bad_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        return _error(status.HTTP_400_BAD_REQUEST, "Invalid request")

    @app.exception_handler(Exception)
    async def _server_error(request: Request, exc: Exception) -> JSONResponse:
        log.exception("%s %s crashed", request.method, request.url.path)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Server error")

    # Health check
    @app.get("/health_shortlink")
    def health_shortlink():
        return {"status": "ok", "storage": backend}

    # ----------------------------------------------------------------
    # Routes
    # ----------------------------------------------------------------
    @app.post(
        "/links",
        status_code=status.HTTP_201_CREATED,
        response_model=LinkOut,
        responses={400: {"model": ErrorOut}, 409: {"model": ErrorOut}, 500: {"model": ErrorOut}},
    )
    def create_link(req: LinkCreate):
        """
        Create a short link for `url`, with an optional custom `code`.

        Returns:
            LinkOut: The full created record (201).

        Errors:
            400 invalid URL / code format, 409 code taken,
            500 code allocation exhausted or storage failure.
        """
        try:
            link = manager.create_link(req.url, req.code)
        except StoreError as exc:
            log.error("Create failed: %s", exc)
            return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Server error")
        return LinkOut.from_link(link)

    @app.get("/links", response_model=List[LinkOut])
    def list_links():
        """All links, newest first."""
        return [LinkOut.from_link(link) for link in manager.list_links()]

    @app.get("/links/{code}", response_model=LinkOut, responses={404: {"model": ErrorOut}})
    def get_link(code: str):
        """Stats for a single link."""
        return LinkOut.from_link(manager.get_link(code))

    @app.delete(
        "/links/{code}",
        status_code=status.HTTP_204_NO_CONTENT,
        response_class=Response,
        responses={404: {"model": ErrorOut}},
    )
    def delete_link(code: str):
        manager.delete_link(code)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.get("/{code}", response_class=RedirectResponse, status_code=status.HTTP_302_FOUND,
             responses={404: {"model": ErrorOut}})
    def redirect(code: str, background_tasks: BackgroundTasks):
        """
        Redirect to the link's target with a 302 and count the click.

        The click is recorded by a background task after the response is
        sent; a failure there is logged by the resolver and never changes
        the redirect.
        """
        target = resolver.resolve(code)
        background_tasks.add_task(resolver.record_click, target.code, resolver.clock())
        return RedirectResponse(url=target.url, status_code=target.status_code)

    return app


# `uvicorn main:app --reload` and `from main import app` continue to work.
app = create_app()
