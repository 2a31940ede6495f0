"""
Main API module for the shortener service.

Responsibilities:
    - POST /url         save a url under a requested or generated alias
    - GET /{alias}      redirect to the stored url
    - DELETE /url/{alias} remove a mapping (missing alias is a no-op)
    - GET /health       liveness check

Architecture:
    - App Factory pattern (create_app) for test isolation and DI.
    - Settings are read from the environment once, in the factory, and passed
      explicitly to the storage factory and the allocator.
    - Route handlers are plain `def` functions; FastAPI runs them in its
      threadpool, one request per worker thread. Blocking store calls never
      hold an in-process lock.
    - AliasAllocator owns the alias protocol; handlers only map its errors to
      the status envelope.

LLM Prompt Example:
    "Explain how to structure a FastAPI service with an application factory,
    injected storage, and a clean separation between API and business logic."
"""

import logging
import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse

from shortener.api import response as resp
from shortener.api.schemas import SaveRequest
from shortener.config import Settings
from shortener.errors import (
    AliasTakenError,
    AllocationExhaustedError,
    PersistenceError,
    URLNotFoundError,
)
from shortener.logging_config import setup_logging
from shortener.manager.alias_allocator import AliasAllocator
from shortener.manager.strategies import BaseStrategy, RandomStrategy
from shortener.storage.base import BaseStorage
from shortener.storage.storage_factory import get_storage

REQUEST_ID_HEADER = "X-Request-ID"


def create_app(
    settings: Optional[Settings] = None,
    storage: Optional[BaseStorage] = None,
    strategy: Optional[BaseStrategy] = None,
) -> FastAPI:
    """
    Factory function to build and configure a new FastAPI app instance.

    Args:
        settings (Optional[Settings]): Explicit configuration; read from the
            environment when omitted.
        storage (Optional[BaseStorage]): Backend to use instead of the one
            selected by settings (tests inject the in-memory Storage).
        strategy (Optional[BaseStrategy]): Alias generator; defaults to
            RandomStrategy(settings.alias_length).

    Returns:
        FastAPI: A fully configured application with its own storage and allocator.
    """
    settings = settings or Settings.from_env()
    setup_logging(level=settings.log_level, json_format=settings.log_json)
    log = logging.getLogger("shortener.api")

    if storage is None:
        storage = get_storage(settings)
    allocator = AliasAllocator(
        storage=storage,
        alias_length=settings.alias_length,
        strategy=strategy or RandomStrategy(length=settings.alias_length),
        max_attempts=settings.alias_attempt_limit,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        log.info("Shortener started: backend=%s alias_length=%d", settings.storage_backend, settings.alias_length)
        yield
        storage.close()
        log.info("Shortener stopped")

    app = FastAPI(
        title="Shortener",
        description="URL shortener with caller-chosen or generated aliases",
        docs_url="/docs",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.storage = storage
    app.state.allocator = allocator

    # ----------------------------------------------------------------
    # Middleware / error mapping
    # ----------------------------------------------------------------
    @app.middleware("http")
    async def request_id(request: Request, call_next):
        rid = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = rid
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response

    @app.exception_handler(RequestValidationError)
    async def invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        body = resp.validation_error(exc.errors())
        log.error(
            "handlers.validation: invalid request request_id=%s path=%s message=%s",
            getattr(request.state, "request_id", "-"),
            request.url.path,
            body["message"],
        )
        return JSONResponse(body, status_code=400)

    # ----------------------------------------------------------------
    # Routes
    # ----------------------------------------------------------------
    @app.get("/health")
    def health():
        return resp.ok()

    @app.post(
        "/url",
        response_model=resp.SaveResponse,
        response_model_exclude_none=True,
        responses={
            400: {"model": resp.Response, "description": "Invalid request"},
            409: {"model": resp.Response, "description": "Alias already exists"},
            500: {"model": resp.Response, "description": "Storage failure"},
        },
    )
    def save_url(req: SaveRequest, request: Request):
        """
        Save `req.url` under `req.alias`, or under a generated alias when none is given.

        Returns:
            {"status": "OK", "alias": "<alias>"}
        """
        op = "handlers.url.save"
        rid = request.state.request_id
        log.info("%s: request body decoded request_id=%s url=%s alias=%s", op, rid, req.url, req.alias)

        try:
            alias = allocator.allocate(req.url, req.alias)
        except AliasTakenError:
            log.info("%s: url already exist request_id=%s url=%s", op, rid, req.url)
            return JSONResponse(resp.error(resp.MSG_ALIAS_TAKEN), status_code=409)
        except AllocationExhaustedError as exc:
            log.error("%s: %s request_id=%s url=%s", op, exc, rid, req.url)
            return JSONResponse(resp.error(resp.MSG_ALLOCATION_EXHAUSTED), status_code=500)
        except PersistenceError as exc:
            log.error("%s: failed to add url request_id=%s url=%s err=%s", op, rid, req.url, exc)
            return JSONResponse(resp.error(resp.MSG_ADD_FAILED), status_code=500)

        return resp.ok(alias=alias)

    @app.delete("/url/{alias}", responses={500: {"model": resp.Response}})
    def delete_url(alias: str, request: Request):
        op = "handlers.url.delete"
        rid = request.state.request_id
        try:
            storage.delete_url(alias)
        except PersistenceError as exc:
            log.error("%s: failed to delete url request_id=%s alias=%s err=%s", op, rid, alias, exc)
            return JSONResponse(resp.error(resp.MSG_DELETE_FAILED), status_code=500)

        log.info("%s: url deleted request_id=%s alias=%s", op, rid, alias)
        return resp.ok()

    @app.get("/{alias}", responses={302: {"description": "Redirect to the stored url"}, 404: {"model": resp.Response}})
    def redirect(alias: str, request: Request):
        op = "handlers.redirect"
        rid = request.state.request_id
        try:
            url = storage.get_url(alias)
        except URLNotFoundError:
            log.info("%s: url not found request_id=%s alias=%s", op, rid, alias)
            return JSONResponse(resp.error(resp.MSG_NOT_FOUND), status_code=404)
        except PersistenceError as exc:
            log.error("%s: failed to get url request_id=%s alias=%s err=%s", op, rid, alias, exc)
            return JSONResponse(resp.error(resp.MSG_INTERNAL), status_code=500)

        log.info("%s: got url request_id=%s alias=%s url=%s", op, rid, alias, url)
        return RedirectResponse(url=url, status_code=302)

    return app


# `uvicorn main:app` and `from main import app` keep working.
app = create_app()


if __name__ == "__main__":
    import uvicorn

    _settings = app.state.settings
    uvicorn.run(app, host=_settings.host, port=_settings.port, log_level=_settings.log_level.lower())
