"""FastAPI application for the prompt store."""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import Any, Awaitable, Callable, Optional

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from promptbox import __version__
from promptbox.config import AppConfig, get_app_config
from promptbox.db.database import StoragePool
from promptbox.db.prompt_repo import PromptRepository
from promptbox.errors import ConnectionFailedError, PromptboxError, StartupError
from promptbox.server.responses import error_response, internal_error_response
from promptbox.server.routes import router

logger = logging.getLogger(__name__)

CallNext = Callable[[Request], Awaitable[Response]]


# -- middleware (registration order: first is outermost) ----------------------

async def log_requests(request: Request, call_next: CallNext) -> Response:
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(
        f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f} ms)"
    )
    return response


async def add_security_headers(request: Request, call_next: CallNext) -> Response:
    response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    return response


async def catch_unhandled_errors(request: Request, call_next: CallNext) -> Response:
    try:
        return await call_next(request)
    except Exception:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return internal_error_response()


MIDDLEWARE: list[Callable[[Request, CallNext], Awaitable[Response]]] = [
    log_requests,
    add_security_headers,
    catch_unhandled_errors,
]


# -- exception handlers --------------------------------------------------------

async def handle_domain_error(request: Request, exc: PromptboxError) -> JSONResponse:
    return error_response(exc)


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    details: list[dict[str, Any]] = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")} for err in exc.errors()
    ]
    return JSONResponse({"error": "Invalid request", "details": details}, status_code=400)


# -- factory -------------------------------------------------------------------

def create_app(config: Optional[AppConfig] = None, pool: Optional[StoragePool] = None) -> FastAPI:
    """
    Build the application. The storage pool is opened and migrated in the
    lifespan before any request is served; a failure there aborts startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        storage = pool
        if storage is None:
            storage = StoragePool((config or get_app_config()).db_path)
        try:
            await storage.start()
        except ConnectionFailedError as e:
            raise StartupError(str(e)) from e
        app.state.pool = storage
        app.state.repository = PromptRepository(storage)
        logger.info(f"Server started - DB: {storage.path}")
        try:
            yield
        finally:
            await storage.close()
            logger.info("Server shutting down")

    app = FastAPI(
        title="Promptbox API",
        description="Store and retrieve named text prompts",
        version=__version__,
        lifespan=lifespan,
    )

    for middleware in reversed(MIDDLEWARE):
        app.middleware("http")(middleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(PromptboxError, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.include_router(router)
    return app


app = create_app()
