from __future__ import annotations

import logging
import re
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from time import perf_counter
from uuid import uuid4

from fastapi import FastAPI
from starlette.middleware.sessions import SessionMiddleware
from starlette.requests import Request
from starlette.responses import Response

import timesheets.db as db
from timesheets import __version__
from timesheets.logging_config import (
    configure_logging,
    log_with_fields,
    reset_request_id,
    set_request_id,
)
from timesheets.settings import Settings, get_settings
from timesheets.web.routes import router as web_router

logger = logging.getLogger("timesheets.http")

CallNext = Callable[[Request], Awaitable[Response]]

# Client-supplied ids are echoed back and logged, so keep them short and printable.
_REQUEST_ID_RE = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")


def _request_id_for(request: Request) -> str:
    candidate = (request.headers.get("x-request-id") or "").strip()
    if _REQUEST_ID_RE.match(candidate):
        return candidate
    return uuid4().hex


def _request_logging(settings: Settings) -> Callable[[Request, CallNext], Awaitable[Response]]:
    async def middleware(request: Request, call_next: CallNext) -> Response:
        request_id = _request_id_for(request)
        token = set_request_id(request_id)
        start = perf_counter()

        def elapsed_ms() -> str:
            return f"{(perf_counter() - start) * 1000:.2f}"

        try:
            response = await call_next(request)
            if settings.log_http_requests:
                log_with_fields(
                    logger,
                    logging.INFO,
                    "request complete",
                    method=request.method,
                    path=request.url.path,
                    status_code=response.status_code,
                    duration_ms=elapsed_ms(),
                )
        except Exception:
            log_with_fields(
                logger,
                logging.ERROR,
                "request failed",
                method=request.method,
                path=request.url.path,
                duration_ms=elapsed_ms(),
                exc_info=True,
            )
            raise
        finally:
            reset_request_id(token)

        response.headers["X-Request-ID"] = request_id
        return response

    return middleware


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        if settings.auto_create_db:
            await db.create_schema(db.engine)
        yield
        await db.engine.dispose()

    app = FastAPI(title="Timesheets", version=__version__, lifespan=lifespan)
    app.middleware("http")(_request_logging(settings))
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret.get_secret_value(),
        session_cookie=settings.session_cookie_name,
        max_age=settings.session_cookie_max_age_seconds,
        same_site=settings.session_cookie_same_site,
        https_only=settings.session_cookie_https_only,
    )
    app.include_router(web_router)
    return app


app = create_app()
