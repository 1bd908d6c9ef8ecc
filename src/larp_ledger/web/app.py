"""FastAPI application: request ids, error envelope and routers."""
from __future__ import annotations

import logging
import sqlite3
import uuid
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from larp_ledger.app import LedgerApp, __version__
from larp_ledger.errors import (
    CharacterLockedError,
    InsufficientCandlesError,
    InsufficientExperienceError,
    InvalidRequestError,
    LedgerError,
    NotFoundError,
    PermissionDeniedError,
    PrerequisiteNotMetError,
)

logger = logging.getLogger(__name__)

_STATUS: dict[type[LedgerError], int] = {
    NotFoundError: 404,
    PermissionDeniedError: 403,
    InvalidRequestError: 422,
    InsufficientExperienceError: 409,
    InsufficientCandlesError: 409,
    PrerequisiteNotMetError: 409,
    CharacterLockedError: 409,
}


def _status_for(exc: LedgerError) -> int:
    for cls in type(exc).__mro__:
        if cls in _STATUS:
            return _STATUS[cls]
    return 400


def _err_envelope(error: str, message: str, request_id: Optional[str], details: Any, status_code: int):
    headers = {}
    if request_id:
        headers["X-Request-Id"] = request_id
    return JSONResponse(
        status_code=status_code,
        content={
            "error": error,
            "message": message,
            "request_id": request_id,
            "details": details,
        },
        headers=headers,
    )


def create_app(ledger: LedgerApp | None = None) -> FastAPI:
    from larp_ledger.web.routers import admin, characters, events, reference

    app = FastAPI(title="LARP Ledger API", version=__version__)
    app.state.ledger = ledger or LedgerApp()

    @app.middleware("http")
    async def _request_id_mw(request: Request, call_next):
        rid = request.headers.get("X-Request-Id") or uuid.uuid4().hex.upper()
        request.state.request_id = rid
        logger.info("[%s] %s %s", rid, request.method, request.url.path)
        try:
            resp = await call_next(request)
        except Exception:
            logger.exception("[%s] unhandled error", rid)
            raise
        resp.headers["X-Request-Id"] = rid
        logger.info("[%s] %s %s -> %s", rid, request.method, request.url.path, resp.status_code)
        return resp

    @app.exception_handler(LedgerError)
    async def _ledger_exc_handler(request: Request, exc: LedgerError):
        rid = getattr(request.state, "request_id", None)
        return _err_envelope(exc.code, exc.message, rid, exc.details, _status_for(exc))

    @app.exception_handler(sqlite3.IntegrityError)
    async def _integrity_exc_handler(request: Request, exc: sqlite3.IntegrityError):
        rid = getattr(request.state, "request_id", None)
        return _err_envelope("conflict", str(exc), rid, {}, 409)

    @app.exception_handler(StarletteHTTPException)
    async def _http_exc_handler(request: Request, exc: StarletteHTTPException):
        rid = getattr(request.state, "request_id", None)
        return _err_envelope("http_error", str(exc.detail), rid, {"status_code": exc.status_code}, exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def _validation_exc_handler(request: Request, exc: RequestValidationError):
        rid = getattr(request.state, "request_id", None)
        details = [
            {"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")}
            for e in exc.errors()
        ]
        return _err_envelope("validation_error", "request validation failed", rid, details, 422)

    @app.exception_handler(Exception)
    async def _unhandled_exc_handler(request: Request, exc: Exception):
        rid = getattr(request.state, "request_id", None)
        logger.error("[%s] %s: %s", rid, type(exc).__name__, exc)
        return _err_envelope("internal_error", "internal server error", rid, {"type": type(exc).__name__}, 500)

    @app.get("/health")
    def health():
        ledger_app: LedgerApp = app.state.ledger
        return {
            "status": "ok",
            "version": __version__,
            "db": {"status": "ok", "kind": "sqlite", "path": ledger_app.db_path},
        }

    app.include_router(reference.router, prefix="/reference")
    app.include_router(characters.router, prefix="/characters")
    app.include_router(events.router, prefix="/events")
    app.include_router(admin.router, prefix="/admin")
    return app
