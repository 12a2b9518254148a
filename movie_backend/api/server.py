from __future__ import annotations

import traceback
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from movie_backend import __version__
from movie_backend.api import auth as auth_routes
from movie_backend.api import movies as movie_routes
from movie_backend.auth import seed_default_user_if_needed
from movie_backend.config import Config, load_config
from movie_backend.db import Database
from movie_backend.errors import ApiError, StoreUnavailable, ValidationFailed
from movie_backend.util.time import utcnow_iso


def _debug(msg: str) -> None:
    print(f"[api] {msg}")


def _startup(app: FastAPI) -> None:
    cfg: Config = app.state.cfg
    db: Database = app.state.db

    Path(cfg.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)

    db.open()
    # Ensure schema exists.
    db.init_schema()

    seeded = seed_default_user_if_needed(db, cfg)
    if seeded:
        _debug(f"Default user created: {seeded.get('email')}")


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    _startup(app)
    try:
        yield
    finally:
        app.state.db.close()


def _install_error_handlers(app: FastAPI, cfg: Config) -> None:
    expose = not cfg.is_production

    @app.exception_handler(ApiError)
    async def _api_error(request: Request, exc: ApiError) -> JSONResponse:
        if isinstance(exc, StoreUnavailable):
            _debug(f"{request.method} {request.url.path} -> store error: {exc.detail}")
        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
        return JSONResponse(exc.to_body(expose_detail=expose), status_code=exc.status_code, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def _request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = []
        for err in exc.errors():
            loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
            errors.append({"field": ".".join(loc) or "body", "message": str(err.get("msg", "Invalid value"))})
        failed = ValidationFailed(errors)
        return JSONResponse(failed.to_body(), status_code=failed.status_code)

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        # Unknown paths and unsupported methods both read as "no such route".
        if exc.status_code in (404, 405):
            return JSONResponse({"message": "Route not found"}, status_code=404)
        return JSONResponse(
            {"message": str(exc.detail)},
            status_code=exc.status_code,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
        tb = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        _debug(f"Unhandled error on {request.method} {request.url.path}\n{tb}")
        body: Dict[str, Any] = {"message": "Something went wrong!"}
        if expose:
            body["error"] = str(exc)
        return JSONResponse(body, status_code=500)


def create_app(cfg: Optional[Config] = None) -> FastAPI:
    cfg = cfg or load_config()

    app = FastAPI(title="Movie Backend API", version=__version__, lifespan=_lifespan)
    app.state.cfg = cfg
    app.state.db = Database(cfg.DB_PATH)

    origins = cfg.cors_origins or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # Browsers reject credentialed responses for a wildcard origin.
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Posters are served as-is; the directory is created at startup.
    app.mount("/uploads", StaticFiles(directory=cfg.UPLOAD_DIR, check_dir=False), name="uploads")

    app.include_router(auth_routes.router)
    app.include_router(movie_routes.router)

    @app.get("/api/health")
    def health() -> Dict[str, Any]:
        return {
            "status": "OK",
            "message": "Movie Backend API is running",
            "timestamp": utcnow_iso(),
        }

    _install_error_handlers(app, cfg)
    return app


app = create_app()
