"""FastAPI application factory and configuration."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import models  # noqa: F401 - ensure models are registered with SQLModel
from .api import register_routes
from .core import (
    ALLOWED_CORS_ORIGINS,
    DB_RESET,
    LOG_LEVEL,
    ValidationError,
    WalkbookError,
    engine,
    init_db,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db(engine, reset=DB_RESET)
    yield


async def handle_walkbook_error(request: Request, exc: WalkbookError) -> JSONResponse:
    return JSONResponse(exc.as_dict(), status_code=exc.status_code)


async def handle_request_validation(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(map(str, err.get('loc', ())))}: {err.get('msg')}"
        for err in exc.errors()
    )
    error = ValidationError(f"Malformed request: {details}")
    return JSONResponse(error.as_dict(), status_code=error.status_code)


def create_app() -> FastAPI:
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    app = FastAPI(title="Walkbook API", version="1.0.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_exception_handler(WalkbookError, handle_walkbook_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)

    register_routes(app)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("walkbook.app:app", host="127.0.0.1", port=3000, reload=True)
