"""
main.py — FastAPI Application Entrypoint

Purpose:
- Build the application (create_app): logging, CORS, routers, error handlers.
- Own the storage handle and credential store for the life of the process.
- Provide the `app` object used by the ASGI server (uvicorn).

Collaborators can be injected (tests pass an in-memory Database and a
minimal-cost CredentialStore); otherwise they are built from settings when
the app starts and closed when it stops.

This file should stay clean — no business logic here.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.v1 import auth, users
from app.core.config import settings
from app.core.database import Database
from app.core.errors import ErrorKind, ServiceError, bad_request
from app.core.logging import configure_logging, get_logger
from app.core.security import CredentialStore

logger = get_logger(__name__)


# -----------------------------------------------------------------------------
# Lifespan
# -----------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    owned = []
    if getattr(app.state, "db", None) is None:
        app.state.db = Database(settings.database_uri).open()
        owned.append(app.state.db)
    try:
        yield
    finally:
        for db in owned:
            db.close()
        if owned:
            app.state.db = None


# -----------------------------------------------------------------------------
# Error Handlers
# -----------------------------------------------------------------------------

def _error_response(status_code: int, message) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"message": message, "status": status_code}},
    )


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    if exc.kind is ErrorKind.STORAGE_UNAVAILABLE:
        logger.error("Storage unavailable on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error_response(exc.status_code, exc.detail)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        messages.append(f"{location}: {error.get('msg')}")
    return JSONResponse(status_code=400, content=bad_request(messages).to_dict())


# -----------------------------------------------------------------------------
# App Initialization
# -----------------------------------------------------------------------------

def create_app(
    database: Optional[Database] = None,
    credentials: Optional[CredentialStore] = None,
) -> FastAPI:
    configure_logging(settings.LOG_LEVEL)

    application = FastAPI(
        title="Neighborhood Users Backend",
        description="User accounts and favorited properties for Neighborhood",
        version="0.1.0",
        lifespan=lifespan,
    )
    application.state.db = database.open() if database is not None else None
    application.state.credentials = credentials or CredentialStore(settings.BCRYPT_WORK_FACTOR)

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.add_exception_handler(ServiceError, service_error_handler)
    application.add_exception_handler(StarletteHTTPException, http_error_handler)
    application.add_exception_handler(RequestValidationError, request_validation_handler)

    application.include_router(auth.router)
    application.include_router(users.router)

    @application.get("/")
    def root():
        return {"status": "ok", "message": "Neighborhood backend running"}

    return application


app = create_app()
