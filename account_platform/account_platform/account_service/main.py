"""
Account service - signup, login and profile lookup over a credential store
"""
from contextlib import asynccontextmanager
from typing import Optional
import logging
import sys

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .auth import PasswordHasher, TokenService
from .config import Settings, get_settings
from .routes import auth, health, profile, seed
from .store import CredentialStore
from .utils.event_logger import configure_event_file_logging

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s:%(name)s:%(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    configure_event_file_logging(settings.LOG_DIR)


def error_response(status_code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message},
        headers=headers,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # Only field locations are logged; error inputs may contain passwords
    fields = [".".join(str(part) for part in error["loc"]) for error in exc.errors()]
    logger.info("Invalid request body on %s %s: %s", request.method, request.url.path, fields)
    return error_response(status.HTTP_400_BAD_REQUEST, "Invalid request body")


async def catch_unhandled_errors(request: Request, call_next):
    """Render unexpected errors as the error envelope, inside the CORS layer."""
    try:
        return await call_next(request)
    except Exception as exc:
        logger.exception("Unhandled exception on %s %s: %s", request.method, request.url.path, exc)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def create_app(settings: Optional[Settings] = None, store: Optional[CredentialStore] = None) -> FastAPI:
    """
    Build the application around an explicit settings object and store.

    Args:
        settings: Configuration; read from the environment when omitted
        store: Credential store; built from settings.DATABASE_URL when omitted

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    configure_logging(settings)

    if store is None:
        store = CredentialStore.from_url(settings.DATABASE_URL)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        """Create tables on startup, release connections on shutdown"""
        if settings.uses_dev_secret:
            logger.warning("JWT_SECRET is not set; signing tokens with the development default")
        store.init_schema()
        yield
        store.dispose()

    app = FastAPI(
        title="Account Service",
        description="Signup, login and profile storage",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.tokens = TokenService.from_settings(settings)
    app.state.passwords = PasswordHasher.from_settings(settings)

    # Must stay inside CORS; middleware added later wraps middleware added earlier
    app.middleware("http")(catch_unhandled_errors)

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    app.include_router(health.router)
    app.include_router(seed.router)
    app.include_router(auth.router)
    app.include_router(profile.router)
    return app


def run() -> None:
    """Serve the application with uvicorn on HOST:PORT."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
