import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from tasklist.config import Settings, get_settings
from tasklist.database import Database
from tasklist.routers import health, tasks
from tasklist.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse.create(message).model_dump(),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    database: Database = app.state.database
    # Startup
    await database.create_schema()
    yield
    # Shutdown
    await database.dispose()


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle errors raised deliberately by routers and services."""
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle malformed request bodies and path parameters."""
        logger.warning(f"Request validation failed on {request.url.path}: {exc.errors()}")
        return error_response(status.HTTP_400_BAD_REQUEST, "Request validation failed")

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError):
        """Handle database integrity errors (FK violations, unique constraints, etc.)."""
        error_msg = str(exc.orig) if exc.orig else str(exc)
        logger.warning(f"Integrity error on {request.url.path}: {error_msg}")

        if "foreign key" in error_msg.lower() or "ForeignKeyViolation" in error_msg:
            return error_response(
                status.HTTP_400_BAD_REQUEST, "Referenced task does not exist"
            )

        if "unique" in error_msg.lower() or "UniqueViolation" in error_msg:
            return error_response(status.HTTP_409_CONFLICT, "Resource already exists")

        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, error_msg)

    @app.exception_handler(SQLAlchemyError)
    async def store_error_handler(request: Request, exc: SQLAlchemyError):
        """Surface other store failures with their underlying message."""
        error_msg = str(getattr(exc, "orig", None) or exc)
        logger.error(f"Store error on {request.url.path}: {error_msg}")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, error_msg)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle uncaught exceptions."""
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "An unexpected error occurred"
        )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application around its own database handle."""
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.API_TITLE,
        version=settings.API_VERSION,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = Database(
        settings.DATABASE_URL,
        echo=settings.LOG_LEVEL.lower() == "debug",
        enforce_foreign_keys=settings.ENFORCE_FOREIGN_KEYS,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(health.router, tags=["Health"])
    app.include_router(tasks.router, prefix="/tasks", tags=["Tasks"])

    @app.get("/")
    async def root():
        return {
            "name": settings.API_TITLE,
            "version": settings.API_VERSION,
            "docs": "/api/docs",
        }

    return app


app = create_app()
