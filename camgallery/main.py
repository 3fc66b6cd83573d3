import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.gzip import GZipMiddleware
from starlette.staticfiles import StaticFiles

# Load environment variables as early as possible
load_dotenv()

from .application.ports.storage_repo import StorageRepository
from .core.config import Settings, get_settings
from .exceptions import http_exception_handler, validation_exception_handler
from .infrastructure.storage import LocalStorageRepository, build_storage
from .middleware import ErrorHandlingMiddleware, LoggingMiddleware, RequestSizeLimitMiddleware, SecurityMiddleware
from .routers import gallery_router, photos_router
from .schemas.photos import HealthResponse

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format=settings.LOG_FORMAT,
    )


def create_app(settings: Optional[Settings] = None, storage: Optional[StorageRepository] = None) -> FastAPI:
    """Build the application around one storage backend.

    ``storage`` defaults to the backend selected by ``STORAGE_BACKEND``; tests
    pass their own.
    """
    settings = settings or get_settings()
    configure_logging(settings)
    storage = storage or build_storage(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting {settings.APP_NAME} with {storage.backend_name} storage on port {settings.PORT}")
        yield
        logger.info(f"Shutting down {settings.APP_NAME}...")

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
        docs_url=("/docs" if settings.DOCS_ENABLED else None),
        redoc_url=("/redoc" if settings.DOCS_ENABLED else None),
        openapi_url=("/openapi.json" if settings.DOCS_ENABLED else None),
    )
    app.state.settings = settings
    app.state.storage = storage

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    app.add_middleware(ErrorHandlingMiddleware, debug=settings.DEBUG)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(SecurityMiddleware)
    app.add_middleware(RequestSizeLimitMiddleware, settings=settings)
    app.add_middleware(GZipMiddleware, minimum_size=settings.GZIP_MIN_SIZE)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(gallery_router.router)
    app.include_router(photos_router.router)
    if settings.ENABLE_DELETE:
        app.include_router(photos_router.delete_router)

    # Stored photos are served straight from disk; blob URLs point at the container instead
    if isinstance(storage, LocalStorageRepository):
        app.mount("/uploads", StaticFiles(directory=storage.upload_dir), name="uploads")

    @app.get("/health", response_model=HealthResponse)
    def health_check(request: Request):
        return HealthResponse(
            status="healthy",
            service=settings.APP_NAME,
            version=settings.APP_VERSION,
            storage_backend=request.app.state.storage.backend_name,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )

    return app


def run() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "camgallery.main:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        workers=1,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
