# main.py
from contextlib import asynccontextmanager
import logging
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from soundstore.config import Settings
from soundstore.routes import sound_routes
from soundstore.services.sound_store import SoundStore
from soundstore.utils.errors import FileTooLarge, SoundStoreError
from soundstore.utils.monitoring import log_request

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Headroom for multipart boundaries and part headers on top of the file limit
MULTIPART_OVERHEAD_BYTES = 1024 * 1024

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def create_app(settings: Settings = None) -> FastAPI:
    settings = settings or Settings.from_env()
    store = SoundStore(settings.uploads_dir, max_upload_bytes=settings.max_upload_bytes)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store.ensure_directory()
        logger.info(f"Starting Sound Store API, uploads in {store.uploads_dir.resolve()}")
        yield
        logger.info("Shutting down Sound Store API")

    app = FastAPI(title="Sound Store API", lifespan=lifespan)
    app.state.settings = settings
    app.state.sound_store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def limit_and_log(request: Request, call_next):
        started = time.perf_counter()
        content_length = request.headers.get("content-length")
        limit = settings.max_upload_bytes + MULTIPART_OVERHEAD_BYTES
        if content_length and content_length.isdigit() and int(content_length) > limit:
            logger.warning(f"Rejected {request.url.path}: body of {content_length} bytes")
            response = _error(FileTooLarge.status_code, FileTooLarge.default_message)
        else:
            response = await call_next(request)
        log_request(request.method, request.url.path, response.status_code, started)
        return response

    @app.exception_handler(SoundStoreError)
    async def sound_store_error_handler(request: Request, exc: SoundStoreError):
        if exc.status_code >= 500:
            logger.error(f"{exc.kind} on {request.url.path}: {exc.message}")
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.info(f"Invalid request to {request.url.path}: {exc.errors()}")
        return _error(400, "Invalid request")

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Global exception: {str(exc)}", exc_info=True)
        return _error(500, "Internal server error")

    app.include_router(sound_routes.router)

    # mount frontend after routers so API routes take precedence
    if settings.frontend_dir is not None and settings.frontend_dir.is_dir():
        app.mount("/", StaticFiles(directory=str(settings.frontend_dir), html=True), name="frontend")

    return app


def start():
    settings = Settings.from_env()
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == '__main__':
    start()
