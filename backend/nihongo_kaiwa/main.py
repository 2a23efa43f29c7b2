"""FastAPI application entry point."""
import logging
import logging.handlers
import time
from typing import Optional
from fastapi import APIRouter, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
import httpx
from nihongo_kaiwa.api.openrouter import router as openrouter_router
from nihongo_kaiwa.core.config import Settings, settings as default_settings
from nihongo_kaiwa.services.openrouter import OpenRouterService

LOG_MAX_BYTES = 10 * 1024 * 1024  # 10MB
LOG_BACKUP_COUNT = 5  # Keep 5 backup files

logger = logging.getLogger(__name__)

_logging_configured = False


def configure_logging(settings: Settings) -> None:
    """Attach console and rotating file handlers to the root logger (once per process)."""
    global _logging_configured
    if _logging_configured:
        return

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if settings.DEBUG else settings.LOG_LEVEL)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if settings.LOG_TO_FILE:
        settings.LOG_DIR.mkdir(parents=True, exist_ok=True)
        log_file = settings.LOG_DIR / "app.log"
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=LOG_MAX_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
        logger.info(f"Logging configured. Log file: {log_file}")

    # httpx logs every request line at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    _logging_configured = True


def create_app(
    settings: Optional[Settings] = None,
    service: Optional[OpenRouterService] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> FastAPI:
    """Build the application.

    Args:
        settings: Application settings (defaults to the environment-derived settings)
        service: Prebuilt relay service; built from settings when omitted
        http_client: Client handed to the relay service when it is built here
    """
    settings = settings or default_settings
    configure_logging(settings)

    app = FastAPI(
        title=f"{settings.APP_NAME} API",
        description="Japanese conversation practice relay for OpenRouter",
        version=settings.APP_VERSION,
    )
    app.state.settings = settings
    app.state.openrouter_service = service or OpenRouterService.from_settings(settings, http_client=http_client)

    @app.on_event("shutdown")
    async def shutdown_event():
        """Release the upstream HTTP client."""
        await app.state.openrouter_service.close()

    cors_origins = settings.cors_origins_list
    logger.info(f"CORS origins configured: {cors_origins}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials="*" not in cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Report malformed request bodies as 400 in the API's error shape."""
        logger.warning(f"Invalid request to {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "error": _validation_message(request, exc)},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Log unexpected faults and answer in the API's error shape."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "error": str(exc) or "Internal server error"},
        )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log all incoming requests."""
        start_time = time.time()
        logger.info(f"Request: {request.method} {request.url.path}")

        response = await call_next(request)

        process_time = time.time() - start_time
        logger.info(
            f"Response: {request.method} {request.url.path} - "
            f"Status: {response.status_code} - Time: {process_time:.3f}s"
        )
        return response

    api_router = APIRouter(prefix="/api", tags=["api"])

    @api_router.get("/status", tags=["health"])
    async def api_status():
        """Server status endpoint."""
        return {
            "status": "online",
            "message": f"{settings.APP_NAME} Server is running",
            "version": settings.APP_VERSION,
        }

    api_router.include_router(openrouter_router)
    app.include_router(api_router)

    static_dir = settings.STATIC_DIR
    if static_dir.is_dir():
        index_file = static_dir / "index.html"

        @app.get("/", include_in_schema=False)
        async def index():
            """Serve the front end."""
            if not index_file.is_file():
                return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": "Not Found"})
            return FileResponse(index_file)

        app.mount("/", StaticFiles(directory=str(static_dir)), name="static")
        logger.info(f"Serving static files from {static_dir}")
    else:
        logger.info(f"Static directory not found, front end disabled: {static_dir}")

    return app


def _validation_message(request: Request, exc: RequestValidationError) -> str:
    if request.url.path.endswith("/chat") and any(
        err.get("loc", ())[:2] == ("body", "messages") or err.get("loc") == ("body",)
        for err in exc.errors()
    ):
        return "Invalid request format. Messages array is required."
    first = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return f"Invalid request: {location} {first.get('msg', '')}".strip()
