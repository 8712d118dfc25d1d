import time
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from botguard.api.router import api_router
from botguard.core.config import get_settings
from botguard.core.db import check_database_connection
from botguard.core.errors import register_exception_handlers
from botguard.core.seed import init_db
from botguard.logging.setup import get_logger, setup_logging

settings = get_settings()

setup_logging()
logger = get_logger("botguard.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI application."""
    logger.info(f"Starting {settings.PROJECT_NAME} ({settings.APP_ENV})...")

    if not await check_database_connection():
        logger.error(
            "Database connection failed! Application may not function correctly."
        )
    else:
        await init_db()

    yield

    logger.info(f"Shutting down {settings.PROJECT_NAME}...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(lifespan=lifespan, **settings.fastapi_kwargs)

    @app.get("/")
    async def read_root():
        return {
            "app": settings.PROJECT_NAME,
            "version": settings.PROJECT_VERSION,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "endpoints": {
                "api": settings.API_PREFIX,
                "docs": settings.DOCS_URL if settings.DEBUG else None,
                "health": "/health",
            },
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint for monitoring and load balancers."""
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    @app.middleware("http")
    async def add_request_id_middleware(request: Request, call_next):
        """Add a unique request ID and process time to each request."""
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = str(process_time)
        return response

    if settings.BACKEND_CORS_ORIGINS:
        logger.debug(f"Configuring CORS with origins: {settings.BACKEND_CORS_ORIGINS}")
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
            allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
            allow_methods=settings.CORS_ALLOW_METHODS,
            allow_headers=settings.CORS_ALLOW_HEADERS,
        )

    register_exception_handlers(app)
    app.include_router(api_router)

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    logger.info(f"Starting server at {settings.SERVER_HOST}:{settings.SERVER_PORT}")
    uvicorn.run(
        "botguard.main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )
