"""
Main FastAPI Application

Application factory for the ProjectDesk API. Configures middleware,
routes, error handlers and the database handle.

Run with:
    uvicorn projectdesk.main:create_app --factory
"""
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from typing import Optional
import time
from contextlib import asynccontextmanager

import redis

from projectdesk import __version__
from projectdesk.config import Settings, get_settings
from projectdesk.database import Database
from projectdesk.middleware.rate_limit import RateLimitMiddleware
from projectdesk.utils.logging import setup_logging, get_logger
from projectdesk.core.exceptions import AuthenticationError
from projectdesk.controllers.auth_controller import ensure_super_admin
from projectdesk.api.endpoints import auth, users, projects, tenants

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: optional table creation and super-admin bootstrap. Shutdown: release the pool."""
    settings: Settings = app.state.settings
    db: Database = app.state.db

    logger.info(f"Starting application in {settings.ENVIRONMENT} mode")

    if settings.AUTO_CREATE_TABLES:
        logger.warning("Creating database tables on startup (use migrations in production)")
        db.create_all()

    session = db.session()
    try:
        ensure_super_admin(session, settings)
    finally:
        session.close()

    logger.info("Application startup complete")

    yield

    logger.info("Shutting down application")
    db.dispose()
    logger.info("Application shutdown complete")


def create_app(settings: Optional[Settings] = None, redis_client: Optional[redis.Redis] = None) -> FastAPI:
    """
    Build the application.

    settings defaults to the cached environment settings. redis_client
    overrides the client the rate limiter would build from REDIS_URL.
    """
    settings = settings or get_settings()

    setup_logging(
        log_level=settings.LOG_LEVEL,
        json_format=(settings.ENVIRONMENT == "production")
    )

    app = FastAPI(
        title="ProjectDesk",
        description="Multi-tenant project management API",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.db = Database(settings)

    _configure_middleware(app, settings, redis_client)
    _register_exception_handlers(app, settings)
    _register_routes(app, settings)

    return app


def _configure_middleware(app: FastAPI, settings: Settings, redis_client: Optional[redis.Redis]) -> None:
    allow_all = settings.ENVIRONMENT == "development"
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.CORS_ORIGINS,
        allow_credentials=not allow_all,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        """Add X-Process-Time header to track request duration."""
        start_time = time.time()
        response = await call_next(request)
        response.headers["X-Process-Time"] = str(time.time() - start_time)
        return response

    if settings.RATE_LIMIT_ENABLED:
        app.add_middleware(
            RateLimitMiddleware,
            redis_url=settings.REDIS_URL,
            limit_per_minute=settings.RATE_LIMIT_PER_MINUTE,
            redis_client=redis_client
        )


def _register_exception_handlers(app: FastAPI, settings: Settings) -> None:

    @app.exception_handler(AuthenticationError)
    async def authentication_error_handler(request: Request, exc: AuthenticationError):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail, "type": "authentication_error"},
            headers=exc.headers or {}
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Catch-all exception handler.

        Logs full details, returns a generic error unless DEBUG is on.
        """
        logger.error(
            f"Unhandled exception: {type(exc).__name__}: {str(exc)}",
            exc_info=True,
            extra={
                "path": request.url.path,
                "method": request.method,
                "tenant_id": getattr(request.state, "tenant_id", None)
            }
        )

        if settings.DEBUG:
            return JSONResponse(
                status_code=500,
                content={"detail": str(exc), "type": type(exc).__name__}
            )
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error", "type": "internal_error"}
        )


def _register_routes(app: FastAPI, settings: Settings) -> None:

    @app.get("/health", tags=["health"])
    async def health_check():
        """Health check endpoint for load balancers."""
        return {
            "status": "healthy",
            "environment": settings.ENVIRONMENT,
            "version": __version__
        }

    @app.get("/", tags=["root"])
    async def root():
        return {
            "message": "ProjectDesk API",
            "version": __version__,
            "docs": "/docs",
            "health": "/health"
        }

    app.include_router(auth.router, prefix="/api")
    app.include_router(tenants.router, prefix="/api")
    app.include_router(users.router, prefix="/api")
    app.include_router(projects.router, prefix="/api")


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "projectdesk.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
