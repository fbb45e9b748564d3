import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import database
from .api import admin, analytics, auth, domains, links, redirect, subscription
from .api.deps import limiter
from .config import settings
from .core.errors import LinkShortError
from .logging_config import setup_logging
from .middleware import LoggingMiddleware

logger = logging.getLogger(__name__)

SERVICE_NAME = "LinkShort"


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return f"{field}: {first.get('msg')}" if field else first.get("msg", "Invalid request")


async def linkshort_error_handler(request: Request, exc: LinkShortError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"error": _validation_message(exc)})


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(engine=None) -> FastAPI:
    """
    Build the application.

    Args:
        engine: Async engine to use instead of the one from ``DATABASE_URL``

    Returns:
        Configured FastAPI application
    """
    setup_logging(settings.LOG_LEVEL)
    engine = engine or database.engine

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await database.create_tables(engine)
        logger.info("%s started", SERVICE_NAME)
        yield
        await engine.dispose()

    app = FastAPI(
        title=SERVICE_NAME,
        description="URL shortening service with click analytics",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.engine = engine
    app.state.session_factory = database.create_session_factory(engine)

    # Setup rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    app.add_exception_handler(LinkShortError, linkshort_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.add_middleware(LoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(auth.router, prefix="/api")
    app.include_router(links.router, prefix="/api")
    app.include_router(analytics.router, prefix="/api")
    app.include_router(domains.router, prefix="/api")
    app.include_router(subscription.router, prefix="/api")
    app.include_router(admin.router, prefix="/api")

    # Health check endpoint
    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "service": SERVICE_NAME}

    # Redirect endpoint (must be last to not conflict with other routes)
    app.include_router(redirect.router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
