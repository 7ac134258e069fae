from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from slowapi.errors import RateLimitExceeded

from pathforge.core.config import settings
from pathforge.core.database import init_db, close_db, get_session_local
from pathforge.core.exceptions import PathForgeError, error_response
from pathforge.core.logging_config import logger
from pathforge.core.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware
from pathforge.core.rate_limiter import limiter, rate_limit_exceeded_handler
from pathforge.api.v1.router import api_router
from pathforge.db.project_catalog import seed_project_suggestions
from pathforge.utils.claude_client import claude_client
import pathforge.models  # noqa: F401 - register models on the metadata

DEFAULT_SECRETS = {"", "CHANGE_ME", "change-me", "your-secret-key"}


async def validate_critical_config():
    """Validate critical configuration at startup - fail fast if missing"""
    errors = []
    warnings = []

    if not settings.DATABASE_URL:
        errors.append("DATABASE_URL is not set")

    if settings.SECRET_KEY in DEFAULT_SECRETS:
        errors.append("SECRET_KEY is not set or using default value")

    if settings.JWT_SECRET_KEY in DEFAULT_SECRETS:
        errors.append("JWT_SECRET_KEY is not set or using default value")

    if not claude_client.is_configured():
        warnings.append("Claude is not configured - template text will be used for analysis, docs and viva")

    if errors:
        for err in errors:
            logger.critical(f"[Startup] CRITICAL: {err}")
        raise RuntimeError(f"Missing critical configuration: {', '.join(errors)}")

    for warn in warnings:
        logger.warning(f"[Startup] WARNING: {warn}")

    logger.info("[Startup] Critical configuration validated")
    return True


async def seed_catalog_if_empty():
    session_factory = get_session_local()
    async with session_factory() as session:
        inserted = await seed_project_suggestions(session, replace=False)
    if inserted:
        logger.info(f"[Startup] Project catalogue seeded with {inserted} suggestions")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup and shutdown"""
    logger.info(f"Starting {settings.APP_NAME} ({settings.ENVIRONMENT}, API {settings.API_VERSION})")

    await validate_critical_config()
    await init_db()
    logger.info("[Startup] Database tables ready")

    if settings.SEED_CATALOG_ON_STARTUP:
        await seed_catalog_if_empty()

    yield

    logger.info(f"Shutting down {settings.APP_NAME}...")
    await close_db()


app = FastAPI(
    title=settings.APP_NAME,
    description="Project guidance for student teams: roadmaps, learning prompts, error logs, documentation and viva prep",
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
    redirect_slashes=False
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

# Order matters - last added runs first
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Response-Time"],
)


@app.exception_handler(PathForgeError)
async def pathforge_exception_handler(request: Request, exc: PathForgeError):
    if exc.status_code >= 500:
        logger.log_error_with_context(exc, context=f"{request.method} {request.url.path}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=error_response(exc))


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Global exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "message": str(exc) if settings.DEBUG else "An error occurred"
        }
    )


@app.get("/health", tags=["Health"])
async def health_check():
    return {
        "status": "healthy",
        "app_name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT
    }


app.include_router(api_router, prefix=f"/api/{settings.API_VERSION}")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "pathforge.main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        reload=settings.DEBUG,
    )
