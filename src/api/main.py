"""
Main FastAPI application entry point.
"""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.middleware.sessions import SessionMiddleware
import time
from contextlib import asynccontextmanager

from src.config.settings import settings
from src.utils.logger import setup_logging, get_logger, log_error
from src.utils.performance import performance_monitor
from src.api.routes import router
from src.api.auth_routes import router as auth_router
from src.api.dependencies import cleanup_services
from src.api.redirects import RedirectRequired
from src.api.middleware import (
    request_logging_middleware,
    security_headers_middleware
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    setup_logging()
    logger = get_logger("startup")
    logger.info(
        "Starting support dashboard",
        version=settings.app_version,
        auth_url=settings.auth_url,
        backend_url=settings.backend_url,
    )

    yield

    logger.info("Shutting down support dashboard")
    await cleanup_services()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Support desk dashboard for AI-assisted customer replies",
    debug=settings.debug,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url=None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.debug else settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(
    SessionMiddleware,
    secret_key=settings.secret_key,
    session_cookie=settings.session_cookie,
    max_age=settings.session_max_age,
    same_site="lax",
    https_only=settings.session_https_only,
)

app.include_router(auth_router)
app.include_router(router)

app.middleware("http")(security_headers_middleware)
app.middleware("http")(request_logging_middleware)


@app.get("/health")
async def health_check():
    """Health check endpoint with timings of calls to the auth service and backend."""
    return {
        "status": "healthy",
        "timestamp": time.time(),
        "version": settings.app_version,
        "outbound": performance_monitor.get_metrics()
    }


@app.exception_handler(RedirectRequired)
async def redirect_required_handler(request: Request, exc: RedirectRequired):
    return RedirectResponse(exc.url, status_code=303)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    log_error(exc, {"url": str(request.url), "method": request.method})

    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "message": str(exc) if settings.debug else "An error occurred"
        }
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "src.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )
