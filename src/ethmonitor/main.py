"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ethmonitor import __version__
from ethmonitor.api.deps import get_context_registry
from ethmonitor.api.routers import wallets_router
from ethmonitor.app_context import ContextRegistry
from ethmonitor.config.logging_config import setup_logging
from ethmonitor.config.settings import get_settings
from ethmonitor.core.exceptions import AppError


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    setup_logging()
    yield
    # Shutdown
    app.state.contexts.close_all()


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="Ethereum wallet balances, transfer history and swap activity",
    version=__version__,
    lifespan=lifespan,
)
app.state.contexts = ContextRegistry()

# Include routers
app.include_router(wallets_router)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Global handler for application errors."""
    return JSONResponse(
        status_code=exc.http_status,
        content={"error": exc.code, "message": exc.message},
    )


@app.get("/health")
def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/")
def root() -> dict[str, str]:
    """Root endpoint with API info."""
    return {
        "app": settings.app_name,
        "version": __version__,
        "docs": "/docs",
    }


@app.delete("/cache")
def clear_cache(request: Request) -> dict[str, str]:
    """Drop every cached upstream response."""
    get_context_registry(request).clear_caches()
    return {"status": "cleared"}
