"""Main FastAPI application for the Mermaid document viewer API."""

import sys
from contextlib import asynccontextmanager
from datetime import datetime
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from .. import __version__
from .dependencies import get_config
from .models.config import APIConfig
from .models.responses import ErrorResponse
from .routes import health, extract, files, lint, yang
from .services.file_manager import FileManager


# Startup configuration; request handlers re-read it through get_config
config = APIConfig.from_env()

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Opener-Policy": "same-origin",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    file_manager = FileManager(config)
    print(f"Starting Mermaid Viewer API v{app.version} in {config.environment} mode")
    print(f"Configuration: {config.model_dump()}")
    print(f"Stored files: {file_manager.get_storage_stats()['total_files']}")

    yield

    print("API shutdown complete")


app = FastAPI(
    title="Mermaid Viewer API",
    description="HTTP API for extracting and validating Mermaid diagrams in Markdown files",
    version=__version__,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/docs/swagger.json",
    lifespan=lifespan
)

# CORS is only needed for the separate dev server; production serves the frontend itself
app.add_middleware(
    CORSMiddleware,
    allow_origins=[] if config.is_production else config.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(GZipMiddleware, minimum_size=1000)


def current_rate_limit() -> str:
    """Per-client request budget, re-read so it follows the environment."""
    return get_config().rate_limit


limiter = Limiter(key_func=get_remote_address, default_limits=[current_rate_limit])
app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    """Attach standard security headers to every response."""
    response = await call_next(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


# Global exception handler
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions with structured error responses."""

    # Route handlers raise with a {code, message, details} dict
    if isinstance(exc.detail, dict):
        error_detail = exc.detail
    else:
        # Routing errors such as 404 and 405 carry a plain string
        error_detail = {
            "code": "HTTP_ERROR",
            "message": str(exc.detail),
            "details": None
        }

    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=error_detail,
            timestamp=datetime.now()
        ).model_dump(mode="json")
    )


# SlowAPIMiddleware calls this handler synchronously
def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """Reject clients that spent their request budget."""
    return JSONResponse(
        status_code=429,
        content=ErrorResponse(
            error={
                "code": "RATE_LIMITED",
                "message": "Too many requests from this IP, please try again later.",
                "details": f"Limit: {exc.detail}"
            },
            timestamp=datetime.now()
        ).model_dump(mode="json")
    )


app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    print(f"Unexpected error on {request.method} {request.url.path}: {exc}", file=sys.stderr)

    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error={
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
                "details": None if config.is_production else str(exc)
            },
            timestamp=datetime.now()
        ).model_dump(mode="json")
    )


# Include routers
app.include_router(health.router)
app.include_router(files.router)
app.include_router(extract.router)
app.include_router(lint.router)
app.include_router(yang.router)


@app.get("/")
@limiter.exempt
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Mermaid Viewer API",
        "version": __version__,
        "description": "HTTP API for extracting and validating Mermaid diagrams in Markdown files",
        "docs": "/api/docs",
        "health": "/api/health"
    }


def run():
    """Run the API with uvicorn."""
    uvicorn.run(
        "mermaid_viewer.api.main:app",
        host=config.host,
        port=config.port,
        reload=not config.is_production,
        log_level="info"
    )


if __name__ == "__main__":
    run()
