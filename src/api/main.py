"""FastAPI application entry point."""

import sys
import logging
import tomllib
from contextlib import asynccontextmanager
from pathlib import Path
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv

# Load environment variables from .env file before Settings reads them
load_dotenv()

# main.py is at <root>/src/api/main.py, src is two levels up
_src_path = Path(__file__).parent.parent
sys.path.insert(0, str(_src_path))

from api.context import open_context
from api.middleware.request_logging import log_requests
from api.routes import auth, health
from utils.logging import setup_structured_logging
from utils.settings import Settings

settings = Settings.from_env()

setup_structured_logging(settings.log_level)

logger = logging.getLogger(__name__)

# Read version from pyproject.toml (single source of truth)
_project_root = _src_path.parent
try:
    with open(_project_root / "pyproject.toml", "rb") as f:
        VERSION = tomllib.load(f)["project"]["version"]
except FileNotFoundError:
    VERSION = "0.0.0"

SERVICE_NAME = "Crawlly Membership API"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: acquire the AppContext on startup, release it on shutdown."""
    logger.info("Starting membership service", extra={"environment": settings.environment})
    with open_context(settings) as context:
        app.state.context = context
        yield  # App runs here
        logger.info("Shutting down membership service")
        app.state.context = None


app = FastAPI(
    title=SERVICE_NAME,
    description="User registration and login with API key issuance",
    version=VERSION,
    lifespan=lifespan,
)

# Browsers don't support credentials with a wildcard origin
if settings.cors_origins == "*":
    allow_credentials = False
    logger.warning(
        "CORS configured with wildcard origin ('*'). "
        "For production, set CORS_ORIGINS to specific domains (e.g., 'https://app.example.com')"
    )
else:
    allow_credentials = True
    logger.info("CORS configured with specific origins", extra={"origins": settings.cors_origins})

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.cors_origins == "*" else settings.cors_origins,
    allow_credentials=allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Request id and access log
app.middleware("http")(log_requests)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Log unexpected exceptions and return a generic 500."""
    logger.error(
        "Unhandled exception",
        extra={
            "requestId": getattr(request.state, "request_id", None),
            "method": request.method,
            "path": request.url.path,
        },
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# Register routes
app.include_router(health.router)
app.include_router(auth.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": SERVICE_NAME,
        "version": VERSION,
        "status": "running"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=settings.port,
        access_log=False  # log_requests writes one JSON line per request
    )
