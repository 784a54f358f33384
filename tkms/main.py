"""
TKMS Backend - Main Application Entry Point
"""
import logging
from urllib.parse import urlparse, urlunparse

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import OperationalError
from starlette.exceptions import HTTPException as StarletteHTTPException

from tkms.api.router import api_router
from tkms.core.config import settings
from tkms.core.constants import API_VERSION
from tkms.core.errors import (
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler
)
from tkms.core.logging import setup_logging
from tkms.db.session import SessionLocal
from tkms.services.user_service import ensure_initial_super_admin

# Setup logging first
setup_logging()
logger = logging.getLogger(__name__)

VERSIONED_PREFIX = f"/api/{API_VERSION}"


def _mask_database_url(url: str) -> str:
    """Mask password in DATABASE_URL for safe logging; show full path for sqlite."""
    try:
        parsed = urlparse(url)
        if parsed.scheme.startswith("sqlite"):
            return url
        if parsed.password:
            netloc = f"{parsed.username}:****@{parsed.hostname or ''}"
            if parsed.port:
                netloc += f":{parsed.port}"
            return urlunparse(parsed._replace(netloc=netloc))
    except ValueError:
        return "***"
    return url


# Create FastAPI app
app = FastAPI(
    title="TKMS Backend",
    description="Timekeeping: punches, attendance, schedules and leave",
    version=settings.VERSION or "1.0.0"
)

# Configure CORS - must be before other middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-API-Version", "X-API-Deprecated"],
)


@app.middleware("http")
async def api_version_headers(request: Request, call_next):
    """Tag responses served under the versioned prefix"""
    response = await call_next(request)
    if request.url.path.startswith(VERSIONED_PREFIX):
        response.headers["X-API-Version"] = API_VERSION
        response.headers["X-API-Deprecated"] = "false"
    return response


# Register exception handlers
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)

# Versioned API plus the unversioned compatibility mount
app.include_router(api_router, prefix=VERSIONED_PREFIX)
app.include_router(api_router, prefix="/api", include_in_schema=False)

# Local upload fallback
app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False), name="uploads")


@app.on_event("startup")
def startup_log_config() -> None:
    """Log DATABASE_URL at startup so it can be verified against Alembic."""
    masked = _mask_database_url(settings.DATABASE_URL)
    logger.info("DATABASE_URL (app): %s", masked)
    logger.info("Storage backend: %s", "s3" if settings.s3_configured() else f"local ({settings.UPLOAD_DIR})")


@app.on_event("startup")
def bootstrap_initial_admin() -> None:
    """Create the initial super-admin from INITIAL_ADMIN_EMAIL / INITIAL_ADMIN_PASSWORD when none exists."""
    db = SessionLocal()
    try:
        ensure_initial_super_admin(db, settings.INITIAL_ADMIN_EMAIL, settings.INITIAL_ADMIN_PASSWORD)
    except OperationalError as e:
        db.rollback()
        if "no such table" in str(e).lower():
            logger.warning("Database tables not ready yet, run alembic upgrade head; skipping initial bootstrap")
        else:
            logger.error("Database error during admin bootstrap: %s", e)
    finally:
        db.close()
