"""
Health check endpoint
"""
import logging
import platform

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tkms.core.config import settings
from tkms.core.constants import SERVICE_NAME
from tkms.core.deps import get_db, require_admin
from tkms.core.security import check_hashing_backend
from tkms.models.user import User
from tkms.services.storage_service import storage_status

logger = logging.getLogger(__name__)

router = APIRouter()


def _database_status(db: Session) -> dict:
    try:
        db.execute(text("SELECT 1"))
        return {"status": "ok", "dialect": db.get_bind().dialect.name}
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        return {"status": "error", "error": str(e)}


@router.get("/health")
async def health_check(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """
    Health check endpoint (Admin-only)

    Returns database connectivity, storage backend and runtime information.
    """
    database = _database_status(db)
    storage = storage_status()
    healthy = database["status"] == "ok" and storage["status"] == "ok"
    return {
        "success": True,
        "status": "ok" if healthy else "degraded",
        "service": SERVICE_NAME,
        "database": database,
        "storage": storage,
        "hashing": check_hashing_backend(),
        "runtime": {
            "python": platform.python_version(),
            "env": settings.APP_ENV,
            "timezone": settings.TZ,
            "version": settings.VERSION or "1.0.0",
        },
    }
