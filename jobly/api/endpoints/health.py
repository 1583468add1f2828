"""
Health check endpoints.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from jobly.core.database import execute, get_db

router = APIRouter(tags=["Health"])
logger = logging.getLogger(__name__)


@router.get("/health", status_code=status.HTTP_200_OK)
def health_check(db: Session = Depends(get_db)) -> Dict[str, Any]:
    """
    Health check with database connectivity.

    Always answers 200 while the process is up; `database` reports whether
    a trivial query succeeded.
    """
    try:
        execute(db, "SELECT 1")
        database = "healthy"
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        database = "unhealthy"

    return {
        "status": "healthy",
        "database": database,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
