"""Health check endpoint."""

import logging
from pathlib import Path
from typing import Any

from fastapi import APIRouter

from task_api import config as _config
from task_api.services.db import get_connection, list_tables, run_locked

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
def health() -> dict[str, Any]:
    """Health check with database status."""
    status: dict[str, Any] = {
        "status": "ok",
        "db_path": _config.DB_PATH,
        "db_exists": Path(_config.DB_PATH).exists(),
    }

    try:
        tables = run_locked(lambda: list_tables(get_connection()))
        status["db_connected"] = True
        status["tables"] = tables
    except Exception as e:
        log.warning("Health check database error: %s", e)
        status["db_connected"] = False
        status["error"] = str(e)

    return status
