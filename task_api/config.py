"""Configuration for the task API server."""

import os
from pathlib import Path

# Package lives at <project root>/task_api/
PACKAGE_ROOT = Path(__file__).resolve().parent
PROJECT_ROOT = PACKAGE_ROOT.parent


def parse_origins(raw: str | None) -> list[str]:
    """Split a comma-separated origin list, dropping blanks."""
    return [s.strip() for s in (raw or "").split(",") if s.strip()]


# SQLite database file; created on first connect
DEFAULT_DB_PATH = str(PROJECT_ROOT / "dev.db")
DB_PATH = os.environ.get("TASK_API_DB_PATH", DEFAULT_DB_PATH)

# Idempotent schema applied when the connection is opened
SCHEMA_PATH = str(PACKAGE_ROOT / "schema.sql")

# app.state attribute holding the database handle
DB_STATE_KEY = "cf_db"

# CORS — empty allow-list means same-origin only
ALLOWED_ORIGINS = parse_origins(os.environ.get("ALLOWED_ORIGINS"))
ALLOW_CREDENTIALS = os.environ.get("ALLOW_CREDENTIALS") == "true"

# Server ports
DEFAULT_PORT = 8787
