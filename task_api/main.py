"""FastAPI application for the task tracker API."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from task_api import config as _config
from task_api.routes import columns, comments, customers, health, tasks
from task_api.services.db import close_connection, get_connection

log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifecycle: bind the DB on startup, close it on shutdown."""
    log.info("Starting task-api server")
    setattr(app.state, _config.DB_STATE_KEY, get_connection())
    yield
    log.info("Shutting down task-api server")
    if hasattr(app.state, _config.DB_STATE_KEY):
        delattr(app.state, _config.DB_STATE_KEY)
    close_connection()


app = FastAPI(
    title="task-api",
    description="Generic CRUD API for tasks, customers, board columns and comments",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS is applied per endpoint by the CRUD handlers, not by middleware

# Register routers
app.include_router(health.router)
app.include_router(tasks.router)
app.include_router(customers.router)
app.include_router(columns.router)
app.include_router(comments.router)
