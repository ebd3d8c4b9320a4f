"""Per-endpoint CORS header construction."""

import logging

from fastapi import Request

from task_api import config as _config

log = logging.getLogger(__name__)


def _server_origin(request: Request) -> str:
    return f"{request.url.scheme}://{request.url.netloc}"


def build_cors_headers(request: Request, methods: str = "GET,POST,OPTIONS") -> dict[str, str] | None:
    """Build CORS headers for a request if its `Origin` is allowed.

    Requests without an Origin get the plain JSON content type. When no
    allow-list is configured only same-origin requests are accepted.
    Returns None when the origin is not allowed.
    """
    origin = request.headers.get("origin")
    if not origin:
        return {"Content-Type": "application/json"}

    allowed = _config.ALLOWED_ORIGINS
    if not allowed:
        if origin != _server_origin(request):
            log.debug("Rejected cross-origin request from %s", origin)
            return None
    elif origin not in allowed:
        log.debug("Rejected origin not in allow-list: %s", origin)
        return None

    headers = {
        "Content-Type": "application/json",
        "Access-Control-Allow-Origin": origin,
        "Vary": "Origin",
        "Access-Control-Allow-Methods": methods,
        "Access-Control-Allow-Headers": "Content-Type, Authorization",
    }
    if _config.ALLOW_CREDENTIALS:
        headers["Access-Control-Allow-Credentials"] = "true"
    return headers
