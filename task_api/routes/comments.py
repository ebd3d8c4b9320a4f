"""Comment endpoints.

The collection is hand-written: listing is always filtered by `task_id` and
creation accepts a fixed set of columns. Single comments use the generic
handlers, with updates restricted to the comment body.
"""

import logging

from fastapi import APIRouter, Request, Response

from task_api import config as _config
from task_api.services.cors import build_cors_headers
from task_api.services.crud import (
    get_db,
    in_db,
    json_response,
    make_crud_handlers,
    mount_crud_routes,
    no_content,
    origin_not_allowed,
    parse_json,
)
from task_api.services.sql import insert_into, select_all_from, select_one_from

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["comments"])

COMMENT_COLUMNS = ["task_id", "created_by", "content"]


def _internal_error() -> Response:
    return json_response({"error": "Internal error"}, 500)


def _insert_comment(conn, columns: list[str], values: list) -> dict | None:
    cursor = insert_into(conn, "Comments", columns, values)
    return select_one_from(conn, "Comments", "rowid = ?", (cursor.lastrowid,))


async def _list_comments(request: Request) -> Response:
    cors = build_cors_headers(request, "GET,OPTIONS")
    if cors is None:
        return origin_not_allowed()

    conn = get_db(request, _config.DB_STATE_KEY)
    if conn is None:
        return json_response({"error": "Database not found"}, 500, cors)
    if request.method == "OPTIONS":
        return no_content(cors)

    try:
        task_id = request.query_params.get("task_id")
        if not task_id:
            return json_response({"error": "Missing task_id"}, 400, cors)

        rows = await in_db(select_all_from, conn, "Comments", "task_id = ?", (task_id,), (), "id")
        return json_response(rows, 200, cors)
    except Exception:
        log.exception("GET /api/comments error")
        return _internal_error()


async def _create_comment(request: Request) -> Response:
    cors = build_cors_headers(request, "GET,POST,OPTIONS")
    if cors is None:
        return origin_not_allowed()

    try:
        conn = get_db(request, _config.DB_STATE_KEY)
        if conn is None:
            return json_response({"error": "Database not found"}, 500, cors)

        body = await parse_json(request)
        columns = [c for c in COMMENT_COLUMNS if c in body]
        if not columns:
            return json_response({"error": "Nothing to create"}, 400, cors)

        created = await in_db(_insert_comment, conn, columns, [body[c] for c in columns])
        return json_response(created or {}, 201, cors)
    except Exception:
        log.exception("POST /api/comments error")
        return _internal_error()


async def comments_collection(request: Request) -> Response:
    """List a task's comments (GET ?task_id=) or add a comment (POST)."""
    if request.method == "POST":
        return await _create_comment(request)
    return await _list_comments(request)


# One route per method keeps OpenAPI operation ids unique
for _method in ("GET", "POST", "OPTIONS"):
    router.add_api_route(
        "/comments", comments_collection, methods=[_method], name=f"comments_collection_{_method.lower()}"
    )


create_handlers = make_crud_handlers(
    table="Comments",
    primary_key="id",
    allowed_columns=COMMENT_COLUMNS,
    order_by="id",
)

update_handlers = make_crud_handlers(
    table="Comments",
    primary_key="id",
    allowed_columns=["content"],
    order_by="id",
)

mount_crud_routes(
    router, "/comments", create_handlers, collection_methods=(), item_methods=("GET", "DELETE", "OPTIONS")
)
mount_crud_routes(router, "/comments", update_handlers, collection_methods=(), item_methods=("PATCH",))
