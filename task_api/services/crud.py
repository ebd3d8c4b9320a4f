"""Generic CRUD endpoints for a single table.

`make_crud_handlers` turns a table/column configuration into two FastAPI
endpoints: `collection` (GET list, POST create) and `item` (GET, PUT/PATCH,
DELETE by primary key). Both answer OPTIONS preflights and apply the
per-endpoint CORS policy from `build_cors_headers`.

Table, primary key and column names are validated identifiers; request
values only ever reach SQLite as bound parameters. Any error raised while
handling a request becomes a 500 JSON response.
"""

import json
import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Any, NamedTuple

from fastapi import APIRouter, Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from task_api import config as _config
from task_api.services.cors import build_cors_headers
from task_api.services.db import run_locked
from task_api.services.sql import delete_from, insert_into, select_all_from, select_one_from, update_table
from task_api.services.validation import validate_column_names, validate_identifier, validate_table

log = logging.getLogger(__name__)

COLLECTION_METHODS = "GET,POST,OPTIONS"
ITEM_METHODS = "GET,PUT,PATCH,DELETE,OPTIONS"

JSON_HEADERS = {"Content-Type": "application/json"}

Endpoint = Callable[[Request], Awaitable[Response]]


class CrudHandlers(NamedTuple):
    collection: Endpoint
    item: Endpoint


def json_response(payload: Any, status_code: int = 200, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(payload, status_code=status_code, headers=headers or JSON_HEADERS)


def no_content(headers: dict[str, str] | None = None) -> Response:
    return Response(status_code=204, headers=headers or JSON_HEADERS)


def origin_not_allowed() -> JSONResponse:
    return json_response({"error": "Origin not allowed"}, 403)


def server_error(err: Exception) -> JSONResponse:
    return json_response({"error": str(err) or "Internal error"}, 500)


async def in_db(fn: Callable[..., Any], *args: Any) -> Any:
    """Run a blocking database call in the thread pool under the shared lock."""
    return await run_in_threadpool(run_locked, fn, *args)


def get_db(request: Request, state_key: str):
    """Resolve the database handle bound on `app.state`, or None."""
    return getattr(request.app.state, state_key, None)


async def parse_json(request: Request) -> dict[str, Any]:
    """Parse a JSON object body.

    Returns {} when the request is not JSON or the body does not parse.
    Raises ValueError when the body parses to anything but an object.
    """
    content_type = request.headers.get("content-type", "")
    if "application/json" not in content_type.lower():
        return {}
    try:
        body = json.loads(await request.body())
    except ValueError:
        return {}
    if not isinstance(body, dict):
        msg = "Request body must be a JSON object"
        raise ValueError(msg)
    return body


def make_crud_handlers(
    table: str,
    primary_key: str = "id",
    allowed_tables: Iterable[str] = (),
    allowed_columns: Iterable[str] = (),
    db_state_key: str = _config.DB_STATE_KEY,
    order_by: str = "",
) -> CrudHandlers:
    """Create collection and item endpoints for `table`.

    With `allowed_columns` empty, every key of the request body is taken as a
    column name (still validated as an identifier). `order_by` is trusted
    configuration text appended to the collection query.
    """
    if not table:
        msg = "make_crud_handlers requires a table name"
        raise ValueError(msg)
    allowed_tables = list(allowed_tables or ())
    validate_table(table, allowed_tables)
    validate_identifier(primary_key)
    allowed_columns = validate_column_names(allowed_columns)

    def _pick(body: dict[str, Any]) -> dict[str, Any]:
        candidates = allowed_columns or list(body)
        return {c: body[c] for c in candidates if c in body}

    by_key = f"{primary_key} = ?"

    # Blocking steps; each runs in the thread pool with the lock held
    def _list(conn) -> list[dict[str, Any]]:
        return select_all_from(conn, table, allowed_tables=allowed_tables, order_by=order_by)

    def _fetch(conn, item_id: str) -> dict[str, Any] | None:
        return select_one_from(conn, table, by_key, (item_id,), allowed_tables)

    def _create(conn, columns: list[str], values: list[Any]) -> dict[str, Any] | None:
        cursor = insert_into(conn, table, columns, values, allowed_tables)
        log.info("Created %s row %s", table, cursor.lastrowid)
        return select_one_from(conn, table, "rowid = ?", (cursor.lastrowid,), allowed_tables)

    def _update(conn, item_id: str, updates: dict[str, Any]) -> dict[str, Any] | None:
        update_table(conn, table, updates, by_key, (item_id,), allowed_tables)
        return _fetch(conn, item_id)

    async def collection(request: Request) -> Response:
        cors = build_cors_headers(request, COLLECTION_METHODS)
        if cors is None:
            return origin_not_allowed()

        try:
            conn = get_db(request, db_state_key)
            if conn is None:
                return json_response({"error": "Database not found"}, 500, cors)
            if request.method == "OPTIONS":
                return no_content(cors)

            if request.method == "GET":
                rows = await in_db(_list, conn)
                return json_response(rows, 200, cors)

            if request.method == "POST":
                payload = _pick(await parse_json(request))
                columns = validate_column_names(list(payload))
                if not columns:
                    return json_response({"error": "Nothing to create"}, 400, cors)

                created = await in_db(_create, conn, columns, [payload[c] for c in columns])
                return json_response(created or {}, 201, cors)

            return json_response({"error": "Method not allowed"}, 405, cors)
        except Exception as e:
            log.exception("/api/%s collection error", table)
            return server_error(e)

    async def item(request: Request) -> Response:
        item_id = request.path_params.get("id") or request.path_params.get(primary_key)
        cors = build_cors_headers(request, ITEM_METHODS)
        if cors is None:
            return origin_not_allowed()

        try:
            conn = get_db(request, db_state_key)
            if conn is None:
                return json_response({"error": "Database not found"}, 500, cors)
            if request.method == "OPTIONS":
                return no_content(cors)
            if not item_id:
                return json_response({"error": "Missing id"}, 400, cors)

            if request.method == "GET":
                row = await in_db(_fetch, conn, item_id)
                if row is None:
                    return json_response({}, 404, cors)
                return json_response(row, 200, cors)

            if request.method in ("PUT", "PATCH"):
                updates = _pick(await parse_json(request))
                if not updates:
                    return json_response({"error": "Nothing to update"}, 400, cors)

                updated = await in_db(_update, conn, item_id, updates)
                return json_response(updated or {}, 200, cors)

            if request.method == "DELETE":
                await in_db(delete_from, conn, table, by_key, (item_id,), allowed_tables)
                return no_content(cors)

            return json_response({"error": "Method not allowed"}, 405, cors)
        except Exception as e:
            log.exception("/api/%s/%s error", table, item_id)
            return server_error(e)

    return CrudHandlers(collection, item)


def mount_crud_routes(
    router: APIRouter,
    path: str,
    handlers: CrudHandlers,
    collection_methods: Iterable[str] = ("GET", "POST", "OPTIONS"),
    item_methods: Iterable[str] = ("GET", "PUT", "PATCH", "DELETE", "OPTIONS"),
) -> None:
    """Register `path` and `path/{id}` on a router.

    Each method gets its own route so every OpenAPI operation has a unique id.
    """
    name = path.strip("/").replace("/", "_")
    for method in collection_methods:
        router.add_api_route(
            path, handlers.collection, methods=[method], name=f"{name}_collection_{method.lower()}"
        )
    for method in item_methods:
        router.add_api_route(
            f"{path}/{{id}}", handlers.item, methods=[method], name=f"{name}_item_{method.lower()}"
        )
