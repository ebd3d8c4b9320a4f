"""Board column endpoints and the column/task links that place tasks on them."""

from fastapi import APIRouter

from task_api.services.crud import make_crud_handlers, mount_crud_routes

router = APIRouter(prefix="/api", tags=["columns"])

column_handlers = make_crud_handlers(
    table="Columns",
    primary_key="id",
    allowed_columns=["project_id", "name", "key", "position"],
    order_by="position ASC",
)

column_task_handlers = make_crud_handlers(
    table="ColumnTasks",
    primary_key="id",
    allowed_columns=["column_id", "task_id", "position"],
    order_by="id",
)

mount_crud_routes(router, "/columns", column_handlers)
mount_crud_routes(router, "/column_tasks", column_task_handlers)
