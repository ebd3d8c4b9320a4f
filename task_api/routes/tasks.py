"""Task endpoints: /api/tasks and /api/tasks/{id}."""

from fastapi import APIRouter

from task_api.services.crud import make_crud_handlers, mount_crud_routes

router = APIRouter(prefix="/api", tags=["tasks"])

# Ownership and sprint references are not checked against other tables
TASK_COLUMNS = [
    "project_id",
    "sprint_id",
    "reporter_id",
    "assignee_id",
    "created_by",
    "modified_by",
    "title",
    "description",
    "start_date",
    "end_date",
    "due_date",
    "updated_at",
]

handlers = make_crud_handlers(
    table="Tasks",
    primary_key="id",
    allowed_columns=TASK_COLUMNS,
    order_by="id",
)

mount_crud_routes(router, "/tasks", handlers)
