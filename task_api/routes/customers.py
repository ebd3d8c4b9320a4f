"""Customer endpoints: /api/customers and /api/customers/{id}."""

from fastapi import APIRouter

from task_api.services.crud import make_crud_handlers, mount_crud_routes

router = APIRouter(prefix="/api", tags=["customers"])

handlers = make_crud_handlers(
    table="Customers",
    primary_key="CustomerID",
    allowed_columns=["CompanyName", "ContactName"],
    order_by="CustomerID",
)

mount_crud_routes(router, "/customers", handlers)
