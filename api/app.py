"""
Purchase Order Service — FastAPI backend.

Thin HTTP layer over ``OrderService``. Every response body carries a
``success`` flag; failures add a ``message``.

Endpoints
---------
  POST   /purchase-orders               → create (201)
  GET    /purchase-orders               → list all, stored order
  GET    /purchase-orders/search        → filter by ?itemName= &category= &supplier= &status=
  GET    /purchase-orders/{order_id}    → fetch one
  PUT    /purchase-orders/{order_id}    → shallow-merge update
  DELETE /purchase-orders/{order_id}    → delete
  GET    /api/health                    → liveness probe

Errors
------
  400  validation failure (missing/invalid fields, malformed body)
  404  no order with that id
  500  the database file could not be written
"""
import logging
from typing import Optional

from fastapi import Body, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from config import Config
from models.purchase_order import SearchFilters
from orders.errors import OrderError
from orders.service import OrderService
from orders.store import RecordStore

logger = logging.getLogger(__name__)


def _default_service() -> OrderService:
    config = Config()
    return OrderService(RecordStore(config.db_path, pretty=config.pretty_json))


def create_app(service: Optional[OrderService] = None) -> FastAPI:
    """
    Build the application around *service*.

    Without one, a service over ``Config().db_path`` is created lazily on
    the first request, so importing this module never touches the disk.
    """
    app = FastAPI(title="Purchase Order Service", docs_url=None, redoc_url=None)
    app.state.service = service

    def get_service() -> OrderService:
        if app.state.service is None:
            app.state.service = _default_service()
        return app.state.service

    # ── Error translation ────────────────────────────────────────────────────

    @app.exception_handler(OrderError)
    async def order_error_handler(request: Request, exc: OrderError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": exc.message},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        messages = [e.get("msg", "") for e in exc.errors()]
        return JSONResponse(
            status_code=400,
            content={"success": False, "message": "; ".join(messages) or "Invalid request"},
        )

    # ── Routes ───────────────────────────────────────────────────────────────

    @app.get("/api/health")
    def health():
        store = get_service().store
        return {
            "status":   "ok",
            "dbPath":   str(store.db_path),
            "dbExists": store.exists(),
        }

    @app.post("/purchase-orders", status_code=201)
    def create_order(payload: Optional[dict] = Body(default=None)):
        order = get_service().create(payload or {})
        return {
            "success": True,
            "message": "Purchase order created successfully",
            "purchaseOrder": order.to_json_dict(),
        }

    @app.get("/purchase-orders")
    def list_orders():
        return {
            "success": True,
            "purchaseOrders": [o.to_json_dict() for o in get_service().list_all()],
        }

    # Declared before /{order_id} so "search" is never taken for an id
    @app.get("/purchase-orders/search")
    def search_orders(
        item_name: Optional[str] = Query(default=None, alias="itemName"),
        category: Optional[str] = Query(default=None),
        supplier: Optional[str] = Query(default=None),
        status: Optional[str] = Query(default=None),
    ):
        filters = SearchFilters(
            item_name=item_name, category=category, supplier=supplier, status=status,
        )
        return {
            "success": True,
            "purchaseOrders": [o.to_json_dict() for o in get_service().search(filters)],
        }

    @app.get("/purchase-orders/{order_id}")
    def get_order(order_id: str):
        order = get_service().get_by_id(order_id)
        return {"success": True, "purchaseOrder": order.to_json_dict()}

    @app.put("/purchase-orders/{order_id}")
    def update_order(order_id: str, payload: Optional[dict] = Body(default=None)):
        order = get_service().update(order_id, payload or {})
        return {
            "success": True,
            "message": "Purchase order updated successfully",
            "purchaseOrder": order.to_json_dict(),
        }

    @app.delete("/purchase-orders/{order_id}")
    def delete_order(order_id: str):
        get_service().delete(order_id)
        return {"success": True, "message": "Purchase order deleted"}

    return app


app = create_app()
