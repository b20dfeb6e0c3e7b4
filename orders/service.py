"""
Purchase order service: create, list, fetch, update, delete and search.

Composes the record store and the query engine. Every write runs inside
``RecordStore.transaction()`` so concurrent requests in this process cannot
lose each other's updates; reads load the document without taking the lock.

Write rules
-----------
  delete   removes only the order whose id matches and keeps every other
           order. A missing id is a failure (success=false, 404) and
           nothing is written.
  update   is validated: ``status`` must be one of the four known values,
           text fields must be non-empty, quantity must be positive, and an
           ``id`` in the patch that differs from the target id is rejected.
"""
import logging
from typing import Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from models.purchase_order import (
    Database,
    PurchaseOrder,
    PurchaseOrderCreate,
    PurchaseOrderUpdate,
    SearchFilters,
    STATUS_PENDING,
)
from orders import query
from orders.errors import NotFoundError, ValidationError
from orders.identifiers import IdGenerator, uuid4_generator
from orders.store import RecordStore

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = "All fields (itemName, category, quantity, supplier) are required"


def _describe(exc: PydanticValidationError) -> str:
    """Flatten a pydantic error into one human-readable line."""
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}" if loc else err.get("msg", ""))
    return "; ".join(parts) or "Invalid request"


def _find_index(db: Database, order_id: str) -> Optional[int]:
    for i, order in enumerate(db.purchase_orders):
        if order.id == order_id:
            return i
    return None


class OrderService:
    """The only component allowed to persist changes to the order collection."""

    def __init__(self, store: RecordStore, id_generator: IdGenerator = uuid4_generator) -> None:
        self.store = store
        self.id_generator = id_generator

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create(self, data: Union[PurchaseOrderCreate, Mapping]) -> PurchaseOrder:
        """
        Validate *data*, then append a new Pending order with a fresh id.

        Raises ValidationError (and writes nothing) when any of itemName,
        category, quantity or supplier is missing, empty or zero.
        """
        if not isinstance(data, PurchaseOrderCreate):
            try:
                data = PurchaseOrderCreate.model_validate(dict(data))
            except PydanticValidationError as exc:
                raise ValidationError(_describe(exc)) from exc

        if data.missing_fields():
            raise ValidationError(REQUIRED_FIELDS_MESSAGE)
        if data.quantity < 0:
            raise ValidationError("quantity must be a positive integer")

        with self.store.transaction() as db:
            order = PurchaseOrder(
                id=self.id_generator(),
                item_name=data.item_name,
                category=data.category,
                quantity=data.quantity,
                supplier=data.supplier,
                status=STATUS_PENDING,
            )
            db.purchase_orders.append(order)
            self.store.save(db)

        logger.info("Created purchase order %s (%s x%d)", order.id, order.item_name, order.quantity)
        return order

    def update(self, order_id: str, patch: Union[PurchaseOrderUpdate, Mapping]) -> PurchaseOrder:
        """
        Shallow-merge the fields supplied in *patch* over the stored order.

        Fields absent from the patch (or sent as null) keep their stored value.
        """
        if not isinstance(patch, PurchaseOrderUpdate):
            try:
                patch = PurchaseOrderUpdate.model_validate(dict(patch))
            except PydanticValidationError as exc:
                raise ValidationError(_describe(exc)) from exc

        changes = {k: v for k, v in patch.model_dump(exclude_unset=True).items() if v is not None}
        if changes.pop("id", order_id) != order_id:
            raise ValidationError("id cannot be changed")

        with self.store.transaction() as db:
            index = _find_index(db, order_id)
            if index is None:
                raise NotFoundError(order_id)
            updated = db.purchase_orders[index].model_copy(update=changes)
            db.purchase_orders[index] = updated
            self.store.save(db)

        logger.info("Updated purchase order %s: %s", order_id, ", ".join(sorted(changes)) or "no changes")
        return updated

    def delete(self, order_id: str) -> PurchaseOrder:
        """Remove the order with *order_id* and return it. Writes only if something was removed."""
        with self.store.transaction() as db:
            index = _find_index(db, order_id)
            if index is None:
                raise NotFoundError(order_id)
            removed = db.purchase_orders[index]
            db.purchase_orders = [o for o in db.purchase_orders if o.id != order_id]
            self.store.save(db)

        logger.info("Deleted purchase order %s", order_id)
        return removed

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_all(self) -> list[PurchaseOrder]:
        return self.store.load().purchase_orders

    def get_by_id(self, order_id: str) -> PurchaseOrder:
        for order in self.store.load().purchase_orders:
            if order.id == order_id:
                return order
        raise NotFoundError(order_id)

    def search(self, filters: Union[SearchFilters, Mapping, None] = None) -> list[PurchaseOrder]:
        if filters is not None and not isinstance(filters, SearchFilters):
            try:
                filters = SearchFilters.model_validate(dict(filters))
            except PydanticValidationError as exc:
                raise ValidationError(_describe(exc)) from exc
        return query.search(self.store.load().purchase_orders, filters)
