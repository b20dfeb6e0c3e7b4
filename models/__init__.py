from .purchase_order import (
    PurchaseOrder, PurchaseOrderCreate, PurchaseOrderUpdate, SearchFilters, Database,
    OrderStatus, ALL_STATUSES, STATUS_PENDING, STATUS_APPROVED, STATUS_REJECTED, STATUS_DELIVERED,
)

__all__ = [
    "PurchaseOrder", "PurchaseOrderCreate", "PurchaseOrderUpdate", "SearchFilters", "Database",
    "OrderStatus", "ALL_STATUSES",
    "STATUS_PENDING", "STATUS_APPROVED", "STATUS_REJECTED", "STATUS_DELIVERED",
]
