"""
Purchase order records as stored in the JSON document and exchanged over HTTP.

Python attributes are snake_case; the on-disk and wire representation is
camelCase (``itemName``), matching the document format
``{"purchaseOrders": [{"id", "itemName", "category", "quantity", "supplier", "status"}]}``.
Models accept either spelling on input.
"""
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr
from pydantic.alias_generators import to_camel


OrderStatus = Literal["Pending", "Approved", "Rejected", "Delivered"]

STATUS_PENDING   = "Pending"
STATUS_APPROVED  = "Approved"
STATUS_REJECTED  = "Rejected"
STATUS_DELIVERED = "Delivered"
ALL_STATUSES     = (STATUS_PENDING, STATUS_APPROVED, STATUS_REJECTED, STATUS_DELIVERED)

# Fields a client must supply when creating an order
REQUIRED_CREATE_FIELDS = ("item_name", "category", "quantity", "supplier")


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> dict:
        """Serialise with camelCase keys, as written to disk and returned to clients."""
        return self.model_dump(mode="json", by_alias=True)


class PurchaseOrder(_CamelModel):
    """A single stored purchase order. Unknown keys are kept and written back."""
    model_config = ConfigDict(extra="allow")

    id: str
    item_name: str
    category: str
    quantity: int
    supplier: str
    status: str = STATUS_PENDING          # one of ALL_STATUSES once written by the service


class PurchaseOrderCreate(_CamelModel):
    """
    Body of a create request.

    Every field is optional at the type level so that a missing field is
    reported as the single "all fields are required" error rather than a
    per-field pydantic error. The service enforces presence.
    """
    item_name: Optional[str] = None
    category: Optional[str] = None
    quantity: Optional[int] = None
    supplier: Optional[str] = None

    def missing_fields(self) -> list[str]:
        """Names of required fields that are absent, empty, or zero."""
        return [name for name in REQUIRED_CREATE_FIELDS if not getattr(self, name)]


class PurchaseOrderUpdate(_CamelModel):
    """
    Partial update. Only fields the client actually sent are merged
    (see ``model_dump(exclude_unset=True)``); unknown keys are ignored.
    """
    id: Optional[str] = None
    item_name: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = Field(default=None, min_length=1)
    quantity: Optional[int] = Field(default=None, gt=0)
    supplier: Optional[str] = Field(default=None, min_length=1)
    status: Optional[OrderStatus] = None


class SearchFilters(_CamelModel):
    """Optional case-insensitive substring filters, combined with AND."""
    item_name: Optional[str] = None
    category: Optional[str] = None
    supplier: Optional[str] = None
    status: Optional[str] = None

    def active(self) -> dict[str, str]:
        """Filters that actually constrain the result (non-empty values only)."""
        return {
            name: value
            for name, value in self.model_dump(by_alias=False).items()
            if value
        }


class Database(_CamelModel):
    """
    The whole persisted document. Insertion order of orders is preserved.

    ``invalid_records`` holds raw entries that were on disk but failed
    validation; they are skipped by every read and written back on save.
    """
    model_config = ConfigDict(extra="allow")

    purchase_orders: List[PurchaseOrder] = Field(default_factory=list)
    _invalid_records: list = PrivateAttr(default_factory=list)

    @property
    def invalid_records(self) -> list:
        return self._invalid_records
