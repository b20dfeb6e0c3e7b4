"""
Case-insensitive substring search over purchase orders.

Pure and stateless: the caller loads the records, this module only filters.
"""
from typing import Iterable, Mapping, Optional, Union

from models.purchase_order import PurchaseOrder, SearchFilters


def _matches(order: PurchaseOrder, needles: Mapping[str, str]) -> bool:
    for field, needle in needles.items():
        value = getattr(order, field, None)
        if value is None or needle not in str(value).casefold():
            return False
    return True


def search(
    records: Iterable[PurchaseOrder],
    filters: Optional[Union[SearchFilters, Mapping[str, Optional[str]]]] = None,
) -> list[PurchaseOrder]:
    """
    Return the records matching every provided filter, in their original order.

    *filters* may be a ``SearchFilters`` or a plain mapping keyed by either
    attribute name (``item_name``) or wire name (``itemName``). ``None`` and
    empty-string values impose no constraint, so an empty filter set returns
    every record.
    """
    if filters is None:
        filters = SearchFilters()
    elif not isinstance(filters, SearchFilters):
        filters = SearchFilters.model_validate(dict(filters))

    needles = {field: value.casefold() for field, value in filters.active().items()}
    if not needles:
        return list(records)
    return [order for order in records if _matches(order, needles)]
