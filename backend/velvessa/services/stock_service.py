# Overview: Service-layer operations for the stock catalog.

from __future__ import annotations

import dataclasses

from ..models import Category, StockItem, new_id
from ..validation import (
    CENTS,
    INTEGER,
    OPTIONAL_TEXT,
    TEXT,
    ModelValidationPolicy,
    validate_payload,
)
from velvessa.time_utils import today_iso
from .audit_service import add_log
from .state_service import DomainState


ALL_CATEGORIES = "All"
DEFAULT_LOW_STOCK_THRESHOLD = 5
DEFAULT_SIZE = "M"


class StockError(Exception):
    """Raised for stock operation errors."""
    pass


STOCK_POLICY = ModelValidationPolicy(
    field_types={
        "sku": TEXT,
        "name": TEXT,
        "category": Category,
        "size": TEXT,
        "color": OPTIONAL_TEXT,
        # Quantity is not floored; manual edits may record a deficit.
        "quantity": INTEGER,
        "purchase_price_cents": CENTS,
        "selling_price_cents": CENTS,
        "supplier": OPTIONAL_TEXT,
        "low_stock_threshold": INTEGER,
    },
    required_on_create=frozenset({"sku", "name", "quantity", "purchase_price_cents", "selling_price_cents"}),
)


def get_stock_item(state: DomainState, item_id: str) -> StockItem:
    item = next((s for s in state.stock if s.id == item_id), None)
    if item is None:
        raise StockError(f"Stock item {item_id} not found")
    return item


def add_stock_item(state: DomainState, data: dict) -> StockItem:
    fields = validate_payload(payload=data, policy=STOCK_POLICY, partial=False)
    item = StockItem(
        id=new_id("s"),
        sku=fields["sku"],
        name=fields["name"],
        category=fields.get("category", Category.DRESS),
        size=fields.get("size", DEFAULT_SIZE),
        color=fields.get("color"),
        quantity=fields["quantity"],
        purchase_price_cents=fields["purchase_price_cents"],
        selling_price_cents=fields["selling_price_cents"],
        supplier=fields.get("supplier"),
        date_added=today_iso(),
        low_stock_threshold=fields.get("low_stock_threshold", DEFAULT_LOW_STOCK_THRESHOLD),
    )
    state.replace("stock", lambda prev: [*prev, item])
    add_log(state, "Add Stock", f"Added new item: {item.name}")
    return item


def update_stock_item(state: DomainState, item_id: str, data: dict) -> StockItem:
    """Patch an item. Existing orders keep the prices they were sold at."""
    current = get_stock_item(state, item_id)
    fields = validate_payload(payload=data, policy=STOCK_POLICY, partial=True)
    updated = dataclasses.replace(current, **fields)
    state.replace("stock", lambda prev: [updated if s.id == item_id else s for s in prev])
    add_log(state, "Update Stock", f"Updated item: {updated.name}")
    return updated


def delete_stock_item(state: DomainState, item_id: str) -> StockItem:
    """Remove an item. Orders that reference it are left untouched."""
    item = get_stock_item(state, item_id)
    state.replace("stock", lambda prev: [s for s in prev if s.id != item_id])
    add_log(state, "Delete Stock", f"Deleted item: {item.name}")
    return item


def search_stock(state: DomainState, query: str | None = None, category: str | None = None) -> list[StockItem]:
    """Case-insensitive name/SKU match, optionally narrowed to one category."""
    needle = (query or "").strip().lower()
    wanted = category if category and category != ALL_CATEGORIES else None

    results = []
    for item in state.stock:
        if needle and needle not in item.name.lower() and needle not in item.sku.lower():
            continue
        if wanted and item.category.value != wanted:
            continue
        results.append(item)
    return results


def low_stock_items(state: DomainState) -> list[StockItem]:
    return [s for s in state.stock if s.is_low_stock]
