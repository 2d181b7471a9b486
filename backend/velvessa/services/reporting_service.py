# Overview: Read-only aggregates for the dashboard, reports and collections views.

from __future__ import annotations

from ..models import PaymentStatus
from .order_service import order_to_dict
from .state_service import DomainState


DASHBOARD_LIST_SIZE = 5
RECENT_COLLECTIONS_SIZE = 5


def dashboard_stats(state: DomainState) -> dict:
    orders = state.orders
    low_stock = [s for s in state.stock if s.is_low_stock]
    return {
        "total_customers": len(state.customers),
        "stock_items": len(state.stock),
        "total_due_cents": sum(o.balance_due_cents for o in orders),
        "total_revenue_cents": sum(o.total_amount_cents for o in orders),
        "low_stock_count": len(low_stock),
        "low_stock": [s.to_dict() for s in low_stock[:DASHBOARD_LIST_SIZE]],
        "recent_orders": [order_to_dict(state, o) for o in orders[:DASHBOARD_LIST_SIZE]],
    }


def business_summary(state: DomainState) -> dict:
    """
    Lifetime revenue plus a valuation of what is on the shelf:
    - inventory value: purchase price x quantity
    - expected profit: (selling - purchase) x quantity
    """
    stock = state.stock
    return {
        "total_revenue_cents": sum(o.total_amount_cents for o in state.orders),
        "inventory_value_cents": sum(s.purchase_price_cents * s.quantity for s in stock),
        "expected_profit_cents": sum(
            (s.selling_price_cents - s.purchase_price_cents) * s.quantity for s in stock
        ),
        "unique_items": len(stock),
    }


def collections_summary(state: DomainState, query: str | None = None) -> dict:
    """Orders still carrying a balance, plus the latest advances collected."""
    orders = state.orders
    due = [o for o in orders if o.payment_status is not PaymentStatus.PAID]

    needle = (query or "").strip().lower()
    rows = [order_to_dict(state, o) for o in due]
    if needle:
        rows = [r for r in rows if needle in r["id"].lower() or needle in r["customer_name"].lower()]

    return {
        "due_orders": rows,
        "total_outstanding_cents": sum(o.balance_due_cents for o in due),
        "recent_collections": [
            order_to_dict(state, o) for o in orders if o.advance_paid_cents > 0
        ][:RECENT_COLLECTIONS_SIZE],
    }
