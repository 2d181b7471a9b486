# Overview: Service-layer operations for carts and orders; the order transaction workflow.

"""
Order Transaction Workflow

WHY: Creating an order touches three collections at once (customers, stock,
orders) plus the audit log. They are written as one unit of work through
DomainState.transaction(): either every change lands or none does.

PRICING RULES:
- Amounts are integer minor units.
- subtotal = sum(unit_price x quantity); unit prices are frozen when the line
  is added to the cart.
- tax = 8% of subtotal, rounded half-up to the nearest minor unit.
- total = subtotal + tax + delivery charge.
- balance = total - advance (negative when overpaid; never clamped).
- payment status: Paid if balance <= 0, Partial if advance > 0, else Due.

KNOWN GAPS:
- No customer dedup: a typed customer is always created anew.
- No stock floor at confirmation time: quantities may go negative.
"""

from __future__ import annotations

import dataclasses
import re
from dataclasses import dataclass

from ..models import (
    Customer,
    CustomerInput,
    DeliveryStatus,
    Order,
    OrderItem,
    PaymentStatus,
    new_id,
)
from ..validation import ValidationError, coerce_cents, require_text
from velvessa.time_utils import today_iso
from .audit_service import add_log
from .state_service import DomainState


TAX_RATE_BPS = 800  # Basis points (800 = 8%)
ORDER_ID_PREFIX = "ORD-"
FIRST_ORDER_NUMBER = 1001
UNKNOWN_CUSTOMER = "Unknown"

_ORDER_NUMBER_RE = re.compile(r"^ord-(\d+)$", re.IGNORECASE)


class OrderError(Exception):
    """Raised for order operation errors."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


class OrderNotFound(OrderError):
    def __init__(self, order_id: str):
        super().__init__(f"Order {order_id} not found")
        self.order_id = order_id


@dataclass(frozen=True)
class OrderTotals:
    subtotal_cents: int
    tax_cents: int
    total_amount_cents: int
    balance_due_cents: int
    payment_status: PaymentStatus


# =============================================================================
# PRICING
# =============================================================================

def compute_tax_cents(subtotal_cents: int) -> int:
    """8% of subtotal, half-up."""
    return (subtotal_cents * TAX_RATE_BPS + 5000) // 10000


def derive_payment_status(balance_due_cents: int, advance_paid_cents: int) -> PaymentStatus:
    if balance_due_cents <= 0:
        return PaymentStatus.PAID
    if advance_paid_cents > 0:
        return PaymentStatus.PARTIAL
    return PaymentStatus.DUE


def compute_totals(items: list[OrderItem], delivery_charge_cents: int, advance_paid_cents: int) -> OrderTotals:
    subtotal = sum(item.line_total_cents for item in items)
    tax = compute_tax_cents(subtotal)
    total = subtotal + tax + delivery_charge_cents
    balance = total - advance_paid_cents
    return OrderTotals(
        subtotal_cents=subtotal,
        tax_cents=tax,
        total_amount_cents=total,
        balance_due_cents=balance,
        payment_status=derive_payment_status(balance, advance_paid_cents),
    )


# =============================================================================
# CART
# =============================================================================

def add_to_cart(state: DomainState, items: list[OrderItem], stock_item_id: str, quantity: int = 1) -> list[OrderItem]:
    """
    Return a new cart with `quantity` more units of a stock item.

    The unit price is the item's selling price right now; an existing line
    keeps the price it was first added at. Refuses out-of-stock items and
    quantities beyond what is on hand.
    """
    if quantity <= 0:
        raise ValidationError("quantity must be > 0")

    item = next((s for s in state.stock if s.id == stock_item_id), None)
    if item is None:
        raise OrderError("Stock item not found", details={"stock_item_id": stock_item_id})
    if item.quantity <= 0:
        raise OrderError("Stock item is out of stock", details={"stock_item_id": stock_item_id})

    in_cart = sum(line.quantity for line in items if line.stock_item_id == stock_item_id)
    if in_cart + quantity > item.quantity:
        raise OrderError(
            "Cart quantity exceeds available stock",
            details={
                "stock_item_id": stock_item_id,
                "requested_quantity": in_cart + quantity,
                "on_hand": item.quantity,
            },
        )

    if in_cart:
        return [
            dataclasses.replace(line, quantity=line.quantity + quantity)
            if line.stock_item_id == stock_item_id else line
            for line in items
        ]
    return [*items, OrderItem(stock_item_id=stock_item_id, quantity=quantity, unit_price_cents=item.selling_price_cents)]


def remove_from_cart(items: list[OrderItem], stock_item_id: str, quantity: int = 1) -> list[OrderItem]:
    """Decrease a line by `quantity`, dropping it when it reaches zero."""
    result = []
    for line in items:
        if line.stock_item_id != stock_item_id:
            result.append(line)
        elif line.quantity > quantity:
            result.append(dataclasses.replace(line, quantity=line.quantity - quantity))
    return result


# =============================================================================
# ORDERS
# =============================================================================

def next_order_id(orders: list[Order]) -> str:
    """Sequential ORD-<n>, one above the highest numbered order on file."""
    highest = FIRST_ORDER_NUMBER - 1
    for order in orders:
        match = _ORDER_NUMBER_RE.match(order.id)
        if match:
            highest = max(highest, int(match.group(1)))
    return f"{ORDER_ID_PREFIX}{highest + 1}"


def _resolve_customer(state: DomainState, customer: CustomerInput | None, customer_id: str | None) -> Customer:
    if customer_id:
        existing = next((c for c in state.customers if c.id == customer_id), None)
        if existing is None:
            raise OrderError("Customer not found", details={"customer_id": customer_id})
        require_text("customer name", existing.name)
        require_text("customer phone", existing.phone)
        return existing

    if customer is None:
        raise ValidationError("customer is required")

    created = Customer(
        id=new_id("c"),
        name=require_text("customer name", customer.name),
        phone=require_text("customer phone", customer.phone),
        address=(customer.address or "").strip(),
        email=customer.email,
    )
    state.replace("customers", lambda prev: [*prev, created])
    add_log(state, "Customer Auto-Register", f"Registered {created.name} during order flow.")
    return created


def create_order(
    state: DomainState,
    items: list[OrderItem],
    customer: CustomerInput | None = None,
    delivery_charge_cents: int = 0,
    advance_paid_cents: int = 0,
    customer_id: str | None = None,
) -> Order:
    """
    Confirm a cart as an order.

    Resolves (or implicitly creates) the customer, freezes the totals,
    decrements stock for every line and records the order, all in one
    transaction.

    Raises:
        ValidationError: empty cart, missing customer name/phone, bad amounts
        OrderError: cart references an unknown stock item or customer
    """
    if not items:
        raise ValidationError("Cannot create an order with an empty cart")
    delivery_charge_cents = coerce_cents("delivery_charge_cents", delivery_charge_cents)
    advance_paid_cents = coerce_cents("advance_paid_cents", advance_paid_cents)
    for line in items:
        if line.quantity <= 0:
            raise ValidationError("Cart quantities must be > 0")

    ordered: dict[str, int] = {}
    for line in items:
        ordered[line.stock_item_id] = ordered.get(line.stock_item_id, 0) + line.quantity

    known_ids = {s.id for s in state.stock}
    missing = sorted(set(ordered) - known_ids)
    if missing:
        raise OrderError("Stock item not found", details={"stock_item_ids": missing})

    with state.transaction():
        resolved = _resolve_customer(state, customer, customer_id)
        totals = compute_totals(items, delivery_charge_cents, advance_paid_cents)

        order = Order(
            id=next_order_id(state.orders),
            customer_id=resolved.id,
            date=today_iso(),
            items=tuple(items),
            delivery_charge_cents=delivery_charge_cents,
            subtotal_cents=totals.subtotal_cents,
            tax_cents=totals.tax_cents,
            total_amount_cents=totals.total_amount_cents,
            advance_paid_cents=advance_paid_cents,
            balance_due_cents=totals.balance_due_cents,
            payment_status=totals.payment_status,
            delivery_status=DeliveryStatus.PENDING,
        )

        state.replace(
            "stock",
            lambda prev: [
                dataclasses.replace(s, quantity=s.quantity - ordered[s.id]) if s.id in ordered else s
                for s in prev
            ],
        )
        state.replace("orders", lambda prev: [order, *prev])
        add_log(state, "Order Creation", f"Created Order #{order.id} for {resolved.name}")

    return order


def get_order(state: DomainState, order_id: str) -> Order:
    order = next((o for o in state.orders if o.id == order_id), None)
    if order is None:
        raise OrderNotFound(order_id)
    return order


def list_orders(
    state: DomainState,
    *,
    customer_id: str | None = None,
    payment_status: PaymentStatus | None = None,
) -> list[Order]:
    orders = state.orders
    if customer_id:
        orders = [o for o in orders if o.customer_id == customer_id]
    if payment_status:
        orders = [o for o in orders if o.payment_status is payment_status]
    return orders


def customer_name_for(state: DomainState, order: Order) -> str:
    customer = next((c for c in state.customers if c.id == order.customer_id), None)
    return customer.name if customer else UNKNOWN_CUSTOMER


def update_delivery_status(state: DomainState, order_id: str, status: DeliveryStatus) -> Order:
    """Manual progression; any status may follow any other."""
    order = get_order(state, order_id)
    updated = dataclasses.replace(order, delivery_status=status)
    state.replace("orders", lambda prev: [updated if o.id == order_id else o for o in prev])
    add_log(state, "Update Delivery", f"Order #{order_id} marked {status.value}")
    return updated


def order_to_dict(state: DomainState, order: Order) -> dict:
    data = order.to_dict()
    data["customer_name"] = customer_name_for(state, order)
    return data
