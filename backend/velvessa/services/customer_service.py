# Overview: Service-layer operations for the customer directory.

from __future__ import annotations

import dataclasses

from ..models import Customer, new_id
from ..validation import OPTIONAL_TEXT, TEXT, ModelValidationPolicy, validate_payload
from .audit_service import add_log
from .state_service import DomainState


SUGGESTION_LIMIT = 5


class CustomerError(Exception):
    """Raised for customer operation errors."""
    pass


CUSTOMER_POLICY = ModelValidationPolicy(
    field_types={
        "name": TEXT,
        "phone": TEXT,
        "address": OPTIONAL_TEXT,
        "email": OPTIONAL_TEXT,
    },
    required_on_create=frozenset({"name", "phone"}),
)


def get_customer(state: DomainState, customer_id: str) -> Customer:
    customer = next((c for c in state.customers if c.id == customer_id), None)
    if customer is None:
        raise CustomerError(f"Customer {customer_id} not found")
    return customer


def add_customer(state: DomainState, data: dict) -> Customer:
    fields = validate_payload(payload=data, policy=CUSTOMER_POLICY, partial=False)
    customer = Customer(
        id=new_id("c"),
        name=fields["name"],
        phone=fields["phone"],
        address=fields.get("address") or "",
        email=fields.get("email"),
    )
    state.replace("customers", lambda prev: [*prev, customer])
    add_log(state, "Add Customer", f"Registered new customer: {customer.name}")
    return customer


def update_customer(state: DomainState, customer_id: str, data: dict) -> Customer:
    current = get_customer(state, customer_id)
    fields = validate_payload(payload=data, policy=CUSTOMER_POLICY, partial=True)
    if "address" in fields and fields["address"] is None:
        fields["address"] = ""
    updated = dataclasses.replace(current, **fields)
    state.replace("customers", lambda prev: [updated if c.id == customer_id else c for c in prev])
    add_log(state, "Update Customer", f"Updated details for: {updated.name}")
    return updated


def delete_customer(state: DomainState, customer_id: str) -> Customer:
    """Remove a customer. Their orders stay and display as "Unknown"."""
    customer = get_customer(state, customer_id)
    state.replace("customers", lambda prev: [c for c in prev if c.id != customer_id])
    add_log(state, "Delete Customer", f"Deleted record for: {customer.name}")
    return customer


def search_customers(state: DomainState, query: str | None = None, limit: int | None = None) -> list[Customer]:
    """Name (case-insensitive) or phone substring match."""
    needle = (query or "").strip()
    if not needle:
        matches = state.customers
    else:
        lowered = needle.lower()
        matches = [c for c in state.customers if lowered in c.name.lower() or needle in c.phone]
    return matches[:limit] if limit is not None else matches


def customer_suggestions(state: DomainState, query: str | None) -> list[Customer]:
    """Order-form lookahead; nothing until something is typed."""
    if not (query or "").strip():
        return []
    return search_customers(state, query, limit=SUGGESTION_LIMIT)


def customer_history(state: DomainState, customer_id: str) -> dict:
    customer = get_customer(state, customer_id)
    orders = [o for o in state.orders if o.customer_id == customer_id]
    return {
        "customer": customer.to_dict(),
        "orders": [o.to_dict() for o in orders],
        "total_billed_cents": sum(o.total_amount_cents for o in orders),
        "total_paid_cents": sum(o.advance_paid_cents for o in orders),
        "total_due_cents": sum(o.balance_due_cents for o in orders),
    }
