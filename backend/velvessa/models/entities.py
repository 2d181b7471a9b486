"""
Domain records held by the state container.

All records are immutable: updates produce a new instance via
dataclasses.replace(). Each record round-trips through to_dict()/from_dict()
so a collection can be stored as one JSON snapshot. Amounts are integer
minor units (cents).
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class UserRole(Enum):
    ADMIN = "Admin"
    SALES = "Sales"
    INVENTORY = "Inventory"


class UserStatus(Enum):
    APPROVED = "Approved"
    PENDING = "Pending"
    REJECTED = "Rejected"


class Category(Enum):
    DRESS = "Dress"
    TOP = "Top"
    BOTTOM = "Bottom"
    ACCESSORIES = "Accessories"


class PaymentStatus(Enum):
    PAID = "Paid"
    PARTIAL = "Partial"
    DUE = "Due"


class DeliveryStatus(Enum):
    PENDING = "Pending"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"


SMS_SENT = "sent"
SMS_FAILED = "failed"


def new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


@dataclass(frozen=True)
class User:
    """Team member. `email` is the login identifier (the seeded admin uses "admin")."""

    id: str
    name: str
    email: str
    role: UserRole
    status: UserStatus
    password: Optional[str] = None
    phone: Optional[str] = None
    profile_image: Optional[str] = None

    @property
    def is_approved(self) -> bool:
        return self.status is UserStatus.APPROVED

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "status": self.status.value,
            "password": self.password,
            "phone": self.phone,
            "profile_image": self.profile_image,
        }

    def to_public_dict(self) -> dict:
        data = self.to_dict()
        data.pop("password")
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            email=data.get("email", ""),
            role=UserRole(data["role"]),
            status=UserStatus(data["status"]),
            password=data.get("password"),
            phone=data.get("phone"),
            profile_image=data.get("profile_image"),
        )


@dataclass(frozen=True)
class StockItem:
    id: str
    sku: str
    name: str
    category: Category
    size: str
    quantity: int
    purchase_price_cents: int
    selling_price_cents: int
    date_added: str
    low_stock_threshold: int
    color: Optional[str] = None
    supplier: Optional[str] = None

    @property
    def is_low_stock(self) -> bool:
        return self.quantity <= self.low_stock_threshold

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "sku": self.sku,
            "name": self.name,
            "category": self.category.value,
            "size": self.size,
            "color": self.color,
            "quantity": self.quantity,
            "purchase_price_cents": self.purchase_price_cents,
            "selling_price_cents": self.selling_price_cents,
            "supplier": self.supplier,
            "date_added": self.date_added,
            "low_stock_threshold": self.low_stock_threshold,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "StockItem":
        return cls(
            id=data["id"],
            sku=data.get("sku", ""),
            name=data["name"],
            category=Category(data["category"]),
            size=data.get("size", ""),
            color=data.get("color"),
            quantity=int(data.get("quantity", 0)),
            purchase_price_cents=int(data.get("purchase_price_cents", 0)),
            selling_price_cents=int(data.get("selling_price_cents", 0)),
            supplier=data.get("supplier"),
            date_added=data.get("date_added", ""),
            low_stock_threshold=int(data.get("low_stock_threshold", 0)),
        )


@dataclass(frozen=True)
class Customer:
    id: str
    name: str
    phone: str
    address: str = ""
    email: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "phone": self.phone,
            "address": self.address,
            "email": self.email,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Customer":
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            phone=data.get("phone", ""),
            address=data.get("address", ""),
            email=data.get("email"),
        )


@dataclass(frozen=True)
class OrderItem:
    """Cart/order line. unit_price_cents is captured when the line is added."""

    stock_item_id: str
    quantity: int
    unit_price_cents: int

    @property
    def line_total_cents(self) -> int:
        return self.unit_price_cents * self.quantity

    def to_dict(self) -> dict:
        return {
            "stock_item_id": self.stock_item_id,
            "quantity": self.quantity,
            "unit_price_cents": self.unit_price_cents,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "OrderItem":
        return cls(
            stock_item_id=data["stock_item_id"],
            quantity=int(data["quantity"]),
            unit_price_cents=int(data["unit_price_cents"]),
        )


@dataclass(frozen=True)
class Order:
    """
    Invoice record. Monetary fields are computed once at creation and never
    recomputed from the live catalog.
    """

    id: str
    customer_id: str
    date: str
    items: tuple[OrderItem, ...]
    delivery_charge_cents: int
    subtotal_cents: int
    tax_cents: int
    total_amount_cents: int
    advance_paid_cents: int
    balance_due_cents: int
    payment_status: PaymentStatus
    delivery_status: DeliveryStatus

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "customer_id": self.customer_id,
            "date": self.date,
            "items": [item.to_dict() for item in self.items],
            "delivery_charge_cents": self.delivery_charge_cents,
            "subtotal_cents": self.subtotal_cents,
            "tax_cents": self.tax_cents,
            "total_amount_cents": self.total_amount_cents,
            "advance_paid_cents": self.advance_paid_cents,
            "balance_due_cents": self.balance_due_cents,
            "payment_status": self.payment_status.value,
            "delivery_status": self.delivery_status.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Order":
        return cls(
            id=data["id"],
            customer_id=data["customer_id"],
            date=data["date"],
            items=tuple(OrderItem.from_dict(i) for i in data.get("items", [])),
            delivery_charge_cents=int(data["delivery_charge_cents"]),
            subtotal_cents=int(data["subtotal_cents"]),
            tax_cents=int(data["tax_cents"]),
            total_amount_cents=int(data["total_amount_cents"]),
            advance_paid_cents=int(data["advance_paid_cents"]),
            balance_due_cents=int(data["balance_due_cents"]),
            payment_status=PaymentStatus(data["payment_status"]),
            delivery_status=DeliveryStatus(data["delivery_status"]),
        )


@dataclass(frozen=True)
class PaymentRecord:
    id: str
    order_id: str
    amount_cents: int
    date: str
    method: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "order_id": self.order_id,
            "amount_cents": self.amount_cents,
            "date": self.date,
            "method": self.method,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PaymentRecord":
        return cls(
            id=data["id"],
            order_id=data["order_id"],
            amount_cents=int(data["amount_cents"]),
            date=data["date"],
            method=data["method"],
        )


@dataclass(frozen=True)
class AuditLog:
    """Append-only action record. user_name is a snapshot taken at write time."""

    id: str
    user_id: str
    user_name: str
    action: str
    details: str
    timestamp: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "user_name": self.user_name,
            "action": self.action,
            "details": self.details,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AuditLog":
        return cls(**{k: data[k] for k in ("id", "user_id", "user_name", "action", "details", "timestamp")})


@dataclass(frozen=True)
class SMSLog:
    id: str
    recipient: str
    message: str
    timestamp: str
    status: str = SMS_SENT

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "recipient": self.recipient,
            "message": self.message,
            "timestamp": self.timestamp,
            "status": self.status,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SMSLog":
        return cls(
            id=data["id"],
            recipient=data["recipient"],
            message=data["message"],
            timestamp=data["timestamp"],
            status=data.get("status", SMS_SENT),
        )


@dataclass(frozen=True)
class CustomerInput:
    """Customer fields typed into the order form when no record is selected."""

    name: str
    phone: str
    address: str = ""
    email: Optional[str] = None
