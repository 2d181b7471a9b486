# Overview: Default records materialized when a snapshot key has never been written.

from __future__ import annotations

from .models import (
    Category,
    Customer,
    DeliveryStatus,
    Order,
    OrderItem,
    PaymentStatus,
    StockItem,
    User,
    UserRole,
    UserStatus,
)


DEFAULT_ADMIN = User(
    id="admin-001",
    name="Velvessa Admin",
    email="admin",
    password="admin",
    role=UserRole.ADMIN,
    status=UserStatus.APPROVED,
    profile_image="https://images.unsplash.com/photo-1507003211169-0a1dd7228f2d?q=80&w=100&auto=format&fit=crop",
)


def default_users() -> list[User]:
    return [DEFAULT_ADMIN]


def default_stock() -> list[StockItem]:
    return [
        StockItem(
            id="s1",
            sku="VC-DRS-001",
            name="Silk Evening Gown",
            category=Category.DRESS,
            size="M",
            color="Midnight Blue",
            quantity=12,
            purchase_price_cents=15000,
            selling_price_cents=35000,
            supplier="Elite Silks Co",
            date_added="2024-01-15",
            low_stock_threshold=5,
        ),
        StockItem(
            id="s2",
            sku="VC-TOP-023",
            name="Cashmere Turtleneck",
            category=Category.TOP,
            size="S",
            color="Cream",
            quantity=3,
            purchase_price_cents=4500,
            selling_price_cents=12000,
            supplier="Nordic Knits",
            date_added="2024-02-01",
            low_stock_threshold=5,
        ),
    ]


def default_customers() -> list[Customer]:
    return [
        Customer(
            id="c1",
            name="Sarah Jenkins",
            phone="555-0102",
            address="123 Maple Ave, Springfield",
            email="sarah.j@example.com",
        ),
        Customer(
            id="c2",
            name="Michael Rossi",
            phone="555-0199",
            address="456 Oak Dr, Riverside",
            email="mrossi@work.com",
        ),
    ]


def default_orders() -> list[Order]:
    return [
        Order(
            id="ord-1001",
            customer_id="c1",
            date="2024-03-20",
            items=(OrderItem(stock_item_id="s1", quantity=1, unit_price_cents=35000),),
            delivery_charge_cents=1500,
            subtotal_cents=35000,
            tax_cents=2800,
            total_amount_cents=39300,
            advance_paid_cents=10000,
            balance_due_cents=29300,
            payment_status=PaymentStatus.PARTIAL,
            delivery_status=DeliveryStatus.DELIVERED,
        ),
    ]
