"""
Stock catalog and customer directory tests.
"""

import pytest

from velvessa.models import Category, OrderItem
from velvessa.services import customer_service, order_service, stock_service
from velvessa.services.customer_service import CustomerError
from velvessa.services.stock_service import StockError
from velvessa.validation import ValidationError


SCARF = {
    "sku": "VC-ACC-007",
    "name": "Silk Scarf",
    "category": "Accessories",
    "quantity": 4,
    "purchase_price_cents": 1200,
    "selling_price_cents": 3000,
}


class TestStockCatalog:

    def test_add_item_with_defaults(self, admin_state):
        item = stock_service.add_stock_item(admin_state, SCARF)

        assert item.category is Category.ACCESSORIES
        assert item.size == "M"
        assert item.low_stock_threshold == 5
        assert item.date_added
        assert admin_state.stock[-1] == item

        log = admin_state.audit_logs[0]
        assert log.action == "Add Stock"
        assert log.details == "Added new item: Silk Scarf"

    def test_required_fields(self, admin_state):
        with pytest.raises(ValidationError, match="Missing required fields"):
            stock_service.add_stock_item(admin_state, {"name": "No SKU"})

    @pytest.mark.parametrize("patch", [
        {"selling_price_cents": -1},
        {"quantity": "3.5"},
        {"category": "Shoes"},
        {"barcode": "123"},
    ])
    def test_invalid_fields(self, admin_state, patch):
        with pytest.raises(ValidationError):
            stock_service.add_stock_item(admin_state, {**SCARF, **patch})

    def test_update_keeps_order_prices(self, admin_state):
        stock_service.update_stock_item(admin_state, "s1", {"selling_price_cents": 40000})

        assert stock_service.get_stock_item(admin_state, "s1").selling_price_cents == 40000
        assert admin_state.orders[0].items[0].unit_price_cents == 35000
        assert admin_state.audit_logs[0].action == "Update Stock"

    def test_manual_quantity_may_be_negative(self, admin_state):
        item = stock_service.update_stock_item(admin_state, "s2", {"quantity": -1})
        assert item.quantity == -1

    def test_delete_leaves_orders(self, admin_state):
        stock_service.delete_stock_item(admin_state, "s1")

        assert [s.id for s in admin_state.stock] == ["s2"]
        assert admin_state.orders[0].items[0].stock_item_id == "s1"
        assert admin_state.audit_logs[0].action == "Delete Stock"

    def test_unknown_item(self, admin_state):
        with pytest.raises(StockError):
            stock_service.update_stock_item(admin_state, "s404", {"quantity": 1})
        with pytest.raises(StockError):
            stock_service.delete_stock_item(admin_state, "s404")

    def test_search(self, state):
        assert [s.id for s in stock_service.search_stock(state, "silk")] == ["s1"]
        assert [s.id for s in stock_service.search_stock(state, "top-023")] == ["s2"]
        assert [s.id for s in stock_service.search_stock(state, category="Top")] == ["s2"]
        assert len(stock_service.search_stock(state, category="All")) == 2
        assert stock_service.search_stock(state, "gown", "Top") == []

    def test_low_stock_threshold_inclusive(self, state):
        assert [s.id for s in stock_service.low_stock_items(state)] == ["s2"]

        stock_service.update_stock_item(state, "s1", {"quantity": 5})
        assert [s.id for s in stock_service.low_stock_items(state)] == ["s1", "s2"]


class TestCustomerDirectory:

    def test_add_customer(self, admin_state):
        customer = customer_service.add_customer(admin_state, {"name": "Lena Park", "phone": "555-0303"})

        assert customer.address == ""
        assert admin_state.customers[-1] == customer
        assert admin_state.audit_logs[0].details == "Registered new customer: Lena Park"

    def test_name_and_phone_required(self, admin_state):
        with pytest.raises(ValidationError):
            customer_service.add_customer(admin_state, {"name": "Lena Park"})
        with pytest.raises(ValidationError):
            customer_service.add_customer(admin_state, {"name": " ", "phone": "555-0303"})

    def test_update_and_delete(self, admin_state):
        updated = customer_service.update_customer(admin_state, "c2", {"address": "1 New Rd"})
        assert updated.address == "1 New Rd"
        assert admin_state.audit_logs[0].details == "Updated details for: Michael Rossi"

        customer_service.delete_customer(admin_state, "c2")
        assert [c.id for c in admin_state.customers] == ["c1"]
        assert admin_state.audit_logs[0].details == "Deleted record for: Michael Rossi"

    def test_unknown_customer(self, admin_state):
        with pytest.raises(CustomerError):
            customer_service.update_customer(admin_state, "c404", {"name": "X"})

    def test_search_by_name_or_phone(self, state):
        assert [c.id for c in customer_service.search_customers(state, "SARAH")] == ["c1"]
        assert [c.id for c in customer_service.search_customers(state, "0199")] == ["c2"]
        assert len(customer_service.search_customers(state, "")) == 2

    def test_suggestions(self, state):
        assert customer_service.customer_suggestions(state, "") == []
        assert [c.id for c in customer_service.customer_suggestions(state, "555")] == ["c1", "c2"]

        for n in range(6):
            customer_service.add_customer(state, {"name": f"Guest {n}", "phone": f"555-10{n}"})
        assert len(customer_service.customer_suggestions(state, "555")) == 5

    def test_history(self, admin_state):
        order_service.create_order(admin_state, [
            OrderItem(stock_item_id="s2", quantity=1, unit_price_cents=12000),
        ], customer_id="c1")

        history = customer_service.customer_history(admin_state, "c1")

        assert [o["id"] for o in history["orders"]] == ["ORD-1002", "ord-1001"]
        assert history["total_billed_cents"] == 39300 + 12960
        assert history["total_paid_cents"] == 10000
        assert history["total_due_cents"] == 29300 + 12960
