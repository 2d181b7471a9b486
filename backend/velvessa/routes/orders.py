# Overview: Flask API routes for orders; parses input and returns JSON responses.

# backend/velvessa/routes/orders.py
"""Order API routes with role enforcement"""

from flask import Blueprint, request, jsonify, g, current_app

from ..models import CustomerInput, DeliveryStatus, OrderItem, PaymentStatus, UserRole
from ..services import notification_service, order_service
from ..services.order_service import OrderError, OrderNotFound
from ..validation import ValidationError, coerce_cents, coerce_int
from ..decorators import require_auth, require_role


orders_bp = Blueprint("orders", __name__, url_prefix="/api/orders")

SALES_ROLES = (UserRole.ADMIN, UserRole.SALES)


def _parse_cart(raw_items) -> list[OrderItem]:
    """
    Cart lines from the client. unit_price_cents is the price captured when
    the line was added; lines without one take the current selling price.
    """
    if not isinstance(raw_items, list):
        raise ValidationError("items must be a list")

    prices = {s.id: s.selling_price_cents for s in g.state.stock}
    items = []
    for raw in raw_items:
        if not isinstance(raw, dict) or not raw.get("stock_item_id"):
            raise ValidationError("each item needs a stock_item_id")
        stock_item_id = str(raw["stock_item_id"])
        if raw.get("unit_price_cents") is not None:
            unit_price = coerce_cents("unit_price_cents", raw["unit_price_cents"])
        elif stock_item_id in prices:
            unit_price = prices[stock_item_id]
        else:
            raise OrderError("Stock item not found", details={"stock_item_id": stock_item_id})
        items.append(OrderItem(
            stock_item_id=stock_item_id,
            quantity=coerce_int("quantity", raw.get("quantity", 1)),
            unit_price_cents=unit_price,
        ))
    return items


@orders_bp.get("/")
@require_auth
@require_role(*SALES_ROLES)
def list_orders_route():
    """
    Query params:
    - customer_id: orders for one customer
    - payment_status: Paid | Partial | Due
    """
    payment_status = request.args.get("payment_status")
    try:
        status = PaymentStatus(payment_status) if payment_status else None
    except ValueError:
        return jsonify({"error": "payment_status must be Paid, Partial, or Due"}), 400

    orders = order_service.list_orders(
        g.state,
        customer_id=request.args.get("customer_id"),
        payment_status=status,
    )
    return jsonify({
        "orders": [order_service.order_to_dict(g.state, o) for o in orders],
        "count": len(orders),
    })


@orders_bp.post("/cart")
@require_auth
@require_role(*SALES_ROLES)
def add_to_cart_route():
    """
    Add units of a stock item to a client-held cart and return the new cart.

    Body: {"items": [...], "stock_item_id": "s1", "quantity": 1}
    """
    try:
        data = request.get_json(silent=True) or {}
        items = _parse_cart(data.get("items") or [])
        stock_item_id = data.get("stock_item_id")
        if not stock_item_id:
            return jsonify({"error": "stock_item_id required"}), 400

        cart = order_service.add_to_cart(
            g.state, items, str(stock_item_id), coerce_int("quantity", data.get("quantity", 1))
        )
        totals = order_service.compute_totals(cart, 0, 0)
        return jsonify({
            "items": [line.to_dict() for line in cart],
            "subtotal_cents": totals.subtotal_cents,
            "tax_cents": totals.tax_cents,
        }), 200

    except OrderError as e:
        return jsonify({"error": str(e), "details": e.details}), 400
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400


@orders_bp.post("/cart/remove")
@require_auth
@require_role(*SALES_ROLES)
def remove_from_cart_route():
    """Body: {"items": [...], "stock_item_id": "s1", "quantity": 1}"""
    try:
        data = request.get_json(silent=True) or {}
        items = _parse_cart(data.get("items") or [])
        cart = order_service.remove_from_cart(
            items, str(data.get("stock_item_id") or ""), coerce_int("quantity", data.get("quantity", 1))
        )
        totals = order_service.compute_totals(cart, 0, 0)
        return jsonify({
            "items": [line.to_dict() for line in cart],
            "subtotal_cents": totals.subtotal_cents,
            "tax_cents": totals.tax_cents,
        }), 200

    except OrderError as e:
        return jsonify({"error": str(e), "details": e.details}), 400
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400


@orders_bp.post("/")
@require_auth
@require_role(*SALES_ROLES)
def create_order_route():
    """
    Confirm a cart as an order.

    Body:
    - items: [{"stock_item_id", "quantity", "unit_price_cents"?}]
    - customer_id: an existing customer, or
    - customer: {"name", "phone", "address"?, "email"?} to register one
    - delivery_charge_cents, advance_paid_cents
    """
    try:
        data = request.get_json(silent=True) or {}
        items = _parse_cart(data.get("items") or [])

        customer = None
        raw_customer = data.get("customer")
        if isinstance(raw_customer, dict):
            customer = CustomerInput(
                name=str(raw_customer.get("name") or ""),
                phone=str(raw_customer.get("phone") or ""),
                address=str(raw_customer.get("address") or ""),
                email=raw_customer.get("email"),
            )

        order = order_service.create_order(
            g.state,
            items,
            customer=customer,
            delivery_charge_cents=data.get("delivery_charge_cents", 0),
            advance_paid_cents=data.get("advance_paid_cents", 0),
            customer_id=data.get("customer_id"),
        )
        return jsonify({"order": order_service.order_to_dict(g.state, order)}), 201

    except OrderError as e:
        return jsonify({"error": str(e), "details": e.details}), 400
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to create order")
        return jsonify({"error": "Internal server error"}), 500


@orders_bp.get("/<order_id>")
@require_auth
@require_role(*SALES_ROLES)
def get_order_route(order_id: str):
    try:
        order = order_service.get_order(g.state, order_id)
        return jsonify({"order": order_service.order_to_dict(g.state, order)}), 200
    except OrderNotFound as e:
        return jsonify({"error": str(e)}), 404


@orders_bp.post("/<order_id>/delivery-status")
@require_auth
@require_role(*SALES_ROLES)
def update_delivery_status_route(order_id: str):
    """Body: {"status": "Pending" | "Shipped" | "Delivered"}"""
    data = request.get_json(silent=True) or {}
    try:
        status = DeliveryStatus(data.get("status"))
    except ValueError:
        return jsonify({"error": "status must be Pending, Shipped, or Delivered"}), 400

    try:
        order = order_service.update_delivery_status(g.state, order_id, status)
        return jsonify({"order": order_service.order_to_dict(g.state, order)}), 200
    except OrderNotFound as e:
        return jsonify({"error": str(e)}), 404


@orders_bp.post("/<order_id>/notify")
@require_auth
@require_role(*SALES_ROLES)
def notify_order_route(order_id: str):
    """Text the customer the current delivery status."""
    try:
        order = order_service.get_order(g.state, order_id)
        entry = notification_service.send_status_notification(
            g.state, notification_service.gateway_from_config(), order
        )
        if entry is None:
            return jsonify({"sent": False, "message": "Customer has no phone number"}), 200
        return jsonify({"sent": True, "sms": entry.to_dict()}), 200

    except OrderNotFound as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to send order notification")
        return jsonify({"error": "Internal server error"}), 500
