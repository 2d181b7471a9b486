# Overview: Flask API routes for collections and payment reminders; parses input and returns JSON responses.

# backend/velvessa/routes/payments.py
"""
Collections API

Outstanding balances and SMS reminders. No payment is recorded here:
balances only change through the advance captured at order creation.
"""

from flask import Blueprint, request, jsonify, g, current_app

from ..models import UserRole
from ..services import notification_service, order_service, reporting_service
from ..services.order_service import OrderNotFound
from ..decorators import require_auth, require_role


payments_bp = Blueprint("payments", __name__, url_prefix="/api/payments")

SALES_ROLES = (UserRole.ADMIN, UserRole.SALES)


@payments_bp.get("/dues")
@require_auth
@require_role(*SALES_ROLES)
def list_dues():
    """Query params: q - order id or customer name substring"""
    return jsonify(reporting_service.collections_summary(g.state, request.args.get("q")))


@payments_bp.post("/<order_id>/remind")
@require_auth
@require_role(*SALES_ROLES)
def remind_route(order_id: str):
    try:
        order = order_service.get_order(g.state, order_id)
        entry = notification_service.send_reminder_notification(
            g.state, notification_service.gateway_from_config(), order
        )
        if entry is None:
            return jsonify({"sent": False, "message": "Customer has no phone number"}), 200
        return jsonify({"sent": True, "sms": entry.to_dict()}), 200

    except OrderNotFound as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to send payment reminder")
        return jsonify({"error": "Internal server error"}), 500


@payments_bp.post("/remind-all")
@require_auth
@require_role(*SALES_ROLES)
def remind_all_route():
    """Send a reminder for every unpaid order, one at a time."""
    try:
        entries = notification_service.send_all_reminders(
            g.state, notification_service.gateway_from_config()
        )
        return jsonify({"sent": len(entries), "sms": [e.to_dict() for e in entries]}), 200
    except Exception:
        current_app.logger.exception("Failed to send payment reminders")
        return jsonify({"error": "Internal server error"}), 500
