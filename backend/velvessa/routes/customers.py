# Overview: Flask API routes for the customer directory; parses input and returns JSON responses.

from flask import Blueprint, request, jsonify, g, current_app

from ..models import UserRole
from ..services import customer_service
from ..services.customer_service import CustomerError
from ..validation import ValidationError
from ..decorators import require_auth, require_role


customers_bp = Blueprint("customers", __name__, url_prefix="/api/customers")

SALES_ROLES = (UserRole.ADMIN, UserRole.SALES)


@customers_bp.get("/")
@require_auth
@require_role(*SALES_ROLES)
def list_customers():
    """
    Query params:
    - q: name (case-insensitive) or phone substring
    - suggest: "true" for the order-form lookahead (max 5, empty without q)
    """
    query = request.args.get("q")
    if request.args.get("suggest", "false").lower() == "true":
        customers = customer_service.customer_suggestions(g.state, query)
    else:
        customers = customer_service.search_customers(g.state, query)
    return jsonify({"customers": [c.to_dict() for c in customers], "count": len(customers)})


@customers_bp.post("/")
@require_auth
@require_role(*SALES_ROLES)
def create_customer():
    try:
        customer = customer_service.add_customer(g.state, request.get_json(silent=True))
        return jsonify({"customer": customer.to_dict()}), 201
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to add customer")
        return jsonify({"error": "Internal server error"}), 500


@customers_bp.put("/<customer_id>")
@require_auth
@require_role(*SALES_ROLES)
def update_customer(customer_id: str):
    try:
        customer = customer_service.update_customer(g.state, customer_id, request.get_json(silent=True))
        return jsonify({"customer": customer.to_dict()})
    except CustomerError as e:
        return jsonify({"error": str(e)}), 404
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to update customer")
        return jsonify({"error": "Internal server error"}), 500


@customers_bp.delete("/<customer_id>")
@require_auth
@require_role(*SALES_ROLES)
def delete_customer(customer_id: str):
    try:
        customer = customer_service.delete_customer(g.state, customer_id)
        return jsonify({"deleted": customer.to_dict()})
    except CustomerError as e:
        return jsonify({"error": str(e)}), 404


@customers_bp.get("/<customer_id>/history")
@require_auth
@require_role(*SALES_ROLES)
def customer_history(customer_id: str):
    """Purchase history with billed/paid/due totals."""
    try:
        return jsonify(customer_service.customer_history(g.state, customer_id))
    except CustomerError as e:
        return jsonify({"error": str(e)}), 404
