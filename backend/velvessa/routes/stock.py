# Overview: Flask API routes for the stock catalog; parses input and returns JSON responses.

from flask import Blueprint, request, jsonify, g, current_app

from ..models import UserRole
from ..services import stock_service
from ..services.stock_service import StockError
from ..validation import ValidationError
from ..decorators import require_auth, require_role


stock_bp = Blueprint("stock", __name__, url_prefix="/api/stock")

STOCK_ROLES = (UserRole.ADMIN, UserRole.INVENTORY)


@stock_bp.get("/")
@require_auth
@require_role(*STOCK_ROLES)
def list_stock():
    """
    Query params:
    - q: name or SKU substring (case-insensitive)
    - category: Dress | Top | Bottom | Accessories | All
    - low_stock: "true" to return only items at or below their threshold
    """
    if request.args.get("low_stock", "false").lower() == "true":
        items = stock_service.low_stock_items(g.state)
    else:
        items = stock_service.search_stock(g.state, request.args.get("q"), request.args.get("category"))
    return jsonify({"items": [i.to_dict() for i in items], "count": len(items)})


@stock_bp.post("/")
@require_auth
@require_role(*STOCK_ROLES)
def create_stock_item():
    try:
        item = stock_service.add_stock_item(g.state, request.get_json(silent=True))
        return jsonify({"item": item.to_dict()}), 201
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to add stock item")
        return jsonify({"error": "Internal server error"}), 500


@stock_bp.get("/<item_id>")
@require_auth
@require_role(*STOCK_ROLES)
def get_stock_item(item_id: str):
    try:
        return jsonify({"item": stock_service.get_stock_item(g.state, item_id).to_dict()})
    except StockError as e:
        return jsonify({"error": str(e)}), 404


@stock_bp.put("/<item_id>")
@require_auth
@require_role(*STOCK_ROLES)
def update_stock_item(item_id: str):
    try:
        item = stock_service.update_stock_item(g.state, item_id, request.get_json(silent=True))
        return jsonify({"item": item.to_dict()})
    except StockError as e:
        return jsonify({"error": str(e)}), 404
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to update stock item")
        return jsonify({"error": "Internal server error"}), 500


@stock_bp.delete("/<item_id>")
@require_auth
@require_role(*STOCK_ROLES)
def delete_stock_item(item_id: str):
    try:
        item = stock_service.delete_stock_item(g.state, item_id)
        return jsonify({"deleted": item.to_dict()})
    except StockError as e:
        return jsonify({"error": str(e)}), 404
