# Overview: Flask API routes for team management and logs; parses input and returns JSON responses.

# backend/velvessa/routes/admin.py
"""
Admin routes

Provides endpoints for:
- Team directory and approval status changes
- Audit trail and SMS log inspection

All endpoints require an Admin session. The role check lives here; the
session service itself does not repeat it.
"""

from flask import Blueprint, request, jsonify, g, current_app

from ..models import UserRole, UserStatus
from ..services import session_service
from ..services.session_service import UnknownUser
from ..decorators import require_auth, require_role

admin_bp = Blueprint("admin", __name__, url_prefix="/api/admin")


# =============================================================================
# USER MANAGEMENT
# =============================================================================

@admin_bp.get("/users")
@require_auth
@require_role(UserRole.ADMIN)
def list_users():
    """
    List team members.

    Query params:
    - status: Pending | Approved | Rejected
    """
    status = request.args.get("status")
    users = g.state.users
    if status:
        users = [u for u in users if u.status.value == status]
    return jsonify({"users": [u.to_public_dict() for u in users], "count": len(users)})


@admin_bp.post("/users/<user_id>/status")
@require_auth
@require_role(UserRole.ADMIN)
def update_user_status(user_id: str):
    """
    Approve, reject or reset a user to Pending.

    Body: {"status": "Approved" | "Rejected" | "Pending"}
    """
    data = request.get_json(silent=True) or {}
    try:
        status = UserStatus(data.get("status"))
    except ValueError:
        return jsonify({"error": "status must be Approved, Rejected, or Pending"}), 400

    try:
        user = session_service.update_user_status(g.state, user_id, status)
        return jsonify({"user": user.to_public_dict()}), 200
    except UnknownUser as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to update user status")
        return jsonify({"error": "Internal server error"}), 500


# =============================================================================
# LOGS
# =============================================================================

@admin_bp.get("/audit-logs")
@require_auth
@require_role(UserRole.ADMIN)
def list_audit_logs():
    """
    Query params:
    - user_id: only entries by this user
    - limit: max entries (default 100)
    """
    user_id = request.args.get("user_id")
    limit = request.args.get("limit", default=100, type=int)
    logs = g.state.audit_logs
    if user_id:
        logs = [log for log in logs if log.user_id == user_id]
    return jsonify({"logs": [log.to_dict() for log in logs[:max(limit, 0)]], "count": len(logs)})


@admin_bp.get("/sms-logs")
@require_auth
@require_role(UserRole.ADMIN)
def list_sms_logs():
    limit = request.args.get("limit", default=100, type=int)
    logs = g.state.sms_logs
    return jsonify({"logs": [log.to_dict() for log in logs[:max(limit, 0)]], "count": len(logs)})
