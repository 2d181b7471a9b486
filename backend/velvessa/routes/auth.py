# Overview: Flask API routes for session operations; parses input and returns JSON responses.

# backend/velvessa/routes/auth.py
"""
Session API routes

- Login/logout open and close the single console session.
- Registration is open and always produces a Pending account.
- Profile edits apply to the session user.
"""

from flask import Blueprint, request, jsonify, g, current_app

from ..services import session_service
from ..services.audit_service import logs_for_user
from ..services.session_service import AccessDenied, DuplicateIdentifier, InvalidCredentials
from ..services.state_service import current_state
from ..validation import ValidationError
from ..decorators import require_auth


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.post("/register")
def register_route():
    """Self-register a Pending account; an Admin must approve it before login."""
    try:
        data = request.get_json(silent=True) or {}
        user = session_service.register_user(current_state(), data)
        return jsonify({
            "user": user.to_public_dict(),
            "message": "Registration submitted. Wait for admin approval.",
        }), 201

    except DuplicateIdentifier as e:
        return jsonify({"error": str(e)}), 409
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to register user")
        return jsonify({"error": "Internal server error"}), 500


@auth_bp.post("/login")
def login_route():
    """
    Authenticate and open the session.

    Empty credentials fall back to the default admin pair.
    """
    try:
        data = request.get_json(silent=True) or {}
        identifier = data.get("email") or data.get("identifier")
        password = data.get("password")

        user = session_service.login(current_state(), identifier, password)
        return jsonify({"user": user.to_public_dict(), "message": "Login successful"}), 200

    except InvalidCredentials as e:
        return jsonify({"error": str(e)}), 401
    except AccessDenied as e:
        return jsonify({"error": str(e), "status": e.status.value}), 403
    except Exception:
        current_app.logger.exception("Failed to login user")
        return jsonify({"error": "Internal server error"}), 500


@auth_bp.post("/logout")
@require_auth
def logout_route():
    session_service.logout(g.state)
    return jsonify({"message": "Logout successful"}), 200


@auth_bp.get("/me")
@require_auth
def me_route():
    return jsonify({"user": g.current_user.to_public_dict()}), 200


@auth_bp.patch("/me")
@require_auth
def update_profile_route():
    try:
        data = request.get_json(silent=True) or {}
        user = session_service.update_profile(g.state, data)
        return jsonify({"user": user.to_public_dict()}), 200

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to update profile")
        return jsonify({"error": "Internal server error"}), 500


@auth_bp.get("/me/logs")
@require_auth
def my_logs_route():
    logs = logs_for_user(g.state, g.current_user.id)
    return jsonify({"logs": [log.to_dict() for log in logs], "count": len(logs)}), 200
