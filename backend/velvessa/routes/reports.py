# Overview: Flask API routes for dashboard and business reports; returns JSON responses.

from flask import Blueprint, jsonify, g

from ..models import UserRole
from ..services import reporting_service
from ..decorators import require_auth, require_role


reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


@reports_bp.get("/dashboard")
@require_auth
def dashboard():
    """Headline counts, low-stock items and recent orders. Open to every role."""
    return jsonify(reporting_service.dashboard_stats(g.state)), 200


@reports_bp.get("/summary")
@require_auth
@require_role(UserRole.ADMIN)
def business_summary():
    return jsonify(reporting_service.business_summary(g.state)), 200
