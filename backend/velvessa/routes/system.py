# backend/velvessa/routes/system.py
"""
System health endpoint.

Verifies the snapshot store is reachable and reports which collections
have been written to it.
"""

import time
from flask import Blueprint, current_app
from sqlalchemy.exc import SQLAlchemyError

from ..services.kv_store import KeyValueStore
from ..services.state_service import COLLECTIONS
from ..time_utils import to_utc_z, utcnow

system_bp = Blueprint("system", __name__)


def check_snapshot_store_health() -> dict:
    """
    Check database connectivity through the key-value table.

    A store with no snapshots yet is "degraded": the console still runs on
    seeded defaults until `flask system init` is run.
    """
    start_time = time.time()
    try:
        stored = set(KeyValueStore().keys())
        elapsed_ms = (time.time() - start_time) * 1000

        expected = {spec.key for spec in COLLECTIONS.values()}
        missing = sorted(expected - stored)
        return {
            "status": "degraded" if missing else "healthy",
            "latency_ms": round(elapsed_ms, 2),
            "details": {
                "stored_keys": sorted(stored & expected),
                "missing_keys": missing,
            }
        }
    except SQLAlchemyError:
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Snapshot store health check failed")
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Database error"
        }


@system_bp.get("/health")
def health():
    """
    Returns:
    - 200: store reachable (healthy or degraded)
    - 503: store unreachable
    """
    store_health = check_snapshot_store_health()
    http_status = 503 if store_health["status"] == "unhealthy" else 200

    response = {
        "status": store_health["status"],
        "timestamp": to_utc_z(utcnow()),
        "store_name": current_app.config["STORE_NAME"],
        "checks": {
            "snapshot_store": store_health,
        }
    }
    return response, http_status
