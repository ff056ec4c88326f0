"""
Health Check Endpoints

1. /health/live - Liveness probe (is the process alive?)
2. /health/ready - Readiness probe (can the database be reached?)
"""

import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict

from flask import Blueprint, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from models import db

logger = logging.getLogger(__name__)

health_production_bp = Blueprint('health_production', __name__, url_prefix='/health')

_startup_time = time.time()


def get_uptime_seconds() -> float:
    return time.time() - _startup_time


def check_database_health() -> Dict[str, Any]:
    """
    Check database connectivity with SELECT 1.

    Returns dict with:
    - healthy: bool
    - latency_ms: response time
    - error: error message if unhealthy
    """
    start = time.time()
    try:
        db.session.execute(text("SELECT 1")).fetchone()
        db.session.rollback()  # Don't leave open transaction
        return {
            "healthy": True,
            "latency_ms": round((time.time() - start) * 1000, 2),
            "type": db.engine.dialect.name
        }
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.warning(f"Database health check failed: {e}")
        return {
            "healthy": False,
            "latency_ms": round((time.time() - start) * 1000, 2),
            "error": str(e)[:100]
        }


@health_production_bp.route('/live')
def liveness():
    """Liveness probe - no external dependencies."""
    return jsonify({
        "status": "alive",
        "uptime_seconds": round(get_uptime_seconds(), 2)
    }), 200


@health_production_bp.route('/ready')
def readiness():
    """Readiness probe - 200 when the database answers, 503 otherwise."""
    db_health = check_database_health()
    is_ready = db_health.get("healthy", False)

    return jsonify({
        "status": "ready" if is_ready else "not_ready",
        "checks": {"database": db_health},
        "timestamp": datetime.now(timezone.utc).isoformat()
    }), 200 if is_ready else 503
