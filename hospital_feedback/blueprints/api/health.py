from datetime import datetime, timezone

from flask import jsonify, current_app
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from hospital_feedback.extensions import db, limiter
from hospital_feedback.models import Feedback
from hospital_feedback.services.persistence import get_db_state
from . import bp


@bp.get("/health")
@limiter.exempt
def health():
    """Liveness: always 200, reports connectivity without touching the store."""
    return jsonify({
        "status": "OK",
        "database": get_db_state().as_label(),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }), 200


@bp.get("/test-db")
def db_check():
    """Row count when online; OFFLINE (503) when the pool is down, ERROR (500) when the query fails."""
    if not get_db_state().connected:
        return jsonify({
            "success": False,
            "message": "Database connection failed",
            "status": "OFFLINE",
        }), 503

    try:
        count = db.session.execute(db.select(func.count(Feedback.id))).scalar_one()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.exception("GET /api/test-db failed")
        return jsonify({
            "success": False,
            "message": str(getattr(e, "orig", None) or e),
            "status": "ERROR",
        }), 500

    return jsonify({
        "success": True,
        "message": "Database connection OK",
        "count": count,
        "database": db.engine.dialect.name,
        "status": "ONLINE",
    }), 200
