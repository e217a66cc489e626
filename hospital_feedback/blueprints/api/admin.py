import hmac

from flask import jsonify, current_app
from sqlalchemy.exc import SQLAlchemyError

from hospital_feedback.errors import AuthError, StoreError
from hospital_feedback.extensions import db
from hospital_feedback.models import Feedback
from hospital_feedback.services import tokens
from hospital_feedback.services.policy import admin_required, requires_store
from . import bp, request_payload


def _password_matches(candidate) -> bool:
    expected = current_app.config.get("ADMIN_PASSWORD") or ""
    if not expected or not isinstance(candidate, str):
        return False
    return hmac.compare_digest(candidate.encode("utf-8"), expected.encode("utf-8"))


@bp.post("/admin/login")
def admin_login():
    """Exchange the shared admin password for a 24h signed token."""
    data = request_payload()
    if not _password_matches(data.get("password")):
        current_app.logger.info("admin_login_failed", extra={"event": "admin_login_failed"})
        raise AuthError("Wrong password")

    current_app.logger.info("admin_login", extra={"event": "admin_login"})
    return jsonify({"success": True, "token": tokens.issue_admin_token()}), 200


@bp.get("/admin/list")
@requires_store
@admin_required
def admin_list():
    """All feedback, newest first."""
    try:
        rows = db.session.execute(
            db.select(Feedback).order_by(Feedback.created_at.desc(), Feedback.id.desc())
        ).scalars().all()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.exception("GET /api/admin/list failed")
        raise StoreError(str(getattr(e, "orig", None) or e))
    return jsonify([fb.to_dict() for fb in rows]), 200


@bp.delete("/admin/delete/<int:feedback_id>")
@requires_store
@admin_required
def admin_delete(feedback_id: int):
    """Delete by id. Unknown ids are not an error."""
    try:
        result = db.session.execute(db.delete(Feedback).where(Feedback.id == feedback_id))
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.exception("DELETE /api/admin/delete/%s failed", feedback_id)
        raise StoreError(str(getattr(e, "orig", None) or e))

    current_app.logger.info(
        "feedback_deleted",
        extra={"event": "feedback_deleted", "feedback_id": feedback_id, "rows": result.rowcount},
    )
    return jsonify({"success": True, "message": "Deleted successfully"}), 200
