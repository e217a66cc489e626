from flask import jsonify, current_app
from sqlalchemy.exc import SQLAlchemyError

from hospital_feedback.errors import ValidationError, StoreError
from hospital_feedback.extensions import db, limiter, client_address, is_loopback_request
from hospital_feedback.models import Feedback, STATUS_PENDING
from hospital_feedback.services.policy import requires_store
from hospital_feedback.utils.validators import has_text, sanitize_text
from . import bp, request_payload

REQUIRED_FIELDS = ("type", "department", "description")


def _submit_limit() -> str:
    return current_app.config.get("SUBMIT_RATE_LIMIT", "10 per 10 minutes")


@bp.post("/submit")
@limiter.limit(_submit_limit, key_func=client_address, exempt_when=is_loopback_request)
@requires_store
def submit():
    """Anonymous feedback submission. Rate limit, then store check, then validation."""
    data = request_payload()

    if not all(has_text(data.get(f)) for f in REQUIRED_FIELDS):
        raise ValidationError()

    fb = Feedback(
        type=sanitize_text(data.get("type"), 50),
        department=sanitize_text(data.get("department"), 100),
        target_role=sanitize_text(data.get("targetRole"), 100),
        target_name=sanitize_text(data.get("targetName"), 100),
        description=sanitize_text(data.get("description")),
        submitter_name=sanitize_text(data.get("submitterName"), 100),
        submitter_phone=sanitize_text(data.get("submitterPhone"), 50),
        ip_address=client_address()[:50],
        status=STATUS_PENDING,
    )

    try:
        db.session.add(fb)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        reason = str(getattr(e, "orig", None) or e)
        current_app.logger.error("feedback_submit_failed: %s", reason, extra={"event": "feedback_submit_failed"})
        raise StoreError(f"Submission failed: {reason}")

    # No free text in logs
    current_app.logger.info(
        "feedback_submitted",
        extra={"event": "feedback_submitted", "feedback_id": fb.id, "type": fb.type, "department": fb.department},
    )
    return jsonify({"success": True, "message": "Submitted successfully", "id": fb.id}), 200
