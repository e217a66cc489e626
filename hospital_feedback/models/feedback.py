from datetime import datetime, timezone

from hospital_feedback.extensions import db

STATUS_PENDING = "pending"
STATUS_PROCESSING = "processing"
STATUS_RESOLVED = "resolved"
STATUS_REJECTED = "rejected"
STATUSES = (STATUS_PENDING, STATUS_PROCESSING, STATUS_RESOLVED, STATUS_REJECTED)


def _utcnow():
    return datetime.now(timezone.utc)


class Feedback(db.Model):
    __tablename__ = "feedbacks"
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    type = db.Column(db.String(50), nullable=False)
    department = db.Column(db.String(100), nullable=False)
    target_role = db.Column(db.String(100), nullable=False, default="")
    target_name = db.Column(db.String(100), nullable=False, default="")
    description = db.Column(db.Text, nullable=False)
    submitter_name = db.Column(db.String(100), nullable=False, default="")
    submitter_phone = db.Column(db.String(50), nullable=False, default="")
    # Resolved server-side, never taken from the request body
    ip_address = db.Column(db.String(50), nullable=True)
    status = db.Column(db.String(20), nullable=False, default=STATUS_PENDING, server_default=STATUS_PENDING)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow, server_default=db.func.now(), nullable=False)

    __table_args__ = (
        db.Index("ix_feedbacks_created_at", "created_at"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type,
            "department": self.department,
            "target_role": self.target_role,
            "target_name": self.target_name,
            "description": self.description,
            "submitter_name": self.submitter_name,
            "submitter_phone": self.submitter_phone,
            "ip_address": self.ip_address,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
