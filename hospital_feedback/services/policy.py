from functools import wraps
from flask import request, current_app
from hospital_feedback.errors import AuthError
from hospital_feedback.services import tokens
from hospital_feedback.services.persistence import require_db


def _bearer_token():
    header = request.headers.get("Authorization") or ""
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


def requires_store(fn):
    """503 before anything else when the store is offline."""
    @wraps(fn)
    def _wrap(*args, **kwargs):
        require_db()
        return fn(*args, **kwargs)
    return _wrap


def admin_required(fn):
    @wraps(fn)
    def _wrap(*args, **kwargs):
        if not tokens.verify_admin_token(_bearer_token()):
            current_app.logger.info(
                "admin_auth_rejected",
                extra={"event": "admin_auth_rejected", "path": request.path},
            )
            raise AuthError()
        return fn(*args, **kwargs)
    return _wrap
