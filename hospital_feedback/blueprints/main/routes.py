from flask import current_app

from hospital_feedback.extensions import limiter
from . import bp


@bp.get("/")
@limiter.exempt
def home():
    """Public submission form."""
    return current_app.send_static_file("index.html")


@bp.get("/admin")
@limiter.exempt
def admin_page():
    """Admin console; talks to /api/admin/* with a bearer token."""
    return current_app.send_static_file("admin.html")
