from flask import Blueprint, request

bp = Blueprint("api", __name__, url_prefix="/api")


def request_payload() -> dict:
    """JSON body for API clients, form fields for the no-JS fallback."""
    if request.is_json:
        data = request.get_json(silent=True)
        return data if isinstance(data, dict) else {}
    return request.form.to_dict()


from . import health  # noqa: E402,F401
from . import submit  # noqa: E402,F401
from . import admin  # noqa: E402,F401
