import ipaddress

from flask import current_app, request
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

db = SQLAlchemy()
migrate = Migrate()

LOOPBACK_ADDRESSES = frozenset({"127.0.0.1", "::1"})


def _is_ip(value: str) -> bool:
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True


def client_address() -> str:
    """Effective client address: first X-Forwarded-For hop when trusted, else the peer."""
    if current_app.config.get("TRUST_FORWARDED_FOR", True):
        forwarded = (request.headers.get("X-Forwarded-For") or "").split(",")[0].strip()
        # Only a well-formed address is accepted; anything else falls back to the peer
        if forwarded and _is_ip(forwarded):
            return forwarded
    return get_remote_address()


def is_loopback_request() -> bool:
    # Judged on the transport address only; a forwarded header cannot buy an exemption.
    return (request.remote_addr or "") in LOOPBACK_ADDRESSES


# Storage is configured in create_app() via limiter.init_app(...).
limiter = Limiter(key_func=client_address)
