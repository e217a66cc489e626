from typing import Optional
from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired, BadPayload
from flask import current_app


def _serializer() -> URLSafeTimedSerializer:
    secret = current_app.config["JWT_SECRET"]
    salt = current_app.config.get("ADMIN_TOKEN_SALT", "admin-token-v1")
    return URLSafeTimedSerializer(secret_key=secret, salt=salt)


def issue_admin_token() -> str:
    """Signed, timestamped token carrying the {"admin": true} claim. Nothing is stored server-side."""
    return _serializer().dumps({"admin": True})


def verify_admin_token(token: Optional[str], max_age_seconds: Optional[int] = None) -> bool:
    """
    True only for a well-formed token with our signature, younger than max_age_seconds
    (defaults to ADMIN_TOKEN_TTL) and asserting admin. Every failure collapses to False.
    """
    if not token:
        return False
    if max_age_seconds is None:
        max_age_seconds = current_app.config.get("ADMIN_TOKEN_TTL", 24 * 60 * 60)
    try:
        data = _serializer().loads(token, max_age=max_age_seconds)
    except (BadSignature, SignatureExpired, BadPayload):
        return False
    return isinstance(data, dict) and data.get("admin") is True
