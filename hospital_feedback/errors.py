from flask import jsonify, request
from werkzeug.exceptions import HTTPException


class FeedbackServiceError(Exception):
    """Base for errors that map onto a JSON ``{"success": false, "message": ...}`` response."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"success": False, "message": self.message}


class PoolUnavailable(FeedbackServiceError):
    status_code = 503
    default_message = "Database temporarily unavailable, please try again later"


class ValidationError(FeedbackServiceError):
    status_code = 400
    default_message = "Missing required fields"


class RateLimited(FeedbackServiceError):
    status_code = 429
    default_message = "Too many submissions, please try again later"


class AuthError(FeedbackServiceError):
    # Never say which check failed.
    status_code = 401
    default_message = "Authentication failed"


class StoreError(FeedbackServiceError):
    status_code = 500
    default_message = "Database error"


def register_error_handlers(app):
    @app.errorhandler(FeedbackServiceError)
    def handle_service_error(e):
        return jsonify(e.to_dict()), e.status_code

    # 429 Too Many Requests from Flask-Limiter, same JSON shape with Retry-After
    @app.errorhandler(429)
    def too_many_requests(e):
        err = RateLimited()
        payload = err.to_dict()
        headers = {}
        retry_after = getattr(e, "retry_after", None)
        if retry_after is not None:
            headers["Retry-After"] = str(int(retry_after))
            payload["retry_after"] = int(retry_after)
        app.logger.info(
            "submit_rate_limited",
            extra={"event": "submit_rate_limited", "path": request.path, "limit": str(getattr(e, "description", ""))},
        )
        return jsonify(payload), err.status_code, headers

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"success": False, "message": "Not Found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({"success": False, "message": "Method Not Allowed"}), 405

    @app.errorhandler(Exception)
    def unhandled(e):
        if isinstance(e, HTTPException):
            return jsonify({"success": False, "message": e.description}), e.code
        app.logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify({"success": False, "message": "Internal server error"}), 500
