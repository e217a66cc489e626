from __future__ import annotations

import threading
import time
from datetime import datetime, timezone
from typing import Callable, Optional

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from hospital_feedback.errors import PoolUnavailable
from hospital_feedback.extensions import db


def _utcnow():
    return datetime.now(timezone.utc)


class DatabaseState:
    """
    Connectivity of the backing store as seen by this process.

    Registered on the app as ``app.extensions["db_state"]`` and consulted by every
    store-touching handler before a connection is checked out.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.connected = False
        self.attempts = 0
        self.last_error: Optional[str] = None
        self.checked_at: Optional[datetime] = None

    def mark_online(self) -> None:
        with self._lock:
            self.connected = True
            self.last_error = None
            self.checked_at = _utcnow()

    def mark_offline(self, error: object = None) -> None:
        with self._lock:
            self.connected = False
            self.last_error = None if error is None else str(error)
            self.checked_at = _utcnow()

    def record_attempt(self) -> int:
        with self._lock:
            self.attempts += 1
            return self.attempts

    def as_label(self) -> str:
        return "CONNECTED" if self.connected else "DISCONNECTED"


def get_db_state(app=None) -> DatabaseState:
    app = app or current_app
    return app.extensions["db_state"]


def require_db() -> None:
    """Raise PoolUnavailable when the store is offline; no connection is touched."""
    if not get_db_state().connected:
        raise PoolUnavailable()


def init_db(
    app,
    retries: Optional[int] = None,
    delay: Optional[float] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> bool:
    """
    Create the schema (CREATE TABLE IF NOT EXISTS) with bounded, fixed-delay retries.
    Returns True when the store is online. On exhaustion the state is left offline
    and the app keeps serving.
    """
    retries = app.config.get("DB_INIT_RETRIES", 5) if retries is None else retries
    delay = app.config.get("DB_INIT_RETRY_DELAY", 2.0) if delay is None else delay
    state = get_db_state(app)

    for attempt in range(1, retries + 1):
        state.record_attempt()
        try:
            with app.app_context():
                db.create_all()
        except SQLAlchemyError as exc:
            reason = str(getattr(exc, "orig", None) or exc)
            state.mark_offline(reason)
            app.logger.warning(
                "Database init failed (attempt %s/%s): %s", attempt, retries, reason,
                extra={"event": "db_init_retry", "attempt": attempt, "retries": retries},
            )
            if attempt < retries:
                sleep(delay)
            continue
        state.mark_online()
        app.logger.info("Database connected", extra={"event": "db_connected", "attempt": attempt})
        return True

    app.logger.error(
        "Database unreachable after %s attempts; running in offline mode", retries,
        extra={"event": "db_init_failed", "retries": retries},
    )
    return False


def start_background_init(app) -> threading.Thread:
    """Run init_db off the startup path so the server answers health checks immediately."""
    t = threading.Thread(target=init_db, args=(app,), name="db-init", daemon=True)
    t.start()
    return t
