import pytest
from sqlalchemy.exc import OperationalError

from hospital_feedback.errors import PoolUnavailable
from hospital_feedback.extensions import db
from hospital_feedback.services.persistence import (
    DatabaseState, get_db_state, init_db, require_db, start_background_init,
)


def _refused(*args, **kwargs):
    raise OperationalError("CREATE TABLE feedbacks", {}, Exception("connection refused"))


def test_database_state_transitions():
    state = DatabaseState()
    assert state.connected is False
    assert state.as_label() == "DISCONNECTED"
    state.mark_online()
    assert state.connected is True and state.last_error is None
    assert state.as_label() == "CONNECTED"
    state.mark_offline("boom")
    assert state.connected is False and state.last_error == "boom"
    assert state.checked_at is not None


def test_require_db_raises_when_offline(app, offline):
    with app.app_context():
        with pytest.raises(PoolUnavailable):
            require_db()


def test_require_db_passes_when_online(app):
    with app.app_context():
        require_db()


def test_init_db_success_marks_online(app):
    get_db_state(app).mark_offline("stale")
    sleeps = []
    assert init_db(app, retries=5, delay=2.0, sleep=sleeps.append) is True
    assert get_db_state(app).connected is True
    assert sleeps == []


def test_init_db_exhaustion_leaves_offline(app, monkeypatch):
    monkeypatch.setattr(db, "create_all", _refused)
    sleeps = []
    assert init_db(app, retries=5, delay=2.0, sleep=sleeps.append) is False

    state = get_db_state(app)
    assert state.connected is False
    assert state.last_error == "connection refused"
    # fixed delay between attempts, none after the last one
    assert sleeps == [2.0] * 4


def test_init_db_recovers_mid_retry(app, monkeypatch):
    real_create_all = db.create_all
    calls = {"n": 0}

    def flaky(*args, **kwargs):
        calls["n"] += 1
        if calls["n"] < 3:
            _refused()
        return real_create_all(*args, **kwargs)

    monkeypatch.setattr(db, "create_all", flaky)
    sleeps = []
    assert init_db(app, retries=5, delay=0.5, sleep=sleeps.append) is True
    assert calls["n"] == 3
    assert sleeps == [0.5, 0.5]
    assert get_db_state(app).connected is True


def test_init_db_uses_configured_defaults(app, monkeypatch):
    monkeypatch.setattr(db, "create_all", _refused)
    monkeypatch.setitem(app.config, "DB_INIT_RETRIES", 2)
    monkeypatch.setitem(app.config, "DB_INIT_RETRY_DELAY", 0.25)
    sleeps = []
    assert init_db(app, sleep=sleeps.append) is False
    assert sleeps == [0.25]


def test_background_init_brings_store_online(app):
    get_db_state(app).mark_offline("starting")
    t = start_background_init(app)
    t.join(timeout=5)
    assert not t.is_alive()
    assert get_db_state(app).connected is True
