import os
# Ensure the app factory picks the Testing config & SQLite memory DB
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("TEST_DATABASE_URL", "sqlite:///:memory:")

import pytest
from hospital_feedback import create_app
from hospital_feedback.extensions import db, limiter
from hospital_feedback.models import Feedback
from hospital_feedback.services.persistence import get_db_state

# Any non-loopback transport address; loopback callers are exempt from the submit limit
REMOTE = {"REMOTE_ADDR": "10.0.0.5"}


@pytest.fixture(scope="session")
def app():
    app = create_app()
    app.config.update(
        TESTING=True,
        DB_INIT_RETRY_DELAY=0.0,
    )
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture(autouse=True)
def _clean_state(app):
    # Clean BEFORE each test: empty tables, fresh limiter windows, store online
    with app.app_context():
        db.session.rollback()
        for tbl in reversed(db.metadata.sorted_tables):
            db.session.execute(tbl.delete())
        db.session.commit()
        limiter.reset()
    get_db_state(app).mark_online()
    yield
    with app.app_context():
        db.session.rollback()
        for tbl in reversed(db.metadata.sorted_tables):
            db.session.execute(tbl.delete())
        db.session.commit()


@pytest.fixture()
def offline(app):
    """Force the store offline for the duration of a test."""
    get_db_state(app).mark_offline("forced offline")
    yield
    get_db_state(app).mark_online()


@pytest.fixture()
def missing_table(app):
    """Store claims to be up but every query fails."""
    with app.app_context():
        db.session.remove()
        Feedback.__table__.drop(db.engine)
    yield
    with app.app_context():
        db.session.remove()
        Feedback.__table__.create(db.engine, checkfirst=True)


@pytest.fixture()
def admin_headers(app, client):
    resp = client.post("/api/admin/login", json={"password": app.config["ADMIN_PASSWORD"]})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.get_json()['token']}"}


def make_feedback(**overrides):
    data = {
        "type": "complaint",
        "department": "Cardiology",
        "target_role": "nurse",
        "target_name": "Li",
        "description": "Waited three hours",
        "submitter_name": "",
        "submitter_phone": "",
        "ip_address": "10.0.0.5",
    }
    data.update(overrides)
    return Feedback(**data)


def count_feedback(app) -> int:
    with app.app_context():
        return db.session.execute(db.select(db.func.count(Feedback.id))).scalar_one()
