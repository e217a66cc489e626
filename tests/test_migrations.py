from pathlib import Path

import pytest
import sqlalchemy as sa
from flask_migrate import upgrade

from hospital_feedback.extensions import db
from hospital_feedback.services.persistence import init_db

MIGRATIONS_DIR = str(Path(__file__).resolve().parents[1] / "migrations")
HEAD = "4f1c2a9d7e10"


@pytest.fixture()
def fresh_alembic(app):
    yield
    with app.app_context():
        db.session.remove()
        with db.engine.begin() as conn:
            conn.execute(sa.text("DROP TABLE IF EXISTS alembic_version"))


def _version(app):
    with app.app_context():
        with db.engine.connect() as conn:
            return conn.execute(sa.text("SELECT version_num FROM alembic_version")).scalar_one()


def test_upgrade_adopts_table_created_by_init_db(app, fresh_alembic):
    assert init_db(app, retries=1) is True
    with app.app_context():
        db.session.remove()
        upgrade(directory=MIGRATIONS_DIR)
    assert _version(app) == HEAD


def test_upgrade_creates_table_on_empty_database(app, missing_table, fresh_alembic):
    with app.app_context():
        upgrade(directory=MIGRATIONS_DIR)
        cols = {c["name"] for c in sa.inspect(db.engine).get_columns("feedbacks")}
    assert _version(app) == HEAD
    assert {"id", "type", "department", "description", "ip_address", "status", "created_at"} <= cols


def test_init_db_after_upgrade_is_a_no_op(app, missing_table, fresh_alembic):
    with app.app_context():
        upgrade(directory=MIGRATIONS_DIR)
    assert init_db(app, retries=1) is True
    assert _version(app) == HEAD
