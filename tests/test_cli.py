from sqlalchemy.exc import OperationalError

from hospital_feedback.extensions import db
from hospital_feedback.models import Feedback
from hospital_feedback.services.persistence import get_db_state

from conftest import make_feedback


def _seed(app, n=1):
    with app.app_context():
        rows = [make_feedback(description=f"row {i}") for i in range(n)]
        db.session.add_all(rows)
        db.session.commit()
        return [r.id for r in rows]


def test_count_and_list(app):
    _seed(app, 3)
    runner = app.test_cli_runner()

    res = runner.invoke(args=["feedback", "count"])
    assert res.exit_code == 0
    assert res.output.strip() == "3"

    res = runner.invoke(args=["feedback", "list", "--limit", "2"])
    assert res.exit_code == 0
    assert len(res.output.strip().splitlines()) == 2


def test_set_status_updates_only_status(app):
    (fid,) = _seed(app)
    res = app.test_cli_runner().invoke(args=["feedback", "set-status", "--id", str(fid), "--status", "resolved"])
    assert res.exit_code == 0
    with app.app_context():
        fb = db.session.get(Feedback, fid)
        assert fb.status == "resolved"
        assert fb.description == "row 0"


def test_set_status_rejects_unknown_status_and_id(app):
    (fid,) = _seed(app)
    runner = app.test_cli_runner()
    assert runner.invoke(args=["feedback", "set-status", "--id", str(fid), "--status", "closed"]).exit_code != 0
    res = runner.invoke(args=["feedback", "set-status", "--id", "999999", "--status", "resolved"])
    assert res.exit_code != 0
    assert "not found" in res.output


def test_init_db_command_brings_store_online(app):
    get_db_state(app).mark_offline("down at boot")
    res = app.test_cli_runner().invoke(args=["feedback", "init-db", "--retries", "1"])
    assert res.exit_code == 0
    assert get_db_state(app).connected is True


def test_init_db_command_fails_when_unreachable(app, monkeypatch):
    def refused(*a, **kw):
        raise OperationalError("CREATE TABLE", {}, Exception("connection refused"))

    monkeypatch.setattr(db, "create_all", refused)
    res = app.test_cli_runner().invoke(args=["feedback", "init-db", "--retries", "2", "--delay", "0"])
    assert res.exit_code != 0
    assert "connection refused" in res.output
