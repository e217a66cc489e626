import click
from flask import current_app
from flask.cli import with_appcontext
from hospital_feedback.extensions import db
from hospital_feedback.models import Feedback, STATUSES
from hospital_feedback.services.persistence import init_db, get_db_state


@click.group()
def feedback():
    """Feedback store operations."""


@feedback.command("init-db")
@click.option("--retries", type=int, default=None, help="Attempts before giving up (default: DB_INIT_RETRIES)")
@click.option("--delay", type=float, default=None, help="Seconds between attempts (default: DB_INIT_RETRY_DELAY)")
@with_appcontext
def feedback_init_db(retries, delay):
    """Create the feedbacks table if missing and mark the store online."""
    app = current_app._get_current_object()
    if not init_db(app, retries=retries, delay=delay):
        raise click.ClickException(f"Database unreachable: {get_db_state(app).last_error}")
    click.echo("Database ready")


@feedback.command("count")
@with_appcontext
def feedback_count():
    n = db.session.execute(db.select(db.func.count(Feedback.id))).scalar_one()
    click.echo(str(n))


@feedback.command("list")
@click.option("--limit", type=int, default=20, show_default=True)
@with_appcontext
def feedback_list(limit):
    """Newest records first, one per line."""
    rows = db.session.execute(
        db.select(Feedback).order_by(Feedback.created_at.desc(), Feedback.id.desc()).limit(limit)
    ).scalars().all()
    for fb in rows:
        click.echo(f"{fb.id}\t{fb.status}\t{fb.type}\t{fb.department}\t{fb.created_at:%Y-%m-%d %H:%M}")


@feedback.command("set-status")
@click.option("--id", "feedback_id", type=int, required=True)
@click.option("--status", type=click.Choice(STATUSES), required=True)
@with_appcontext
def feedback_set_status(feedback_id, status):
    """Status is the only mutable field of a record."""
    fb = db.session.get(Feedback, feedback_id)
    if not fb:
        raise click.ClickException(f"Feedback id {feedback_id} not found")
    fb.status = status
    db.session.commit()
    click.echo(f"Feedback {feedback_id} -> {status}")


def register_cli(app):
    app.cli.add_command(feedback)
