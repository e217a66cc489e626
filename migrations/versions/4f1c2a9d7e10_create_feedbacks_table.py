"""Create feedbacks table

Revision ID: 4f1c2a9d7e10
Revises:
Create Date: 2026-10-17 00:00:00.000000
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "4f1c2a9d7e10"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # The app creates the table itself at startup (init_db); adopt it when already there
    if sa.inspect(op.get_bind()).has_table("feedbacks"):
        return
    op.create_table(
        "feedbacks",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("type", sa.String(length=50), nullable=False),
        sa.Column("department", sa.String(length=100), nullable=False),
        sa.Column("target_role", sa.String(length=100), nullable=False),
        sa.Column("target_name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("submitter_name", sa.String(length=100), nullable=False),
        sa.Column("submitter_phone", sa.String(length=50), nullable=False),
        sa.Column("ip_address", sa.String(length=50), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_feedbacks_created_at", "feedbacks", ["created_at"], unique=False)


def downgrade():
    op.drop_index("ix_feedbacks_created_at", table_name="feedbacks")
    op.drop_table("feedbacks")
