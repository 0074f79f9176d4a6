"""coach issues

Revision ID: 0002_coach_issues
Revises: 0001_initial
Create Date: 2026-10-19
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0002_coach_issues"
down_revision = "0001_initial"
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "coach_issues",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("journal_entry_id", sa.Integer(), sa.ForeignKey("journal_entries.id", ondelete="SET NULL")),
        sa.Column("theme", sa.String(length=255)),
        sa.Column("distortions", sa.Text(), nullable=False, server_default="[]"),
        sa.Column("severity", sa.Integer()),
        sa.Column("confidence", sa.Float()),
        sa.Column("span_text", sa.Text()),
        sa.Column("span_start", sa.Integer()),
        sa.Column("span_end", sa.Integer()),
        sa.Column("goal", sa.Text()),
        sa.Column("techniques", sa.Text(), nullable=False, server_default="[]"),
        sa.Column("tags", sa.Text(), nullable=False, server_default="[]"),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="open"),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_coach_issues_user_status", "coach_issues", ["user_id", "status"])


def downgrade():
    op.drop_index("ix_coach_issues_user_status", table_name="coach_issues")
    op.drop_table("coach_issues")
