"""content report queue

Revision ID: 8d2e4b6a1c3f
Revises: 5c1f0a9e2b7d
Create Date: 2026-10-17 15:40:02.905117

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "8d2e4b6a1c3f"
down_revision: Union[str, Sequence[str], None] = "5c1f0a9e2b7d"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_REPORT_TYPES = ("post", "comment", "user", "profile", "forum")
_REPORT_STATUSES = ("pending", "resolved", "dismissed")
_URGENCIES = ("low", "medium", "high")


def upgrade() -> None:
    """Create the report table."""
    op.create_table(
        "report",
        sa.Column("id", sa.Text(), nullable=False),
        sa.Column(
            "type",
            sa.Enum(*_REPORT_TYPES, name="reporttype", native_enum=False),
            nullable=False,
        ),
        sa.Column("target_id", sa.Text(), nullable=False),
        sa.Column("target_name", sa.Text(), nullable=False),
        sa.Column("reporter_id", sa.Text(), nullable=False),
        sa.Column("reporter_name", sa.Text(), nullable=False),
        sa.Column("reporter_email", sa.Text(), nullable=True),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column(
            "urgency",
            sa.Enum(*_URGENCIES, name="reporturgency", native_enum=False),
            nullable=False,
        ),
        sa.Column("target_author_id", sa.Text(), nullable=True),
        sa.Column("target_author_name", sa.Text(), nullable=True),
        sa.Column("forum_id", sa.Text(), nullable=True),
        sa.Column("forum_name", sa.Text(), nullable=True),
        sa.Column("post_id", sa.Text(), nullable=True),
        sa.Column("post_title", sa.Text(), nullable=True),
        sa.Column(
            "status",
            sa.Enum(*_REPORT_STATUSES, name="reportstatus", native_enum=False),
            nullable=False,
        ),
        sa.Column("resolution", sa.Text(), nullable=True),
        sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("resolved_by", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_report_type", "report", ["type"])
    op.create_index("ix_report_reporter_id", "report", ["reporter_id"])
    op.create_index("ix_report_status", "report", ["status"])


def downgrade() -> None:
    """Drop the report table."""
    op.drop_index("ix_report_status", table_name="report")
    op.drop_index("ix_report_reporter_id", table_name="report")
    op.drop_index("ix_report_type", table_name="report")
    op.drop_table("report")
