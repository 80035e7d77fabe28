"""Initial schema — environmental_report table.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "environmental_report",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(500), nullable=False),
        sa.Column("country", sa.String(100), nullable=False, server_default=""),
        sa.Column("sector", sa.String(100), nullable=False, server_default=""),
        sa.Column("url", sa.String(2000), nullable=True),
        sa.Column("reference_tags", sa.Text, nullable=False, server_default=""),
        sa.Column("human_scanned", sa.Integer, nullable=False, server_default="0"),
        sa.Column("acceptance_status", sa.Integer, nullable=False, server_default="0"),
        sa.Column("confidence", sa.Float, nullable=True, server_default="0"),
        sa.Column("comment", sa.Text, nullable=True),
        sa.Column("method_of_access", sa.String(255), nullable=True),
        sa.Column("data_format", sa.String(255), nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("granularity", sa.String(255), nullable=True),
        sa.Column("country_locode", sa.String(10), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("acceptance_status IN (0, 1, 2)", name="ck_environmental_report_acceptance_status"),
        sa.CheckConstraint("human_scanned IN (0, 1)", name="ck_environmental_report_human_scanned"),
    )
    op.create_index("ix_environmental_report_country", "environmental_report", ["country"])
    op.create_index("ix_environmental_report_sector", "environmental_report", ["sector"])
    op.create_index("ix_environmental_report_human_scanned", "environmental_report", ["human_scanned"])
    op.create_index("ix_environmental_report_acceptance_status", "environmental_report", ["acceptance_status"])


def downgrade() -> None:
    op.drop_index("ix_environmental_report_acceptance_status", table_name="environmental_report")
    op.drop_index("ix_environmental_report_human_scanned", table_name="environmental_report")
    op.drop_index("ix_environmental_report_sector", table_name="environmental_report")
    op.drop_index("ix_environmental_report_country", table_name="environmental_report")
    op.drop_table("environmental_report")
