"""add data connectors and endpoints

Revision ID: 20261001_000005
Revises: 20261001_000004
Create Date: 2026-10-01 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "20261001_000005"
down_revision = "20261001_000004"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "data_connectors",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("uuid", postgresql.UUID(as_uuid=True), nullable=False, unique=True),
        sa.Column("name", sa.String(length=200), nullable=False, unique=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("base_url", sa.String(length=500), nullable=False),
        sa.Column("auth_type", sa.String(length=20), nullable=False, server_default="none"),
        sa.Column("credentials", sa.JSON(), nullable=True),
        sa.Column("headers", sa.JSON(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="ACTIVE"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    )

    op.create_table(
        "data_connector_endpoints",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("connector_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("method", sa.String(length=10), nullable=False, server_default="GET"),
        sa.Column("path", sa.String(length=500), nullable=False, server_default=""),
        sa.Column("query", sa.JSON(), nullable=True),
        sa.Column("body", sa.JSON(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.ForeignKeyConstraint(["connector_id"], ["data_connectors.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("connector_id", "name", name="uq_data_connector_endpoints_connector_name"),
    )
    op.create_index(
        "ix_data_connector_endpoints_connector_id", "data_connector_endpoints", ["connector_id"]
    )


def downgrade() -> None:
    op.drop_index("ix_data_connector_endpoints_connector_id", table_name="data_connector_endpoints")
    op.drop_table("data_connector_endpoints")
    op.drop_table("data_connectors")
