"""add LIST_CANCELED

Revision ID: 20261001_000004
Revises: 20261001_000003
Create Date: 2026-10-01 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa

revision = "20261001_000004"
down_revision = "20261001_000003"
branch_labels = None
depends_on = None

MEDIUMTEXT_LENGTH = 16777215


def upgrade() -> None:
    op.create_table(
        "LIST_CANCELED",
        sa.Column("APP_UID", sa.String(length=32), nullable=False, server_default=""),
        sa.Column("USR_UID", sa.String(length=32), nullable=False, server_default=""),
        sa.Column("TAS_UID", sa.String(length=32), nullable=False, server_default=""),
        sa.Column("PRO_UID", sa.String(length=32), nullable=False, server_default=""),
        sa.Column("APP_NUMBER", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("APP_TITLE", sa.Text(length=MEDIUMTEXT_LENGTH), nullable=True),
        sa.Column("APP_PRO_TITLE", sa.Text(length=MEDIUMTEXT_LENGTH), nullable=True),
        sa.Column("APP_TAS_TITLE", sa.Text(length=MEDIUMTEXT_LENGTH), nullable=True),
        sa.Column("APP_CANCELED_DATE", sa.DateTime(), nullable=True),
        sa.Column("DEL_INDEX", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("DEL_PREVIOUS_USR_UID", sa.String(length=32), nullable=True, server_default=""),
        sa.Column("DEL_CURRENT_USR_USERNAME", sa.String(length=100), nullable=True, server_default=""),
        sa.Column("DEL_CURRENT_USR_FIRSTNAME", sa.String(length=50), nullable=True, server_default=""),
        sa.Column("DEL_CURRENT_USR_LASTNAME", sa.String(length=50), nullable=True, server_default=""),
        sa.Column("DEL_DELEGATE_DATE", sa.DateTime(), nullable=False),
        sa.Column("DEL_INIT_DATE", sa.DateTime(), nullable=True),
        sa.Column("DEL_DUE_DATE", sa.DateTime(), nullable=True),
        sa.Column("DEL_PRIORITY", sa.String(length=32), nullable=False, server_default="3"),
        sa.Column("PRO_ID", sa.Integer(), nullable=True, server_default="0"),
        sa.Column("USR_ID", sa.Integer(), nullable=True, server_default="0"),
        sa.Column("TAS_ID", sa.Integer(), nullable=True, server_default="0"),
        sa.PrimaryKeyConstraint("APP_UID"),
    )
    op.create_index("indexCanceledUser", "LIST_CANCELED", ["USR_UID"])
    op.create_index("INDEX_PRO_ID", "LIST_CANCELED", ["PRO_ID"])
    op.create_index("INDEX_USR_ID", "LIST_CANCELED", ["USR_ID"])
    op.create_index("INDEX_TAS_ID", "LIST_CANCELED", ["TAS_ID"])


def downgrade() -> None:
    op.drop_index("INDEX_TAS_ID", table_name="LIST_CANCELED")
    op.drop_index("INDEX_USR_ID", table_name="LIST_CANCELED")
    op.drop_index("INDEX_PRO_ID", table_name="LIST_CANCELED")
    op.drop_index("indexCanceledUser", table_name="LIST_CANCELED")
    op.drop_table("LIST_CANCELED")
