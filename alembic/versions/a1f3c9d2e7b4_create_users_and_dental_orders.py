"""Create users and dental_orders tables

Revision ID: a1f3c9d2e7b4
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

# revision identifiers, used by Alembic.
revision: str = "a1f3c9d2e7b4"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSONType = sa.JSON().with_variant(JSONB(), "postgresql")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("full_name", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    op.create_table(
        "dental_orders",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("order_number", sa.String(50), nullable=False),
        sa.Column("patient_name", sa.String(255), nullable=False),
        sa.Column("patient_id", sa.String(100), nullable=True),
        sa.Column("selected_teeth", JSONType, nullable=False),
        sa.Column("tooth_configurations", JSONType, nullable=False),
        sa.Column("observations", sa.Text(), nullable=True),
        sa.Column("smile_photo_path", sa.String(500), nullable=True),
        sa.Column("scanner_file_path", sa.String(500), nullable=True),
        sa.Column("status", sa.String(50), nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_dental_orders_order_number", "dental_orders", ["order_number"], unique=True)
    op.create_index("ix_dental_orders_status", "dental_orders", ["status"])
    op.create_index("ix_dental_orders_created_at", "dental_orders", ["created_at"])


def downgrade() -> None:
    op.drop_index("ix_dental_orders_created_at", table_name="dental_orders")
    op.drop_index("ix_dental_orders_status", table_name="dental_orders")
    op.drop_index("ix_dental_orders_order_number", table_name="dental_orders")
    op.drop_table("dental_orders")
    op.drop_index("ix_users_username", table_name="users")
    op.drop_table("users")
