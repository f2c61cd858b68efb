"""Create users and JSON formatter tables.

Revision ID: a0c1e2f3b4d5
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "a0c1e2f3b4d5"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("email"),
    )

    op.create_table(
        "json_snippets",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("label", sa.Text(), nullable=True),
        sa.Column("raw_json", sa.Text(), nullable=False),
        sa.Column("is_valid", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("validation_error", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("last_used_at", sa.DateTime(), nullable=True),
    )
    op.create_index("idx_json_snippets_user", "json_snippets", ["user_id"])

    op.create_table(
        "json_format_operations",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("snippet_id", sa.String(64), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("operation_type", sa.Text(), nullable=True),
        sa.Column("settings_json", sa.Text(), nullable=True),
        sa.Column("result_json", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(["snippet_id"], ["json_snippets.id"]),
    )
    op.create_index("idx_json_format_operations_snippet", "json_format_operations", ["snippet_id"])
    op.create_index("idx_json_format_operations_user", "json_format_operations", ["user_id"])

    op.create_table(
        "json_transform_recipes",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("config_json", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("idx_json_transform_recipes_user", "json_transform_recipes", ["user_id"])


def downgrade() -> None:
    op.drop_index("idx_json_transform_recipes_user", table_name="json_transform_recipes")
    op.drop_table("json_transform_recipes")
    op.drop_index("idx_json_format_operations_user", table_name="json_format_operations")
    op.drop_index("idx_json_format_operations_snippet", table_name="json_format_operations")
    op.drop_table("json_format_operations")
    op.drop_index("idx_json_snippets_user", table_name="json_snippets")
    op.drop_table("json_snippets")
    op.drop_table("users")
