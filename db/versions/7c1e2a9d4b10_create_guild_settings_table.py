"""Create guild_settings table for per-guild contest configuration.

One row per guild. Channel names and mod_roles left NULL mean "use the
env defaults"; the toggles replace the old process-wide ON/OFF switch.

Revision ID: 7c1e2a9d4b10
Revises:
Create Date: 2026-10-18 00:00:00.000000
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "7c1e2a9d4b10"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("CREATE SCHEMA IF NOT EXISTS drawbot")
    op.create_table(
        "guild_settings",
        sa.Column("guild_id", sa.BigInteger, primary_key=True),
        sa.Column("name", sa.Text, nullable=True),
        sa.Column("bot_enabled", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("ping_users", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column(
            "theme_saving_enabled", sa.Boolean, nullable=False, server_default=sa.true()
        ),
        sa.Column("rules_enabled", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("forum_channel_name", sa.Text, nullable=True),
        sa.Column("chat_channel_name", sa.Text, nullable=True),
        sa.Column("mod_roles", sa.Text, nullable=True),  # comma-separated ids or names
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        schema="drawbot",
    )


def downgrade() -> None:
    op.drop_table("guild_settings", schema="drawbot")
