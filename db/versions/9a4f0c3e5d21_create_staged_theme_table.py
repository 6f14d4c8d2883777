"""Create staged_theme table for themes queued by would-be winners.

A theme is consumed (title, description and timestamp set back to NULL)
when its owner wins a round, whether or not the new post was created.

Revision ID: 9a4f0c3e5d21
Revises: 7c1e2a9d4b10
Create Date: 2026-10-18 00:05:00.000000
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "9a4f0c3e5d21"
down_revision: Union[str, None] = "7c1e2a9d4b10"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "staged_theme",
        sa.Column("user_id", sa.BigInteger, nullable=False),
        sa.Column(
            "guild_id",
            sa.BigInteger,
            sa.ForeignKey("drawbot.guild_settings.guild_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("username", sa.Text, nullable=True),
        sa.Column("theme_title", sa.String(100), nullable=True),
        sa.Column("theme_description", sa.String(400), nullable=True),
        sa.Column("theme_staged_at", sa.DateTime(timezone=True), nullable=True),
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
        sa.PrimaryKeyConstraint("user_id", "guild_id"),
        schema="drawbot",
    )


def downgrade() -> None:
    op.drop_table("staged_theme", schema="drawbot")
