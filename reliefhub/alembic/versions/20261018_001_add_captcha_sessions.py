"""Create captcha_sessions table

Revision ID: 001
Revises:
Create Date: 2026-10-18

One row per issued math captcha: hidden answer, expiry and verified flag.
"""

from collections.abc import Sequence

import sqlalchemy as sa
import sqlmodel
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "captcha_sessions",
        sa.Column(
            "session_id",
            sqlmodel.sql.sqltypes.AutoString(length=36),
            nullable=False,
        ),
        sa.Column(
            "question",
            sqlmodel.sql.sqltypes.AutoString(length=32),
            nullable=False,
        ),
        sa.Column("answer", sa.Integer(), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
        sa.Column("verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("session_id"),
    )
    op.create_index(
        "ix_captcha_sessions_expires_at", "captcha_sessions", ["expires_at"]
    )


def downgrade() -> None:
    op.drop_index("ix_captcha_sessions_expires_at", table_name="captcha_sessions")
    op.drop_table("captcha_sessions")
