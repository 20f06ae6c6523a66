"""Initial schema — game_states, cards.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "game_states",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("phase", sa.String(30), nullable=False, server_default="dealing_wait"),
        sa.Column("finished", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("current_round", sa.Integer, nullable=False, server_default="0"),
        sa.Column("version", sa.Integer, nullable=False, server_default="0"),
        sa.Column("snapshot", sa.JSON, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("finished_at", sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        "cards",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("kind", sa.String(10), nullable=False),
        sa.Column("text", sa.String(120), nullable=False),
        sa.Column("expansion", sa.String(100), nullable=False),
        sa.Column("blanks", sa.Integer, nullable=False, server_default="0"),
    )
    op.create_index("ix_cards_kind_expansion", "cards", ["kind", "expansion"])


def downgrade() -> None:
    op.drop_index("ix_cards_kind_expansion", table_name="cards")
    op.drop_table("cards")
    op.drop_table("game_states")
