"""create game tables

Revision ID: 0001
Revises:
Create Date: 2026-10-17 00:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "games",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("label", sa.String(length=100), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint(
            "status IN ('setup','in_progress','completed','aborted')",
            name=op.f("ck_games_status_enum"),
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_games")),
        sa.UniqueConstraint("label", name="uq_games_label"),
    )
    op.create_table(
        "game_participants",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("game_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["game_id"],
            ["games.id"],
            name=op.f("fk_game_participants_game_id_games"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_game_participants")),
        sa.UniqueConstraint("game_id", "name", name="uq_game_participants_game_name"),
        sa.UniqueConstraint(
            "game_id", "position", name="uq_game_participants_game_position"
        ),
    )
    op.create_index(
        op.f("ix_game_participants_game_id"),
        "game_participants",
        ["game_id"],
        unique=False,
    )
    op.create_table(
        "game_gifts",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("game_id", sa.Integer(), nullable=False),
        sa.Column("owner_participant_id", sa.Integer(), nullable=False),
        sa.Column(
            "taken", sa.Boolean(), server_default=sa.text("false"), nullable=False
        ),
        sa.Column("taken_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ["game_id"],
            ["games.id"],
            name=op.f("fk_game_gifts_game_id_games"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["owner_participant_id"],
            ["game_participants.id"],
            name=op.f("fk_game_gifts_owner_participant_id_game_participants"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_game_gifts")),
        sa.UniqueConstraint("owner_participant_id", name="uq_game_gifts_owner"),
    )
    op.create_index(
        op.f("ix_game_gifts_game_id"), "game_gifts", ["game_id"], unique=False
    )
    op.create_table(
        "game_draws",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("game_id", sa.Integer(), nullable=False),
        sa.Column("sequence", sa.Integer(), nullable=False),
        sa.Column("spinner_participant_id", sa.Integer(), nullable=False),
        sa.Column("gift_id", sa.Integer(), nullable=False),
        sa.Column("drawn_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["game_id"],
            ["games.id"],
            name=op.f("fk_game_draws_game_id_games"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["gift_id"],
            ["game_gifts.id"],
            name=op.f("fk_game_draws_gift_id_game_gifts"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["spinner_participant_id"],
            ["game_participants.id"],
            name=op.f("fk_game_draws_spinner_participant_id_game_participants"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_game_draws")),
        sa.UniqueConstraint("gift_id", name="uq_game_draws_gift"),
        sa.UniqueConstraint(
            "game_id", "sequence", name="uq_game_draws_game_sequence"
        ),
        sa.UniqueConstraint("spinner_participant_id", name="uq_game_draws_spinner"),
    )
    op.create_index(
        op.f("ix_game_draws_game_id"), "game_draws", ["game_id"], unique=False
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_game_draws_game_id"), table_name="game_draws")
    op.drop_table("game_draws")
    op.drop_index(op.f("ix_game_gifts_game_id"), table_name="game_gifts")
    op.drop_table("game_gifts")
    op.drop_index(
        op.f("ix_game_participants_game_id"), table_name="game_participants"
    )
    op.drop_table("game_participants")
    op.drop_table("games")
