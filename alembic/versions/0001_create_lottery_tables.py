"""create lottery tables

Revision ID: 0001_create_lottery_tables
Revises:
Create Date: 2026-10-19 00:00:00

"""
from alembic import op
import sqlalchemy as sa


revision = "0001_create_lottery_tables"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "lottery_activities",
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("prizes", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_lottery_activities"),
    )
    op.create_table(
        "lottery_participants",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("activity_id", sa.String(length=32), nullable=False),
        sa.Column("participant_id", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["activity_id"],
            ["lottery_activities.id"],
            name="fk_lottery_participants_activity_id_lottery_activities",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_lottery_participants"),
        sa.UniqueConstraint(
            "activity_id", "participant_id", name="uq_lottery_participant_per_activity"
        ),
    )
    op.create_index(
        "ix_lottery_participants_activity_id",
        "lottery_participants",
        ["activity_id"],
    )
    op.create_table(
        "lottery_winners",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("activity_id", sa.String(length=32), nullable=False),
        sa.Column("participant_id", sa.String(length=64), nullable=False),
        sa.Column("participant_name", sa.String(length=255), nullable=False),
        sa.Column("prize_id", sa.String(length=64), nullable=False),
        sa.Column("prize_name", sa.String(length=255), nullable=False),
        sa.Column("prize_level", sa.Integer(), nullable=False),
        sa.Column("prize_color", sa.String(length=32), nullable=True),
        sa.Column("timestamp", sa.BigInteger(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["activity_id"],
            ["lottery_activities.id"],
            name="fk_lottery_winners_activity_id_lottery_activities",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_lottery_winners"),
        sa.UniqueConstraint(
            "activity_id",
            "participant_id",
            "prize_id",
            name="uq_lottery_winner_per_prize",
        ),
    )
    op.create_index(
        "ix_lottery_winners_activity_id",
        "lottery_winners",
        ["activity_id"],
    )
    op.create_index(
        "ix_lottery_winners_activity_timestamp",
        "lottery_winners",
        ["activity_id", "timestamp"],
    )


def downgrade() -> None:
    op.drop_index("ix_lottery_winners_activity_timestamp", table_name="lottery_winners")
    op.drop_index("ix_lottery_winners_activity_id", table_name="lottery_winners")
    op.drop_table("lottery_winners")
    op.drop_index("ix_lottery_participants_activity_id", table_name="lottery_participants")
    op.drop_table("lottery_participants")
    op.drop_table("lottery_activities")
