"""Create fitgroup tables

Revision ID: 001
Revises: None
Create Date: 2024-03-01 00:00:00.000000+00:00

What:  Creates groups, tags, group_tags, participants, records and badges.
How:   Portable types only (VARCHAR enums, JSON photos), so the same revision
       runs on PostgreSQL and SQLite. Child tables reference their parent
       with ON DELETE CASCADE; the service also deletes children explicitly.

Rollback: downgrade() drops every table (destructive, all data is lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def timestamp_columns(with_updated_at: bool = True):
    columns = [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            comment="When this row was created (UTC)",
        ),
    ]
    if with_updated_at:
        columns.append(
            sa.Column(
                "updated_at",
                sa.DateTime(timezone=True),
                nullable=False,
                comment="When this row was last modified (UTC)",
            )
        )
    return columns


def upgrade() -> None:
    op.create_table(
        "groups",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(60), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("photo_url", sa.String(2048), nullable=True),
        sa.Column("goal_rep", sa.Integer(), nullable=False),
        sa.Column("discord_webhook_url", sa.String(2048), nullable=True),
        sa.Column("discord_invite_url", sa.String(2048), nullable=True),
        sa.Column("like_count", sa.Integer(), nullable=False, server_default=sa.text("0")),
        *timestamp_columns(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_groups_created_at", "groups", ["created_at"])
    op.create_index("idx_groups_like_count", "groups", ["like_count"])

    op.create_table(
        "tags",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(30), nullable=False),
        *timestamp_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "group_tags",
        sa.Column("group_id", sa.Integer(), nullable=False),
        sa.Column("tag_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["group_id"], ["groups.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["tag_id"], ["tags.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("group_id", "tag_id"),
    )

    op.create_table(
        "participants",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("nickname", sa.String(20), nullable=False),
        sa.Column("password", sa.String(20), nullable=False),
        sa.Column("is_owner", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("group_id", sa.Integer(), nullable=False),
        *timestamp_columns(),
        sa.ForeignKeyConstraint(["group_id"], ["groups.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("group_id", "nickname", name="uq_participants_group_nickname"),
    )
    # At most one owner per group
    op.create_index(
        "uq_participants_group_owner",
        "participants",
        ["group_id"],
        unique=True,
        postgresql_where=sa.text("is_owner"),
        sqlite_where=sa.text("is_owner"),
    )

    op.create_table(
        "records",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("exercise_type", sa.String(20), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("time", sa.Integer(), nullable=False),
        sa.Column("distance", sa.Float(), nullable=False),
        sa.Column("photos", sa.JSON(), nullable=False),
        sa.Column("author_id", sa.Integer(), nullable=False),
        *timestamp_columns(with_updated_at=False),
        sa.ForeignKeyConstraint(["author_id"], ["participants.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_records_author_created_at", "records", ["author_id", "created_at"])

    op.create_table(
        "badges",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("type", sa.String(30), nullable=False),
        sa.Column("group_id", sa.Integer(), nullable=False),
        *timestamp_columns(with_updated_at=False),
        sa.ForeignKeyConstraint(["group_id"], ["groups.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_badges_group_id", "badges", ["group_id"])


def downgrade() -> None:
    op.drop_index("ix_badges_group_id", table_name="badges")
    op.drop_table("badges")
    op.drop_index("idx_records_author_created_at", table_name="records")
    op.drop_table("records")
    op.drop_index("uq_participants_group_owner", table_name="participants")
    op.drop_table("participants")
    op.drop_table("group_tags")
    op.drop_table("tags")
    op.drop_index("idx_groups_like_count", table_name="groups")
    op.drop_index("idx_groups_created_at", table_name="groups")
    op.drop_table("groups")
