"""initial schema

Revision ID: 5b2e7c0d9a41
Revises:
Create Date: 2026-10-19 09:12:40.512831

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "5b2e7c0d9a41"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at(name: str = "created_at") -> sa.Column:
    return sa.Column(name, sa.DateTime(timezone=True), nullable=False)


def upgrade() -> None:
    """Create communities, users, threads, replies and the guru board."""
    op.create_table(
        "community",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("keywords", sa.Text(), nullable=False),
        sa.Column("member_count", sa.Integer(), nullable=False),
        sa.Column("dimensions", sa.JSON(), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "sub_community_member",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("community_id", sa.Integer(), nullable=False),
        sa.Column("stage", sa.Text(), nullable=False),
        sa.Column("type", sa.Text(), nullable=False),
        sa.Column("member_count", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("community_id", "stage", "type", name="uq_sub_community"),
    )
    op.create_index(
        "ix_sub_community_member_community_id", "sub_community_member", ["community_id"]
    )

    op.create_table(
        "app_user",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("username", sa.String(length=64), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        _created_at(),
        sa.Column("is_guru", sa.Boolean(), nullable=False),
        sa.Column("guru_intro", sa.Text(), nullable=True),
        sa.Column("gender", sa.Text(), nullable=True),
        sa.Column("age", sa.Integer(), nullable=True),
        sa.Column("profession", sa.Text(), nullable=True),
        sa.Column("marriage_status", sa.Text(), nullable=True),
        sa.Column("location_from", sa.Text(), nullable=True),
        sa.Column("location_living", sa.Text(), nullable=True),
        sa.Column("location_living_district", sa.Text(), nullable=True),
        sa.Column("location_living_street", sa.Text(), nullable=True),
        sa.Column("income_individual", sa.Text(), nullable=True),
        sa.Column("income_family", sa.Text(), nullable=True),
        sa.Column("family_size", sa.Integer(), nullable=True),
        sa.Column("hukou", sa.Text(), nullable=True),
        sa.Column("education", sa.Text(), nullable=True),
        sa.Column("consumption_level", sa.Text(), nullable=True),
        sa.Column("housing_status", sa.Text(), nullable=True),
        sa.Column("economic_dependency", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_app_user_username", "app_user", ["username"], unique=True)

    op.create_table(
        "user_community",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("community_id", sa.Integer(), nullable=False),
        sa.Column("stage", sa.Text(), nullable=False),
        sa.Column("type", sa.Text(), nullable=False),
        _created_at("joined_at"),
        sa.ForeignKeyConstraint(["user_id"], ["app_user.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "community_id", "stage", "type", name="uq_user_community"),
    )
    op.create_index("ix_user_community_user_id", "user_community", ["user_id"])
    op.create_index("ix_user_community_community_id", "user_community", ["community_id"])

    for table, column, constraint in (
        ("user_disease_tag", "tag", "uq_user_disease_tag"),
        ("user_hospital", "hospital", "uq_user_hospital"),
    ):
        op.create_table(
            table,
            sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
            sa.Column("user_id", sa.Integer(), nullable=False),
            sa.Column(column, sa.Text(), nullable=False),
            sa.ForeignKeyConstraint(["user_id"], ["app_user.id"], ondelete="CASCADE"),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("user_id", column, name=constraint),
        )
        op.create_index(f"ix_{table}_user_id", table, ["user_id"])

    op.create_table(
        "thread",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_thread_user_id", "thread", ["user_id"])

    op.create_table(
        "thread_community",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("thread_id", sa.Integer(), nullable=False),
        sa.Column("community_id", sa.Integer(), nullable=False),
        sa.Column("stage", sa.Text(), nullable=False),
        sa.Column("type", sa.Text(), nullable=False),
        sa.ForeignKeyConstraint(["thread_id"], ["thread.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "thread_id", "community_id", "stage", "type", name="uq_thread_community"
        ),
    )
    op.create_index("ix_thread_community_thread_id", "thread_community", ["thread_id"])
    op.create_index("ix_thread_community_community_id", "thread_community", ["community_id"])

    op.create_table(
        "reply",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("thread_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("parent_reply_id", sa.Integer(), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_reply_thread_id", "reply", ["thread_id"])

    op.create_table(
        "guru_question",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("guru_user_id", sa.Integer(), nullable=False),
        sa.Column("asker_user_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_guru_question_guru_user_id", "guru_question", ["guru_user_id"])

    op.create_table(
        "guru_question_reply",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("question_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("parent_reply_id", sa.Integer(), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_guru_question_reply_question_id", "guru_question_reply", ["question_id"]
    )


def downgrade() -> None:
    """Drop every table created by upgrade()."""
    for table in (
        "guru_question_reply",
        "guru_question",
        "reply",
        "thread_community",
        "thread",
        "user_hospital",
        "user_disease_tag",
        "user_community",
        "app_user",
        "sub_community_member",
        "community",
    ):
        op.drop_table(table)
