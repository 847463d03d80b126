"""Initial schema: users, accounts, sessions, books and swap requests

Revision ID: 001_initial
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy import inspect

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    bind = op.get_bind()
    tables = inspect(bind).get_table_names()

    if "user" not in tables:
        op.create_table(
            "user",
            sa.Column("id", sa.String(), nullable=False),
            sa.Column("name", sa.String(), nullable=True),
            sa.Column("email", sa.String(), nullable=True),
            sa.Column("image", sa.String(), nullable=True),
            sa.Column("created_at", sa.DateTime(), nullable=False),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("email"),
        )

    if "account" not in tables:
        op.create_table(
            "account",
            sa.Column("id", sa.String(), nullable=False),
            sa.Column("user_id", sa.String(), nullable=False),
            sa.Column("provider", sa.String(), nullable=False),
            sa.Column("provider_account_id", sa.String(), nullable=False),
            sa.Column("created_at", sa.DateTime(), nullable=False),
            sa.ForeignKeyConstraint(["user_id"], ["user.id"]),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("provider", "provider_account_id", name="uq_account_provider_account"),
        )
        op.create_index(op.f("ix_account_user_id"), "account", ["user_id"], unique=False)

    if "authsession" not in tables:
        op.create_table(
            "authsession",
            sa.Column("id", sa.String(), nullable=False),
            sa.Column("session_token", sa.String(), nullable=False),
            sa.Column("user_id", sa.String(), nullable=False),
            sa.Column("expires", sa.DateTime(), nullable=False),
            sa.ForeignKeyConstraint(["user_id"], ["user.id"]),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index(op.f("ix_authsession_session_token"), "authsession", ["session_token"], unique=True)
        op.create_index(op.f("ix_authsession_user_id"), "authsession", ["user_id"], unique=False)

    if "book" not in tables:
        op.create_table(
            "book",
            sa.Column("id", sa.String(), nullable=False),
            sa.Column("title", sa.String(), nullable=False),
            sa.Column("author", sa.String(), nullable=True),
            sa.Column("owner_id", sa.String(), nullable=False),
            sa.Column("created_at", sa.DateTime(), nullable=False),
            sa.ForeignKeyConstraint(["owner_id"], ["user.id"]),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index(op.f("ix_book_owner_id"), "book", ["owner_id"], unique=False)

    if "swaprequest" not in tables:
        # No uniqueness on (requester, holder, book): duplicate proposals are possible
        op.create_table(
            "swaprequest",
            sa.Column("id", sa.String(), nullable=False),
            sa.Column("requester_id", sa.String(), nullable=False),
            sa.Column("holder_id", sa.String(), nullable=False),
            sa.Column("holder_book_id", sa.String(), nullable=False),
            sa.Column("requester_book_id", sa.String(), nullable=True),
            sa.Column("created_at", sa.DateTime(), nullable=False),
            sa.ForeignKeyConstraint(["requester_id"], ["user.id"]),
            sa.ForeignKeyConstraint(["holder_id"], ["user.id"]),
            sa.ForeignKeyConstraint(["holder_book_id"], ["book.id"]),
            sa.ForeignKeyConstraint(["requester_book_id"], ["book.id"]),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index(op.f("ix_swaprequest_requester_id"), "swaprequest", ["requester_id"], unique=False)
        op.create_index(op.f("ix_swaprequest_holder_id"), "swaprequest", ["holder_id"], unique=False)
        op.create_index(op.f("ix_swaprequest_holder_book_id"), "swaprequest", ["holder_book_id"], unique=False)


def downgrade() -> None:
    op.drop_table("swaprequest")
    op.drop_table("book")
    op.drop_table("authsession")
    op.drop_table("account")
    op.drop_table("user")
