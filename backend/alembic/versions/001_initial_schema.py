"""Initial schema — users, settings, entries, entry_catalog_refs.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

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
        "users",
        sa.Column("id", sa.String(255), primary_key=True),
        sa.Column("date_created", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "settings",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", sa.String(255), sa.ForeignKey("users.id"), nullable=False, unique=True),
        sa.Column("tags", sa.JSON, nullable=False),
        sa.Column("activities", sa.JSON, nullable=False),
        sa.Column("setup_complete", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("reflection_alert_enabled", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("reflection_alert_time", sa.Time, nullable=False, server_default="21:00:00"),
        sa.Column("version", sa.Integer, nullable=False, server_default="1"),
        sa.Column("date_created", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("date_updated", sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        "entries",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", sa.String(255), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("mood", sa.Text, nullable=False),
        sa.Column("emotion", sa.Text, nullable=False),
        sa.Column("text", sa.Text, nullable=False),
        sa.Column("tags", sa.JSON, nullable=False),
        sa.Column("activities", sa.JSON, nullable=False),
        sa.Column(
            "linked_entry_id", UUID(as_uuid=True),
            sa.ForeignKey("entries.id", ondelete="SET NULL"), nullable=True,
        ),
        sa.Column("date_created", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("date_updated", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_entries_user_id", "entries", ["user_id"])
    op.create_index("ix_entries_linked_entry_id", "entries", ["linked_entry_id"])
    op.create_index("ix_entries_date_created", "entries", ["date_created"])

    op.create_table(
        "entry_catalog_refs",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "entry_id", UUID(as_uuid=True),
            sa.ForeignKey("entries.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("kind", sa.String(20), nullable=False),
        sa.Column("item_id", sa.String(64), nullable=False),
    )
    op.create_index("ix_entry_catalog_refs_entry_id", "entry_catalog_refs", ["entry_id"])
    op.create_index("ix_entry_catalog_refs_kind_item", "entry_catalog_refs", ["kind", "item_id"])


def downgrade() -> None:
    op.drop_index("ix_entry_catalog_refs_kind_item", table_name="entry_catalog_refs")
    op.drop_index("ix_entry_catalog_refs_entry_id", table_name="entry_catalog_refs")
    op.drop_table("entry_catalog_refs")
    op.drop_index("ix_entries_date_created", table_name="entries")
    op.drop_index("ix_entries_linked_entry_id", table_name="entries")
    op.drop_index("ix_entries_user_id", table_name="entries")
    op.drop_table("entries")
    op.drop_table("settings")
    op.drop_table("users")
