"""init schedule tables

Revision ID: 0001_init
Revises:
Create Date: 2025-05-20
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_init"
down_revision = None
branch_labels = None
depends_on = None


def _audit_columns() -> list[sa.Column]:
    return [
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    # Venues table
    op.create_table(
        "venues",
        *_audit_columns(),
        sa.Column("name_cs", sa.String(length=200), nullable=False),
        sa.Column("name_en", sa.String(length=200), nullable=False, server_default=""),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
    )

    # Works table (runtime is free text as imported)
    op.create_table(
        "works",
        *_audit_columns(),
        sa.Column("edition_id", sa.String(), nullable=False),
        sa.Column("name_cs", sa.String(length=300), nullable=False),
        sa.Column("name_en", sa.String(length=300), nullable=False, server_default=""),
        sa.Column("runtime", sa.String(length=32), nullable=True),
        sa.Column("director", sa.String(length=300), nullable=True),
        sa.Column("section", sa.String(length=100), nullable=True),
    )
    op.create_index("ix_works_edition_id", "works", ["edition_id"])

    # Work groups table
    op.create_table(
        "work_groups",
        *_audit_columns(),
        sa.Column("edition_id", sa.String(), nullable=False),
        sa.Column("name_cs", sa.String(length=300), nullable=False),
        sa.Column("name_en", sa.String(length=300), nullable=False, server_default=""),
        sa.Column("description_cs", sa.String(), nullable=False, server_default=""),
        sa.Column("description_en", sa.String(), nullable=False, server_default=""),
    )
    op.create_index("ix_work_groups_edition_id", "work_groups", ["edition_id"])

    # Group membership table
    op.create_table(
        "group_works",
        *_audit_columns(),
        sa.Column("group_id", sa.String(), sa.ForeignKey("work_groups.id"), nullable=False),
        sa.Column("work_id", sa.String(), sa.ForeignKey("works.id"), nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        sa.UniqueConstraint("group_id", "work_id"),
    )
    op.create_index("ix_group_works_group_id", "group_works", ["group_id"])

    # Schedule entries table
    op.create_table(
        "schedule_entries",
        *_audit_columns(),
        sa.Column("edition_id", sa.String(), nullable=False),
        sa.Column("venue_id", sa.String(), sa.ForeignKey("venues.id"), nullable=False),
        sa.Column("day", sa.Date(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("work_id", sa.String(), sa.ForeignKey("works.id"), nullable=True),
        sa.Column("group_id", sa.String(), sa.ForeignKey("work_groups.id"), nullable=True),
        sa.Column("discussion_minutes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("title_override_cs", sa.String(length=300), nullable=True),
        sa.Column("title_override_en", sa.String(length=300), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.CheckConstraint(
            "(work_id IS NULL) <> (group_id IS NULL)",
            name="ck_schedule_entries_one_content",
        ),
        sa.CheckConstraint(
            "discussion_minutes >= 0",
            name="ck_schedule_entries_discussion_non_negative",
        ),
    )
    op.create_index("ix_schedule_entries_edition_id", "schedule_entries", ["edition_id"])
    op.create_index(
        "ix_schedule_entries_venue_day", "schedule_entries", ["venue_id", "day"]
    )


def downgrade() -> None:
    op.drop_table("schedule_entries")
    op.drop_table("group_works")
    op.drop_table("work_groups")
    op.drop_table("works")
    op.drop_table("venues")
