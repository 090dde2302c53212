"""Scheduling database models."""

from datetime import date, time

from sqlalchemy import CheckConstraint, Index, Text
from sqlmodel import Field

from src.core.infrastructure.database.base_model import BaseModel


class ScheduleEntryModel(BaseModel, table=True):
    """Schedule entry database model.

    Exactly one of ``work_id`` and ``group_id`` is set.
    """

    __tablename__ = "schedule_entries"
    __table_args__ = (
        CheckConstraint(
            "(work_id IS NULL) <> (group_id IS NULL)",
            name="ck_schedule_entries_one_content",
        ),
        CheckConstraint(
            "discussion_minutes >= 0",
            name="ck_schedule_entries_discussion_non_negative",
        ),
        Index("ix_schedule_entries_venue_day", "venue_id", "day"),
    )

    edition_id: str = Field(nullable=False, index=True)
    venue_id: str = Field(nullable=False, foreign_key="venues.id")
    day: date = Field(nullable=False)
    start_time: time = Field(nullable=False)
    work_id: str | None = Field(default=None, nullable=True, foreign_key="works.id")
    group_id: str | None = Field(
        default=None, nullable=True, foreign_key="work_groups.id"
    )
    discussion_minutes: int = Field(default=0, nullable=False)
    title_override_cs: str | None = Field(default=None, nullable=True, max_length=300)
    title_override_en: str | None = Field(default=None, nullable=True, max_length=300)
    notes: str | None = Field(default=None, nullable=True, sa_type=Text)
