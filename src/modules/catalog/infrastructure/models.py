"""Catalog database models."""

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from src.core.infrastructure.database.base_model import BaseModel


class VenueModel(BaseModel, table=True):
    """Venue database model."""

    __tablename__ = "venues"

    name_cs: str = Field(nullable=False, max_length=200)
    name_en: str = Field(default="", nullable=False, max_length=200)
    sort_order: int = Field(default=0, nullable=False)
    is_active: bool = Field(default=True, nullable=False)


class WorkModel(BaseModel, table=True):
    """Work database model.

    ``runtime`` is free text as imported from the catalogue sheets.
    """

    __tablename__ = "works"

    edition_id: str = Field(nullable=False, index=True)
    name_cs: str = Field(nullable=False, max_length=300)
    name_en: str = Field(default="", nullable=False, max_length=300)
    runtime: str | None = Field(default=None, nullable=True, max_length=32)
    director: str | None = Field(default=None, nullable=True, max_length=300)
    section: str | None = Field(default=None, nullable=True, max_length=100)


class GroupModel(BaseModel, table=True):
    """Work group database model."""

    __tablename__ = "work_groups"

    edition_id: str = Field(nullable=False, index=True)
    name_cs: str = Field(nullable=False, max_length=300)
    name_en: str = Field(default="", nullable=False, max_length=300)
    description_cs: str = Field(default="", nullable=False)
    description_en: str = Field(default="", nullable=False)


class GroupWorkModel(BaseModel, table=True):
    """Membership of a work in a group."""

    __tablename__ = "group_works"
    __table_args__ = (UniqueConstraint("group_id", "work_id"),)

    group_id: str = Field(nullable=False, index=True, foreign_key="work_groups.id")
    work_id: str = Field(nullable=False, foreign_key="works.id")
    sort_order: int = Field(default=0, nullable=False)
