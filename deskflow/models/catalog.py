"""
Catalog Models
==============

Lookup tables seeded by migrations: work statuses, currencies, client and
project types, professions, skills and visual themes.
"""

from decimal import Decimal
from enum import IntEnum
from typing import Optional

from sqlalchemy import (
    Boolean,
    Column,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Table,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from deskflow.db.base import Base


# =============================================================================
# Enums
# =============================================================================

class WorkStatus(IntEnum):
    """Seeded status ids shared by projects and tasks."""
    NOT_STARTED = 1
    IN_PROGRESS = 2
    PAUSED = 3
    COMPLETED = 4
    CANCELLED = 5


# =============================================================================
# Association tables
# =============================================================================

profession_skills = Table(
    "profession_skills",
    Base.metadata,
    Column(
        "profession_id",
        Integer,
        ForeignKey("professions.profession_id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "skill_id",
        Integer,
        ForeignKey("skills.skill_id", ondelete="CASCADE"),
        primary_key=True,
    ),
)

profile_themes = Table(
    "profile_themes",
    Base.metadata,
    Column(
        "profile_id",
        Uuid(as_uuid=True),
        ForeignKey("profiles.profile_id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "theme_id",
        Integer,
        ForeignKey("visual_themes.theme_id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


# =============================================================================
# Models
# =============================================================================

class Status(Base):
    """Work status shared by projects and tasks."""

    __tablename__ = "statuses"

    status_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    color: Mapped[Optional[str]] = mapped_column(String(7), nullable=True)

    def to_api_dict(self) -> dict:
        return {"id": self.status_id, "name": self.name, "color": self.color}


class Currency(Base):
    """Currency an expense or income is recorded in."""

    __tablename__ = "currencies"

    currency_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    code: Mapped[str] = mapped_column(String(3), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    symbol: Mapped[Optional[str]] = mapped_column(String(5), nullable=True)

    def to_api_dict(self) -> dict:
        return {
            "id": self.currency_id,
            "code": self.code,
            "name": self.name,
            "symbol": self.symbol,
        }


class ClientType(Base):
    """Client category (company, individual, ...)."""

    __tablename__ = "client_types"

    client_type_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def to_api_dict(self) -> dict:
        return {
            "id": self.client_type_id,
            "name": self.name,
            "description": self.description,
        }


class ProjectType(Base):
    """Project category."""

    __tablename__ = "project_types"

    project_type_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def to_api_dict(self) -> dict:
        return {"id": self.project_type_id, "name": self.name}


class Skill(Base):
    """A skill that professions group together."""

    __tablename__ = "skills"

    skill_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    def to_api_dict(self) -> dict:
        return {"id": self.skill_id, "name": self.name}


class Profession(Base):
    """Profession a profile can declare."""

    __tablename__ = "professions"

    profession_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    skills: Mapped[list["Skill"]] = relationship(
        "Skill",
        secondary=profession_skills,
        lazy="selectin",
        order_by="Skill.name",
    )

    def to_api_dict(self) -> dict:
        return {
            "id": self.profession_id,
            "name": self.name,
            "description": self.description,
        }


class VisualTheme(Base):
    """UI colour theme; themes with a price are premium."""

    __tablename__ = "visual_themes"

    theme_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    primary_color: Mapped[str] = mapped_column(String(7), nullable=False)
    secondary_color: Mapped[str] = mapped_column(String(7), nullable=False)
    tertiary_color: Mapped[Optional[str]] = mapped_column(String(7), nullable=True)
    background_color: Mapped[Optional[str]] = mapped_column(String(7), nullable=True)
    text_color: Mapped[Optional[str]] = mapped_column(String(7), nullable=True)
    accent_color: Mapped[Optional[str]] = mapped_column(String(7), nullable=True)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"), nullable=False)
    icon: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    @property
    def is_premium(self) -> bool:
        return (self.price or 0) > 0

    def to_api_dict(self) -> dict:
        return {
            "id": self.theme_id,
            "name": self.name,
            "primaryColor": self.primary_color,
            "secondaryColor": self.secondary_color,
            "tertiaryColor": self.tertiary_color,
            "backgroundColor": self.background_color,
            "textColor": self.text_color,
            "accentColor": self.accent_color,
            "price": float(self.price or 0),
            "icon": self.icon,
            "isPremium": self.is_premium,
        }
