"""
Account Models
==============

SQLAlchemy models for login credentials (Account) and the person behind
them (Profile).
"""

from datetime import date, datetime
from typing import TYPE_CHECKING, Optional
import uuid

from sqlalchemy import Boolean, Date, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from deskflow.db.base import Base, TimestampMixin
from deskflow.models.catalog import Profession, VisualTheme, profile_themes

if TYPE_CHECKING:
    from deskflow.models.client import Client
    from deskflow.models.project import Project


class Profile(Base, TimestampMixin):
    """
    Profile model.

    Owns clients and projects. Created together with its account.
    """

    __tablename__ = "profiles"

    # Primary Key
    profile_id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
    )

    display_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    avatar: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    birth_date: Mapped[Optional[date]] = mapped_column(
        Date,
        nullable=True,
    )
    locale: Mapped[Optional[str]] = mapped_column(
        String(10),
        nullable=True,
        default="en",
    )
    dark_mode: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )

    # Foreign Keys
    preferred_theme_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("visual_themes.theme_id", ondelete="SET NULL"),
        nullable=True,
    )
    profession_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("professions.profession_id", ondelete="SET NULL"),
        nullable=True,
    )

    # Relationships
    account: Mapped[Optional["Account"]] = relationship(
        "Account",
        back_populates="profile",
        uselist=False,
    )
    profession: Mapped[Optional["Profession"]] = relationship("Profession")
    preferred_theme: Mapped[Optional["VisualTheme"]] = relationship("VisualTheme")
    owned_themes: Mapped[list["VisualTheme"]] = relationship(
        "VisualTheme",
        secondary=profile_themes,
    )
    clients: Mapped[list["Client"]] = relationship(
        "Client",
        back_populates="profile",
        cascade="all, delete-orphan",
    )
    projects: Mapped[list["Project"]] = relationship(
        "Project",
        back_populates="profile",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Profile {self.display_name}>"

    def to_api_dict(self) -> dict:
        """Serialize with profession/theme, which must already be loaded."""
        return {
            "id": str(self.profile_id),
            "displayName": self.display_name,
            "avatar": self.avatar,
            "birthDate": self.birth_date.isoformat() if self.birth_date else None,
            "locale": self.locale,
            "darkMode": self.dark_mode,
            "professionId": self.profession_id,
            "profession": self.profession.to_api_dict() if self.profession else None,
            "preferredThemeId": self.preferred_theme_id,
            "preferredTheme": (
                self.preferred_theme.to_api_dict() if self.preferred_theme else None
            ),
        }


class Account(Base, TimestampMixin):
    """
    Account model.

    Login credentials. Email is stored trimmed and lower-cased and is unique.
    """

    __tablename__ = "accounts"

    # Primary Key
    account_id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
    )

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    display_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )
    last_login: Mapped[Optional[datetime]] = mapped_column(
        nullable=True,
    )

    # Foreign Key
    profile_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("profiles.profile_id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )

    # Relationships
    profile: Mapped["Profile"] = relationship(
        "Profile",
        back_populates="account",
    )

    def __repr__(self) -> str:
        return f"<Account {self.email}>"

    def to_summary_dict(self) -> dict:
        return {
            "accountId": str(self.account_id),
            "email": self.email,
            "displayName": self.display_name,
            "profileId": str(self.profile_id),
        }
