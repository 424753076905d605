"""
Client Model
============

SQLAlchemy model for the freelancer's clients.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Optional
import uuid

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from deskflow.db.base import Base, TimestampMixin
from deskflow.models.catalog import ClientType
from deskflow.utils.helpers import utc_now

if TYPE_CHECKING:
    from deskflow.models.account import Profile
    from deskflow.models.project import Project


class Client(Base, TimestampMixin):
    """
    Client model.

    Owned by a profile. Deleting a client only deactivates it.
    """

    __tablename__ = "clients"

    # Primary Key
    client_id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
    )

    # Foreign Keys
    profile_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("profiles.profile_id", ondelete="CASCADE"),
        nullable=False,
    )
    client_type_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("client_types.client_type_id", ondelete="SET NULL"),
        nullable=True,
    )

    name: Mapped[str] = mapped_column(String(120), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(150), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    registered_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)

    # Relationships
    profile: Mapped["Profile"] = relationship("Profile", back_populates="clients")
    client_type: Mapped[Optional["ClientType"]] = relationship("ClientType")
    projects: Mapped[list["Project"]] = relationship(
        "Project",
        back_populates="client",
    )

    __table_args__ = (
        Index("idx_clients_profile_active", "profile_id", "is_active"),
    )

    def __repr__(self) -> str:
        return f"<Client {self.name}>"

    def to_api_dict(self) -> dict:
        """Base fields; relationships are added by the caller when loaded."""
        return {
            "id": str(self.client_id),
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "clientTypeId": self.client_type_id,
            "isActive": self.is_active,
            "registeredAt": self.registered_at.isoformat() if self.registered_at else None,
        }
