"""
Project Models
==============

SQLAlchemy models for projects and their tasks.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional
import uuid

from sqlalchemy import (
    Boolean,
    Date,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    SmallInteger,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from deskflow.db.base import Base, TimestampMixin
from deskflow.models.catalog import ProjectType, Status, WorkStatus

if TYPE_CHECKING:
    from deskflow.models.account import Profile
    from deskflow.models.client import Client
    from deskflow.models.finance import Expense, Income


class Project(Base, TimestampMixin):
    """
    Project model.

    Owned by a profile and billed to one of its clients.
    """

    __tablename__ = "projects"

    # Primary Key
    project_id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
    )

    # Foreign Keys
    profile_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("profiles.profile_id", ondelete="CASCADE"),
        nullable=False,
    )
    client_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("clients.client_id", ondelete="RESTRICT"),
        nullable=False,
    )
    project_type_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("project_types.project_type_id", ondelete="SET NULL"),
        nullable=True,
    )
    status_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("statuses.status_id"),
        default=int(WorkStatus.NOT_STARTED),
        nullable=False,
    )

    name: Mapped[str] = mapped_column(String(150), nullable=False)
    budget: Mapped[Optional[Decimal]] = mapped_column(Numeric(14, 2), nullable=True)
    is_archived: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_pinned: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_paid: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    due_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    # Relationships
    profile: Mapped["Profile"] = relationship("Profile", back_populates="projects")
    client: Mapped["Client"] = relationship("Client", back_populates="projects")
    project_type: Mapped[Optional["ProjectType"]] = relationship("ProjectType")
    status: Mapped["Status"] = relationship("Status")
    tasks: Mapped[list["Task"]] = relationship(
        "Task",
        back_populates="project",
        cascade="all, delete-orphan",
    )
    expenses: Mapped[list["Expense"]] = relationship(
        "Expense",
        back_populates="project",
    )
    incomes: Mapped[list["Income"]] = relationship(
        "Income",
        back_populates="project",
    )

    __table_args__ = (
        Index("idx_projects_profile_pinned_start", "profile_id", "is_pinned", "start_date"),
    )

    def __repr__(self) -> str:
        return f"<Project {self.name}>"

    def to_api_dict(self) -> dict:
        """Base fields; relationships are added by the caller when loaded."""
        return {
            "id": str(self.project_id),
            "name": self.name,
            "clientId": str(self.client_id),
            "projectTypeId": self.project_type_id,
            "statusId": self.status_id,
            "budget": float(self.budget) if self.budget is not None else None,
            "isArchived": self.is_archived,
            "isPinned": self.is_pinned,
            "isPaid": self.is_paid,
            "startDate": self.start_date.isoformat() if self.start_date else None,
            "dueDate": self.due_date.isoformat() if self.due_date else None,
        }


class Task(Base, TimestampMixin):
    """
    Task model.

    Belongs to a project; ownership is inherited from it.
    """

    __tablename__ = "tasks"

    # Primary Key
    task_id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
    )

    # Foreign Keys
    project_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("projects.project_id", ondelete="CASCADE"),
        nullable=False,
    )
    status_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("statuses.status_id"),
        default=int(WorkStatus.NOT_STARTED),
        nullable=False,
    )

    name: Mapped[str] = mapped_column(String(150), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    importance: Mapped[int] = mapped_column(SmallInteger, default=3, nullable=False)
    estimated_hours: Mapped[Optional[Decimal]] = mapped_column(Numeric(6, 2), nullable=True)
    start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    due_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    completed_at: Mapped[Optional[datetime]] = mapped_column(nullable=True)

    # Relationships
    project: Mapped["Project"] = relationship("Project", back_populates="tasks")
    status: Mapped["Status"] = relationship("Status")

    __table_args__ = (
        Index("idx_tasks_project_status", "project_id", "status_id"),
    )

    @property
    def is_completed(self) -> bool:
        return self.status_id == WorkStatus.COMPLETED

    def __repr__(self) -> str:
        return f"<Task {self.name}>"

    def to_api_dict(self) -> dict:
        return {
            "id": str(self.task_id),
            "projectId": str(self.project_id),
            "name": self.name,
            "description": self.description,
            "importance": self.importance,
            "estimatedHours": (
                float(self.estimated_hours) if self.estimated_hours is not None else None
            ),
            "statusId": self.status_id,
            "isCompleted": self.is_completed,
            "startDate": self.start_date.isoformat() if self.start_date else None,
            "dueDate": self.due_date.isoformat() if self.due_date else None,
            "completedAt": self.completed_at.isoformat() if self.completed_at else None,
        }
