"""
Database Models
===============

SQLAlchemy ORM models for all database entities.

All models are imported here to ensure they are registered
with SQLAlchemy's metadata for migrations and relationships.
"""

from deskflow.models.catalog import (
    ClientType,
    Currency,
    Profession,
    ProjectType,
    Skill,
    Status,
    VisualTheme,
    WorkStatus,
    profession_skills,
    profile_themes,
)
from deskflow.models.account import Account, Profile
from deskflow.models.client import Client
from deskflow.models.project import Project, Task
from deskflow.models.finance import Expense, Income

__all__ = [
    # Catalogs
    "ClientType",
    "Currency",
    "Profession",
    "ProjectType",
    "Skill",
    "Status",
    "VisualTheme",
    "WorkStatus",
    "profession_skills",
    "profile_themes",
    # Accounts
    "Account",
    "Profile",
    # Clients
    "Client",
    # Projects
    "Project",
    "Task",
    # Finances
    "Expense",
    "Income",
]
