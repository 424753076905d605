"""Initial schema: accounts, profiles, clients, projects, tasks, finances

Revision ID: 3f1c9a7d2b10
Revises:
Create Date: 2026-10-19 09:00:00.000000+00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3f1c9a7d2b10"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


STATUSES = [
    {"status_id": 1, "name": "Not started", "color": "#9CA3AF"},
    {"status_id": 2, "name": "In progress", "color": "#3B82F6"},
    {"status_id": 3, "name": "Paused", "color": "#F59E0B"},
    {"status_id": 4, "name": "Completed", "color": "#10B981"},
    {"status_id": 5, "name": "Cancelled", "color": "#EF4444"},
]

CURRENCIES = [
    {"currency_id": 1, "code": "USD", "name": "US Dollar", "symbol": "$"},
    {"currency_id": 2, "code": "EUR", "name": "Euro", "symbol": "€"},
    {"currency_id": 3, "code": "MXN", "name": "Mexican Peso", "symbol": "$"},
    {"currency_id": 4, "code": "GBP", "name": "British Pound", "symbol": "£"},
]

CLIENT_TYPES = [
    {"client_type_id": 1, "name": "Company", "description": "Business or organization"},
    {"client_type_id": 2, "name": "Individual", "description": "Private person"},
    {"client_type_id": 3, "name": "Agency", "description": "Agency subcontracting work"},
]

PROJECT_TYPES = [
    {"project_type_id": 1, "name": "Web development", "is_active": True},
    {"project_type_id": 2, "name": "Design", "is_active": True},
    {"project_type_id": 3, "name": "Consulting", "is_active": True},
    {"project_type_id": 4, "name": "Writing", "is_active": True},
]


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def upgrade() -> None:
    """Upgrade database schema."""

    # ------------------------------------------------------------------
    # 1. Catalogs
    # ------------------------------------------------------------------
    statuses = op.create_table(
        "statuses",
        sa.Column("status_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(50), nullable=False, unique=True),
        sa.Column("color", sa.String(7), nullable=True),
    )
    currencies = op.create_table(
        "currencies",
        sa.Column("currency_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("code", sa.String(3), nullable=False, unique=True),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("symbol", sa.String(5), nullable=True),
    )
    client_types = op.create_table(
        "client_types",
        sa.Column("client_type_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
    )
    project_types = op.create_table(
        "project_types",
        sa.Column("project_type_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
    )
    op.create_table(
        "skills",
        sa.Column("skill_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False),
    )
    op.create_table(
        "professions",
        sa.Column("profession_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
    )
    op.create_table(
        "profession_skills",
        sa.Column(
            "profession_id",
            sa.Integer(),
            sa.ForeignKey("professions.profession_id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "skill_id",
            sa.Integer(),
            sa.ForeignKey("skills.skill_id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )
    op.create_table(
        "visual_themes",
        sa.Column("theme_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("primary_color", sa.String(7), nullable=False),
        sa.Column("secondary_color", sa.String(7), nullable=False),
        sa.Column("tertiary_color", sa.String(7), nullable=True),
        sa.Column("background_color", sa.String(7), nullable=True),
        sa.Column("text_color", sa.String(7), nullable=True),
        sa.Column("accent_color", sa.String(7), nullable=True),
        sa.Column("price", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("icon", sa.String(50), nullable=True),
    )

    # ------------------------------------------------------------------
    # 2. Profiles & accounts
    # ------------------------------------------------------------------
    op.create_table(
        "profiles",
        sa.Column("profile_id", sa.Uuid(), primary_key=True),
        sa.Column("display_name", sa.String(100), nullable=False),
        sa.Column("avatar", sa.Text(), nullable=True),
        sa.Column("birth_date", sa.Date(), nullable=True),
        sa.Column("locale", sa.String(10), nullable=True),
        sa.Column("dark_mode", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "preferred_theme_id",
            sa.Integer(),
            sa.ForeignKey("visual_themes.theme_id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "profession_id",
            sa.Integer(),
            sa.ForeignKey("professions.profession_id", ondelete="SET NULL"),
            nullable=True,
        ),
        *_timestamps(),
    )
    op.create_table(
        "profile_themes",
        sa.Column(
            "profile_id",
            sa.Uuid(),
            sa.ForeignKey("profiles.profile_id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "theme_id",
            sa.Integer(),
            sa.ForeignKey("visual_themes.theme_id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )
    op.create_table(
        "accounts",
        sa.Column("account_id", sa.Uuid(), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("display_name", sa.String(100), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "profile_id",
            sa.Uuid(),
            sa.ForeignKey("profiles.profile_id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        *_timestamps(),
    )
    op.create_index("ix_accounts_email", "accounts", ["email"], unique=True)

    # ------------------------------------------------------------------
    # 3. Clients, projects, tasks
    # ------------------------------------------------------------------
    op.create_table(
        "clients",
        sa.Column("client_id", sa.Uuid(), primary_key=True),
        sa.Column(
            "profile_id",
            sa.Uuid(),
            sa.ForeignKey("profiles.profile_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "client_type_id",
            sa.Integer(),
            sa.ForeignKey("client_types.client_type_id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("email", sa.String(150), nullable=True),
        sa.Column("phone", sa.String(30), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("registered_at", sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
    )
    op.create_index("idx_clients_profile_active", "clients", ["profile_id", "is_active"])

    op.create_table(
        "projects",
        sa.Column("project_id", sa.Uuid(), primary_key=True),
        sa.Column(
            "profile_id",
            sa.Uuid(),
            sa.ForeignKey("profiles.profile_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "client_id",
            sa.Uuid(),
            sa.ForeignKey("clients.client_id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column(
            "project_type_id",
            sa.Integer(),
            sa.ForeignKey("project_types.project_type_id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("status_id", sa.Integer(), sa.ForeignKey("statuses.status_id"), nullable=False),
        sa.Column("name", sa.String(150), nullable=False),
        sa.Column("budget", sa.Numeric(14, 2), nullable=True),
        sa.Column("is_archived", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_pinned", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_paid", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("due_date", sa.Date(), nullable=True),
        *_timestamps(),
    )
    op.create_index(
        "idx_projects_profile_pinned_start",
        "projects",
        ["profile_id", "is_pinned", "start_date"],
    )

    op.create_table(
        "tasks",
        sa.Column("task_id", sa.Uuid(), primary_key=True),
        sa.Column(
            "project_id",
            sa.Uuid(),
            sa.ForeignKey("projects.project_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("status_id", sa.Integer(), sa.ForeignKey("statuses.status_id"), nullable=False),
        sa.Column("name", sa.String(150), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("importance", sa.SmallInteger(), nullable=False, server_default="3"),
        sa.Column("estimated_hours", sa.Numeric(6, 2), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("importance BETWEEN 1 AND 5", name="ck_tasks_importance"),
        *_timestamps(),
    )
    op.create_index("idx_tasks_project_status", "tasks", ["project_id", "status_id"])

    # ------------------------------------------------------------------
    # 4. Finances
    # ------------------------------------------------------------------
    for table, id_column, extra in (
        ("expenses", "expense_id", [
            sa.Column("is_deductible", sa.Boolean(), nullable=False, server_default=sa.false()),
        ]),
        ("incomes", "income_id", []),
    ):
        op.create_table(
            table,
            sa.Column(id_column, sa.Uuid(), primary_key=True),
            sa.Column("amount", sa.Numeric(14, 2), nullable=False),
            sa.Column("date", sa.Date(), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column(
                "account_id",
                sa.Uuid(),
                sa.ForeignKey("accounts.account_id", ondelete="CASCADE"),
                nullable=False,
            ),
            sa.Column(
                "project_id",
                sa.Uuid(),
                sa.ForeignKey("projects.project_id", ondelete="SET NULL"),
                nullable=True,
            ),
            sa.Column(
                "currency_id",
                sa.Integer(),
                sa.ForeignKey("currencies.currency_id"),
                nullable=False,
            ),
            *extra,
            sa.CheckConstraint("amount > 0", name=f"ck_{table}_amount_positive"),
            *_timestamps(),
        )
        op.create_index(f"idx_{table}_account_date", table, ["account_id", "date"])

    # ------------------------------------------------------------------
    # 5. Seed catalogs
    # ------------------------------------------------------------------
    op.bulk_insert(statuses, STATUSES)
    op.bulk_insert(currencies, CURRENCIES)
    op.bulk_insert(client_types, CLIENT_TYPES)
    op.bulk_insert(project_types, PROJECT_TYPES)

    # Explicit ids above leave the serial sequences behind
    for table, column in (
        ("statuses", "status_id"),
        ("currencies", "currency_id"),
        ("client_types", "client_type_id"),
        ("project_types", "project_type_id"),
    ):
        op.execute(
            f"SELECT setval(pg_get_serial_sequence('{table}', '{column}'), "
            f"(SELECT MAX({column}) FROM {table}))"
        )


def downgrade() -> None:
    """Downgrade database schema."""
    for table in (
        "incomes",
        "expenses",
        "tasks",
        "projects",
        "clients",
        "accounts",
        "profile_themes",
        "profiles",
        "visual_themes",
        "profession_skills",
        "professions",
        "skills",
        "project_types",
        "client_types",
        "currencies",
        "statuses",
    ):
        op.drop_table(table)
