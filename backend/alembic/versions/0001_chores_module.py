"""chores module

Revision ID: 0001_chores_module
Revises:
Create Date: 2026-03-01 09:00:00.000000
"""

from alembic import op
import sqlalchemy as sa

revision = "0001_chores_module"
down_revision = None
branch_labels = None
depends_on = None

SCHEMA = "chores"


def _create_schema() -> None:
    dialect = op.get_bind().dialect.name
    if dialect == "mssql":
        op.execute(
            f"IF NOT EXISTS (SELECT 1 FROM sys.schemas WHERE name = '{SCHEMA}') "
            f"EXEC('CREATE SCHEMA {SCHEMA}')"
        )
    elif dialect == "postgresql":
        op.execute(f"CREATE SCHEMA IF NOT EXISTS {SCHEMA}")


def upgrade() -> None:
    _create_schema()

    op.create_table(
        "household_members",
        sa.Column("Id", sa.Integer(), primary_key=True),
        sa.Column("Name", sa.String(length=120), nullable=False),
        sa.Column("CanEditChores", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "CreatedAt",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        schema=SCHEMA,
    )
    op.create_index("ix_chores_household_members_Id", "household_members", ["Id"], schema=SCHEMA)

    op.create_table(
        "task_templates",
        sa.Column("Id", sa.Integer(), primary_key=True),
        sa.Column("Name", sa.String(length=200), nullable=False),
        sa.Column("Category", sa.String(length=100), nullable=False, server_default=""),
        sa.Column(
            "AssignedToId",
            sa.Integer(),
            sa.ForeignKey(f"{SCHEMA}.household_members.Id"),
            nullable=False,
        ),
        sa.Column("FrequencyType", sa.String(length=30), nullable=False, server_default="DAILY"),
        sa.Column("DayOfWeek", sa.Integer(), nullable=True),
        sa.Column("WeekOfMonth", sa.Integer(), nullable=True),
        sa.Column("DayOfMonth", sa.Integer(), nullable=True),
        sa.Column("SemiannualMonths", sa.String(length=50), nullable=True),
        sa.Column("ConditionalAfterTime", sa.String(length=5), nullable=True),
        sa.Column("TimeBlock", sa.String(length=20), nullable=False, server_default="ANY"),
        sa.Column("PointsBase", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("Active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "CreatedAt",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "UpdatedAt",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        schema=SCHEMA,
    )
    op.create_index("ix_chores_task_templates_Id", "task_templates", ["Id"], schema=SCHEMA)
    op.create_index(
        "ix_chores_task_templates_AssignedToId",
        "task_templates",
        ["AssignedToId"],
        schema=SCHEMA,
    )

    op.create_table(
        "task_instances",
        sa.Column("Id", sa.Integer(), primary_key=True),
        sa.Column(
            "TemplateId",
            sa.Integer(),
            sa.ForeignKey(f"{SCHEMA}.task_templates.Id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "AssignedToId",
            sa.Integer(),
            sa.ForeignKey(f"{SCHEMA}.household_members.Id"),
            nullable=False,
        ),
        sa.Column("TaskDate", sa.Date(), nullable=False),
        sa.Column("Status", sa.String(length=20), nullable=False, server_default="PENDING"),
        sa.Column("DoneAt", sa.DateTime(timezone=True), nullable=True),
        sa.Column("DoneWithoutReminder", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("ComplaintLogged", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("IsExtra", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("Notes", sa.Text(), nullable=True),
        sa.Column("AvailableAfter", sa.String(length=5), nullable=True),
        sa.Column(
            "CreatedAt",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.UniqueConstraint("TemplateId", "TaskDate", name="uq_chores_instances_template_date"),
        schema=SCHEMA,
    )
    op.create_index("ix_chores_task_instances_Id", "task_instances", ["Id"], schema=SCHEMA)
    op.create_index(
        "ix_chores_task_instances_TemplateId",
        "task_instances",
        ["TemplateId"],
        schema=SCHEMA,
    )
    op.create_index(
        "ix_chores_task_instances_TaskDate",
        "task_instances",
        ["TaskDate"],
        schema=SCHEMA,
    )
    op.create_index(
        "ix_chores_instances_assignee_date",
        "task_instances",
        ["AssignedToId", "TaskDate"],
        schema=SCHEMA,
    )


def downgrade() -> None:
    op.drop_index("ix_chores_instances_assignee_date", table_name="task_instances", schema=SCHEMA)
    op.drop_index("ix_chores_task_instances_TaskDate", table_name="task_instances", schema=SCHEMA)
    op.drop_index("ix_chores_task_instances_TemplateId", table_name="task_instances", schema=SCHEMA)
    op.drop_index("ix_chores_task_instances_Id", table_name="task_instances", schema=SCHEMA)
    op.drop_table("task_instances", schema=SCHEMA)

    op.drop_index("ix_chores_task_templates_AssignedToId", table_name="task_templates", schema=SCHEMA)
    op.drop_index("ix_chores_task_templates_Id", table_name="task_templates", schema=SCHEMA)
    op.drop_table("task_templates", schema=SCHEMA)

    op.drop_index("ix_chores_household_members_Id", table_name="household_members", schema=SCHEMA)
    op.drop_table("household_members", schema=SCHEMA)
