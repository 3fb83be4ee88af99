"""create cohort effort tables

Revision ID: 4c1d2e7a9b10
Revises:
Create Date: 2026-10-19 09:12:44.218305

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "4c1d2e7a9b10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "cohorts",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("skill", sa.String(length=100), nullable=True),
        sa.Column("training_location", sa.String(length=100), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("primary_trainer_name", sa.String(length=100), nullable=True),
        sa.Column("primary_mentor_name", sa.String(length=100), nullable=True),
        sa.Column("buddy_mentor_name", sa.String(length=100), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.UniqueConstraint("code"),
    )
    op.create_index("ix_cohorts_id", "cohorts", ["id"])

    op.create_table(
        "stakeholder_efforts",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "cohort_id",
            sa.Integer(),
            sa.ForeignKey("cohorts.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("role", sa.String(length=20), nullable=False),
        sa.Column("stakeholder_name", sa.String(length=100), nullable=False),
        sa.Column("effort_date", sa.Date(), nullable=False),
        sa.Column("effort_hours", sa.Numeric(10, 2), nullable=False),
        sa.Column("area_of_work", sa.String(length=1000), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("ix_stakeholder_efforts_id", "stakeholder_efforts", ["id"])
    op.create_index(
        "ix_stakeholder_efforts_cohort_id", "stakeholder_efforts", ["cohort_id"]
    )
    op.create_index(
        "ix_stakeholder_efforts_effort_date", "stakeholder_efforts", ["effort_date"]
    )

    op.create_table(
        "weekly_effort_summary",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "cohort_id",
            sa.Integer(),
            sa.ForeignKey("cohorts.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("week_start_date", sa.Date(), nullable=False),
        sa.Column("week_end_date", sa.Date(), nullable=False),
        sa.Column("total_hours", sa.Numeric(10, 2), nullable=False),
        sa.Column("summary_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.UniqueConstraint(
            "cohort_id", "week_start_date", name="uq_cohort_week_start"
        ),
    )
    op.create_index("ix_weekly_effort_summary_id", "weekly_effort_summary", ["id"])
    op.create_index(
        "ix_weekly_effort_summary_cohort_id", "weekly_effort_summary", ["cohort_id"]
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(
        "ix_weekly_effort_summary_cohort_id", table_name="weekly_effort_summary"
    )
    op.drop_index("ix_weekly_effort_summary_id", table_name="weekly_effort_summary")
    op.drop_table("weekly_effort_summary")
    op.drop_index(
        "ix_stakeholder_efforts_effort_date", table_name="stakeholder_efforts"
    )
    op.drop_index("ix_stakeholder_efforts_cohort_id", table_name="stakeholder_efforts")
    op.drop_index("ix_stakeholder_efforts_id", table_name="stakeholder_efforts")
    op.drop_table("stakeholder_efforts")
    op.drop_index("ix_cohorts_id", table_name="cohorts")
    op.drop_table("cohorts")
