from datetime import date
from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime
from sqlalchemy import Date
from sqlalchemy import ForeignKey
from sqlalchemy import Numeric
from sqlalchemy import String
from sqlalchemy import UniqueConstraint
from sqlalchemy import func
from sqlalchemy.orm import Mapped
from sqlalchemy.orm import mapped_column
from sqlalchemy.orm import relationship

from cohort_efforts.db import Base


class Cohort(Base):
    __tablename__ = "cohorts"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    code: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    skill: Mapped[str | None] = mapped_column(String(100), nullable=True)
    training_location: Mapped[str | None] = mapped_column(String(100), nullable=True)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    primary_trainer_name: Mapped[str | None] = mapped_column(String(100))
    primary_mentor_name: Mapped[str | None] = mapped_column(String(100))
    buddy_mentor_name: Mapped[str | None] = mapped_column(String(100))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    efforts: Mapped[list["StakeholderEffort"]] = relationship(
        back_populates="cohort", cascade="all, delete-orphan"
    )
    weekly_summaries: Mapped[list["WeeklySummaryRow"]] = relationship(
        back_populates="cohort", cascade="all, delete-orphan"
    )


class StakeholderEffort(Base):
    __tablename__ = "stakeholder_efforts"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    cohort_id: Mapped[int] = mapped_column(
        ForeignKey("cohorts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    stakeholder_name: Mapped[str] = mapped_column(String(100), nullable=False)
    effort_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    effort_hours: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    area_of_work: Mapped[str] = mapped_column(String(1000), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    cohort: Mapped[Cohort] = relationship(back_populates="efforts")


class WeeklySummaryRow(Base):
    __tablename__ = "weekly_effort_summary"
    __table_args__ = (
        UniqueConstraint("cohort_id", "week_start_date", name="uq_cohort_week_start"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    cohort_id: Mapped[int] = mapped_column(
        ForeignKey("cohorts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    week_start_date: Mapped[date] = mapped_column(Date, nullable=False)
    week_end_date: Mapped[date] = mapped_column(Date, nullable=False)
    total_hours: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    summary_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    cohort: Mapped[Cohort] = relationship(back_populates="weekly_summaries")
