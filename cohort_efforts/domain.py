"""Domain types for cohort effort logging.

All types are immutable. A draft is a plain ``dict`` from ISO date to
``DayLog``; edits produce a new dict rather than mutating the old one.
"""

from dataclasses import dataclass
from dataclasses import field
from datetime import date
from datetime import datetime
from datetime import timedelta
from enum import StrEnum

WORKING_DAYS_PER_WEEK = 5
DAYS_PER_WEEK = 7


class EffortRole(StrEnum):
    """Stakeholder roles that effort can be logged for."""

    TRAINER = "TRAINER"
    MENTOR = "MENTOR"
    BUDDY_MENTOR = "BUDDY_MENTOR"

    @property
    def field_name(self) -> str:
        """Name of the ``DayLog`` attribute holding this role's entry."""
        return _ROLE_FIELDS[self]


_ROLE_FIELDS = {
    EffortRole.TRAINER: "trainer",
    EffortRole.MENTOR: "mentor",
    EffortRole.BUDDY_MENTOR: "buddy_mentor",
}


class WeekStatus(StrEnum):
    """Editability of a week bucket."""

    LOCKED = "locked"
    ACTIVE = "active"
    COMPLETED = "completed"
    OPEN = "open"


def working_span_end(start_date: date, end_date: date) -> date:
    """End of the stored span of a week starting on start_date.

    A clamped final week still offers five working days, so its span can
    reach past end_date.
    """
    return max(end_date, start_date + timedelta(days=WORKING_DAYS_PER_WEEK - 1))


@dataclass(frozen=True)
class CohortPeriod:
    start_date: date
    end_date: date


@dataclass(frozen=True)
class Week:
    """One numbered 7-day bucket of a cohort period."""

    id: str
    week_number: int
    start_date: date
    end_date: date

    @property
    def working_days(self) -> list[date]:
        """The five loggable days, starting at the bucket's first day."""
        return [
            self.start_date + timedelta(days=offset)
            for offset in range(WORKING_DAYS_PER_WEEK)
        ]

    @property
    def working_end(self) -> date:
        """Last date that holds effort for this week, working days included."""
        return working_span_end(self.start_date, self.end_date)

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


@dataclass(frozen=True)
class RoleEntry:
    hours: float = 0.0
    notes: str = ""


@dataclass(frozen=True)
class DayLog:
    """One day's effort for all three roles."""

    date: str
    is_holiday: bool = False
    trainer: RoleEntry = field(default_factory=RoleEntry)
    mentor: RoleEntry = field(default_factory=RoleEntry)
    buddy_mentor: RoleEntry = field(default_factory=RoleEntry)

    def entry(self, role: EffortRole) -> RoleEntry:
        return getattr(self, role.field_name)


Draft = dict[str, DayLog]


@dataclass(frozen=True)
class EffortRecord:
    """Authoritative effort stored by the backend for one date and role."""

    effort_date: str
    role: EffortRole
    effort_hours: float
    area_of_work: str = ""


@dataclass(frozen=True)
class WeeklySummary:
    """Stored total for a submitted week. Its existence marks the week completed."""

    id: int
    week_start_date: str
    week_end_date: str
    total_hours: float
    summary_date: datetime | None = None


@dataclass(frozen=True)
class CohortDetail:
    """Cohort lookup result: the period plus role display names."""

    id: int
    code: str
    period: CohortPeriod
    primary_trainer: str | None = None
    primary_mentor: str | None = None
    buddy_mentor: str | None = None

    def stakeholder(self, role: EffortRole) -> str | None:
        return getattr(self, _COHORT_STAKEHOLDER_FIELDS[role])


_COHORT_STAKEHOLDER_FIELDS = {
    EffortRole.TRAINER: "primary_trainer",
    EffortRole.MENTOR: "primary_mentor",
    EffortRole.BUDDY_MENTOR: "buddy_mentor",
}


@dataclass(frozen=True)
class SubmissionRequest:
    """A whole week of day logs, submitted as one record."""

    cohort_id: int
    week_start_date: str
    week_end_date: str
    day_logs: tuple[DayLog, ...]
    location: str | None = None
