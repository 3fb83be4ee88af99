from datetime import date
from datetime import datetime

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic.alias_generators import to_camel

from cohort_efforts.domain import CohortDetail
from cohort_efforts.domain import CohortPeriod
from cohort_efforts.domain import DayLog
from cohort_efforts.domain import EffortRecord
from cohort_efforts.domain import EffortRole
from cohort_efforts.domain import RoleEntry
from cohort_efforts.domain import SubmissionRequest
from cohort_efforts.domain import Week
from cohort_efforts.domain import WeeklySummary
from cohort_efforts.domain import WeekStatus


class CamelModel(BaseModel):
    """Base model serialized with camelCase field names on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RoleEntrySchema(CamelModel):
    hours: float = Field(default=0, ge=0)
    notes: str = ""


class DayLogSchema(CamelModel):
    """One day of effort for the trainer, mentor and buddy mentor."""

    date: date
    is_holiday: bool = False
    trainer: RoleEntrySchema = Field(default_factory=RoleEntrySchema)
    mentor: RoleEntrySchema = Field(default_factory=RoleEntrySchema)
    buddy_mentor: RoleEntrySchema = Field(default_factory=RoleEntrySchema)

    @classmethod
    def from_domain(cls, day_log: DayLog) -> "DayLogSchema":
        return cls(
            date=date.fromisoformat(day_log.date),
            is_holiday=day_log.is_holiday,
            trainer=RoleEntrySchema(**vars(day_log.trainer)),
            mentor=RoleEntrySchema(**vars(day_log.mentor)),
            buddy_mentor=RoleEntrySchema(**vars(day_log.buddy_mentor)),
        )

    def to_domain(self) -> DayLog:
        return DayLog(
            date=self.date.isoformat(),
            is_holiday=self.is_holiday,
            trainer=RoleEntry(hours=self.trainer.hours, notes=self.trainer.notes),
            mentor=RoleEntry(hours=self.mentor.hours, notes=self.mentor.notes),
            buddy_mentor=RoleEntry(
                hours=self.buddy_mentor.hours, notes=self.buddy_mentor.notes
            ),
        )


class WeeklyEffortSubmission(CamelModel):
    """Wire format of a whole-week submission."""

    cohort_id: int
    week_start_date: date
    week_end_date: date
    day_logs: list[DayLogSchema]
    location: str | None = None

    @classmethod
    def from_domain(cls, request: SubmissionRequest) -> "WeeklyEffortSubmission":
        return cls(
            cohort_id=request.cohort_id,
            week_start_date=date.fromisoformat(request.week_start_date),
            week_end_date=date.fromisoformat(request.week_end_date),
            day_logs=[DayLogSchema.from_domain(day_log) for day_log in request.day_logs],
            location=request.location,
        )

    def to_domain(self) -> SubmissionRequest:
        return SubmissionRequest(
            cohort_id=self.cohort_id,
            week_start_date=self.week_start_date.isoformat(),
            week_end_date=self.week_end_date.isoformat(),
            day_logs=tuple(day_log.to_domain() for day_log in self.day_logs),
            location=self.location,
        )


class CohortCreate(CamelModel):
    code: str = Field(min_length=1, max_length=50)
    start_date: date
    end_date: date
    skill: str | None = None
    training_location: str | None = None
    primary_trainer: str | None = None
    primary_mentor: str | None = None
    buddy_mentor: str | None = None


class CohortResponse(CamelModel):
    """Cohort lookup payload: the period and the assigned stakeholders."""

    id: int
    code: str
    start_date: date
    end_date: date
    skill: str | None = None
    training_location: str | None = None
    primary_trainer: str | None = None
    primary_mentor: str | None = None
    buddy_mentor: str | None = None

    def to_domain(self) -> CohortDetail:
        return CohortDetail(
            id=self.id,
            code=self.code,
            period=CohortPeriod(start_date=self.start_date, end_date=self.end_date),
            primary_trainer=self.primary_trainer,
            primary_mentor=self.primary_mentor,
            buddy_mentor=self.buddy_mentor,
        )


class WeekResponse(CamelModel):
    id: str
    week_number: int
    start_date: date
    end_date: date
    status: WeekStatus

    @classmethod
    def from_domain(cls, week: Week, status: WeekStatus) -> "WeekResponse":
        return cls(
            id=week.id,
            week_number=week.week_number,
            start_date=week.start_date,
            end_date=week.end_date,
            status=status,
        )


class CohortCalendarResponse(CamelModel):
    """Week buckets of a cohort with their status as of `today`."""

    cohort_id: int
    today: date
    selected_week_id: str | None
    daily_hours_guidance: float
    weeks: list[WeekResponse]


class DraftResponse(CamelModel):
    cohort_id: int
    week_id: str
    week_number: int
    day_logs: list[DayLogSchema]


class EffortRecordSchema(CamelModel):
    effort_date: date
    role: EffortRole
    effort_hours: float = 0
    area_of_work: str | None = None

    @classmethod
    def from_domain(cls, record: EffortRecord) -> "EffortRecordSchema":
        return cls(
            effort_date=date.fromisoformat(record.effort_date),
            role=record.role,
            effort_hours=record.effort_hours,
            area_of_work=record.area_of_work,
        )

    def to_domain(self) -> EffortRecord:
        return EffortRecord(
            effort_date=self.effort_date.isoformat(),
            role=self.role,
            effort_hours=self.effort_hours,
            area_of_work=self.area_of_work or "",
        )


class WeeklySummarySchema(CamelModel):
    id: int
    week_start_date: date
    week_end_date: date
    total_hours: float
    summary_date: datetime | None = None

    @classmethod
    def from_domain(cls, summary: WeeklySummary) -> "WeeklySummarySchema":
        return cls(
            id=summary.id,
            week_start_date=date.fromisoformat(summary.week_start_date),
            week_end_date=date.fromisoformat(summary.week_end_date),
            total_hours=summary.total_hours,
            summary_date=summary.summary_date,
        )

    def to_domain(self) -> WeeklySummary:
        return WeeklySummary(
            id=self.id,
            week_start_date=self.week_start_date.isoformat(),
            week_end_date=self.week_end_date.isoformat(),
            total_hours=self.total_hours,
            summary_date=self.summary_date,
        )
