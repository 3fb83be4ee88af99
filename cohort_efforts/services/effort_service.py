"""Persistence of cohorts, effort records and weekly summaries.

This is the backend side of the effort-record, weekly-summary and submission
contracts. A weekly submission replaces the stored efforts of its week and
upserts the week's summary in one transaction.
"""

from datetime import date
from datetime import datetime
from datetime import UTC
from decimal import Decimal

from loguru import logger
from sqlalchemy import delete
from sqlalchemy import func
from sqlalchemy import select
from sqlalchemy.orm import Session

from cohort_efforts.core.errors import CohortNotFoundError
from cohort_efforts.core.errors import InvalidRangeError
from cohort_efforts.domain import CohortDetail
from cohort_efforts.domain import CohortPeriod
from cohort_efforts.domain import EffortRecord
from cohort_efforts.domain import EffortRole
from cohort_efforts.domain import SubmissionRequest
from cohort_efforts.domain import WeeklySummary
from cohort_efforts.domain import working_span_end
from cohort_efforts.models import Cohort
from cohort_efforts.models import StakeholderEffort
from cohort_efforts.models import WeeklySummaryRow

DEFAULT_AREA_OF_WORK = "Daily effort logging"

_STAKEHOLDER_COLUMNS = {
    EffortRole.TRAINER: "primary_trainer_name",
    EffortRole.MENTOR: "primary_mentor_name",
    EffortRole.BUDDY_MENTOR: "buddy_mentor_name",
}


def to_cohort_detail(cohort: Cohort) -> CohortDetail:
    return CohortDetail(
        id=cohort.id,
        code=cohort.code,
        period=CohortPeriod(start_date=cohort.start_date, end_date=cohort.end_date),
        primary_trainer=cohort.primary_trainer_name,
        primary_mentor=cohort.primary_mentor_name,
        buddy_mentor=cohort.buddy_mentor_name,
    )


def to_effort_record(effort: StakeholderEffort) -> EffortRecord:
    return EffortRecord(
        effort_date=effort.effort_date.isoformat(),
        role=EffortRole(effort.role),
        effort_hours=float(effort.effort_hours),
        area_of_work=effort.area_of_work,
    )


def to_weekly_summary(row: WeeklySummaryRow) -> WeeklySummary:
    return WeeklySummary(
        id=row.id,
        week_start_date=row.week_start_date.isoformat(),
        week_end_date=row.week_end_date.isoformat(),
        total_hours=float(row.total_hours),
        summary_date=row.summary_date,
    )


def create_cohort(
    db: Session,
    code: str,
    start_date: date,
    end_date: date,
    skill: str | None = None,
    training_location: str | None = None,
    primary_trainer: str | None = None,
    primary_mentor: str | None = None,
    buddy_mentor: str | None = None,
) -> Cohort:
    if start_date > end_date:
        raise InvalidRangeError(start_date, end_date)

    cohort = Cohort(
        code=code,
        skill=skill,
        training_location=training_location,
        start_date=start_date,
        end_date=end_date,
        primary_trainer_name=primary_trainer,
        primary_mentor_name=primary_mentor,
        buddy_mentor_name=buddy_mentor,
    )
    db.add(cohort)
    db.commit()
    db.refresh(cohort)
    logger.info(f"[EFFORTS] Created cohort id={cohort.id} code={cohort.code}")
    return cohort


def get_cohort(db: Session, cohort_id: int) -> Cohort:
    """Load a cohort by id.

    Raises:
        CohortNotFoundError: If no cohort has the given id.
    """

    cohort = db.get(Cohort, cohort_id)
    if cohort is None:
        raise CohortNotFoundError(f"cohort {cohort_id} not found")
    return cohort


def find_cohort_by_code(db: Session, code: str) -> Cohort | None:
    return db.scalar(select(Cohort).where(Cohort.code == code))


def list_cohorts(db: Session) -> list[Cohort]:
    return list(db.scalars(select(Cohort).order_by(Cohort.code.asc())).all())


def list_effort_records(
    db: Session, cohort_id: int, start_date: date, end_date: date
) -> list[EffortRecord]:
    """Return stored efforts of a cohort within start_date..end_date inclusive."""

    efforts = db.scalars(
        select(StakeholderEffort)
        .where(StakeholderEffort.cohort_id == cohort_id)
        .where(StakeholderEffort.effort_date >= start_date)
        .where(StakeholderEffort.effort_date <= end_date)
        .order_by(StakeholderEffort.effort_date.asc(), StakeholderEffort.id.asc())
    ).all()
    return [to_effort_record(effort) for effort in efforts]


def list_weekly_summaries(db: Session, cohort_id: int) -> list[WeeklySummary]:
    rows = db.scalars(
        select(WeeklySummaryRow)
        .where(WeeklySummaryRow.cohort_id == cohort_id)
        .order_by(WeeklySummaryRow.week_start_date.asc())
    ).all()
    return [to_weekly_summary(row) for row in rows]


def submit_weekly_effort(db: Session, request: SubmissionRequest) -> WeeklySummary:
    """Replace a week's stored efforts with the submitted day logs.

    The replaced span is the week plus any of its five working days that
    fall after a clamped week end. Holidays are skipped. Only role entries
    with positive hours are stored, and only for roles that have a
    stakeholder assigned on the cohort.

    Raises:
        CohortNotFoundError: If the cohort does not exist.
        InvalidRangeError: If the week starts after it ends.
    """

    cohort = get_cohort(db, request.cohort_id)
    week_start = date.fromisoformat(request.week_start_date)
    week_end = date.fromisoformat(request.week_end_date)
    if week_start > week_end:
        raise InvalidRangeError(week_start, week_end)
    span_end = working_span_end(week_start, week_end)

    db.execute(
        delete(StakeholderEffort)
        .where(StakeholderEffort.cohort_id == cohort.id)
        .where(StakeholderEffort.effort_date >= week_start)
        .where(StakeholderEffort.effort_date <= span_end)
    )

    saved_count = 0
    for day_log in request.day_logs:
        if day_log.is_holiday:
            continue
        for role in EffortRole:
            entry = day_log.entry(role)
            if entry.hours <= 0:
                continue
            stakeholder = getattr(cohort, _STAKEHOLDER_COLUMNS[role])
            if not stakeholder:
                logger.warning(
                    f"[EFFORTS] Cohort {cohort.id} has no {role.value} assigned; "
                    f"dropping {entry.hours}h on {day_log.date}"
                )
                continue
            db.add(
                StakeholderEffort(
                    cohort_id=cohort.id,
                    role=role.value,
                    stakeholder_name=stakeholder,
                    effort_date=date.fromisoformat(day_log.date),
                    effort_hours=Decimal(str(entry.hours)),
                    area_of_work=entry.notes.strip() or DEFAULT_AREA_OF_WORK,
                )
            )
            saved_count += 1

    db.flush()
    summary = _upsert_weekly_summary(db, cohort.id, week_start, week_end, span_end)
    db.commit()
    db.refresh(summary)

    logger.info(
        f"[EFFORTS] Stored week {week_start}..{week_end} for cohort {cohort.id}: "
        f"{saved_count} entries, {summary.total_hours}h"
    )
    return to_weekly_summary(summary)


def _upsert_weekly_summary(
    db: Session,
    cohort_id: int,
    week_start: date,
    week_end: date,
    span_end: date,
) -> WeeklySummaryRow:
    total = db.scalar(
        select(func.sum(StakeholderEffort.effort_hours))
        .where(StakeholderEffort.cohort_id == cohort_id)
        .where(StakeholderEffort.effort_date >= week_start)
        .where(StakeholderEffort.effort_date <= span_end)
    )
    total_hours = Decimal(str(total)) if total is not None else Decimal("0")

    summary = db.scalar(
        select(WeeklySummaryRow).where(
            WeeklySummaryRow.cohort_id == cohort_id,
            WeeklySummaryRow.week_start_date == week_start,
        )
    )
    if summary is None:
        summary = WeeklySummaryRow(
            cohort_id=cohort_id,
            week_start_date=week_start,
            week_end_date=week_end,
            total_hours=total_hours,
        )
        db.add(summary)
    else:
        summary.week_end_date = week_end
        summary.total_hours = total_hours

    summary.summary_date = datetime.now(UTC)
    return summary
