from datetime import date

from fastapi import APIRouter
from fastapi import Depends
from fastapi import HTTPException
from fastapi import Query
from loguru import logger
from sqlalchemy.orm import Session

from cohort_efforts.api.schemas.efforts import CohortCalendarResponse
from cohort_efforts.api.schemas.efforts import CohortCreate
from cohort_efforts.api.schemas.efforts import CohortResponse
from cohort_efforts.api.schemas.efforts import DayLogSchema
from cohort_efforts.api.schemas.efforts import DraftResponse
from cohort_efforts.api.schemas.efforts import EffortRecordSchema
from cohort_efforts.api.schemas.efforts import WeeklyEffortSubmission
from cohort_efforts.api.schemas.efforts import WeeklySummarySchema
from cohort_efforts.api.schemas.efforts import WeekResponse
from cohort_efforts.core.errors import CohortNotFoundError
from cohort_efforts.core.errors import InvalidRangeError
from cohort_efforts.db import get_db
from cohort_efforts.models import Cohort
from cohort_efforts.services import effort_service
from cohort_efforts.services.calendar_service import classify
from cohort_efforts.services.calendar_service import completed_week_starts
from cohort_efforts.services.calendar_service import find_week
from cohort_efforts.services.calendar_service import partition
from cohort_efforts.services.calendar_service import select_default_week
from cohort_efforts.services.draft_service import build_draft
from cohort_efforts.settings import Settings


router = APIRouter()
settings = Settings()


def _cohort_or_404(db: Session, cohort_id: int) -> Cohort:
    try:
        return effort_service.get_cohort(db, cohort_id)
    except CohortNotFoundError as exc:
        raise HTTPException(status_code=404, detail="cohort not found") from exc


def _cohort_response(cohort: Cohort) -> CohortResponse:
    return CohortResponse(
        id=cohort.id,
        code=cohort.code,
        start_date=cohort.start_date,
        end_date=cohort.end_date,
        skill=cohort.skill,
        training_location=cohort.training_location,
        primary_trainer=cohort.primary_trainer_name,
        primary_mentor=cohort.primary_mentor_name,
        buddy_mentor=cohort.buddy_mentor_name,
    )


@router.post("/cohorts", status_code=201)
def create_cohort(payload: CohortCreate, db: Session = Depends(get_db)) -> CohortResponse:
    code = payload.code.strip()
    if not code:
        raise HTTPException(status_code=400, detail="code cannot be empty")

    if effort_service.find_cohort_by_code(db, code):
        raise HTTPException(status_code=409, detail="cohort already exists")

    try:
        cohort = effort_service.create_cohort(
            db,
            code=code,
            start_date=payload.start_date,
            end_date=payload.end_date,
            skill=payload.skill,
            training_location=payload.training_location,
            primary_trainer=payload.primary_trainer,
            primary_mentor=payload.primary_mentor,
            buddy_mentor=payload.buddy_mentor,
        )
    except InvalidRangeError as exc:
        raise HTTPException(
            status_code=400, detail="startDate must be before or equal to endDate"
        ) from exc

    return _cohort_response(cohort)


@router.get("/cohorts")
def list_cohorts(db: Session = Depends(get_db)) -> list[CohortResponse]:
    return [_cohort_response(cohort) for cohort in effort_service.list_cohorts(db)]


@router.get("/cohorts/{cohort_id}")
def get_cohort(cohort_id: int, db: Session = Depends(get_db)) -> CohortResponse:
    """Return the cohort period and the assigned trainer, mentor and buddy mentor."""

    return _cohort_response(_cohort_or_404(db, cohort_id))


@router.get("/cohorts/{cohort_id}/weeks")
def get_cohort_weeks(
    cohort_id: int,
    today: date | None = Query(default=None),
    db: Session = Depends(get_db),
) -> CohortCalendarResponse:
    """Return the cohort's week buckets with their status as of today."""

    cohort = _cohort_or_404(db, cohort_id)
    today = today or date.today()

    detail = effort_service.to_cohort_detail(cohort)
    weeks = partition(detail.period)
    summaries = effort_service.list_weekly_summaries(db, cohort.id)
    statuses = classify(weeks, today, completed_week_starts(summaries))
    default_week = select_default_week(weeks, today)

    return CohortCalendarResponse(
        cohort_id=cohort.id,
        today=today,
        selected_week_id=default_week.id if default_week else None,
        daily_hours_guidance=settings.daily_hours_guidance,
        weeks=[WeekResponse.from_domain(week, statuses[week.id]) for week in weeks],
    )


@router.get("/cohorts/{cohort_id}/weeks/{week_id}/draft")
def get_week_draft(
    cohort_id: int, week_id: str, db: Session = Depends(get_db)
) -> DraftResponse:
    """Return the editable draft of one week, built from stored efforts."""

    cohort = _cohort_or_404(db, cohort_id)
    weeks = partition(effort_service.to_cohort_detail(cohort).period)
    week = find_week(weeks, week_id)
    if week is None:
        raise HTTPException(status_code=404, detail="week not found")

    records = effort_service.list_effort_records(
        db, cohort.id, week.start_date, week.working_end
    )
    draft = build_draft(week, records)
    return DraftResponse(
        cohort_id=cohort.id,
        week_id=week.id,
        week_number=week.week_number,
        day_logs=[DayLogSchema.from_domain(draft[day]) for day in sorted(draft)],
    )


@router.get("/cohorts/{cohort_id}/efforts")
def get_effort_records(
    cohort_id: int,
    start_date: date = Query(alias="start"),
    end_date: date = Query(alias="end"),
    db: Session = Depends(get_db),
) -> list[EffortRecordSchema]:
    cohort = _cohort_or_404(db, cohort_id)
    if start_date > end_date:
        raise HTTPException(
            status_code=400, detail="start must be before or equal to end"
        )

    records = effort_service.list_effort_records(db, cohort.id, start_date, end_date)
    return [EffortRecordSchema.from_domain(record) for record in records]


@router.get("/cohorts/{cohort_id}/weekly-summaries")
def get_weekly_summaries(
    cohort_id: int, db: Session = Depends(get_db)
) -> list[WeeklySummarySchema]:
    cohort = _cohort_or_404(db, cohort_id)
    return [
        WeeklySummarySchema.from_domain(summary)
        for summary in effort_service.list_weekly_summaries(db, cohort.id)
    ]


@router.post("/efforts/weekly", status_code=201)
def submit_weekly_effort(
    payload: WeeklyEffortSubmission, db: Session = Depends(get_db)
) -> WeeklySummarySchema:
    """Store a whole week of day logs and return the week's summary."""

    try:
        summary = effort_service.submit_weekly_effort(db, payload.to_domain())
    except CohortNotFoundError as exc:
        raise HTTPException(status_code=404, detail="cohort not found") from exc
    except InvalidRangeError as exc:
        raise HTTPException(
            status_code=400,
            detail="weekStartDate must be before or equal to weekEndDate",
        ) from exc

    logger.info(
        f"[SUBMIT] Weekly effort accepted for cohort {payload.cohort_id}, "
        f"week {payload.week_start_date}"
    )
    return WeeklySummarySchema.from_domain(summary)
