from datetime import date

import pytest

from cohort_efforts.core.errors import CohortNotFoundError
from cohort_efforts.core.errors import InvalidRangeError
from cohort_efforts.domain import DayLog
from cohort_efforts.domain import EffortRecord
from cohort_efforts.domain import EffortRole
from cohort_efforts.domain import RoleEntry
from cohort_efforts.domain import SubmissionRequest
from cohort_efforts.services import effort_service


def make_request(cohort_id: int, *day_logs: DayLog) -> SubmissionRequest:
    return SubmissionRequest(
        cohort_id=cohort_id,
        week_start_date="2024-01-08",
        week_end_date="2024-01-14",
        day_logs=day_logs,
    )


@pytest.fixture
def cohort(db_session):
    return effort_service.create_cohort(
        db_session,
        code="DATA-07",
        start_date=date(2024, 1, 1),
        end_date=date(2024, 3, 1),
        primary_trainer="Asha",
        primary_mentor="Ravi",
        buddy_mentor="Kiran",
    )


def test_create_cohort_rejects_reversed_period(db_session) -> None:
    with pytest.raises(InvalidRangeError):
        effort_service.create_cohort(
            db_session,
            code="BAD-01",
            start_date=date(2024, 3, 1),
            end_date=date(2024, 1, 1),
        )


def test_get_cohort_raises_for_missing_id(db_session) -> None:
    with pytest.raises(CohortNotFoundError):
        effort_service.get_cohort(db_session, 42)


def test_to_cohort_detail_exposes_period_and_roles(cohort) -> None:
    detail = effort_service.to_cohort_detail(cohort)

    assert detail.period.start_date == date(2024, 1, 1)
    assert detail.period.end_date == date(2024, 3, 1)
    assert detail.stakeholder(EffortRole.BUDDY_MENTOR) == "Kiran"


def test_submit_stores_positive_hours_and_summarizes_week(db_session, cohort) -> None:
    summary = effort_service.submit_weekly_effort(
        db_session,
        make_request(
            cohort.id,
            DayLog(
                date="2024-01-08",
                trainer=RoleEntry(4, "intro"),
                buddy_mentor=RoleEntry(1.5, "pairing"),
            ),
            DayLog(date="2024-01-09", mentor=RoleEntry(2, "  ")),
            DayLog(date="2024-01-10", is_holiday=True, trainer=RoleEntry(8, "")),
        ),
    )

    records = effort_service.list_effort_records(
        db_session, cohort.id, date(2024, 1, 8), date(2024, 1, 14)
    )

    assert summary.total_hours == 7.5
    assert summary.week_start_date == "2024-01-08"
    assert records == [
        EffortRecord("2024-01-08", EffortRole.TRAINER, 4.0, "intro"),
        EffortRecord("2024-01-08", EffortRole.BUDDY_MENTOR, 1.5, "pairing"),
        EffortRecord("2024-01-09", EffortRole.MENTOR, 2.0, "Daily effort logging"),
    ]


def test_submit_leaves_other_weeks_untouched(db_session, cohort) -> None:
    effort_service.submit_weekly_effort(
        db_session,
        SubmissionRequest(
            cohort_id=cohort.id,
            week_start_date="2024-01-01",
            week_end_date="2024-01-07",
            day_logs=(DayLog(date="2024-01-05", trainer=RoleEntry(3, "setup")),),
        ),
    )
    effort_service.submit_weekly_effort(
        db_session,
        make_request(cohort.id, DayLog(date="2024-01-08", trainer=RoleEntry(2, "x"))),
    )

    first_week = effort_service.list_effort_records(
        db_session, cohort.id, date(2024, 1, 1), date(2024, 1, 7)
    )
    summaries = effort_service.list_weekly_summaries(db_session, cohort.id)

    assert first_week == [EffortRecord("2024-01-05", EffortRole.TRAINER, 3.0, "setup")]
    assert [summary.week_start_date for summary in summaries] == [
        "2024-01-01",
        "2024-01-08",
    ]


def test_submit_with_all_zero_hours_still_completes_week(db_session, cohort) -> None:
    summary = effort_service.submit_weekly_effort(
        db_session, make_request(cohort.id, DayLog(date="2024-01-08"))
    )

    assert summary.total_hours == 0.0
    assert effort_service.list_weekly_summaries(db_session, cohort.id) == [summary]


def test_submit_raises_for_missing_cohort(db_session) -> None:
    with pytest.raises(CohortNotFoundError):
        effort_service.submit_weekly_effort(db_session, make_request(77))


def test_submit_rejects_reversed_week(db_session, cohort) -> None:
    request = SubmissionRequest(
        cohort_id=cohort.id,
        week_start_date="2024-01-14",
        week_end_date="2024-01-08",
        day_logs=(),
    )

    with pytest.raises(InvalidRangeError):
        effort_service.submit_weekly_effort(db_session, request)


def test_resubmitting_clamped_final_week_replaces_trailing_working_days(
    db_session,
) -> None:
    short_cohort = effort_service.create_cohort(
        db_session,
        code="DATA-08",
        start_date=date(2024, 1, 1),
        end_date=date(2024, 1, 10),
        primary_trainer="Asha",
    )
    request = SubmissionRequest(
        cohort_id=short_cohort.id,
        week_start_date="2024-01-08",
        week_end_date="2024-01-10",
        day_logs=(
            DayLog(date="2024-01-08", trainer=RoleEntry(2, "recap")),
            DayLog(date="2024-01-12", trainer=RoleEntry(3, "demo day")),
        ),
    )

    effort_service.submit_weekly_effort(db_session, request)
    summary = effort_service.submit_weekly_effort(db_session, request)

    records = effort_service.list_effort_records(
        db_session, short_cohort.id, date(2024, 1, 8), date(2024, 1, 12)
    )

    assert records == [
        EffortRecord("2024-01-08", EffortRole.TRAINER, 2.0, "recap"),
        EffortRecord("2024-01-12", EffortRole.TRAINER, 3.0, "demo day"),
    ]
    assert summary.week_end_date == "2024-01-10"
    assert summary.total_hours == 5.0
