from datetime import date

import httpx
import pytest

from cohort_efforts.core.errors import SubmissionFailure
from cohort_efforts.core.errors import SubmissionInProgressError
from cohort_efforts.core.errors import UnknownWeekError
from cohort_efforts.core.errors import WeekLockedError
from cohort_efforts.domain import CohortDetail
from cohort_efforts.domain import CohortPeriod
from cohort_efforts.domain import EffortRecord
from cohort_efforts.domain import EffortRole
from cohort_efforts.domain import RoleEntry
from cohort_efforts.domain import SubmissionRequest
from cohort_efforts.domain import WeeklySummary
from cohort_efforts.domain import WeekStatus
from cohort_efforts.session import EffortSession


class FakeBackend:
    def __init__(self) -> None:
        self.cohort = CohortDetail(
            id=5,
            code="JAVA-24",
            period=CohortPeriod(date(2024, 1, 1), date(2024, 1, 20)),
            primary_trainer="Asha",
            primary_mentor="Ravi",
            buddy_mentor=None,
        )
        self.records: list[EffortRecord] = [
            EffortRecord("2024-01-08", EffortRole.TRAINER, 4, "intro"),
        ]
        self.summaries: list[WeeklySummary] = []
        self.submitted: list[SubmissionRequest] = []
        self.record_queries: list[tuple[date, date]] = []
        self.fail_with: Exception | None = None
        self.summaries_error: Exception | None = None
        self.on_submit = None

    def fetch_cohort(self, cohort_id: int) -> CohortDetail:
        assert cohort_id == self.cohort.id
        return self.cohort

    def fetch_effort_records(
        self, cohort_id: int, start_date: date, end_date: date
    ) -> list[EffortRecord]:
        self.record_queries.append((start_date, end_date))
        return [
            record
            for record in self.records
            if start_date.isoformat() <= record.effort_date <= end_date.isoformat()
        ]

    def fetch_weekly_summaries(self, cohort_id: int) -> list[WeeklySummary]:
        if self.summaries_error is not None:
            raise self.summaries_error
        return list(self.summaries)

    def submit_weekly_effort(self, request: SubmissionRequest) -> WeeklySummary:
        if self.on_submit is not None:
            self.on_submit()
        if self.fail_with is not None:
            raise self.fail_with
        self.submitted.append(request)
        summary = WeeklySummary(
            id=len(self.submitted),
            week_start_date=request.week_start_date,
            week_end_date=request.week_end_date,
            total_hours=4.0,
        )
        self.summaries.append(summary)
        return summary


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def session(backend: FakeBackend) -> EffortSession:
    effort_session = EffortSession(backend, today=lambda: date(2024, 1, 10))
    effort_session.open_cohort(5)
    return effort_session


def test_open_cohort_selects_active_week_and_builds_draft(
    session: EffortSession, backend: FakeBackend
) -> None:
    assert [week.week_number for week in session.weeks] == [1, 2, 3]
    assert session.selected_week == session.weeks[1]
    assert session.statuses == {
        "week-2024-01-01": WeekStatus.OPEN,
        "week-2024-01-08": WeekStatus.ACTIVE,
        "week-2024-01-15": WeekStatus.LOCKED,
    }
    assert backend.record_queries == [(date(2024, 1, 8), date(2024, 1, 14))]
    assert session.draft["2024-01-08"].trainer == RoleEntry(4, "intro")


def test_open_cohort_before_start_leaves_locked_first_week_unselected(
    backend: FakeBackend,
) -> None:
    effort_session = EffortSession(backend, today=lambda: date(2023, 12, 1))
    effort_session.open_cohort(5)

    assert effort_session.selected_week is None
    assert effort_session.draft == {}


def test_select_locked_week_is_rejected(session: EffortSession) -> None:
    with pytest.raises(WeekLockedError):
        session.select_week("week-2024-01-15")


def test_select_unknown_week_is_rejected(session: EffortSession) -> None:
    with pytest.raises(UnknownWeekError):
        session.select_week("week-2024-01-02")


def test_completed_future_week_can_be_opened(backend: FakeBackend) -> None:
    backend.summaries.append(WeeklySummary(9, "2024-01-15", "2024-01-20", 10.0))
    effort_session = EffortSession(backend, today=lambda: date(2024, 1, 10))
    effort_session.open_cohort(5)

    week = effort_session.select_week("week-2024-01-15")

    assert effort_session.statuses[week.id] == WeekStatus.COMPLETED
    assert effort_session.selected_week == week


def test_switching_week_discards_unsaved_edits(session: EffortSession) -> None:
    session.update("2024-01-09", EffortRole.MENTOR, "hours", 3)
    assert session.has_unsaved_edits

    session.select_week("week-2024-01-01")
    session.select_week("week-2024-01-08")

    assert session.draft["2024-01-09"].mentor == RoleEntry()
    assert not session.has_unsaved_edits


def test_refresh_records_rebuilds_from_backend(
    session: EffortSession, backend: FakeBackend
) -> None:
    backend.records.append(EffortRecord("2024-01-11", EffortRole.MENTOR, 2, "review"))

    session.refresh_records()

    assert session.draft["2024-01-11"].mentor == RoleEntry(2, "review")


def test_submit_sends_whole_week_and_marks_it_completed(
    session: EffortSession, backend: FakeBackend
) -> None:
    session.update("2024-01-09", EffortRole.MENTOR, "hours", "2.5")

    summary = session.submit(location="Pune")

    assert summary.week_start_date == "2024-01-08"
    request = backend.submitted[0]
    assert request.cohort_id == 5
    assert request.location == "Pune"
    assert len(request.day_logs) == 5
    assert request.day_logs[1].mentor.hours == 2.5
    assert session.statuses["week-2024-01-08"] == WeekStatus.COMPLETED
    assert not session.is_submitting
    assert not session.has_unsaved_edits


def test_submit_while_pending_is_rejected(
    session: EffortSession, backend: FakeBackend
) -> None:
    nested_errors: list[Exception] = []

    def submit_again() -> None:
        assert session.is_submitting
        try:
            session.submit()
        except SubmissionInProgressError as exc:
            nested_errors.append(exc)

    backend.on_submit = submit_again

    session.submit()

    assert len(nested_errors) == 1
    assert len(backend.submitted) == 1
    assert not session.is_submitting


def test_failed_submit_keeps_draft_and_allows_retry(
    session: EffortSession, backend: FakeBackend
) -> None:
    session.update("2024-01-10", EffortRole.TRAINER, "notes", "labs")
    request = httpx.Request("POST", "http://testserver/efforts/weekly")
    backend.fail_with = httpx.HTTPStatusError(
        "server error", request=request, response=httpx.Response(500, request=request)
    )

    with pytest.raises(SubmissionFailure):
        session.submit()

    assert session.draft["2024-01-10"].trainer.notes == "labs"
    assert not session.is_submitting
    assert session.statuses["week-2024-01-08"] == WeekStatus.ACTIVE

    backend.fail_with = None
    session.submit()

    assert backend.submitted[0].day_logs[2].trainer.notes == "labs"


def test_submit_survives_failed_summary_refresh(
    session: EffortSession, backend: FakeBackend
) -> None:
    backend.summaries_error = httpx.ConnectError("academy unreachable")

    summary = session.submit()

    assert backend.submitted[0].week_start_date == "2024-01-08"
    assert session.summaries == [summary]
    assert session.statuses["week-2024-01-08"] == WeekStatus.COMPLETED
    assert not session.is_submitting
    assert not session.has_unsaved_edits


def test_clamped_final_week_fetches_all_working_days(backend: FakeBackend) -> None:
    backend.cohort = CohortDetail(
        id=5, code="JAVA-24", period=CohortPeriod(date(2024, 1, 1), date(2024, 1, 17))
    )
    backend.records.append(EffortRecord("2024-01-19", EffortRole.MENTOR, 1, "wrap-up"))
    effort_session = EffortSession(backend, today=lambda: date(2024, 1, 16))

    effort_session.open_cohort(5)

    assert backend.record_queries == [(date(2024, 1, 15), date(2024, 1, 19))]
    assert effort_session.draft["2024-01-19"].mentor == RoleEntry(1, "wrap-up")


def test_history_is_newest_first_with_week_numbers(
    session: EffortSession, backend: FakeBackend
) -> None:
    backend.summaries.extend(
        [
            WeeklySummary(1, "2024-01-01", "2024-01-07", 8.0),
            WeeklySummary(2, "2024-01-08", "2024-01-14", 12.0),
            WeeklySummary(3, "2023-12-25", "2023-12-31", 1.0),
        ]
    )
    session.open_cohort(5)

    history = session.history()

    assert [(summary.id, number) for summary, number in history] == [
        (2, 2),
        (1, 1),
        (3, None),
    ]


def test_update_without_selected_week_raises(backend: FakeBackend) -> None:
    effort_session = EffortSession(backend)

    with pytest.raises(RuntimeError):
        effort_session.update("2024-01-08", EffortRole.TRAINER, "hours", 1)
