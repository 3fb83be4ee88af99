"""Editing session for logging one cohort's weekly efforts.

The session owns the week calendar of the open cohort, the draft of the
selected week and the in-flight flag of the weekly submission. Fetching and
submitting go through a collaborator with the `AcademyClient` interface.
"""

from collections.abc import Callable
from datetime import date
from typing import Protocol

import httpx
from loguru import logger

from cohort_efforts.core.errors import SubmissionFailure
from cohort_efforts.core.errors import SubmissionInProgressError
from cohort_efforts.core.errors import UnknownWeekError
from cohort_efforts.core.errors import WeekLockedError
from cohort_efforts.domain import CohortDetail
from cohort_efforts.domain import Draft
from cohort_efforts.domain import EffortRecord
from cohort_efforts.domain import EffortRole
from cohort_efforts.domain import SubmissionRequest
from cohort_efforts.domain import Week
from cohort_efforts.domain import WeeklySummary
from cohort_efforts.domain import WeekStatus
from cohort_efforts.services.calendar_service import classify
from cohort_efforts.services.calendar_service import completed_week_starts
from cohort_efforts.services.calendar_service import find_week
from cohort_efforts.services.calendar_service import is_selectable
from cohort_efforts.services.calendar_service import partition
from cohort_efforts.services.calendar_service import select_default_week
from cohort_efforts.services.draft_service import EditableField
from cohort_efforts.services.draft_service import build_draft
from cohort_efforts.services.draft_service import update_draft
from cohort_efforts.services.submission_service import assemble
from cohort_efforts.services.submission_service import submission_total_hours


class EffortBackend(Protocol):
    def fetch_cohort(self, cohort_id: int) -> CohortDetail: ...

    def fetch_effort_records(
        self, cohort_id: int, start_date: date, end_date: date
    ) -> list[EffortRecord]: ...

    def fetch_weekly_summaries(self, cohort_id: int) -> list[WeeklySummary]: ...

    def submit_weekly_effort(self, request: SubmissionRequest) -> WeeklySummary: ...


class EffortSession:
    def __init__(
        self,
        backend: EffortBackend,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._backend = backend
        self._today = today
        self.cohort: CohortDetail | None = None
        self.weeks: list[Week] = []
        self.statuses: dict[str, WeekStatus] = {}
        self.summaries: list[WeeklySummary] = []
        self.selected_week: Week | None = None
        self.draft: Draft = {}
        self._source_draft: Draft = {}
        self._submitting = False

    @property
    def is_submitting(self) -> bool:
        return self._submitting

    def open_cohort(self, cohort_id: int) -> None:
        """Load a cohort's calendar and select its default week."""

        self.cohort = self._backend.fetch_cohort(cohort_id)
        self.weeks = partition(self.cohort.period)
        self.summaries = self._backend.fetch_weekly_summaries(cohort_id)
        self._reclassify()

        self.selected_week = None
        self.draft = {}
        self._source_draft = {}
        default_week = select_default_week(self.weeks, self._today())
        logger.info(
            f"[CALENDAR] Opened cohort {self.cohort.code} with {len(self.weeks)} weeks"
        )
        if default_week is not None and is_selectable(self.statuses[default_week.id]):
            self.select_week(default_week.id)

    def select_week(self, week_id: str) -> Week:
        """Make a week the editing target and rebuild its draft.

        Unsaved edits of the previously selected week are discarded.

        Raises:
            UnknownWeekError: If the week is not part of the open cohort.
            WeekLockedError: If the week has not started and is not completed.
        """

        week = find_week(self.weeks, week_id)
        if week is None:
            raise UnknownWeekError(f"week {week_id} is not part of the cohort")
        if not is_selectable(self.statuses[week.id]):
            raise WeekLockedError(f"week {week.week_number} has not started yet")

        self.selected_week = week
        self.refresh_records()
        return week

    def refresh_records(self) -> None:
        """Re-fetch the selected week's efforts and rebuild the draft."""

        week = self._require_week()
        records = self._backend.fetch_effort_records(
            self.cohort.id, week.start_date, week.working_end
        )
        if self.draft != self._source_draft:
            logger.debug(
                f"[DRAFT] Discarding unsaved edits of {self._source_week_label()}"
            )
        self._source_draft = build_draft(week, records)
        self.draft = self._source_draft

    def update(
        self, day: str, role: EffortRole, field: EditableField, value: object
    ) -> Draft:
        self._require_week()
        self.draft = update_draft(self.draft, day, role, field, value)
        return self.draft

    @property
    def has_unsaved_edits(self) -> bool:
        return self.draft != self._source_draft

    def submit(self, location: str | None = None) -> WeeklySummary:
        """Submit the selected week's draft as one record.

        Raises:
            SubmissionInProgressError: If a submission is already pending.
            SubmissionFailure: If the backend rejects the submission or cannot
                be reached. The draft is kept for another attempt.
        """

        if self._submitting:
            raise SubmissionInProgressError("a weekly submission is already pending")

        week = self._require_week()
        request = assemble(self.cohort.id, week, self.draft, location=location)
        logger.info(
            f"[SUBMIT] Submitting week {week.week_number} of cohort {self.cohort.code} "
            f"({submission_total_hours(request)}h)"
        )

        self._submitting = True
        try:
            summary = self._backend.submit_weekly_effort(request)
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning(f"[SUBMIT] Week {week.week_number} submission failed: {exc!r}")
            raise SubmissionFailure(
                f"submission of week {week.week_number} failed"
            ) from exc
        finally:
            self._submitting = False

        self._source_draft = self.draft
        try:
            self.summaries = self._backend.fetch_weekly_summaries(self.cohort.id)
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning(
                f"[SUBMIT] Week {week.week_number} was stored but summaries "
                f"could not be refreshed: {exc!r}"
            )
            self.summaries = [
                *(
                    known
                    for known in self.summaries
                    if known.week_start_date != summary.week_start_date
                ),
                summary,
            ]
        self._reclassify()
        return summary

    def history(self) -> list[tuple[WeeklySummary, int | None]]:
        """Weekly summaries newest first, each with its week number if known."""

        week_numbers = {week.start_date.isoformat(): week.week_number for week in self.weeks}
        ordered = sorted(
            self.summaries, key=lambda summary: summary.week_start_date, reverse=True
        )
        return [(summary, week_numbers.get(summary.week_start_date)) for summary in ordered]

    def _reclassify(self) -> None:
        self.statuses = classify(
            self.weeks, self._today(), completed_week_starts(self.summaries)
        )

    def _require_week(self) -> Week:
        if self.cohort is None or self.selected_week is None:
            raise RuntimeError("no week is selected")
        return self.selected_week

    def _source_week_label(self) -> str:
        if not self._source_draft:
            return "previous week"
        return f"week starting {min(self._source_draft)}"
