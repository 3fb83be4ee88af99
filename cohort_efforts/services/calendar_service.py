from collections.abc import Collection
from collections.abc import Iterable
from collections.abc import Sequence
from datetime import date
from datetime import timedelta

from loguru import logger

from cohort_efforts.core.errors import InvalidRangeError
from cohort_efforts.domain import DAYS_PER_WEEK
from cohort_efforts.domain import CohortPeriod
from cohort_efforts.domain import Week
from cohort_efforts.domain import WeeklySummary
from cohort_efforts.domain import WeekStatus


def week_id_for(start_date: date) -> str:
    """Return the stable identifier of the week starting on start_date."""

    return f"week-{start_date.isoformat()}"


def partition(period: CohortPeriod) -> list[Week]:
    """Split a cohort period into contiguous, numbered 7-day week buckets.

    Buckets start on the period's first day regardless of weekday. The last
    bucket ends on the period's end date even when that makes it shorter
    than seven days.

    Raises:
        InvalidRangeError: If the period starts after it ends.
    """

    if period.start_date > period.end_date:
        raise InvalidRangeError(period.start_date, period.end_date)

    weeks: list[Week] = []
    week_start = period.start_date
    week_number = 1
    while week_start <= period.end_date:
        week_end = min(week_start + timedelta(days=DAYS_PER_WEEK - 1), period.end_date)
        weeks.append(
            Week(
                id=week_id_for(week_start),
                week_number=week_number,
                start_date=week_start,
                end_date=week_end,
            )
        )
        week_start = week_end + timedelta(days=1)
        week_number += 1

    logger.debug(
        f"[CALENDAR] Partitioned {period.start_date}..{period.end_date} "
        f"into {len(weeks)} weeks"
    )
    return weeks


def completed_week_starts(summaries: Iterable[WeeklySummary]) -> set[str]:
    """Collect ISO start dates of weeks that already have a weekly summary."""

    return {summary.week_start_date for summary in summaries}


def week_status(week: Week, today: date, completed_starts: Collection[str]) -> WeekStatus:
    """Classify one week. Completion wins over the date-based states."""

    if week.start_date.isoformat() in completed_starts:
        return WeekStatus.COMPLETED
    if week.start_date > today:
        return WeekStatus.LOCKED
    if week.contains(today):
        return WeekStatus.ACTIVE
    return WeekStatus.OPEN


def classify(
    weeks: Iterable[Week],
    today: date,
    completed_starts: Collection[str],
) -> dict[str, WeekStatus]:
    """Map each week id to its status as of today."""

    return {week.id: week_status(week, today, completed_starts) for week in weeks}


def select_default_week(weeks: Sequence[Week], today: date) -> Week | None:
    """Pick the week containing today, falling back to the first week."""

    for week in weeks:
        if week.contains(today):
            return week
    return weeks[0] if weeks else None


def find_week(weeks: Iterable[Week], week_id: str) -> Week | None:
    for week in weeks:
        if week.id == week_id:
            return week
    return None


def is_selectable(status: WeekStatus) -> bool:
    """Locked weeks cannot be opened for logging; everything else can."""

    return status is not WeekStatus.LOCKED
