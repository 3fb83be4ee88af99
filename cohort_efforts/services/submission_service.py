from cohort_efforts.domain import DayLog
from cohort_efforts.domain import Draft
from cohort_efforts.domain import EffortRole
from cohort_efforts.domain import SubmissionRequest
from cohort_efforts.domain import Week


def assemble(
    cohort_id: int,
    week: Week,
    draft: Draft,
    location: str | None = None,
) -> SubmissionRequest:
    """Turn a week's draft into one whole-week submission request.

    Every day log in the draft is included in date order, zero-hour and
    future days too.
    """

    day_logs = tuple(draft[day] for day in sorted(draft))
    return SubmissionRequest(
        cohort_id=cohort_id,
        week_start_date=week.start_date.isoformat(),
        week_end_date=week.end_date.isoformat(),
        day_logs=day_logs,
        location=location,
    )


def day_log_hours(day_log: DayLog) -> float:
    """Total hours logged across all roles for one day; holidays count as zero."""

    if day_log.is_holiday:
        return 0.0
    return sum(day_log.entry(role).hours for role in EffortRole)


def submission_total_hours(request: SubmissionRequest) -> float:
    return sum(day_log_hours(day_log) for day_log in request.day_logs)
