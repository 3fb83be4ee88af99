from datetime import date


class EffortLogError(Exception):
    """Base class for effort logging errors."""


class InvalidRangeError(EffortLogError, ValueError):
    """Raised when a cohort period starts after it ends."""

    def __init__(self, start_date: date, end_date: date) -> None:
        super().__init__(
            f"cohort period start {start_date.isoformat()} is after end "
            f"{end_date.isoformat()}"
        )
        self.start_date = start_date
        self.end_date = end_date


class UnknownDateError(EffortLogError, KeyError):
    """Raised when an edit targets a date that is not part of the draft."""

    def __init__(self, day: str) -> None:
        super().__init__(day)
        self.day = day

    def __str__(self) -> str:
        return f"date {self.day} is not part of the current draft"


class AmbiguousRecordError(EffortLogError):
    """Raised when more than one effort record exists for a date and role."""

    def __init__(self, day: str, role: str, count: int) -> None:
        super().__init__(f"{count} effort records found for {day} / {role}")
        self.day = day
        self.role = role
        self.count = count


class SubmissionFailure(EffortLogError):
    """Raised when the backend rejects a weekly submission or is unreachable."""


class SubmissionInProgressError(EffortLogError):
    """Raised when a submission is attempted while another one is pending."""


class UnknownWeekError(EffortLogError, LookupError):
    """Raised when a week id does not belong to the cohort calendar."""


class WeekLockedError(EffortLogError):
    """Raised when a future, not-yet-started week is opened for editing."""


class CohortNotFoundError(EffortLogError, LookupError):
    """Raised when a cohort id does not exist."""
