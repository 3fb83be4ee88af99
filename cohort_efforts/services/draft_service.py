"""Draft reconciliation for one selected week.

A draft is rebuilt from the authoritative effort records whenever the
selected week or its records change. Edits are copy-on-write: only the
edited day log and role entry are replaced, all other values are shared
with the previous draft.
"""

import math
from collections.abc import Iterable
from dataclasses import replace
from typing import Literal

from loguru import logger

from cohort_efforts.core.errors import AmbiguousRecordError
from cohort_efforts.core.errors import UnknownDateError
from cohort_efforts.domain import DayLog
from cohort_efforts.domain import Draft
from cohort_efforts.domain import EffortRecord
from cohort_efforts.domain import EffortRole
from cohort_efforts.domain import RoleEntry
from cohort_efforts.domain import Week

MAX_DAY_HOURS = 24.0

EditableField = Literal["hours", "notes"]


def coerce_hours(value: object) -> float:
    """Convert user input to an hours value in range 0..24.

    Anything that does not parse as a finite number becomes 0.
    """

    if isinstance(value, bool):
        return 0.0
    if isinstance(value, int | float):
        hours = float(value)
    elif isinstance(value, str):
        try:
            hours = float(value.strip())
        except ValueError:
            return 0.0
    else:
        return 0.0

    if not math.isfinite(hours):
        return 0.0
    return min(max(hours, 0.0), MAX_DAY_HOURS)


def _index_records(
    records: Iterable[EffortRecord], strict: bool
) -> dict[tuple[str, EffortRole], EffortRecord]:
    indexed: dict[tuple[str, EffortRole], EffortRecord] = {}
    counts: dict[tuple[str, EffortRole], int] = {}
    for record in records:
        key = (record.effort_date, record.role)
        counts[key] = counts.get(key, 0) + 1
        indexed.setdefault(key, record)

    for (day, role), count in counts.items():
        if count < 2:
            continue
        error = AmbiguousRecordError(day, role.value, count)
        if strict:
            raise error
        logger.warning(f"[DRAFT] {error}; keeping the first record")

    return indexed


def build_draft(
    week: Week, records: Iterable[EffortRecord], strict: bool = False
) -> Draft:
    """Project effort records onto the week's five working days.

    Each role entry takes hours and notes from the first record matching its
    date and role, or defaults to zero hours and empty notes. Records outside
    the working days are ignored.

    Raises:
        AmbiguousRecordError: If strict is set and a date/role pair has more
            than one record.
    """

    indexed = _index_records(records, strict)

    draft: Draft = {}
    for day in week.working_days:
        day_iso = day.isoformat()
        entries: dict[str, RoleEntry] = {}
        for role in EffortRole:
            record = indexed.get((day_iso, role))
            if record is None:
                entries[role.field_name] = RoleEntry()
            else:
                entries[role.field_name] = RoleEntry(
                    hours=record.effort_hours or 0.0,
                    notes=record.area_of_work or "",
                )
        draft[day_iso] = DayLog(date=day_iso, is_holiday=False, **entries)

    return draft


def update_draft(
    draft: Draft,
    day: str,
    role: EffortRole,
    field: EditableField,
    value: object,
) -> Draft:
    """Return a new draft with one role field of one day replaced.

    Raises:
        UnknownDateError: If day is not part of the draft.
        ValueError: If field is neither "hours" nor "notes".
    """

    if day not in draft:
        raise UnknownDateError(day)

    day_log = draft[day]
    entry = day_log.entry(role)
    if field == "hours":
        new_entry = replace(entry, hours=coerce_hours(value))
    elif field == "notes":
        new_entry = replace(entry, notes="" if value is None else str(value))
    else:
        raise ValueError(f"unsupported draft field: {field!r}")

    updated = dict(draft)
    updated[day] = replace(day_log, **{role.field_name: new_entry})
    return updated
