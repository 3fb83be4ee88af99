"""HTTP client for the cohort, effort-record, weekly-summary and submission APIs."""

from collections.abc import Mapping
from datetime import date
from typing import Any

import httpx
from loguru import logger

from cohort_efforts.api.schemas.efforts import CohortResponse
from cohort_efforts.api.schemas.efforts import EffortRecordSchema
from cohort_efforts.api.schemas.efforts import WeeklyEffortSubmission
from cohort_efforts.api.schemas.efforts import WeeklySummarySchema
from cohort_efforts.domain import CohortDetail
from cohort_efforts.domain import EffortRecord
from cohort_efforts.domain import SubmissionRequest
from cohort_efforts.domain import WeeklySummary
from cohort_efforts.settings import Settings


def _expect_list(payload: Any, what: str) -> list[Any]:
    if not isinstance(payload, list):
        raise ValueError(f"{what} response is invalid")
    return payload


def _expect_mapping(payload: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise ValueError(f"{what} response is invalid")
    return payload


class AcademyClient:
    """Synchronous client for the effort logging backend.

    Non-2xx responses raise `httpx.HTTPStatusError`; payloads that do not
    match the expected shape raise `ValueError`.
    """

    def __init__(
        self,
        api_base_url: str,
        token: str | None = None,
        timeout: float = 15.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        headers = {
            "Accept": "application/json",
            "User-Agent": "cohort-efforts-client",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self._http = httpx.Client(
            base_url=api_base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "AcademyClient":
        return cls(
            api_base_url=settings.academy_api_base_url,
            token=settings.academy_api_token,
            timeout=settings.request_timeout_seconds,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "AcademyClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def fetch_cohort(self, cohort_id: int) -> CohortDetail:
        response = self._http.get(f"/cohorts/{cohort_id}")
        response.raise_for_status()

        payload = _expect_mapping(response.json(), "Cohort")
        return CohortResponse.model_validate(payload).to_domain()

    def fetch_effort_records(
        self, cohort_id: int, start_date: date, end_date: date
    ) -> list[EffortRecord]:
        response = self._http.get(
            f"/cohorts/{cohort_id}/efforts",
            params={"start": start_date.isoformat(), "end": end_date.isoformat()},
        )
        response.raise_for_status()

        records: list[EffortRecord] = []
        for item in _expect_list(response.json(), "Effort record"):
            if not isinstance(item, Mapping):
                continue
            records.append(EffortRecordSchema.model_validate(item).to_domain())

        logger.debug(
            f"[EFFORTS] Fetched {len(records)} records for cohort {cohort_id} "
            f"{start_date}..{end_date}"
        )
        return records

    def fetch_weekly_summaries(self, cohort_id: int) -> list[WeeklySummary]:
        response = self._http.get(f"/cohorts/{cohort_id}/weekly-summaries")
        response.raise_for_status()

        return [
            WeeklySummarySchema.model_validate(item).to_domain()
            for item in _expect_list(response.json(), "Weekly summary")
            if isinstance(item, Mapping)
        ]

    def submit_weekly_effort(self, request: SubmissionRequest) -> WeeklySummary:
        payload = WeeklyEffortSubmission.from_domain(request).model_dump(
            mode="json", by_alias=True
        )
        response = self._http.post("/efforts/weekly", json=payload)
        response.raise_for_status()

        body = _expect_mapping(response.json(), "Weekly submission")
        return WeeklySummarySchema.model_validate(body).to_domain()
