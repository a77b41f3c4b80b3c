from __future__ import annotations

import logging
from typing import Any, Protocol

from hireform.errors import NotFoundError
from hireform.types import ApplicationRecord

logger = logging.getLogger(__name__)


class ApplicationSource(Protocol):
    def fetch_application_by_id(self, application_id: int) -> Any | None: ...


class ApplicationAggregator:
    """Collects everything printed on a form into one immutable record."""

    def __init__(self, source: ApplicationSource):
        self.source = source

    def aggregate(self, application_id: int) -> ApplicationRecord:
        application = self.source.fetch_application_by_id(application_id)
        if application is None:
            raise NotFoundError(f"Application {application_id} not found")

        record = ApplicationRecord.model_validate(application, from_attributes=True)
        logger.info(
            "aggregated application %s (%s): %d education, %d employment, %d reference rows",
            record.id,
            record.application_type,
            len(record.university_educations),
            len(record.employment_histories),
            len(record.references),
        )
        return record
