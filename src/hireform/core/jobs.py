from __future__ import annotations

import logging
from datetime import date

from sqlalchemy.orm import Session

from hireform.db.models import JobVacancy
from hireform.db.repositories import Repository
from hireform.errors import BadRequestError
from hireform.types import ApplicationType

logger = logging.getLogger(__name__)


class JobVacancyService:
    def __init__(self, session: Session):
        self.repo = Repository(session)

    def post_vacancy(
        self,
        *,
        title: str,
        type: ApplicationType = "NonAcademic",
        description: str = "",
        department: str = "",
        level: str = "",
        expiry_date: date | None = None,
        today: date | None = None,
    ) -> JobVacancy:
        """Open a vacancy. A closing date, when given, must be in the future."""
        if not title.strip():
            raise BadRequestError("Job title is required.")
        if expiry_date is not None and expiry_date <= (today or date.today()):
            raise BadRequestError("Expiry date must be a future date.")

        job = self.repo.create_job(
            title=title.strip(),
            type=type,
            description=description,
            department=department,
            level=level,
            expiry_date=expiry_date,
        )
        logger.info("posted %s vacancy %s: %s", type, job.id, job.title)
        return job
