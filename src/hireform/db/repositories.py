from __future__ import annotations

import logging
from datetime import date
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hireform.db.base import Base, utcnow
from hireform.db.models import (
    Application,
    ApplicationGeneralDetails,
    JobVacancy,
    User,
)

logger = logging.getLogger(__name__)


class Repository:
    def __init__(self, session: Session):
        self.session = session

    def create_user(self, full_name: str, email: str) -> User:
        user = User(full_name=full_name, email=email)
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        return user

    def get_user(self, user_id: int) -> User | None:
        return self.session.get(User, user_id)

    def get_user_by_email(self, email: str) -> User | None:
        return self.session.scalar(select(User).where(User.email == email))

    def create_job(
        self,
        *,
        title: str,
        type: str = "NonAcademic",
        description: str = "",
        department: str = "",
        level: str = "",
        expiry_date: date | None = None,
        status: str = "Open",
    ) -> JobVacancy:
        job = JobVacancy(
            title=title,
            type=type,
            description=description,
            department=department,
            level=level,
            expiry_date=expiry_date,
            status=status,
        )
        self.session.add(job)
        self.session.commit()
        self.session.refresh(job)
        return job

    def get_job(self, job_id: int) -> JobVacancy | None:
        return self.session.get(JobVacancy, job_id)

    def list_open_jobs(self, limit: int = 100) -> list[JobVacancy]:
        statement = (
            select(JobVacancy)
            .where(JobVacancy.status == "Open")
            .order_by(JobVacancy.posted_date.desc(), JobVacancy.id.desc())
            .limit(limit)
        )
        return list(self.session.scalars(statement).all())

    def fetch_application_by_id(self, application_id: int) -> Application | None:
        return self.session.get(Application, application_id)

    def fetch_application_by_user_and_job(self, user_id: int, job_id: int) -> Application | None:
        return self.session.scalar(
            select(Application).where(Application.user_id == user_id, Application.job_id == job_id)
        )

    def get_or_create_application(self, user_id: int, job_id: int) -> tuple[Application, bool]:
        """Return the application for (user, job), creating it on first use.

        The unique constraint on (user_id, job_id) decides concurrent
        creations; the loser re-reads the winner's row.
        """
        existing = self.fetch_application_by_user_and_job(user_id, job_id)
        if existing is not None:
            return existing, False

        application = Application(
            user_id=user_id,
            job_id=job_id,
            submission_date=utcnow(),
            status="New",
            remarks="",
        )
        self.session.add(application)
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            logger.info("application for user=%s job=%s created concurrently", user_id, job_id)
            existing = self.fetch_application_by_user_and_job(user_id, job_id)
            if existing is None:
                raise
            return existing, False

        self.session.refresh(application)
        return application, True

    def get_general_details(self, application_id: int) -> ApplicationGeneralDetails | None:
        return self.session.scalar(
            select(ApplicationGeneralDetails).where(ApplicationGeneralDetails.application_id == application_id)
        )

    def create_general_details(self, application_id: int, values: dict[str, Any]) -> ApplicationGeneralDetails:
        details = ApplicationGeneralDetails(application_id=application_id, **values)
        self.session.add(details)
        self.session.commit()
        self.session.refresh(details)
        return details

    def insert_many(self, model: type[Base], application_id: int, rows: list[dict[str, Any]]) -> int:
        objects = [model(application_id=application_id, **row) for row in rows]
        self.session.add_all(objects)
        self.session.commit()
        return len(objects)

    def update_application_status(self, application_id: int, status: str, remarks: str | None = None) -> Application:
        application = self.session.get(Application, application_id)
        if application is None:
            raise ValueError(f"application {application_id} not found")

        application.status = status
        if remarks is not None:
            application.remarks = remarks
        self.session.commit()
        self.session.refresh(application)
        return application
