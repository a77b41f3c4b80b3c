from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError
from sqlalchemy.orm import Session

from hireform.db.models import SECTION_MODELS, Application
from hireform.db.repositories import Repository
from hireform.errors import BadRequestError, ConflictError, NotFoundError
from hireform.types import SECTION_ROW_MODELS, GeneralDetails

logger = logging.getLogger(__name__)


class ApplicationSubmissionService:
    """Stores the multi-section application form, one section per call.

    Every submission goes through ``get_or_create_application`` so the first
    section a candidate sends, whichever it is, opens the application.
    """

    def __init__(self, session: Session):
        self.session = session
        self.repo = Repository(session)

    def _open_application(self, user_id: int, job_id: int) -> Application:
        if not user_id or not job_id:
            raise BadRequestError("User ID and Job ID are required.")
        if self.repo.get_user(user_id) is None:
            raise NotFoundError(f"User {user_id} not found")
        job = self.repo.get_job(job_id)
        if job is None:
            raise NotFoundError(f"Job vacancy {job_id} not found")

        application, created = self.repo.get_or_create_application(user_id, job_id)
        if created:
            logger.info("opened application %s for user=%s job=%s", application.id, user_id, job_id)
        return application

    def submit_general_details(self, user_id: int, job_id: int, details: GeneralDetails) -> dict[str, Any]:
        application = self._open_application(user_id, job_id)
        if self.repo.get_general_details(application.id) is not None:
            raise ConflictError("General details already submitted for this application.")

        saved = self.repo.create_general_details(application.id, details.model_dump())
        return {"application_id": application.id, "general_details_id": saved.id}

    def submit_section(self, user_id: int, job_id: int, section: str, items: list[dict[str, Any]]) -> dict[str, Any]:
        model = SECTION_MODELS.get(section)
        row_model = SECTION_ROW_MODELS.get(section)
        if model is None or row_model is None:
            raise NotFoundError(f"Unknown application section '{section}'")
        if not items:
            raise BadRequestError(f"'{section}' must be provided as a non-empty list.")

        try:
            rows = [row_model.model_validate(item).model_dump(exclude_none=True) for item in items]
        except ValidationError as exc:
            raise BadRequestError(f"Invalid '{section}' entry: {exc.errors()[0]['msg']}") from exc

        application = self._open_application(user_id, job_id)
        inserted = self.repo.insert_many(model, application.id, rows)
        logger.info("stored %d %s row(s) for application %s", inserted, section, application.id)
        return {"application_id": application.id, "section": section, "inserted": inserted}

    def get_status(self, user_id: int, job_id: int) -> Application:
        application = self.repo.fetch_application_by_user_and_job(user_id, job_id)
        if application is None:
            raise NotFoundError("Application not found for the specified job")
        return application

    def update_status(self, application_id: int, status: str, remarks: str | None = None) -> Application:
        try:
            return self.repo.update_application_status(application_id, status, remarks)
        except ValueError as exc:
            raise NotFoundError(str(exc)) from exc
