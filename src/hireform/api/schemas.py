from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from hireform.types import ApplicationStatus, ApplicationType, GeneralDetails


class JobVacancyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str
    type: str
    department: str
    level: str
    posted_date: datetime
    expiry_date: date | None
    status: str


class JobVacancyCreateRequest(BaseModel):
    title: str
    type: ApplicationType = "NonAcademic"
    description: str = ""
    department: str = ""
    level: str = ""
    expiry_date: date | None = None


class GeneralDetailsRequest(BaseModel):
    user_id: int
    job_id: int
    general_details: GeneralDetails


class SectionSubmitRequest(BaseModel):
    user_id: int
    job_id: int
    items: list[dict[str, Any]] = Field(default_factory=list)


class SubmissionResponse(BaseModel):
    application_id: int
    section: str
    inserted: int


class GeneralDetailsResponse(BaseModel):
    application_id: int
    general_details_id: int


class ApplicationStatusResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    status: str
    remarks: str
    submission_date: datetime


class ApplicationStatusUpdateRequest(BaseModel):
    status: ApplicationStatus
    remarks: str | None = None
