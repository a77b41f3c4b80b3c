from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from hireform.api.deps import get_db
from hireform.api.schemas import (
    ApplicationStatusResponse,
    ApplicationStatusUpdateRequest,
    GeneralDetailsRequest,
    GeneralDetailsResponse,
    JobVacancyCreateRequest,
    JobVacancyResponse,
    SectionSubmitRequest,
    SubmissionResponse,
)
from hireform.core.applications import ApplicationSubmissionService
from hireform.core.jobs import JobVacancyService
from hireform.db.repositories import Repository
from hireform.errors import NotFoundError
from hireform.pdf import ApplicationPDFService

router = APIRouter(prefix="/api", tags=["api"])


@router.get("/jobs", response_model=list[JobVacancyResponse])
def list_jobs(db: Session = Depends(get_db)) -> list[JobVacancyResponse]:
    repo = Repository(db)
    return [JobVacancyResponse.model_validate(row) for row in repo.list_open_jobs()]


@router.post("/jobs", response_model=JobVacancyResponse, status_code=201)
def post_job(payload: JobVacancyCreateRequest, db: Session = Depends(get_db)) -> JobVacancyResponse:
    job = JobVacancyService(db).post_vacancy(**payload.model_dump())
    return JobVacancyResponse.model_validate(job)


@router.get("/jobs/{job_id}", response_model=JobVacancyResponse)
def get_job(job_id: int, db: Session = Depends(get_db)) -> JobVacancyResponse:
    repo = Repository(db)
    job = repo.get_job(job_id)
    if job is None:
        raise NotFoundError(f"Job vacancy {job_id} not found")
    return JobVacancyResponse.model_validate(job)


@router.get("/applications/status", response_model=ApplicationStatusResponse)
def get_application_status(
    user_id: int = Query(...),
    job_id: int = Query(...),
    db: Session = Depends(get_db),
) -> ApplicationStatusResponse:
    application = ApplicationSubmissionService(db).get_status(user_id, job_id)
    return ApplicationStatusResponse.model_validate(application)


@router.put("/applications/{application_id}/status", response_model=ApplicationStatusResponse)
def update_application_status(
    application_id: int,
    payload: ApplicationStatusUpdateRequest,
    db: Session = Depends(get_db),
) -> ApplicationStatusResponse:
    application = ApplicationSubmissionService(db).update_status(application_id, payload.status, payload.remarks)
    return ApplicationStatusResponse.model_validate(application)


@router.get(
    "/applications/download/{application_id}",
    response_class=Response,
    responses={200: {"content": {"application/pdf": {}}}},
)
def download_application(application_id: str, db: Session = Depends(get_db)) -> Response:
    """Generate the filled Academic or Non-Academic form for an application."""
    rendered = ApplicationPDFService(Repository(db)).generate(application_id)
    return Response(
        content=rendered.content,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f"attachment; filename={rendered.filename}",
            "Content-Length": str(len(rendered.content)),
        },
    )


@router.post("/applications/general-details", response_model=GeneralDetailsResponse, status_code=201)
def submit_general_details(payload: GeneralDetailsRequest, db: Session = Depends(get_db)) -> GeneralDetailsResponse:
    result = ApplicationSubmissionService(db).submit_general_details(
        payload.user_id, payload.job_id, payload.general_details
    )
    return GeneralDetailsResponse(**result)


@router.post("/applications/{section}", response_model=SubmissionResponse, status_code=201)
def submit_section(section: str, payload: SectionSubmitRequest, db: Session = Depends(get_db)) -> SubmissionResponse:
    result = ApplicationSubmissionService(db).submit_section(payload.user_id, payload.job_id, section, payload.items)
    return SubmissionResponse(**result)
