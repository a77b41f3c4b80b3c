from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any

import typer
import uvicorn
from pydantic import BaseModel, Field, ValidationError

from hireform.api.app import create_app
from hireform.config import get_settings
from hireform.core.applications import ApplicationSubmissionService
from hireform.core.jobs import JobVacancyService
from hireform.db.init import init_database
from hireform.db.repositories import Repository
from hireform.db.session import SessionLocal
from hireform.errors import HireFormError
from hireform.logging_config import configure_logging
from hireform.pdf import ApplicationPDFService
from hireform.pdf.templates import TEMPLATE_FILES, write_blank_template
from hireform.types import GeneralDetails

app = typer.Typer(help="HireForm CLI")
applications_app = typer.Typer(help="Application records and printed forms")
jobs_app = typer.Typer(help="Job vacancy commands")
templates_app = typer.Typer(help="PDF form templates")

app.add_typer(applications_app, name="applications")
app.add_typer(jobs_app, name="jobs")
app.add_typer(templates_app, name="templates")

_INITIALIZED = False


class ImportUser(BaseModel):
    full_name: str
    email: str


class ImportPayload(BaseModel):
    user: ImportUser
    job_id: int
    general_details: GeneralDetails = Field(default_factory=GeneralDetails)
    sections: dict[str, list[dict[str, Any]]] = Field(default_factory=dict)


def ensure_initialized() -> None:
    global _INITIALIZED
    if _INITIALIZED:
        return
    init_database()
    _INITIALIZED = True


@app.command("init")
def init_cmd() -> None:
    """Initialize database, directories, and sample vacancies."""
    configure_logging()
    result = init_database()
    typer.echo(json.dumps({"ok": True, **result}, indent=2))


@templates_app.command("init")
def templates_init(
    pages: int = typer.Option(2, "--pages", min=1),
    force: bool = typer.Option(False, "--force", help="Overwrite existing templates"),
) -> None:
    """Write blank templates for any application type that has none."""
    configure_logging()
    settings = get_settings()
    written = []
    for filename in TEMPLATE_FILES.values():
        target = settings.template_dir / filename
        if target.exists() and not force:
            continue
        write_blank_template(target, pages=pages)
        written.append(str(target))
    typer.echo(json.dumps({"written": written}, indent=2))


@jobs_app.command("list")
def jobs_list(limit: int = typer.Option(20, "--limit")) -> None:
    configure_logging()
    ensure_initialized()
    with SessionLocal() as db:
        repo = Repository(db)
        jobs = repo.list_open_jobs(limit=limit)
        typer.echo(
            json.dumps(
                [
                    {
                        "id": job.id,
                        "title": job.title,
                        "type": job.type,
                        "department": job.department,
                        "expiry_date": job.expiry_date.isoformat() if job.expiry_date else None,
                    }
                    for job in jobs
                ],
                indent=2,
            )
        )


@jobs_app.command("create")
def jobs_create(
    title: str = typer.Option(..., "--title"),
    job_type: str = typer.Option("NonAcademic", "--type", help="Academic or NonAcademic"),
    department: str = typer.Option("", "--department"),
    level: str = typer.Option("", "--level"),
    description: str = typer.Option("", "--description"),
    expiry_date: datetime | None = typer.Option(None, "--expiry-date", formats=["%Y-%m-%d"]),
) -> None:
    """Post a new open vacancy."""
    configure_logging()
    ensure_initialized()
    if job_type not in ("Academic", "NonAcademic"):
        raise typer.BadParameter("type must be Academic or NonAcademic", param_hint="--type")

    with SessionLocal() as db:
        try:
            job = JobVacancyService(db).post_vacancy(
                title=title,
                type=job_type,
                description=description,
                department=department,
                level=level,
                expiry_date=expiry_date.date() if expiry_date else None,
            )
        except HireFormError as exc:
            raise typer.BadParameter(exc.message) from exc
        typer.echo(json.dumps({"id": job.id, "title": job.title, "type": job.type}, indent=2))


@applications_app.command("import")
def applications_import(file: Path = typer.Option(..., "--file", exists=True, readable=True)) -> None:
    """Load a complete application (user, general details, sections) from JSON."""
    configure_logging()
    ensure_initialized()
    try:
        payload = ImportPayload.model_validate_json(file.read_text(encoding="utf-8"))
    except ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first["loc"]) or "payload"
        raise typer.BadParameter(f"{location}: {first['msg']}", param_hint="--file") from exc

    with SessionLocal() as db:
        repo = Repository(db)
        user = repo.get_user_by_email(payload.user.email) or repo.create_user(
            full_name=payload.user.full_name, email=payload.user.email
        )

        service = ApplicationSubmissionService(db)
        try:
            result = service.submit_general_details(user.id, payload.job_id, payload.general_details)
            counts = {}
            for section, items in payload.sections.items():
                if items:
                    counts[section] = service.submit_section(user.id, payload.job_id, section, items)["inserted"]
        except HireFormError as exc:
            raise typer.BadParameter(exc.message) from exc

        typer.echo(json.dumps({"application_id": result["application_id"], "sections": counts}, indent=2))


@applications_app.command("render")
def applications_render(
    application_id: int = typer.Option(..., "--application-id"),
    out: Path | None = typer.Option(None, "--out", help="Defaults to the export directory"),
) -> None:
    """Write the filled application form to a PDF file."""
    configure_logging()
    ensure_initialized()
    settings = get_settings()

    with SessionLocal() as db:
        try:
            rendered = ApplicationPDFService(Repository(db), settings=settings).generate(application_id)
        except HireFormError as exc:
            typer.echo(json.dumps(exc.to_payload(), indent=2), err=True)
            raise typer.Exit(code=1) from exc

    target = out or settings.export_dir / rendered.filename
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(rendered.content)
    typer.echo(json.dumps({"file": str(target), "bytes": len(rendered.content)}, indent=2))


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, "--host"),
    port: int | None = typer.Option(None, "--port"),
) -> None:
    configure_logging()
    ensure_initialized()
    settings = get_settings()
    app_instance = create_app()
    uvicorn.run(app_instance, host=host or settings.app_host, port=port or settings.app_port)
