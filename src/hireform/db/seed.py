from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from hireform.db.models import JobVacancy

SAMPLE_VACANCIES: list[dict[str, str]] = [
    {
        "title": "Lecturer (Probationary) in Computer Science",
        "type": "Academic",
        "department": "Department of Computer Science",
        "level": "Grade II",
        "description": "Teaching and research in undergraduate and postgraduate programmes.",
    },
    {
        "title": "Management Assistant",
        "type": "NonAcademic",
        "department": "Registrar's Office",
        "level": "Grade III",
        "description": "Clerical and administrative support for the registrar's office.",
    },
]


def seed_sample_vacancies(session: Session) -> int:
    inserted = 0
    for vacancy in SAMPLE_VACANCIES:
        existing = session.scalar(select(JobVacancy).where(JobVacancy.title == vacancy["title"]))
        if existing:
            continue
        session.add(JobVacancy(status="Open", **vacancy))
        inserted += 1

    session.commit()
    return inserted
