from __future__ import annotations

import os
import tempfile
from datetime import date, datetime
from pathlib import Path

_TEST_ROOT = Path(tempfile.mkdtemp(prefix="hireform-tests-"))
os.environ["APP_ENV"] = "test"
os.environ["DATABASE_URL"] = f"sqlite:///{_TEST_ROOT / 'hireform.db'}"
os.environ["DATA_DIR"] = str(_TEST_ROOT)
os.environ["TEMPLATE_DIR"] = str(_TEST_ROOT / "templates")
os.environ["EXPORT_DIR"] = str(_TEST_ROOT / "exports")

import pytest  # noqa: E402

from hireform.config import get_settings  # noqa: E402
from hireform.db.base import Base  # noqa: E402
from hireform.db.repositories import Repository  # noqa: E402
from hireform.db.seed import seed_sample_vacancies  # noqa: E402
from hireform.db.session import SessionLocal, engine  # noqa: E402
from hireform.pdf.templates import TEMPLATE_FILES, write_blank_template  # noqa: E402
from hireform.types import ApplicationRecord  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def blank_templates() -> Path:
    template_dir = get_settings().template_dir
    for filename in TEMPLATE_FILES.values():
        write_blank_template(template_dir / filename)
    return template_dir


@pytest.fixture(autouse=True)
def reset_db() -> None:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    with SessionLocal() as session:
        seed_sample_vacancies(session)
    yield


@pytest.fixture
def make_record():
    """Build an ``ApplicationRecord`` without touching the database."""

    def factory(job_type: str | None = "NonAcademic", **overrides) -> ApplicationRecord:
        payload = {
            "id": 7,
            "submission_date": datetime(2025, 3, 14, 9, 30),
            "status": "New",
            "remarks": "",
            "job": {
                "id": 3,
                "title": "Management Assistant",
                "type": job_type,
                "department": "Registrar's Office",
                "level": "Grade III",
                "expiry_date": date(2025, 4, 30),
            },
            "general_details": {
                "post_applied": "Management Assistant",
                "full_name": "Bavindu Shan",
                "name_with_initials": "B. Shan",
                "nic": "200112345678",
                "dob": date(2001, 5, 20),
                "gender": "Male",
                "phone_number": "0771234567",
                "email": "bavindushan@example.com",
                "present_address": "123 Main Street, Colombo 07",
                "permanent_address": "45 Lake Road, Kandy",
                "civil_status": "Single",
                "citizenship_type": "Descent",
                "citizenship_details": "",
                "ethnicity_or_religion": "Sinhala",
            },
            "university_educations": [
                {
                    "degree_or_diploma": "BSc in Computer Science",
                    "institute": "University of Colombo",
                    "from_year": 2019,
                    "to_year": 2023,
                    "class_obtained": "First Class",
                    "year_obtained": 2023,
                    "index_number": "CS/2019/041",
                }
            ],
            "professional_qualifications": [
                {
                    "institution": "CIMA",
                    "qualification_name": "Certificate in Business Accounting",
                    "from_year": 2020,
                    "to_year": 2021,
                    "result_or_exam_passed": "Passed",
                }
            ],
            "language_proficiencies": [
                {"language": "Sinhala", "can_speak": True, "can_read": True, "can_write": True},
                {"language": "English", "can_speak": True, "can_read": True, "can_write": False},
            ],
            "employment_histories": [
                {
                    "post_held": "Office Assistant",
                    "institution": "People's Bank",
                    "from_date": date(2023, 6, 1),
                    "to_date": None,
                    "last_salary": "65000",
                }
            ],
            "experience_details": [{"description": "Handled correspondence and filing for a branch office."}],
            "special_qualifications": [{"description": "Colours awarded for athletics."}],
            "research_publications": [{"description": "Shan B., Query planning for small clinics, 2023."}],
            "gce_ol_results": [
                {"subject": "Mathematics", "grade": "A"},
                {"subject": "Science", "grade": "A"},
                {"subject": "English", "grade": "B"},
            ],
            "gce_al_results": [{"subject": "Combined Maths", "grade": "A"}],
            "references": [
                {"name": "Prof. K. Perera", "designation": "Professor", "address": "University of Colombo"},
                {"name": "Mr. S. Silva", "designation": "Branch Manager", "address": "People's Bank, Kandy"},
            ],
        }
        payload.update(overrides)
        return ApplicationRecord.model_validate(payload)

    return factory


@pytest.fixture
def applicant_id() -> int:
    with SessionLocal() as session:
        return Repository(session).create_user(full_name="Bavindu Shan", email="bavindushan@example.com").id


@pytest.fixture
def job_ids() -> dict[str, int]:
    with SessionLocal() as session:
        return {job.type: job.id for job in Repository(session).list_open_jobs()}


@pytest.fixture
def general_details_payload() -> dict[str, str]:
    return {
        "post_applied": "Management Assistant",
        "full_name": "Bavindu Shan",
        "name_with_initials": "B. Shan",
        "nic": "200112345678",
        "dob": "2001-05-20",
        "gender": "Male",
        "phone_number": "0771234567",
        "email": "bavindushan@example.com",
        "present_address": "123 Main Street, Colombo 07",
        "permanent_address": "45 Lake Road, Kandy",
        "civil_status": "Single",
        "citizenship_type": "Descent",
        "ethnicity_or_religion": "Sinhala",
    }
