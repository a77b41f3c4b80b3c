from __future__ import annotations

from datetime import date, datetime
from typing import Any, Literal

from pydantic import AliasGenerator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_pascal

ApplicationType = Literal["Academic", "NonAcademic"]
ApplicationStatus = Literal["New", "Under Review", "Shortlisted", "Rejected", "Selected"]


def resolve_application_type(value: str | None) -> ApplicationType:
    return "Academic" if value == "Academic" else "NonAcademic"


class FormRow(BaseModel):
    """A read-only record row; dumps with the printed form's column names."""

    model_config = ConfigDict(
        frozen=True,
        from_attributes=True,
        alias_generator=AliasGenerator(serialization_alias=to_pascal),
    )

    def as_row(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class GeneralDetails(FormRow):
    post_applied: str = ""
    full_name: str = ""
    name_with_initials: str = ""
    nic: str = Field(default="", serialization_alias="NIC")
    dob: date | None = Field(default=None, serialization_alias="DOB")
    gender: str = ""
    phone_number: str = ""
    email: str = ""
    present_address: str = ""
    permanent_address: str = ""
    civil_status: str = ""
    citizenship_type: str = ""
    citizenship_details: str = ""
    ethnicity_or_religion: str = ""


class UniversityEducationRow(FormRow):
    degree_or_diploma: str = ""
    institute: str = ""
    from_year: int | None = None
    to_year: int | None = None
    class_obtained: str = Field(default="", serialization_alias="Class")
    year_obtained: int | None = None
    index_number: str = ""


class ProfessionalQualificationRow(FormRow):
    institution: str = ""
    qualification_name: str = ""
    from_year: int | None = None
    to_year: int | None = None
    result_or_exam_passed: str = ""


class LanguageProficiencyRow(FormRow):
    language: str
    can_speak: bool = False
    can_read: bool = False
    can_write: bool = False
    can_teach: bool = False


class EmploymentHistoryRow(FormRow):
    post_held: str = ""
    institution: str = ""
    from_date: date | None = None
    to_date: date | None = None
    last_salary: str = ""


class DescriptionRow(FormRow):
    description: str = ""


class ExamResultRow(FormRow):
    subject: str
    grade: str = ""


class ReferenceRow(FormRow):
    name: str
    designation: str = ""
    address: str = ""


class AttachmentRow(FormRow):
    file_type: str
    file_path: str
    uploaded_at: datetime | None = None


class JobSummary(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int
    title: str = ""
    type: str | None = None
    department: str = ""
    level: str = ""
    expiry_date: date | None = None


class ApplicationRecord(BaseModel):
    """Everything printed on an application form, read once per render."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int
    submission_date: datetime | None = None
    status: str = ""
    remarks: str = ""
    job: JobSummary
    general_details: GeneralDetails | None = None
    university_educations: tuple[UniversityEducationRow, ...] = ()
    professional_qualifications: tuple[ProfessionalQualificationRow, ...] = ()
    language_proficiencies: tuple[LanguageProficiencyRow, ...] = ()
    employment_histories: tuple[EmploymentHistoryRow, ...] = ()
    experience_details: tuple[DescriptionRow, ...] = ()
    special_qualifications: tuple[DescriptionRow, ...] = ()
    research_publications: tuple[DescriptionRow, ...] = ()
    gce_ol_results: tuple[ExamResultRow, ...] = ()
    gce_al_results: tuple[ExamResultRow, ...] = ()
    references: tuple[ReferenceRow, ...] = ()
    attachments: tuple[AttachmentRow, ...] = ()

    @property
    def application_type(self) -> ApplicationType:
        return resolve_application_type(self.job.type)


SECTION_ROW_MODELS: dict[str, type[FormRow]] = {
    "university-educations": UniversityEducationRow,
    "professional-qualifications": ProfessionalQualificationRow,
    "language-proficiencies": LanguageProficiencyRow,
    "employment-histories": EmploymentHistoryRow,
    "experience-details": DescriptionRow,
    "special-qualifications": DescriptionRow,
    "research-publications": DescriptionRow,
    "gce-ol-results": ExamResultRow,
    "gce-al-results": ExamResultRow,
    "references": ReferenceRow,
    "attachments": AttachmentRow,
}
