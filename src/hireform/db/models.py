from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hireform.db.base import Base, TimestampMixin, utcnow


class User(TimestampMixin, Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)


class JobVacancy(TimestampMixin, Base):
    __tablename__ = "job_vacancies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    type: Mapped[str] = mapped_column(String(40), default="NonAcademic", nullable=False)
    department: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    level: Mapped[str] = mapped_column(String(120), default="", nullable=False)
    posted_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    expiry_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="Open", nullable=False, index=True)


class Application(TimestampMixin, Base):
    __tablename__ = "applications"
    __table_args__ = (UniqueConstraint("user_id", "job_id", name="uq_application_user_job"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    job_id: Mapped[int] = mapped_column(ForeignKey("job_vacancies.id", ondelete="CASCADE"), index=True)
    submission_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    status: Mapped[str] = mapped_column(String(40), default="New", nullable=False)
    remarks: Mapped[str] = mapped_column(Text, default="", nullable=False)

    user: Mapped[User] = relationship(lazy="joined")
    job: Mapped[JobVacancy] = relationship(lazy="joined")
    general_details: Mapped[ApplicationGeneralDetails | None] = relationship(
        lazy="selectin", uselist=False
    )
    university_educations: Mapped[list[UniversityEducation]] = relationship(
        lazy="selectin", order_by="UniversityEducation.id"
    )
    professional_qualifications: Mapped[list[ProfessionalQualification]] = relationship(
        lazy="selectin", order_by="ProfessionalQualification.id"
    )
    language_proficiencies: Mapped[list[LanguageProficiency]] = relationship(
        lazy="selectin", order_by="LanguageProficiency.id"
    )
    employment_histories: Mapped[list[EmploymentHistory]] = relationship(
        lazy="selectin", order_by="EmploymentHistory.id"
    )
    experience_details: Mapped[list[ExperienceDetail]] = relationship(
        lazy="selectin", order_by="ExperienceDetail.id"
    )
    special_qualifications: Mapped[list[SpecialQualification]] = relationship(
        lazy="selectin", order_by="SpecialQualification.id"
    )
    research_publications: Mapped[list[ResearchPublication]] = relationship(
        lazy="selectin", order_by="ResearchPublication.id"
    )
    gce_ol_results: Mapped[list[GceOlResult]] = relationship(lazy="selectin", order_by="GceOlResult.id")
    gce_al_results: Mapped[list[GceAlResult]] = relationship(lazy="selectin", order_by="GceAlResult.id")
    references: Mapped[list[ApplicationReference]] = relationship(
        lazy="selectin", order_by="ApplicationReference.id"
    )
    attachments: Mapped[list[ApplicationAttachment]] = relationship(
        lazy="selectin", order_by="ApplicationAttachment.id"
    )


class ApplicationGeneralDetails(TimestampMixin, Base):
    __tablename__ = "application_general_details"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    application_id: Mapped[int] = mapped_column(
        ForeignKey("applications.id", ondelete="CASCADE"), unique=True
    )
    post_applied: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    full_name: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    name_with_initials: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    nic: Mapped[str] = mapped_column(String(20), default="", nullable=False)
    dob: Mapped[date | None] = mapped_column(Date, nullable=True)
    gender: Mapped[str] = mapped_column(String(40), default="", nullable=False)
    phone_number: Mapped[str] = mapped_column(String(40), default="", nullable=False)
    email: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    present_address: Mapped[str] = mapped_column(Text, default="", nullable=False)
    permanent_address: Mapped[str] = mapped_column(Text, default="", nullable=False)
    civil_status: Mapped[str] = mapped_column(String(40), default="", nullable=False)
    citizenship_type: Mapped[str] = mapped_column(String(40), default="", nullable=False)
    citizenship_details: Mapped[str] = mapped_column(Text, default="", nullable=False)
    ethnicity_or_religion: Mapped[str] = mapped_column(String(120), default="", nullable=False)


class UniversityEducation(TimestampMixin, Base):
    __tablename__ = "university_educations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    application_id: Mapped[int] = mapped_column(ForeignKey("applications.id", ondelete="CASCADE"), index=True)
    degree_or_diploma: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    institute: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    from_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    to_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    class_obtained: Mapped[str] = mapped_column(String(80), default="", nullable=False)
    year_obtained: Mapped[int | None] = mapped_column(Integer, nullable=True)
    index_number: Mapped[str] = mapped_column(String(80), default="", nullable=False)


class ProfessionalQualification(TimestampMixin, Base):
    __tablename__ = "professional_qualifications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    application_id: Mapped[int] = mapped_column(ForeignKey("applications.id", ondelete="CASCADE"), index=True)
    institution: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    qualification_name: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    from_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    to_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    result_or_exam_passed: Mapped[str] = mapped_column(String(255), default="", nullable=False)


class LanguageProficiency(TimestampMixin, Base):
    __tablename__ = "language_proficiencies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    application_id: Mapped[int] = mapped_column(ForeignKey("applications.id", ondelete="CASCADE"), index=True)
    language: Mapped[str] = mapped_column(String(120), nullable=False)
    can_speak: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    can_read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    can_write: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    can_teach: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)


class EmploymentHistory(TimestampMixin, Base):
    __tablename__ = "employment_histories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    application_id: Mapped[int] = mapped_column(ForeignKey("applications.id", ondelete="CASCADE"), index=True)
    post_held: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    institution: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    from_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    to_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    last_salary: Mapped[str] = mapped_column(String(80), default="", nullable=False)


class ExperienceDetail(TimestampMixin, Base):
    __tablename__ = "experience_details"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    application_id: Mapped[int] = mapped_column(ForeignKey("applications.id", ondelete="CASCADE"), index=True)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)


class SpecialQualification(TimestampMixin, Base):
    __tablename__ = "special_qualifications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    application_id: Mapped[int] = mapped_column(ForeignKey("applications.id", ondelete="CASCADE"), index=True)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)


class ResearchPublication(TimestampMixin, Base):
    __tablename__ = "research_publications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    application_id: Mapped[int] = mapped_column(ForeignKey("applications.id", ondelete="CASCADE"), index=True)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)


class GceOlResult(TimestampMixin, Base):
    __tablename__ = "gce_ol_results"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    application_id: Mapped[int] = mapped_column(ForeignKey("applications.id", ondelete="CASCADE"), index=True)
    subject: Mapped[str] = mapped_column(String(120), nullable=False)
    grade: Mapped[str] = mapped_column(String(10), default="", nullable=False)


class GceAlResult(TimestampMixin, Base):
    __tablename__ = "gce_al_results"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    application_id: Mapped[int] = mapped_column(ForeignKey("applications.id", ondelete="CASCADE"), index=True)
    subject: Mapped[str] = mapped_column(String(120), nullable=False)
    grade: Mapped[str] = mapped_column(String(10), default="", nullable=False)


class ApplicationReference(TimestampMixin, Base):
    __tablename__ = "application_references"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    application_id: Mapped[int] = mapped_column(ForeignKey("applications.id", ondelete="CASCADE"), index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    designation: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    address: Mapped[str] = mapped_column(Text, default="", nullable=False)


class ApplicationAttachment(TimestampMixin, Base):
    __tablename__ = "application_attachments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    application_id: Mapped[int] = mapped_column(ForeignKey("applications.id", ondelete="CASCADE"), index=True)
    file_type: Mapped[str] = mapped_column(String(80), nullable=False)
    file_path: Mapped[str] = mapped_column(String(500), nullable=False)
    uploaded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)


SECTION_MODELS: dict[str, type[Base]] = {
    "university-educations": UniversityEducation,
    "professional-qualifications": ProfessionalQualification,
    "language-proficiencies": LanguageProficiency,
    "employment-histories": EmploymentHistory,
    "experience-details": ExperienceDetail,
    "special-qualifications": SpecialQualification,
    "research-publications": ResearchPublication,
    "gce-ol-results": GceOlResult,
    "gce-al-results": GceAlResult,
    "references": ApplicationReference,
    "attachments": ApplicationAttachment,
}
