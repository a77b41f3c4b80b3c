"""Initial schema: vacancies, applications and their form sections

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19

"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None

SECTION_TABLES = (
    "university_educations",
    "professional_qualifications",
    "language_proficiencies",
    "employment_histories",
    "experience_details",
    "special_qualifications",
    "research_publications",
    "gce_ol_results",
    "gce_al_results",
    "application_references",
    "application_attachments",
)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def _application_fk() -> sa.Column:
    return sa.Column(
        "application_id",
        sa.Integer(),
        sa.ForeignKey("applications.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        *_timestamps(),
    )
    op.create_table(
        "job_vacancies",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("type", sa.String(40), nullable=False),
        sa.Column("department", sa.String(255), nullable=False),
        sa.Column("level", sa.String(120), nullable=False),
        sa.Column("posted_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expiry_date", sa.Date(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, index=True),
        *_timestamps(),
    )
    op.create_table(
        "applications",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("job_id", sa.Integer(), sa.ForeignKey("job_vacancies.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("submission_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(40), nullable=False),
        sa.Column("remarks", sa.Text(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "job_id", name="uq_application_user_job"),
    )
    op.create_table(
        "application_general_details",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "application_id",
            sa.Integer(),
            sa.ForeignKey("applications.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("post_applied", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("name_with_initials", sa.String(255), nullable=False),
        sa.Column("nic", sa.String(20), nullable=False),
        sa.Column("dob", sa.Date(), nullable=True),
        sa.Column("gender", sa.String(40), nullable=False),
        sa.Column("phone_number", sa.String(40), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("present_address", sa.Text(), nullable=False),
        sa.Column("permanent_address", sa.Text(), nullable=False),
        sa.Column("civil_status", sa.String(40), nullable=False),
        sa.Column("citizenship_type", sa.String(40), nullable=False),
        sa.Column("citizenship_details", sa.Text(), nullable=False),
        sa.Column("ethnicity_or_religion", sa.String(120), nullable=False),
        *_timestamps(),
    )
    op.create_table(
        "university_educations",
        sa.Column("id", sa.Integer(), primary_key=True),
        _application_fk(),
        sa.Column("degree_or_diploma", sa.String(255), nullable=False),
        sa.Column("institute", sa.String(255), nullable=False),
        sa.Column("from_year", sa.Integer(), nullable=True),
        sa.Column("to_year", sa.Integer(), nullable=True),
        sa.Column("class_obtained", sa.String(80), nullable=False),
        sa.Column("year_obtained", sa.Integer(), nullable=True),
        sa.Column("index_number", sa.String(80), nullable=False),
        *_timestamps(),
    )
    op.create_table(
        "professional_qualifications",
        sa.Column("id", sa.Integer(), primary_key=True),
        _application_fk(),
        sa.Column("institution", sa.String(255), nullable=False),
        sa.Column("qualification_name", sa.String(255), nullable=False),
        sa.Column("from_year", sa.Integer(), nullable=True),
        sa.Column("to_year", sa.Integer(), nullable=True),
        sa.Column("result_or_exam_passed", sa.String(255), nullable=False),
        *_timestamps(),
    )
    op.create_table(
        "language_proficiencies",
        sa.Column("id", sa.Integer(), primary_key=True),
        _application_fk(),
        sa.Column("language", sa.String(120), nullable=False),
        sa.Column("can_speak", sa.Boolean(), nullable=False),
        sa.Column("can_read", sa.Boolean(), nullable=False),
        sa.Column("can_write", sa.Boolean(), nullable=False),
        sa.Column("can_teach", sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_table(
        "employment_histories",
        sa.Column("id", sa.Integer(), primary_key=True),
        _application_fk(),
        sa.Column("post_held", sa.String(255), nullable=False),
        sa.Column("institution", sa.String(255), nullable=False),
        sa.Column("from_date", sa.Date(), nullable=True),
        sa.Column("to_date", sa.Date(), nullable=True),
        sa.Column("last_salary", sa.String(80), nullable=False),
        *_timestamps(),
    )
    for table in ("experience_details", "special_qualifications", "research_publications"):
        op.create_table(
            table,
            sa.Column("id", sa.Integer(), primary_key=True),
            _application_fk(),
            sa.Column("description", sa.Text(), nullable=False),
            *_timestamps(),
        )
    for table in ("gce_ol_results", "gce_al_results"):
        op.create_table(
            table,
            sa.Column("id", sa.Integer(), primary_key=True),
            _application_fk(),
            sa.Column("subject", sa.String(120), nullable=False),
            sa.Column("grade", sa.String(10), nullable=False),
            *_timestamps(),
        )
    op.create_table(
        "application_references",
        sa.Column("id", sa.Integer(), primary_key=True),
        _application_fk(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("designation", sa.String(255), nullable=False),
        sa.Column("address", sa.Text(), nullable=False),
        *_timestamps(),
    )
    op.create_table(
        "application_attachments",
        sa.Column("id", sa.Integer(), primary_key=True),
        _application_fk(),
        sa.Column("file_type", sa.String(80), nullable=False),
        sa.Column("file_path", sa.String(500), nullable=False),
        sa.Column("uploaded_at", sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
    )


def downgrade() -> None:
    for table in reversed(SECTION_TABLES):
        op.drop_table(table)
    op.drop_table("application_general_details")
    op.drop_table("applications")
    op.drop_table("job_vacancies")
    op.drop_table("users")
