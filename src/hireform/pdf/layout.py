"""Turn an application record plus a mapping document into draw instructions.

The engine never touches a PDF backend. Fixed-position content (fields,
titles, anchored tables) goes exactly where the mapping says; tables and
paragraphs without an explicit start flow below whatever was last placed on
their page. A section is emitted only when it has data and a mapping entry.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from datetime import date, datetime
from typing import Any

from pydantic.alias_generators import to_snake
from reportlab.pdfbase.pdfmetrics import stringWidth

from hireform.errors import ConfigurationError
from hireform.pdf.instructions import (
    DrawInstruction,
    DrawRule,
    PlaceImage,
    PlaceTableRow,
    PlaceText,
    PlaceWrappedText,
)
from hireform.pdf.mapping import (
    LayoutOptions,
    MappingDocument,
    ParagraphMapping,
    PointMapping,
    TableMapping,
    TextMapping,
)
from hireform.types import ApplicationRecord, FormRow

logger = logging.getLogger(__name__)

TextMeasure = Callable[[str, float], float]

DEFAULT_DECLARATION = (
    "I hereby declare that the particulars furnished by me in this application are true and "
    "accurate. I am aware that if any of them are found to be false or inaccurate before "
    "selection I am liable to be disqualified, and if found after appointment I am liable to be "
    "dismissed without any compensation."
)

NON_ACADEMIC_FIELDS: tuple[tuple[str, str], ...] = (
    ("PostApplied", "Post Applied For:"),
    ("FullName", "Full Name:"),
    ("NameWithInitials", "Name with Initials:"),
    ("NIC", "NIC Number:"),
    ("DOB", "Date of Birth:"),
    ("Gender", "Gender:"),
    ("CivilStatus", "Civil Status:"),
    ("PhoneNumber", "Phone Number:"),
    ("Email", "Email:"),
    ("PresentAddress", "Present Address:"),
    ("PermanentAddress", "Permanent Address:"),
    ("CitizenshipType", "Citizenship:"),
    ("CitizenshipDetails", "Citizenship Details:"),
    ("EthnicityOrReligion", "Ethnicity / Religion:"),
    ("ExpiryDate", "Closing Date:"),
    ("SubmissionDate", "Date of Submission:"),
)

NON_ACADEMIC_TABLES: tuple[tuple[str, str, str], ...] = (
    ("gceOlResults", "G.C.E. (O/L) Examination", "gce_ol_results"),
    ("gceAlResults", "G.C.E. (A/L) Examination", "gce_al_results"),
    ("universityEducation", "University Education", "university_educations"),
    ("professionalQualifications", "Professional Qualifications", "professional_qualifications"),
    ("languageProficiency", "Language Proficiency", "language_proficiencies"),
    ("employmentHistory", "Employment History", "employment_histories"),
    ("references", "Non-related Referees", "references"),
    ("attachments", "Documents Attached", "attachments"),
)

ACADEMIC_FIELDS: tuple[tuple[str, str], ...] = (
    ("PostApplied", "Post Applied For:"),
    ("Department", "Department / Faculty:"),
    ("Level", "Grade:"),
    ("FullName", "Full Name:"),
    ("NameWithInitials", "Name with Initials:"),
    ("NIC", "NIC Number:"),
    ("DOB", "Date of Birth:"),
    ("Gender", "Gender:"),
    ("CivilStatus", "Civil Status:"),
    ("CitizenshipType", "Citizenship:"),
    ("CitizenshipDetails", "Citizenship Details:"),
    ("PermanentAddress", "Permanent Address:"),
    ("PresentAddress", "Address for Correspondence:"),
    ("PhoneNumber", "Telephone:"),
    ("Email", "Email:"),
    ("SubmissionDate", "Date of Submission:"),
)

ACADEMIC_TABLES: tuple[tuple[str, str, str], ...] = (
    ("universityEducation", "Degrees and Diplomas", "university_educations"),
    ("researchPublications", "Research and Publications", "research_publications"),
    ("professionalQualifications", "Professional Qualifications", "professional_qualifications"),
    ("employmentHistory", "Present and Previous Employment", "employment_histories"),
    ("languageProficiency", "Language Proficiency", "language_proficiencies"),
    ("references", "Referees", "references"),
    ("attachments", "Documents Attached", "attachments"),
)


def reportlab_measure(font_name: str = "Helvetica") -> TextMeasure:
    def measure(text: str, font_size: float) -> float:
        return stringWidth(text, font_name, font_size)

    return measure


def wrap_text(text: str | None, max_width: float, measure: Callable[[str], float]) -> list[str]:
    """Greedy word wrap.

    Words are appended to the running line while its measured width stays
    within ``max_width``. A single word wider than ``max_width`` gets a line
    of its own. Line breaks in the input always start a new line. Empty input
    yields one empty line.
    """
    if not text:
        return [""]

    lines: list[str] = []
    for paragraph in str(text).splitlines():
        current = ""
        for word in paragraph.split():
            candidate = f"{current} {word}" if current else word
            if current and measure(candidate) > max_width:
                lines.append(current)
                current = word
            else:
                current = candidate
        lines.append(current)
    return lines or [""]


def fit_text(text: str, max_width: float, measure: Callable[[str], float]) -> str:
    if measure(text) <= max_width:
        return text
    while len(text) > 1 and measure(text + "...") > max_width:
        text = text[:-1]
    return text.rstrip() + "..."


def is_date_field(name: str) -> bool:
    return name == "DOB" or "date" in name.lower()


def format_date(value: date | datetime | str | None) -> str:
    if value is None or value == "":
        return ""
    if isinstance(value, str):
        try:
            value = date.fromisoformat(value.strip()[:10])
        except ValueError:
            return value
    return value.strftime("%d/%m/%Y")


def format_value(name: str, value: Any) -> str:
    if is_date_field(name) or isinstance(value, date):
        return format_date(value)
    if value is None:
        return ""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    return str(value).strip()


class _LayoutPass:
    """Per-call output buffer and page cursors.

    The cursor of a page is the highest y still free below everything placed
    on it. Flowing content stops at ``bottom(page)``, which is the bottom
    margin raised above any reserved block (the signature) on that page and
    every later one.
    """

    def __init__(self, options: LayoutOptions):
        self.options = options
        self.instructions: list[DrawInstruction] = []
        self._cursors: dict[int, float] = {}
        self._pages: set[int] = set()
        self._reserved: tuple[int, float] | None = None

    def emit(self, instruction: DrawInstruction) -> None:
        self.instructions.append(instruction)
        self._pages.add(instruction.page)

    @property
    def last_page(self) -> int:
        return max(self._pages, default=0)

    def has_content(self, page: int) -> bool:
        return page in self._pages

    def cursor(self, page: int) -> float:
        return self._cursors.get(page, self.options.page_top)

    def advance(self, page: int, y: float) -> None:
        self._cursors[page] = min(self.cursor(page), y)

    def reserve(self, from_page: int, floor: float) -> None:
        self._reserved = (from_page, floor)

    def bottom(self, page: int) -> float:
        if self._reserved is not None and page >= self._reserved[0]:
            return max(self.options.bottom_margin, self._reserved[1])
        return self.options.bottom_margin

    def fill(self, page: int) -> None:
        self.advance(page, self.bottom(page))

    def next_start(self, page: int, needed: float) -> int:
        """First page from ``page`` on with ``needed`` points free below its cursor."""
        while self.has_content(page) and self.cursor(page) - needed < self.bottom(page):
            page += 1
        return page


class LayoutEngine:
    def __init__(
        self,
        mapping: MappingDocument,
        *,
        measure: TextMeasure | None = None,
        required_sections: Iterable[str] = (),
    ):
        self.mapping = mapping
        self.measure = measure or reportlab_measure()
        self.required_sections = tuple(required_sections)

    def layout(self, record: ApplicationRecord) -> list[DrawInstruction]:
        self._check_required_sections()
        layout_pass = _LayoutPass(self.mapping.layout)
        signature = self.mapping.signature
        if signature is not None:
            # top of the date text printed beside the signature rule
            floor = signature.y + signature.font_size + 3 + self.mapping.layout.section_gap
            layout_pass.reserve(signature.page - 1, floor)
        if record.application_type == "Academic":
            self._layout_academic(layout_pass, record)
        else:
            self._layout_non_academic(layout_pass, record)
        logger.debug(
            "application %s laid out as %s: %d instructions",
            record.id,
            record.application_type,
            len(layout_pass.instructions),
        )
        return layout_pass.instructions

    # ------------------------------------------------------------------
    # Form branches
    # ------------------------------------------------------------------
    def _layout_non_academic(self, lp: _LayoutPass, record: ApplicationRecord) -> None:
        values = self._field_values(record)
        self._header(lp, default_form_title=f"Application for the Post of {record.job.title}".strip())
        for name, label in NON_ACADEMIC_FIELDS:
            self._field(lp, name, label, values.get(name))

        for table_name, title, attribute in NON_ACADEMIC_TABLES:
            self._table(lp, table_name, title, getattr(record, attribute))

        self._paragraphs(
            lp,
            self.mapping.experience,
            "Experience",
            [row.description for row in record.experience_details],
        )
        self._paragraphs(
            lp,
            self.mapping.special_qualifications,
            "Special Qualifications",
            [row.description for row in record.special_qualifications],
        )
        self._declaration(lp)
        self._signature(lp, record)

    def _layout_academic(self, lp: _LayoutPass, record: ApplicationRecord) -> None:
        values = self._field_values(record)
        self._header(lp, default_form_title=f"Application for Academic Appointment: {record.job.title}".strip())
        for name, label in ACADEMIC_FIELDS:
            self._field(lp, name, label, values.get(name))

        for table_name, title, attribute in ACADEMIC_TABLES:
            self._table(lp, table_name, title, getattr(record, attribute))

        self._paragraphs(
            lp,
            self.mapping.special_qualifications,
            "Other Qualifications and Achievements",
            [row.description for row in record.special_qualifications],
        )
        self._paragraphs(
            lp,
            self.mapping.experience,
            "Teaching and Research Experience",
            [row.description for row in record.experience_details],
        )
        self._declaration(lp)
        self._signature(lp, record)

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------
    def _check_required_sections(self) -> None:
        for name in self.required_sections:
            if name.startswith("tables."):
                present = name.removeprefix("tables.") in self.mapping.tables
            elif name.startswith("fields."):
                present = name.removeprefix("fields.") in self.mapping.fields
            else:
                present = getattr(self.mapping, to_snake(name), None) is not None
            if not present:
                raise ConfigurationError(f"mapping document has no '{name}' section")

    def _field_values(self, record: ApplicationRecord) -> dict[str, Any]:
        values: dict[str, Any] = record.general_details.as_row() if record.general_details else {}
        values["PostApplied"] = values.get("PostApplied") or record.job.title
        values["Department"] = record.job.department
        values["Level"] = record.job.level
        values["ExpiryDate"] = record.job.expiry_date
        values["SubmissionDate"] = record.submission_date
        return values

    def _header(self, lp: _LayoutPass, default_form_title: str) -> None:
        logo = self.mapping.logo
        if logo is not None:
            lp.emit(PlaceImage(logo.page - 1, logo.path, logo.x, logo.y, logo.width, logo.height))
            lp.advance(logo.page - 1, logo.y - lp.options.section_gap)

        self._title(lp, self.mapping.university_title, "")
        self._title(lp, self.mapping.form_title, default_form_title)

    def _title(self, lp: _LayoutPass, spec: TextMapping | None, default_text: str) -> None:
        if spec is None:
            return
        text = spec.text or default_text
        if not text:
            return
        lp.emit(
            PlaceText(spec.page - 1, spec.x, spec.y, text, spec.font_size, bold=spec.bold, centered=spec.centered)
        )
        lp.advance(spec.page - 1, spec.y - lp.options.section_gap)

    def _field(self, lp: _LayoutPass, name: str, label: str, raw_value: Any) -> None:
        spec: PointMapping | None = self.mapping.fields.get(name)
        value = format_value(name, raw_value)
        if spec is None or not value:
            return

        page = spec.page - 1
        if spec.label_x is not None:
            lp.emit(PlaceText(page, spec.label_x, spec.y, label, spec.font_size, bold=True))
        else:
            lp.emit(PlaceText(page, spec.x, spec.y + spec.font_size + 2, label, spec.font_size, bold=True))

        if spec.max_width:
            lines = wrap_text(value, spec.max_width, lambda text: self.measure(text, spec.font_size))
            placed = PlaceWrappedText(page, spec.x, spec.y, tuple(lines), spec.font_size, spec.font_size * 1.2)
            lp.emit(placed)
            bottom = placed.bottom_y
        else:
            lp.emit(PlaceText(page, spec.x, spec.y, value, spec.font_size))
            bottom = spec.y
        lp.advance(page, bottom - lp.options.section_gap)

    def _table(self, lp: _LayoutPass, name: str, title: str, rows: Sequence[FormRow]) -> None:
        spec: TableMapping | None = self.mapping.tables.get(name)
        if spec is None or not rows or not spec.columns:
            return

        options = lp.options
        row_height = spec.row_height
        page = spec.page - 1
        start_y = spec.start_y
        if start_y is not None and start_y < lp.bottom(page):
            page += 1
            start_y = None
        elif start_y is not None and lp.has_content(page) and start_y + row_height > lp.cursor(page):
            # earlier sections already ran past the anchor
            start_y = None
        if start_y is None:
            page = lp.next_start(page, 2 * row_height)
            start_y = lp.cursor(page) - row_height

        heading = spec.title or title
        lp.emit(PlaceText(page, spec.start_x, start_y + row_height, heading, spec.font_size + 1, bold=True))

        row_index = 0
        y = start_y
        for number, row in enumerate(rows, start=1):
            y = start_y - row_index * row_height
            if y < lp.bottom(page):
                lp.fill(page)
                page = lp.next_start(page + 1, 0)
                start_y = lp.cursor(page)
                row_index = 0
                y = start_y
            lp.emit(PlaceTableRow(page, y, self._row_cells(spec, number, row.as_row()), spec.font_size))
            row_index += 1

        rule_y = y - row_height / 2
        lp.emit(DrawRule(page, spec.start_x, rule_y, options.rule_end_x, rule_y))
        lp.advance(page, y - options.section_gap)

    def _row_cells(self, spec: TableMapping, number: int, row: dict[str, Any]) -> tuple[tuple[float, str], ...]:
        row = {"No": number, **row}
        cells = []
        for column, offset in spec.columns.items():
            text = format_value(column, row.get(column))
            width = spec.column_widths.get(column)
            if width and text:
                text = fit_text(text, width, lambda value: self.measure(value, spec.font_size))
            cells.append((spec.start_x + offset, text))
        return tuple(cells)

    def _paragraphs(
        self,
        lp: _LayoutPass,
        spec: ParagraphMapping | None,
        title: str,
        texts: Sequence[str],
    ) -> None:
        texts = [text for text in texts if text and text.strip()]
        if spec is None or not texts:
            return

        leading = spec.leading
        page, y = self._block_start(lp, spec)
        lp.emit(PlaceText(page, spec.x, y, spec.title or title, spec.font_size + 1, bold=True))
        y -= leading * 1.5
        for text in texts:
            page, y = self._flow_lines(lp, spec, page, y, wrap_text(text, spec.max_width, self._measure_at(spec)))
            y -= leading * 0.5
        lp.advance(page, y - lp.options.section_gap)

    def _declaration(self, lp: _LayoutPass) -> None:
        spec = self.mapping.declaration
        if spec is None:
            return

        leading = spec.leading
        page, y = self._block_start(lp, spec)
        lp.emit(PlaceText(page, spec.x, y, spec.title or "Declaration", spec.font_size + 1, bold=True))
        lines = wrap_text(spec.text or DEFAULT_DECLARATION, spec.max_width, self._measure_at(spec))
        page, y = self._flow_lines(lp, spec, page, y - leading * 1.5, lines)
        lp.advance(page, y - lp.options.section_gap)

    def _signature(self, lp: _LayoutPass, record: ApplicationRecord) -> None:
        spec = self.mapping.signature
        if spec is None:
            return

        # follows the content when it spilled past the mapped page
        page = max(spec.page - 1, lp.last_page)
        lp.emit(DrawRule(page, spec.x, spec.y, spec.x + spec.line_width, spec.y))
        lp.emit(PlaceText(page, spec.x, spec.y - spec.font_size - 3, spec.label, spec.font_size))
        if spec.date_x is not None:
            submitted = format_date(record.submission_date)
            lp.emit(PlaceText(page, spec.date_x, spec.y + 3, f"Date: {submitted}", spec.font_size))
        lp.advance(page, spec.y - spec.font_size - 3 - lp.options.section_gap)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _measure_at(self, spec: ParagraphMapping) -> Callable[[str], float]:
        return lambda text: self.measure(text, spec.font_size)

    def _block_start(self, lp: _LayoutPass, spec: ParagraphMapping) -> tuple[int, float]:
        """Page and baseline for a paragraph block's heading.

        A heading never goes where its first line would not fit above the
        page's bottom limit, and an anchored block that earlier content has
        already run past flows from the cursor instead.
        """
        page = spec.page - 1
        leading = spec.leading
        y = spec.y
        if y is not None and lp.has_content(page) and y + leading > lp.cursor(page):
            y = None
        if y is not None:
            if y - leading * 1.5 >= lp.bottom(page):
                return page, y
            page += 1
        page = lp.next_start(page, leading * 2.5)
        return page, lp.cursor(page) - leading

    def _flow_lines(
        self,
        lp: _LayoutPass,
        spec: ParagraphMapping,
        page: int,
        y: float,
        lines: list[str],
    ) -> tuple[int, float]:
        """Place lines from ``y`` downwards, breaking onto new pages as needed.

        Returns the page and the y just below the last placed line.
        """
        leading = spec.leading
        remaining = lines
        while remaining:
            bottom = lp.bottom(page)
            room = int((y - bottom) // leading) + 1 if y >= bottom else 0
            if room <= 0 and lp.has_content(page):
                lp.fill(page)
                page = lp.next_start(page + 1, leading)
                y = lp.cursor(page)
                continue
            room = max(room, 1)
            chunk, remaining = remaining[:room], remaining[room:]
            lp.emit(PlaceWrappedText(page, spec.x, y, tuple(chunk), spec.font_size, leading))
            y -= len(chunk) * leading
        return page, y
