from __future__ import annotations

from datetime import datetime

import pytest

from hireform.config import PACKAGE_DIR
from hireform.errors import ConfigurationError
from hireform.pdf.instructions import DrawRule, PlaceImage, PlaceTableRow, PlaceText, PlaceWrappedText
from hireform.pdf.layout import NON_ACADEMIC_TABLES, LayoutEngine
from hireform.pdf.mapping import MappingDocument
from hireform.pdf.templates import MAPPING_FILES, TemplateStore


def char_measure(text: str, font_size: float) -> float:
    return len(text) * font_size * 0.5


def engine_for(mapping: dict, **kwargs) -> LayoutEngine:
    return LayoutEngine(MappingDocument.model_validate(mapping), measure=char_measure, **kwargs)


def texts(instructions) -> list[str]:
    return [item.text for item in instructions if isinstance(item, PlaceText)]


def rows_on(instructions, page: int | None = None) -> list[PlaceTableRow]:
    return [
        item
        for item in instructions
        if isinstance(item, PlaceTableRow) and (page is None or item.page == page)
    ]


def test_full_name_is_placed_at_mapped_point_after_its_label(make_record) -> None:
    engine = engine_for({"fields": {"FullName": {"x": 50, "y": 700}}})
    instructions = engine.layout(make_record())

    placed = [item for item in instructions if isinstance(item, PlaceText)]
    value_index = next(
        index for index, item in enumerate(placed) if (item.x, item.y, item.text) == (50, 700, "Bavindu Shan")
    )
    assert value_index > 0
    assert placed[value_index - 1].text == "Full Name:"
    assert placed[value_index].page == 0


def test_label_shares_the_baseline_when_label_x_is_mapped(make_record) -> None:
    engine = engine_for({"fields": {"NIC": {"x": 200, "y": 686, "labelX": 50}}})
    label, value = [item for item in engine.layout(make_record()) if isinstance(item, PlaceText)]
    assert (label.x, label.y, label.text) == (50, 686, "NIC Number:")
    assert (value.x, value.y, value.text) == (200, 686, "200112345678")


def test_dob_is_printed_day_first(make_record) -> None:
    engine = engine_for({"fields": {"DOB": {"x": 200, "y": 668}}})
    assert "20/05/2001" in texts(engine.layout(make_record()))


def test_fields_without_mapping_or_value_are_skipped(make_record) -> None:
    engine = engine_for({"fields": {"CitizenshipDetails": {"x": 200, "y": 500}}})
    assert engine.layout(make_record()) == []
    assert engine_for({}).layout(make_record()) == []


def test_nth_table_row_sits_n_minus_one_row_heights_below_start(make_record) -> None:
    engine = engine_for(
        {
            "tables": {
                "gceOlResults": {
                    "startX": 40,
                    "startY": 600,
                    "rowHeight": 15,
                    "columns": {"Subject": 10, "Grade": 200},
                }
            }
        }
    )
    rows = rows_on(engine.layout(make_record()))
    assert [row.y for row in rows] == [600, 585, 570]
    assert rows[2].y == 600 - (3 - 1) * 15
    assert rows[0].cells == ((50, "Mathematics"), (240, "A"))


def test_table_heading_and_rule_bracket_the_rows(make_record) -> None:
    engine = engine_for(
        {
            "tables": {
                "references": {
                    "startX": 50,
                    "startY": 400,
                    "rowHeight": 20,
                    "title": "Referees",
                    "columns": {"No": 0, "Name": 20},
                }
            }
        }
    )
    instructions = engine.layout(make_record())
    heading = instructions[0]
    assert isinstance(heading, PlaceText) and heading.text == "Referees" and heading.y == 420
    assert [row.cells for row in rows_on(instructions)] == [
        ((50, "1"), (70, "Prof. K. Perera")),
        ((50, "2"), (70, "Mr. S. Silva")),
    ]
    rule = instructions[-1]
    assert isinstance(rule, DrawRule) and rule.y1 == 380 - 10


def test_empty_section_is_omitted_without_moving_anchored_sections(make_record) -> None:
    mapping = {
        "tables": {
            "gceOlResults": {"startX": 50, "startY": 700, "rowHeight": 14, "columns": {"Subject": 0}},
            "references": {"startX": 50, "startY": 300, "rowHeight": 14, "columns": {"Name": 0}},
        }
    }
    full = engine_for(mapping).layout(make_record())
    without_results = engine_for(mapping).layout(make_record(gce_ol_results=[]))
    without_references = engine_for(mapping).layout(make_record(references=[]))

    assert "Non-related Referees" not in texts(without_references)
    assert all(row.cells[0][1] not in {"Prof. K. Perera", "Mr. S. Silva"} for row in rows_on(without_references))
    assert "G.C.E. (O/L) Examination" not in texts(without_results)

    reference_rows = [row.y for row in rows_on(full) if row.y <= 300]
    assert [row.y for row in rows_on(without_results)] == reference_rows


def test_flowing_tables_stack_below_the_previous_section(make_record) -> None:
    engine = engine_for(
        {
            "layout": {"pageTop": 800, "sectionGap": 20},
            "tables": {
                "gceOlResults": {"startX": 50, "startY": 600, "rowHeight": 10, "columns": {"Subject": 0}},
                "gceAlResults": {"startX": 50, "rowHeight": 10, "columns": {"Subject": 0}},
            },
        }
    )
    instructions = engine.layout(make_record())
    ol_rows = [row for row in rows_on(instructions) if row.cells[0][1] != "Combined Maths"]
    al_row = next(row for row in rows_on(instructions) if row.cells[0][1] == "Combined Maths")
    last_ol_y = ol_rows[-1].y
    assert last_ol_y == 580
    # heading goes at the cursor, the first row one row height below it
    assert al_row.y == last_ol_y - 20 - 10


def test_table_rows_continue_on_the_next_page_past_the_bottom_margin(make_record) -> None:
    engine = engine_for(
        {
            "layout": {"pageTop": 780, "bottomMargin": 60},
            "tables": {"gceOlResults": {"startX": 50, "startY": 80, "rowHeight": 15, "columns": {"Subject": 0}}},
        }
    )
    rows = rows_on(engine.layout(make_record()))
    assert [(row.page, row.y) for row in rows] == [(0, 80), (0, 65), (1, 780)]


def test_academic_and_non_academic_forms_use_different_sections(make_record) -> None:
    mapping = {
        "fields": {
            "EthnicityOrReligion": {"x": 200, "y": 480},
            "Department": {"x": 200, "y": 720},
        },
        "tables": {
            "gceOlResults": {"startX": 50, "startY": 600, "columns": {"Subject": 0}},
            "researchPublications": {"startX": 50, "startY": 400, "columns": {"Description": 0}},
        },
    }
    non_academic = texts(engine_for(mapping).layout(make_record(job_type="NonAcademic")))
    academic = texts(engine_for(mapping).layout(make_record(job_type="Academic")))

    assert "Ethnicity / Religion:" in non_academic and "G.C.E. (O/L) Examination" in non_academic
    assert "Department / Faculty:" not in non_academic and "Research and Publications" not in non_academic
    assert "Department / Faculty:" in academic and "Research and Publications" in academic
    assert "Ethnicity / Religion:" not in academic and "G.C.E. (O/L) Examination" not in academic


@pytest.mark.parametrize("job_type", [None, "", "Administrative", "academic"])
def test_unknown_types_fall_back_to_the_non_academic_form(make_record, job_type) -> None:
    mapping = {"tables": {"gceOlResults": {"startX": 50, "startY": 600, "columns": {"Subject": 0}}}}
    record = make_record(job_type=job_type)
    assert record.application_type == "NonAcademic"
    assert "G.C.E. (O/L) Examination" in texts(engine_for(mapping).layout(record))


def test_paragraph_sections_wrap_and_flow(make_record) -> None:
    long_text = " ".join(["experience"] * 30)
    engine = engine_for(
        {
            "experience": {"x": 50, "y": 500, "fontSize": 10, "maxWidth": 100, "lineHeight": 12},
        }
    )
    instructions = engine.layout(make_record(experience_details=[{"description": long_text}]))
    heading = instructions[0]
    assert isinstance(heading, PlaceText) and heading.text == "Experience" and heading.y == 500
    paragraph = instructions[1]
    assert isinstance(paragraph, PlaceWrappedText)
    assert paragraph.y == 500 - 18
    assert all(char_measure(line, 10) <= 100 for line in paragraph.lines)
    assert " ".join(paragraph.lines) == long_text


def test_empty_paragraph_section_is_skipped(make_record) -> None:
    engine = engine_for({"specialQualifications": {"x": 50, "y": 500}})
    assert engine.layout(make_record(special_qualifications=[])) == []


def test_declaration_and_signature_blocks(make_record) -> None:
    engine = engine_for(
        {
            "declaration": {"x": 50, "y": 200, "page": 2, "maxWidth": 400, "text": "I declare this is true."},
            "signature": {"x": 50, "y": 90, "page": 2, "dateX": 380},
        }
    )
    instructions = engine.layout(make_record())
    assert {item.page for item in instructions} == {1}
    declaration = next(item for item in instructions if isinstance(item, PlaceWrappedText))
    assert declaration.lines == ("I declare this is true.",)
    assert any(isinstance(item, DrawRule) and item.y1 == 90 for item in instructions)
    assert "Signature of Applicant" in texts(instructions)
    assert "Date: 14/03/2025" in texts(instructions)


def test_missing_signature_is_skipped_unless_required(make_record) -> None:
    assert engine_for({}).layout(make_record()) == []
    with pytest.raises(ConfigurationError):
        engine_for({}, required_sections=["signature"]).layout(make_record())
    with pytest.raises(ConfigurationError):
        engine_for({"tables": {}}, required_sections=["tables.references"]).layout(make_record())


def test_header_places_logo_and_titles(make_record) -> None:
    engine = engine_for(
        {
            "logo": {"path": "/srv/logo.png", "x": 40, "y": 770, "width": 50, "height": 50},
            "universityTitle": {"text": "University of Colombo", "x": 297, "y": 800, "centered": True},
            "formTitle": {"x": 297, "y": 780},
        }
    )
    instructions = engine.layout(make_record())
    assert instructions[0] == PlaceImage(0, "/srv/logo.png", 40, 770, 50, 50)
    assert texts(instructions) == ["University of Colombo", "Application for the Post of Management Assistant"]


def test_layout_is_repeatable(make_record) -> None:
    engine = engine_for({"tables": {"gceAlResults": {"startX": 50, "columns": {"Subject": 0}}}})
    record = make_record()
    assert engine.layout(record) == engine.layout(record)


def shipped_engine(application_type: str) -> LayoutEngine:
    mapping_dir = PACKAGE_DIR / "assets" / "mappings"
    mapping = TemplateStore(mapping_dir, mapping_dir).load_mapping(mapping_dir / MAPPING_FILES[application_type])
    return LayoutEngine(mapping)


def lowest_y(item) -> float:
    if isinstance(item, PlaceWrappedText):
        return item.bottom_y
    if isinstance(item, DrawRule):
        return min(item.y1, item.y2)
    return item.y


def test_long_record_keeps_clear_of_the_signature_block(make_record) -> None:
    paragraph = "Coordinated the examination timetable and invigilation roster for three faculties. " * 4
    record = make_record(
        university_educations=[
            {"degree_or_diploma": f"Degree {n}", "institute": "University of Colombo", "from_year": 2015 + n}
            for n in range(3)
        ],
        professional_qualifications=[
            {"institution": "CIMA", "qualification_name": f"Certificate {n}"} for n in range(3)
        ],
        employment_histories=[
            {"post_held": f"Clerk {n}", "institution": "People's Bank", "last_salary": "50000"} for n in range(4)
        ],
        references=[{"name": f"Referee {n}", "designation": "Manager"} for n in range(3)],
        experience_details=[{"description": paragraph} for _ in range(6)],
        special_qualifications=[{"description": paragraph} for _ in range(6)],
    )
    instructions = shipped_engine("NonAcademic").layout(record)

    rule = next(item for item in instructions if isinstance(item, DrawRule) and item.x2 - item.x1 == 180)
    assert rule.y1 == 90
    assert rule.page == max(item.page for item in instructions)
    assert "Declaration" in texts(instructions)

    date_top = rule.y1 + 3 + 9
    signature_texts = {"Signature of Applicant", "Date: 14/03/2025"}
    others = [
        item
        for item in instructions
        if item is not rule
        and item.page >= 1
        and not (isinstance(item, PlaceText) and item.text in signature_texts)
    ]
    assert others
    assert all(lowest_y(item) > date_top for item in others)


def test_overflowing_rows_do_not_collide_with_later_tables(make_record) -> None:
    record = make_record(gce_ol_results=[{"subject": f"S{n}", "grade": "A"} for n in range(30)])
    instructions = shipped_engine("NonAcademic").layout(record)
    titles = {title for _, title, _ in NON_ACADEMIC_TABLES}

    ol_pages = {row.page for row in rows_on(instructions) if row.cells[1][1].startswith("S")}
    assert ol_pages == {0, 1}
    for page in {item.page for item in instructions}:
        ys = sorted(
            [row.y for row in rows_on(instructions, page)]
            + [item.y for item in instructions if isinstance(item, PlaceText) and item.page == page and item.text in titles]
        )
        assert all(upper - lower >= 14 for lower, upper in zip(ys, ys[1:])), (page, ys)


@pytest.mark.parametrize(("section", "heading_text"), [("experience", "Experience"), ("declaration", "Declaration")])
def test_block_heading_moves_to_the_next_page_with_its_first_line(make_record, section, heading_text) -> None:
    engine = engine_for(
        {
            "tables": {"gceOlResults": {"startX": 50, "startY": 96, "rowHeight": 10, "columns": {"Subject": 0}}},
            section: {"x": 50, "fontSize": 9},
        }
    )
    instructions = engine.layout(make_record())

    heading = next(item for item in instructions if isinstance(item, PlaceText) and item.text == heading_text)
    first_line = next(item for item in instructions if isinstance(item, PlaceWrappedText))
    assert heading.page == 1
    assert heading.y == pytest.approx(800 - 11.7)
    assert first_line.page == 1
    assert first_line.y == pytest.approx(heading.y - 11.7 * 1.5)
    assert all(lowest_y(item) >= 50 for item in instructions)


def test_signature_follows_a_declaration_that_spills_over(make_record) -> None:
    engine = engine_for(
        {
            "declaration": {"x": 50, "y": 300, "page": 1, "maxWidth": 100, "text": " ".join(["declaration"] * 60)},
            "signature": {"x": 50, "y": 90, "page": 1, "dateX": 380},
        }
    )
    instructions = engine.layout(make_record())

    lines = [item for item in instructions if isinstance(item, PlaceWrappedText)]
    assert [item.page for item in lines] == [0, 1]
    assert all(item.bottom_y >= 90 + 9 + 3 + 18 for item in lines)
    rule = next(item for item in instructions if isinstance(item, DrawRule))
    assert rule.page == 1


def test_attachment_list_prints_type_and_upload_date(make_record) -> None:
    engine = engine_for(
        {"tables": {"attachments": {"startX": 50, "startY": 300, "columns": {"FileType": 0, "UploadedAt": 200}}}}
    )
    record = make_record(
        attachments=[
            {
                "file_type": "Degree Certificate",
                "file_path": "/srv/uploads/7/degree.pdf",
                "uploaded_at": datetime(2025, 3, 10, 8, 0),
            }
        ]
    )
    instructions = engine.layout(record)
    assert "Documents Attached" in texts(instructions)
    assert rows_on(instructions)[0].cells == ((50, "Degree Certificate"), (250, "10/03/2025"))
