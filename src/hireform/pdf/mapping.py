"""Pydantic models for the coordinate mapping documents.

A mapping document is plain JSON kept next to the PDF templates. Keys are
camelCase (``fontSize``, ``startX``); every top-level key is optional. Pages
are numbered from 1 in the document.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class MappingModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore", frozen=True)


class PointMapping(MappingModel):
    x: float
    y: float
    font_size: float = 10
    page: int = Field(default=1, ge=1)
    label_x: float | None = None
    max_width: float | None = None


class TextMapping(PointMapping):
    text: str = ""
    centered: bool = False
    bold: bool = True


class ImageMapping(MappingModel):
    path: str
    x: float
    y: float
    width: float
    height: float
    page: int = Field(default=1, ge=1)


class TableMapping(MappingModel):
    start_x: float
    start_y: float | None = None
    row_height: float = 16
    font_size: float = 9
    page: int = Field(default=1, ge=1)
    title: str | None = None
    columns: dict[str, float] = Field(default_factory=dict)
    column_widths: dict[str, float] = Field(default_factory=dict)


class ParagraphMapping(MappingModel):
    x: float
    y: float | None = None
    font_size: float = 9
    page: int = Field(default=1, ge=1)
    max_width: float = 480
    line_height: float | None = None
    title: str | None = None
    text: str | None = None

    @property
    def leading(self) -> float:
        return self.line_height if self.line_height is not None else round(self.font_size * 1.3, 2)


class SignatureMapping(MappingModel):
    x: float
    y: float
    font_size: float = 9
    page: int = Field(default=2, ge=1)
    line_width: float = 160
    label: str = "Signature of Applicant"
    date_x: float | None = None


class LayoutOptions(MappingModel):
    page_top: float = 800
    bottom_margin: float = 50
    section_gap: float = 18
    rule_end_x: float = 545


class MappingDocument(MappingModel):
    logo: ImageMapping | None = None
    university_title: TextMapping | None = None
    form_title: TextMapping | None = None
    fields: dict[str, PointMapping] = Field(default_factory=dict)
    tables: dict[str, TableMapping] = Field(default_factory=dict)
    declaration: ParagraphMapping | None = None
    signature: SignatureMapping | None = None
    experience: ParagraphMapping | None = None
    special_qualifications: ParagraphMapping | None = None
    layout: LayoutOptions = Field(default_factory=LayoutOptions)
