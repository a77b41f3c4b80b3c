from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from hireform.config import Settings, get_settings
from hireform.errors import BadRequestError
from hireform.pdf.aggregator import ApplicationAggregator, ApplicationSource
from hireform.pdf.layout import LayoutEngine, reportlab_measure
from hireform.pdf.renderer import PDFRenderer
from hireform.pdf.templates import TemplateStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderedApplication:
    application_id: int
    application_type: str
    content: bytes

    @property
    def filename(self) -> str:
        return f"application_{self.application_id}.pdf"


def parse_application_id(value: Any) -> int:
    if value is None or isinstance(value, bool) or (isinstance(value, str) and not value.strip()):
        raise BadRequestError("Application ID is required.")
    try:
        application_id = int(str(value).strip())
    except ValueError as exc:
        raise BadRequestError("Application ID must be a positive integer.") from exc
    if application_id <= 0:
        raise BadRequestError("Application ID must be a positive integer.")
    return application_id


class ApplicationPDFService:
    """Application id in, filled PDF bytes out."""

    def __init__(
        self,
        source: ApplicationSource,
        *,
        settings: Settings | None = None,
        store: TemplateStore | None = None,
        renderer: PDFRenderer | None = None,
    ):
        self.settings = settings or get_settings()
        self.aggregator = ApplicationAggregator(source)
        self.store = store or TemplateStore(self.settings.template_dir, self.settings.mapping_dir)
        self.renderer = renderer or PDFRenderer(
            font_name=self.settings.pdf_font_name,
            bold_font_name=self.settings.pdf_bold_font_name,
            font_path=self.settings.pdf_font_path or None,
        )

    def generate(self, application_id: Any) -> RenderedApplication:
        application_id = parse_application_id(application_id)
        record = self.aggregator.aggregate(application_id)
        resolved = self.store.resolve(record.job.type)

        engine = LayoutEngine(
            resolved.mapping,
            measure=reportlab_measure(self.renderer.font_name),
            required_sections=self.settings.required_section_list,
        )
        instructions = engine.layout(record)
        content = self.renderer.render(resolved.template_bytes, instructions)
        logger.info("generated %s PDF for application %s", resolved.application_type, application_id)
        return RenderedApplication(
            application_id=application_id,
            application_type=resolved.application_type,
            content=content,
        )
