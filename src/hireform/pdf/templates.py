from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from pydantic import ValidationError
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from hireform.errors import ConfigurationError, NotFoundError
from hireform.pdf.mapping import MappingDocument
from hireform.types import ApplicationType, resolve_application_type

logger = logging.getLogger(__name__)

TEMPLATE_FILES: dict[ApplicationType, str] = {
    "Academic": "academic_template.pdf",
    "NonAcademic": "non_academic_template.pdf",
}
MAPPING_FILES: dict[ApplicationType, str] = {
    "Academic": "academic_mapping.json",
    "NonAcademic": "non_academic_mapping.json",
}


@dataclass(frozen=True)
class ResolvedTemplate:
    application_type: ApplicationType
    template_path: Path
    template_bytes: bytes
    mapping_path: Path
    mapping: MappingDocument


class TemplateStore:
    """Resolves the template/mapping pair for an application type.

    Files are read on every call so edits to a mapping take effect on the
    next render without a restart.
    """

    def __init__(self, template_dir: Path, mapping_dir: Path):
        self.template_dir = Path(template_dir)
        self.mapping_dir = Path(mapping_dir)

    def resolve(self, application_type: str | None) -> ResolvedTemplate:
        resolved_type = resolve_application_type(application_type)
        template_path = self.template_dir / TEMPLATE_FILES[resolved_type]
        mapping_path = self.mapping_dir / MAPPING_FILES[resolved_type]

        template_bytes = self.load_template(template_path)
        mapping = self.load_mapping(mapping_path)
        logger.info("resolved %s template %s with mapping %s", resolved_type, template_path.name, mapping_path.name)
        return ResolvedTemplate(
            application_type=resolved_type,
            template_path=template_path,
            template_bytes=template_bytes,
            mapping_path=mapping_path,
            mapping=mapping,
        )

    def load_template(self, path: Path) -> bytes:
        if not path.is_file():
            raise NotFoundError(f"PDF template not found: {path.name}")
        return path.read_bytes()

    def load_mapping(self, path: Path) -> MappingDocument:
        if not path.is_file():
            raise ConfigurationError(f"mapping document not found: {path.name}")
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
            mapping = MappingDocument.model_validate(payload)
        except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as exc:
            raise ConfigurationError(f"mapping document {path.name} is invalid: {exc}") from exc

        if mapping.logo is not None:
            logo_path = Path(mapping.logo.path)
            if not logo_path.is_absolute():
                logo_path = path.parent / logo_path
            if logo_path.is_file():
                mapping = mapping.model_copy(update={"logo": mapping.logo.model_copy(update={"path": str(logo_path)})})
            else:
                logger.warning("logo %s referenced by %s is missing; skipping it", logo_path, path.name)
                mapping = mapping.model_copy(update={"logo": None})
        return mapping


def write_blank_template(path: Path, pages: int = 2, pagesize: tuple[float, float] = A4) -> Path:
    """Write an empty multi-page PDF usable as a form template."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    pdf = canvas.Canvas(str(path), pagesize=pagesize)
    for number in range(1, pages + 1):
        pdf.setFont("Helvetica", 7)
        pdf.drawRightString(pagesize[0] - 40, 20, f"Page {number} of {pages}")
        pdf.showPage()
    pdf.save()
    return path
