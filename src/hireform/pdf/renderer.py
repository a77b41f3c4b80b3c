from __future__ import annotations

import io
import logging
from collections import defaultdict
from collections.abc import Sequence

from pypdf import PdfReader, PdfWriter
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas

from hireform.errors import HireFormError, InternalError
from hireform.pdf.instructions import (
    DrawInstruction,
    DrawRule,
    PlaceImage,
    PlaceTableRow,
    PlaceText,
    PlaceWrappedText,
    page_count,
)

logger = logging.getLogger(__name__)


def register_font(font_name: str, font_path: str) -> None:
    if font_name in pdfmetrics.getRegisteredFontNames():
        return
    pdfmetrics.registerFont(TTFont(font_name, font_path))
    logger.info("registered font %s from %s", font_name, font_path)


class PDFRenderer:
    """Draws instructions on an overlay and stamps it onto a template.

    All pages are drawn on a single reportlab canvas, so each image and font
    is embedded once per document.
    """

    def __init__(
        self,
        font_name: str = "Helvetica",
        bold_font_name: str = "Helvetica-Bold",
        font_path: str | None = None,
    ):
        self.font_name = font_name
        self.bold_font_name = bold_font_name
        if font_path:
            register_font(font_name, font_path)

    def render(self, template_bytes: bytes, instructions: Sequence[DrawInstruction]) -> bytes:
        try:
            return self._render(template_bytes, instructions)
        except HireFormError:
            raise
        except Exception as exc:
            logger.error("PDF rendering failed: %s", exc, exc_info=True)
            raise InternalError("Failed to render the application PDF") from exc

    def _render(self, template_bytes: bytes, instructions: Sequence[DrawInstruction]) -> bytes:
        template = PdfReader(io.BytesIO(template_bytes))
        if not template.pages:
            raise InternalError("PDF template has no pages")

        sizes = [(float(page.mediabox.width), float(page.mediabox.height)) for page in template.pages]
        total_pages = max(len(sizes), page_count(list(instructions)))
        while len(sizes) < total_pages:
            sizes.append(sizes[-1])

        overlay = self._draw_overlay(sizes, instructions)

        writer = PdfWriter(clone_from=template)
        while len(writer.pages) < total_pages:
            width, height = sizes[len(writer.pages)]
            writer.add_blank_page(width=width, height=height)
        for index, overlay_page in enumerate(overlay.pages):
            writer.pages[index].merge_page(overlay_page)

        buffer = io.BytesIO()
        writer.write(buffer)
        result = buffer.getvalue()
        logger.info("rendered %d page(s), %d bytes", total_pages, len(result))
        return result

    def _draw_overlay(self, sizes: list[tuple[float, float]], instructions: Sequence[DrawInstruction]) -> PdfReader:
        by_page: dict[int, list[DrawInstruction]] = defaultdict(list)
        for instruction in instructions:
            by_page[instruction.page].append(instruction)

        buffer = io.BytesIO()
        pdf = canvas.Canvas(buffer, pagesize=sizes[0])
        images: dict[str, ImageReader] = {}
        for index, size in enumerate(sizes):
            pdf.setPageSize(size)
            for instruction in by_page.get(index, []):
                self._draw(pdf, instruction, images)
            pdf.showPage()
        pdf.save()

        buffer.seek(0)
        return PdfReader(buffer)

    def _draw(self, pdf: canvas.Canvas, instruction: DrawInstruction, images: dict[str, ImageReader]) -> None:
        if isinstance(instruction, PlaceText):
            pdf.setFont(self.bold_font_name if instruction.bold else self.font_name, instruction.font_size)
            if instruction.centered:
                pdf.drawCentredString(instruction.x, instruction.y, instruction.text)
            else:
                pdf.drawString(instruction.x, instruction.y, instruction.text)
        elif isinstance(instruction, PlaceWrappedText):
            pdf.setFont(self.font_name, instruction.font_size)
            for offset, line in enumerate(instruction.lines):
                if line:
                    pdf.drawString(instruction.x, instruction.y - offset * instruction.line_height, line)
        elif isinstance(instruction, PlaceTableRow):
            pdf.setFont(self.font_name, instruction.font_size)
            for x, text in instruction.cells:
                if text:
                    pdf.drawString(x, instruction.y, text)
        elif isinstance(instruction, DrawRule):
            pdf.setLineWidth(instruction.width)
            pdf.line(instruction.x1, instruction.y1, instruction.x2, instruction.y2)
        elif isinstance(instruction, PlaceImage):
            image = images.get(instruction.path)
            if image is None:
                image = images[instruction.path] = ImageReader(instruction.path)
            pdf.drawImage(
                image,
                instruction.x,
                instruction.y,
                width=instruction.width,
                height=instruction.height,
                mask="auto",
                preserveAspectRatio=True,
            )
        else:
            raise InternalError(f"unsupported draw instruction {type(instruction).__name__}")
