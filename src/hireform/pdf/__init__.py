"""Coordinate-driven filling of application forms onto PDF templates."""

from .service import ApplicationPDFService, RenderedApplication, parse_application_id

__all__ = ["ApplicationPDFService", "RenderedApplication", "parse_application_id"]
