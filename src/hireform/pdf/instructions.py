"""Backend-independent draw instructions produced by the layout engine.

Coordinates are PDF points from the bottom-left corner; ``page`` is a
zero-based page index.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PlaceText:
    page: int
    x: float
    y: float
    text: str
    font_size: float
    bold: bool = False
    centered: bool = False


@dataclass(frozen=True)
class PlaceWrappedText:
    page: int
    x: float
    y: float
    lines: tuple[str, ...]
    font_size: float
    line_height: float

    @property
    def bottom_y(self) -> float:
        return self.y - (len(self.lines) - 1) * self.line_height


@dataclass(frozen=True)
class PlaceTableRow:
    page: int
    y: float
    cells: tuple[tuple[float, str], ...]
    font_size: float


@dataclass(frozen=True)
class DrawRule:
    page: int
    x1: float
    y1: float
    x2: float
    y2: float
    width: float = 0.5


@dataclass(frozen=True)
class PlaceImage:
    page: int
    path: str
    x: float
    y: float
    width: float
    height: float


DrawInstruction = PlaceText | PlaceWrappedText | PlaceTableRow | DrawRule | PlaceImage


def page_count(instructions: list[DrawInstruction]) -> int:
    return max((item.page for item in instructions), default=0) + 1
