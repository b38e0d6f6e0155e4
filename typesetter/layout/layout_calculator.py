"""Turn justified lines into measured layout with overfull diagnostics."""
from __future__ import annotations

from typing import List, Optional, Sequence

from typesetter.layout.justifier import Justifier, NaiveJustifier
from typesetter.model.items import Item
from typesetter.model.layout_model import GlyphPlacement, JustifiedLine, LineLayout, ParagraphLayout
from typesetter.utils.logger import get_logger
from typesetter.utils.units import Pt, nearly_equal, sp_to_pt

LOGGER = get_logger(__name__)


class LayoutCalculator:
    """Justify paragraphs and measure the resulting lines."""

    def __init__(self, justifier: Optional[Justifier] = None) -> None:
        self._justifier = justifier or NaiveJustifier()

    @property
    def justifier(self) -> Justifier:
        return self._justifier

    # ------------------------------------------------------------------
    # Public API
    def calculate(self, paragraph: Sequence[Item], text_width: Pt) -> ParagraphLayout:
        """Return the paragraph's lines, flagging those wider than ``text_width``."""

        if text_width < Pt(0.0):
            raise ValueError(f"Text width must not be negative, got {text_width!r}")

        lines: List[LineLayout] = []
        for index, justified in enumerate(self._justifier.justify(paragraph, text_width)):
            line = self._measure_line(justified, text_width)
            if line.overfull:
                LOGGER.warning(
                    "Overfull line %d (%.2fpt > %.2fpt): %r",
                    index + 1,
                    line.width.value,
                    text_width.value,
                    line.text,
                )
            lines.append(line)

        LOGGER.debug("Laid out %d item(s) into %d line(s)", len(paragraph), len(lines))
        return ParagraphLayout(lines=lines, text_width=text_width)

    def _measure_line(self, justified: JustifiedLine, text_width: Pt) -> LineLayout:
        placements = [GlyphPlacement(glyph=glyph, x=x) for glyph, x in justified]
        width = Pt(0.0)
        for placement in placements:
            right_edge = placement.x + sp_to_pt(placement.glyph.width())
            if right_edge > width:
                width = right_edge
        # Sub-sp rounding of stretched glue must not count as overflow.
        overfull = width > text_width and not nearly_equal(width.value, text_width.value)
        return LineLayout(placements=placements, width=width, overfull=overfull)
