"""Positioned output of the justification engine, consumed by renderers."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from typesetter.model.glyph import Glyph
from typesetter.utils.units import Pt

# What a justifier emits for one line: each glyph with its offset from the
# line's left margin.
JustifiedLine = List[Tuple[Glyph, Pt]]


@dataclass(slots=True)
class GlyphPlacement:
    """A glyph and its horizontal offset from the left margin."""

    glyph: Glyph
    x: Pt


@dataclass(slots=True)
class LineLayout:
    """A single justified line with its rendered extent."""

    placements: List[GlyphPlacement]
    width: Pt
    overfull: bool = False

    @property
    def text(self) -> str:
        """Glyph identifiers of the line, for diagnostics."""
        return "".join(placement.glyph.glyph_id for placement in self.placements)


@dataclass(slots=True)
class ParagraphLayout:
    """All lines of one paragraph justified against the same width."""

    lines: Sequence[LineLayout]
    text_width: Pt

    @property
    def overfull_lines(self) -> List[int]:
        """Indices of lines whose content exceeds the target width."""
        return [index for index, line in enumerate(self.lines) if line.overfull]


@dataclass(slots=True)
class DocumentLayout:
    """Ordered paragraphs sharing a font size and column width."""

    paragraphs: List[ParagraphLayout] = field(default_factory=list)
    font_size: Pt = Pt(10.0)
