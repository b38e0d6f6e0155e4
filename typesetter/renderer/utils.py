"""Common helpers shared by renderer implementations."""
from __future__ import annotations

from typing import Dict

from typesetter.model.glyph import Glyph
from typesetter.utils.units import Pt, sp_to_pt


def format_pt(value: Pt) -> str:
    """Format a length for CSS, trimming float noise."""
    return f"{round(value.value, 3):g}pt"


def glyph_to_css(glyph: Glyph) -> Dict[str, str]:
    """Convert a glyph's scale into CSS properties."""
    return {"font-size": format_pt(sp_to_pt(glyph.scale))}
