"""Render a document layout into an HTML preview."""
from __future__ import annotations

import html
from pathlib import Path
from typing import List, Optional

from typesetter.model.layout_model import DocumentLayout, GlyphPlacement, ParagraphLayout
from typesetter.renderer.utils import format_pt, glyph_to_css
from typesetter.utils.units import Pt

LINE_HEIGHT_FACTOR = 1.2
PARAGRAPH_SPACING_FACTOR = 1.0


class HtmlRenderer:
    """Produce an absolutely positioned HTML representation of the layout."""

    def __init__(self, output_path: Path, line_height: Optional[Pt] = None) -> None:
        self._output_path = output_path
        self._line_height = line_height

    def render(self, layout: DocumentLayout) -> None:
        html_text = self.build_html(layout)
        self._output_path.write_text(html_text, encoding="utf-8")

    def build_html(self, layout: DocumentLayout) -> str:
        line_height = self._line_height or layout.font_size * LINE_HEIGHT_FACTOR
        spacing = layout.font_size * PARAGRAPH_SPACING_FACTOR

        blocks: List[str] = []
        top = Pt(0.0)
        for paragraph in layout.paragraphs:
            blocks.append(self._paragraph_to_div(paragraph, top, line_height))
            top += line_height * len(paragraph.lines) + spacing
        body = "\n".join(blocks)
        return f"""<!DOCTYPE html>
<html lang=\"en\">
<head>
  <meta charset=\"utf-8\" />
  <title>Typesetter Preview</title>
  <style>
    body {{ position: relative; margin: 0; padding: 0; }}
    .paragraph {{ position: absolute; left: 0; }}
    .glyph {{ position: absolute; white-space: pre; }}
    .overfull {{ background: rgba(255, 0, 0, 0.15); }}
  </style>
</head>
<body>
{body}
</body>
</html>
"""

    def _paragraph_to_div(self, paragraph: ParagraphLayout, top: Pt, line_height: Pt) -> str:
        spans: List[str] = []
        for index, line in enumerate(paragraph.lines):
            line_top = line_height * index
            css_class = "glyph overfull" if line.overfull else "glyph"
            spans.extend(self._placement_to_span(placement, line_top, css_class) for placement in line.placements)
        style = f"top: {format_pt(top)}; width: {format_pt(paragraph.text_width)}"
        inner = "\n".join(spans)
        return f"  <div class=\"paragraph\" style=\"{style}\">\n{inner}\n  </div>"

    def _placement_to_span(self, placement: GlyphPlacement, top: Pt, css_class: str) -> str:
        style = {
            "left": format_pt(placement.x),
            "top": format_pt(top),
        }
        style.update(glyph_to_css(placement.glyph))
        style_str = "; ".join(f"{k}: {v}" for k, v in style.items())
        return f"    <span class=\"{css_class}\" style=\"{style_str}\">{html.escape(placement.glyph.glyph_id)}</span>"
