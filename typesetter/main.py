"""Entry-point for the text → items → justified lines pipeline."""
from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from typesetter.layout.justifier import Justifier, NaiveJustifier
from typesetter.layout.knuth_plass import KnuthPlassJustifier
from typesetter.layout.layout_calculator import LayoutCalculator
from typesetter.model.glyph import AdvanceWidthTable, FontMetrics
from typesetter.model.layout_model import DocumentLayout
from typesetter.parser.itemizer import Itemizer
from typesetter.renderer.html_renderer import HtmlRenderer
from typesetter.utils.debug import DebugDumper
from typesetter.utils.logger import get_logger, set_verbosity
from typesetter.utils.text_normalizer import TextNormalizer
from typesetter.utils.units import Mm, Pt, mm_to_sp, pt_to_sp, sp_to_pt

LOGGER = get_logger(__name__)

DEFAULT_FONT_SIZE_PT = Pt(10.0)
DEFAULT_TEXT_WIDTH_MM = Mm(120.0)

JUSTIFIERS = {
    "naive": NaiveJustifier,
    "knuth-plass": KnuthPlassJustifier,
}


def build_document_layout(
    text: str,
    font: FontMetrics,
    font_size: Pt = DEFAULT_FONT_SIZE_PT,
    text_width: Optional[Pt] = None,
    justifier: Optional[Justifier] = None,
) -> DocumentLayout:
    """Normalize text, itemize every paragraph and justify it to ``text_width``."""
    if text_width is None:
        text_width = sp_to_pt(mm_to_sp(DEFAULT_TEXT_WIDTH_MM))

    itemizer = Itemizer(font, pt_to_sp(font_size))
    calculator = LayoutCalculator(justifier)
    paragraphs = [
        calculator.calculate(itemizer.itemize(paragraph), text_width)
        for paragraph in TextNormalizer().split_paragraphs(text)
    ]
    return DocumentLayout(paragraphs=paragraphs, font_size=font_size)


def render_outputs(layout: DocumentLayout, output_dir: Path, *, html: bool = True, debug: bool = True) -> None:
    """Render the layout into the requested formats."""
    output_dir.mkdir(parents=True, exist_ok=True)
    if html:
        HtmlRenderer(output_dir / "paragraphs.html").render(layout)
    if debug:
        DebugDumper(output_dir / "debug").dump(layout)


def load_font(metrics_file: Optional[str]) -> FontMetrics:
    """Load an advance-width table, or fall back to a monospace font."""
    if metrics_file is None:
        return AdvanceWidthTable.monospace()
    metrics_path = Path(metrics_file).resolve()
    if not metrics_path.exists():
        raise FileNotFoundError(f"Font metrics file not found: {metrics_path}")
    return AdvanceWidthTable.from_json(metrics_path)


def main(
    text_file: str,
    output_dir: Optional[str] = None,
    *,
    metrics_file: Optional[str] = None,
    font_size: Pt = DEFAULT_FONT_SIZE_PT,
    width: Mm = DEFAULT_TEXT_WIDTH_MM,
    justifier_name: str = "naive",
    html: bool = True,
) -> DocumentLayout:
    """Run the text → layout → renderer pipeline."""
    text_path = Path(text_file).resolve()
    if not text_path.exists():
        raise FileNotFoundError(f"Text file not found: {text_path}")

    font = load_font(metrics_file)
    text_width = sp_to_pt(mm_to_sp(width))
    justifier = JUSTIFIERS[justifier_name]()

    LOGGER.info("Justifying %s to %s with the %s justifier", text_path.name, width, justifier_name)
    layout = build_document_layout(text_path.read_text(encoding="utf-8"), font, font_size, text_width, justifier)

    overfull = sum(len(paragraph.overfull_lines) for paragraph in layout.paragraphs)
    if overfull:
        LOGGER.warning("%d overfull line(s) in %s", overfull, text_path.name)

    if output_dir is None:
        # An input without extension would otherwise name its own output directory.
        default_dir = text_path.with_suffix("") if text_path.suffix else text_path.parent / f"{text_path.name}_out"
        output_dir = str(default_dir)

    output_path = Path(output_dir).resolve()
    LOGGER.info("Rendering outputs into %s", output_path)
    render_outputs(layout, output_path, html=html)
    return layout


def cli(argv: Optional[List[str]] = None) -> None:
    import argparse

    parser = argparse.ArgumentParser(description="Break and justify plain-text paragraphs into positioned glyphs")
    parser.add_argument("text_file", help="Path to the input text file; blank lines separate paragraphs")
    parser.add_argument("--output", help="Directory to write generated artifacts")
    parser.add_argument("--metrics", help="JSON advance-width table (defaults to a monospace font)")
    parser.add_argument("--font-size", type=float, default=DEFAULT_FONT_SIZE_PT.value, help="Font size in points")
    parser.add_argument("--width-mm", type=float, default=DEFAULT_TEXT_WIDTH_MM.value, help="Column width in millimeters")
    parser.add_argument("--justifier", choices=sorted(JUSTIFIERS), default="naive", help="Line breaking policy")
    parser.add_argument("--no-html", action="store_true", help="Skip the HTML preview")
    parser.add_argument("--verbose", action="store_true", help="Log per-paragraph details")

    args = parser.parse_args(argv)
    set_verbosity(args.verbose)
    main(
        args.text_file,
        args.output,
        metrics_file=args.metrics,
        font_size=Pt(args.font_size),
        width=Mm(args.width_mm),
        justifier_name=args.justifier,
        html=not args.no_html,
    )


if __name__ == "__main__":  # pragma: no cover
    cli()
