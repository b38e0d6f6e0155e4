"""Glyph references and the font-metrics collaborator that measures them."""
from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional, Protocol

from typesetter.utils.logger import get_logger
from typesetter.utils.units import Sp

LOGGER = get_logger(__name__)

DEFAULT_UNITS_PER_EM = 1000
DEFAULT_MONOSPACE_ADVANCE = 600

# Glyph set at the end of a line broken at a hyphenation point.
HYPHEN_GLYPH = "-"


class FontMetrics(Protocol):
    """Anything able to tell the width of a glyph at a given scale.

    Implementations must return the same width for the same glyph and scale,
    and must not be mutated while a paragraph that references them is being
    justified.
    """

    def char_width(self, glyph_id: str, scale: Sp) -> Sp:
        ...


@dataclass(frozen=True, slots=True)
class Glyph:
    """A glyph to typeset, with the font and scale it is measured with.

    The font is a shared reference, never copied: glyphs compare equal only
    when they point at the same font object.
    """

    glyph_id: str
    font: FontMetrics
    scale: Sp

    def width(self) -> Sp:
        """Return the advance width of this glyph."""
        return glyph_width(self.glyph_id, self.font, self.scale)


def glyph_width(glyph_id: str, font: FontMetrics, scale: Sp) -> Sp:
    """Look up the width of ``glyph_id`` in ``font`` at ``scale``."""
    return font.char_width(glyph_id, scale)


class AdvanceWidthTable:
    """Font metrics backed by a table of advance widths in font units."""

    def __init__(
        self,
        advances: Mapping[str, int],
        units_per_em: int = DEFAULT_UNITS_PER_EM,
        default_advance: Optional[int] = None,
        name: str = "table",
    ) -> None:
        if units_per_em <= 0:
            raise ValueError(f"units_per_em must be positive, got {units_per_em}")
        self._advances: Dict[str, int] = dict(advances)
        self.units_per_em = units_per_em
        self.default_advance = default_advance
        self.name = name
        self._reported_missing: set[str] = set()

    @classmethod
    def monospace(
        cls,
        advance: int = DEFAULT_MONOSPACE_ADVANCE,
        units_per_em: int = DEFAULT_UNITS_PER_EM,
    ) -> "AdvanceWidthTable":
        """Return a table in which every glyph has the same advance."""
        return cls({}, units_per_em=units_per_em, default_advance=advance, name="monospace")

    @classmethod
    def from_json(cls, path: Path) -> "AdvanceWidthTable":
        """Load a table from a JSON document.

        The document holds ``advances`` (glyph to width in font units) and
        optionally ``units_per_em``, ``default_advance`` and ``name``.
        """
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
        if not isinstance(payload, dict) or not isinstance(payload.get("advances"), dict):
            raise ValueError(f"{path}: expected an object with an 'advances' mapping")
        advances = {str(key): int(value) for key, value in payload["advances"].items()}
        default = payload.get("default_advance")
        return cls(
            advances,
            units_per_em=int(payload.get("units_per_em", DEFAULT_UNITS_PER_EM)),
            default_advance=int(default) if default is not None else None,
            name=str(payload.get("name", Path(path).stem)),
        )

    def advance(self, glyph_id: str) -> int:
        """Return the advance of ``glyph_id`` in font units."""
        advance = self._advances.get(glyph_id)
        if advance is not None:
            return advance
        if self.default_advance is None:
            raise KeyError(f"glyph {glyph_id!r} missing from font {self.name!r}")
        if self._advances and glyph_id not in self._reported_missing:
            self._reported_missing.add(glyph_id)
            LOGGER.warning("Glyph %r missing from font %s; using default advance", glyph_id, self.name)
        return self.default_advance

    def char_width(self, glyph_id: str, scale: Sp) -> Sp:
        # Half-up rounding, integers only.
        scaled = self.advance(glyph_id) * scale.value
        return Sp((2 * scaled + self.units_per_em) // (2 * self.units_per_em))

    def __repr__(self) -> str:
        return f"AdvanceWidthTable(name={self.name!r}, units_per_em={self.units_per_em})"
