"""Items describing the structure of a paragraph: boxes, glue and penalties."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List

from typesetter.model.glyph import Glyph
from typesetter.utils.units import PLUS_INFINITY, Sp

# Most negative penalty possible; a break here is mandatory.
INFINITELY_NEGATIVE_PENALTY = -(2**31)

# Most positive penalty possible; a break here is forbidden.
INFINITELY_POSITIVE_PENALTY = 2**31 - 1


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """Something meant to be typeset.

    Though it holds the glyph it represents, the box is a black box to the
    line breaker: its width is the only thing that matters when splitting a
    paragraph into lines, and it is never split or resized.
    """

    glyph: Glyph


@dataclass(frozen=True, slots=True)
class Glue:
    """Blank space whose width may be altered within given limits.

    Glue is the mortar used to reach the target column width: it can stretch
    up to ``stretchability`` beyond its natural width, or shrink by at most
    ``shrinkability``.
    """

    stretchability: Sp
    shrinkability: Sp


@dataclass(frozen=True, slots=True)
class Penalty:
    """A potential place to end a line, with the cost of breaking there.

    Flagged penalties mark breaks (typically hyphenated ones) that should not
    be chosen on two consecutive lines.
    """

    value: int
    flagged: bool


Content = BoundingBox | Glue | Penalty


@dataclass(frozen=True, slots=True)
class Item:
    """A box, a glue or a penalty, with its natural width."""

    width: Sp
    content: Content

    @classmethod
    def from_glyph(cls, glyph: Glyph) -> "Item":
        """Create a box for a glyph, measured with its own font and scale."""
        return cls(width=glyph.width(), content=BoundingBox(glyph))

    @classmethod
    def glue(cls, ideal_spacing: Sp, stretchability: Sp, shrinkability: Sp) -> "Item":
        """Create some glue."""
        return cls(width=ideal_spacing, content=Glue(stretchability, shrinkability))

    @classmethod
    def penalty(cls, width: Sp, value: int, flagged: bool) -> "Item":
        """Create a penalty; ``width`` only counts if the line breaks here."""
        return cls(width=width, content=Penalty(value, flagged))

    @property
    def is_box(self) -> bool:
        return isinstance(self.content, BoundingBox)

    @property
    def is_glue(self) -> bool:
        return isinstance(self.content, Glue)

    @property
    def is_penalty(self) -> bool:
        return isinstance(self.content, Penalty)

    @property
    def stretchability(self) -> Sp:
        return self.content.stretchability if isinstance(self.content, Glue) else Sp(0)

    @property
    def shrinkability(self) -> Sp:
        return self.content.shrinkability if isinstance(self.content, Glue) else Sp(0)


def paragraph_end() -> List[Item]:
    """Items closing a paragraph: no break, fill the last line, then break."""
    return [
        Item.penalty(Sp(0), INFINITELY_POSITIVE_PENALTY, False),
        Item.glue(Sp(0), PLUS_INFINITY, Sp(0)),
        Item.penalty(Sp(0), INFINITELY_NEGATIVE_PENALTY, True),
    ]
