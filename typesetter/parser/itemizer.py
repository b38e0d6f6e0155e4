"""Build paragraph items (boxes, glue, penalties) from plain text."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from typesetter.model.glyph import HYPHEN_GLYPH, FontMetrics, Glyph, glyph_width
from typesetter.model.items import Item, paragraph_end
from typesetter.utils.logger import get_logger
from typesetter.utils.text_normalizer import SOFT_HYPHEN
from typesetter.utils.units import Sp

LOGGER = get_logger(__name__)

DEFAULT_HYPHEN_PENALTY = 50
SPACE_GLYPH = " "


@dataclass(frozen=True, slots=True)
class ItemizerSettings:
    """Inter-word glue and hyphenation parameters.

    Unset glue dimensions are derived from the width of the space glyph:
    stretch is half of it and shrink a third, as in plain TeX fonts.
    """

    space_width: Optional[Sp] = None
    space_stretch: Optional[Sp] = None
    space_shrink: Optional[Sp] = None
    hyphen_penalty: int = DEFAULT_HYPHEN_PENALTY


class Itemizer:
    """Turn normalized paragraph text into the items the justifiers consume."""

    def __init__(self, font: FontMetrics, scale: Sp, settings: Optional[ItemizerSettings] = None) -> None:
        self._font = font
        self._scale = scale
        self._settings = settings or ItemizerSettings()

    def itemize(self, text: str) -> List[Item]:
        """Return the items of one paragraph.

        The list opens with an empty glue marker, holds one box per glyph,
        one glue per run of whitespace and one flagged penalty per soft
        hyphen, and ends with the standard paragraph ending: a forbidden
        break, infinitely stretchable glue and a forced break.
        """
        items: List[Item] = [Item.glue(Sp(0), Sp(0), Sp(0))]
        interword = self._interword_glue()
        hyphen = self._hyphen_penalty()

        previous_was_space = True
        for char in text:
            if char.isspace():
                if not previous_was_space:
                    items.append(interword)
                previous_was_space = True
                continue
            previous_was_space = False
            if char == SOFT_HYPHEN:
                items.append(hyphen)
            else:
                items.append(Item.from_glyph(Glyph(char, self._font, self._scale)))

        if len(items) > 1 and items[-1].is_glue:
            items.pop()

        items.extend(paragraph_end())
        LOGGER.debug("Itemized %d character(s) into %d item(s)", len(text), len(items))
        return items

    def _interword_glue(self) -> Item:
        settings = self._settings
        width = settings.space_width
        if width is None:
            width = glyph_width(SPACE_GLYPH, self._font, self._scale)
        stretch = settings.space_stretch if settings.space_stretch is not None else Sp(width.value // 2)
        shrink = settings.space_shrink if settings.space_shrink is not None else Sp(width.value // 3)
        return Item.glue(width, stretch, shrink)

    def _hyphen_penalty(self) -> Item:
        width = glyph_width(HYPHEN_GLYPH, self._font, self._scale)
        return Item.penalty(width, self._settings.hyphen_penalty, True)
