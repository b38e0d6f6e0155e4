"""Justification algorithms turning paragraph items into positioned glyphs."""
from __future__ import annotations

from abc import ABC, abstractmethod
from itertools import islice
from typing import List, Sequence

from typesetter.model.items import BoundingBox, Glue, Item, Penalty
from typesetter.model.layout_model import JustifiedLine
from typesetter.utils.logger import get_logger
from typesetter.utils.units import Pt, sp_to_pt

LOGGER = get_logger(__name__)

DEFAULT_WORD_SPACE_PT = Pt(7.5)

Word = List[Item]


class Justifier(ABC):
    """An algorithm that justifies a paragraph.

    Justifiers hold configuration only: ``justify`` is a pure function of the
    paragraph and the target width, and an instance may be shared freely.
    """

    @abstractmethod
    def justify(self, paragraph: Sequence[Item], text_width: Pt) -> List[JustifiedLine]:
        """Split ``paragraph`` into lines of glyphs with their offsets.

        The first item of the paragraph is an opening marker and is skipped.
        Offsets are measured in points from each line's left margin.
        """


def word_width(word: Word) -> Pt:
    """Natural width of the boxes making up a word."""
    total = Pt(0.0)
    for item in word:
        if item.is_box:
            total += sp_to_pt(item.width)
    return total


def place_words(words: Sequence[Word], word_space: Pt) -> JustifiedLine:
    """Lay words out left to right, ``word_space`` after each of them."""
    line: JustifiedLine = []
    current_x = Pt(0.0)
    for word in words:
        for item in word:
            content = item.content
            if isinstance(content, BoundingBox):
                line.append((content.glyph, current_x))
                current_x += sp_to_pt(item.width)
        current_x += word_space
    return line


def distribute_words(words: Sequence[Word], text_width: Pt, word_space: Pt = DEFAULT_WORD_SPACE_PT) -> JustifiedLine:
    """Lay words out so that they span exactly ``text_width``.

    The free space is split evenly between the gaps. A line with a single
    word has no gap to stretch and falls back to ``word_space``.
    """
    if len(words) > 1:
        occupied = Pt(0.0)
        for word in words:
            occupied += word_width(word)
        gap = (text_width - occupied) / (len(words) - 1)
    else:
        gap = word_space
    return place_words(words, gap)


class NaiveJustifier(Justifier):
    """Greedy justifier going to the next line once a word overtakes the text width.

    Penalties are ignored: lines only ever break between words, and the last
    line is set with the fixed word space instead of being justified.
    """

    def __init__(self, word_space: Pt = DEFAULT_WORD_SPACE_PT) -> None:
        self.word_space = word_space

    def justify(self, paragraph: Sequence[Item], text_width: Pt) -> List[JustifiedLine]:
        lines: List[JustifiedLine] = []
        current_line: List[Word] = []
        current_word: Word = []
        current_x = Pt(0.0)

        for item in islice(paragraph, 1, None):
            content = item.content
            if isinstance(content, BoundingBox):
                current_x += sp_to_pt(item.width)
                current_word.append(item)
            elif isinstance(content, Glue):
                current_line.append(current_word)
                current_x += self.word_space
                current_word = []
            elif isinstance(content, Penalty):
                pass
            else:
                raise TypeError(f"Unsupported item content: {content!r}")

            if current_x > text_width and len(current_line) > 1:
                deferred = current_line.pop()
                lines.append(distribute_words(current_line, text_width, self.word_space))
                current_line = [deferred]
                # The deferred word and the open one are not measured again.
                current_x = Pt(0.0)

        if current_word:
            current_line.append(current_word)
        lines.append(place_words(current_line, self.word_space))

        LOGGER.debug("Naive justification produced %d line(s) at %s", len(lines), text_width)
        return lines
