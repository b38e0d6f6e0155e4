"""Knuth-Plass line breaking: minimum total demerits over feasible breakpoints.

Unlike the naive justifier this one honors penalties: forced breaks end a
line, forbidden breaks are never taken, and flagged breaks on two
consecutive lines are discouraged. All widths are summed in scaled points;
only the adjustment ratio of a line is a float.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from itertools import islice
from typing import Dict, List, Optional, Sequence, Tuple

from typesetter.layout.justifier import Justifier
from typesetter.model.glyph import HYPHEN_GLYPH, Glyph
from typesetter.model.items import (
    INFINITELY_NEGATIVE_PENALTY,
    INFINITELY_POSITIVE_PENALTY,
    BoundingBox,
    Glue,
    Item,
    Penalty,
    paragraph_end,
)
from typesetter.model.layout_model import JustifiedLine
from typesetter.utils.logger import get_logger
from typesetter.utils.units import Pt, Sp, pt_to_sp, round_half_away_from_zero, sp_to_pt

LOGGER = get_logger(__name__)

# Defaults follow plain TeX.
DEFAULT_TOLERANCE = 10.0
DEFAULT_LINE_PENALTY = 10
DEFAULT_FLAGGED_DEMERITS = 3000
DEFAULT_FITNESS_DEMERITS = 10000
MAX_BADNESS = 10000

TIGHT, DECENT, LOOSE, VERY_LOOSE = range(4)


@dataclass(slots=True)
class _Breakpoint:
    """A feasible break and the best chain of breaks leading to it."""

    position: int
    line: int
    fitness_class: int
    demerits: float
    ratio: float
    previous: Optional["_Breakpoint"] = None


class _Measures:
    """Running sums of width, stretch and shrink over a paragraph.

    ``width[i]`` is the total up to but not including item ``i``, so the
    natural width between two indices is a single subtraction. Penalties
    contribute nothing here: their width only counts when a line ends on them.
    """

    def __init__(self, items: Sequence[Item]) -> None:
        self.width = [0] * (len(items) + 1)
        self.stretch = [0] * (len(items) + 1)
        self.shrink = [0] * (len(items) + 1)
        for index, item in enumerate(items):
            width = stretch = shrink = 0
            if not item.is_penalty:
                width = item.width.value
                stretch = item.stretchability.value
                shrink = item.shrinkability.value
            self.width[index + 1] = self.width[index] + width
            self.stretch[index + 1] = self.stretch[index] + stretch
            self.shrink[index + 1] = self.shrink[index] + shrink


def _is_forced(item: Item) -> bool:
    return isinstance(item.content, Penalty) and item.content.value <= INFINITELY_NEGATIVE_PENALTY


def _is_flagged(item: Item) -> bool:
    return isinstance(item.content, Penalty) and item.content.flagged


def _with_paragraph_end(items: List[Item]) -> List[Item]:
    """Append the standard paragraph ending when the items lack a final forced break."""
    if items and _is_forced(items[-1]):
        return items
    return items + paragraph_end()


class KnuthPlassJustifier(Justifier):
    """Chooses the set of breaks minimizing the sum of demerits of all lines.

    ``tolerance`` is the largest adjustment ratio accepted on a first pass.
    When no acceptable set of breaks exists, a second pass accepts any loose
    line, and a line is only left overfull when a box cannot fit at all.
    """

    def __init__(
        self,
        tolerance: float = DEFAULT_TOLERANCE,
        line_penalty: int = DEFAULT_LINE_PENALTY,
        flagged_demerits: int = DEFAULT_FLAGGED_DEMERITS,
        fitness_demerits: int = DEFAULT_FITNESS_DEMERITS,
    ) -> None:
        self.tolerance = tolerance
        self.line_penalty = line_penalty
        self.flagged_demerits = flagged_demerits
        self.fitness_demerits = fitness_demerits

    # ------------------------------------------------------------------
    # Public API
    def justify(self, paragraph: Sequence[Item], text_width: Pt) -> List[JustifiedLine]:
        items = _with_paragraph_end(list(islice(paragraph, 1, None)))
        target = pt_to_sp(text_width)

        breaks, rescued = self.find_breaks(items, target, self.tolerance)
        if rescued and not math.isinf(self.tolerance):
            LOGGER.debug("No break sequence within tolerance %s; retrying without limit", self.tolerance)
            breaks, rescued = self.find_breaks(items, target, math.inf)
        if rescued:
            LOGGER.debug("Paragraph contains at least one overfull line at %s", text_width)

        lines: List[JustifiedLine] = []
        start_position = -1
        for brk in breaks:
            start = self._line_start(items, start_position)
            lines.append(self._set_line(items[start:brk.position], brk.ratio, items[brk.position]))
            start_position = brk.position
        return lines or [[]]

    def find_breaks(self, items: Sequence[Item], target: Sp, tolerance: float) -> Tuple[List[_Breakpoint], bool]:
        """Return the chosen breakpoints in order and whether a rescue break was needed."""
        measures = _Measures(items)
        active: List[_Breakpoint] = [_Breakpoint(position=-1, line=0, fitness_class=DECENT, demerits=0.0, ratio=0.0)]
        rescued = False

        for index, item in enumerate(items):
            if not self._is_feasible(items, index):
                continue
            forced = _is_forced(item)

            best_by_fitness: Dict[int, _Breakpoint] = {}
            deactivated: List[Tuple[_Breakpoint, float]] = []
            considered = 0
            for node in active:
                start = self._line_start(items, node.position)
                if start > index:
                    continue
                considered += 1
                ratio = self._adjustment_ratio(items, measures, start, index, target)
                if ratio < -1 or forced:
                    deactivated.append((node, ratio))
                if -1 <= ratio <= tolerance:
                    candidate = self._make_break(items, node, index, ratio)
                    current = best_by_fitness.get(candidate.fitness_class)
                    if current is None or candidate.demerits < current.demerits:
                        best_by_fitness[candidate.fitness_class] = candidate

            if not best_by_fitness and deactivated and len(deactivated) == considered == len(active):
                # Every chain would die here. Keep the one ending closest to
                # this break alive, with an overfull or underfull line.
                node, ratio = min(deactivated, key=lambda pair: (-pair[0].position, pair[0].demerits))
                candidate = self._make_break(items, node, index, ratio)
                best_by_fitness[candidate.fitness_class] = candidate
                rescued = True

            if deactivated:
                gone = {id(node) for node, _ in deactivated}
                active = [node for node in active if id(node) not in gone]
            active.extend(best_by_fitness.values())

        last = len(items) - 1
        finished = [node for node in active if node.position == last]
        best = min(finished, key=lambda node: node.demerits)

        chosen: List[_Breakpoint] = []
        cursor: Optional[_Breakpoint] = best
        while cursor is not None and cursor.position >= 0:
            chosen.append(cursor)
            cursor = cursor.previous
        chosen.reverse()
        return chosen, rescued

    # ------------------------------------------------------------------
    # Breakpoints
    def _is_feasible(self, items: Sequence[Item], index: int) -> bool:
        content = items[index].content
        if isinstance(content, Penalty):
            return content.value < INFINITELY_POSITIVE_PENALTY
        if isinstance(content, Glue):
            return index > 0 and items[index - 1].is_box
        if isinstance(content, BoundingBox):
            return False
        raise TypeError(f"Unsupported item content: {content!r}")

    def _line_start(self, items: Sequence[Item], position: int) -> int:
        """Index of the first item of a line following a break at ``position``.

        Glue and penalties right after a break are discarded, up to the next
        box or forced break.
        """
        start = position + 1
        while start < len(items) and not items[start].is_box and not _is_forced(items[start]):
            start += 1
        return start

    def _adjustment_ratio(self, items: Sequence[Item], measures: _Measures, start: int, end: int, target: Sp) -> float:
        """How much the glue between ``start`` and ``end`` must stretch (> 0) or shrink (< 0)."""
        natural = measures.width[end] - measures.width[start]
        if items[end].is_penalty:
            natural += items[end].width.value

        if natural < target.value:
            stretch = measures.stretch[end] - measures.stretch[start]
            return (target.value - natural) / stretch if stretch > 0 else math.inf
        if natural > target.value:
            shrink = measures.shrink[end] - measures.shrink[start]
            return (target.value - natural) / shrink if shrink > 0 else -math.inf
        return 0.0

    def _make_break(self, items: Sequence[Item], node: _Breakpoint, index: int, ratio: float) -> _Breakpoint:
        item = items[index]
        penalty = item.content.value if isinstance(item.content, Penalty) else 0

        badness = MAX_BADNESS if math.isinf(ratio) else min(100 * abs(ratio) ** 3, MAX_BADNESS)
        base = (self.line_penalty + badness) ** 2
        if _is_forced(item):
            demerits = base
        elif penalty >= 0:
            demerits = base + penalty**2
        else:
            demerits = base - penalty**2

        if _is_flagged(item) and node.position >= 0 and _is_flagged(items[node.position]):
            demerits += self.flagged_demerits

        if ratio < -0.5:
            fitness_class = TIGHT
        elif ratio <= 0.5:
            fitness_class = DECENT
        elif ratio <= 1:
            fitness_class = LOOSE
        else:
            fitness_class = VERY_LOOSE
        if abs(fitness_class - node.fitness_class) > 1:
            demerits += self.fitness_demerits

        return _Breakpoint(
            position=index,
            line=node.line + 1,
            fitness_class=fitness_class,
            demerits=node.demerits + demerits,
            ratio=ratio,
            previous=node,
        )

    # ------------------------------------------------------------------
    # Line setting
    def _set_line(self, items: Sequence[Item], ratio: float, break_item: Item) -> JustifiedLine:
        """Place the boxes of a line, setting every glue according to ``ratio``.

        A line ending at a flagged penalty with a width gets a hyphen, in the
        font and scale of the glyph before it.
        """
        if math.isinf(ratio) and ratio > 0:
            ratio = 0.0
        ratio = max(ratio, -1.0)

        line: JustifiedLine = []
        current_x = 0
        for item in items:
            content = item.content
            if isinstance(content, BoundingBox):
                line.append((content.glyph, sp_to_pt(Sp(current_x))))
                current_x += item.width.value
            elif isinstance(content, Glue):
                elasticity = content.stretchability if ratio > 0 else content.shrinkability
                current_x += item.width.value + round_half_away_from_zero(ratio * elasticity.value)
        if line and _is_flagged(break_item) and break_item.width.value > 0:
            last_glyph, _ = line[-1]
            line.append((Glyph(HYPHEN_GLYPH, last_glyph.font, last_glyph.scale), sp_to_pt(Sp(current_x))))
        return line
