"""Tests covering the Knuth-Plass justifier."""
import unittest
from typing import List

from typesetter.layout.knuth_plass import KnuthPlassJustifier
from typesetter.model.glyph import AdvanceWidthTable, Glyph
from typesetter.model.items import INFINITELY_NEGATIVE_PENALTY, INFINITELY_POSITIVE_PENALTY, Item, paragraph_end
from typesetter.parser.itemizer import Itemizer
from typesetter.utils.units import Pt, Sp, pt_to_sp

# One font unit per point: every glyph, the space included, is 5pt wide.
FONT = AdvanceWidthTable({"W": 50}, units_per_em=1, default_advance=5)
SCALE = pt_to_sp(Pt(1.0))


def make_word(text: str) -> List[Item]:
    return [Item.from_glyph(Glyph(char, FONT, SCALE)) for char in text]


def line_text(line) -> str:
    return "".join(glyph.glyph_id for glyph, _ in line)


class KnuthPlassJustifierTest(unittest.TestCase):
    """Minimum-demerits line breaking."""

    def setUp(self) -> None:
        self.justifier = KnuthPlassJustifier()
        self.itemizer = Itemizer(FONT, SCALE)

    def test_short_paragraph_fits_on_one_line(self) -> None:
        lines = self.justifier.justify(self.itemizer.itemize("ab cd"), Pt(100.0))

        self.assertEqual([line_text(line) for line in lines], ["abcd"])
        # The last line is filled by the closing glue, words keep natural spacing.
        self.assertAlmostEqual(lines[0][2][1].value, 15.0, places=2)

    def test_lines_are_stretched_to_the_target_width(self) -> None:
        text = "aaa bbb ccc ddd eee fff ggg hhh"
        lines = self.justifier.justify(self.itemizer.itemize(text), Pt(42.0))

        self.assertGreater(len(lines), 1)
        for line in lines[:-1]:
            _, last_x = line[-1]
            self.assertAlmostEqual(last_x.value + 5.0, 42.0, places=3)

    def test_breaks_at_hyphenation_point_and_shrinks_glue(self) -> None:
        lines = self.justifier.justify(self.itemizer.itemize("aaaa bbb\u00adbbb"), Pt(44.0))

        self.assertEqual([line_text(line) for line in lines], ["aaaabbb-", "bbb"])
        # 45pt of material in 44pt: the space gives up 1pt of its 5/3pt shrink.
        self.assertAlmostEqual(lines[0][4][1].value, 24.0, places=3)
        # The hyphen closes the line on the margin.
        hyphen, hyphen_x = lines[0][-1]
        self.assertEqual(hyphen.glyph_id, "-")
        self.assertIs(hyphen.font, FONT)
        self.assertAlmostEqual(hyphen_x.value + 5.0, 44.0, places=3)

    def test_zero_width_flagged_break_adds_no_hyphen(self) -> None:
        paragraph = (
            [Item.glue(Sp(0), Sp(0), Sp(0))]
            + make_word("ab")
            + [Item.penalty(Sp(0), INFINITELY_NEGATIVE_PENALTY, True)]
            + make_word("cd")
            + paragraph_end()
        )
        lines = self.justifier.justify(paragraph, Pt(200.0))

        self.assertEqual([line_text(line) for line in lines], ["ab", "cd"])

    def test_forced_break_ends_the_line(self) -> None:
        paragraph = (
            [Item.glue(Sp(0), Sp(0), Sp(0))]
            + make_word("ab")
            + [Item.penalty(Sp(0), INFINITELY_NEGATIVE_PENALTY, False)]
            + make_word("cd")
            + paragraph_end()
        )
        lines = self.justifier.justify(paragraph, Pt(200.0))

        self.assertEqual([line_text(line) for line in lines], ["ab", "cd"])

    def test_forbidden_break_is_never_taken(self) -> None:
        paragraph = [Item.glue(Sp(0), Sp(0), Sp(0))]
        for char in "abcdef":
            paragraph.extend(make_word(char))
            paragraph.append(Item.penalty(Sp(0), INFINITELY_POSITIVE_PENALTY, False))
        paragraph.extend(paragraph_end())

        lines = self.justifier.justify(paragraph, Pt(12.0))

        self.assertEqual([line_text(line) for line in lines], ["abcdef"])

    def test_word_wider_than_line_overflows_on_its_own_line(self) -> None:
        lines = self.justifier.justify(self.itemizer.itemize("a WWW b"), Pt(100.0))

        self.assertEqual([line_text(line) for line in lines], ["a", "WWW", "b"])
        self.assertEqual([x.value for _, x in lines[1]], [0.0, 50.0, 100.0])

    def test_every_glyph_emitted_exactly_once(self) -> None:
        text = "the quick brown fox jumps over the lazy dog again and again"
        paragraph = self.itemizer.itemize(text)
        boxes = [item.content.glyph for item in paragraph if item.is_box]

        for width in (12.0, 30.0, 55.0, 80.0, 400.0):
            with self.subTest(width=width):
                lines = self.justifier.justify(paragraph, Pt(width))
                emitted = [glyph for line in lines for glyph, _ in line]
                self.assertEqual([id(glyph) for glyph in emitted], [id(glyph) for glyph in boxes])

                line_of = {id(glyph): index for index, line in enumerate(lines) for glyph, _ in line}
                position = 0
                for word in text.split():
                    word_glyphs = boxes[position:position + len(word)]
                    position += len(word)
                    self.assertEqual(len({line_of[id(glyph)] for glyph in word_glyphs}), 1, word)

    def test_paragraph_without_closing_items_is_completed(self) -> None:
        paragraph = [Item.glue(Sp(0), Sp(0), Sp(0))] + make_word("ab")
        lines = self.justifier.justify(paragraph, Pt(100.0))
        self.assertEqual([line_text(line) for line in lines], ["ab"])

    def test_empty_paragraph_yields_one_empty_line(self) -> None:
        self.assertEqual(self.justifier.justify([], Pt(50.0)), [[]])
        self.assertEqual(self.justifier.justify(self.itemizer.itemize(""), Pt(50.0)), [[]])

    def test_same_input_gives_same_output(self) -> None:
        paragraph = self.itemizer.itemize("aaa bbb ccc ddd eee fff")
        first = self.justifier.justify(paragraph, Pt(33.0))
        second = KnuthPlassJustifier().justify(paragraph, Pt(33.0))
        self.assertEqual(first, second)


class DemeritsTest(unittest.TestCase):
    """Flagged and fitness demerits steer the choice between break sequences."""

    def setUp(self) -> None:
        # Every glyph is as wide in points as its advance.
        self.font = AdvanceWidthTable({"a": 10, "b": 15, "c": 5, "d": 12, "e": 14, "f": 22}, units_per_em=1)

    def box(self, char: str) -> Item:
        return Item.from_glyph(Glyph(char, self.font, SCALE))

    def glue(self, width: float, stretch: float, shrink: float) -> Item:
        return Item.glue(pt_to_sp(Pt(width)), pt_to_sp(Pt(stretch)), pt_to_sp(Pt(shrink)))

    def hyphenated_paragraph(self) -> List[Item]:
        # Two exact lines ending on flagged breaks, or one exact line and a
        # loose one ending on glue.
        space = self.glue(5.0, 10.0, 0.0)
        hyphen = Item.penalty(Sp(0), 0, True)
        return (
            [Item.glue(Sp(0), Sp(0), Sp(0))]
            + [self.box("a"), space, self.box("b"), hyphen]
            + [self.box("a"), space, self.box("c"), space, self.box("c"), hyphen]
            + [self.box("a")]
            + paragraph_end()
        )

    def test_consecutive_flagged_breaks_taken_when_free(self) -> None:
        lines = KnuthPlassJustifier(flagged_demerits=0).justify(self.hyphenated_paragraph(), Pt(30.0))
        self.assertEqual([line_text(line) for line in lines], ["ab", "acc", "a"])

    def test_consecutive_flagged_breaks_avoided_when_costly(self) -> None:
        lines = KnuthPlassJustifier(flagged_demerits=10000).justify(self.hyphenated_paragraph(), Pt(30.0))
        self.assertEqual([line_text(line) for line in lines], ["ab", "ac", "ca"])

    def uneven_paragraph(self) -> List[Item]:
        # Breaking at the second glue gives a loose line then a tight last
        # line; breaking at the third gives one very tight line instead.
        space = self.glue(10.0, 10.0, 10.0)
        return (
            [Item.glue(Sp(0), Sp(0), Sp(0))]
            + [self.box("d"), space, self.box("d"), space, self.box("e"), space, self.box("f")]
            + paragraph_end()
        )

    def test_adjacent_loose_and_tight_lines_taken_when_free(self) -> None:
        lines = KnuthPlassJustifier(fitness_demerits=0).justify(self.uneven_paragraph(), Pt(40.0))
        self.assertEqual([line_text(line) for line in lines], ["dd", "ef"])

    def test_adjacent_loose_and_tight_lines_avoided_when_costly(self) -> None:
        lines = KnuthPlassJustifier(fitness_demerits=10000).justify(self.uneven_paragraph(), Pt(40.0))
        self.assertEqual([line_text(line) for line in lines], ["dde", "f"])


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
