"""
Text normalization utilities for paragraph itemization.

Handles typographic special characters, control characters and whitespace so
that the itemizer only ever sees plain spaces between words. Soft hyphens are
kept by default: they mark the places where a word may be hyphenated.
"""

import re
from typing import List

SOFT_HYPHEN = '\u00ad'


class TextNormalizer:
    """Normalizes raw text before it is turned into paragraph items."""

    # Typographic characters that need normalization
    SPECIAL_CHARS = {
        '\u00a0': ' ',      # Non-breaking space → regular space
        '\u2009': ' ',      # Thin space → regular space
        '\u2007': ' ',      # Figure space → regular space
        '\u2008': ' ',      # Punctuation space → regular space
        '\u200b': '',       # Zero-width space → remove
        '\u200c': '',       # Zero-width non-joiner → remove
        '\u200d': '',       # Zero-width joiner → remove
        '\ufeff': '',       # Byte order mark → remove
        '\u2011': '-',      # Non-breaking hyphen → regular hyphen
        '\u2018': "'",      # Left single quotation mark
        '\u2019': "'",      # Right single quotation mark
        '\u201c': '"',      # Left double quotation mark
        '\u201d': '"',      # Right double quotation mark
        '\u2026': '...',    # Horizontal ellipsis
    }

    # Regex for collapsing multiple whitespace characters
    WHITESPACE_PATTERN = re.compile(r'\s+')

    # Regex for removing control characters (except tabs, newlines, carriage returns)
    CONTROL_CHARS_PATTERN = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]')

    # A blank line separates paragraphs
    PARAGRAPH_BREAK_PATTERN = re.compile(r'\n\s*\n')

    def __init__(self, preserve_whitespace: bool = False, keep_soft_hyphens: bool = True):
        """Initialize text normalizer.

        Args:
            preserve_whitespace: If True, preserve exact whitespace formatting.
                                If False, normalize whitespace to single spaces.
            keep_soft_hyphens: If True, soft hyphens survive as hyphenation
                               hints. If False, they are removed.
        """
        self.preserve_whitespace = preserve_whitespace
        self.keep_soft_hyphens = keep_soft_hyphens

    def normalize_text(self, text: str) -> str:
        """Normalize the text of a single paragraph."""
        if not text:
            return text

        normalized = self._replace_special_chars(text)
        normalized = self._remove_control_chars(normalized)

        if not self.keep_soft_hyphens:
            normalized = normalized.replace(SOFT_HYPHEN, '')

        if not self.preserve_whitespace:
            normalized = self._normalize_whitespace(normalized)

        return normalized

    def split_paragraphs(self, text: str) -> List[str]:
        """Split text on blank lines and normalize every non-empty paragraph."""
        paragraphs = []
        for chunk in self.PARAGRAPH_BREAK_PATTERN.split(text):
            normalized = self.normalize_text(chunk)
            if normalized.strip():
                paragraphs.append(normalized)
        return paragraphs

    def _replace_special_chars(self, text: str) -> str:
        """Replace special Unicode characters with normalized equivalents."""
        for original, replacement in self.SPECIAL_CHARS.items():
            text = text.replace(original, replacement)
        return text

    def _remove_control_chars(self, text: str) -> str:
        """Remove control characters that shouldn't appear in paragraph text."""
        return self.CONTROL_CHARS_PATTERN.sub('', text)

    def _normalize_whitespace(self, text: str) -> str:
        """Normalize whitespace to single spaces and trim."""
        normalized = self.WHITESPACE_PATTERN.sub(' ', text)
        return normalized.strip()
