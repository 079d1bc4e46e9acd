"""Text normalization utilities for Devanagari story text."""

import re
import unicodedata

# Regex pattern for illegal control characters (except tab, newline, carriage return)
ILLEGAL_CHARS = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f]')


class StoryTextNormalizer:
    """Normalize raw story files before segmentation."""

    BOM = '\ufeff'
    ZERO_WIDTH = re.compile('[\u200b\u2060]')

    # Typographic quotes that dialogue is often typed with
    QUOTE_VARIANTS = re.compile('[\u201c\u201d\u201e\u201f\u00ab\u00bb]')

    @classmethod
    def normalize_newlines(cls, text: str) -> str:
        """Convert Windows and old Mac line endings to ``\\n``."""
        return text.replace('\r\n', '\n').replace('\r', '\n')

    @classmethod
    def normalize_quotes(cls, text: str) -> str:
        """
        Replace curly and angle double quotes with a plain ``"``.

        The segmenter tracks dialogue with a single quote character, so
        mixed typographic quotes would otherwise never close.
        """
        return cls.QUOTE_VARIANTS.sub('"', text)

    @classmethod
    def normalize_text(cls, text: str, normalize_quotes: bool = True) -> str:
        """
        Main normalization function.

        Args:
            text: Input text
            normalize_quotes: Whether to fold typographic quotes to ``"``

        Returns:
            Normalized text
        """
        if not text:
            return text

        text = text.lstrip(cls.BOM)
        text = unicodedata.normalize('NFC', text)
        text = cls.normalize_newlines(text)
        text = cls.ZERO_WIDTH.sub('', text)
        text = ILLEGAL_CHARS.sub('', text)

        if normalize_quotes:
            text = cls.normalize_quotes(text)

        return text


def normalize_story_text(text: str, normalize_quotes: bool = True) -> str:
    """
    Convenience function for normalizing story text.

    Args:
        text: Input text
        normalize_quotes: Whether to fold typographic quotes to ``"``

    Returns:
        Normalized text
    """
    return StoryTextNormalizer.normalize_text(text, normalize_quotes=normalize_quotes)


def sanitize_text(text: str) -> str:
    """Remove control characters that may interfere with CSV/Excel.

    Args:
        text: Input text

    Returns:
        Sanitized text
    """
    if not text:
        return text
    return ILLEGAL_CHARS.sub('', text)
