"""Quote-aware character scanner for Devanagari prose."""

import logging
from typing import Iterable, Optional

from ..utils.repair import merge_standalone_punctuation
from .base import (
    SegmentationEngine,
    LATIN_TERMINATORS,
    NEWLINE,
    QUOTE,
    SCRIPT_TERMINATORS,
)

logger = logging.getLogger(__name__)


class QuoteAwareSegmenter(SegmentationEngine):
    """Single-pass segmenter that keeps quoted dialogue in one piece.

    The scanner has two states, normal and in-quote. Inside a quote every
    character is kept, so a speaker's ``"ठक् ठक्! बागिल."`` stays whole.
    A closing quote ends the sentence, so two speakers are never merged.
    """

    def __init__(
        self,
        quote_char: str = QUOTE,
        terminators: Optional[Iterable[str]] = None,
        latin_terminators: Optional[Iterable[str]] = None,
    ):
        """Initialize quote-aware segmenter.

        Args:
            quote_char: Character that opens and closes dialogue
            terminators: Script sentence-final marks (danda, double danda)
            latin_terminators: Latin sentence-final marks
        """
        super().__init__()
        self.quote_char = quote_char
        self.terminators = frozenset(
            SCRIPT_TERMINATORS if terminators is None else terminators
        )
        self.latin_terminators = frozenset(
            LATIN_TERMINATORS if latin_terminators is None else latin_terminators
        )

    def split_raw(self, text: str) -> list[str]:
        """Scan text and return trimmed, non-empty pieces before repair.

        Args:
            text: Input text

        Returns:
            List of raw sentence pieces in input order
        """
        pieces = []
        current = []
        in_quote = False

        def flush():
            piece = "".join(current).strip()
            if piece:
                pieces.append(piece)
            current.clear()

        for char in text:
            if char == self.quote_char:
                current.append(char)
                in_quote = not in_quote
                if not in_quote:
                    flush()
                continue

            if in_quote:
                current.append(char)
            elif char == NEWLINE:
                flush()
            elif char in self.terminators or char in self.latin_terminators:
                current.append(char)
                flush()
            else:
                current.append(char)

        # An unterminated quote still leaves its text in the buffer
        if in_quote:
            logger.debug("Unterminated quote at end of input")
        flush()

        return pieces

    def segment(self, text: str) -> list[str]:
        """Segment text into sentences and repair punctuation-only pieces.

        Args:
            text: Input text to segment

        Returns:
            List of sentence strings
        """
        if not text:
            return []
        return merge_standalone_punctuation(
            self.split_raw(text),
            self.has_letter,
            closing_marks=self.terminators | self.latin_terminators,
        )
