"""Base classes and constants for segmentation engines."""

import re
from abc import ABC, abstractmethod


# Devanagari Unicode Constants
DANDA = "\u0964"  # ।
DOUBLE_DANDA = "\u0965"  # ॥
QUOTE = '"'
NEWLINE = "\n"

# Sentence-final marks that close the current sentence outside a quote
SCRIPT_TERMINATORS = frozenset({DANDA, DOUBLE_DANDA})
LATIN_TERMINATORS = frozenset({".", "!", "?"})

# Letters, vowel signs and viramas; excludes danda marks, digits and the
# abbreviation sign
DEVANAGARI_LETTERS = "\u0900-\u0963\u0971-\u097F"


class SegmentationEngine(ABC):
    """Base class for segmentation engines."""

    def __init__(self):
        # [^\W\d_] is any Unicode letter
        self.letter_pattern = re.compile(rf"[^\W\d_]|[{DEVANAGARI_LETTERS}]")

    @abstractmethod
    def segment(self, text: str) -> list[str]:
        """Segment text into an ordered list of sentences.

        Args:
            text: Input text to segment

        Returns:
            List of sentence strings
        """
        pass

    def has_letter(self, text: str) -> bool:
        """Check whether text contains a Latin or Devanagari letter.

        Args:
            text: Candidate sentence

        Returns:
            True if at least one letter is present
        """
        return bool(self.letter_pattern.search(text))
