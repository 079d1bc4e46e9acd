"""Utility functions."""

from .repair import merge_standalone_punctuation
from .text_normalizer import normalize_story_text, sanitize_text

__all__ = [
    "merge_standalone_punctuation",
    "normalize_story_text",
    "sanitize_text",
]
