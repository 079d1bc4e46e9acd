"""Storyprep - Split Devanagari stories into recordable sentences and transliterate them."""

__version__ = "0.1.0"

from .config import Config
from .engines import QuoteAwareSegmenter, segment_into_sentences
from .models import ImportResult, SentenceUnit, StoryMetadata
from .pipeline import StoryImportPipeline
from .transliteration import RuleSet, Transliterator, devanagari_to_iast, transliterate

__all__ = [
    "Config",
    "QuoteAwareSegmenter",
    "segment_into_sentences",
    "ImportResult",
    "SentenceUnit",
    "StoryMetadata",
    "StoryImportPipeline",
    "RuleSet",
    "Transliterator",
    "devanagari_to_iast",
    "transliterate",
]
