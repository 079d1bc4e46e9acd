"""Segmentation engines."""

from .base import SegmentationEngine
from .quote_engine import QuoteAwareSegmenter

__all__ = ["SegmentationEngine", "QuoteAwareSegmenter", "segment_into_sentences"]

_default_segmenter = None


def segment_into_sentences(text: str) -> list[str]:
    """Split story text into sentences with the default quote-aware engine."""
    global _default_segmenter
    if _default_segmenter is None:
        _default_segmenter = QuoteAwareSegmenter()
    return _default_segmenter.segment(text)
