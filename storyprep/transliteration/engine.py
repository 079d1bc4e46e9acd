"""Devanagari to IAST transliteration with rule-based post-correction."""

import logging
import re
import unicodedata
from typing import Callable, Optional

from indic_transliteration import sanscript

from .rules import RuleSet, load_rules

logger = logging.getLogger(__name__)

# Devanagari block; anything left here after romanization is residue
DEVANAGARI_RESIDUE = re.compile(r"[\u0900-\u097F]")

# Combining Diacritical Marks, Extended and for Symbols
COMBINING_MARKS = re.compile(r"[\u0300-\u036F\u1AB0-\u1AFF\u20D0-\u20FF]")

WHITESPACE = re.compile(r"\s+")

BaseTransliterator = Callable[[str, str, str], str]

NUKTA = "\u093c"
NUKTA_SPLIT = re.compile(r"(\u093c)")


def sanscript_transliterate(text: str, source_scheme: str, target_scheme: str) -> str:
    """Base romanization using indic_transliteration's scheme tables.

    The scheme tables read a nukta as a separate sound (``\u091c\u093c`` gives
    ``z``). Text is NFD-decomposed and every run between nukta signs is
    romanized on its own, so the consonant keeps its plain value and the
    sign passes through for the correction rules.
    """
    text = unicodedata.normalize("NFD", text)
    return "".join(
        part if part == NUKTA else sanscript.transliterate(part, source_scheme, target_scheme)
        for part in NUKTA_SPLIT.split(text)
        if part
    )


def apply_rules(text: str, rules: Optional[RuleSet]) -> str:
    """Apply correction rules in load order (identity when ``rules`` is None)."""
    if not rules:
        return text
    return rules.apply(text)


def strip_script_residue(text: str) -> str:
    return DEVANAGARI_RESIDUE.sub("", text)


def strip_combining_marks(text: str) -> str:
    """Remove combining marks left over after corrections.

    Text is NFC-composed first so that precomposed IAST letters such as
    ``ā`` keep their diacritic and only unattached marks are removed.
    """
    text = unicodedata.normalize("NFC", text)
    return COMBINING_MARKS.sub("", text)


def normalize_whitespace(text: str) -> str:
    return WHITESPACE.sub(" ", text).strip()


def clean_transliteration(text: str) -> str:
    """Run the residue, combining-mark and whitespace cleanup passes.

    Args:
        text: Romanized text after rule corrections

    Returns:
        Cleaned text
    """
    text = strip_script_residue(text)
    text = strip_combining_marks(text)
    return normalize_whitespace(text)


class Transliterator:
    """Converts Devanagari sentences to IAST.

    The pipeline is: base romanization, ordered correction rules, residue
    stripping, combining-mark stripping and whitespace normalization.
    Failures in the base stage are logged and give an empty string, so one
    malformed sentence never stops a story import.
    """

    def __init__(
        self,
        rules: Optional[RuleSet] = None,
        base: Optional[BaseTransliterator] = None,
        source_scheme: str = sanscript.DEVANAGARI,
        target_scheme: str = sanscript.IAST,
    ):
        """Initialize transliterator.

        Args:
            rules: Correction rules; None applies no corrections
            base: Base romanization function ``(text, source, target) -> str``
            source_scheme: Source scheme id for the base function
            target_scheme: Target scheme id for the base function
        """
        self.rules = rules if rules is not None else RuleSet.empty()
        self.base = base or sanscript_transliterate
        self.source_scheme = source_scheme
        self.target_scheme = target_scheme

    def romanize(self, text: str) -> Optional[str]:
        """Run the base stage; returns None if it fails."""
        try:
            result = self.base(text, self.source_scheme, self.target_scheme)
        except Exception:
            logger.exception("Transliteration failed for text: %r", text)
            return None
        if not isinstance(result, str):
            logger.error(
                "Base transliteration returned %s for text: %r",
                type(result).__name__,
                text,
            )
            return None
        return result

    def transliterate(self, text: str) -> str:
        """Transliterate one sentence.

        Args:
            text: Devanagari text

        Returns:
            IAST text, or an empty string for empty input or base failure
        """
        if not text:
            return ""

        base = self.romanize(text)
        if base is None:
            return ""

        try:
            corrected = apply_rules(base, self.rules)
        except re.error:
            # Bad replacement templates only surface on the first match
            logger.exception("Correction rules failed for text: %r", text)
            corrected = base

        return clean_transliteration(corrected)

    __call__ = transliterate


_default_transliterator: Optional[Transliterator] = None


def get_default_transliterator() -> Transliterator:
    """Return the process-wide transliterator built from the packaged rules."""
    global _default_transliterator
    if _default_transliterator is None:
        _default_transliterator = Transliterator(rules=load_rules())
    return _default_transliterator


def transliterate(text: str, rules: Optional[RuleSet] = None) -> str:
    """Transliterate Devanagari text to IAST.

    Args:
        text: Devanagari text
        rules: Rule set to use instead of the packaged default rules

    Returns:
        IAST text (never None)
    """
    if rules is not None:
        return Transliterator(rules=rules).transliterate(text)
    return get_default_transliterator().transliterate(text)


devanagari_to_iast = transliterate
