"""Devanagari to IAST transliteration."""

from .engine import (
    Transliterator,
    apply_rules,
    clean_transliteration,
    devanagari_to_iast,
    get_default_transliterator,
    transliterate,
)
from .rules import RuleSet, RulesConfigError, TransliterationRule, load_rules

__all__ = [
    "Transliterator",
    "apply_rules",
    "clean_transliteration",
    "devanagari_to_iast",
    "get_default_transliterator",
    "transliterate",
    "RuleSet",
    "RulesConfigError",
    "TransliterationRule",
    "load_rules",
]
