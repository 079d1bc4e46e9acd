"""Ordered regex correction rules applied after base romanization."""

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Optional

import yaml

logger = logging.getLogger(__name__)

# Groups are applied in this order; later groups may override earlier output
GROUP_ORDER = ("diacritical", "guide2")

DEFAULT_RULES_PATH = Path(__file__).parent / "transliteration_rules.json"

# JavaScript-style replacement references ($1, $2 ...)
JS_GROUP_REF = re.compile(r"\$(\d+)")


class RulesConfigError(ValueError):
    """Raised when a rule file cannot be parsed or holds an invalid pattern."""


@dataclass(frozen=True)
class TransliterationRule:
    """A single global find-and-replace correction."""

    pattern: str
    replacement: str = ""
    compiled: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        try:
            compiled = re.compile(self.pattern)
        except re.error as e:
            raise RulesConfigError(f"Invalid rule pattern {self.pattern!r}: {e}") from e
        object.__setattr__(self, "compiled", compiled)

    @classmethod
    def from_dict(cls, data: dict) -> "TransliterationRule":
        """Build a rule from a ``{"from": ..., "to": ...}`` mapping."""
        if not isinstance(data, dict) or "from" not in data:
            raise RulesConfigError(f"Rule must be a mapping with a 'from' key: {data!r}")
        replacement = data.get("to") or ""
        replacement = JS_GROUP_REF.sub(r"\\g<\1>", replacement)
        return cls(pattern=str(data["from"]), replacement=replacement)

    def apply(self, text: str) -> str:
        return self.compiled.sub(self.replacement, text)


@dataclass(frozen=True)
class RuleSet:
    """Immutable, ordered list of correction rules.

    Rules run strictly in order, so a specific override placed after a
    generic rule sees and can re-correct the generic rule's output.
    """

    rules: tuple[TransliterationRule, ...] = ()

    def __len__(self) -> int:
        return len(self.rules)

    def __iter__(self):
        return iter(self.rules)

    def apply(self, text: str) -> str:
        """Apply every rule in load order.

        Args:
            text: Romanized text

        Returns:
            Corrected text
        """
        for rule in self.rules:
            text = rule.apply(text)
        return text

    def reversed(self) -> "RuleSet":
        return RuleSet(tuple(reversed(self.rules)))

    @classmethod
    def empty(cls) -> "RuleSet":
        return cls()

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, str]]) -> "RuleSet":
        """Build a rule set from ``(pattern, replacement)`` pairs."""
        return cls(tuple(TransliterationRule(p, r) for p, r in pairs))

    @classmethod
    def from_data(cls, data: Any) -> "RuleSet":
        """Build a rule set from parsed JSON/YAML data.

        Accepts either a flat list of rules or a mapping of named groups.
        Known groups run first in ``GROUP_ORDER``; other groups follow in
        file order.

        Args:
            data: Parsed file content

        Returns:
            RuleSet
        """
        if data is None:
            return cls.empty()

        if isinstance(data, list):
            entries = data
        elif isinstance(data, dict):
            names = [g for g in GROUP_ORDER if g in data]
            names += [g for g in data if g not in GROUP_ORDER]
            entries = []
            for name in names:
                group = data[name] or []
                if not isinstance(group, list):
                    raise RulesConfigError(f"Rule group '{name}' must be a list")
                entries.extend(group)
        else:
            raise RulesConfigError(
                f"Rules must be a list or a mapping of groups, got {type(data).__name__}"
            )

        return cls(tuple(TransliterationRule.from_dict(entry) for entry in entries))

    @classmethod
    def from_file(cls, path: str | Path) -> "RuleSet":
        """Load rules from a JSON or YAML file.

        A missing file gives an empty rule set (no corrections).

        Args:
            path: Path to rules file

        Returns:
            RuleSet

        Raises:
            RulesConfigError: If the file cannot be parsed
        """
        path = Path(path)
        if not path.exists():
            logger.warning("Rules file not found: %s (no corrections applied)", path)
            return cls.empty()

        try:
            with open(path, "r", encoding="utf-8") as f:
                if path.suffix.lower() in (".yaml", ".yml"):
                    data = yaml.safe_load(f)
                else:
                    data = json.load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise RulesConfigError(f"Could not parse rules file {path}: {e}") from e

        rule_set = cls.from_data(data)
        logger.info("Loaded %d transliteration rules from %s", len(rule_set), path)
        return rule_set


def load_rules(path: Optional[str | Path] = None) -> RuleSet:
    """Load the rule set from ``path``, or the packaged default rules."""
    return RuleSet.from_file(path or DEFAULT_RULES_PATH)
