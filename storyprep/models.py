"""Data models for the story import pipeline."""

from dataclasses import dataclass, field, asdict


@dataclass
class SentenceUnit:
    """One recordable sentence of a story."""

    order_in_story: int  # 1-based
    text_source: str  # Devanagari
    text_transliterated: str  # IAST, empty if transliteration failed
    char_count: int

    @classmethod
    def create(cls, order: int, text: str, transliterated: str = "") -> "SentenceUnit":
        return cls(
            order_in_story=order,
            text_source=text,
            text_transliterated=transliterated or "",
            char_count=len(text),
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class StoryMetadata:
    """Metadata for a source story file."""

    title: str
    source_file: str
    language: str = "konkani"


@dataclass
class ImportResult:
    """Result of importing a single story."""

    metadata: StoryMetadata
    sentences: list[SentenceUnit] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.sentences)

    def to_preview(self) -> dict:
        """Preview document with title, count and sentence rows."""
        return {
            "title": self.metadata.title,
            "source_file": self.metadata.source_file,
            "language": self.metadata.language,
            "count": self.count,
            "sentences": [s.to_dict() for s in self.sentences],
        }

    def to_rows(self) -> list[dict]:
        """Flat rows for tabular output."""
        return [
            {
                "title": self.metadata.title,
                "source_file": self.metadata.source_file,
                "language": self.metadata.language,
                **s.to_dict(),
            }
            for s in self.sentences
        ]


@dataclass
class RetransliterationReport:
    """Outcome of recomputing transliterations for a sentence table."""

    total_processed: int = 0
    updated: int = 0
    last_id: int = 0
    dry_run: bool = False


@dataclass
class SanityIssue:
    """A sentence whose transliteration still holds Devanagari."""

    sentence_id: int
    reason: str
    text_source: str
    text_transliterated: str
