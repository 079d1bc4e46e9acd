"""Configuration management for the story import pipeline."""

from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator


class SegmentationConfig(BaseModel):
    """Configuration for the sentence segmenter."""

    engine: Literal["quote"] = "quote"
    quote_char: str = Field(default='"', min_length=1, max_length=1)
    terminators: list[str] = Field(
        default_factory=lambda: ["\u0964", "\u0965"],
        description="Script sentence-final marks (danda, double danda)",
    )
    latin_terminators: list[str] = Field(default_factory=lambda: [".", "!", "?"])
    normalize_quotes: bool = Field(
        default=True, description="Fold typographic double quotes to a plain quote"
    )

    @field_validator("terminators", "latin_terminators")
    @classmethod
    def single_characters(cls, v):
        """Terminators are matched one character at a time."""
        for mark in v:
            if len(mark) != 1:
                raise ValueError(f"Terminator must be a single character: {mark!r}")
        return v


class TransliterationConfig(BaseModel):
    """Configuration for the transliteration engine."""

    enabled: bool = True
    source_scheme: str = "devanagari"
    target_scheme: str = "iast"
    rules_file: Optional[Path] = None  # None uses the packaged rules


class OutputConfig(BaseModel):
    """Configuration for output options."""

    output_dir: Path = Path("data/story_output")
    save_preview_json: bool = True  # story-preview-<file>.json per story
    save_csv: bool = True  # one CSV of sentence rows per story


class MaintenanceConfig(BaseModel):
    """Options for recomputing transliterations of existing sentences."""

    batch_size: int = Field(default=100, ge=1)
    limit: int = Field(default=5, ge=0, description="0 processes all rows")
    start_id: int = Field(default=0, ge=0)
    checkpoint_file: Optional[Path] = None
    dry_run: bool = False


class StoryEntry(BaseModel):
    """A story file to import."""

    file: Path
    title: Optional[str] = None
    language: str = "konkani"


class Config(BaseModel):
    """Main configuration for the story import pipeline."""

    input_file: Optional[Path] = None
    title: Optional[str] = None
    language: str = "konkani"
    stories: list[StoryEntry] = Field(default_factory=list)
    segmentation: SegmentationConfig = Field(default_factory=SegmentationConfig)
    transliteration: TransliterationConfig = Field(default_factory=TransliterationConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    maintenance: MaintenanceConfig = Field(default_factory=MaintenanceConfig)

    @field_validator("input_file", mode="before")
    @classmethod
    def convert_to_path(cls, v):
        """Convert string to Path."""
        if v is None:
            return None
        return Path(v) if isinstance(v, str) else v

    def story_entries(self) -> list[StoryEntry]:
        """Stories to import: the configured list, else the single input file."""
        if self.stories:
            return list(self.stories)
        if self.input_file:
            return [
                StoryEntry(file=self.input_file, title=self.title, language=self.language)
            ]
        return []

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Config":
        """Load configuration from a YAML file."""
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return cls(**(data or {}))

    def to_yaml(self, path: str | Path) -> None:
        """Save configuration to a YAML file."""
        data = self.model_dump(mode="json")
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(data, f, default_flow_style=False, allow_unicode=True)
