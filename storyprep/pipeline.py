"""Story import pipeline: segment story text and transliterate each sentence."""

import json
import logging
from pathlib import Path
from typing import Optional

import pandas as pd
from tqdm import tqdm

from .config import Config, StoryEntry
from .engines import QuoteAwareSegmenter, SegmentationEngine
from .models import ImportResult, SentenceUnit, StoryMetadata
from .transliteration import RuleSet, Transliterator, load_rules
from .utils import normalize_story_text, sanitize_text

logger = logging.getLogger(__name__)

PREVIEW_SAMPLE_SIZE = 3

SEGMENTATION_ENGINES = {
    "quote": QuoteAwareSegmenter,
}


def build_segmenter(config: Config) -> SegmentationEngine:
    seg = config.segmentation
    engine_cls = SEGMENTATION_ENGINES.get(seg.engine)
    if engine_cls is None:
        raise ValueError(f"Unknown segmentation engine: {seg.engine}")
    return engine_cls(
        quote_char=seg.quote_char,
        terminators=seg.terminators,
        latin_terminators=seg.latin_terminators,
    )


def build_transliterator(config: Config, rules: Optional[RuleSet] = None) -> Transliterator:
    """Create the transliterator with rules loaded once for the whole run.

    Args:
        config: Pipeline configuration
        rules: Pre-loaded rules; loaded from ``rules_file`` when omitted

    Returns:
        Transliterator
    """
    if rules is None:
        rules = load_rules(config.transliteration.rules_file)
    return Transliterator(
        rules=rules,
        source_scheme=config.transliteration.source_scheme,
        target_scheme=config.transliteration.target_scheme,
    )


def write_sentence_csv(rows: list[dict], path: Path) -> None:
    """Write sentence rows to CSV with control characters removed."""
    df = pd.DataFrame(rows)
    for col in df.select_dtypes(include=["object"]).columns:
        df[col] = df[col].apply(lambda x: sanitize_text(x) if isinstance(x, str) else x)
    df.to_csv(path, index=False)


class StoryImportPipeline:
    """Pipeline for turning story text files into sentence units."""

    def __init__(
        self,
        config: Config,
        transliterator: Optional[Transliterator] = None,
    ):
        """Initialize story import pipeline.

        Args:
            config: Pipeline configuration
            transliterator: Transliterator to use instead of building one
        """
        self.config = config
        self.segmenter = build_segmenter(config)
        if transliterator is None and config.transliteration.enabled:
            transliterator = build_transliterator(config)
        self.transliterator = transliterator

    def segment_text(self, text: str) -> list[str]:
        """Normalize story text and split it into sentences.

        Args:
            text: Raw story text

        Returns:
            List of sentence strings
        """
        text = normalize_story_text(
            text, normalize_quotes=self.config.segmentation.normalize_quotes
        )
        return self.segmenter.segment(text)

    def build_units(self, sentences: list[str], desc: str = "Transliterating") -> list[SentenceUnit]:
        """Number sentences from 1 and attach their transliteration.

        Args:
            sentences: Segmented sentences in story order
            desc: Progress bar label

        Returns:
            List of SentenceUnit
        """
        units = []
        for order, text in enumerate(tqdm(sentences, desc=desc, disable=len(sentences) < 2), 1):
            transliterated = (
                self.transliterator.transliterate(text)
                if self.transliterator is not None
                else ""
            )
            units.append(SentenceUnit.create(order, text, transliterated))
        return units

    def process_text(self, text: str, metadata: StoryMetadata) -> ImportResult:
        """Process the content of one story.

        Args:
            text: Story text content
            metadata: Story metadata

        Returns:
            ImportResult with sentence units and metadata
        """
        sentences = self.segment_text(text)
        units = self.build_units(sentences, desc=f"Transliterating {metadata.source_file}")
        return ImportResult(metadata=metadata, sentences=units)

    def import_story(self, entry: StoryEntry) -> ImportResult:
        """Read and process a single story file.

        Args:
            entry: Story file, title and language

        Returns:
            ImportResult

        Raises:
            FileNotFoundError: If the story file does not exist
            ValueError: If the file is empty or yields no sentences
        """
        path = Path(entry.file)
        if not path.exists():
            raise FileNotFoundError(f"Story file not found: {path}")

        logger.info("Reading file: %s", path.resolve())
        content = path.read_text(encoding="utf-8")
        if not content.strip():
            raise ValueError(f"File {path.name} is empty")

        metadata = StoryMetadata(
            title=entry.title or path.stem,
            source_file=path.name,
            language=entry.language,
        )
        result = self.process_text(content, metadata)
        if not result.sentences:
            raise ValueError(f"No sentences found in file {path.name}")

        logger.info("Found %d sentences in %s", result.count, path.name)
        return result

    def save_result(self, result: ImportResult) -> list[Path]:
        """Write preview JSON and/or sentence CSV for one story.

        Args:
            result: Imported story

        Returns:
            Paths written
        """
        output_dir = self.config.output.output_dir
        output_dir.mkdir(parents=True, exist_ok=True)
        written = []

        if self.config.output.save_preview_json:
            json_path = output_dir / f"story-preview-{result.metadata.source_file}.json"
            with open(json_path, "w", encoding="utf-8") as f:
                json.dump(result.to_preview(), f, ensure_ascii=False, indent=2)
            written.append(json_path)

        if self.config.output.save_csv:
            csv_path = output_dir / f"{Path(result.metadata.source_file).stem}_sentences.csv"
            write_sentence_csv(result.to_rows(), csv_path)
            written.append(csv_path)

        for path in written:
            logger.info("Preview written to: %s", path)
        return written

    def log_sample(self, result: ImportResult, size: int = PREVIEW_SAMPLE_SIZE) -> None:
        logger.info("Preview of %s (first %d sentences):", result.metadata.title, size)
        for unit in result.sentences[:size]:
            logger.info("  %d. %s", unit.order_in_story, unit.text_source)
            logger.info("     -> %s", unit.text_transliterated)

    def run(self, dry_run: bool = False) -> list[ImportResult]:
        """Run the pipeline over every configured story.

        Args:
            dry_run: Log a short sample per story instead of writing files

        Returns:
            List of ImportResult, one per story
        """
        entries = self.config.story_entries()
        if not entries:
            raise ValueError("Input file not specified in configuration")

        results = []
        for entry in entries:
            result = self.import_story(entry)
            if dry_run:
                self.log_sample(result)
            else:
                self.save_result(result)
            results.append(result)

        total = sum(r.count for r in results)
        logger.info("Imported %d stories, %d sentences", len(results), total)
        return results
