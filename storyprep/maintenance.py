"""Maintenance tasks over an exported sentence table.

The table is a CSV with at least ``id``, ``text_source`` and
``text_transliterated`` columns. Tables exported with the older
``text_devanagari`` / ``text_iast`` column names are accepted too.
"""

import json
import logging
import re
from pathlib import Path
from typing import Optional

import pandas as pd
from tqdm import tqdm

from .models import RetransliterationReport, SanityIssue
from .transliteration import Transliterator

logger = logging.getLogger(__name__)

LEGACY_COLUMNS = {
    "text_devanagari": "text_source",
    "text_iast": "text_transliterated",
}
REQUIRED_COLUMNS = ("id", "text_source", "text_transliterated")

DEVANAGARI_PATTERN = re.compile(r"[\u0900-\u097F]")


def load_sentence_table(path: str | Path) -> pd.DataFrame:
    """Read a sentence table and normalise its column names.

    Args:
        path: CSV file path

    Returns:
        DataFrame sorted by ``id``

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If required columns are missing
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Sentence table not found: {path}")

    df = pd.read_csv(path, keep_default_na=False, dtype={"text_source": str, "text_devanagari": str})
    df = df.rename(columns={k: v for k, v in LEGACY_COLUMNS.items() if k in df.columns})
    if "text_transliterated" not in df.columns and "text_source" in df.columns:
        df["text_transliterated"] = ""

    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Sentence table {path.name} is missing columns: {', '.join(missing)}")

    df["id"] = df["id"].astype(int)
    df["text_transliterated"] = df["text_transliterated"].astype(str)
    return df.sort_values("id").reset_index(drop=True)


def read_checkpoint(path: Optional[Path]) -> Optional[int]:
    """Return the last processed id stored in a checkpoint file, if any."""
    if path is None or not Path(path).exists():
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError):
        logger.warning("Could not read checkpoint file %s, starting fresh.", path)
        return None
    if not isinstance(data, dict):
        return None
    # Older checkpoints use "lastId"
    last_id = data.get("last_id", data.get("lastId"))
    return int(last_id) if last_id else None


def write_checkpoint(path: Path, last_id: int) -> None:
    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump({"last_id": last_id}, f)
    except OSError as e:
        logger.warning("Could not write checkpoint file %s: %s", path, e)


def retransliterate_table(
    df: pd.DataFrame,
    transliterator: Transliterator,
    *,
    limit: int = 5,
    batch_size: int = 100,
    start_id: int = 0,
    dry_run: bool = False,
    checkpoint_file: Optional[Path] = None,
) -> RetransliterationReport:
    """Recompute transliterations for rows with ``id > start_id``, in id order.

    Rows are processed in batches; the checkpoint (if given) is written
    after each batch and, when present on start, overrides ``start_id``.
    Only rows whose transliteration changes count as updated. Unless
    ``dry_run`` is set, ``df`` is updated in place.

    Args:
        df: Sentence table from ``load_sentence_table``
        transliterator: Transliterator to apply
        limit: Maximum rows to process; 0 processes every row
        batch_size: Rows per batch
        start_id: Process rows with id greater than this
        dry_run: Report changes without applying them
        checkpoint_file: Optional JSON checkpoint path

    Returns:
        RetransliterationReport
    """
    if batch_size < 1:
        raise ValueError("batch_size must be at least 1")

    checkpoint_id = read_checkpoint(checkpoint_file)
    last_id = checkpoint_id if checkpoint_id is not None else start_id
    process_all = limit == 0
    report = RetransliterationReport(last_id=last_id, dry_run=dry_run)

    df.sort_values("id", inplace=True)
    pending = df[df["id"] > last_id]
    total = len(pending) if process_all else min(limit, len(pending))

    with tqdm(total=total, desc="Transliterating sentences") as progress:
        while True:
            size = batch_size if process_all else min(batch_size, limit - report.total_processed)
            if size <= 0:
                break

            batch = df[df["id"] > report.last_id].head(size)
            if batch.empty:
                break

            updated_in_batch = 0
            for index, row in batch.iterrows():
                value = transliterator.transliterate(row["text_source"])
                if row["text_transliterated"] != value:
                    if not dry_run:
                        df.at[index, "text_transliterated"] = value
                    updated_in_batch += 1
                report.last_id = int(row["id"])
                report.total_processed += 1
                progress.update(1)

            report.updated += updated_in_batch
            if checkpoint_file is not None:
                write_checkpoint(checkpoint_file, report.last_id)

            logger.debug(
                "Updated this batch: %d; Total processed: %d",
                updated_in_batch,
                report.total_processed,
            )
            if len(batch) < size:
                break

    return report


def check_transliterations(df: pd.DataFrame) -> list[SanityIssue]:
    """Find rows whose transliteration still contains Devanagari.

    Args:
        df: Sentence table from ``load_sentence_table``

    Returns:
        List of SanityIssue, in id order
    """
    issues = []
    for row in df.itertuples(index=False):
        if DEVANAGARI_PATTERN.search(row.text_transliterated):
            issues.append(
                SanityIssue(
                    sentence_id=int(row.id),
                    reason="Contains Devanagari",
                    text_source=row.text_source,
                    text_transliterated=row.text_transliterated,
                )
            )
    return issues
