"""Tests for re-transliteration and sanity checks over sentence tables."""

import json

import pandas as pd
import pytest

from storyprep.maintenance import (
    check_transliterations,
    load_sentence_table,
    retransliterate_table,
)
from storyprep.transliteration import Transliterator


@pytest.fixture
def transliterator():
    return Transliterator(base=lambda text, s, t: text.upper())


@pytest.fixture
def table():
    # Rows 2, 3 and 5 are out of date
    return pd.DataFrame(
        {
            "id": [5, 1, 2, 3, 4],
            "text_source": ["e", "a", "b", "c", "d"],
            "text_transliterated": ["", "A", "", "old", "D"],
        }
    )


def transliterations(df):
    return dict(zip(df["id"], df["text_transliterated"]))


class TestRetransliterate:
    """Batch recomputation of transliterations."""

    def test_all_rows(self, table, transliterator):
        report = retransliterate_table(table, transliterator, limit=0, batch_size=2)

        assert report.total_processed == 5
        assert report.updated == 3
        assert report.last_id == 5
        assert transliterations(table) == {1: "A", 2: "B", 3: "C", 4: "D", 5: "E"}

    def test_limit(self, table, transliterator):
        report = retransliterate_table(table, transliterator, limit=2, batch_size=100)

        assert report.total_processed == 2
        assert report.updated == 1
        assert report.last_id == 2
        assert transliterations(table)[3] == "old"

    def test_start_id(self, table, transliterator):
        report = retransliterate_table(table, transliterator, limit=0, start_id=3)

        assert report.total_processed == 2
        assert report.updated == 1
        assert transliterations(table)[2] == ""

    def test_dry_run_leaves_table_untouched(self, table, transliterator):
        before = transliterations(table)
        report = retransliterate_table(table, transliterator, limit=0, dry_run=True)

        assert report.updated == 3
        assert report.dry_run
        assert transliterations(table) == before

    def test_checkpoint_written_and_resumed(self, tmp_path, table, transliterator):
        checkpoint = tmp_path / "checkpoint.json"
        checkpoint.write_text(json.dumps({"last_id": 4}), encoding="utf-8")

        report = retransliterate_table(
            table, transliterator, limit=0, batch_size=2, checkpoint_file=checkpoint
        )

        assert report.total_processed == 1
        assert transliterations(table)[2] == ""
        assert transliterations(table)[5] == "E"
        assert json.loads(checkpoint.read_text(encoding="utf-8")) == {"last_id": 5}

    def test_camel_case_checkpoint_resumed(self, tmp_path, table, transliterator):
        checkpoint = tmp_path / "checkpoint.json"
        checkpoint.write_text(json.dumps({"lastId": 4}), encoding="utf-8")

        report = retransliterate_table(table, transliterator, limit=0, checkpoint_file=checkpoint)

        assert report.total_processed == 1
        assert report.last_id == 5
        assert json.loads(checkpoint.read_text(encoding="utf-8")) == {"last_id": 5}

    def test_unreadable_checkpoint_starts_fresh(self, tmp_path, table, transliterator):
        checkpoint = tmp_path / "checkpoint.json"
        checkpoint.write_text("not json", encoding="utf-8")

        report = retransliterate_table(table, transliterator, limit=0, checkpoint_file=checkpoint)
        assert report.total_processed == 5

    def test_invalid_batch_size(self, table, transliterator):
        with pytest.raises(ValueError):
            retransliterate_table(table, transliterator, batch_size=0)


class TestSentenceTable:
    """Loading exported sentence tables."""

    def test_legacy_columns(self, tmp_path):
        path = tmp_path / "sentences.csv"
        pd.DataFrame(
            {
                "id": [2, 1],
                "text_devanagari": ["दोन", "एक"],
                "text_iast": ["dona", ""],
            }
        ).to_csv(path, index=False)

        df = load_sentence_table(path)
        assert list(df["id"]) == [1, 2]
        assert list(df["text_source"]) == ["एक", "दोन"]
        assert list(df["text_transliterated"]) == ["", "dona"]

    def test_missing_columns(self, tmp_path):
        path = tmp_path / "sentences.csv"
        pd.DataFrame({"id": [1], "text": ["एक"]}).to_csv(path, index=False)
        with pytest.raises(ValueError, match="missing columns"):
            load_sentence_table(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_sentence_table(tmp_path / "missing.csv")


def test_check_flags_devanagari_residue():
    df = pd.DataFrame(
        {
            "id": [1, 2, 3],
            "text_source": ["एक", "दोन", "तीन"],
            "text_transliterated": ["eka", "doन", "tīna"],
        }
    )
    issues = check_transliterations(df)

    assert [i.sentence_id for i in issues] == [2]
    assert issues[0].reason == "Contains Devanagari"
    assert issues[0].text_transliterated == "doन"
