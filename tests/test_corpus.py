"""Tests for corpus file loading."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from ducky_learn.corpus import load_corpus
from ducky_learn.errors import CorpusFormatError


class TestLoadCorpus:
    """Tests for TSV and JSON-lines corpora."""

    def test_tsv(self, tsv_corpus: Path, text_corpus):
        docs, labels = text_corpus
        records = load_corpus(tsv_corpus)
        assert [label for label, _ in records] == labels
        assert [text for _, text in records] == docs

    def test_tsv_skips_blank_and_comment_lines(self, tmp_path: Path):
        path = tmp_path / "c.tsv"
        path.write_text("# header\n\nspam\tbuy now\n\nham\tsee you\n", encoding="utf-8")
        assert load_corpus(path) == [("spam", "buy now"), ("ham", "see you")]

    def test_tsv_text_may_contain_tabs(self, tmp_path: Path):
        path = tmp_path / "c.tsv"
        path.write_text("spam\tbuy\tnow\n", encoding="utf-8")
        assert load_corpus(path) == [("spam", "buy\tnow")]

    def test_tsv_missing_tab(self, tmp_path: Path):
        path = tmp_path / "c.tsv"
        path.write_text("spam\tbuy now\nno tab here\n", encoding="utf-8")
        with pytest.raises(CorpusFormatError, match=":2:") as exc_info:
            load_corpus(path)
        assert exc_info.value.line_no == 2

    def test_tsv_empty_label(self, tmp_path: Path):
        path = tmp_path / "c.tsv"
        path.write_text("\tbuy now\n", encoding="utf-8")
        with pytest.raises(CorpusFormatError, match="empty label"):
            load_corpus(path)

    def test_jsonl(self, tmp_path: Path):
        path = tmp_path / "c.jsonl"
        rows = [{"label": "spam", "text": "buy now"}, {"label": 1, "text": "ok"}]
        path.write_text("\n".join(json.dumps(r) for r in rows) + "\n", encoding="utf-8")
        assert load_corpus(path) == [("spam", "buy now"), (1, "ok")]

    def test_jsonl_invalid_json(self, tmp_path: Path):
        path = tmp_path / "c.jsonl"
        path.write_text('{"label": "a", "text": "x"}\n{oops\n', encoding="utf-8")
        with pytest.raises(CorpusFormatError, match="invalid JSON"):
            load_corpus(path)

    def test_jsonl_missing_keys(self, tmp_path: Path):
        path = tmp_path / "c.jsonl"
        path.write_text('{"label": "a"}\n', encoding="utf-8")
        with pytest.raises(CorpusFormatError, match="'label' and 'text'"):
            load_corpus(path)

    def test_jsonl_text_must_be_string(self, tmp_path: Path):
        path = tmp_path / "c.jsonl"
        path.write_text('{"label": "a", "text": ["x"]}\n', encoding="utf-8")
        with pytest.raises(CorpusFormatError, match="must be a string"):
            load_corpus(path)

    @pytest.mark.parametrize("label", [["x"], {"a": 1}, True, 1.5, None])
    def test_jsonl_label_must_be_string_or_integer(self, tmp_path: Path, label):
        path = tmp_path / "c.jsonl"
        path.write_text(json.dumps({"label": label, "text": "hi there"}) + "\n", encoding="utf-8")
        with pytest.raises(CorpusFormatError, match="'label' must be a string or integer"):
            load_corpus(path)

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_corpus(tmp_path / "nope.tsv")
