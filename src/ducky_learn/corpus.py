"""Loading labeled text corpora from disk.

Two line-oriented formats are understood:

- ``.jsonl``: one JSON object per line with ``label`` and ``text`` keys.
- anything else: ``label<TAB>text`` per line.

Blank lines and lines starting with ``#`` (TSV only) are ignored.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from .errors import CorpusFormatError

logger = logging.getLogger(__name__)


def _parse_tsv(path: Path, line_no: int, line: str) -> tuple[str, str]:
    label, sep, text = line.partition("\t")
    if not sep:
        raise CorpusFormatError(path, line_no, "expected 'label<TAB>text'")
    label = label.strip()
    if not label:
        raise CorpusFormatError(path, line_no, "empty label")
    return label, text.strip()


def _parse_jsonl(path: Path, line_no: int, line: str) -> tuple[str | int, str]:
    try:
        record = json.loads(line)
    except json.JSONDecodeError as e:
        raise CorpusFormatError(path, line_no, f"invalid JSON ({e.msg})") from e
    if not isinstance(record, dict) or "label" not in record or "text" not in record:
        raise CorpusFormatError(path, line_no, "expected an object with 'label' and 'text'")
    text = record["text"]
    if not isinstance(text, str):
        raise CorpusFormatError(path, line_no, "'text' must be a string")
    label = record["label"]
    if isinstance(label, bool) or not isinstance(label, (str, int)):
        raise CorpusFormatError(path, line_no, "'label' must be a string or integer")
    return label, text


def load_corpus(path: str | Path) -> list[tuple[str, str]]:
    """Read ``(label, text)`` pairs from a TSV or JSON-lines file.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        CorpusFormatError: On the first malformed line.
    """
    path = Path(path)
    is_jsonl = path.suffix.lower() == ".jsonl"
    parse = _parse_jsonl if is_jsonl else _parse_tsv

    records: list[tuple[str, str]] = []
    with open(path, "r", encoding="utf-8") as f:
        for line_no, raw in enumerate(f, 1):
            line = raw.rstrip("\n")
            if not line.strip():
                continue
            if not is_jsonl and line.startswith("#"):
                continue
            records.append(parse(path, line_no, line))

    logger.info(f"Loaded {len(records)} documents from {path}")
    return records
