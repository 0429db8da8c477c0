"""Shared test fixtures for ducky-learn tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from ducky_learn.naive_bayes import NaiveBayes


@pytest.fixture
def spam_examples() -> list:
    """Two-label corpus of pre-tokenized messages."""
    return [
        ("spam", ["buy", "now"]),
        ("ham", ["meet", "tomorrow"]),
    ]


@pytest.fixture
def weather_examples() -> list:
    """Small three-label corpus with overlapping vocabulary."""
    return [
        ("sunny", ["hot", "dry", "clear"]),
        ("rainy", ["wet", "cloudy", "cold"]),
        ("sunny", ["hot", "clear", "clear"]),
        ("snowy", ["cold", "white", "cold"]),
        ("rainy", ["wet", "wet", "grey"]),
        ("sunny", ["dry", "bright"]),
    ]


@pytest.fixture
def spam_model(spam_examples):
    return NaiveBayes().train(spam_examples)


@pytest.fixture
def weather_model(weather_examples):
    return NaiveBayes().train(weather_examples)


@pytest.fixture
def text_corpus() -> tuple[list[str], list[str]]:
    """Raw documents with labels for pipeline tests."""
    docs = [
        "Buy cheap pills now, limited offer, buy now",
        "Win a free prize, click now to claim your cash",
        "Cheap loans and free cash, act now",
        "Exclusive offer: buy one get one free",
        "Are we still meeting for lunch tomorrow?",
        "Please review the attached project report before the meeting",
        "Lunch tomorrow with the team at noon",
        "Can you send me the report from yesterday's meeting?",
    ]
    labels = ["spam"] * 4 + ["ham"] * 4
    return docs, labels


@pytest.fixture
def tsv_corpus(tmp_path: Path, text_corpus) -> Path:
    """TSV corpus file built from ``text_corpus``."""
    docs, labels = text_corpus
    path = tmp_path / "corpus.tsv"
    lines = ["# label\ttext"] + [f"{label}\t{doc}" for doc, label in zip(docs, labels)]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path
