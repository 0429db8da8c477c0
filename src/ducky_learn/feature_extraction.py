"""Turning raw text into feature sequences and count rows.

The classifier itself only sees sequences of opaque tokens. This module is
the usual way to produce them from free text:

- :class:`Tokenizer` splits text into word tokens (optionally filtered and
  expanded into n-grams).
- :class:`CountVectorizer` learns a first-seen vocabulary over documents and
  maps each document to a dense row of token counts.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Optional

from .vocabulary import Vocabulary

_WORD_RE = re.compile(r"\b\w[\w'-]*\w\b|\b\w\b", re.UNICODE)

STOP_WORDS: frozenset[str] = frozenset({
    "a", "an", "the", "and", "or", "but", "in", "on", "at", "to", "for",
    "of", "with", "by", "from", "as", "is", "was", "are", "were", "be",
    "been", "being", "have", "has", "had", "do", "does", "did", "will",
    "would", "could", "should", "may", "might", "shall", "can", "must",
    "not", "no", "nor", "so", "if", "then", "than", "that", "this",
    "these", "those", "it", "its", "he", "she", "they", "them", "their",
    "his", "her", "our", "your", "we", "you", "i", "me", "my",
})


def ngrams(tokens: list[str], n: int) -> list[str]:
    """Join every run of ``n`` consecutive tokens with ``_``."""
    if n <= 1:
        return list(tokens)
    return ["_".join(tokens[i : i + n]) for i in range(len(tokens) - n + 1)]


@dataclass
class Tokenizer:
    """Regex word tokenizer producing feature sequences.

    Args:
        lowercase: Fold tokens to lower case.
        use_stopwords: Drop common English function words.
        ngram_range: ``(min_n, max_n)`` n-gram sizes to emit.
        min_token_length: Shorter word tokens are discarded.
    """

    lowercase: bool = True
    use_stopwords: bool = False
    ngram_range: tuple[int, int] = (1, 1)
    min_token_length: int = 1

    def __post_init__(self) -> None:
        self.ngram_range = tuple(self.ngram_range)  # type: ignore[assignment]
        min_n, max_n = self.ngram_range
        if min_n < 1 or max_n < min_n:
            raise ValueError(f"Invalid ngram_range: {self.ngram_range}")
        if self.min_token_length < 1:
            raise ValueError("min_token_length must be at least 1")

    def words(self, text: str) -> list[str]:
        """Split ``text`` into filtered word tokens (no n-grams)."""
        words = [m.group() for m in _WORD_RE.finditer(text)]
        if self.lowercase:
            words = [w.lower() for w in words]
        words = [w for w in words if len(w) >= self.min_token_length]
        if self.use_stopwords:
            words = [w for w in words if w.lower() not in STOP_WORDS]
        return words

    def tokenize(self, text: str) -> list[str]:
        """Return the feature sequence for ``text``, unigrams first."""
        words = self.words(text)
        min_n, max_n = self.ngram_range
        terms: list[str] = []
        for n in range(min_n, max_n + 1):
            terms.extend(ngrams(words, n))
        return terms

    __call__ = tokenize

    def to_dict(self) -> dict:
        return {
            "lowercase": self.lowercase,
            "use_stopwords": self.use_stopwords,
            "ngram_range": list(self.ngram_range),
            "min_token_length": self.min_token_length,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Tokenizer":
        return cls(
            lowercase=data.get("lowercase", True),
            use_stopwords=data.get("use_stopwords", False),
            ngram_range=tuple(data.get("ngram_range", (1, 1))),
            min_token_length=data.get("min_token_length", 1),
        )


def _whitespace_split(text: str) -> list[str]:
    # Runs of whitespace collapse, so an empty document yields no features
    # rather than a single empty-string feature.
    return text.split()


@dataclass
class CountVectorizer:
    """Convert documents into dense rows of token counts.

    The vocabulary is learned in first-seen order, so column ``j`` of every
    row counts ``feature_names[j]``.

    Example::

        cv = CountVectorizer()
        cv.fit_transform(["hello this is a test", "this is another test"])
        # [[1, 1, 1, 1, 1, 0], [0, 1, 1, 0, 1, 1]]
        cv.feature_names
        # ['hello', 'this', 'is', 'a', 'test', 'another']

    Args:
        tokenizer: Tokenizer used to split documents. Defaults to plain
            whitespace splitting with case preserved.
    """

    tokenizer: Optional[Tokenizer] = None
    vocabulary_: Optional[Vocabulary] = field(default=None, repr=False)

    def _split(self, document: str) -> list[str]:
        if self.tokenizer is None:
            return _whitespace_split(document)
        return self.tokenizer.tokenize(document)

    @property
    def feature_names(self) -> list[str]:
        """Learned tokens ordered by column."""
        if self.vocabulary_ is None:
            return []
        return list(self.vocabulary_.tokens)

    def fit(self, documents: Iterable[str]) -> "CountVectorizer":
        """Learn the vocabulary of ``documents``.

        Returns:
            Self (for method chaining).
        """
        self.vocabulary_ = Vocabulary.build((None, self._split(doc)) for doc in documents)
        return self

    def transform(self, documents: Iterable[str]) -> list[list[int]]:
        """Count learned tokens in each document; unknown tokens are ignored.

        Raises:
            RuntimeError: If the vectorizer has not been fitted.
        """
        if self.vocabulary_ is None:
            raise RuntimeError("Vectorizer has not been fitted. Call fit() first.")

        vocab = self.vocabulary_
        rows: list[list[int]] = []
        for doc in documents:
            row = [0] * len(vocab)
            for token in self._split(doc):
                idx = vocab.index_of(token)
                if idx is not None:
                    row[idx] += 1
            rows.append(row)
        return rows

    def fit_transform(self, documents: Iterable[str]) -> list[list[int]]:
        """Fit and transform in one step."""
        documents = list(documents)
        self.fit(documents)
        return self.transform(documents)

    def inverse_transform(self, rows: Iterable[Iterable[int]]) -> list[list[str]]:
        """Expand count rows back into feature sequences in column order."""
        if self.vocabulary_ is None:
            raise RuntimeError("Vectorizer has not been fitted. Call fit() first.")
        tokens = self.vocabulary_.tokens
        sequences = []
        for row in rows:
            seq: list[str] = []
            for token, count in zip(tokens, row):
                seq.extend([token] * int(count))
            sequences.append(seq)
        return sequences
