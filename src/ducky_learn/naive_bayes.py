"""Multinomial Naive Bayes over discrete feature tokens.

Training only accumulates exact integer counts; additive (Laplace/Lidstone)
smoothing is applied when scoring, so one trained :class:`Model` can be
queried with any smoothing value without retraining.

Scoring for a label ``L`` with statistics ``S`` and vocabulary size ``V``::

    score(L) = ln(S.doc_count / total)
             + sum_t ln((S.token_counts[t] + alpha) / (S.total_tokens + alpha * V))

Tokens absent from the vocabulary are skipped and contribute no evidence.
Ties between labels go to the label seen first during training.
"""

from __future__ import annotations

import math
import numbers
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Optional

from .base import Classifier
from .errors import (
    EmptyModelError,
    EmptyTrainingSetError,
    InvalidSmoothingError,
    UnknownLabelError,
    UnknownTokenInVocabularyError,
)
from .vocabulary import Example, Label, Token, Vocabulary, build_vocabulary

DEFAULT_SMOOTHING = 1.0


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ClassStats:
    """Raw frequency counts for one label.

    Attributes:
        doc_count: Number of training examples carrying the label.
        token_counts: Occurrence count per vocabulary index.
        total_tokens: Sum of ``token_counts``.
    """

    doc_count: int
    token_counts: tuple[int, ...]
    total_tokens: int

    def __post_init__(self) -> None:
        counts = tuple(self.token_counts)
        object.__setattr__(self, "token_counts", counts)
        if self.doc_count < 0 or any(c < 0 for c in counts):
            raise ValueError("Counts must be non-negative")
        if sum(counts) != self.total_tokens:
            raise ValueError(
                f"total_tokens ({self.total_tokens}) does not match "
                f"sum of token_counts ({sum(counts)})"
            )


@dataclass(frozen=True)
class Model:
    """Trained Naive Bayes model.

    Labels keep the order in which they were first seen during training;
    that order drives iteration and tie-breaking. A model is never updated
    in place: training always produces a new instance.
    """

    vocabulary: Vocabulary
    class_stats: Mapping[Label, ClassStats] = field(default_factory=dict)
    total: int = 0

    def __post_init__(self) -> None:
        stats = MappingProxyType(dict(self.class_stats))
        object.__setattr__(self, "class_stats", stats)

        vocab_size = len(self.vocabulary)
        for label, s in stats.items():
            if len(s.token_counts) != vocab_size:
                raise ValueError(
                    f"Label {label!r} has {len(s.token_counts)} token counts, "
                    f"expected {vocab_size}"
                )
        doc_sum = sum(s.doc_count for s in stats.values())
        if doc_sum != self.total:
            raise ValueError(f"Sum of doc_count ({doc_sum}) does not match total ({self.total})")

    @property
    def labels(self) -> tuple[Label, ...]:
        """Known labels in first-seen order."""
        return tuple(self.class_stats)

    @property
    def vocabulary_size(self) -> int:
        return len(self.vocabulary)

    @property
    def is_empty(self) -> bool:
        return self.total == 0 or not self.class_stats

    def stats_for(self, label: Label) -> ClassStats:
        """Return the statistics for ``label``.

        Raises:
            UnknownLabelError: If the model never saw ``label``.
        """
        try:
            return self.class_stats[label]
        except (KeyError, TypeError):
            raise UnknownLabelError(label, self.labels) from None


# ---------------------------------------------------------------------------
# Training
# ---------------------------------------------------------------------------

def train(examples: Iterable[Example], vocabulary: Vocabulary) -> Model:
    """Count label and token frequencies in one pass over ``examples``.

    Args:
        examples: ``(label, feature_sequence)`` pairs. Sequences may be empty.
        vocabulary: Vocabulary built from the same examples.

    Returns:
        A new immutable :class:`Model`.

    Raises:
        EmptyTrainingSetError: If ``examples`` is empty.
        UnknownTokenInVocabularyError: If a token has no index in ``vocabulary``.
    """
    vocab_size = len(vocabulary)
    doc_counts: dict[Label, int] = {}
    token_counts: dict[Label, list[int]] = {}
    token_totals: dict[Label, int] = {}
    total = 0

    for label, features in examples:
        if label not in doc_counts:
            doc_counts[label] = 0
            token_counts[label] = [0] * vocab_size
            token_totals[label] = 0

        total += 1
        doc_counts[label] += 1
        row = token_counts[label]
        for token in features:
            idx = vocabulary.index_of(token)
            if idx is None or not 0 <= idx < vocab_size:
                raise UnknownTokenInVocabularyError(token)
            row[idx] += 1
            token_totals[label] += 1

    if total == 0:
        raise EmptyTrainingSetError()

    stats = {
        label: ClassStats(
            doc_count=doc_counts[label],
            token_counts=tuple(token_counts[label]),
            total_tokens=token_totals[label],
        )
        for label in doc_counts
    }
    return Model(vocabulary=vocabulary, class_stats=stats, total=total)


# ---------------------------------------------------------------------------
# Inference
# ---------------------------------------------------------------------------

def validate_smoothing(smoothing: object) -> float:
    """Return ``smoothing`` as a float or raise :class:`InvalidSmoothingError`."""
    if isinstance(smoothing, bool) or not isinstance(smoothing, numbers.Real):
        raise InvalidSmoothingError(smoothing)
    value = float(smoothing)
    if not math.isfinite(value) or value < 0:
        raise InvalidSmoothingError(smoothing)
    return value


def _require_trained(model: Model) -> None:
    if model.is_empty:
        raise EmptyModelError()


def _log_ratio(numerator: float, denominator: float) -> float:
    # Zero smoothing makes unseen tokens impossible rather than an error.
    if numerator <= 0 or denominator <= 0:
        return -math.inf
    # Logs are taken separately so a tiny quotient cannot underflow to 0.0.
    return math.log(numerator) - math.log(denominator)


def _log_smoothed(count: int, total_tokens: int, alpha: float, vocab_size: int) -> float:
    """``ln((count + alpha) / (total_tokens + alpha * vocab_size))``."""
    denominator = total_tokens + alpha * vocab_size
    if math.isinf(denominator):
        # alpha * V overflowed; divide alpha out of both terms.
        return _log_ratio(count / alpha + 1.0, total_tokens / alpha + vocab_size)
    return _log_ratio(count + alpha, denominator)


def _query_indices(vocabulary: Vocabulary, features: Iterable[Token]) -> list[int]:
    """Map ``features`` to vocabulary indices in query order, dropping OOV tokens."""
    indices = []
    for token in features:
        idx = vocabulary.index_of(token)
        if idx is not None:
            indices.append(idx)
    return indices


def _score(
    stats: ClassStats,
    total: int,
    query: list[int],
    smoothing: float,
    vocab_size: int,
) -> float:
    score = _log_ratio(stats.doc_count, total)
    cache: dict[int, float] = {}
    # One term per occurrence, in query order.
    for idx in query:
        if score == -math.inf:
            break
        term = cache.get(idx)
        if term is None:
            term = cache[idx] = _log_smoothed(
                stats.token_counts[idx], stats.total_tokens, smoothing, vocab_size
            )
        score += term
    return score


def log_scores(
    model: Model,
    features: Iterable[Token],
    smoothing: float = DEFAULT_SMOOTHING,
) -> dict[Label, float]:
    """Compute the unnormalized log-posterior score of every label.

    Returns:
        Dict of ``{label: score}`` in first-seen label order. A score is
        ``-inf`` when ``smoothing`` is 0 and the label never saw one of the
        query tokens.

    Raises:
        EmptyModelError: If the model holds no training data.
        InvalidSmoothingError: If ``smoothing`` is negative or not finite.
    """
    alpha = validate_smoothing(smoothing)
    _require_trained(model)

    query = _query_indices(model.vocabulary, features)
    vocab_size = model.vocabulary_size
    return {
        label: _score(stats, model.total, query, alpha, vocab_size)
        for label, stats in model.class_stats.items()
    }


def _argmax(scores: Mapping[Label, float]) -> Label:
    best_label: Optional[Label] = None
    best_score = -math.inf
    for label, score in scores.items():
        # Strict comparison keeps the earliest label on ties.
        if best_label is None or score > best_score:
            best_label, best_score = label, score
    return best_label


def predict(
    model: Model,
    features: Iterable[Token],
    smoothing: float = DEFAULT_SMOOTHING,
) -> Label:
    """Return the label with the highest log-posterior score.

    Ties, including the case where every score is ``-inf``, resolve to the
    label seen first during training.
    """
    return _argmax(log_scores(model, features, smoothing))


def predict_batch(
    model: Model,
    rows: Iterable[Iterable[Token]],
    smoothing: float = DEFAULT_SMOOTHING,
) -> list[Label]:
    """Predict a label for each feature sequence in ``rows``."""
    alpha = validate_smoothing(smoothing)
    _require_trained(model)
    return [predict(model, features, alpha) for features in rows]


def predict_proba(
    model: Model,
    features: Iterable[Token],
    smoothing: float = DEFAULT_SMOOTHING,
) -> dict[Label, float]:
    """Posterior probability of each label, normalized with log-sum-exp.

    If every label scores ``-inf`` the distribution is uniform.
    """
    scores = log_scores(model, features, smoothing)
    max_score = max(scores.values())
    if max_score == -math.inf:
        share = 1.0 / len(scores)
        return {label: share for label in scores}

    exp_scores = {label: math.exp(s - max_score) for label, s in scores.items()}
    norm = sum(exp_scores.values())
    return {label: value / norm for label, value in exp_scores.items()}


def conditional_log_prob(
    model: Model,
    label: Label,
    token: Token,
    smoothing: float = DEFAULT_SMOOTHING,
) -> float:
    """Smoothed ``ln P(token | label)``.

    Raises:
        UnknownLabelError: If ``label`` is not in the model.
        UnknownTokenInVocabularyError: If ``token`` is out of vocabulary.
    """
    alpha = validate_smoothing(smoothing)
    stats = model.stats_for(label)
    idx = model.vocabulary.index_of(token)
    if idx is None:
        raise UnknownTokenInVocabularyError(token)
    return _log_smoothed(
        stats.token_counts[idx], stats.total_tokens, alpha, model.vocabulary_size
    )


def most_informative_features(
    model: Model,
    label: Label,
    top_n: int = 20,
    smoothing: float = DEFAULT_SMOOTHING,
) -> list[tuple[Token, float]]:
    """Rank tokens by how much more likely they are under ``label``.

    The score is ``ln P(t | label)`` minus the mean of ``ln P(t | other)``
    across the remaining labels. With a single label the raw log
    probability is used. Requires positive smoothing so every term is finite.

    Returns:
        Up to ``top_n`` ``(token, score)`` pairs, best first. Equal scores
        keep vocabulary order.
    """
    alpha = validate_smoothing(smoothing)
    if alpha == 0:
        raise InvalidSmoothingError(smoothing, "positive")
    model.stats_for(label)

    tokens = model.vocabulary.tokens
    others = [other for other in model.labels if other != label]
    ranked: list[tuple[Token, float]] = []
    for token in tokens:
        target = conditional_log_prob(model, label, token, alpha)
        if others:
            mean_other = sum(
                conditional_log_prob(model, other, token, alpha) for other in others
            ) / len(others)
            target -= mean_other
        ranked.append((token, round(target, 4)))

    ranked.sort(key=lambda pair: pair[1], reverse=True)
    return ranked[:top_n]


# ---------------------------------------------------------------------------
# Classifier variant
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class NaiveBayes(Classifier):
    """Multinomial Naive Bayes behind the :class:`Classifier` interface.

    Args:
        smoothing: Default additive smoothing for predictions. Individual
            calls may override it.

    Example::

        nb = NaiveBayes(smoothing=1.0)
        model = nb.train([("spam", ["buy", "now"]), ("ham", ["meet", "tomorrow"])])
        nb.predict(model, ["buy", "buy"])  # "spam"
    """

    smoothing: float = DEFAULT_SMOOTHING
    name = "naive_bayes"

    def __post_init__(self) -> None:
        object.__setattr__(self, "smoothing", validate_smoothing(self.smoothing))

    def _alpha(self, smoothing: Optional[float]) -> float:
        return self.smoothing if smoothing is None else smoothing

    def train(self, examples: Iterable[Example]) -> Model:
        """Build a vocabulary from ``examples`` and train a new model on them."""
        examples = list(examples)
        return train(examples, build_vocabulary(examples))

    def predict(
        self,
        model: Model,
        features: Sequence[Token],
        smoothing: Optional[float] = None,
    ) -> Label:
        return predict(model, features, self._alpha(smoothing))

    def predict_batch(
        self,
        model: Model,
        rows: Iterable[Sequence[Token]],
        smoothing: Optional[float] = None,
    ) -> list[Label]:
        return predict_batch(model, rows, self._alpha(smoothing))

    def predict_proba(
        self,
        model: Model,
        features: Sequence[Token],
        smoothing: Optional[float] = None,
    ) -> dict[Label, float]:
        return predict_proba(model, features, self._alpha(smoothing))

    def log_scores(
        self,
        model: Model,
        features: Sequence[Token],
        smoothing: Optional[float] = None,
    ) -> dict[Label, float]:
        return log_scores(model, features, self._alpha(smoothing))
