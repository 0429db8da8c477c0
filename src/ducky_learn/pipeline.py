"""High-level text classification: tokenizer plus Naive Bayes.

Example::

    clf = TextClassifier()
    clf.train(["cheap pills now", "lunch tomorrow?"], ["spam", "ham"])

    result = clf.classify("cheap cheap pills")
    print(result.predicted_class)  # "spam"

    clf.save("model.json")
    loaded = TextClassifier.load("model.json")
"""

from __future__ import annotations

import json
import logging
from collections.abc import Hashable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .config import ClassifierConfig
from .errors import ModelFormatError
from .evaluation import ClassificationMetrics, compute_metrics, cross_validate
from .naive_bayes import Model, NaiveBayes, most_informative_features
from .persistence import model_from_dict, model_to_dict

logger = logging.getLogger(__name__)

PIPELINE_FORMAT_VERSION = 1


@dataclass
class ClassificationResult:
    """Outcome of classifying one document."""

    predicted_class: Hashable
    confidence: float
    probabilities: dict

    def to_dict(self) -> dict:
        ranked = sorted(self.probabilities.items(), key=lambda x: x[1], reverse=True)
        return {
            "predicted_class": self.predicted_class,
            "confidence": round(self.confidence, 4),
            "probabilities": {str(label): round(p, 4) for label, p in ranked},
        }


class TextClassifier:
    """Train on raw documents and classify raw text.

    Args:
        config: Tokenizer and smoothing settings. Defaults to
            :class:`ClassifierConfig` defaults.
    """

    def __init__(self, config: Optional[ClassifierConfig] = None) -> None:
        self.config = config or ClassifierConfig()
        self._tokenizer = self.config.tokenizer()
        self._classifier = NaiveBayes(smoothing=self.config.smoothing)
        self._model: Optional[Model] = None

    @property
    def is_trained(self) -> bool:
        return self._model is not None

    @property
    def model(self) -> Optional[Model]:
        """The trained model, or ``None`` before training."""
        return self._model

    @property
    def classes(self) -> list:
        """Known labels in first-seen order."""
        if self._model is None:
            return []
        return list(self._model.labels)

    def _require_model(self) -> Model:
        if self._model is None:
            raise RuntimeError("Classifier not trained. Call train() first.")
        return self._model

    def _examples(self, documents: Sequence[str], labels: Sequence[Hashable]) -> list:
        if len(documents) != len(labels):
            raise ValueError(
                f"documents ({len(documents)}) and labels ({len(labels)}) must have same length"
            )
        return [(label, self._tokenizer.tokenize(doc)) for doc, label in zip(documents, labels)]

    def train(
        self,
        documents: Sequence[str],
        labels: Sequence[Hashable],
    ) -> ClassificationMetrics:
        """Train a new model and return metrics on the training set.

        The previous model, if any, is replaced only after training succeeds.
        """
        examples = self._examples(documents, labels)
        model = self._classifier.train(examples)
        self._model = model
        logger.info(
            f"Trained on {model.total} documents: {len(model.labels)} labels, "
            f"vocabulary of {model.vocabulary_size}"
        )

        predictions = self._classifier.predict_batch(model, (seq for _, seq in examples))
        return compute_metrics(list(labels), predictions)

    def classify(self, text: str, smoothing: Optional[float] = None) -> ClassificationResult:
        """Classify a single document.

        Raises:
            RuntimeError: If the classifier has not been trained.
        """
        model = self._require_model()
        features = self._tokenizer.tokenize(text)
        proba = self._classifier.predict_proba(model, features, smoothing)
        predicted = self._classifier.predict(model, features, smoothing)
        return ClassificationResult(
            predicted_class=predicted,
            confidence=proba[predicted],
            probabilities=proba,
        )

    def classify_batch(
        self,
        texts: Sequence[str],
        smoothing: Optional[float] = None,
    ) -> list[ClassificationResult]:
        """Classify several documents."""
        self._require_model()
        return [self.classify(text, smoothing) for text in texts]

    def evaluate(
        self,
        documents: Sequence[str],
        labels: Sequence[Hashable],
        k: int = 5,
        seed: int = 42,
    ) -> list[ClassificationMetrics]:
        """Run stratified k-fold cross-validation with this configuration."""
        return cross_validate(
            self._examples(documents, labels),
            k=k,
            smoothing=self.config.smoothing,
            seed=seed,
        )

    def most_informative_features(self, label: Hashable, top_n: int = 20) -> list[tuple]:
        model = self._require_model()
        return most_informative_features(model, label, top_n, self.config.smoothing)

    def to_dict(self) -> dict:
        model = self._require_model()
        tokenizer = self._tokenizer.to_dict()
        return {
            "version": PIPELINE_FORMAT_VERSION,
            "smoothing": self.config.smoothing,
            "tokenizer": tokenizer,
            "model": model_to_dict(model),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TextClassifier":
        if not isinstance(data, dict) or data.get("version") != PIPELINE_FORMAT_VERSION:
            raise ModelFormatError("Unsupported or missing pipeline format version")
        try:
            tokenizer = data["tokenizer"]
            config = ClassifierConfig(
                smoothing=data["smoothing"],
                lowercase=tokenizer["lowercase"],
                use_stopwords=tokenizer["use_stopwords"],
                ngram_range=tuple(tokenizer["ngram_range"]),
                min_token_length=tokenizer["min_token_length"],
            )
            model_data = data["model"]
        except (KeyError, TypeError, ValueError) as e:
            raise ModelFormatError(f"Invalid pipeline data: {e}") from e

        clf = cls(config)
        clf._model = model_from_dict(model_data)
        return clf

    def save(self, path: str | Path) -> None:
        """Save the tokenizer settings and trained model to a JSON file.

        Raises:
            RuntimeError: If the classifier has not been trained.
        """
        data = self.to_dict()
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        logger.info(f"Saved classifier to {path}")

    @classmethod
    def load(cls, path: str | Path) -> "TextClassifier":
        """Load a classifier written by :meth:`save`."""
        path = Path(path)
        with open(path, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ModelFormatError(f"{path} is not valid JSON: {e}") from e
        clf = cls.from_dict(data)
        logger.debug(f"Loaded classifier from {path}")
        return clf
