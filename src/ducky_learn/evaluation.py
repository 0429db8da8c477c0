"""Accuracy metrics and stratified cross-validation."""

from __future__ import annotations

import logging
import random
from collections import Counter, defaultdict
from collections.abc import Hashable, Sequence
from dataclasses import dataclass, field

from .naive_bayes import DEFAULT_SMOOTHING, NaiveBayes
from .vocabulary import Example

logger = logging.getLogger(__name__)


@dataclass
class ClassificationMetrics:
    """Evaluation metrics for a set of predictions.

    Attributes:
        accuracy: Fraction of correct predictions.
        per_class: ``{label: {"precision", "recall", "f1"}}``.
        macro_precision: Unweighted mean precision across labels.
        macro_recall: Unweighted mean recall across labels.
        macro_f1: Unweighted mean F1 across labels.
        weighted_f1: Support-weighted mean F1.
        confusion_matrix: ``{true_label: {predicted_label: count}}``.
        support: Number of true examples per label.
    """

    accuracy: float = 0.0
    per_class: dict = field(default_factory=dict)
    macro_precision: float = 0.0
    macro_recall: float = 0.0
    macro_f1: float = 0.0
    weighted_f1: float = 0.0
    confusion_matrix: dict = field(default_factory=dict)
    support: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "accuracy": round(self.accuracy, 4),
            "macro_precision": round(self.macro_precision, 4),
            "macro_recall": round(self.macro_recall, 4),
            "macro_f1": round(self.macro_f1, 4),
            "weighted_f1": round(self.weighted_f1, 4),
            "per_class": {
                str(label): {k: round(v, 4) for k, v in scores.items()}
                for label, scores in self.per_class.items()
            },
            "support": {str(label): n for label, n in self.support.items()},
        }

    def summary(self) -> str:
        """Plain-text report of the metrics."""
        lines = [
            f"Accuracy: {self.accuracy:.2%}",
            f"Macro F1: {self.macro_f1:.4f}",
            f"Weighted F1: {self.weighted_f1:.4f}",
            "",
            f"{'Label':<20} {'Precision':>10} {'Recall':>10} {'F1':>10} {'Support':>10}",
            "-" * 62,
        ]
        for label, m in self.per_class.items():
            lines.append(
                f"{str(label):<20} {m['precision']:>10.4f} {m['recall']:>10.4f} "
                f"{m['f1']:>10.4f} {self.support.get(label, 0):>10}"
            )
        return "\n".join(lines)


def _ratio(num: float, den: float) -> float:
    return num / den if den > 0 else 0.0


def compute_metrics(
    y_true: Sequence[Hashable],
    y_pred: Sequence[Hashable],
) -> ClassificationMetrics:
    """Compare predicted labels against ground truth.

    Labels are reported in first-seen order across ``y_true`` then ``y_pred``.

    Raises:
        ValueError: If the two sequences differ in length.
    """
    if len(y_true) != len(y_pred):
        raise ValueError("y_true and y_pred must have the same length")

    labels = list(dict.fromkeys([*y_true, *y_pred]))
    cm = {t: {p: 0 for p in labels} for t in labels}
    for t, p in zip(y_true, y_pred):
        cm[t][p] += 1

    support = Counter(y_true)
    correct = sum(cm[label][label] for label in labels)

    per_class: dict = {}
    for label in labels:
        tp = cm[label][label]
        predicted = sum(cm[other][label] for other in labels)
        actual = sum(cm[label].values())
        precision = _ratio(tp, predicted)
        recall = _ratio(tp, actual)
        per_class[label] = {
            "precision": precision,
            "recall": recall,
            "f1": _ratio(2 * precision * recall, precision + recall),
        }

    n_labels = len(labels)
    return ClassificationMetrics(
        accuracy=_ratio(correct, len(y_true)),
        per_class=per_class,
        macro_precision=_ratio(sum(m["precision"] for m in per_class.values()), n_labels),
        macro_recall=_ratio(sum(m["recall"] for m in per_class.values()), n_labels),
        macro_f1=_ratio(sum(m["f1"] for m in per_class.values()), n_labels),
        weighted_f1=_ratio(
            sum(per_class[label]["f1"] * support.get(label, 0) for label in labels),
            len(y_true),
        ),
        confusion_matrix=cm,
        support=dict(support),
    )


def stratified_k_fold(
    labels: Sequence[Hashable],
    k: int = 5,
    seed: int = 42,
) -> list[tuple[list[int], list[int]]]:
    """Split example indices into ``k`` folds with matching label mix.

    Indices of each label are shuffled with ``seed`` and dealt round-robin
    across folds.

    Returns:
        ``(train_indices, test_indices)`` per fold.
    """
    if k < 2:
        raise ValueError(f"k must be at least 2, got {k}")

    rng = random.Random(seed)
    by_label: dict = defaultdict(list)
    for idx, label in enumerate(labels):
        by_label[label].append(idx)

    fold_of = [0] * len(labels)
    for indices in by_label.values():
        rng.shuffle(indices)
        for i, idx in enumerate(indices):
            fold_of[idx] = i % k

    folds = []
    for fold in range(k):
        test = [i for i, f in enumerate(fold_of) if f == fold]
        train = [i for i, f in enumerate(fold_of) if f != fold]
        folds.append((train, test))
    return folds


def cross_validate(
    examples: Sequence[Example],
    k: int = 5,
    smoothing: float = DEFAULT_SMOOTHING,
    seed: int = 42,
) -> list[ClassificationMetrics]:
    """Train and score a fresh model on each stratified fold.

    Folds with no training or no test examples are skipped.
    """
    examples = list(examples)
    classifier = NaiveBayes(smoothing=smoothing)
    results: list[ClassificationMetrics] = []

    for fold, (train_idx, test_idx) in enumerate(
        stratified_k_fold([label for label, _ in examples], k=k, seed=seed)
    ):
        if not train_idx or not test_idx:
            logger.warning(f"Skipping fold {fold}: empty train or test split")
            continue
        model = classifier.train(examples[i] for i in train_idx)
        y_true = [examples[i][0] for i in test_idx]
        y_pred = classifier.predict_batch(model, (examples[i][1] for i in test_idx))
        metrics = compute_metrics(y_true, y_pred)
        logger.debug(f"Fold {fold}: accuracy={metrics.accuracy:.4f} on {len(test_idx)} examples")
        results.append(metrics)

    return results
