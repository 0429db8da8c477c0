"""JSON serialization of trained models.

Only the public read accessors of :class:`~ducky_learn.naive_bayes.Model`
are used. Per-label token counts are stored sparsely as ``[index, count]``
pairs since most tokens never occur in most labels.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from .errors import ModelFormatError
from .naive_bayes import ClassStats, Model
from .vocabulary import Vocabulary

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1


def model_to_dict(model: Model) -> dict:
    """Serialize a model to JSON-compatible primitives."""
    classes = []
    for label, stats in model.class_stats.items():
        classes.append({
            "label": label,
            "doc_count": stats.doc_count,
            "total_tokens": stats.total_tokens,
            "token_counts": [[i, c] for i, c in enumerate(stats.token_counts) if c],
        })
    return {
        "version": FORMAT_VERSION,
        "vocabulary": list(model.vocabulary.tokens),
        "classes": classes,
        "total": model.total,
    }


def model_from_dict(data: dict) -> Model:
    """Rebuild a model produced by :func:`model_to_dict`.

    Raises:
        ModelFormatError: If the data is malformed or violates the model's
            count invariants.
    """
    if not isinstance(data, dict):
        raise ModelFormatError("Model data must be a JSON object")
    version = data.get("version")
    if version != FORMAT_VERSION:
        raise ModelFormatError(f"Unsupported model format version: {version!r}")

    try:
        vocabulary = Vocabulary(data["vocabulary"])
        vocab_size = len(vocabulary)
        class_stats = {}
        for entry in data["classes"]:
            label = entry["label"]
            if label in class_stats:
                raise ModelFormatError(f"Duplicate label in model data: {label!r}")
            counts = [0] * vocab_size
            for idx, count in entry["token_counts"]:
                if not 0 <= idx < vocab_size:
                    raise ModelFormatError(
                        f"Token index {idx} for label {label!r} outside vocabulary of size {vocab_size}"
                    )
                counts[idx] = count
            class_stats[label] = ClassStats(
                doc_count=entry["doc_count"],
                token_counts=tuple(counts),
                total_tokens=entry["total_tokens"],
            )
        return Model(vocabulary=vocabulary, class_stats=class_stats, total=data["total"])
    except ModelFormatError:
        raise
    except (KeyError, TypeError, ValueError) as e:
        raise ModelFormatError(f"Invalid model data: {e}") from e


def save_model(model: Model, path: str | Path) -> None:
    """Write ``model`` to a JSON file, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(model_to_dict(model), f, indent=2)
    logger.info(f"Saved model with {len(model.labels)} labels to {path}")


def load_model(path: str | Path) -> Model:
    """Read a model written by :func:`save_model`.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ModelFormatError: If the file is not a valid model.
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ModelFormatError(f"{path} is not valid JSON: {e}") from e
    model = model_from_dict(data)
    logger.debug(f"Loaded model from {path} (labels={len(model.labels)}, vocabulary={model.vocabulary_size})")
    return model
