"""Common interface for classifier algorithms."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from typing import Any

from .vocabulary import Example, Label, Token


class Classifier(ABC):
    """A batch-trained classifier.

    Implementations are chosen at construction time and share this
    two-step contract: ``train`` returns a new, immutable model and
    ``predict`` reads it without modifying it.
    """

    name: str = "classifier"

    @abstractmethod
    def train(self, examples: Iterable[Example]) -> Any:
        """Learn a model from labeled feature sequences."""

    @abstractmethod
    def predict(self, model: Any, features: Sequence[Token]) -> Label:
        """Return the most probable label for ``features``."""
