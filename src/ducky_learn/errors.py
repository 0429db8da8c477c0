"""Exception types raised by ducky-learn.

Every error derives from :class:`DuckyLearnError` and from the builtin that
describes the same condition, so ``except ValueError`` style handlers keep
working.
"""

from __future__ import annotations


class DuckyLearnError(Exception):
    """Base class for all library errors."""


class EmptyTrainingSetError(DuckyLearnError, ValueError):
    """Training was attempted with no examples."""

    def __init__(self, message: str = "Cannot train on an empty example set.") -> None:
        super().__init__(message)


class EmptyModelError(DuckyLearnError, RuntimeError):
    """Prediction was attempted against a model with no training data."""

    def __init__(self, message: str = "Model has not been trained on any examples.") -> None:
        super().__init__(message)


class InvalidSmoothingError(DuckyLearnError, ValueError):
    """The additive smoothing parameter is negative or not a number."""

    def __init__(self, smoothing: object, requirement: str = "a non-negative number") -> None:
        self.smoothing = smoothing
        super().__init__(f"Smoothing must be {requirement}, got {smoothing!r}")


class UnknownTokenInVocabularyError(DuckyLearnError, KeyError):
    """A training token has no index in the supplied vocabulary."""

    def __init__(self, token: object) -> None:
        self.token = token
        super().__init__(token)

    def __str__(self) -> str:
        return (
            f"Token {self.token!r} is not in the vocabulary. "
            "Build the vocabulary from the same examples used for training."
        )


class UnknownLabelError(DuckyLearnError, KeyError):
    """A label was requested that the model never saw."""

    def __init__(self, label: object, known: tuple = ()) -> None:
        self.label = label
        self.known = known
        super().__init__(label)

    def __str__(self) -> str:
        return f"Unknown label: {self.label!r}. Known: {list(self.known)}"


class ModelFormatError(DuckyLearnError, ValueError):
    """Serialized model data is malformed or inconsistent."""


class CorpusFormatError(DuckyLearnError, ValueError):
    """A corpus file line could not be parsed."""

    def __init__(self, path: object, line_no: int, reason: str) -> None:
        self.path = path
        self.line_no = line_no
        super().__init__(f"{path}:{line_no}: {reason}")
