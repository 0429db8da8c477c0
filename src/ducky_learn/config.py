"""Runtime configuration for the text classification pipeline.

Values come from keyword arguments or from ``DUCKY_LEARN_*`` environment
variables. The CLI loads a ``.env`` file into the environment before reading
them.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Optional

from .errors import InvalidSmoothingError
from .feature_extraction import Tokenizer
from .naive_bayes import DEFAULT_SMOOTHING, validate_smoothing

ENV_PREFIX = "DUCKY_LEARN_"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw.strip())
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class ClassifierConfig:
    """Settings shared by training and prediction.

    Attributes:
        smoothing: Additive smoothing applied at prediction time.
        lowercase: Fold tokens to lower case.
        use_stopwords: Drop common English stop words.
        ngram_range: ``(min_n, max_n)`` n-gram sizes.
        min_token_length: Minimum word length kept by the tokenizer.
    """

    smoothing: float = DEFAULT_SMOOTHING
    lowercase: bool = True
    use_stopwords: bool = False
    ngram_range: tuple[int, int] = (1, 1)
    min_token_length: int = 1

    def __post_init__(self) -> None:
        object.__setattr__(self, "smoothing", validate_smoothing(self.smoothing))
        object.__setattr__(self, "ngram_range", tuple(self.ngram_range))
        # Surface tokenizer errors at configuration time.
        self.tokenizer()

    def tokenizer(self) -> Tokenizer:
        """Build the :class:`Tokenizer` described by this config."""
        return Tokenizer(
            lowercase=self.lowercase,
            use_stopwords=self.use_stopwords,
            ngram_range=self.ngram_range,
            min_token_length=self.min_token_length,
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "ClassifierConfig":
        """Read settings from ``DUCKY_LEARN_*`` variables.

        Recognised variables: ``SMOOTHING``, ``LOWERCASE``, ``STOPWORDS``,
        ``NGRAM_MAX`` and ``MIN_TOKEN_LENGTH``. Keyword ``overrides`` that are
        not ``None`` win over the environment.

        Raises:
            InvalidSmoothingError: If the smoothing value is not a valid number.
            ValueError: If another variable cannot be parsed.
        """
        env = os.environ if environ is None else environ
        values: dict = {}

        raw = env.get(f"{ENV_PREFIX}SMOOTHING")
        if raw is not None:
            try:
                values["smoothing"] = float(raw)
            except ValueError:
                raise InvalidSmoothingError(raw) from None

        raw = env.get(f"{ENV_PREFIX}LOWERCASE")
        if raw is not None:
            values["lowercase"] = _parse_bool(f"{ENV_PREFIX}LOWERCASE", raw)

        raw = env.get(f"{ENV_PREFIX}STOPWORDS")
        if raw is not None:
            values["use_stopwords"] = _parse_bool(f"{ENV_PREFIX}STOPWORDS", raw)

        raw = env.get(f"{ENV_PREFIX}NGRAM_MAX")
        if raw is not None:
            values["ngram_range"] = (1, _parse_int(f"{ENV_PREFIX}NGRAM_MAX", raw))

        raw = env.get(f"{ENV_PREFIX}MIN_TOKEN_LENGTH")
        if raw is not None:
            values["min_token_length"] = _parse_int(f"{ENV_PREFIX}MIN_TOKEN_LENGTH", raw)

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
