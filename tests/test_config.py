"""Tests for configuration loading."""

from __future__ import annotations

import pytest

from ducky_learn.config import ClassifierConfig
from ducky_learn.errors import InvalidSmoothingError
from ducky_learn.feature_extraction import Tokenizer


class TestClassifierConfig:
    """Tests for defaults and validation."""

    def test_defaults(self):
        config = ClassifierConfig()
        assert config.smoothing == 1.0
        assert config.tokenizer() == Tokenizer()

    def test_negative_smoothing_rejected(self):
        with pytest.raises(InvalidSmoothingError):
            ClassifierConfig(smoothing=-0.5)

    def test_invalid_tokenizer_settings_rejected(self):
        with pytest.raises(ValueError, match="ngram_range"):
            ClassifierConfig(ngram_range=(3, 1))

    def test_ngram_range_normalized_to_tuple(self):
        assert ClassifierConfig(ngram_range=[1, 2]).ngram_range == (1, 2)


class TestFromEnv:
    """Tests for DUCKY_LEARN_* environment variables."""

    def test_empty_environment_gives_defaults(self):
        assert ClassifierConfig.from_env({}) == ClassifierConfig()

    def test_reads_all_variables(self):
        env = {
            "DUCKY_LEARN_SMOOTHING": "0.25",
            "DUCKY_LEARN_LOWERCASE": "no",
            "DUCKY_LEARN_STOPWORDS": "true",
            "DUCKY_LEARN_NGRAM_MAX": "2",
            "DUCKY_LEARN_MIN_TOKEN_LENGTH": "3",
        }
        config = ClassifierConfig.from_env(env)
        assert config.smoothing == 0.25
        assert config.lowercase is False
        assert config.use_stopwords is True
        assert config.ngram_range == (1, 2)
        assert config.min_token_length == 3

    def test_overrides_win(self):
        config = ClassifierConfig.from_env({"DUCKY_LEARN_SMOOTHING": "0.25"}, smoothing=2.0)
        assert config.smoothing == 2.0

    def test_none_overrides_ignored(self):
        config = ClassifierConfig.from_env({"DUCKY_LEARN_SMOOTHING": "0.25"}, smoothing=None)
        assert config.smoothing == 0.25

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("DUCKY_LEARN_SMOOTHING", "0.5")
        assert ClassifierConfig.from_env().smoothing == 0.5

    @pytest.mark.parametrize("raw", ["abc", "-1", "nan"])
    def test_bad_smoothing(self, raw):
        with pytest.raises(InvalidSmoothingError):
            ClassifierConfig.from_env({"DUCKY_LEARN_SMOOTHING": raw})

    def test_bad_boolean(self):
        with pytest.raises(ValueError, match="boolean"):
            ClassifierConfig.from_env({"DUCKY_LEARN_STOPWORDS": "maybe"})

    def test_bad_integer(self):
        with pytest.raises(ValueError, match="integer"):
            ClassifierConfig.from_env({"DUCKY_LEARN_NGRAM_MAX": "two"})
