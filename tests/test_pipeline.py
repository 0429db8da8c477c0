"""Tests for the high-level TextClassifier API."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from ducky_learn.config import ClassifierConfig
from ducky_learn.errors import EmptyTrainingSetError, ModelFormatError
from ducky_learn.pipeline import ClassificationResult, TextClassifier


@pytest.fixture
def trained(text_corpus) -> TextClassifier:
    docs, labels = text_corpus
    clf = TextClassifier()
    clf.train(docs, labels)
    return clf


class TestTextClassifier:
    """Tests for training and classifying raw text."""

    def test_train_returns_training_metrics(self, text_corpus):
        docs, labels = text_corpus
        clf = TextClassifier()
        metrics = clf.train(docs, labels)
        assert clf.is_trained
        assert metrics.accuracy == 1.0

    def test_classes_in_first_seen_order(self, trained):
        assert trained.classes == ["spam", "ham"]

    def test_untrained_state(self):
        clf = TextClassifier()
        assert not clf.is_trained
        assert clf.classes == []
        assert clf.model is None

    def test_classify_spam(self, trained):
        result = trained.classify("Buy cheap pills now!")
        assert isinstance(result, ClassificationResult)
        assert result.predicted_class == "spam"
        assert 0.5 < result.confidence <= 1.0

    def test_classify_ham(self, trained):
        assert trained.classify("lunch meeting tomorrow").predicted_class == "ham"

    def test_classify_unknown_words_uses_priors(self, trained):
        result = trained.classify("zyzzyva quux")
        assert result.predicted_class == "spam"
        assert result.confidence == pytest.approx(0.5)

    def test_probabilities_sum_to_one(self, trained):
        result = trained.classify("free lunch")
        assert sum(result.probabilities.values()) == pytest.approx(1.0)

    def test_smoothing_override(self, trained):
        result = trained.classify("cash report", smoothing=0.0)
        # "cash" never appears in ham, "report" never in spam
        assert result.predicted_class == "spam"
        assert result.probabilities == {"spam": pytest.approx(0.5), "ham": pytest.approx(0.5)}

    def test_classify_batch(self, trained):
        results = trained.classify_batch(["free cash now", "project report"])
        assert [r.predicted_class for r in results] == ["spam", "ham"]

    def test_classify_without_training_raises(self):
        with pytest.raises(RuntimeError, match="not trained"):
            TextClassifier().classify("text")

    def test_classify_batch_without_training_raises(self):
        with pytest.raises(RuntimeError, match="not trained"):
            TextClassifier().classify_batch(["text"])

    def test_mismatched_lengths(self):
        with pytest.raises(ValueError, match="same length"):
            TextClassifier().train(["a", "b"], ["x"])

    def test_empty_training_set(self):
        with pytest.raises(EmptyTrainingSetError):
            TextClassifier().train([], [])

    def test_failed_retrain_keeps_previous_model(self, trained):
        model = trained.model
        with pytest.raises(EmptyTrainingSetError):
            trained.train([], [])
        assert trained.model is model

    def test_config_is_applied(self, text_corpus):
        docs, labels = text_corpus
        clf = TextClassifier(ClassifierConfig(ngram_range=(1, 2)))
        clf.train(docs, labels)
        assert "buy_now" in clf.model.vocabulary

    def test_evaluate(self, text_corpus):
        docs, labels = text_corpus
        results = TextClassifier().evaluate(docs, labels, k=2)
        assert len(results) == 2

    def test_most_informative_features(self, trained):
        ranked = trained.most_informative_features("spam", top_n=5)
        assert len(ranked) == 5
        assert all(isinstance(token, str) for token, _ in ranked)

    def test_most_informative_without_training_raises(self):
        with pytest.raises(RuntimeError, match="not trained"):
            TextClassifier().most_informative_features("spam")

    def test_result_to_dict(self, trained):
        d = trained.classify("buy now").to_dict()
        assert d["predicted_class"] == "spam"
        assert list(d["probabilities"])[0] == "spam"


class TestTextClassifierPersistence:
    """Tests for saving and loading pipelines."""

    def test_save_and_load(self, tmp_path: Path, trained):
        path = tmp_path / "model.json"
        trained.save(path)
        loaded = TextClassifier.load(path)
        assert loaded.classes == trained.classes
        assert loaded.model == trained.model
        for text in ("buy now", "meeting report", "nothing known"):
            assert loaded.classify(text) == trained.classify(text)

    def test_tokenizer_settings_persist(self, tmp_path: Path, text_corpus):
        docs, labels = text_corpus
        clf = TextClassifier(ClassifierConfig(smoothing=0.5, use_stopwords=True, ngram_range=(1, 2)))
        clf.train(docs, labels)
        path = tmp_path / "model.json"
        clf.save(path)
        loaded = TextClassifier.load(path)
        assert loaded.config == clf.config

    def test_save_untrained_raises(self, tmp_path: Path):
        with pytest.raises(RuntimeError, match="not trained"):
            TextClassifier().save(tmp_path / "model.json")

    def test_load_wrong_version(self, tmp_path: Path, trained):
        data = trained.to_dict()
        data["version"] = 42
        path = tmp_path / "model.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        with pytest.raises(ModelFormatError):
            TextClassifier.load(path)

    def test_load_invalid_json(self, tmp_path: Path):
        path = tmp_path / "model.json"
        path.write_text("nope", encoding="utf-8")
        with pytest.raises(ModelFormatError, match="not valid JSON"):
            TextClassifier.load(path)

    def test_load_missing_tokenizer(self, tmp_path: Path, trained):
        data = trained.to_dict()
        del data["tokenizer"]
        path = tmp_path / "model.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        with pytest.raises(ModelFormatError, match="Invalid pipeline data"):
            TextClassifier.load(path)
