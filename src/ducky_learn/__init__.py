"""ducky-learn -- multinomial Naive Bayes classification for discrete features."""

__version__ = "0.2.0"

from .base import Classifier
from .config import ClassifierConfig
from .corpus import load_corpus
from .errors import (
    CorpusFormatError,
    DuckyLearnError,
    EmptyModelError,
    EmptyTrainingSetError,
    InvalidSmoothingError,
    ModelFormatError,
    UnknownLabelError,
    UnknownTokenInVocabularyError,
)
from .evaluation import (
    ClassificationMetrics,
    compute_metrics,
    cross_validate,
    stratified_k_fold,
)
from .feature_extraction import CountVectorizer, Tokenizer
from .naive_bayes import (
    ClassStats,
    Model,
    NaiveBayes,
    conditional_log_prob,
    log_scores,
    most_informative_features,
    predict,
    predict_batch,
    predict_proba,
    train,
)
from .persistence import load_model, model_from_dict, model_to_dict, save_model
from .pipeline import ClassificationResult, TextClassifier
from .vocabulary import Vocabulary, build_vocabulary

__all__ = [
    # Core
    "Vocabulary",
    "build_vocabulary",
    "ClassStats",
    "Model",
    "train",
    "predict",
    "predict_batch",
    "predict_proba",
    "log_scores",
    "conditional_log_prob",
    "most_informative_features",
    # Classifier variants
    "Classifier",
    "NaiveBayes",
    # Errors
    "DuckyLearnError",
    "EmptyTrainingSetError",
    "EmptyModelError",
    "InvalidSmoothingError",
    "UnknownTokenInVocabularyError",
    "UnknownLabelError",
    "ModelFormatError",
    "CorpusFormatError",
    # Feature extraction
    "Tokenizer",
    "CountVectorizer",
    # Persistence
    "model_to_dict",
    "model_from_dict",
    "save_model",
    "load_model",
    # Evaluation
    "ClassificationMetrics",
    "compute_metrics",
    "cross_validate",
    "stratified_k_fold",
    # Pipeline
    "ClassifierConfig",
    "TextClassifier",
    "ClassificationResult",
    "load_corpus",
]
