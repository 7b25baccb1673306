"""Expense Classifier -- ensemble category suggestions for expense descriptions."""

__version__ = "0.1.0"

from .classifier import ExpenseClassifier, combine, ensemble_weights
from .config import Settings, setup_logging
from .distance import levenshtein
from .evaluation import (
    CategoryScore,
    ClassificationMetrics,
    compute_metrics,
    cross_validate,
    mean_accuracy,
    pool,
    stratified_k_fold,
)
from .keywords import DEFAULT_KEYWORDS
from .models import (
    DEFAULT_CATEGORY,
    Category,
    PredictionResult,
    TrainingExample,
    UnknownCategoryError,
)
from .preprocessing import STOP_WORDS, clean_text, keyword_tokens, stem, tokenize
from .scorers import (
    KeywordScorer,
    ModelState,
    NaiveBayesScorer,
    OverlapScorer,
    Scorer,
    entropy,
    normalize,
    softmax,
)
from .storage import SAMPLE_TRAINING_DATA, StorageError, TrainingStore

__all__ = [
    # Core
    "ExpenseClassifier",
    "Category",
    "DEFAULT_CATEGORY",
    "PredictionResult",
    "TrainingExample",
    "UnknownCategoryError",
    "ensemble_weights",
    "combine",
    # Scorers
    "Scorer",
    "ModelState",
    "NaiveBayesScorer",
    "KeywordScorer",
    "OverlapScorer",
    "normalize",
    "softmax",
    "entropy",
    # Text
    "clean_text",
    "stem",
    "tokenize",
    "keyword_tokens",
    "STOP_WORDS",
    "levenshtein",
    "DEFAULT_KEYWORDS",
    # Persistence
    "TrainingStore",
    "StorageError",
    "SAMPLE_TRAINING_DATA",
    # Evaluation
    "CategoryScore",
    "ClassificationMetrics",
    "compute_metrics",
    "cross_validate",
    "mean_accuracy",
    "pool",
    "stratified_k_fold",
    # Configuration
    "Settings",
    "setup_logging",
]
