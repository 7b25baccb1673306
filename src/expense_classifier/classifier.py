"""Incremental ensemble classifier for expense descriptions.

The classifier learns one (description, category) pair at a time, as
expenses are entered, and suggests a category for new descriptions before
they are saved. Three scorers (see :mod:`expense_classifier.scorers`) each
produce a normalised vector over the categories; they are merged with
dynamic weights that favour whichever scorers are most decisive:

    confidence_i = 1 / (1 + H(vector_i))
    weight_i     = base_weight_i * confidence_i   (renormalised to sum to 1)

where ``H`` is the Shannon entropy. A cheaper two-scorer blend backs
:meth:`ExpenseClassifier.confidence`.

The classifier holds its tables in memory and performs no I/O. Its state
is the fold of every training call it has received; persist the training
pairs (see :mod:`expense_classifier.storage`) and replay them to restore it.
Instances are not thread-safe: serialise ``train`` and ``predict`` with an
external lock if an instance is shared between threads.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Optional, Union

from .keywords import DEFAULT_KEYWORDS
from .models import DEFAULT_CATEGORY, Category, PredictionResult, UnknownCategoryError
from .preprocessing import tokenize
from .scorers import (
    KeywordScorer,
    ModelState,
    NaiveBayesScorer,
    Scorer,
    Vector,
    default_scorers,
    entropy,
)

logger = logging.getLogger(__name__)

CategoryLike = Union[Category, str]

# Weights of the Naive Bayes and keyword vectors in confidence().
CONFIDENCE_WEIGHTS: tuple[float, float] = (0.7, 0.3)

WEIGHT_EPSILON = 1e-12
TIE_TOLERANCE = 1e-12


# ---------------------------------------------------------------------------
# Ensemble combination
# ---------------------------------------------------------------------------

def ensemble_weights(
    scorers: list[Scorer],
    vectors: Mapping[str, Vector],
) -> dict[str, float]:
    """Entropy-adjusted ensemble weights, renormalised to sum to 1."""
    raw = {
        scorer.name: scorer.base_weight / (1.0 + entropy(vectors[scorer.name]))
        for scorer in scorers
    }
    total = max(sum(raw.values()), WEIGHT_EPSILON)
    return {name: w / total for name, w in raw.items()}


def combine(vectors: Mapping[str, Vector], weights: Mapping[str, float]) -> Vector:
    """Weighted sum of the scorer vectors, per category."""
    return {
        category: sum(weights[name] * vec[category] for name, vec in vectors.items())
        for category in Category
    }


def _argmax(scores: Vector) -> Category:
    best = max(scores.values())
    if best - min(scores.values()) <= TIE_TOLERANCE:
        return DEFAULT_CATEGORY
    for category in Category:
        if scores[category] == best:
            return category
    return DEFAULT_CATEGORY


# ---------------------------------------------------------------------------
# Classifier
# ---------------------------------------------------------------------------

class ExpenseClassifier:
    """Suggest expense categories from free-text descriptions.

    Example::

        classifier = ExpenseClassifier()
        classifier.train("Dinner at Olive Garden", "Food")
        classifier.train("Train ticket", "Travel")

        classifier.predict("dinner with friends")     # Category.FOOD
        classifier.confidence("dinner with friends")  # {Category.FOOD: 41.2, ...}

    Args:
        keywords: Seed keyword patterns per category. Defaults to
            :data:`~expense_classifier.keywords.DEFAULT_KEYWORDS`. Keys may
            be members or their exact string values.
        scorers: Ensemble members. Defaults to Naive Bayes, keyword and
            overlap scorers with base weights 0.5 / 0.3 / 0.2.
        advanced_models: Initial state of the overlap ("advanced") scorer.
        strict: Raise :class:`UnknownCategoryError` for unknown labels
            instead of ignoring them.
    """

    def __init__(
        self,
        keywords: Optional[Mapping[Union[Category, str], Iterable[str]]] = None,
        scorers: Optional[list[Scorer]] = None,
        advanced_models: bool = False,
        strict: bool = False,
    ) -> None:
        self._state = ModelState(advanced_models=advanced_models)
        seeds = DEFAULT_KEYWORDS if keywords is None else keywords
        for label, words in seeds.items():
            category = Category.parse(label)
            if category is None:
                raise UnknownCategoryError(label)
            self._state.keywords[category].update(
                _clean_keyword(k) for k in words if _clean_keyword(k)
            )

        self._scorers = list(scorers) if scorers is not None else default_scorers()
        self._naive_bayes = self._find_scorer(NaiveBayesScorer) or NaiveBayesScorer()
        self._keyword = self._find_scorer(KeywordScorer) or KeywordScorer()
        self._strict = strict
        self._examples: dict[Category, list[str]] = {c: [] for c in Category}

    # -- Properties ---------------------------------------------------------

    @property
    def state(self) -> ModelState:
        """Learned tables (read-only by convention)."""
        return self._state

    @property
    def advanced_models(self) -> bool:
        return self._state.advanced_models

    @property
    def document_count(self) -> int:
        """Number of accepted training calls."""
        return self._state.total_documents

    @property
    def training_examples_count(self) -> int:
        return sum(len(v) for v in self._examples.values())

    @property
    def vocabulary_size(self) -> int:
        return len(self._state.vocabulary())

    @property
    def examples(self) -> dict[Category, list[str]]:
        """Raw training descriptions per category."""
        return {c: list(v) for c, v in self._examples.items()}

    # -- Training -----------------------------------------------------------

    def train(self, description: Optional[str], category: CategoryLike) -> bool:
        """Learn one labelled description.

        Returns:
            True if the example was learned, False if the category is
            unknown (the call is then a no-op).

        Raises:
            UnknownCategoryError: If the category is unknown and the
                classifier was created with ``strict=True``.
        """
        label = self._resolve(category)
        if label is None:
            return False

        tokens = tokenize(description)
        table = self._state.term_frequencies[label]
        for token in tokens:
            table[token] = table.get(token, 0) + 1

        df = self._state.document_frequencies
        for token in dict.fromkeys(tokens):
            df[token] = df.get(token, 0) + 1

        self._state.total_documents += 1
        self._examples[label].append(description or "")
        logger.debug("Trained %s on %d tokens", label.value, len(tokens))
        return True

    def train_many(self, examples: Iterable[tuple[Optional[str], CategoryLike]]) -> int:
        """Train on a sequence of (description, category) pairs in order.

        Returns:
            Number of examples accepted.
        """
        return sum(1 for description, category in examples if self.train(description, category))

    def add_keywords(self, category: CategoryLike, keywords: Iterable[str]) -> int:
        """Extend a category's keyword patterns.

        Returns:
            Number of keywords that were not already present.
        """
        label = self._resolve(category)
        if label is None:
            return 0
        existing = self._state.keywords[label]
        before = len(existing)
        existing.update(_clean_keyword(k) for k in keywords if _clean_keyword(k))
        return len(existing) - before

    def enable_advanced_models(self, enable: bool) -> None:
        """Switch the overlap ("advanced") scorer on or off."""
        self._state.advanced_models = bool(enable)
        logger.debug("Advanced models %s", "enabled" if enable else "disabled")

    # -- Prediction ---------------------------------------------------------

    def predict(self, description: Optional[str]) -> Category:
        """Return the most likely category for ``description``.

        Ties go to the first category in :class:`Category` order. When no
        category stands out at all (e.g. an untrained classifier and no
        keyword signal) the result is :data:`DEFAULT_CATEGORY`.
        """
        return self.classify(description).category

    def classify(self, description: Optional[str]) -> PredictionResult:
        """Run the full ensemble and return scores alongside the prediction."""
        text = description or ""
        tokens = tokenize(text)
        vectors = {
            scorer.name: scorer.score(text, tokens, self._state)
            for scorer in self._scorers
        }
        weights = ensemble_weights(self._scorers, vectors)
        combined = combine(vectors, weights)
        category = _argmax(combined)
        return PredictionResult(
            category=category,
            confidence=combined[category],
            scores=combined,
            component_scores=vectors,
            weights=weights,
        )

    def scores(self, description: Optional[str]) -> Vector:
        """Combined ensemble score per category."""
        return self.classify(description).scores

    def confidence(self, description: Optional[str]) -> dict[Category, float]:
        """Per-category confidence as a percentage with one decimal place.

        Blends the Naive Bayes and keyword vectors (0.7 / 0.3). This is an
        independent read-out, not the ensemble used by :meth:`predict`.
        """
        text = description or ""
        tokens = tokenize(text)
        nb = self._naive_bayes.score(text, tokens, self._state)
        kw = self._keyword.score(text, tokens, self._state)
        nb_weight, kw_weight = CONFIDENCE_WEIGHTS
        return {
            c: min(100.0, max(0.0, round((nb_weight * nb[c] + kw_weight * kw[c]) * 100, 1)))
            for c in Category
        }

    # -- Diagnostics --------------------------------------------------------

    def top_terms(self, category: CategoryLike, n: int = 20) -> list[str]:
        label = Category.parse(category)
        if label is None:
            return []
        return self._state.top_terms(label, n)

    def model_info(self) -> str:
        """Human-readable summary of the model's size and settings."""
        lines = [
            "Expense Classifier",
            f"  Training tokens:   {self._state.total_words()}",
            f"  Keyword patterns:  {self._state.total_keywords()}",
            f"  Advanced models:   {'enabled' if self.advanced_models else 'disabled'}",
            f"  Vocabulary size:   {self.vocabulary_size}",
            f"  Documents seen:    {self._state.total_documents}",
        ]
        return "\n".join(lines)

    def training_examples(self) -> str:
        """Listing of every training description grouped by category."""
        lines = ["Training Examples:", "==================", ""]
        for category in Category:
            examples = self._examples[category]
            lines.append(f"{category.value} ({len(examples)} examples):")
            lines.extend(f"  - {example}" for example in examples)
            lines.append("")
        return "\n".join(lines)

    # -- Internals ----------------------------------------------------------

    def _resolve(self, category: CategoryLike) -> Optional[Category]:
        label = Category.parse(category)
        if label is None:
            if self._strict:
                raise UnknownCategoryError(category)
            logger.debug("Ignoring unknown category %r", category)
        return label

    def _find_scorer(self, kind: type) -> Optional[Scorer]:
        for scorer in self._scorers:
            if isinstance(scorer, kind):
                return scorer
        return None


def _clean_keyword(keyword: str) -> str:
    return keyword.strip().lower()
