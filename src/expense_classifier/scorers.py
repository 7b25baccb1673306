"""Scoring strategies combined by the expense classifier ensemble.

Every scorer maps a description to a normalised vector over
:class:`~expense_classifier.models.Category` (entries sum to 1):

- :class:`NaiveBayesScorer` -- multinomial Naive Bayes whose term
  likelihoods are TF-IDF weighted, followed by a softmax
- :class:`KeywordScorer` -- exact / fuzzy / prefix matches against the
  per-category keyword sets
- :class:`OverlapScorer` -- overlap between the description and each
  category's most frequent training terms (the "advanced" model)

Scorers are stateless; they read the tables held in :class:`ModelState`,
which is owned by a single classifier instance.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from .distance import levenshtein
from .models import Category
from .preprocessing import keyword_tokens

Vector = dict[Category, float]

# Floor applied to probabilities before taking logs.
PROB_FLOOR = 1e-12


# ---------------------------------------------------------------------------
# Vector helpers
# ---------------------------------------------------------------------------

def uniform() -> Vector:
    """Equal mass on every category."""
    share = 1.0 / len(Category)
    return {c: share for c in Category}


def normalize(vec: Vector) -> Vector:
    """Scale ``vec`` to sum to 1, falling back to uniform if it has no mass."""
    total = sum(vec.values())
    if total <= 0:
        return uniform()
    return {c: vec.get(c, 0.0) / total for c in Category}


def softmax(vec: Vector) -> Vector:
    """Numerically stable softmax (the max is subtracted before ``exp``)."""
    max_score = max(vec.values())
    exp_scores = {c: math.exp(vec[c] - max_score) for c in Category}
    total = sum(exp_scores.values())
    return {c: s / total for c, s in exp_scores.items()}


def entropy(vec: Vector) -> float:
    """Shannon entropy (natural log) over the non-zero entries of ``vec``."""
    return -sum(p * math.log(p) for p in vec.values() if p > 0)


# ---------------------------------------------------------------------------
# Model state
# ---------------------------------------------------------------------------

@dataclass
class ModelState:
    """Frequency tables learned from training calls.

    Every per-category mapping has exactly one entry per category from
    construction onwards.
    """

    term_frequencies: dict[Category, dict[str, int]] = field(
        default_factory=lambda: {c: {} for c in Category}
    )
    document_frequencies: dict[str, int] = field(default_factory=dict)
    keywords: dict[Category, set[str]] = field(
        default_factory=lambda: {c: set() for c in Category}
    )
    total_documents: int = 0
    advanced_models: bool = False

    def vocabulary(self) -> set[str]:
        """Distinct tokens across all categories' term-frequency tables."""
        vocab: set[str] = set()
        for table in self.term_frequencies.values():
            vocab.update(table)
        return vocab

    def category_words(self, category: Category) -> int:
        return sum(self.term_frequencies[category].values())

    def total_words(self) -> int:
        return sum(self.category_words(c) for c in Category)

    def total_keywords(self) -> int:
        return sum(len(k) for k in self.keywords.values())

    def top_terms(self, category: Category, n: int) -> list[str]:
        """Most frequent tokens for ``category``; ties keep insertion order."""
        table = self.term_frequencies[category]
        ranked = sorted(table.items(), key=lambda x: x[1], reverse=True)
        return [term for term, _ in ranked[:n]]


# ---------------------------------------------------------------------------
# Scorers
# ---------------------------------------------------------------------------

class Scorer:
    """Base class for ensemble members.

    Attributes:
        name: Key used in diagnostics and :class:`PredictionResult`.
        base_weight: Ensemble weight before entropy adjustment.
    """

    name: str = "scorer"
    base_weight: float = 0.0

    def score(self, text: str, tokens: list[str], state: ModelState) -> Vector:
        """Return a normalised score vector for one description."""
        raise NotImplementedError


class NaiveBayesScorer(Scorer):
    """Naive Bayes with TF-IDF weighted term likelihoods.

    For each category ``c`` with term table ``tf_c``::

        prior      = (W_c + 1) / (max(1, W) + V)
        idf(w)     = ln((1 + max(1, N)) / (1 + df(w))) + 1
        tfidf_c(w) = tf_c(w) * idf(w)
        P(t | c)   = (tfidf_c(t) + alpha) / (sum(tfidf_c) + alpha * (V + 1))

    where ``W`` is the total token count, ``W_c`` the category's token
    count, ``V`` the vocabulary size and ``N`` the number of training
    documents. The log scores are passed through a softmax.

    Args:
        alpha: Additive smoothing constant.
        base_weight: Ensemble weight before entropy adjustment.
    """

    name = "naive_bayes"

    def __init__(self, alpha: float = 1.0, base_weight: float = 0.5) -> None:
        self.alpha = alpha
        self.base_weight = base_weight

    def score(self, text: str, tokens: list[str], state: ModelState) -> Vector:
        return softmax(self.raw_scores(tokens, state))

    def raw_scores(self, tokens: list[str], state: ModelState) -> Vector:
        """Unnormalised log scores per category."""
        vocab_size = len(state.vocabulary())
        total_words = state.total_words()
        n_docs = max(1, state.total_documents)

        scores: Vector = {}
        for category in Category:
            table = state.term_frequencies[category]
            words_in_category = sum(table.values())

            prior = (words_in_category + 1) / (max(1, total_words) + vocab_size)
            score = math.log(prior)

            tfidf = {
                word: count * self._idf(word, n_docs, state.document_frequencies)
                for word, count in table.items()
            }
            denominator = sum(tfidf.values())
            if denominator == 0:
                denominator = words_in_category + vocab_size

            for token in tokens:
                prob = (tfidf.get(token, 0.0) + self.alpha) / (
                    denominator + self.alpha * (vocab_size + 1)
                )
                score += math.log(max(prob, PROB_FLOOR))

            scores[category] = score
        return scores

    @staticmethod
    def _idf(word: str, n_docs: int, document_frequencies: dict[str, int]) -> float:
        df = document_frequencies.get(word, 0)
        return math.log((1 + n_docs) / (1 + df)) + 1


class KeywordScorer(Scorer):
    """Keyword matcher tolerant to small typos.

    Each word of the cleaned description contributes at most once per
    category: ``exact_score`` for an exact keyword hit, otherwise the first
    keyword within the allowed edit distance gives ``fuzzy_score`` and the
    first keyword sharing a prefix relation gives ``prefix_score``. The
    allowed distance is 1 for keywords of up to four characters, else 2.
    A category's raw score is ``min(1, matches / len(keywords))``.
    """

    name = "keyword"

    def __init__(
        self,
        base_weight: float = 0.3,
        exact_score: float = 1.0,
        fuzzy_score: float = 0.75,
        prefix_score: float = 0.6,
    ) -> None:
        self.base_weight = base_weight
        self.exact_score = exact_score
        self.fuzzy_score = fuzzy_score
        self.prefix_score = prefix_score

    def score(self, text: str, tokens: list[str], state: ModelState) -> Vector:
        return normalize(self.raw_scores(text, state))

    def raw_scores(self, text: str, state: ModelState) -> Vector:
        """Per-category match ratio in ``[0, 1]`` before normalisation."""
        words = keyword_tokens(text)
        scores: Vector = {}
        for category in Category:
            keywords = state.keywords[category]
            if not keywords:
                scores[category] = 0.0
                continue
            ordered = sorted(keywords)
            total = sum(self._match(word, keywords, ordered) for word in words)
            scores[category] = min(1.0, total / len(keywords))
        return scores

    def _match(self, word: str, keywords: set[str], ordered: list[str]) -> float:
        if word in keywords:
            return self.exact_score
        for keyword in ordered:
            allowed = 1 if len(keyword) <= 4 else 2
            if levenshtein(word, keyword) <= allowed:
                return self.fuzzy_score
            if keyword.startswith(word) or word.startswith(keyword):
                return self.prefix_score
        return 0.0


class OverlapScorer(Scorer):
    """Overlap between a description and each category's top training terms.

    Contributes nothing (a uniform vector after normalisation) unless
    advanced models are enabled on the model state.

    Args:
        top_n: Number of most frequent terms kept per category.
        base_weight: Ensemble weight before entropy adjustment.
    """

    name = "advanced"

    def __init__(self, top_n: int = 20, base_weight: float = 0.2) -> None:
        self.top_n = top_n
        self.base_weight = base_weight

    def score(self, text: str, tokens: list[str], state: ModelState) -> Vector:
        if not state.advanced_models:
            return normalize({c: 0.0 for c in Category})
        distinct = set(tokens)
        scores: Vector = {}
        for category in Category:
            top = set(state.top_terms(category, self.top_n))
            scores[category] = len(top & distinct) / max(1, len(top))
        return normalize(scores)


def default_scorers() -> list[Scorer]:
    """The standard three-member ensemble with its base weights."""
    return [NaiveBayesScorer(), KeywordScorer(), OverlapScorer()]
