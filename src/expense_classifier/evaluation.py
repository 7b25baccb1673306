"""Evaluation helpers for the expense classifier.

Everything here is keyed by :class:`~expense_classifier.models.Category`
over the full fixed set, so a category that never occurs in a fold still
gets a (zero) row. Metrics are derived from a confusion matrix, which lets
per-fold results be pooled by adding their matrices.

Cross-validation trains a fresh
:class:`~expense_classifier.classifier.ExpenseClassifier` per fold,
incrementally, the same way the application replays its training log.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Union

from .classifier import ExpenseClassifier
from .models import Category, UnknownCategoryError

Confusion = dict[Category, dict[Category, int]]

_ROW = "{:<15}{:>11}{:>9}{:>9}{:>9}"


def _resolve(label: Union[Category, str]) -> Category:
    category = Category.parse(label)
    if category is None:
        raise UnknownCategoryError(label)
    return category


def empty_confusion() -> Confusion:
    return {actual: {guess: 0 for guess in Category} for actual in Category}


@dataclass
class CategoryScore:
    """Precision / recall / F1 of one category."""

    precision: float = 0.0
    recall: float = 0.0
    f1: float = 0.0
    support: int = 0
    predicted: int = 0

    @classmethod
    def from_counts(cls, hits: int, predicted: int, support: int) -> "CategoryScore":
        precision = hits / predicted if predicted else 0.0
        recall = hits / support if support else 0.0
        total = precision + recall
        return cls(
            precision=precision,
            recall=recall,
            f1=2 * precision * recall / total if total else 0.0,
            support=support,
            predicted=predicted,
        )

    @property
    def active(self) -> bool:
        """Whether the category appeared among the true or predicted labels."""
        return bool(self.support or self.predicted)


@dataclass
class ClassificationMetrics:
    """Metrics derived from a confusion matrix ``{actual: {predicted: n}}``.

    Macro and weighted averages only count active categories (those that
    appear in either the true or the predicted labels).
    """

    confusion_matrix: Confusion = field(default_factory=empty_confusion)
    per_category: dict[Category, CategoryScore] = field(default_factory=dict)

    @classmethod
    def from_confusion(cls, confusion: Confusion) -> "ClassificationMetrics":
        per_category = {}
        for category in Category:
            per_category[category] = CategoryScore.from_counts(
                hits=confusion[category][category],
                predicted=sum(row[category] for row in confusion.values()),
                support=sum(confusion[category].values()),
            )
        return cls(confusion_matrix=confusion, per_category=per_category)

    @property
    def total(self) -> int:
        return sum(sum(row.values()) for row in self.confusion_matrix.values())

    @property
    def accuracy(self) -> float:
        if not self.total:
            return 0.0
        return sum(self.confusion_matrix[c][c] for c in Category) / self.total

    @property
    def macro_f1(self) -> float:
        active = [s for s in self.per_category.values() if s.active]
        return sum(s.f1 for s in active) / len(active) if active else 0.0

    @property
    def weighted_f1(self) -> float:
        if not self.total:
            return 0.0
        return sum(s.f1 * s.support for s in self.per_category.values()) / self.total

    def to_dict(self) -> dict:
        return {
            "accuracy": round(self.accuracy, 4),
            "macro_f1": round(self.macro_f1, 4),
            "weighted_f1": round(self.weighted_f1, 4),
            "per_category": {
                category.value: {
                    "precision": round(score.precision, 4),
                    "recall": round(score.recall, 4),
                    "f1": round(score.f1, 4),
                    "support": score.support,
                }
                for category, score in self.per_category.items()
            },
            "confusion_matrix": {
                actual.value: {guess.value: n for guess, n in row.items()}
                for actual, row in self.confusion_matrix.items()
            },
        }

    def summary(self) -> str:
        """Plain-text report with one row per category in enum order."""
        lines = [
            f"Accuracy:    {self.accuracy:.2%} of {self.total}",
            f"Macro F1:    {self.macro_f1:.4f}",
            f"Weighted F1: {self.weighted_f1:.4f}",
            "",
            _ROW.format("Category", "Precision", "Recall", "F1", "Support"),
        ]
        for category in Category:
            score = self.per_category[category]
            lines.append(_ROW.format(
                category.value,
                f"{score.precision:.3f}",
                f"{score.recall:.3f}",
                f"{score.f1:.3f}",
                score.support,
            ))
        return "\n".join(lines)


def compute_metrics(
    y_true: list[Union[Category, str]],
    y_pred: list[Union[Category, str]],
) -> ClassificationMetrics:
    """Score predictions against true labels.

    Raises:
        ValueError: If the two lists differ in length.
        UnknownCategoryError: If a label is not a category.
    """
    if len(y_true) != len(y_pred):
        raise ValueError("y_true and y_pred must have the same length")

    confusion = empty_confusion()
    for actual, guess in zip(y_true, y_pred):
        confusion[_resolve(actual)][_resolve(guess)] += 1
    return ClassificationMetrics.from_confusion(confusion)


def pool(results: list[ClassificationMetrics]) -> ClassificationMetrics:
    """Merge per-fold metrics by adding their confusion matrices."""
    confusion = empty_confusion()
    for metrics in results:
        for actual, row in metrics.confusion_matrix.items():
            for guess, n in row.items():
                confusion[actual][guess] += n
    return ClassificationMetrics.from_confusion(confusion)


def stratified_k_fold(
    labels: list[Union[Category, str]],
    k: int = 5,
    seed: int = 42,
) -> list[tuple[list[int], list[int]]]:
    """Split indices into ``k`` (train, test) pairs with balanced categories.

    Each category's examples are shuffled and dealt to the folds in turn,
    categories being visited in enum order so the split only depends on
    ``labels`` and ``seed``.

    Raises:
        ValueError: If ``k`` is smaller than 2.
        UnknownCategoryError: If a label is not a category.
    """
    if k < 2:
        raise ValueError(f"k must be at least 2, got {k}")

    resolved = [_resolve(label) for label in labels]
    rng = random.Random(seed)
    fold_of = [0] * len(resolved)
    for category in Category:
        members = [i for i, label in enumerate(resolved) if label is category]
        rng.shuffle(members)
        for position, index in enumerate(members):
            fold_of[index] = position % k

    return [
        (
            [i for i, f in enumerate(fold_of) if f != fold],
            [i for i, f in enumerate(fold_of) if f == fold],
        )
        for fold in range(k)
    ]


def cross_validate(
    descriptions: list[str],
    labels: list[Union[Category, str]],
    k: int = 5,
    seed: int = 42,
    advanced_models: bool = False,
) -> list[ClassificationMetrics]:
    """Run stratified k-fold cross-validation.

    Folds with an empty test set are skipped.

    Returns:
        One ClassificationMetrics per evaluated fold.

    Raises:
        ValueError: If descriptions and labels differ in length.
    """
    if len(descriptions) != len(labels):
        raise ValueError(
            f"descriptions ({len(descriptions)}) and labels ({len(labels)}) must have same length"
        )

    resolved = [_resolve(label) for label in labels]
    results: list[ClassificationMetrics] = []
    for train_idx, test_idx in stratified_k_fold(resolved, k=k, seed=seed):
        if not test_idx:
            continue
        classifier = ExpenseClassifier(advanced_models=advanced_models)
        classifier.train_many((descriptions[i], resolved[i]) for i in train_idx)

        predictions = [classifier.predict(descriptions[i]) for i in test_idx]
        results.append(compute_metrics([resolved[i] for i in test_idx], predictions))

    return results


def mean_accuracy(results: list[ClassificationMetrics]) -> float:
    """Average accuracy over cross-validation folds (0.0 if there are none)."""
    if not results:
        return 0.0
    return sum(m.accuracy for m in results) / len(results)
