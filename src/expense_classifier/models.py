"""Data models for expense categorisation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


class Category(str, Enum):
    """Fixed set of expense categories.

    Member order is significant: it is the tie-break order used when two
    categories score the same.
    """

    FOOD = "Food"
    TRAVEL = "Travel"
    SHOPPING = "Shopping"
    ENTERTAINMENT = "Entertainment"
    UTILITIES = "Utilities"
    HEALTHCARE = "Healthcare"

    @classmethod
    def parse(cls, label: Union["Category", str, None]) -> Optional["Category"]:
        """Return the member whose value is exactly ``label``, or None.

        Labels are a closed set; no case folding or trimming is applied.
        """
        if isinstance(label, cls):
            return label
        if not isinstance(label, str):
            return None
        for member in cls:
            if member.value == label:
                return member
        return None


# Arbitrary fallback when no category can be told apart from the others.
DEFAULT_CATEGORY = Category.SHOPPING


class UnknownCategoryError(ValueError):
    """Raised in strict mode when a label is not one of the known categories."""

    def __init__(self, label: object) -> None:
        known = ", ".join(c.value for c in Category)
        super().__init__(f"Unknown category: {label!r}. Known: {known}")
        self.label = label


@dataclass
class TrainingExample:
    """A single (description, category) pair as replayed into the classifier."""

    description: str
    category: Category

    def to_dict(self) -> dict:
        return {"description": self.description, "category": self.category.value}

    @classmethod
    def from_dict(cls, data: dict) -> "TrainingExample":
        category = Category.parse(data.get("category"))
        if category is None:
            raise UnknownCategoryError(data.get("category"))
        return cls(description=str(data.get("description") or ""), category=category)


@dataclass
class PredictionResult:
    """Outcome of classifying one description.

    Attributes:
        category: Predicted category.
        confidence: Combined ensemble score of the predicted category (0-1).
        scores: Combined ensemble score for every category.
        component_scores: Normalised vector from each scorer, keyed by scorer name.
        weights: Dynamic ensemble weight applied to each scorer.
    """

    category: Category
    confidence: float
    scores: dict[Category, float]
    component_scores: dict[str, dict[Category, float]] = field(default_factory=dict)
    weights: dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "category": self.category.value,
            "confidence": round(self.confidence, 4),
            "scores": {
                c.value: round(s, 4)
                for c, s in sorted(self.scores.items(), key=lambda x: x[1], reverse=True)
            },
            "weights": {name: round(w, 4) for name, w in self.weights.items()},
            "components": {
                name: {c.value: round(s, 4) for c, s in vec.items()}
                for name, vec in self.component_scores.items()
            },
        }
