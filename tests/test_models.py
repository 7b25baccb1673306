"""Tests for data models."""

from __future__ import annotations

import pytest

from expense_classifier.models import (
    DEFAULT_CATEGORY,
    Category,
    PredictionResult,
    TrainingExample,
    UnknownCategoryError,
)


class TestCategory:
    """Tests for the Category enum."""

    def test_fixed_order(self):
        assert [c.value for c in Category] == [
            "Food", "Travel", "Shopping", "Entertainment", "Utilities", "Healthcare",
        ]

    def test_is_string_enum(self):
        assert Category.FOOD == "Food"

    @pytest.mark.parametrize("label, expected", [
        ("Food", Category.FOOD),
        ("Healthcare", Category.HEALTHCARE),
        (Category.TRAVEL, Category.TRAVEL),
    ])
    def test_parse_known(self, label, expected):
        assert Category.parse(label) is expected

    @pytest.mark.parametrize("label", ["NotACategory", "", None, 3, "FOOD_", "food", " Food "])
    def test_parse_unknown(self, label):
        assert Category.parse(label) is None

    def test_default_category(self):
        assert DEFAULT_CATEGORY is Category.SHOPPING


class TestUnknownCategoryError:
    def test_is_value_error(self):
        err = UnknownCategoryError("Pets")
        assert isinstance(err, ValueError)
        assert err.label == "Pets"
        assert "Pets" in str(err)
        assert "Healthcare" in str(err)


class TestTrainingExample:
    """Tests for TrainingExample serialisation."""

    def test_to_dict(self):
        example = TrainingExample("Bus fare", Category.TRAVEL)
        assert example.to_dict() == {"description": "Bus fare", "category": "Travel"}

    def test_from_dict_label(self):
        example = TrainingExample.from_dict({"description": "Bus fare", "category": "Travel"})
        assert example.category is Category.TRAVEL

    def test_from_dict_wrong_case_rejected(self):
        with pytest.raises(UnknownCategoryError):
            TrainingExample.from_dict({"description": "Bus fare", "category": "travel"})

    def test_from_dict_missing_description(self):
        example = TrainingExample.from_dict({"category": "Food"})
        assert example.description == ""

    def test_from_dict_unknown_category(self):
        with pytest.raises(UnknownCategoryError):
            TrainingExample.from_dict({"description": "x", "category": "Pets"})


class TestPredictionResult:
    def test_to_dict_sorted_and_rounded(self):
        scores = {c: 0.1 for c in Category}
        scores[Category.UTILITIES] = 0.5
        result = PredictionResult(
            category=Category.UTILITIES,
            confidence=0.5,
            scores=scores,
            weights={"naive_bayes": 0.123456},
        )
        data = result.to_dict()
        assert data["category"] == "Utilities"
        assert list(data["scores"])[0] == "Utilities"
        assert data["weights"]["naive_bayes"] == 0.1235
        assert data["components"] == {}
