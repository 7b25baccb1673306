"""Shared test fixtures for expense-classifier tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from expense_classifier.classifier import ExpenseClassifier
from expense_classifier.models import Category

# Distinctive vocabulary per category so predictions are unambiguous
TRAINING_PAIRS: list[tuple[str, Category]] = [
    ("Lunch at McDonald's", Category.FOOD),
    ("Dinner at Olive Garden", Category.FOOD),
    ("Pizza delivery dinner", Category.FOOD),
    ("Coffee and bagel breakfast", Category.FOOD),
    ("Sushi restaurant dinner", Category.FOOD),
    ("Bus fare", Category.TRAVEL),
    ("Train ticket to Boston", Category.TRAVEL),
    ("Uber ride to airport", Category.TRAVEL),
    ("Flight to Chicago", Category.TRAVEL),
    ("Hotel booking for trip", Category.TRAVEL),
    ("Groceries from Walmart", Category.SHOPPING),
    ("Clothes from Macy's", Category.SHOPPING),
    ("Amazon order headphones", Category.SHOPPING),
    ("New running shoes", Category.SHOPPING),
    ("Target household items", Category.SHOPPING),
    ("Movie tickets", Category.ENTERTAINMENT),
    ("Concert tickets", Category.ENTERTAINMENT),
    ("Netflix subscription", Category.ENTERTAINMENT),
    ("Bowling night", Category.ENTERTAINMENT),
    ("Video game", Category.ENTERTAINMENT),
    ("Electricity bill", Category.UTILITIES),
    ("Water bill", Category.UTILITIES),
    ("Internet bill", Category.UTILITIES),
    ("Phone bill", Category.UTILITIES),
    ("Gas bill for heating", Category.UTILITIES),
    ("Doctor visit", Category.HEALTHCARE),
    ("Medicine", Category.HEALTHCARE),
    ("Pharmacy prescription refill", Category.HEALTHCARE),
    ("Dental cleaning", Category.HEALTHCARE),
    ("Hospital checkup", Category.HEALTHCARE),
]


@pytest.fixture
def training_pairs() -> list[tuple[str, Category]]:
    return list(TRAINING_PAIRS)


@pytest.fixture
def classifier() -> ExpenseClassifier:
    """A fresh, untrained classifier."""
    return ExpenseClassifier()


@pytest.fixture
def trained_classifier(training_pairs) -> ExpenseClassifier:
    """Classifier trained on the synthetic corpus."""
    clf = ExpenseClassifier()
    clf.train_many(training_pairs)
    return clf


@pytest.fixture
def data_path(tmp_path: Path) -> Path:
    """Location for a training log inside a temporary directory."""
    return tmp_path / "data" / "training.jsonl"
