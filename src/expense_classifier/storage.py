"""Append-only training log used to rebuild the classifier between sessions.

The classifier keeps no state on disk; it is fully described by the
ordered list of (description, category) pairs it was trained on. This
module stores those pairs as JSON lines::

    {"description": "Bus fare", "category": "Travel"}

and replays them into a fresh classifier on startup.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional, Union

from .classifier import ExpenseClassifier
from .models import Category, TrainingExample, UnknownCategoryError

logger = logging.getLogger(__name__)

SAMPLE_TRAINING_DATA: tuple[tuple[str, Category], ...] = (
    ("Lunch at McDonald's", Category.FOOD),
    ("Dinner at Olive Garden", Category.FOOD),
    ("Groceries from Walmart", Category.SHOPPING),
    ("Clothes from Macy's", Category.SHOPPING),
    ("Bus fare", Category.TRAVEL),
    ("Train ticket", Category.TRAVEL),
    ("Movie tickets", Category.ENTERTAINMENT),
    ("Concert tickets", Category.ENTERTAINMENT),
    ("Electricity bill", Category.UTILITIES),
    ("Water bill", Category.UTILITIES),
    ("Doctor visit", Category.HEALTHCARE),
    ("Medicine", Category.HEALTHCARE),
)


class StorageError(Exception):
    """Raised when the training log cannot be parsed."""


class TrainingStore:
    """JSON-lines file of training examples.

    Args:
        path: Location of the log. Parent directories are created on write.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path).expanduser()

    def load(self) -> list[TrainingExample]:
        """Read every stored example in file order.

        Raises:
            StorageError: If the file is not UTF-8, or a line is not valid
                JSON or names an unknown category.
        """
        if not self.path.exists():
            return []

        examples: list[TrainingExample] = []
        for line_no, line in enumerate(self._read_text().split("\n"), 1):
            line = line.strip()
            if not line:
                continue
            try:
                data = json.loads(line)
                if not isinstance(data, dict):
                    raise ValueError("expected a JSON object")
                examples.append(TrainingExample.from_dict(data))
            except ValueError as e:
                raise StorageError(f"{self.path}:{line_no}: {e}") from e
        return examples

    def _read_text(self) -> str:
        try:
            return self.path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise StorageError(f"{self.path}: not valid UTF-8 ({e.reason} at byte {e.start})") from e

    def append(self, description: Optional[str], category: Union[Category, str]) -> TrainingExample:
        """Persist one example.

        Raises:
            UnknownCategoryError: If the category is not a known label.
        """
        label = Category.parse(category)
        if label is None:
            raise UnknownCategoryError(category)

        example = TrainingExample(description=description or "", category=label)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(json.dumps(example.to_dict(), ensure_ascii=False) + "\n")
        return example

    def is_empty(self) -> bool:
        """True if the log is missing or blank.

        Raises:
            StorageError: If the file is not UTF-8.
        """
        return not self.path.exists() or not self._read_text().strip()

    def seed_if_empty(self) -> int:
        """Write the sample examples if the log has no content yet.

        Returns:
            Number of examples written.
        """
        if not self.is_empty():
            return 0
        for description, category in SAMPLE_TRAINING_DATA:
            self.append(description, category)
        logger.info("Seeded %s with %d sample examples", self.path, len(SAMPLE_TRAINING_DATA))
        return len(SAMPLE_TRAINING_DATA)

    def replay(self, classifier: ExpenseClassifier) -> int:
        """Train ``classifier`` on every stored example in order.

        Returns:
            Number of examples the classifier accepted.
        """
        examples = self.load()
        accepted = classifier.train_many((e.description, e.category) for e in examples)
        logger.debug("Replayed %d/%d examples from %s", accepted, len(examples), self.path)
        return accepted
