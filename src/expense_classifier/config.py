"""Runtime settings and logging setup for the command-line front-end.

Settings are read from environment variables, optionally supplied through a
``.env`` file in the working directory:

- ``EXPENSE_CLASSIFIER_DATA`` -- training log path
- ``EXPENSE_CLASSIFIER_ADVANCED_MIN_DOCS`` -- corpus size at which the
  overlap scorer is switched on automatically
- ``EXPENSE_CLASSIFIER_LOG_LEVEL`` -- logging level name
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

DEFAULT_DATA_PATH = Path("~/.expense_classifier/training.jsonl")
DEFAULT_ADVANCED_MIN_DOCS = 50
DEFAULT_LOG_LEVEL = "WARNING"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


@dataclass
class Settings:
    """Resolved configuration for one CLI invocation."""

    data_path: Path = DEFAULT_DATA_PATH
    advanced_min_docs: int = DEFAULT_ADVANCED_MIN_DOCS
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, load_dotenv_file: bool = True) -> "Settings":
        """Build settings from the environment.

        Raises:
            ValueError: If ``EXPENSE_CLASSIFIER_ADVANCED_MIN_DOCS`` is not a
                non-negative integer.
        """
        if load_dotenv_file:
            load_dotenv(find_dotenv(usecwd=True))

        raw_min_docs = os.getenv("EXPENSE_CLASSIFIER_ADVANCED_MIN_DOCS")
        if raw_min_docs is None or not raw_min_docs.strip():
            min_docs = DEFAULT_ADVANCED_MIN_DOCS
        else:
            try:
                min_docs = int(raw_min_docs)
            except ValueError:
                raise ValueError(
                    f"EXPENSE_CLASSIFIER_ADVANCED_MIN_DOCS must be an integer, got {raw_min_docs!r}"
                ) from None
            if min_docs < 0:
                raise ValueError("EXPENSE_CLASSIFIER_ADVANCED_MIN_DOCS must not be negative")

        return cls(
            data_path=Path(os.getenv("EXPENSE_CLASSIFIER_DATA") or DEFAULT_DATA_PATH).expanduser(),
            advanced_min_docs=min_docs,
            log_level=(os.getenv("EXPENSE_CLASSIFIER_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper(),
        )


def setup_logging(level: str = DEFAULT_LOG_LEVEL) -> logging.Logger:
    """Configure root logging once for the CLI process.

    Unknown level names fall back to WARNING.
    """
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        log_level = logging.WARNING

    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )
    return logging.getLogger("expense_classifier")
