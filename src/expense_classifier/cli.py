"""Command-line interface for the expense classifier.

Every invocation rebuilds the classifier by replaying the training log
(seeded with a few sample expenses on first use), so the model always
reflects every example recorded so far.

Usage::

    expense-classifier predict "dinner at olive garden"
    expense-classifier train "Uber to the airport" Travel
    expense-classifier confidence "netflix subscription" --output json
    expense-classifier evaluate --folds 3
"""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .classifier import ExpenseClassifier
from .config import Settings, setup_logging
from .evaluation import cross_validate, mean_accuracy, pool
from .models import Category, UnknownCategoryError
from .storage import StorageError, TrainingStore

console = Console()

CATEGORY_CHOICES = [c.value for c in Category]


@dataclass
class _Session:
    settings: Settings
    advanced: Optional[bool]

    @property
    def store(self) -> TrainingStore:
        return TrainingStore(self.settings.data_path)

    def load_classifier(self) -> ExpenseClassifier:
        """Seed, replay and configure a classifier, exiting on a broken log."""
        store = self.store
        classifier = ExpenseClassifier()
        try:
            store.seed_if_empty()
            store.replay(classifier)
        except StorageError as e:
            console.print(f"[bold red]Error:[/] {escape(str(e))}")
            sys.exit(1)

        if self.advanced is None:
            enable = classifier.document_count >= self.settings.advanced_min_docs
        else:
            enable = self.advanced
        classifier.enable_advanced_models(enable)
        return classifier


@click.group()
@click.version_option(package_name="expense-classifier")
@click.option("--data", "data_path", type=click.Path(dir_okay=False, path_type=Path),
              default=None, help="Training log (overrides EXPENSE_CLASSIFIER_DATA).")
@click.option("--advanced/--no-advanced", default=None,
              help="Force the overlap model on or off (default: by corpus size).")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, data_path: Optional[Path], advanced: Optional[bool],
         verbose: bool) -> None:
    """Expense Classifier -- suggest categories for expense descriptions."""
    try:
        settings = Settings.from_env()
    except ValueError as e:
        console.print(f"[bold red]Error:[/] {escape(str(e))}")
        sys.exit(1)

    setup_logging("DEBUG" if verbose else settings.log_level)
    if data_path is not None:
        settings.data_path = data_path
    ctx.obj = _Session(settings=settings, advanced=advanced)


@main.command()
@click.argument("description")
@click.argument("category", type=click.Choice(CATEGORY_CHOICES, case_sensitive=False))
@click.pass_obj
def train(session: _Session, description: str, category: str) -> None:
    """Record a labelled expense description.

    Example: expense-classifier train "Uber to the airport" Travel
    """
    try:
        session.store.seed_if_empty()
        example = session.store.append(description, category)
    except (UnknownCategoryError, StorageError) as e:
        console.print(f"[bold red]Error:[/] {escape(str(e))}")
        sys.exit(1)

    classifier = session.load_classifier()
    console.print(
        f"Learned [cyan]{escape(repr(example.description))}[/] as [bold]{example.category.value}[/] "
        f"({classifier.document_count} documents)"
    )


@main.command()
@click.argument("description")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
@click.pass_obj
def predict(session: _Session, description: str, output: str) -> None:
    """Suggest a category for DESCRIPTION.

    Example: expense-classifier predict "dinner with friends"
    """
    classifier = session.load_classifier()
    result = classifier.classify(description)
    confidence = classifier.confidence(description)

    if output == "json":
        data = result.to_dict()
        data["confidence_percent"] = {c.value: p for c, p in confidence.items()}
        click.echo(json.dumps(data, indent=2))
        return

    table = Table(title=f"Prediction -- {escape(description)}")
    table.add_column("Category", style="cyan", width=15)
    table.add_column("Ensemble", justify="right", width=10)
    table.add_column("Confidence", justify="right", width=11)
    for category in sorted(Category, key=lambda c: result.scores[c], reverse=True):
        style = "bold green" if category == result.category else ""
        table.add_row(
            category.value,
            f"{result.scores[category]:.3f}",
            f"{confidence[category]:.1f}%",
            style=style,
        )
    console.print(table)
    console.print(f"Suggested category: [bold green]{result.category.value}[/]")


@main.command()
@click.argument("description")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
@click.pass_obj
def confidence(session: _Session, description: str, output: str) -> None:
    """Show per-category confidence percentages for DESCRIPTION."""
    classifier = session.load_classifier()
    scores = classifier.confidence(description)

    if output == "json":
        click.echo(json.dumps({c.value: p for c, p in scores.items()}, indent=2))
        return

    table = Table(title=f"Confidence -- {escape(description)}")
    table.add_column("Category", style="cyan", width=15)
    table.add_column("Confidence", justify="right", width=11)
    for category, percent in sorted(scores.items(), key=lambda x: x[1], reverse=True):
        table.add_row(category.value, f"{percent:.1f}%")
    console.print(table)


@main.command()
@click.pass_obj
def info(session: _Session) -> None:
    """Show model diagnostics."""
    classifier = session.load_classifier()
    console.print(Panel(
        classifier.model_info(),
        title=f"Model -- {escape(str(session.settings.data_path))}",
        border_style="blue",
    ))


@main.command()
@click.pass_obj
def examples(session: _Session) -> None:
    """List the training examples per category."""
    classifier = session.load_classifier()
    click.echo(classifier.training_examples())


@main.command()
@click.option("--folds", "-k", type=click.IntRange(min=2), default=5, show_default=True,
              help="Number of cross-validation folds.")
@click.option("--seed", type=int, default=42, show_default=True, help="Fold shuffling seed.")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
@click.pass_obj
def evaluate(session: _Session, folds: int, seed: int, output: str) -> None:
    """Cross-validate the classifier on the training log."""
    store = session.store
    try:
        store.seed_if_empty()
        stored = store.load()
    except StorageError as e:
        console.print(f"[bold red]Error:[/] {escape(str(e))}")
        sys.exit(1)

    descriptions = [e.description for e in stored]
    labels = [e.category for e in stored]
    advanced = bool(session.advanced) if session.advanced is not None else (
        len(stored) >= session.settings.advanced_min_docs
    )
    results = cross_validate(descriptions, labels, k=folds, seed=seed, advanced_models=advanced)

    if output == "json":
        click.echo(json.dumps({
            "folds": [m.to_dict() for m in results],
            "mean_accuracy": round(mean_accuracy(results), 4),
            "pooled": pool(results).to_dict(),
        }, indent=2))
        return

    if not results:
        console.print("[yellow]Not enough examples to evaluate.[/]")
        return

    table = Table(title=f"Cross-validation ({len(results)} folds, {len(stored)} examples)")
    table.add_column("Fold", justify="right", width=6)
    table.add_column("Accuracy", justify="right", width=10)
    table.add_column("Macro F1", justify="right", width=10)
    for i, metrics in enumerate(results, 1):
        table.add_row(str(i), f"{metrics.accuracy:.2%}", f"{metrics.macro_f1:.4f}")
    console.print(table)
    console.print(f"Mean accuracy: [bold]{mean_accuracy(results):.2%}[/]")
    console.print(Panel(pool(results).summary(), title="All folds", border_style="blue"))


if __name__ == "__main__":
    main()
