"""Tests for the click command-line interface."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from expense_classifier.cli import main
from expense_classifier.models import Category
from expense_classifier.storage import SAMPLE_TRAINING_DATA, TrainingStore


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def invoke(runner, data_path, monkeypatch):
    """Run the CLI against a temporary training log."""
    monkeypatch.setenv("EXPENSE_CLASSIFIER_LOG_LEVEL", "WARNING")
    monkeypatch.setenv("EXPENSE_CLASSIFIER_ADVANCED_MIN_DOCS", "50")

    def _invoke(*args: str):
        return runner.invoke(main, ["--data", str(data_path), *args])

    return _invoke


class TestPredictCommand:
    def test_json_output(self, invoke):
        result = invoke("predict", "electricity bill", "--output", "json")
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["category"] == "Utilities"
        assert set(data["confidence_percent"]) == {c.value for c in Category}

    def test_rich_output(self, invoke):
        result = invoke("predict", "doctor visit")
        assert result.exit_code == 0, result.output
        assert "Suggested category: Healthcare" in result.stdout

    def test_seeds_log_on_first_use(self, invoke, data_path):
        invoke("predict", "anything")
        assert len(TrainingStore(data_path).load()) == len(SAMPLE_TRAINING_DATA)


class TestTrainCommand:
    def test_appends_example(self, invoke, data_path):
        result = invoke("train", "Uber to the airport", "travel")
        assert result.exit_code == 0, result.output
        assert "13 documents" in result.stdout
        stored = TrainingStore(data_path).load()
        assert stored[-1].description == "Uber to the airport"
        assert stored[-1].category is Category.TRAVEL

    def test_unknown_category_rejected(self, invoke, data_path):
        result = invoke("train", "kibble", "Pets")
        assert result.exit_code == 2
        assert not data_path.exists()

    def test_training_changes_prediction(self, invoke):
        for _ in range(3):
            invoke("train", "zorblax subscription", "Entertainment")
        result = invoke("predict", "zorblax", "-o", "json")
        assert json.loads(result.stdout)["category"] == "Entertainment"


class TestOtherCommands:
    def test_confidence_json(self, invoke):
        result = invoke("confidence", "water bill", "-o", "json")
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert all(0.0 <= v <= 100.0 for v in data.values())
        assert max(data, key=data.get) == "Utilities"

    def test_confidence_rich(self, invoke):
        result = invoke("confidence", "water bill")
        assert result.exit_code == 0, result.output
        assert "Utilities" in result.stdout

    def test_info(self, invoke):
        result = invoke("info")
        assert result.exit_code == 0, result.output
        assert "Documents seen:    12" in result.stdout
        assert "Advanced models:   disabled" in result.stdout

    def test_info_forced_advanced(self, runner, data_path):
        result = runner.invoke(main, ["--data", str(data_path), "--advanced", "info"])
        assert result.exit_code == 0, result.output
        assert "Advanced models:   enabled" in result.stdout

    def test_examples(self, invoke):
        result = invoke("examples")
        assert result.exit_code == 0, result.output
        assert "Food (2 examples):" in result.stdout
        assert "  - Bus fare" in result.stdout

    def test_evaluate_json(self, invoke):
        result = invoke("evaluate", "--folds", "2", "-o", "json")
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert len(data["folds"]) == 2
        assert 0.0 <= data["mean_accuracy"] <= 1.0
        pooled = data["pooled"]["per_category"]
        assert sum(row["support"] for row in pooled.values()) == len(SAMPLE_TRAINING_DATA)

    def test_evaluate_rich_summary(self, invoke):
        result = invoke("evaluate", "--folds", "2")
        assert result.exit_code == 0, result.output
        assert "All folds" in result.stdout
        assert "Healthcare" in result.stdout

    def test_evaluate_rejects_single_fold(self, invoke):
        result = invoke("evaluate", "--folds", "1")
        assert result.exit_code == 2


class TestMarkupInDescriptions:
    """Descriptions are shown literally, never interpreted as rich markup."""

    def test_predict_with_closing_tag(self, invoke):
        result = invoke("predict", "refund [/] dinner")
        assert result.exit_code == 0, result.output
        assert "refund [/] dinner" in result.stdout

    def test_predict_with_style_tag(self, invoke):
        result = invoke("predict", "[red]refund")
        assert result.exit_code == 0, result.output
        assert "[red]refund" in result.stdout

    def test_confidence_with_closing_tag(self, invoke):
        result = invoke("confidence", "water [/] bill")
        assert result.exit_code == 0, result.output
        assert "water [/] bill" in result.stdout

    def test_train_with_closing_tag(self, invoke, data_path):
        result = invoke("train", "lunch [/] tip", "Food")
        assert result.exit_code == 0, result.output
        assert "lunch [/] tip" in result.stdout
        assert TrainingStore(data_path).load()[-1].description == "lunch [/] tip"


class TestErrors:
    def test_corrupt_log_exits_with_error(self, invoke, data_path):
        data_path.parent.mkdir(parents=True)
        data_path.write_text("{broken\n", encoding="utf-8")
        result = invoke("predict", "bus")
        assert result.exit_code == 1
        assert "Error" in result.stdout

    def test_non_utf8_log_exits_with_error(self, invoke, data_path):
        data_path.parent.mkdir(parents=True)
        data_path.write_bytes(b'{"description": "caf\xe9", "category": "Food"}\n')
        result = invoke("info")
        assert result.exit_code == 1
        assert "UTF-8" in result.stdout

    def test_invalid_setting_exits_with_error(self, invoke, monkeypatch):
        monkeypatch.setenv("EXPENSE_CLASSIFIER_ADVANCED_MIN_DOCS", "lots")
        result = invoke("info")
        assert result.exit_code == 1
        assert "EXPENSE_CLASSIFIER_ADVANCED_MIN_DOCS" in result.stdout
