"""Tests for run artifacts in assesscopilot/artifacts.py."""

from __future__ import annotations

import json
from pathlib import Path

from assesscopilot.artifacts import make_timestamp, save_json_error, save_run
from assesscopilot.models import EvaluationResult


class TestSaveRun:
    """Tests for save_run."""

    def test_writes_request_and_result(self, tmp_path):
        """Verify both files are written as compact, key-sorted JSON."""
        runs_dir = tmp_path / "runs"
        request = {"marks": 10, "answer": "A"}
        envelope = {"data": EvaluationResult(feedback="f", suggested_score=1)}

        paths = save_run("evaluate_answer", request, envelope, runs_dir=str(runs_dir))

        request_text = Path(paths["request_path"]).read_text(encoding="utf-8")
        assert request_text == '{"answer":"A","marks":10}'
        assert Path(paths["request_path"]).name.startswith("evaluate_answer_request_")
        result = json.loads(Path(paths["result_path"]).read_text(encoding="utf-8"))
        assert result == {"data": {"feedback": "f", "suggestedScore": 1.0}}

    def test_raw_text_request(self, tmp_path):
        """Verify a raw string request is stored as a JSON string."""
        paths = save_run("parse_mcq_questions", "Q1?", {"data": {"questions": []}}, runs_dir=str(tmp_path))
        assert json.loads(Path(paths["request_path"]).read_text(encoding="utf-8")) == "Q1?"


class TestSaveJsonError:
    """Tests for save_json_error."""

    def test_contains_kind_error_and_raw(self, tmp_path):
        """Verify the error artifact records the failure details."""
        path = save_json_error("{oops", "Expecting value", "json_decode", runs_dir=str(tmp_path))
        contents = Path(path).read_text(encoding="utf-8")
        assert contents.startswith("MODEL_OUTPUT_FAILURE\n")
        assert "kind: json_decode" in contents
        assert contents.endswith("---- RAW OUTPUT ----\n{oops")


def test_timestamps_unique():
    """Verify consecutive timestamps differ."""
    assert make_timestamp() != make_timestamp()
