"""Tests for result post-processing in assesscopilot/policy.py."""

from __future__ import annotations

import pytest

from assesscopilot.models import AnalysisReport, EvaluationResult, QuestionBatch
from assesscopilot.policy import bound_score, normalize_batch, normalize_report


def _result(score: float) -> EvaluationResult:
    return EvaluationResult(feedback="f", suggested_score=score)


class TestBoundScore:
    """Tests for the suggested score clamp."""

    @pytest.mark.parametrize("marks", [0, 1, 10, 2.5])
    def test_far_above_marks_clamped(self, marks):
        """Verify marks + 1000 becomes exactly marks."""
        assert bound_score(_result(marks + 1000), marks).suggested_score == marks

    def test_within_bound_returns_same_object(self):
        """Verify in-range results are not copied."""
        result = _result(4)
        assert bound_score(result, 10) is result

    def test_equal_to_marks_kept(self):
        """Verify a score equal to marks is left alone."""
        assert bound_score(_result(10), 10).suggested_score == 10

    def test_negative_passes_without_floor(self):
        """Verify negative scores are not floored by default."""
        assert bound_score(_result(-3), 10).suggested_score == -3

    def test_floor_applied(self):
        """Verify an explicit floor lifts low scores."""
        assert bound_score(_result(-3), 10, floor=0).suggested_score == 0

    def test_floor_never_exceeds_marks(self):
        """Verify the floor cannot push a score above marks."""
        assert bound_score(_result(-3), 0.5, floor=1).suggested_score == 0.5

    def test_feedback_preserved(self):
        """Verify clamping keeps the feedback text."""
        assert bound_score(EvaluationResult(feedback="keep me", suggested_score=50), 5).feedback == "keep me"


class TestPassThrough:
    """Tests for outputs without extra policy."""

    def test_report_unchanged(self):
        """Verify analysis reports are returned as-is."""
        report = AnalysisReport(summary="s", suspicious_activities=[])
        assert normalize_report(report) is report

    def test_batch_unchanged(self):
        """Verify question batches are returned as-is."""
        batch = QuestionBatch(questions=[])
        assert normalize_batch(batch) is batch
