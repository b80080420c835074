import logging
from typing import Optional

from .models import AnalysisReport, EvaluationResult, QuestionBatch

logger = logging.getLogger(__name__)


def bound_score(result: EvaluationResult, marks: float, floor: Optional[float] = None) -> EvaluationResult:
    """Clamp ``suggested_score`` to ``marks``.

    Negative scores are passed through unless ``floor`` is given.
    """
    score = result.suggested_score
    if score > marks:
        logger.debug("Clamping suggested score %s to marks %s", score, marks)
        score = marks
    if floor is not None and score < floor:
        logger.debug("Raising suggested score %s to floor %s", score, floor)
        score = min(floor, marks)
    if score == result.suggested_score:
        return result
    return result.model_copy(update={"suggested_score": score})


def normalize_report(report: AnalysisReport) -> AnalysisReport:
    return report


def normalize_batch(batch: QuestionBatch) -> QuestionBatch:
    return batch
