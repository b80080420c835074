from dataclasses import dataclass
from typing import Annotated, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

ProctoringStatus = Literal["present", "no_face", "multiple_faces", "tab_switch"]
QuestionKind = Literal["mcq", "coding", "paragraph", "image", "audio"]

# int stays int, never widened to float.
Score = Union[
    Annotated[int, Field(strict=True)],
    Annotated[float, Field(strict=True, allow_inf_nan=False)],
]
Marks = Union[
    Annotated[int, Field(strict=True, ge=0)],
    Annotated[float, Field(strict=True, ge=0, allow_inf_nan=False)],
]

DEFAULT_QUESTION_MARKS = 10


def _require_text(value: str) -> str:
    if not value.strip():
        raise ValueError("must contain non-whitespace text")
    return value


class InputContract(BaseModel):
    """Caller-supplied values: scalar fields are strict, unknown keys dropped."""

    model_config = ConfigDict(
        extra="ignore",
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class OutputContract(BaseModel):
    """Reasoning service output: strict scalars, any structural deviation is a failure."""

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ProctoringLogEntry(InputContract):
    id: str = Field(..., strict=True, description="The ID of the log entry.")
    candidate_id: str = Field(..., strict=True, description="The ID of the candidate.")
    test_id: str = Field(..., strict=True, description="The ID of the test.")
    timestamp: str = Field(..., strict=True, description="The timestamp of the event (ISO format).")
    status: ProctoringStatus = Field(..., description="The status of the candidate during proctoring.")


class ProctoringLogBatch(InputContract):
    logs: List[ProctoringLogEntry] = Field(..., description="An array of proctoring log entries.")


class SuspiciousActivityFinding(OutputContract):
    candidate_id: str = Field(..., strict=True, description="The ID of the candidate involved.")
    test_id: str = Field(..., strict=True, description="The ID of the test involved.")
    reason: str = Field(..., strict=True, description="The reason for flagging the activity as suspicious.")
    timestamps: List[str] = Field(..., strict=True, description="Timestamps of the suspicious events.")


class AnalysisReport(OutputContract):
    summary: str = Field(..., strict=True, description="A summary of the analysis of the proctoring logs.")
    suspicious_activities: List[SuspiciousActivityFinding] = Field(
        ...,
        description="An array of suspicious activities identified in the logs.",
    )


class EvaluationRequest(InputContract):
    question_text: str = Field(..., strict=True, description="The text of the question.")
    question_type: QuestionKind = Field(..., description="The type of the question.")
    answer: str = Field(..., strict=True, description="The candidate's answer.")
    marks: Marks = Field(..., description="The total marks for the question.")


class EvaluationResult(OutputContract):
    feedback: str = Field(
        ...,
        strict=True,
        description=(
            "Detailed feedback on the candidate's answer, highlighting correctness, code quality, "
            "time complexity (for coding), and adherence to rubrics."
        ),
    )
    suggested_score: Score = Field(
        ...,
        description="A suggested score out of the total marks.",
    )


class ParsedQuestion(OutputContract):
    question_text: str = Field(..., strict=True, description="The main text of the question.")
    options: List[str] = Field(..., strict=True, description="An array of possible answers.")
    answer: str = Field(..., strict=True, description="The correct answer from the options.")
    marks: Marks = Field(
        default=DEFAULT_QUESTION_MARKS,
        description="The marks for the question, default to 10.",
    )

    @model_validator(mode="after")
    def validate_answer(self) -> "ParsedQuestion":
        if self.answer not in self.options:
            raise ValueError(f"answer '{self.answer}' is not one of the options")
        return self


class QuestionBatch(OutputContract):
    questions: List[ParsedQuestion] = Field(..., description="An array of parsed question objects.")


class BulkQuestionsRequest(InputContract):
    text: str = Field(
        ...,
        strict=True,
        min_length=1,
        description="A raw string containing multiple-choice questions and their options.",
    )

    @field_validator("text")
    @classmethod
    def validate_text(cls, value: str) -> str:
        return _require_text(value)


class MottoRequest(InputContract):
    company_name: str = Field(..., strict=True, min_length=1, description="The name of the company.")

    @field_validator("company_name")
    @classmethod
    def validate_company_name(cls, value: str) -> str:
        return _require_text(value)


class CompanyMotto(OutputContract):
    motto: str = Field(..., strict=True, min_length=1, description="A short, catchy motto for the company.")

    @field_validator("motto")
    @classmethod
    def validate_motto(cls, value: str) -> str:
        return _require_text(value)


@dataclass(frozen=True)
class OperationContract:
    name: str
    input_model: type[InputContract]
    output_model: type[OutputContract]
    invalid_input_error: str
    failure_error: str


ANALYZE_PROCTORING_LOGS = OperationContract(
    name="analyze_proctoring_logs",
    input_model=ProctoringLogBatch,
    output_model=AnalysisReport,
    invalid_input_error="Invalid log format.",
    failure_error="Failed to analyze logs.",
)

EVALUATE_ANSWER = OperationContract(
    name="evaluate_answer",
    input_model=EvaluationRequest,
    output_model=EvaluationResult,
    invalid_input_error="Invalid input format.",
    failure_error="Failed to get AI evaluation.",
)

PARSE_MCQ_QUESTIONS = OperationContract(
    name="parse_mcq_questions",
    input_model=BulkQuestionsRequest,
    output_model=QuestionBatch,
    invalid_input_error="Invalid input format. Expected a raw string.",
    failure_error="Failed to process questions using AI.",
)

GENERATE_COMPANY_MOTTO = OperationContract(
    name="generate_company_motto",
    input_model=MottoRequest,
    output_model=CompanyMotto,
    invalid_input_error="Invalid input format.",
    failure_error="Failed to generate company motto.",
)

CONTRACTS = {
    contract.name: contract
    for contract in (
        ANALYZE_PROCTORING_LOGS,
        EVALUATE_ANSWER,
        PARSE_MCQ_QUESTIONS,
        GENERATE_COMPANY_MOTTO,
    )
}
