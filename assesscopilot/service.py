"""Public operations of the structured reasoning subsystem.

Every operation validates caller input against its registered contract,
renders the operation's prompt, invokes the reasoning service and returns an
:class:`Envelope` holding either ``data`` or a caller-safe ``error`` string.
Operations keep no state between calls and can be awaited concurrently.
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Generic, Mapping, Optional, Tuple, TypeVar

from pydantic import BaseModel

from .binder import Template, render
from .config import Settings, load_settings
from .contract_validation import Invalid, validate_contract
from .llm import AnthropicInvoker, InvalidModelJSON, ReasoningInvoker
from .models import (
    ANALYZE_PROCTORING_LOGS,
    EVALUATE_ANSWER,
    GENERATE_COMPANY_MOTTO,
    PARSE_MCQ_QUESTIONS,
    AnalysisReport,
    EvaluationResult,
    OperationContract,
    QuestionBatch,
)
from .policy import bound_score, normalize_batch, normalize_report
from .prompts import (
    ANALYZE_LOGS_SYSTEM_PROMPT,
    ANALYZE_LOGS_TEMPLATE,
    EVALUATE_ANSWER_SYSTEM_PROMPT,
    EVALUATE_ANSWER_TEMPLATE,
    MOTTO_SYSTEM_PROMPT,
    MOTTO_TEMPLATE,
    PARSE_MCQ_SYSTEM_PROMPT,
    PARSE_MCQ_TEMPLATE,
)

logger = logging.getLogger(__name__)

D = TypeVar("D")


@dataclass(frozen=True)
class Envelope(Generic[D]):
    data: Optional[D] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        if self.error is not None:
            return {"error": self.error}
        if isinstance(self.data, BaseModel):
            return {"data": self.data.model_dump(by_alias=True)}
        return {"data": self.data}


def _rejected(contract: OperationContract, outcome: Invalid) -> Envelope:
    logger.warning("Rejected %s input: %s", contract.name, "; ".join(outcome.errors))
    return Envelope(error=contract.invalid_input_error)


def _failed(contract: OperationContract, exc: Exception) -> Envelope:
    if isinstance(exc, InvalidModelJSON):
        logger.exception("%s failed: model output rejected (%s)", contract.name, exc.kind)
    else:
        logger.exception("%s failed: %s", contract.name, type(exc).__name__)
    return Envelope(error=contract.failure_error)


@asynccontextmanager
async def _resolve(
    invoker: Optional[ReasoningInvoker],
    settings: Optional[Settings],
) -> AsyncIterator[Tuple[ReasoningInvoker, Settings]]:
    resolved_settings = settings or load_settings()
    if invoker is not None:
        yield invoker, resolved_settings
        return

    # Built here, so closed here.
    owned = AnthropicInvoker(resolved_settings)
    try:
        yield owned, resolved_settings
    finally:
        await owned.aclose()


async def _invoke(
    contract: OperationContract,
    template: Template,
    system: str,
    request: BaseModel,
    invoker: ReasoningInvoker,
) -> Any:
    prompt = render(template, request)
    logger.info("Running %s", contract.name)
    return await invoker.invoke(prompt, contract.output_model, system=system)


def _with_positional_ids(entries: Any) -> Any:
    if not isinstance(entries, list):
        return entries
    stamped = []
    for index, entry in enumerate(entries):
        if isinstance(entry, Mapping) and entry.get("id") is None:
            entry = {**entry, "id": f"log-{index}"}
        stamped.append(entry)
    return stamped


async def analyze_proctoring_logs(
    entries: Any,
    *,
    invoker: Optional[ReasoningInvoker] = None,
    settings: Optional[Settings] = None,
) -> Envelope[AnalysisReport]:
    contract = ANALYZE_PROCTORING_LOGS
    outcome = validate_contract(contract.input_model, {"logs": _with_positional_ids(entries)})
    if isinstance(outcome, Invalid):
        return _rejected(contract, outcome)

    try:
        async with _resolve(invoker, settings) as (resolved, _):
            report = await _invoke(contract, ANALYZE_LOGS_TEMPLATE, ANALYZE_LOGS_SYSTEM_PROMPT, outcome.value, resolved)
    except Exception as exc:
        return _failed(contract, exc)
    return Envelope(data=normalize_report(report))


async def evaluate_answer(
    request: Any,
    *,
    invoker: Optional[ReasoningInvoker] = None,
    settings: Optional[Settings] = None,
) -> Envelope[EvaluationResult]:
    contract = EVALUATE_ANSWER
    outcome = validate_contract(contract.input_model, request)
    if isinstance(outcome, Invalid):
        return _rejected(contract, outcome)

    try:
        async with _resolve(invoker, settings) as (resolved, resolved_settings):
            result = await _invoke(
                contract, EVALUATE_ANSWER_TEMPLATE, EVALUATE_ANSWER_SYSTEM_PROMPT, outcome.value, resolved
            )
    except Exception as exc:
        return _failed(contract, exc)
    return Envelope(data=bound_score(result, outcome.value.marks, floor=resolved_settings.score_floor))


async def parse_mcq_questions(
    raw_text: Any,
    *,
    invoker: Optional[ReasoningInvoker] = None,
    settings: Optional[Settings] = None,
) -> Envelope[QuestionBatch]:
    contract = PARSE_MCQ_QUESTIONS
    outcome = validate_contract(contract.input_model, {"text": raw_text})
    if isinstance(outcome, Invalid):
        return _rejected(contract, outcome)

    try:
        async with _resolve(invoker, settings) as (resolved, _):
            batch = await _invoke(contract, PARSE_MCQ_TEMPLATE, PARSE_MCQ_SYSTEM_PROMPT, outcome.value, resolved)
    except Exception as exc:
        return _failed(contract, exc)
    return Envelope(data=normalize_batch(batch))


async def generate_company_motto(
    name: Any,
    *,
    invoker: Optional[ReasoningInvoker] = None,
    settings: Optional[Settings] = None,
) -> Envelope[str]:
    contract = GENERATE_COMPANY_MOTTO
    outcome = validate_contract(contract.input_model, {"companyName": name})
    if isinstance(outcome, Invalid):
        return _rejected(contract, outcome)

    try:
        async with _resolve(invoker, settings) as (resolved, _):
            motto = await _invoke(contract, MOTTO_TEMPLATE, MOTTO_SYSTEM_PROMPT, outcome.value, resolved)
    except Exception as exc:
        return _failed(contract, exc)
    return Envelope(data=motto.motto)


process_bulk_questions = parse_mcq_questions
get_company_motto = generate_company_motto

OPERATIONS = {
    ANALYZE_PROCTORING_LOGS.name: analyze_proctoring_logs,
    EVALUATE_ANSWER.name: evaluate_answer,
    PARSE_MCQ_QUESTIONS.name: parse_mcq_questions,
    GENERATE_COMPANY_MOTTO.name: generate_company_motto,
}
