"""Shared pytest fixtures for assesscopilot tests.

- Environment isolation so settings never leak in from the developer shell
- A deterministic stub reasoning invoker that counts calls
"""

from __future__ import annotations

import json
from typing import Any, Callable, Optional

import pytest

from assesscopilot.config import Settings
from assesscopilot.llm import parse_contract

ENV_VARS = (
    "ANTHROPIC_API_KEY",
    "ASSESSCOPILOT_MODEL",
    "ASSESSCOPILOT_MAX_TOKENS",
    "ASSESSCOPILOT_TEMPERATURE",
    "ASSESSCOPILOT_RUNS_DIR",
    "ASSESSCOPILOT_SCORE_FLOOR",
    "ASSESSCOPILOT_LOG_LEVEL",
)


class StubInvoker:
    """Reasoning invoker backed by a plain function.

    ``responder(prompt, contract)`` returns a JSON-compatible payload (or
    raises); the payload goes through the same contract parsing as the real
    invoker, so non-conforming stub output fails the same way.
    """

    def __init__(self, responder: Callable[[str, type], Any]):
        self.responder = responder
        self.calls: list[dict[str, Any]] = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    async def invoke(self, prompt: str, contract: type, *, system: Optional[str] = None):
        self.calls.append({"prompt": prompt, "contract": contract, "system": system})
        payload = self.responder(prompt, contract)
        return parse_contract(json.dumps(payload), contract)


# -----------------------------------------------------------------------------
# Isolation Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove configuration variables before each test."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Default settings writing artifacts to a temporary directory."""
    return Settings(api_key="test-key", runs_dir=str(tmp_path / "runs"))


# -----------------------------------------------------------------------------
# Invoker Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def make_invoker() -> Callable[..., StubInvoker]:
    """Factory for stub invokers."""

    def _make(responder: Callable[[str, type], Any]) -> StubInvoker:
        return StubInvoker(responder)

    return _make


@pytest.fixture
def constant_invoker(make_invoker) -> Callable[[Any], StubInvoker]:
    """Factory for a stub invoker that always returns ``payload``."""

    def _make(payload: Any) -> StubInvoker:
        return make_invoker(lambda prompt, contract: payload)

    return _make


@pytest.fixture
def tab_switch_logs() -> list[dict[str, str]]:
    return [
        {"candidateId": "c1", "testId": "t1", "timestamp": "T1", "status": "tab_switch"},
        {"candidateId": "c1", "testId": "t1", "timestamp": "T2", "status": "tab_switch"},
    ]


@pytest.fixture
def evaluation_request() -> dict[str, Any]:
    return {
        "questionText": "Reverse a linked list.",
        "questionType": "coding",
        "answer": "def reverse(head): ...",
        "marks": 10,
    }
