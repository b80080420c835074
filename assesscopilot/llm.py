import json
import logging
from typing import Any, Optional, Protocol, TypeVar

from anthropic import AsyncAnthropic
from pydantic import BaseModel, ValidationError

from .config import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class InvalidModelJSON(ValueError):
    def __init__(self, raw_text: str, error: str, kind: str):
        super().__init__(f"Model output failure ({kind}): {error}")
        self.raw_text = raw_text
        self.error = error
        self.kind = kind


class EmptyModelOutput(InvalidModelJSON):
    def __init__(self):
        super().__init__(
            raw_text="",
            error="No text content found in model response",
            kind="empty_output",
        )


class ReasoningInvoker(Protocol):
    """Send a prompt and get back a value already shaped to ``contract``.

    Implementations either return a validated instance or raise; they never
    hand back partially conforming data.
    """

    async def invoke(self, prompt: str, contract: type[T], *, system: Optional[str] = None) -> T:
        ...


def resolve_client(client: Any | None = None, api_key: str | None = None) -> Any:
    if client is not None:
        return client
    if not api_key:
        raise RuntimeError("api_key is required when client is not provided")
    return AsyncAnthropic(api_key=api_key, max_retries=0)


def extract_text(resp) -> str:
    parts = []
    for block in resp.content:
        if hasattr(block, "text") and block.text:
            parts.append(block.text)
    raw_text = "".join(parts)
    if not raw_text.strip():
        raise EmptyModelOutput()
    return raw_text.strip()


def parse_contract(raw: str, contract: type[T]) -> T:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise InvalidModelJSON(raw_text=raw, error=str(e), kind="json_decode") from e

    try:
        return contract.model_validate(data)
    except ValidationError as e:
        raise InvalidModelJSON(raw_text=raw, error=str(e), kind="schema_validation") from e


class AnthropicInvoker:
    def __init__(
        self,
        settings: Settings | None = None,
        *,
        client: Any | None = None,
    ):
        self.settings = settings or Settings()
        self._owns_client = client is None
        self._client = resolve_client(client=client, api_key=self.settings.api_key)

    async def aclose(self) -> None:
        """Close the HTTP client if this invoker created it."""
        if self._owns_client:
            await self._client.close()

    async def invoke(self, prompt: str, contract: type[T], *, system: Optional[str] = None) -> T:
        request: dict[str, Any] = {
            "model": self.settings.model,
            "max_tokens": self.settings.max_tokens,
            "temperature": self.settings.temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system:
            request["system"] = system

        logger.debug("Invoking %s for %s", self.settings.model, contract.__name__)
        resp = await self._client.messages.create(**request)

        raw = extract_text(resp)
        return parse_contract(raw, contract)
