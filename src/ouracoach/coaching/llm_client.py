"""Anthropic Claude API client wrapper with token tracking and cost estimation."""

import logging
import time
from dataclasses import dataclass

import anthropic

from ouracoach.config import get_settings

logger = logging.getLogger(__name__)

# Pricing per million tokens
MODEL_PRICING: dict[str, dict[str, float]] = {
    "claude-sonnet-4-5": {"input": 3.0, "output": 15.0},
    "claude-haiku-4-5": {"input": 1.0, "output": 5.0},
}


@dataclass
class LLMResponse:
    """Result of an LLM API call."""

    content: str
    model: str
    input_tokens: int
    output_tokens: int
    latency_ms: int
    estimated_cost_usd: float


def _estimate_cost(model: str, input_tokens: int, output_tokens: int) -> float:
    pricing = MODEL_PRICING.get(model, {"input": 3.0, "output": 15.0})
    return (input_tokens * pricing["input"] + output_tokens * pricing["output"]) / 1_000_000


class LLMClient:
    """Wrapper around the async Anthropic Python SDK."""

    def __init__(self, api_key: str | None = None) -> None:
        settings = get_settings()
        self._api_key = api_key or settings.claude_api_key
        self._client: anthropic.AsyncAnthropic | None = None
        self._model = settings.claude_model
        self._title_model = settings.claude_title_model

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    @property
    def client(self) -> anthropic.AsyncAnthropic:
        if self._client is None:
            self._client = anthropic.AsyncAnthropic(api_key=self._api_key)
        return self._client

    async def call(
        self,
        *,
        system: str,
        messages: list[dict[str, str]],
        model: str | None = None,
        max_tokens: int = 1024,
    ) -> LLMResponse:
        """Send a conversation to Claude and return the response with usage metadata.

        Args:
            system: System prompt (coach persona + wearable context).
            messages: Alternating user/assistant turns, ending with a user turn.
            model: Model ID to use. Defaults to the coaching model.
            max_tokens: Maximum tokens in the response.

        Raises:
            anthropic.APIError: On API failures (after SDK-level retries).
        """
        model = model or self._model
        start = time.monotonic()

        response = await self.client.messages.create(
            model=model,
            max_tokens=max_tokens,
            system=system,
            messages=messages,  # type: ignore[arg-type]
        )

        latency_ms = int((time.monotonic() - start) * 1000)
        input_tokens = response.usage.input_tokens
        output_tokens = response.usage.output_tokens

        content = ""
        for block in response.content:
            if block.type == "text":
                content += block.text

        cost = _estimate_cost(model, input_tokens, output_tokens)
        logger.info(
            "LLM call: model=%s input=%d output=%d cost=$%.4f latency=%dms",
            model,
            input_tokens,
            output_tokens,
            cost,
            latency_ms,
        )

        return LLMResponse(
            content=content,
            model=model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            latency_ms=latency_ms,
            estimated_cost_usd=cost,
        )

    @property
    def coach_model(self) -> str:
        return self._model

    @property
    def title_model(self) -> str:
        return self._title_model
