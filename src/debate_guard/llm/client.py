from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from debate_guard._defaults import DEFAULT_MODEL, DEFAULT_TIMEOUT_S, DEFAULT_VISION_MODEL

logger = logging.getLogger(__name__)

# Models whose API does not accept a ``temperature`` parameter.
_NO_TEMPERATURE_PREFIXES = ("o1", "o3", "gpt-5")


class CompletionService(Protocol):
    async def complete(self, prompt: str, system_prompt: str | None = None) -> str: ...

    async def complete_with_image(self, image_url: str, question: str) -> str: ...


class LiteLLMCompletionService:
    """Production completion service backed by litellm."""

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        vision_model: str = DEFAULT_VISION_MODEL,
        temperature: float | None = 0.0,
        max_tokens: int | None = None,
        timeout_s: float = DEFAULT_TIMEOUT_S,
    ) -> None:
        self.model = model
        self.vision_model = vision_model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout_s = timeout_s

    async def complete(self, prompt: str, system_prompt: str | None = None) -> str:
        messages: list[dict[str, Any]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})
        return await self._chat(self.model, messages)

    async def complete_with_image(self, image_url: str, question: str) -> str:
        messages = [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": question},
                    {"type": "image_url", "image_url": {"url": image_url}},
                ],
            }
        ]
        return await self._chat(self.vision_model, messages)

    @retry(
        retry=retry_if_exception_type((ConnectionError, TimeoutError, OSError)),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        reraise=True,
    )
    async def _chat(self, model: str, messages: list[dict[str, Any]]) -> str:
        try:
            from litellm import acompletion  # pragma: no cover
        except ImportError as exc:  # pragma: no cover
            raise RuntimeError(
                "litellm is not installed. Install debate-guard with litellm support or inject a completion service."
            ) from exc

        request: dict[str, Any] = {"model": model, "messages": messages}
        if _should_send_temperature(model, self.temperature):
            request["temperature"] = self.temperature
        if self.max_tokens is not None:
            request["max_tokens"] = self.max_tokens

        logger.debug("Calling %s with %d message(s)", model, len(messages))
        response = await asyncio.wait_for(acompletion(**request), timeout=self.timeout_s)
        content = response.choices[0].message.content
        usage = getattr(response, "usage", None)
        logger.debug("%s used %s tokens", model, getattr(usage, "total_tokens", "?"))
        if content is None:
            raise RuntimeError(f"{model} returned an empty completion")
        return str(content)


class NoopCompletionService:
    async def complete(self, prompt: str, system_prompt: str | None = None) -> str:
        raise RuntimeError("No completion service configured.")

    async def complete_with_image(self, image_url: str, question: str) -> str:
        raise RuntimeError("No completion service configured.")


def _should_send_temperature(model: str, temperature: float | None) -> bool:
    if temperature is None:
        return False
    lower = model.lower().rsplit("/", 1)[-1]
    if any(lower.startswith(prefix) for prefix in _NO_TEMPERATURE_PREFIXES):
        if temperature != 0.0:
            logger.debug(
                "Model %s does not support temperature; ignoring temperature=%.2f",
                model,
                temperature,
            )
        return False
    return True
