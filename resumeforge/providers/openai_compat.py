"""OpenAI-compatible chat completions.

Serves OpenAI itself, Anthropic through its OpenAI-compatible endpoint, and
the other OpenAI-style hosts listed in ``PROVIDER_DEFAULTS``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI

from .types import GenerationConfig, LLMResponse, Message

_USAGE_FIELDS = ("prompt_tokens", "completion_tokens", "total_tokens")


def to_chat_messages(messages: List[Message], system_prompt: str = "") -> List[Dict[str, str]]:
    """Build the ``messages`` payload, system prompt first."""
    payload = [{"role": "system", "content": system_prompt}] if system_prompt else []
    payload.extend(
        {"role": "assistant" if m.role == "assistant" else "user", "content": m.text} for m in messages
    )
    return payload


def content_text(content: Any) -> str:
    """Flatten message content (a string or a list of text parts) to text."""
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, dict):
                parts.append(part.get("text") or "")
            elif part is not None:
                parts.append(part if isinstance(part, str) else getattr(part, "text", "") or "")
        return "".join(str(p) for p in parts)
    return str(content)


def completion_to_response(completion: Any) -> LLMResponse:
    """Normalize a ``ChatCompletion`` into an ``LLMResponse``.

    Raises:
        RuntimeError: The completion carries no choices
    """
    if not completion.choices:
        raise RuntimeError("Empty LLM response: no choices")

    first = completion.choices[0]
    usage = getattr(completion, "usage", None)
    return LLMResponse(
        text=content_text(getattr(first.message, "content", None)),
        usage={name: int(getattr(usage, name, 0) or 0) for name in _USAGE_FIELDS} if usage else None,
        finish_reason=getattr(first, "finish_reason", None),
        raw=completion,
    )


class OpenAICompatibleProvider:
    """One chat-completion request per ``generate`` call."""

    def __init__(
        self,
        api_key: str,
        model: str,
        api_base: str = "",
        client: Optional[AsyncOpenAI] = None,
    ) -> None:
        self.model = model
        self.api_base = api_base or ""
        self.client = client or AsyncOpenAI(api_key=api_key, base_url=self.api_base or None)

    async def generate(self, messages: List[Message], config: GenerationConfig) -> LLMResponse:
        request = self.request_kwargs(to_chat_messages(messages, config.system_prompt), config)
        completion = await self.client.chat.completions.create(**request)
        return completion_to_response(completion)

    def request_kwargs(self, messages: List[Dict[str, str]], config: GenerationConfig) -> Dict[str, Any]:
        request: Dict[str, Any] = {"model": self.model, "messages": messages}
        if config.max_tokens and config.max_tokens > 0:
            request["max_tokens"] = config.max_tokens
        if config.temperature is not None:
            request["temperature"] = config.temperature
        if self._disables_thinking():
            request["extra_body"] = {"thinking": {"type": "disabled"}}
        return request

    def _disables_thinking(self) -> bool:
        # Kimi K2 on Moonshot otherwise prefixes replies with reasoning text.
        return "moonshot.cn" in self.api_base.lower() and (self.model or "").lower().startswith("kimi-k2")
