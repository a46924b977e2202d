"""Provider factory and defaults."""

from __future__ import annotations

from typing import Any, Dict

from .base import ChatProvider
from .gemini import GeminiProvider
from .openai_compat import OpenAICompatibleProvider
from .types import GenerationConfig, LLMResponse, Message

PROVIDER_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "openai": {"api_base": "", "env_keys": ("OPENAI_API_KEY",), "model": "gpt-4o"},
    "anthropic": {
        "api_base": "https://api.anthropic.com/v1/",
        "env_keys": ("ANTHROPIC_API_KEY", "CLAUDE_API_KEY"),
        "model": "claude-sonnet-4-5-20250929",
    },
    "gemini": {"api_base": "", "env_keys": ("GEMINI_API_KEY",), "model": "gemini-2.5-flash"},
    "glm": {"api_base": "https://open.bigmodel.cn/api/paas/v4", "env_keys": ("GLM_API_KEY",), "model": "glm-4-plus"},
    "kimi": {"api_base": "https://api.moonshot.cn/v1", "env_keys": ("KIMI_API_KEY",), "model": "moonshot-v1-32k"},
    "deepseek": {"api_base": "https://api.deepseek.com", "env_keys": ("DEEPSEEK_API_KEY",), "model": "deepseek-chat"},
    "minimax": {"api_base": "https://api.minimax.chat/v1", "env_keys": ("MINIMAX_API_KEY",), "model": "MiniMax-Text-01"},
}


def create_provider(settings) -> ChatProvider:
    """Build the chat provider described by resolved ``ProviderSettings``."""
    provider_name = (settings.provider or "anthropic").lower()
    if provider_name not in PROVIDER_DEFAULTS:
        raise ValueError(f"Unknown provider: {settings.provider}")

    defaults = PROVIDER_DEFAULTS[provider_name]
    model = settings.model or defaults["model"]

    if provider_name == "gemini":
        return GeminiProvider(api_key=settings.api_key, model=model)

    base = settings.api_base or defaults.get("api_base", "")
    return OpenAICompatibleProvider(
        api_key=settings.api_key,
        model=model,
        api_base=base,
    )


__all__ = [
    "ChatProvider",
    "GeminiProvider",
    "GenerationConfig",
    "LLMResponse",
    "Message",
    "OpenAICompatibleProvider",
    "PROVIDER_DEFAULTS",
    "create_provider",
]
