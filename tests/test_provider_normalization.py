"""Provider normalization and factory tests."""

from types import SimpleNamespace

import pytest

from resumeforge.config import ProviderSettings
from resumeforge.providers import PROVIDER_DEFAULTS, create_provider
from resumeforge.providers.gemini import GeminiProvider
from resumeforge.providers.openai_compat import (
    OpenAICompatibleProvider,
    completion_to_response,
    content_text,
    to_chat_messages,
)
from resumeforge.providers.types import GenerationConfig, Message


def _openai_provider(model="gpt-4o", api_base=""):
    return OpenAICompatibleProvider(api_key="test-key", model=model, api_base=api_base)


def test_openai_completion_normalizes_list_content_and_usage():
    completion = SimpleNamespace(
        choices=[
            SimpleNamespace(
                message=SimpleNamespace(
                    content=[
                        {"type": "text", "text": "hello "},
                        {"type": "text", "text": "world"},
                    ],
                ),
                finish_reason="stop",
            )
        ],
        usage=SimpleNamespace(prompt_tokens=10, completion_tokens=20, total_tokens=30),
    )

    response = completion_to_response(completion)

    assert response.text == "hello world"
    assert response.finish_reason == "stop"
    assert response.usage == {"prompt_tokens": 10, "completion_tokens": 20, "total_tokens": 30}
    assert response.total_tokens == 30


def test_openai_completion_without_choices_raises():
    with pytest.raises(RuntimeError, match="no choices"):
        completion_to_response(SimpleNamespace(choices=[], usage=None))


def test_openai_messages_put_system_prompt_first():
    messages = to_chat_messages([Message.user("hi")], "be terse")
    assert messages == [
        {"role": "system", "content": "be terse"},
        {"role": "user", "content": "hi"},
    ]


def test_chat_kwargs_include_max_tokens_and_optional_temperature():
    provider = _openai_provider()
    kwargs = provider.request_kwargs([], GenerationConfig(max_tokens=4096))
    assert kwargs["max_tokens"] == 4096
    assert "temperature" not in kwargs
    assert "extra_body" not in kwargs

    kwargs = provider.request_kwargs([], GenerationConfig(max_tokens=100, temperature=0.2))
    assert kwargs["temperature"] == 0.2


def test_kimi_k2_disables_thinking():
    provider = _openai_provider(model="kimi-k2-turbo", api_base="https://api.moonshot.cn/v1")
    kwargs = provider.request_kwargs([], GenerationConfig())
    assert kwargs["extra_body"] == {"thinking": {"type": "disabled"}}


@pytest.mark.asyncio
async def test_openai_generate_uses_chat_completions():
    captured = {}

    async def create(**kwargs):
        captured.update(kwargs)
        return SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content='{"ok": true}'), finish_reason="stop")],
            usage=None,
        )

    client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
    provider = OpenAICompatibleProvider(api_key="k", model="gpt-4o", client=client)
    response = await provider.generate([Message.user("prompt")], GenerationConfig(system_prompt="sys"))

    assert response.text == '{"ok": true}'
    assert captured["model"] == "gpt-4o"
    assert captured["messages"][0] == {"role": "system", "content": "sys"}


def test_gemini_response_normalization():
    response = SimpleNamespace(
        candidates=[
            SimpleNamespace(
                content=SimpleNamespace(parts=[SimpleNamespace(text="part one "), SimpleNamespace(text="two")]),
                finish_reason="STOP",
            )
        ],
        usage_metadata=SimpleNamespace(prompt_token_count=5, candidates_token_count=7, total_token_count=12),
    )
    provider = GeminiProvider(api_key="k", model="gemini-2.5-flash", client=object())
    normalized = provider._from_gemini_response(response)
    assert normalized.text == "part one two"
    assert normalized.total_tokens == 12


@pytest.mark.asyncio
async def test_gemini_generate_runs_blocking_call():
    calls = []

    def generate_content(**kwargs):
        calls.append(kwargs)
        return SimpleNamespace(
            candidates=[SimpleNamespace(content=SimpleNamespace(parts=[SimpleNamespace(text="hi")]), finish_reason=None)],
            usage_metadata=None,
        )

    client = SimpleNamespace(models=SimpleNamespace(generate_content=generate_content))
    provider = GeminiProvider(api_key="k", model="gemini-2.5-flash", client=client)
    response = await provider.generate([Message.user("prompt")], GenerationConfig(system_prompt="sys", max_tokens=50))

    assert response.text == "hi"
    assert calls[0]["model"] == "gemini-2.5-flash"
    assert calls[0]["config"].system_instruction == "sys"
    assert calls[0]["config"].max_output_tokens == 50


class TestCreateProvider:
    def test_anthropic_uses_openai_compatible_endpoint(self):
        provider = create_provider(ProviderSettings(provider="anthropic", api_key="k", model=""))
        assert isinstance(provider, OpenAICompatibleProvider)
        assert provider.api_base == PROVIDER_DEFAULTS["anthropic"]["api_base"]
        assert provider.model == PROVIDER_DEFAULTS["anthropic"]["model"]

    def test_gemini(self):
        provider = create_provider(ProviderSettings(provider="gemini", api_key="k", model="gemini-2.5-pro"))
        assert isinstance(provider, GeminiProvider)
        assert provider.model == "gemini-2.5-pro"

    def test_custom_api_base_wins(self):
        provider = create_provider(
            ProviderSettings(provider="openai", api_key="k", model="gpt-4o", api_base="http://localhost:8080/v1")
        )
        assert provider.api_base == "http://localhost:8080/v1"

    def test_unknown_provider(self):
        with pytest.raises(ValueError):
            create_provider(ProviderSettings(provider="nope", api_key="k", model="m"))


def test_content_text_handles_mixed_parts():
    assert content_text(None) == ""
    assert content_text(["a", None, SimpleNamespace(text="b"), {"text": None}]) == "ab"
