"""Tests for the model gateway."""

import json
from types import SimpleNamespace

import pytest

from resumeforge.errors import (
    EmptyModelResponseError,
    ModelResponseError,
    ModelUnavailableError,
    SchemaValidationError,
)
from resumeforge.llm import LLMConfig, ModelGateway, clean_json_response
from resumeforge.observability import RunObserver
from resumeforge.prompts import SYSTEM_PROMPT
from resumeforge.providers.types import LLMResponse
from resumeforge.schemas import JobDescription, ResumeData


class FakeProvider:
    """Returns queued replies and records every request."""

    def __init__(self, *replies):
        self.model = "fake-model"
        self.replies = list(replies)
        self.calls = []

    async def generate(self, messages, config):
        self.calls.append(SimpleNamespace(messages=messages, config=config))
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return LLMResponse(text=reply, usage={"total_tokens": 12})


def _gateway(*replies, observer=None):
    provider = FakeProvider(*replies)
    return ModelGateway(provider, LLMConfig(model="fake-model", max_tokens=4096), observer=observer), provider


class TestCleanJsonResponse:
    def test_plain_json_untouched(self):
        assert clean_json_response('{"a": 1}') == '{"a": 1}'

    def test_strips_json_fence(self):
        assert clean_json_response('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_strips_bare_fence_and_whitespace(self):
        assert clean_json_response('  \n```\n{"a": 1}\n```  \n') == '{"a": 1}'


@pytest.mark.asyncio
async def test_complete_passes_system_prompt_and_max_tokens():
    gateway, provider = _gateway("hello")
    text = await gateway.complete("system text", "user text")
    assert text == "hello"
    call = provider.calls[0]
    assert call.config.system_prompt == "system text"
    assert call.config.max_tokens == 4096
    assert [m.text for m in call.messages] == ["user text"]
    assert call.messages[0].role == "user"


@pytest.mark.asyncio
async def test_provider_failure_becomes_model_unavailable():
    gateway, _ = _gateway(ConnectionError("connection reset"))
    with pytest.raises(ModelUnavailableError) as exc_info:
        await gateway.complete("s", "u")
    assert "connection reset" in str(exc_info.value)


@pytest.mark.asyncio
async def test_empty_reply_raises():
    gateway, _ = _gateway("   ")
    with pytest.raises(EmptyModelResponseError):
        await gateway.complete("s", "u")


@pytest.mark.asyncio
async def test_analyze_job_description_accepts_fenced_json():
    payload = {"title": "Engineer", "company": "Acme", "description": "Build", "keywords": ["Go"]}
    gateway, provider = _gateway(f"```json\n{json.dumps(payload)}\n```")
    job = await gateway.analyze_job_description("We are hiring an engineer to build things.")
    assert isinstance(job, JobDescription)
    assert job.company == "Acme"
    assert provider.calls[0].config.system_prompt == SYSTEM_PROMPT
    assert "We are hiring an engineer" in provider.calls[0].messages[0].text


@pytest.mark.asyncio
async def test_invalid_json_raises_model_response_error():
    gateway, _ = _gateway("Sure! Here is your resume: {")
    with pytest.raises(ModelResponseError) as exc_info:
        await gateway.analyze_job_description("some job text here")
    assert "Sure! Here is your resume" in str(exc_info.value)


@pytest.mark.asyncio
async def test_schema_violation_is_not_retried():
    gateway, provider = _gateway(json.dumps({"company": "Acme"}))
    with pytest.raises(SchemaValidationError) as exc_info:
        await gateway.analyze_job_description("some job text here")
    assert exc_info.value.violation.path == "title"
    assert len(provider.calls) == 1


@pytest.mark.asyncio
async def test_generate_resume(resume_payload):
    job = JobDescription(title="Engineer", description="Build")
    gateway, provider = _gateway(json.dumps(resume_payload))
    resume = await gateway.generate_resume(None, None, "pasted profile text", job)
    assert isinstance(resume, ResumeData)
    assert resume.contact.name == "Ada Lovelace"
    assert "pasted profile text" in provider.calls[0].messages[0].text


@pytest.mark.asyncio
async def test_observer_records_model_requests():
    observer = RunObserver()
    gateway, _ = _gateway("ok", observer=observer)
    await gateway.complete("s", "user", purpose="job_description")
    stats = observer.get_stats()
    assert stats["model_requests"] == 1
    assert stats["total_tokens"] == 12
    event = observer.events[0]
    assert event.data["purpose"] == "job_description"
    assert event.data["prompt_chars"] == 5
