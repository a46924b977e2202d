"""Model gateway - turns prompts into validated records.

The gateway wraps one ``ChatProvider``. It is built explicitly from resolved
settings and handed to whoever needs it. Each call is a single request with
no retry and no corrective follow-up prompt.
"""

from __future__ import annotations

import json
import logging
import re
import time
from dataclasses import dataclass
from typing import Optional

from .errors import EmptyModelResponseError, ModelResponseError, ModelUnavailableError
from .observability import RunObserver
from .prompts import SYSTEM_PROMPT, build_analyze_job_prompt, build_resume_prompt
from .providers import ChatProvider, GenerationConfig, Message, create_provider
from .schemas import GitHubProfile, JobDescription, LinkedInProfile, Record, ResumeData, parse_record

logger = logging.getLogger(__name__)

_FENCE_OPEN = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_CLOSE = re.compile(r"\s*```$")
_SNIPPET_CHARS = 200


@dataclass
class LLMConfig:
    """Configuration for the model gateway."""

    model: str
    max_tokens: int = 4096
    temperature: Optional[float] = None


def clean_json_response(text: str) -> str:
    """Strip whitespace and one surrounding ``` or ```json fence."""
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = _FENCE_OPEN.sub("", cleaned, count=1)
        cleaned = _FENCE_CLOSE.sub("", cleaned, count=1)
    return cleaned.strip()


class ModelGateway:
    """Provider-agnostic access to the text-generation service."""

    def __init__(
        self,
        provider: ChatProvider,
        config: LLMConfig,
        observer: Optional[RunObserver] = None,
    ):
        self.provider = provider
        self.config = config
        self.observer = observer

    @classmethod
    def from_settings(cls, settings, observer: Optional[RunObserver] = None) -> "ModelGateway":
        provider = create_provider(settings)
        config = LLMConfig(
            model=provider.model,
            max_tokens=settings.max_tokens,
            temperature=settings.temperature,
        )
        return cls(provider, config, observer=observer)

    async def complete(self, system_prompt: str, user_prompt: str, purpose: str = "text") -> str:
        """Send one prompt and return the raw reply text.

        Raises:
            ModelUnavailableError: The provider call failed (network, auth, timeout)
            EmptyModelResponseError: The provider answered without any text
        """
        gen_config = GenerationConfig(
            system_prompt=system_prompt,
            max_tokens=self.config.max_tokens,
            temperature=self.config.temperature,
        )
        prompt_chars = len(system_prompt) + len(user_prompt)
        start = time.time()
        try:
            response = await self.provider.generate([Message.user(user_prompt)], gen_config)
        except Exception as e:
            duration_ms = (time.time() - start) * 1000
            self._record(purpose, prompt_chars, duration_ms, None, success=False)
            logger.debug("Provider call failed for %s", purpose, exc_info=True)
            raise ModelUnavailableError(
                f"AI service request failed: {e}",
                hint="Check your API key, network connection and provider status.",
            ) from e

        duration_ms = (time.time() - start) * 1000
        text = response.text or ""
        self._record(purpose, prompt_chars, duration_ms, response.total_tokens, success=bool(text.strip()))
        if not text.strip():
            raise EmptyModelResponseError("No text response from AI")
        return text

    async def complete_json(self, system_prompt: str, user_prompt: str, kind: str) -> Record:
        """Request a record of *kind* and validate the reply.

        Raises:
            ModelResponseError: The reply was not valid JSON
            SchemaValidationError: The JSON did not match the schema for *kind*
        """
        text = await self.complete(system_prompt, user_prompt, purpose=kind)
        cleaned = clean_json_response(text)
        try:
            data = json.loads(cleaned)
        except json.JSONDecodeError as e:
            snippet = cleaned[:_SNIPPET_CHARS]
            raise ModelResponseError(
                f"AI returned invalid JSON for {kind.replace('_', ' ')}: {e.msg}. Reply began: {snippet!r}"
            ) from e
        return parse_record(kind, data)

    async def analyze_job_description(self, job_text: str) -> JobDescription:
        return await self.complete_json(SYSTEM_PROMPT, build_analyze_job_prompt(job_text), "job_description")

    async def generate_resume(
        self,
        github: Optional[GitHubProfile],
        linkedin: Optional[LinkedInProfile],
        linkedin_raw_text: Optional[str],
        job: JobDescription,
    ) -> ResumeData:
        prompt = build_resume_prompt(github, linkedin, linkedin_raw_text, job)
        return await self.complete_json(SYSTEM_PROMPT, prompt, "resume_data")

    def _record(self, purpose: str, prompt_chars: int, duration_ms: float, tokens: Optional[int], success: bool):
        if self.observer is not None:
            self.observer.log_model_request(
                model=self.config.model,
                purpose=purpose,
                prompt_chars=prompt_chars,
                duration_ms=duration_ms,
                tokens=tokens,
                success=success,
            )
