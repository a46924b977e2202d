"""Global pytest fixtures for deterministic test environment."""

from __future__ import annotations

import pytest

from resumeforge.schemas import ResumeData


@pytest.fixture(autouse=True)
def _isolate_runtime_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Clear local runtime env that can leak into tests on developer machines."""
    for key in (
        "AI_PROVIDER",
        "OPENAI_API_KEY",
        "ANTHROPIC_API_KEY",
        "CLAUDE_API_KEY",
        "GEMINI_API_KEY",
        "DEEPSEEK_API_KEY",
        "KIMI_API_KEY",
        "GLM_API_KEY",
        "MINIMAX_API_KEY",
        "GITHUB_TOKEN",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("RESUMEFORGE_CONFIG", str(tmp_path / "no-such-config.yaml"))
    monkeypatch.setattr("resumeforge.config.CLAUDE_CONFIG_PATH", tmp_path / "no-claude-config.json")


@pytest.fixture
def resume_payload() -> dict:
    """ResumeData-shaped JSON as a model would return it."""
    return {
        "contact": {
            "name": "Ada Lovelace",
            "email": "ada@example.com",
            "phone": "",
            "location": "London, UK",
            "github": "ada",
        },
        "summary": "Engineer who turns analytical engines into shipped products.",
        "experience": [
            {
                "title": "Senior Engineer",
                "company": "Analytical Co",
                "location": "London",
                "startDate": "2020",
                "bullets": ["Built the difference engine pipeline", "Cut batch time by 40%"],
            }
        ],
        "education": [
            {
                "school": "University of London",
                "degree": "BSc",
                "field": "Mathematics",
                "startDate": "2012",
                "endDate": "2016",
            }
        ],
        "skills": {"languages": ["Python", "TypeScript"], "tools": ["Docker"], "frameworks": []},
        "projects": [
            {
                "name": "engine",
                "description": "Numerical toolkit",
                "technologies": ["Python"],
                "url": "https://github.com/ada/engine",
            }
        ],
        "certifications": [{"name": "CKA", "issuer": "CNCF", "date": "2023"}],
    }


@pytest.fixture
def resume(resume_payload) -> ResumeData:
    return ResumeData.model_validate(resume_payload)
