"""Tests for prompt construction."""

import pytest

from resumeforge.prompts import (
    MAX_JOB_TEXT_CHARS,
    MAX_LINKEDIN_RAW_CHARS,
    MAX_README_CHARS,
    SYSTEM_PROMPT,
    build_analyze_job_prompt,
    build_resume_prompt,
    truncate_text,
)
from resumeforge.schemas import GitHubProfile, GitHubRepo, JobDescription, LinkedInProfile


@pytest.fixture
def job() -> JobDescription:
    return JobDescription(
        title="Backend Engineer",
        company="Acme",
        description="Own the ingestion services.",
        requirements=["5 years Python"],
        keywords=["Python", "Kafka"],
    )


@pytest.fixture
def github() -> GitHubProfile:
    return GitHubProfile(
        username="octocat",
        name="The Octocat",
        avatar_url="https://avatars.githubusercontent.com/u/1",
        profile_url="https://github.com/octocat",
        public_repos=12,
        followers=3,
        top_repos=[
            GitHubRepo(name=f"repo{i}", stars=10 - i, url=f"https://github.com/octocat/repo{i}", language="Go")
            for i in range(8)
        ],
        languages={"Go": 4, "Python": 4, "Rust": 9, "C": 1, "D": 1, "E": 1, "F": 1, "G": 1, "H": 1},
        readme_content="x" * (MAX_README_CHARS + 500),
    )


@pytest.fixture
def linkedin() -> LinkedInProfile:
    return LinkedInProfile(
        name="Ada Lovelace",
        headline="Engineer",
        experience=[{"title": "Engineer", "company": "Acme", "start_date": "2020"}],
        education=[{"school": "UCL", "degree": "BSc"}],
        skills=["Python", "SQL"],
    )


class TestTruncateText:
    def test_short_text_unchanged(self):
        assert truncate_text("hello", 10) == "hello"

    def test_long_text_cut_to_exact_limit(self):
        assert len(truncate_text("a" * 50, 20)) == 20

    def test_zero_limit(self):
        assert truncate_text("abc", 0) == ""

    def test_negative_limit(self):
        with pytest.raises(ValueError):
            truncate_text("abc", -1)


def test_system_prompt_demands_json_only():
    assert SYSTEM_PROMPT.endswith("Never include markdown, explanations, or anything outside the JSON.")


def test_analyze_job_prompt_truncates_job_text():
    prompt = build_analyze_job_prompt("j" * (MAX_JOB_TEXT_CHARS + 100))
    assert "j" * MAX_JOB_TEXT_CHARS in prompt
    assert "j" * (MAX_JOB_TEXT_CHARS + 1) not in prompt
    assert prompt.endswith("Return ONLY valid JSON, no markdown fences or explanation.")


class TestBuildResumePrompt:
    def test_is_deterministic(self, github, linkedin, job):
        first = build_resume_prompt(github, linkedin, None, job)
        second = build_resume_prompt(github, linkedin, None, job)
        assert first == second

    def test_without_linkedin_has_no_linkedin_headers(self, github, job):
        prompt = build_resume_prompt(github, None, None, job)
        assert "## GitHub Profile" in prompt
        assert "LinkedIn" not in prompt

    def test_without_github(self, linkedin, job):
        prompt = build_resume_prompt(None, linkedin, None, job)
        assert "## GitHub Profile" not in prompt
        assert "## LinkedIn/Professional Data" in prompt
        assert "- Headline: Engineer" in prompt

    def test_absent_optionals_leave_no_residue(self, linkedin, job):
        prompt = build_resume_prompt(None, linkedin, None, job)
        assert "N/A" not in prompt
        assert "undefined" not in prompt
        assert "- Summary:" not in prompt
        assert "- Email:" not in prompt
        assert "### Certifications" not in prompt

    def test_top_languages_sorted_by_count_then_name(self, github, job):
        prompt = build_resume_prompt(github, None, None, job)
        line = next(line for line in prompt.splitlines() if line.startswith("- Top Languages:"))
        assert line.startswith("- Top Languages: Rust (9 repos), Go (4 repos), Python (4 repos), C (1 repos)")
        assert line.count("repos)") == 8
        assert "H (1 repos)" not in line

    def test_only_six_repositories(self, github, job):
        prompt = build_resume_prompt(github, None, None, job)
        assert "**repo5**" in prompt
        assert "**repo6**" not in prompt

    def test_readme_truncated(self, github, job):
        prompt = build_resume_prompt(github, None, None, job)
        assert "x" * MAX_README_CHARS in prompt
        assert "x" * (MAX_README_CHARS + 1) not in prompt

    def test_raw_linkedin_text_truncated(self, job):
        prompt = build_resume_prompt(None, None, "r" * (MAX_LINKEDIN_RAW_CHARS + 10), job)
        assert "## LinkedIn Profile (Raw Text" in prompt
        assert "r" * MAX_LINKEDIN_RAW_CHARS in prompt
        assert "r" * (MAX_LINKEDIN_RAW_CHARS + 1) not in prompt

    def test_job_block_and_schema(self, job):
        prompt = build_resume_prompt(None, None, "text", job)
        assert "- Title: Backend Engineer" in prompt
        assert "- Company: Acme" in prompt
        assert "- ATS Keywords: Python, Kafka" in prompt
        assert '"startDate": "string"' in prompt
        assert prompt.endswith("Return ONLY valid JSON. No markdown fences, no explanation text.")
