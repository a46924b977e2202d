"""Prompt construction for job analysis and resume generation.

Everything here is a pure function of its inputs: identical records always
produce byte-identical prompts.
"""

from __future__ import annotations

from typing import List, Optional

from .schemas import GitHubProfile, JobDescription, LinkedInProfile

MAX_JOB_TEXT_CHARS = 12000
MAX_README_CHARS = 2000
MAX_LINKEDIN_RAW_CHARS = 4000
TOP_LANGUAGES = 8
TOP_REPOSITORIES = 6

SYSTEM_PROMPT = """You are an expert resume writer and career coach. You create highly effective, ATS-optimized resumes that:
- Use strong action verbs and quantified achievements
- Are tailored to the specific job description
- Highlight transferable skills and relevant experience
- Follow modern resume best practices (concise, impactful, keyword-rich)
- Present information in reverse chronological order
- Keep bullet points to 1-2 lines each, starting with action verbs
- Use industry-standard terminology that ATS systems recognize

You ALWAYS output structured JSON matching the exact schema requested. Never include markdown, explanations, or anything outside the JSON."""

RESUME_JSON_SCHEMA = """{
  "contact": {
    "name": "string",
    "email": "string (optional)",
    "phone": "string (optional)",
    "location": "string (optional)",
    "website": "string (optional)",
    "github": "string (optional)",
    "linkedin": "string (optional)"
  },
  "summary": "string - 2-3 sentence professional summary",
  "experience": [
    {
      "title": "string",
      "company": "string",
      "location": "string (optional)",
      "startDate": "string",
      "endDate": "string (optional, omit for current role)",
      "bullets": ["string - achievement-focused bullet points"]
    }
  ],
  "education": [
    {
      "school": "string",
      "degree": "string",
      "field": "string (optional)",
      "startDate": "string (optional)",
      "endDate": "string (optional)",
      "gpa": "string (optional)",
      "highlights": ["string (optional)"]
    }
  ],
  "skills": {
    "languages": ["string"],
    "frameworks": ["string"],
    "tools": ["string"],
    "other": ["string"]
  },
  "projects": [
    {
      "name": "string",
      "description": "string",
      "technologies": ["string"],
      "url": "string (optional)",
      "bullets": ["string (optional)"]
    }
  ],
  "certifications": [
    {
      "name": "string",
      "issuer": "string",
      "date": "string (optional)"
    }
  ]
}"""

RESUME_INSTRUCTIONS = """## Instructions
1. Tailor the resume specifically for this job - mirror keywords from the JD
2. Write a compelling professional summary (2-3 sentences) that positions the candidate for this role
3. For experience bullets: use strong action verbs, quantify where possible, focus on impact
4. Select and prioritize skills that match the job requirements
5. Include relevant projects from GitHub if applicable
6. If data is sparse, use what's available - don't fabricate information
7. Organize skills into categories: languages, frameworks, tools, other
8. Omit any optional field you have no data for instead of returning an empty string"""


def truncate_text(text: str, limit: int) -> str:
    """Cut *text* to at most *limit* characters."""
    if limit < 0:
        raise ValueError("limit must be non-negative")
    if len(text) <= limit:
        return text
    return text[:limit]


def build_analyze_job_prompt(job_text: str) -> str:
    """Prompt asking the model to extract a JobDescription record."""
    return f'''Analyze this job description and extract structured data. Return a JSON object with these fields:
- title: The job title
- company: The company name (if mentioned)
- description: A 2-3 sentence summary of the role
- requirements: An array of key requirements/qualifications
- keywords: An array of important keywords for ATS optimization (technical skills, tools, methodologies)

Job Description:
"""
{truncate_text(job_text.strip(), MAX_JOB_TEXT_CHARS)}
"""

Return ONLY valid JSON, no markdown fences or explanation.'''


def build_resume_prompt(
    github: Optional[GitHubProfile],
    linkedin: Optional[LinkedInProfile],
    linkedin_raw_text: Optional[str],
    job: JobDescription,
) -> str:
    """Prompt asking the model for a ResumeData record tailored to *job*.

    Profile blocks are included only for the sources that were collected.
    """
    blocks: List[str] = [
        "Generate a tailored, ATS-optimized resume based on the candidate's profile data "
        "and the target job description.",
        _job_block(job),
    ]
    if github is not None:
        blocks.append(_github_block(github))
    if linkedin is not None:
        blocks.append(_linkedin_block(linkedin))
    if linkedin_raw_text and linkedin_raw_text.strip():
        blocks.append(_raw_linkedin_block(linkedin_raw_text))
    blocks.append(RESUME_INSTRUCTIONS)
    blocks.append(f"Return a JSON object matching this EXACT schema:\n{RESUME_JSON_SCHEMA}")
    blocks.append("Return ONLY valid JSON. No markdown fences, no explanation text.")
    return "\n\n".join(blocks)


def _bullet(label: str, value: Optional[str]) -> List[str]:
    return [f"- {label}: {value}"] if value else []


def _job_block(job: JobDescription) -> str:
    lines = ["## Target Job", f"- Title: {job.title}"]
    lines += _bullet("Company", job.company)
    lines.append(f"- Description: {job.description}")
    if job.requirements:
        lines.append(f"- Key Requirements: {'; '.join(job.requirements)}")
    if job.keywords:
        lines.append(f"- ATS Keywords: {', '.join(job.keywords)}")
    return "\n".join(lines)


def _github_block(github: GitHubProfile) -> str:
    lines = ["## GitHub Profile", f"- Username: {github.username}"]
    lines += _bullet("Name", github.name)
    lines += _bullet("Bio", github.bio)
    lines += _bullet("Company", github.company)
    lines += _bullet("Location", github.location)
    lines += _bullet("Blog/Website", github.blog)
    lines.append(f"- Public Repos: {github.public_repos}")

    ranked = sorted(github.languages.items(), key=lambda item: (-item[1], item[0]))[:TOP_LANGUAGES]
    if ranked:
        lines.append("- Top Languages: " + ", ".join(f"{lang} ({count} repos)" for lang, count in ranked))

    repos = github.top_repos[:TOP_REPOSITORIES]
    if repos:
        lines.append("")
        lines.append("### Top Repositories:")
        for repo in repos:
            line = f"- **{repo.name}** ({repo.stars}★)"
            if repo.description:
                line += f": {repo.description}"
            if repo.language:
                line += f" [{repo.language}]"
            if repo.topics:
                line += f" Topics: {', '.join(repo.topics)}"
            lines.append(line)

    if github.readme_content:
        lines.append("")
        lines.append("### Profile README:")
        lines.append(truncate_text(github.readme_content.strip(), MAX_README_CHARS))
    return "\n".join(lines)


def _linkedin_block(linkedin: LinkedInProfile) -> str:
    lines = ["## LinkedIn/Professional Data", f"- Name: {linkedin.name}"]
    lines += _bullet("Headline", linkedin.headline)
    lines += _bullet("Summary", linkedin.summary)
    lines += _bullet("Location", linkedin.location)
    lines += _bullet("Email", linkedin.email)
    lines += _bullet("Phone", linkedin.phone)
    lines += _bullet("Website", linkedin.website)

    if linkedin.experience:
        lines += ["", "### Work Experience:"]
        for exp in linkedin.experience:
            line = f"- **{exp.title}** at {exp.company} ({exp.start_date} - {exp.end_date or 'Present'})"
            if exp.location:
                line += f", {exp.location}"
            lines.append(line)
            if exp.description:
                lines.append(f"  {exp.description}")

    if linkedin.education:
        lines += ["", "### Education:"]
        for edu in linkedin.education:
            lines.append(f"- {_education_line(edu)}")

    if linkedin.skills:
        lines += ["", f"### Skills: {', '.join(linkedin.skills)}"]
    if linkedin.certifications:
        certs = ", ".join(f"{c.name} ({c.issuer})" for c in linkedin.certifications)
        lines += ["", f"### Certifications: {certs}"]
    return "\n".join(lines)


def _education_line(edu) -> str:
    degree = " in ".join(part for part in (edu.degree, edu.field) if part)
    text = f"{degree} at {edu.school}" if degree else edu.school
    dates = " - ".join(part for part in (edu.start_date, edu.end_date) if part)
    if dates:
        text += f" ({dates})"
    return text


def _raw_linkedin_block(raw_text: str) -> str:
    return (
        "## LinkedIn Profile (Raw Text - extract relevant info):\n"
        '"""\n'
        f"{truncate_text(raw_text.strip(), MAX_LINKEDIN_RAW_CHARS)}\n"
        '"""'
    )
