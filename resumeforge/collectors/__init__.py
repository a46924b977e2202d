"""Profile data collectors."""

from .github import GitHubCollector, compute_language_counts, extract_username, rank_repositories, validate_github_input
from .linkedin import LinkedInInputMethod, LinkedInResult, collect_linkedin_data, load_json_resume, parse_skills

__all__ = [
    "GitHubCollector",
    "LinkedInInputMethod",
    "LinkedInResult",
    "collect_linkedin_data",
    "compute_language_counts",
    "extract_username",
    "load_json_resume",
    "parse_skills",
    "rank_repositories",
    "validate_github_input",
]
