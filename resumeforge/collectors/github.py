"""GitHub collector - profile, owned repositories and profile README.

This is the system boundary for the GitHub REST API; tests inject an
``httpx.AsyncClient`` backed by ``httpx.MockTransport``.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import logging
import re
from typing import Any, Dict, List, Optional, Union

import httpx

from ..errors import GitHubFetchError
from ..schemas import GitHubProfile, parse_record

logger = logging.getLogger(__name__)

GITHUB_API_BASE = "https://api.github.com"
TOP_REPO_LIMIT = 10
REPOS_PER_PAGE = 100

_URL_USERNAME = re.compile(r"github\.com/([\w-]+)")
_VALID_URL = re.compile(r"^https?://github\.com/[\w-]+$")
_VALID_USERNAME = re.compile(r"^[\w-]+$")


def extract_username(url_or_username: str) -> str:
    """Return the GitHub login from a profile URL or a bare/``@`` username."""
    cleaned = url_or_username.strip()
    if cleaned.endswith("/"):
        cleaned = cleaned[:-1]
    match = _URL_USERNAME.search(cleaned)
    if match:
        return match.group(1)
    return cleaned[1:] if cleaned.startswith("@") else cleaned


def validate_github_input(text: str) -> Union[bool, str]:
    """Interactive validator: True when acceptable, else an error message.

    Empty input is accepted since GitHub data is optional.
    """
    if not text:
        return True
    cleaned = text[:-1] if text.endswith("/") else text
    if _VALID_URL.match(cleaned) or _VALID_USERNAME.match(cleaned):
        return True
    return "Enter a valid GitHub URL (https://github.com/username) or username"


def rank_repositories(repos: List[Dict[str, Any]], limit: int = TOP_REPO_LIMIT) -> List[Dict[str, Any]]:
    """Drop forks and keep the *limit* most-starred repositories.

    ``sorted`` is stable, so repositories with equal stars keep API order.
    """
    owned = [repo for repo in repos if not repo.get("fork")]
    owned = sorted(owned, key=lambda repo: repo.get("stargazers_count") or 0, reverse=True)
    return owned[:limit]


def compute_language_counts(repos: List[Dict[str, Any]]) -> Dict[str, int]:
    """Count repositories per primary language, skipping those without one."""
    counts: Dict[str, int] = {}
    for repo in repos:
        language = repo.get("language")
        if language:
            counts[language] = counts.get(language, 0) + 1
    return counts


def _repo_record(repo: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "name": repo.get("name"),
        "description": repo.get("description"),
        "language": repo.get("language"),
        "stars": repo.get("stargazers_count") or 0,
        "forks": repo.get("forks_count") or 0,
        "url": repo.get("html_url"),
        "topics": repo.get("topics") or [],
    }


class GitHubCollector:
    """Fetches a GitHubProfile record from the GitHub REST API."""

    def __init__(
        self,
        token: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        api_base: str = GITHUB_API_BASE,
    ):
        self.token = token
        self.api_base = api_base.rstrip("/")
        self._client = client

    @property
    def headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": "resumeforge",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def fetch_profile(self, url_or_username: str) -> GitHubProfile:
        """Fetch and validate the profile for *url_or_username*.

        Raises:
            GitHubFetchError: The user or repository lookup failed
            SchemaValidationError: The assembled record failed validation
        """
        username = extract_username(url_or_username)
        if not username:
            raise GitHubFetchError("GitHub username is empty")

        if self._client is not None:
            return await self._fetch(self._client, username)
        async with httpx.AsyncClient() as client:
            return await self._fetch(client, username)

    async def _fetch(self, client: httpx.AsyncClient, username: str) -> GitHubProfile:
        try:
            user_resp, repos_resp = await asyncio.gather(
                client.get(f"{self.api_base}/users/{username}", headers=self.headers),
                client.get(
                    f"{self.api_base}/users/{username}/repos",
                    headers=self.headers,
                    params={"type": "owner", "sort": "updated", "per_page": REPOS_PER_PAGE},
                ),
            )
            user_resp.raise_for_status()
            repos_resp.raise_for_status()
            user = user_resp.json()
            repos = repos_resp.json()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            hint = None
            if status == 404:
                message = f"GitHub user '{username}' not found"
            elif status in (401, 403):
                message = f"GitHub API refused the request ({status})"
                hint = "Set GITHUB_TOKEN to raise the rate limit."
            else:
                message = f"GitHub API error {status} for '{username}'"
            raise GitHubFetchError(message, hint=hint) from e
        except (httpx.HTTPError, ValueError) as e:
            raise GitHubFetchError(f"Could not reach GitHub: {e}") from e

        if not isinstance(repos, list):
            raise GitHubFetchError(f"Unexpected repository listing for '{username}'")

        logger.debug("Fetched %d repositories for %s", len(repos), username)
        readme = await self._fetch_readme(client, username)

        data = {
            "username": username,
            "name": user.get("name"),
            "bio": user.get("bio"),
            "company": user.get("company"),
            "location": user.get("location"),
            "blog": user.get("blog") or None,
            "email": user.get("email"),
            "avatarUrl": user.get("avatar_url"),
            "profileUrl": user.get("html_url"),
            "publicRepos": user.get("public_repos"),
            "followers": user.get("followers"),
            "topRepos": [_repo_record(repo) for repo in rank_repositories(repos)],
            "languages": compute_language_counts(repos),
            "readmeContent": readme,
        }
        return parse_record("github_profile", data)

    async def _fetch_readme(self, client: httpx.AsyncClient, username: str) -> Optional[str]:
        """Profile README content, or None when it cannot be read."""
        try:
            resp = await client.get(f"{self.api_base}/repos/{username}/{username}/readme", headers=self.headers)
            resp.raise_for_status()
            content = resp.json().get("content", "")
            return base64.b64decode(content).decode("utf-8")
        except (httpx.HTTPError, ValueError, binascii.Error, AttributeError) as e:
            logger.debug("No profile README for %s: %s", username, e)
            return None
