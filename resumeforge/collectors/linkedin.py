"""LinkedIn / professional data collector.

Data arrives one of four ways: pasted profile text (handed to the model
as-is), a JSON Resume file, manual entry, or not at all.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..errors import ImportFileError, SchemaValidationError
from ..schemas import LinkedInProfile, parse_record

logger = logging.getLogger(__name__)


class LinkedInInputMethod(str, Enum):
    PASTE = "paste"
    JSON = "json"
    MANUAL = "manual"
    SKIP = "skip"


@dataclass(frozen=True)
class LinkedInResult:
    """What the LinkedIn step produced; at most one field is set."""

    profile: Optional[LinkedInProfile] = None
    raw_pasted_text: Optional[str] = None

    @property
    def empty(self) -> bool:
        return self.profile is None and not self.raw_pasted_text


def parse_skills(text: str) -> List[str]:
    """Split a comma-separated skills line into trimmed, non-empty items."""
    return [item.strip() for item in (text or "").split(",") if item.strip()]


async def collect_linkedin_data(prompter) -> LinkedInResult:
    """Ask the user how to provide LinkedIn data and collect it.

    Raises:
        ImportFileError: The chosen JSON Resume file could not be loaded
    """
    method = LinkedInInputMethod(await prompter.choose_linkedin_method())

    if method == LinkedInInputMethod.MANUAL:
        entered = await prompter.ask_linkedin_manual()
        try:
            profile = parse_record("linkedin_profile", entered)
        except SchemaValidationError as e:
            raise ImportFileError(f"Manual entry is incomplete: {e.violation}") from e
        return LinkedInResult(profile=profile)

    if method == LinkedInInputMethod.PASTE:
        text = (await prompter.ask_linkedin_paste() or "").strip()
        return LinkedInResult(raw_pasted_text=text or None)

    if method == LinkedInInputMethod.JSON:
        path = await prompter.ask_json_resume_path()
        return LinkedInResult(profile=load_json_resume(path))

    return LinkedInResult()


def load_json_resume(path: Union[str, Path]) -> LinkedInProfile:
    """Load a JSON Resume (jsonresume.org) file as a LinkedInProfile.

    Raises:
        ImportFileError: Missing file, invalid JSON, or a record that fails validation
    """
    file_path = Path(path).expanduser().resolve()
    try:
        raw = file_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ImportFileError(
            f"Could not read JSON Resume file {file_path}: {e.strerror or e}",
            hint="Check the path and try again.",
        ) from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ImportFileError(f"Invalid JSON in {file_path}: {e.msg} (line {e.lineno})") from e

    if not isinstance(data, dict):
        raise ImportFileError(f"JSON Resume file must contain an object: {file_path}")

    try:
        profile = parse_record("linkedin_profile", map_json_resume(data))
    except SchemaValidationError as e:
        raise ImportFileError(f"JSON Resume file {file_path} does not map to a profile: {e.violation}") from e

    logger.debug("Loaded JSON Resume for %s from %s", profile.name, file_path)
    return profile


def map_json_resume(data: Dict[str, Any]) -> Dict[str, Any]:
    """Map JSON Resume sections onto LinkedInProfile fields."""
    basics = data.get("basics") or {}
    if not isinstance(basics, dict):
        raise ImportFileError("JSON Resume 'basics' must be an object")
    work = _entries(data, "work")
    education = _entries(data, "education")
    skills = _entries(data, "skills")
    certificates = _entries(data, "certificates")

    mapped: Dict[str, Any] = {
        "name": basics.get("name") or "Unknown",
        "headline": basics.get("label"),
        "summary": basics.get("summary"),
        "location": _location(basics.get("location")),
        "email": basics.get("email"),
        "phone": basics.get("phone"),
        "website": basics.get("url") or basics.get("website"),
        "experience": [
            {
                "title": entry.get("position") or entry.get("title"),
                "company": entry.get("name") or entry.get("company"),
                "location": entry.get("location"),
                "startDate": entry.get("startDate"),
                "endDate": entry.get("endDate"),
                "description": entry.get("summary") or entry.get("description"),
            }
            for entry in work
        ],
        "education": [
            {
                "school": entry.get("institution") or entry.get("school"),
                "degree": entry.get("studyType") or entry.get("degree"),
                "field": entry.get("area") or entry.get("field"),
                "startDate": entry.get("startDate"),
                "endDate": entry.get("endDate"),
            }
            for entry in education
        ],
        "skills": _skills(skills),
    }
    if certificates:
        mapped["certifications"] = [
            {"name": cert.get("name"), "issuer": cert.get("issuer"), "date": cert.get("date")}
            for cert in certificates
        ]
    return mapped


def _location(location: Any) -> Optional[str]:
    if not isinstance(location, dict) or not location.get("city"):
        return None
    region = location.get("region")
    return f"{location['city']}, {region}" if region else location["city"]


def _entries(data: Dict[str, Any], section: str) -> List[Dict[str, Any]]:
    """The list under *section*, each entry checked to be an object."""
    entries = data.get(section) or []
    if not isinstance(entries, list):
        raise ImportFileError(f"JSON Resume '{section}' must be a list")
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ImportFileError(f"JSON Resume '{section}' entry {index} must be an object")
    return entries


def _skills(entries: List[Dict[str, Any]]) -> List[str]:
    result: List[str] = []
    for entry in entries:
        keywords = entry.get("keywords")
        if isinstance(keywords, list) and keywords:
            result.extend(keywords)
        elif isinstance(keywords, str) and keywords.strip():
            result.append(keywords)
        elif entry.get("name"):
            result.append(entry["name"])
    return result
