"""Record schemas and validation for every external and internal payload.

Collectors feed GitHub API responses and imported resume files through this
module, and the model gateway feeds the model's JSON replies through it. All
records are frozen pydantic models. Field names are snake_case in Python and
camelCase on the wire (``startDate``, ``topRepos``). Both spellings are
accepted on input.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Any, Dict, List, Mapping, Optional, Tuple, Type

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    HttpUrl,
    StrictInt,
    StrictStr,
    TypeAdapter,
    ValidationError,
)
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from .errors import SchemaValidationError

_HTTP_URL = TypeAdapter(HttpUrl)


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _check_url(value: str) -> str:
    try:
        _HTTP_URL.validate_python(value)
    except ValidationError:
        raise PydanticCustomError("url_parsing", "Input should be a valid http(s) URL") from None
    return value


OptionalText = Annotated[Optional[StrictStr], BeforeValidator(_blank_to_none)]
Url = Annotated[StrictStr, AfterValidator(_check_url)]


class Record(BaseModel):
    """Base for all records: immutable, camelCase aliases, extra keys ignored."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to alias-keyed JSON data, dropping unset optionals."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


# ---------------------------------------------------------------------------
# GitHub
# ---------------------------------------------------------------------------


class GitHubRepo(Record):
    name: StrictStr
    description: OptionalText = None
    language: OptionalText = None
    stars: StrictInt
    forks: StrictInt = 0
    url: Url
    topics: List[StrictStr] = []


class GitHubProfile(Record):
    username: StrictStr
    name: OptionalText = None
    bio: OptionalText = None
    company: OptionalText = None
    location: OptionalText = None
    blog: OptionalText = None
    email: OptionalText = None
    avatar_url: Url
    profile_url: Url
    public_repos: StrictInt
    followers: StrictInt
    top_repos: List[GitHubRepo]
    languages: Dict[StrictStr, StrictInt]
    readme_content: OptionalText = None


# ---------------------------------------------------------------------------
# LinkedIn / professional data
# ---------------------------------------------------------------------------


class LinkedInExperience(Record):
    title: StrictStr
    company: StrictStr
    location: OptionalText = None
    start_date: StrictStr
    end_date: OptionalText = None
    description: OptionalText = None


class LinkedInEducation(Record):
    school: StrictStr
    degree: OptionalText = None
    field: OptionalText = None
    start_date: OptionalText = None
    end_date: OptionalText = None
    description: OptionalText = None


class LinkedInCertification(Record):
    name: StrictStr
    issuer: StrictStr
    date: OptionalText = None


class LinkedInProfile(Record):
    name: StrictStr
    headline: OptionalText = None
    summary: OptionalText = None
    location: OptionalText = None
    email: OptionalText = None
    phone: OptionalText = None
    website: OptionalText = None
    experience: List[LinkedInExperience]
    education: List[LinkedInEducation]
    skills: List[StrictStr]
    certifications: Optional[List[LinkedInCertification]] = None


# ---------------------------------------------------------------------------
# Job description
# ---------------------------------------------------------------------------


class JobDescription(Record):
    title: StrictStr
    company: OptionalText = None
    description: StrictStr
    requirements: Optional[List[StrictStr]] = None
    keywords: Optional[List[StrictStr]] = None


# ---------------------------------------------------------------------------
# Resume output
# ---------------------------------------------------------------------------


class ResumeContact(Record):
    name: StrictStr
    email: OptionalText = None
    phone: OptionalText = None
    location: OptionalText = None
    website: OptionalText = None
    github: OptionalText = None
    linkedin: OptionalText = None


class ResumeExperience(Record):
    title: StrictStr
    company: StrictStr
    location: OptionalText = None
    start_date: StrictStr
    end_date: OptionalText = None
    bullets: List[StrictStr]


class ResumeEducation(Record):
    school: StrictStr
    degree: StrictStr
    field: OptionalText = None
    start_date: OptionalText = None
    end_date: OptionalText = None
    gpa: OptionalText = None
    highlights: Optional[List[StrictStr]] = None


class ResumeProject(Record):
    name: StrictStr
    description: StrictStr
    technologies: List[StrictStr]
    url: OptionalText = None
    bullets: Optional[List[StrictStr]] = None


class ResumeCertification(Record):
    name: StrictStr
    issuer: StrictStr
    date: OptionalText = None


SKILL_LABELS: Tuple[Tuple[str, str], ...] = (
    ("languages", "Languages"),
    ("frameworks", "Frameworks"),
    ("tools", "Tools"),
    ("other", "Other"),
)


class ResumeSkills(Record):
    languages: Optional[List[StrictStr]] = None
    frameworks: Optional[List[StrictStr]] = None
    tools: Optional[List[StrictStr]] = None
    other: Optional[List[StrictStr]] = None

    def categories(self) -> List[Tuple[str, List[str]]]:
        """Non-empty categories as ``(label, items)`` in display order."""
        result = []
        for attr, label in SKILL_LABELS:
            items = getattr(self, attr)
            if items:
                result.append((label, list(items)))
        return result


class ResumeData(Record):
    contact: ResumeContact
    summary: StrictStr
    experience: List[ResumeExperience]
    education: List[ResumeEducation]
    skills: ResumeSkills
    projects: Optional[List[ResumeProject]] = None
    certifications: Optional[List[ResumeCertification]] = None


# ---------------------------------------------------------------------------
# Validation API
# ---------------------------------------------------------------------------

RECORD_TYPES: Dict[str, Type[Record]] = {
    "github_profile": GitHubProfile,
    "linkedin_profile": LinkedInProfile,
    "job_description": JobDescription,
    "resume_data": ResumeData,
}


@dataclass(frozen=True)
class SchemaViolation:
    """The first constraint a payload violated."""

    path: str
    kind: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one payload against one record kind."""

    ok: bool
    record: Optional[Record] = None
    error: Optional[SchemaViolation] = None


def validate_record(kind: str, data: Any) -> ValidationResult:
    """Validate *data* against the schema for *kind*.

    Args:
        kind: One of the keys of ``RECORD_TYPES``
        data: Parsed JSON value (or an already-built record)

    Returns:
        ValidationResult with either the typed record or the first violation
    """
    try:
        model = RECORD_TYPES[kind]
    except KeyError:
        raise ValueError(f"Unknown record kind: {kind}") from None

    if isinstance(data, model):
        return ValidationResult(ok=True, record=data)
    if not isinstance(data, Mapping):
        return ValidationResult(
            ok=False,
            error=SchemaViolation(
                path="<root>",
                kind="model_type",
                message=f"expected an object, got {type(data).__name__}",
            ),
        )

    try:
        record = model.model_validate(data)
    except ValidationError as exc:
        return ValidationResult(ok=False, error=_first_violation(exc))
    return ValidationResult(ok=True, record=record)


def parse_record(kind: str, data: Any) -> Record:
    """Validate *data* and return the record, raising on the first violation."""
    result = validate_record(kind, data)
    if not result.ok:
        raise SchemaValidationError(kind, result.error)
    return result.record


def validate_github_profile(data: Any) -> ValidationResult:
    return validate_record("github_profile", data)


def validate_linkedin_profile(data: Any) -> ValidationResult:
    return validate_record("linkedin_profile", data)


def validate_job_description(data: Any) -> ValidationResult:
    return validate_record("job_description", data)


def validate_resume_data(data: Any) -> ValidationResult:
    return validate_record("resume_data", data)


def _first_violation(exc: ValidationError) -> SchemaViolation:
    first = exc.errors()[0]
    path = ".".join(str(part) for part in first.get("loc", ())) or "<root>"
    return SchemaViolation(path=path, kind=first.get("type", "invalid"), message=first.get("msg", "invalid value"))
