"""Error taxonomy for ResumeForge runs."""

from __future__ import annotations

from typing import Optional


class ResumeForgeError(Exception):
    """Base error with an optional remediation hint shown to the user."""

    def __init__(self, message: str, hint: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint


class ConfigurationError(ResumeForgeError):
    """Missing or invalid configuration, raised before any network activity."""


class CollectionError(ResumeForgeError):
    """A collector could not gather profile data."""


class GitHubFetchError(CollectionError):
    """The GitHub user or repository lookup failed."""


class ImportFileError(CollectionError):
    """A structured resume file could not be read or mapped."""


class GenerationError(ResumeForgeError):
    """The model gateway could not produce a usable record."""


class ModelUnavailableError(GenerationError):
    """The upstream text-generation service failed or timed out."""


class EmptyModelResponseError(GenerationError):
    """The upstream service answered without any text."""


class ModelResponseError(GenerationError):
    """The model reply was not parseable JSON."""


class SchemaValidationError(ResumeForgeError):
    """A record failed schema validation.

    Raised for collected profiles and model replies alike. Carries the record
    kind and the first violated constraint.
    """

    def __init__(self, kind: str, violation) -> None:
        self.kind = kind
        self.violation = violation
        super().__init__(f"Invalid {kind.replace('_', ' ')}: {violation}")


class NoProfileDataError(ResumeForgeError):
    """Nothing was collected to build a resume from."""

    def __init__(self) -> None:
        super().__init__(
            "No profile data provided. Please provide GitHub or LinkedIn data.",
            hint="Pass --github <user> or choose a LinkedIn input method other than skip.",
        )


class RenderError(ResumeForgeError):
    """A document backend failed to produce its output file."""

    def __init__(self, fmt: str, message: str) -> None:
        self.format = fmt
        super().__init__(f"{fmt.upper()} failed: {message}")
