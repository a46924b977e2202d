"""Configuration validator for ResumeForge startup checks."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from .providers import PROVIDER_DEFAULTS


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass
class ConfigIssue:
    """A single configuration issue."""

    field: str
    message: str
    severity: Severity


KNOWN_KEYS = ("provider", "api_key", "model", "api_base", "max_tokens", "temperature")


def validate_config(raw_config: Dict[str, Any], env: Optional[Mapping[str, str]] = None) -> List[ConfigIssue]:
    """Validate the user config mapping and return a list of issues.

    Args:
        raw_config: Raw config dict from YAML (empty when no file exists)
        env: Environment used to resolve ``${VAR}`` placeholders

    Returns:
        List of ConfigIssue (empty = valid)
    """
    env = os.environ if env is None else env
    issues: List[ConfigIssue] = []

    # --- Provider ---
    provider = raw_config.get("provider")
    if provider is not None:
        if not isinstance(provider, str) or not provider:
            issues.append(
                ConfigIssue(
                    field="provider",
                    message="provider must be a non-empty string",
                    severity=Severity.ERROR,
                )
            )
        elif provider.lower() not in PROVIDER_DEFAULTS:
            issues.append(
                ConfigIssue(
                    field="provider",
                    message=f"Unknown provider '{provider}'. Expected one of: {', '.join(PROVIDER_DEFAULTS.keys())}",
                    severity=Severity.ERROR,
                )
            )

    # --- API Key ---
    api_key = raw_config.get("api_key")
    if api_key is not None:
        if not isinstance(api_key, str):
            issues.append(
                ConfigIssue(
                    field="api_key",
                    message="api_key must be a string",
                    severity=Severity.ERROR,
                )
            )
        elif api_key.startswith("${") and not resolve_placeholder(api_key, env):
            issues.append(
                ConfigIssue(
                    field="api_key",
                    message=f"api_key refers to {api_key} but that variable is not set",
                    severity=Severity.WARNING,
                )
            )

    # --- Model / API base ---
    for field_name in ("model", "api_base"):
        value = raw_config.get(field_name)
        if value is not None and (not isinstance(value, str) or not value):
            issues.append(
                ConfigIssue(
                    field=field_name,
                    message=f"{field_name} must be a non-empty string",
                    severity=Severity.ERROR,
                )
            )

    # --- Temperature ---
    temperature = raw_config.get("temperature")
    if temperature is not None and (
        isinstance(temperature, bool)
        or not isinstance(temperature, (int, float))
        or temperature < 0
        or temperature > 2
    ):
        issues.append(
            ConfigIssue(
                field="temperature",
                message=f"temperature must be a number between 0 and 2, got {temperature}",
                severity=Severity.ERROR,
            )
        )

    # --- Max tokens ---
    max_tokens = raw_config.get("max_tokens")
    if max_tokens is not None and (isinstance(max_tokens, bool) or not isinstance(max_tokens, int) or max_tokens <= 0):
        issues.append(
            ConfigIssue(
                field="max_tokens",
                message=f"max_tokens must be a positive integer, got {max_tokens}",
                severity=Severity.ERROR,
            )
        )

    # --- Unknown keys ---
    for key in raw_config:
        if key not in KNOWN_KEYS:
            issues.append(
                ConfigIssue(
                    field=str(key),
                    message=f"Unknown config key '{key}' is ignored",
                    severity=Severity.WARNING,
                )
            )

    return issues


def resolve_placeholder(value: Any, env: Mapping[str, str]) -> str:
    """Expand a ``${VAR}`` placeholder; plain strings pass through.

    Returns an empty string for non-strings and unset variables.
    """
    if not isinstance(value, str) or not value:
        return ""
    if value.startswith("${") and value.endswith("}"):
        return env.get(value[2:-1], "")
    return value


def has_errors(issues: List[ConfigIssue]) -> bool:
    """Check if any issues are errors (not just warnings)."""
    return any(issue.severity == Severity.ERROR for issue in issues)
