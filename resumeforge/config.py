"""Provider selection and credential resolution.

Settings are resolved once at startup from the environment (``.env`` is
loaded by the CLI before this runs), the optional user config file, and for
Anthropic the Claude CLI config. Nothing here touches the network.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml

from .config_validator import Severity, resolve_placeholder, validate_config
from .errors import ConfigurationError
from .providers import PROVIDER_DEFAULTS

logger = logging.getLogger(__name__)

DEFAULT_PROVIDER = "anthropic"
DEFAULT_MAX_TOKENS = 4096
AUTO_DETECT_ORDER = ("openai", "anthropic", "gemini")
CONFIG_ENV_VAR = "RESUMEFORGE_CONFIG"
DEFAULT_CONFIG_PATH = Path("~/.resumeforge/config.yaml")
CLAUDE_CONFIG_PATH = Path("~/.claude/config.json")


@dataclass(frozen=True)
class ProviderSettings:
    """Resolved model provider settings for one run."""

    provider: str
    api_key: str
    model: str
    api_base: str = ""
    max_tokens: int = DEFAULT_MAX_TOKENS
    temperature: Optional[float] = None
    key_source: str = ""


def user_config_path(env: Optional[Mapping[str, str]] = None) -> Path:
    env = os.environ if env is None else env
    override = env.get(CONFIG_ENV_VAR, "")
    if override:
        return Path(override).expanduser()
    return DEFAULT_CONFIG_PATH.expanduser()


def load_raw_config(config_path: Optional[Path] = None, env: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Load the user config mapping from YAML.

    A missing file yields an empty mapping. A file that is not valid YAML or
    not a mapping raises ``ConfigurationError``.
    """
    path = Path(config_path) if config_path is not None else user_config_path(env)
    if not path.exists():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(
            f"Could not read config file {path}: {e}",
            hint="Fix the YAML syntax or remove the file.",
        ) from e

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Config file must be a mapping: {path}",
            hint="Use 'key: value' pairs such as 'provider: openai'.",
        )
    logger.debug("Loaded user config from %s", path)
    return data


def select_provider(env: Mapping[str, str], raw_config: Mapping[str, Any]) -> str:
    """Choose the provider: explicit env, then config file, then auto-detect."""
    explicit = (env.get("AI_PROVIDER") or "").strip().lower()
    if explicit:
        return explicit

    configured = raw_config.get("provider")
    if isinstance(configured, str) and configured.strip():
        return configured.strip().lower()

    for name in AUTO_DETECT_ORDER:
        if any(env.get(key) for key in PROVIDER_DEFAULTS[name]["env_keys"]):
            return name
    return DEFAULT_PROVIDER


def resolve_api_key(
    provider: str,
    env: Mapping[str, str],
    raw_config: Mapping[str, Any],
    claude_config_path: Optional[Path] = None,
) -> Tuple[str, str]:
    """Return ``(api_key, source)`` for *provider*, or ``("", "")``."""
    for env_key in PROVIDER_DEFAULTS.get(provider, {}).get("env_keys", ()):
        value = env.get(env_key, "")
        if value:
            return value, env_key

    configured = resolve_placeholder(raw_config.get("api_key"), env)
    if configured:
        return configured, "config"

    if provider == "anthropic":
        key = _read_claude_config_key(claude_config_path or CLAUDE_CONFIG_PATH.expanduser())
        if key:
            return key, "claude-config"

    return "", ""


def resolve_provider_settings(
    env: Optional[Mapping[str, str]] = None,
    config_path: Optional[Path] = None,
    raw_config: Optional[Dict[str, Any]] = None,
    claude_config_path: Optional[Path] = None,
) -> ProviderSettings:
    """Resolve the provider, model and credential for this run.

    Raises:
        ConfigurationError: The config file is invalid, the provider is
            unknown, or no credential was found for it.
    """
    env = os.environ if env is None else env
    if raw_config is None:
        raw_config = load_raw_config(config_path, env)

    errors = [issue for issue in validate_config(raw_config, env) if issue.severity == Severity.ERROR]
    if errors:
        first = errors[0]
        raise ConfigurationError(
            f"Invalid config [{first.field}]: {first.message}",
            hint=f"Edit {config_path or user_config_path(env)} and try again.",
        )

    provider = select_provider(env, raw_config)
    if provider not in PROVIDER_DEFAULTS:
        raise ConfigurationError(
            f"Unknown provider '{provider}'",
            hint=f"Set AI_PROVIDER to one of: {', '.join(PROVIDER_DEFAULTS.keys())}",
        )

    defaults = PROVIDER_DEFAULTS[provider]
    api_key, key_source = resolve_api_key(provider, env, raw_config, claude_config_path)
    if not api_key:
        env_keys = defaults["env_keys"]
        raise ConfigurationError(
            f"No API key found for provider '{provider}'",
            hint=f"Quick fix: export {env_keys[0]}=your_key_here\n"
            f"   Or add api_key to {config_path or user_config_path(env)}",
        )

    settings = ProviderSettings(
        provider=provider,
        api_key=api_key,
        model=raw_config.get("model") or defaults["model"],
        api_base=raw_config.get("api_base") or defaults["api_base"],
        max_tokens=raw_config.get("max_tokens") or DEFAULT_MAX_TOKENS,
        temperature=raw_config.get("temperature"),
        key_source=key_source,
    )
    logger.debug("Using provider=%s model=%s key_source=%s", settings.provider, settings.model, key_source)
    return settings


def github_token(env: Optional[Mapping[str, str]] = None) -> Optional[str]:
    env = os.environ if env is None else env
    return env.get("GITHUB_TOKEN") or None


def _read_claude_config_key(path: Path) -> str:
    if not path.exists():
        return ""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.debug("Ignoring unreadable Claude config %s: %s", path, e)
        return ""
    if not isinstance(data, dict):
        return ""
    return data.get("apiKey") or data.get("api_key") or ""
