"""Settings loading for mkrepo.

Settings are layered: built-in defaults, then the optional YAML settings
file, then environment variables, then CLI flags (applied by the caller
through ``Settings.with_overrides``).
"""

import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path

import yaml

from .errors import ConfigError
from .paths import DEFAULT_TEMPLATE_ROOT, get_settings_path, get_template_root

_logging = logging.getLogger(__name__)

DEFAULT_COMMIT_MESSAGE = "Initial commit via mkrepo"
VISIBILITIES = ("private", "public", "internal")
TRUTHY = {"1", "true", "yes", "on"}


def is_test_mode(environ=None) -> bool:
    """Return True when TEST_MODE is set to a truthy value."""
    env = os.environ if environ is None else environ
    return env.get("TEST_MODE", "").strip().lower() in TRUTHY


@dataclass(frozen=True)
class Settings:
    """Per-run settings. Immutable once the run starts."""

    template_root: Path = field(
        default_factory=lambda: Path(DEFAULT_TEMPLATE_ROOT).expanduser()
    )
    commit_message: str = DEFAULT_COMMIT_MESSAGE
    publish_visibility: str = "private"
    test_mode: bool = False
    serve: bool = False
    debug: bool = False

    def __post_init__(self):
        if not self.commit_message or not isinstance(self.commit_message, str):
            raise ValueError("commit_message must be a non-empty string")
        if self.publish_visibility not in VISIBILITIES:
            raise ValueError(
                f"publish_visibility must be one of {', '.join(VISIBILITIES)}"
            )

    def with_overrides(self, **changes) -> "Settings":
        """Return a copy with the non-None values of ``changes`` applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


_FIELD_TYPES = {
    "template_root": str,
    "commit_message": str,
    "publish_visibility": str,
}


def validate_settings(data: dict) -> dict:
    """Validate raw settings file data.

    Args:
        data: Parsed YAML mapping

    Returns:
        Dict of keyword arguments for ``Settings``

    Raises:
        ConfigError: If validation fails with clear field errors
    """
    if not isinstance(data, dict):
        raise ConfigError(
            f"Settings file must contain a mapping, got {type(data).__name__}"
        )

    values = {}
    for key, value in data.items():
        expected = _FIELD_TYPES.get(key)
        if expected is None:
            known = ", ".join(sorted(_FIELD_TYPES))
            raise ConfigError(f"Unknown setting '{key}'. Known settings: {known}")
        if not isinstance(value, expected):
            raise ConfigError(
                f"Setting '{key}' must be a string, got {type(value).__name__}"
            )
        values[key] = value

    return values


def read_settings_file(path: Path) -> dict:
    """Read and validate a YAML settings file. A missing file yields {}."""
    if not path.exists():
        _logging.debug(f"No settings file at {path}, using defaults")
        return {}

    try:
        text = path.read_text(encoding="utf-8")
    except PermissionError:
        raise ConfigError(f"Permission denied reading settings file: {path}")
    except UnicodeDecodeError:
        raise ConfigError(f"Settings file is not valid UTF-8: {path}")
    except OSError as e:
        raise ConfigError(f"Error reading settings file {path}: {e}")

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Settings file {path} is not valid YAML: {e}") from e

    if data is None:
        return {}
    return validate_settings(data)


def load_settings(path: Path | None = None, environ=None) -> Settings:
    """Load settings from file and environment.

    Raises:
        ConfigError: If the settings file is unreadable or invalid
    """
    env = os.environ if environ is None else environ
    settings_path = path or get_settings_path()
    values = read_settings_file(settings_path)

    values["template_root"] = get_template_root(values.get("template_root"), env)
    values["test_mode"] = is_test_mode(env)

    try:
        return Settings(**values)
    except ValueError as e:
        raise ConfigError(f"{settings_path}: {e}")


__all__ = [
    "DEFAULT_COMMIT_MESSAGE",
    "Settings",
    "is_test_mode",
    "load_settings",
    "read_settings_file",
    "validate_settings",
]
