"""Filesystem location helpers for mkrepo."""

import os
from pathlib import Path

DEFAULT_TEMPLATE_ROOT = "~/dev-templates"


def get_config_dir() -> Path:
    """Return XDG-compliant config directory: ~/.config/mkrepo"""
    return Path.home() / ".config" / "mkrepo"


def get_settings_path() -> Path:
    """Return path to the user settings file.

    Priority:
    1. MKREPO_CONFIG environment variable (if set)
    2. ~/.config/mkrepo/config.yaml (default XDG location)
    """
    if "MKREPO_CONFIG" in os.environ:
        return Path(os.environ["MKREPO_CONFIG"]).expanduser()
    return get_config_dir() / "config.yaml"


def get_template_root(configured: str | Path | None = None, environ=None) -> Path:
    """Return the template root.

    Priority: MKREPO_TEMPLATES, the settings file value, ~/dev-templates.
    The --templates flag is applied on top of this by the command.
    """
    env = os.environ if environ is None else environ
    if env.get("MKREPO_TEMPLATES"):
        return Path(env["MKREPO_TEMPLATES"]).expanduser()
    if configured:
        return Path(configured).expanduser()
    return Path(DEFAULT_TEMPLATE_ROOT).expanduser()
