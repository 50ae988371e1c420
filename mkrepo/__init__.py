"""mkrepo - spin up your next front-end repo in seconds."""

import logging
import sys

from .config import Settings, is_test_mode, load_settings
from .errors import (
    ConfigError,
    ExternalToolFailure,
    MissingTemplates,
    ScaffoldError,
    ValidationError,
    format_error,
    format_suggestion,
)
from .execution import run_command_async
from .naming import sanitize

__version__ = "0.3.0"

LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


def setup_logging(debug: bool = False) -> None:
    """Configure root logging once per process: DEBUG with --debug, else WARNING."""
    level = logging.DEBUG if debug else logging.WARNING
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(level)


__all__ = [
    "__version__",
    "setup_logging",
    "Settings",
    "is_test_mode",
    "load_settings",
    "ConfigError",
    "ExternalToolFailure",
    "MissingTemplates",
    "ScaffoldError",
    "ValidationError",
    "format_error",
    "format_suggestion",
    "run_command_async",
    "sanitize",
]
