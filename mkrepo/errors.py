"""Error types and message formatting for mkrepo.

Error Style Guide:
- User-facing errors use 'Error: ' prefix
- Use present tense: 'must be', 'is required'
- Avoid emojis in error messages (keep in progress displays only)
- Include actionable hints where helpful
"""

USAGE_HINT = "usage: mkrepo [--next NAME | --vite NAME]"


class ScaffoldError(Exception):
    """Base class for every error that ends a run with exit code 1."""

    hint: str | None = None


class ValidationError(ScaffoldError):
    """Raised before any external process has been spawned."""

    hint = USAGE_HINT


class ConflictingFlags(ValidationError):
    def __init__(self, flags: list[str]):
        self.flags = flags
        super().__init__(f"{' and '.join(flags)} cannot be used together")


class MissingName(ValidationError):
    def __init__(self, flag: str):
        self.flag = flag
        super().__init__(f"{flag} requires a project name")


class InvalidName(ValidationError):
    def __init__(self, name: str, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f"invalid project name '{name}': {reason}")


class UnexpectedArguments(ValidationError):
    def __init__(self, tokens: list[str]):
        self.tokens = list(tokens)
        super().__init__(f"unexpected arguments: {' '.join(self.tokens)}")


class DirectoryExists(ValidationError):
    hint = "choose another name or remove the existing directory"

    def __init__(self, path):
        self.path = path
        super().__init__(f"directory already exists: {path}")


class MissingTemplates(ScaffoldError):
    """Raised with every missing template path, not just the first."""

    hint = "set MKREPO_TEMPLATES or pass --templates to point at your template root"

    def __init__(self, paths: list):
        self.paths = list(paths)
        listing = "\n".join(f"  - {p}" for p in self.paths)
        super().__init__(f"missing template files:\n{listing}")


class ExternalToolFailure(ScaffoldError):
    def __init__(self, step: str, exit_info: str, returncode: int | None = None):
        self.step = step
        self.exit_info = exit_info
        self.returncode = returncode
        detail = f" (exit code {returncode})" if returncode is not None else ""
        message = f"step '{step}' failed{detail}"
        if exit_info:
            message += f": {exit_info}"
        super().__init__(message)


class ConfigError(ScaffoldError):
    """Raised when the settings file cannot be read or is invalid."""

    pass


def format_error(message: str) -> str:
    """Format an error message with consistent prefix.

    Examples:
        >>> format_error("directory already exists: demo")
        'Error: directory already exists: demo'
    """
    return f"Error: {message}"


def format_suggestion(message: str, suggestion: str) -> str:
    """Format an error message with a helpful suggestion.

    Examples:
        >>> format_suggestion("--vite requires a project name", "usage: mkrepo --vite NAME")
        'Error: --vite requires a project name. Hint: usage: mkrepo --vite NAME'
    """
    return f"{format_error(message)}. Hint: {suggestion}"


def describe(error: ScaffoldError) -> str:
    """Render an error the way the CLI prints it."""
    if error.hint:
        return format_suggestion(str(error), error.hint)
    return format_error(str(error))


__all__ = [
    "ScaffoldError",
    "ValidationError",
    "ConflictingFlags",
    "MissingName",
    "InvalidName",
    "UnexpectedArguments",
    "DirectoryExists",
    "MissingTemplates",
    "ExternalToolFailure",
    "ConfigError",
    "format_error",
    "format_suggestion",
    "describe",
]
