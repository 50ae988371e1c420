"""Turn raw CLI tokens (or prompt answers) into a validated ProjectConfig."""

import logging
from pathlib import Path

from .errors import (
    ConflictingFlags,
    DirectoryExists,
    InvalidName,
    MissingName,
    UnexpectedArguments,
)
from .naming import looks_like_flag, sanitize
from .pipeline.models import SELECTOR_FLAGS, ProjectConfig, ProjectKind

_logging = logging.getLogger(__name__)


def resolve_arguments(tokens: list[str]) -> tuple[ProjectKind | None, str | None]:
    """Pick the project kind and raw name out of the CLI tokens.

    Returns:
        (kind, raw_name), or (None, None) when no selector flag is present
        and the caller should prompt instead.

    Raises:
        ConflictingFlags: both selector flags are present
        MissingName: a selector flag is the last token
        InvalidName: the token after the selector looks like a flag
        UnexpectedArguments: tokens that are neither a selector nor its name
    """
    tokens = list(tokens)
    present = [flag for flag in SELECTOR_FLAGS if flag in tokens]

    if len(present) > 1:
        raise ConflictingFlags(present)

    if not present:
        if tokens:
            raise UnexpectedArguments(tokens)
        return None, None

    flag = present[0]
    index = tokens.index(flag)
    if index + 1 >= len(tokens):
        raise MissingName(flag)

    candidate = tokens[index + 1]
    if looks_like_flag(candidate):
        raise InvalidName(candidate, "looks like a command-line flag")

    leftover = tokens[:index] + tokens[index + 2 :]
    if leftover:
        raise UnexpectedArguments(leftover)

    return ProjectKind.from_flag(flag), candidate


def build_config(kind: ProjectKind, raw_name: str, workdir: Path) -> ProjectConfig:
    """Sanitize ``raw_name`` and check the target directory is free."""
    name = sanitize(raw_name)
    if not name:
        raise InvalidName(raw_name, "nothing usable is left after sanitizing")
    if name != raw_name:
        _logging.debug(f"Sanitized project name {raw_name!r} -> {name!r}")

    target = Path(workdir) / name
    if target.exists():
        raise DirectoryExists(target)

    return ProjectConfig(kind=kind, name=name)


def resolve_config(tokens: list[str], workdir: Path, prompter) -> ProjectConfig:
    """Resolve a ProjectConfig from tokens, prompting when no selector is given.

    Raises:
        ValidationError subclasses, or UserCancelled from the prompter
    """
    kind, raw_name = resolve_arguments(tokens)
    if kind is None:
        kind = prompter.select_kind()
        raw_name = prompter.ask_name()
    return build_config(kind, raw_name, workdir)


__all__ = ["resolve_arguments", "build_config", "resolve_config"]
