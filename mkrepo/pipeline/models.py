"""Data models for the scaffold pipeline."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Awaitable, Callable

from ..config import Settings
from ..errors import ScaffoldError
from ..tools import ToolAvailability


class ProjectKind(Enum):
    NEXT_APP = "next"
    VITE_REACT_TS = "vite"

    @property
    def profile(self) -> "KindProfile":
        return KIND_PROFILES[self]

    @classmethod
    def from_flag(cls, flag: str) -> "ProjectKind":
        for kind, profile in KIND_PROFILES.items():
            if profile.flag == flag:
                return kind
        raise KeyError(flag)


@dataclass(frozen=True)
class KindProfile:
    """Fixed per-kind invocation details."""

    flag: str
    label: str
    generator: str
    installs_dependencies: bool
    template_subdir: str
    dev_port: int

    def generator_command(self, name: str) -> str:
        return self.generator.format(name=name)


KIND_PROFILES = {
    ProjectKind.NEXT_APP: KindProfile(
        flag="--next",
        label="Next.js",
        generator=(
            "npx --yes create-next-app@latest {name} --typescript --app --eslint"
            " --src-dir --import-alias '@/*' --use-npm --yes"
        ),
        installs_dependencies=True,
        template_subdir="nextjs",
        dev_port=3000,
    ),
    ProjectKind.VITE_REACT_TS: KindProfile(
        flag="--vite",
        label="Vite (React + TS)",
        generator=(
            "npm create --yes vite@latest {name} --"
            " --template react-ts --no-interactive"
        ),
        installs_dependencies=False,
        template_subdir="vite",
        dev_port=5173,
    ),
}

SELECTOR_FLAGS = tuple(p.flag for p in KIND_PROFILES.values())


@dataclass(frozen=True)
class ProjectConfig:
    """A validated project request. ``name`` is already sanitized."""

    kind: ProjectKind
    name: str


@dataclass
class RunContext:
    """State carried through one pipeline run.

    ``project_dir`` is set once, by the step that enters the generated
    directory; every later external process runs with it as its cwd.
    """

    config: ProjectConfig
    settings: Settings
    tools: ToolAvailability
    workdir: Path
    project_dir: Path | None = None
    templates: list[Path] = field(default_factory=list)

    @property
    def cwd(self) -> Path:
        return self.project_dir or self.workdir


@dataclass
class StepResult:
    label: str
    status: str
    output: str = ""


@dataclass
class PipelineStep:
    label: str
    required: bool
    action: Callable[[RunContext], Awaitable[StepResult]]


class OutcomeStatus(Enum):
    SUCCESS = "success"
    ABORTED = "aborted"
    USER_CANCELLED = "user_cancelled"


@dataclass(frozen=True)
class PipelineOutcome:
    """Terminal state of a run, finalized exactly once."""

    status: OutcomeStatus
    at_step: str | None = None
    cause: ScaffoldError | None = None
    results: tuple[StepResult, ...] = ()

    @classmethod
    def success(cls, results=()) -> "PipelineOutcome":
        return cls(OutcomeStatus.SUCCESS, results=tuple(results))

    @classmethod
    def aborted(cls, at_step: str, cause: ScaffoldError, results=()) -> "PipelineOutcome":
        return cls(OutcomeStatus.ABORTED, at_step, cause, tuple(results))

    @classmethod
    def cancelled(cls) -> "PipelineOutcome":
        return cls(OutcomeStatus.USER_CANCELLED)

    @property
    def exit_code(self) -> int:
        return 1 if self.status is OutcomeStatus.ABORTED else 0


__all__ = [
    "ProjectKind",
    "KindProfile",
    "KIND_PROFILES",
    "SELECTOR_FLAGS",
    "ProjectConfig",
    "RunContext",
    "StepResult",
    "PipelineStep",
    "OutcomeStatus",
    "PipelineOutcome",
]
