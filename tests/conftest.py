"""Pytest fixtures and utilities for mkrepo tests."""

import shlex
import tempfile
from pathlib import Path
from typing import Generator
from unittest.mock import patch

import pytest

from mkrepo.config import Settings
from mkrepo.pipeline import ProjectConfig, ProjectKind, RunContext
from mkrepo.tools import ToolAvailability


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def template_root(temp_dir: Path) -> Path:
    """A complete template root with the shared and per-kind files."""
    root = temp_dir / "dev-templates"
    (root / "nextjs").mkdir(parents=True)
    (root / "vite").mkdir(parents=True)
    (root / ".prettierrc.json").write_text('{"semi": false}\n')
    for kind in ("nextjs", "vite"):
        (root / kind / "eslint.config.mjs").write_text(f"// {kind} eslint\n")
        (root / kind / "tsconfig.json").write_text(f'{{"kind": "{kind}"}}\n')
    return root


@pytest.fixture
def workdir(temp_dir: Path) -> Path:
    path = temp_dir / "work"
    path.mkdir()
    return path


@pytest.fixture
def no_tools() -> ToolAvailability:
    """Every optional capability absent."""
    return ToolAvailability.none()


@pytest.fixture
def make_ctx(workdir: Path, template_root: Path, no_tools: ToolAvailability):
    """Factory for RunContext instances."""

    def _create(
        kind: ProjectKind = ProjectKind.VITE_REACT_TS,
        name: str = "demo",
        tools: ToolAvailability | None = None,
        **settings,
    ) -> RunContext:
        settings.setdefault("template_root", template_root)
        settings.setdefault("test_mode", True)
        return RunContext(
            config=ProjectConfig(kind=kind, name=name),
            settings=Settings(**settings),
            tools=tools or no_tools,
            workdir=workdir,
        )

    return _create


class FakeShell:
    """Stand-in for run_command_async that mimics the external tools.

    Generators create the project directory (create-next-app also creates
    its own .git), ``git init`` creates .git, everything else succeeds
    unless its command contains ``fail_on``.
    """

    def __init__(self, fail_on: str | None = None, outputs: dict | None = None):
        self.fail_on = fail_on
        self.outputs = outputs or {}
        self.commands: list[tuple[str, Path | None]] = []

    async def __call__(self, command, cwd=None, env=None, timeout=None, debug=False):
        cwd = Path(cwd) if cwd else None
        self.commands.append((command, cwd))

        if self.fail_on and self.fail_on in command:
            return f"{self.fail_on}: simulated failure", 1

        tokens = shlex.split(command)
        generator = next((t for t in tokens if t.endswith("@latest")), None)
        if generator and cwd is not None:
            name = tokens[tokens.index(generator) + 1]
            project = cwd / name
            project.mkdir()
            (project / "package.json").write_text(f'{{"name": "{name}"}}\n')
            if generator.startswith("create-next-app"):
                (project / ".git").mkdir()
                (project / ".git" / "from-generator").write_text("x")
        elif tokens[:2] == ["git", "init"] and cwd is not None:
            (cwd / ".git").mkdir(exist_ok=True)

        for prefix, output in self.outputs.items():
            if command.startswith(prefix):
                return output, 0
        return "", 0

    def ran(self, fragment: str) -> bool:
        return any(fragment in command for command, _ in self.commands)

    def index_of(self, fragment: str) -> int:
        for i, (command, _) in enumerate(self.commands):
            if fragment in command:
                return i
        raise ValueError(fragment)


@pytest.fixture
def fake_shell() -> Generator[FakeShell, None, None]:
    """Patch the pipeline's command runner with a FakeShell."""
    shell = FakeShell()
    with patch("mkrepo.pipeline.steps.run_command_async", new=shell):
        yield shell


@pytest.fixture
def mock_tty() -> Generator[None, None, None]:
    """Mock stdin/stdout isatty to return True."""
    with patch("sys.stdin.isatty", return_value=True), patch(
        "sys.stdout.isatty", return_value=True
    ):
        yield


@pytest.fixture
def mock_no_tty() -> Generator[None, None, None]:
    """Mock sys.stdin.isatty to return False."""
    with patch("sys.stdin.isatty", return_value=False):
        yield
