"""Run the mkrepo CLI against the declared scenarios.

Each scenario runs as its own subprocess in its own fresh directory under
the harness root, with TEST_MODE forced on. Artifacts from earlier
harness runs, local directories and hosted repositories alike, are
destroyed before anything runs so repeated invocations start clean.
"""

import logging
import os
import shutil
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path

import click

from ..tools import VCS_HOST_CLI, ToolAvailability
from .scenarios import SCENARIOS, TestScenario

_logging = logging.getLogger(__name__)

EXPECTED_ARTIFACTS = ("README.md", "package.json", ".git")
OUTPUT_DIRNAME = "output"


@dataclass
class TestRun:
    """One execution of a scenario and its verdict."""

    __test__ = False

    scenario: TestScenario
    returncode: int | None
    stdout: str
    stderr: str
    passed: bool
    reason: str
    log_path: Path | None = None


def build_path(environ=None) -> str:
    """PATH with the directories of the resolved npm and node binaries first."""
    env = os.environ if environ is None else environ
    current = env.get("PATH", "")
    bin_dirs = []
    for binary in ("npm", "node"):
        found = shutil.which(binary, path=current or None)
        if found is None:
            _logging.warning(f"{binary} not found on PATH; scenarios needing it will fail")
            continue
        directory = os.path.dirname(found)
        if directory not in bin_dirs:
            bin_dirs.append(directory)
    return os.pathsep.join(bin_dirs + ([current] if current else []))


def default_cli_command() -> list[str]:
    return [sys.executable, "-m", "mkrepo"]


def missing_artifacts(project_path: Path) -> list[str]:
    return [name for name in EXPECTED_ARTIFACTS if not (project_path / name).exists()]


def judge(scenario: TestScenario, returncode: int | None, workdir: Path) -> tuple[bool, str]:
    """Verdict for one run: (passed, reason)."""
    if scenario.should_fail:
        if returncode == 0:
            return False, "unexpected pass"
        return True, "expected failure"

    if returncode != 0:
        return False, f"exited with {returncode}"
    if not scenario.project_name:
        return True, "passed"

    missing = missing_artifacts(workdir / scenario.project_name)
    if missing:
        return False, f"missing expected files: {', '.join(missing)}"
    return True, "passed"


class Harness:
    def __init__(
        self,
        root: Path,
        scenarios: tuple[TestScenario, ...] = SCENARIOS,
        cli_command: list[str] | None = None,
        remote_cleanup: bool = True,
        timeout: float | None = None,
        tools: ToolAvailability | None = None,
    ):
        self.root = Path(root).resolve()
        self.output_dir = self.root / OUTPUT_DIRNAME
        self.scenarios = tuple(scenarios)
        self.cli_command = cli_command or default_cli_command()
        self.remote_cleanup = remote_cleanup
        self.timeout = timeout
        self.tools = tools or ToolAvailability()
        self.path = build_path()

    def scenario_dir(self, scenario: TestScenario) -> Path:
        return self.root / scenario.slug

    def log_path(self, scenario: TestScenario) -> Path:
        return self.output_dir / f"{scenario.slug}.log"

    def cleanup(self) -> None:
        """Remove every local and hosted artifact of previous runs."""
        click.echo("\nCleaning up test directories and GitHub repos...")
        if self.root.exists():
            shutil.rmtree(self.root)

        if self.remote_cleanup:
            self._delete_remote_repos()

        self.output_dir.mkdir(parents=True, exist_ok=True)

    def _gh_login(self, gh: str) -> str | None:
        try:
            result = subprocess.run(
                [gh, "api", "user", "--jq", ".login"],
                capture_output=True,
                text=True,
            )
        except OSError as e:
            _logging.info(f"Could not query GitHub user: {e}")
            return None
        if result.returncode != 0:
            _logging.info(f"Could not query GitHub user: {result.stderr.strip()}")
            return None
        return result.stdout.strip() or None

    def _delete_remote_repos(self) -> None:
        gh = self.tools.resolve(VCS_HOST_CLI)
        if gh is None:
            _logging.info("GitHub CLI not available, skipping remote cleanup")
            return
        login = self._gh_login(gh.location)
        if login is None:
            click.echo("Not logged in to GitHub, skipping remote cleanup")
            return

        for scenario in self.scenarios:
            if not scenario.project_name:
                continue
            repo = f"{login}/{scenario.project_name}"
            try:
                result = subprocess.run(
                    [gh.location, "repo", "delete", repo, "--yes"],
                    capture_output=True,
                    text=True,
                )
                deleted = result.returncode == 0
            except OSError as e:
                _logging.info(f"gh repo delete {repo} failed: {e}")
                deleted = False
            if deleted:
                click.echo(f"Deleted repo: {repo}")
            else:
                click.echo(f"No repo found or already deleted: {repo}")

    def environment(self, scenario: TestScenario) -> dict[str, str]:
        return {
            **os.environ,
            **scenario.env,
            "PATH": self.path,
            "TEST_MODE": "true",
        }

    def run_scenario(self, scenario: TestScenario) -> TestRun:
        workdir = self.scenario_dir(scenario)
        if workdir.exists():
            shutil.rmtree(workdir)
        workdir.mkdir(parents=True)

        command = [*self.cli_command, *scenario.args]
        _logging.debug(f"[{scenario.label}] running {command} in {workdir}")
        try:
            result = subprocess.run(
                command,
                cwd=workdir,
                env=self.environment(scenario),
                input=scenario.stdin or "",
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
            returncode, stdout, stderr = result.returncode, result.stdout, result.stderr
            passed, reason = judge(scenario, returncode, workdir)
        except subprocess.TimeoutExpired as e:
            returncode = None
            stdout = _as_text(e.stdout)
            stderr = _as_text(e.stderr)
            passed, reason = False, f"timed out after {self.timeout} seconds"
        except OSError as e:
            returncode, stdout, stderr = None, "", str(e)
            passed, reason = False, f"could not start CLI: {e}"

        log_path = self.log_path(scenario)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        log_path.write_text(stdout + "\n" + stderr, encoding="utf-8")

        return TestRun(scenario, returncode, stdout, stderr, passed, reason, log_path)

    def run(self) -> list[TestRun]:
        self.cleanup()
        click.echo("\nRunning mkrepo test suite...")

        runs = []
        for scenario in self.scenarios:
            click.echo(f"\n=== {scenario.label} ===")
            run = self.run_scenario(scenario)
            _report(run)
            runs.append(run)
        return runs


def _as_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode(errors="replace")
    return value


def _report(run: TestRun) -> None:
    label = run.scenario.label
    if run.passed and run.scenario.should_fail:
        click.echo(f"✅ Expected fail: {label}")
    elif run.passed:
        click.echo(f"✅ Passed: {label}")
    else:
        click.echo(f"❌ Failed: {label}: {run.reason}", err=True)
        click.echo(f"   Log: {run.log_path}", err=True)


__all__ = [
    "EXPECTED_ARTIFACTS",
    "TestRun",
    "Harness",
    "build_path",
    "default_cli_command",
    "judge",
    "missing_artifacts",
]
