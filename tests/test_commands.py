"""CLI tests for the mkrepo command."""

from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from mkrepo.commands import cli
from mkrepo.commands.create import split_selector
from mkrepo.pipeline import PipelineOutcome
from mkrepo.prompts import FAREWELL
from mkrepo.tools import ToolAvailability

from .conftest import FakeShell


@pytest.fixture
def runner():
    """Create a CliRunner for testing."""
    return CliRunner()


@pytest.fixture
def env(temp_dir: Path, template_root: Path) -> dict:
    return {
        "TEST_MODE": "true",
        "MKREPO_TEMPLATES": str(template_root),
        "MKREPO_CONFIG": str(temp_dir / "absent.yaml"),
    }


@pytest.fixture
def no_probe():
    with patch(
        "mkrepo.commands.create.probe_tools", return_value=ToolAvailability.none()
    ):
        yield


def _invoke(runner, args, env, temp_dir, input=None):
    """Invoke the CLI inside a fresh working directory under temp_dir."""
    with runner.isolated_filesystem(temp_dir=temp_dir) as cwd:
        result = runner.invoke(cli, args, env=env, input=input)
        return result, Path(cwd)


@pytest.mark.usefixtures("no_probe")
class TestValidation:
    @pytest.mark.parametrize(
        "args, message",
        [
            (["--vite"], "--vite requires a project name"),
            (["--next"], "--next requires a project name"),
            (["--next", "a", "--vite", "b"], "cannot be used together"),
            (["--vite", "--foo"], "looks like a command-line flag"),
            (["--vite", "!!!"], "nothing usable is left"),
            (["stray"], "unexpected arguments: stray"),
        ],
    )
    def test_invalid_arguments_exit_1(
        self, runner, env, temp_dir, fake_shell, args, message
    ):
        result, cwd = _invoke(runner, args, env, temp_dir)

        assert result.exit_code == 1
        assert message in result.output
        assert "usage: mkrepo" in result.output
        assert fake_shell.commands == []
        assert list(cwd.iterdir()) == []

    @pytest.mark.parametrize(
        "name", ["--doctor", "--templates", "--serve", "--help", "--debug", "--version"]
    )
    def test_own_option_as_name_is_invalid(
        self, runner, env, temp_dir, fake_shell, name
    ):
        result, cwd = _invoke(runner, ["--vite", name], env, temp_dir)

        assert result.exit_code == 1
        assert f"invalid project name '{name}'" in result.output
        assert "looks like a command-line flag" in result.output
        assert "Required tools" not in result.output
        assert list(cwd.iterdir()) == []

    def test_options_after_name_still_apply(self, runner, env, temp_dir, fake_shell):
        with patch("mkrepo.commands.create.setup_logging") as setup:
            result, _ = _invoke(runner, ["--vite", "demo", "--debug"], env, temp_dir)

        assert result.exit_code == 0, result.output
        setup.assert_called_once_with(True)

    def test_option_usage_error_exits_1(self, runner, env, temp_dir, fake_shell):
        result, _ = _invoke(runner, ["--vite", "demo", "--templates"], env, temp_dir)

        assert result.exit_code == 1
        assert "requires an argument" in result.output
        assert fake_shell.commands == []

    def test_existing_directory(self, runner, env, temp_dir, fake_shell):
        with runner.isolated_filesystem(temp_dir=temp_dir):
            Path("taken").mkdir()
            result = runner.invoke(cli, ["--vite", "taken"], env=env)

        assert result.exit_code == 1
        assert "directory already exists" in result.output
        assert fake_shell.commands == []


@pytest.mark.usefixtures("no_probe")
class TestScaffold:
    @pytest.mark.parametrize(
        "flag, name", [("--vite", "test-vite"), ("--next", "test-next")]
    )
    def test_scaffold_by_flag(self, runner, env, temp_dir, fake_shell, flag, name):
        result, cwd = _invoke(runner, [flag, name], env, temp_dir)

        assert result.exit_code == 0, result.output
        project = cwd / name
        for artifact in ("README.md", "package.json", ".git"):
            assert (project / artifact).exists()
        assert f"{name} is ready" in result.output
        assert "Publish remote repository" not in result.output

    def test_name_is_sanitized(self, runner, env, temp_dir, fake_shell):
        result, cwd = _invoke(runner, ["--vite", "My App!"], env, temp_dir)
        assert result.exit_code == 0, result.output
        assert (cwd / "my-app").is_dir()

    def test_prompt_fallback_reads_stdin(self, runner, env, temp_dir, fake_shell):
        result, cwd = _invoke(runner, [], env, temp_dir, input="vite\nTest Prompt\n")

        assert result.exit_code == 0, result.output
        assert (cwd / "test-prompt" / "package.json").exists()
        assert fake_shell.ran("vite@latest test-prompt")

    def test_end_of_input_cancels(self, runner, env, temp_dir, fake_shell):
        result, cwd = _invoke(runner, [], env, temp_dir, input="")

        assert result.exit_code == 0
        assert FAREWELL in result.output
        assert fake_shell.commands == []
        assert list(cwd.iterdir()) == []

    def test_cancellation_uses_cancelled_outcome(self, runner, env, temp_dir, fake_shell):
        with patch(
            "mkrepo.commands.create.PipelineOutcome.cancelled",
            wraps=PipelineOutcome.cancelled,
        ) as cancelled:
            result, _ = _invoke(runner, [], env, temp_dir, input="vite\n")

        assert result.exit_code == 0
        assert FAREWELL in result.output
        cancelled.assert_called_once_with()

    def test_failed_step_aborts(self, runner, env, temp_dir):
        shell = FakeShell(fail_on="prettier")
        with patch("mkrepo.pipeline.steps.run_command_async", new=shell):
            result, cwd = _invoke(runner, ["--vite", "demo"], env, temp_dir)

        assert result.exit_code == 1
        assert "Aborted at: Format the tree" in result.output
        assert "Partial project left in place" in result.output
        assert (cwd / "demo" / "README.md").exists()
        assert not shell.ran("git init")

    def test_missing_templates_exit_1(self, runner, env, temp_dir, fake_shell):
        env = dict(env, MKREPO_TEMPLATES=str(temp_dir / "nowhere"))
        result, _ = _invoke(runner, ["--next", "demo"], env, temp_dir)

        assert result.exit_code == 1
        assert "missing template files" in result.output
        assert "nowhere" in result.output

    def test_templates_flag_overrides_environment(
        self, runner, env, temp_dir, template_root, fake_shell
    ):
        env = dict(env, MKREPO_TEMPLATES=str(temp_dir / "nowhere"))
        result, _ = _invoke(
            runner,
            ["--templates", str(template_root), "--vite", "demo"],
            env,
            temp_dir,
        )
        assert result.exit_code == 0, result.output


class TestSettingsAndDoctor:
    def test_invalid_settings_file(self, runner, env, temp_dir):
        bad = temp_dir / "bad.yaml"
        bad.write_text("colour: blue\n")
        env = dict(env, MKREPO_CONFIG=str(bad))
        result, _ = _invoke(runner, ["--vite", "demo"], env, temp_dir)

        assert result.exit_code == 1
        assert "Unknown setting 'colour'" in result.output

    @pytest.mark.usefixtures("no_probe")
    def test_doctor_all_present(self, runner, env, temp_dir):
        with patch("mkrepo.report.shutil.which", return_value="/usr/bin/tool"):
            result, _ = _invoke(runner, ["--doctor"], env, temp_dir)

        assert result.exit_code == 0
        assert "Required tools" in result.output
        assert "editor" in result.output
        assert "missing" in result.output

    @pytest.mark.usefixtures("no_probe")
    def test_doctor_missing_required(self, runner, env, temp_dir):
        with patch("mkrepo.report.shutil.which", return_value=None):
            result, _ = _invoke(runner, ["--doctor"], env, temp_dir)

        assert result.exit_code == 1
        assert "❌ git" in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "mkrepo" in result.output


class TestSplitSelector:
    @pytest.mark.parametrize(
        "args, held, remaining",
        [
            (["--vite", "demo"], ["--vite", "demo"], []),
            (["--debug", "--next", "--doctor"], ["--next", "--doctor"], ["--debug"]),
            (["--vite", "demo", "--serve"], ["--vite", "demo"], ["--serve"]),
            (["--vite"], ["--vite"], []),
            (["--doctor"], [], ["--doctor"]),
            (["--", "--vite", "demo"], [], ["--", "--vite", "demo"]),
        ],
    )
    def test_split(self, args, held, remaining):
        assert split_selector(args) == (held, remaining)
