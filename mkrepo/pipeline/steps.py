"""Step actions for the scaffold pipeline.

Every action takes the RunContext and either returns a StepResult or
raises a ScaffoldError. Whether that error aborts the run is decided by
the runner from the step's ``required`` flag, never here.
"""

import asyncio
import logging
import shutil
from pathlib import Path

import click

from ..errors import ExternalToolFailure, MissingTemplates
from ..execution import (
    launch_detached,
    quote_command,
    run_attached_async,
    run_command_async,
)
from ..tools import BROWSER, EDITOR, VCS_HOST_CLI, WINDOW_MANAGER, ResolvedTool
from .models import PipelineStep, RunContext, StepResult

_logging = logging.getLogger(__name__)

FORMATTER_CONFIG = ".prettierrc.json"
KIND_TEMPLATE_FILES = ("eslint.config.mjs", "tsconfig.json")
FORMAT_COMMAND = "npx --yes prettier --write ."
INSTALL_COMMAND = "npm install"
DEV_COMMAND = "npm run dev"
WINDOW_SETTLE_SECONDS = 1.0


async def _run(ctx: RunContext, label: str, command: str, cwd: Path | None = None) -> str:
    output, returncode = await run_command_async(
        command, cwd=cwd or ctx.cwd, debug=ctx.settings.debug
    )
    if returncode != 0:
        raise ExternalToolFailure(label, output, returncode)
    return output


async def generate_project(ctx: RunContext) -> StepResult:
    label = "Generate base project"
    command = ctx.config.kind.profile.generator_command(ctx.config.name)
    output = await _run(ctx, label, command, cwd=ctx.workdir)
    return StepResult(label, "success", output)


async def enter_project_directory(ctx: RunContext) -> StepResult:
    label = "Enter project directory"
    project_dir = ctx.workdir / ctx.config.name
    if not project_dir.is_dir():
        raise ExternalToolFailure(
            label, f"generator did not create the directory {project_dir}"
        )
    ctx.project_dir = project_dir
    return StepResult(label, "success", str(project_dir))


def required_templates(template_root: Path, template_subdir: str) -> list[Path]:
    """Template files a project of this kind needs, shared file first."""
    kind_dir = template_root / template_subdir
    return [template_root / FORMATTER_CONFIG] + [
        kind_dir / name for name in KIND_TEMPLATE_FILES
    ]


async def resolve_templates(ctx: RunContext) -> StepResult:
    label = "Resolve template files"
    root = ctx.settings.template_root
    wanted = required_templates(root, ctx.config.kind.profile.template_subdir)

    missing = [path for path in wanted if not path.is_file()]
    if not root.is_dir():
        missing.insert(0, root)
    if missing:
        raise MissingTemplates(missing)

    ctx.templates = wanted
    return StepResult(label, "success", ", ".join(p.name for p in wanted))


async def apply_templates(ctx: RunContext) -> StepResult:
    label = "Apply template files"
    destination = ctx.cwd

    async def _copy(source: Path):
        await asyncio.to_thread(shutil.copyfile, source, destination / source.name)
        _logging.debug(f"Copied {source} -> {destination / source.name}")

    outcomes = await asyncio.gather(
        *(_copy(source) for source in ctx.templates), return_exceptions=True
    )
    failures = [str(o) for o in outcomes if isinstance(o, BaseException)]
    if failures:
        raise ExternalToolFailure(label, "; ".join(failures))
    return StepResult(label, "success", f"{len(ctx.templates)} files")


async def install_dependencies(ctx: RunContext) -> StepResult:
    label = "Install dependencies"
    output = await _run(ctx, label, INSTALL_COMMAND)
    return StepResult(label, "success", output)


def render_readme(ctx: RunContext) -> str:
    profile = ctx.config.kind.profile
    return (
        f"# {ctx.config.name}\n"
        f"\n"
        f"{profile.label} project scaffolded with mkrepo.\n"
        f"\n"
        f"## Getting started\n"
        f"\n"
        f"```sh\n"
        f"{DEV_COMMAND}\n"
        f"```\n"
        f"\n"
        f"Then open http://localhost:{profile.dev_port}.\n"
    )


async def write_readme(ctx: RunContext) -> StepResult:
    label = "Write README"
    path = ctx.cwd / "README.md"
    try:
        path.write_text(render_readme(ctx), encoding="utf-8")
    except OSError as e:
        raise ExternalToolFailure(label, str(e))
    return StepResult(label, "success", str(path))


async def format_tree(ctx: RunContext) -> StepResult:
    label = "Format the tree"
    output = await _run(ctx, label, FORMAT_COMMAND)
    return StepResult(label, "success", output)


async def init_version_control(ctx: RunContext) -> StepResult:
    label = "Initialize version control"
    # generators may have created their own repository
    existing = ctx.cwd / ".git"
    if existing.exists():
        _logging.debug(f"Removing generator-created repository at {existing}")
        try:
            shutil.rmtree(existing)
        except OSError as e:
            raise ExternalToolFailure(label, f"could not remove {existing}: {e}")

    await _run(ctx, label, "git init")
    await _run(ctx, label, "git add .")
    output = await _run(
        ctx, label, quote_command("git", "commit", "-m", ctx.settings.commit_message)
    )
    return StepResult(label, "success", output)


def launch_args(tool: ResolvedTool, *args: str) -> list[str]:
    if tool.is_app_bundle:
        return ["open", "-a", tool.location, *args]
    return [tool.location, *args]


async def place_window(ctx: RunContext, half: str) -> None:
    """Best-effort snap of the focused window to the ``left`` or ``right`` half."""
    tool = ctx.tools.resolve(WINDOW_MANAGER)
    if tool is None:
        return

    await asyncio.sleep(WINDOW_SETTLE_SECONDS)
    if tool.is_app_bundle:
        command = quote_command(
            "open", "-g", f"rectangle://execute-action?name={half}-half"
        )
    else:
        key = "super+Left" if half == "left" else "super+Right"
        command = quote_command(tool.location, "key", key)

    output, returncode = await run_command_async(command, debug=ctx.settings.debug)
    if returncode != 0:
        _logging.info(f"Window placement ({half}) failed: {output}")


async def publish_remote(ctx: RunContext) -> StepResult:
    label = "Publish remote repository"
    gh = ctx.tools.resolve(VCS_HOST_CLI)
    if gh is None:
        return StepResult(label, "skipped", "GitHub CLI not available")

    remotes = await _run(ctx, label, "git remote")
    if remotes.strip():
        return StepResult(label, "skipped", "remote already configured")

    try:
        confirmed = click.confirm(
            f"Create a GitHub repository for '{ctx.config.name}' and push?",
            default=False,
        )
    except click.exceptions.Abort:
        confirmed = False
    if not confirmed:
        return StepResult(label, "skipped", "declined")

    output = await _run(
        ctx,
        label,
        quote_command(
            gh.location,
            "repo",
            "create",
            ctx.config.name,
            f"--{ctx.settings.publish_visibility}",
            "--source",
            ".",
            "--remote",
            "origin",
            "--push",
        ),
    )
    return StepResult(label, "success", output)


async def launch_editor(ctx: RunContext) -> StepResult:
    label = "Open editor"
    editor = ctx.tools.resolve(EDITOR)
    if editor is None:
        return StepResult(label, "skipped", "editor not available")
    if not launch_detached(launch_args(editor, "."), cwd=ctx.cwd):
        raise ExternalToolFailure(label, f"could not start {editor.location}")
    await place_window(ctx, "left")
    return StepResult(label, "success", editor.location)


async def launch_browser(ctx: RunContext) -> StepResult:
    label = "Open browser"
    browser = ctx.tools.resolve(BROWSER)
    if browser is None:
        return StepResult(label, "skipped", "browser not available")
    url = f"http://localhost:{ctx.config.kind.profile.dev_port}"
    if not launch_detached(launch_args(browser, url), cwd=ctx.cwd):
        raise ExternalToolFailure(label, f"could not start {browser.location}")
    await place_window(ctx, "right")
    return StepResult(label, "success", url)


async def start_dev_server(ctx: RunContext) -> StepResult:
    label = "Start dev server"
    returncode = await run_attached_async(DEV_COMMAND, cwd=ctx.cwd)
    if returncode != 0:
        raise ExternalToolFailure(label, "dev server exited", returncode)
    return StepResult(label, "success")


def build_steps(ctx: RunContext) -> list[PipelineStep]:
    """The ordered step list for this run's kind and settings."""
    steps = [
        PipelineStep("Generate base project", True, generate_project),
        PipelineStep("Enter project directory", True, enter_project_directory),
        PipelineStep("Resolve template files", True, resolve_templates),
        PipelineStep("Apply template files", True, apply_templates),
    ]
    if not ctx.config.kind.profile.installs_dependencies:
        steps.append(PipelineStep("Install dependencies", True, install_dependencies))
    steps += [
        PipelineStep("Write README", True, write_readme),
        PipelineStep("Format the tree", True, format_tree),
        PipelineStep("Initialize version control", True, init_version_control),
    ]

    if ctx.settings.test_mode:
        return steps

    steps += [
        PipelineStep("Publish remote repository", False, publish_remote),
        PipelineStep("Open editor", False, launch_editor),
        PipelineStep("Open browser", False, launch_browser),
    ]
    if ctx.settings.serve:
        steps.append(PipelineStep("Start dev server", False, start_dev_server))
    return steps


__all__ = [
    "FORMATTER_CONFIG",
    "KIND_TEMPLATE_FILES",
    "build_steps",
    "required_templates",
    "render_readme",
    "generate_project",
    "enter_project_directory",
    "resolve_templates",
    "apply_templates",
    "install_dependencies",
    "write_readme",
    "format_tree",
    "init_version_control",
    "publish_remote",
    "launch_editor",
    "launch_browser",
    "start_dev_server",
    "place_window",
    "launch_args",
]
