"""Main scaffolding command."""

import asyncio
import logging
import sys
from pathlib import Path

import click

from mkrepo import __version__, setup_logging
from mkrepo.config import load_settings
from mkrepo.errors import ConfigError, ValidationError, describe
from mkrepo.pipeline import (
    SELECTOR_FLAGS,
    OutcomeStatus,
    PipelineOutcome,
    RunContext,
    run_pipeline,
)
from mkrepo.prompts import FAREWELL, UserCancelled, get_prompter
from mkrepo.report import display_tool_table
from mkrepo.resolver import resolve_config
from mkrepo.tools import probe_tools

_logging = logging.getLogger(__name__)

# Exit codes
EXIT_SUCCESS = 0
EXIT_FAILURE = 1

BANNER = "\nmkrepo - spin up your next repo in seconds\n"


def split_selector(args: list[str]) -> tuple[list[str], list[str]]:
    """Pull the first selector flag and the token after it out of ``args``.

    The held tokens go to the resolver untouched, so a name such as
    ``--doctor`` or ``--help`` is reported as an invalid name instead of
    being acted on as an option.

    Returns:
        (held, remaining)
    """
    for index, arg in enumerate(args):
        if arg == "--":
            break
        if arg in SELECTOR_FLAGS:
            return args[index : index + 2], args[:index] + args[index + 2 :]
    return [], list(args)


class ScaffoldCommand(click.Command):
    """Command whose selector flag and project name bypass option parsing."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        held, remaining = split_selector(list(args))
        try:
            rest = super().parse_args(ctx, remaining)
        except click.UsageError as e:
            e.exit_code = EXIT_FAILURE
            raise
        ctx.params["tokens"] = tuple(held) + tuple(ctx.params.get("tokens") or ())
        return rest


@click.command(
    name="mkrepo",
    cls=ScaffoldCommand,
    context_settings={"ignore_unknown_options": True},
)
@click.argument("tokens", nargs=-1, type=click.UNPROCESSED)
@click.option(
    "--templates",
    type=click.Path(file_okay=False, path_type=Path),
    help="Template root (default: $MKREPO_TEMPLATES or ~/dev-templates)",
)
@click.option("--serve", is_flag=True, help="Start the dev server when done")
@click.option(
    "--doctor", is_flag=True, help="Report which tools are available and exit"
)
@click.option("--debug", is_flag=True, help="Enable debug output for troubleshooting")
@click.version_option(__version__, prog_name="mkrepo")
def scaffold(tokens, templates: Path | None, serve: bool, doctor: bool, debug: bool):
    """Scaffold a new front-end project.

    \b
      mkrepo --next NAME   Next.js app
      mkrepo --vite NAME   Vite (React + TS) app
      mkrepo               choose interactively

    Set TEST_MODE=true to skip the remote publish prompt and the
    editor/browser launch.
    """
    setup_logging(debug)

    try:
        settings = load_settings().with_overrides(
            template_root=templates,
            serve=serve or None,
            debug=debug or None,
        )
    except ConfigError as e:
        click.echo(describe(e), err=True)
        sys.exit(EXIT_FAILURE)

    tools = probe_tools()

    if doctor:
        missing = display_tool_table(tools)
        sys.exit(EXIT_FAILURE if missing else EXIT_SUCCESS)

    click.echo(BANNER)
    workdir = Path.cwd()

    try:
        config = resolve_config(list(tokens), workdir, get_prompter())
    except UserCancelled:
        outcome = PipelineOutcome.cancelled()
        click.echo(f"\n{FAREWELL}")
        sys.exit(outcome.exit_code)
    except ValidationError as e:
        click.echo(describe(e), err=True)
        sys.exit(EXIT_FAILURE)

    _logging.debug(
        f"Resolved project {config.name!r} ({config.kind.value}), "
        f"test_mode={settings.test_mode}"
    )
    ctx = RunContext(config=config, settings=settings, tools=tools, workdir=workdir)
    outcome = asyncio.run(run_pipeline(ctx))

    if outcome.status is OutcomeStatus.ABORTED:
        click.echo("", err=True)
        click.echo(f"❌ Aborted at: {outcome.at_step}", err=True)
        click.echo(describe(outcome.cause), err=True)
        if ctx.project_dir is not None:
            click.echo(f"   Partial project left in place: {ctx.project_dir}", err=True)
        sys.exit(outcome.exit_code)

    click.echo(f"\n🎉 {config.name} is ready in {ctx.project_dir}")
