"""Scenario harness command."""

import sys
from pathlib import Path

import click

from mkrepo import setup_logging
from mkrepo.errors import format_suggestion
from mkrepo.harness import Harness, select_scenarios


@click.command(name="mkrepo-harness")
@click.option(
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("harness-runs"),
    show_default=True,
    help="Directory for scenario workspaces and logs (wiped on every run)",
)
@click.option(
    "--only",
    multiple=True,
    help="Run only the scenario with this label (repeatable)",
)
@click.option(
    "--skip-remote-cleanup",
    is_flag=True,
    help="Do not delete GitHub repositories left by earlier runs",
)
@click.option(
    "--timeout",
    type=float,
    default=None,
    help="Per-scenario timeout in seconds (default: none)",
)
@click.option("--debug", is_flag=True, help="Enable debug output for troubleshooting")
def run_harness(root: Path, only: tuple[str, ...], skip_remote_cleanup: bool, timeout, debug: bool):
    """Run the mkrepo CLI end-to-end against the declared scenarios."""
    setup_logging(debug)

    try:
        scenarios = select_scenarios(only)
    except KeyError as e:
        click.echo(
            format_suggestion(
                f"unknown scenario: {e.args[0]}", "run without --only to see all scenarios"
            ),
            err=True,
        )
        sys.exit(1)

    runner = Harness(
        root,
        scenarios=scenarios,
        remote_cleanup=not skip_remote_cleanup,
        timeout=timeout,
    )
    runs = runner.run()

    failed = [run for run in runs if not run.passed]
    click.echo("")
    if failed:
        click.echo(f"❌ {len(failed)} of {len(runs)} scenario(s) failed.")
        sys.exit(1)
    click.echo(f"✅ All {len(runs)} scenario(s) passed.")
