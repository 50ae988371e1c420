"""CLI command definitions for mkrepo."""

from mkrepo.commands.create import scaffold
from mkrepo.commands.harness import run_harness

# Console script entry points
cli = scaffold
harness_cli = run_harness

__all__ = ["cli", "harness_cli", "scaffold", "run_harness"]
