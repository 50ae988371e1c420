"""Tool availability display for ``mkrepo --doctor``."""

import shutil

import click

from .tools import CAPABILITIES, ToolAvailability, get_capability

REQUIRED_BINARIES = ("node", "npm", "npx", "git")


def format_tool_line(
    name: str, location: str | None, hint: str, max_name_width: int = 14
) -> str:
    """Format a single tool status line.

    Example output:
        ✅ editor          /usr/bin/code
        ❌ browser         missing  (Install Google Chrome or Chromium)
    """
    padded = name.ljust(max_name_width)
    if location is None:
        return f"❌ {padded}  missing  ({hint})"
    return f"✅ {padded}  {location}"


def display_tool_table(tools: ToolAvailability) -> int:
    """Print required binaries and optional capabilities.

    Returns:
        Number of required binaries that are missing
    """
    names = list(REQUIRED_BINARIES) + list(CAPABILITIES)
    width = max(len(n) for n in names)

    click.echo("")
    click.secho("  Required tools", bold=True)
    missing_required = 0
    for binary in REQUIRED_BINARIES:
        location = shutil.which(binary, path=tools.path)
        if location is None:
            missing_required += 1
        line = format_tool_line(binary, location, "required", width)
        click.secho(f"  {line}", fg="green" if location else "red")

    click.echo("")
    click.secho("  Optional integrations", bold=True)
    for capability in CAPABILITIES:
        resolved = tools.resolve(capability)
        spec = get_capability(capability)
        hint = spec.install_hint if spec else "unknown"
        line = format_tool_line(
            capability, resolved.location if resolved else None, hint, width
        )
        click.secho(f"  {line}", fg="green" if resolved else "yellow")

    click.echo("")
    return missing_required


__all__ = ["REQUIRED_BINARIES", "format_tool_line", "display_tool_table"]
