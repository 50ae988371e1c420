"""Interactive prompts for project kind and name.

- questionary for rich interactive prompts (when TTY available)
- click as fallback for CI/headless scenarios, reading answers from stdin
- Ctrl-C, Escape and end of input all cancel the run
"""

import sys

import click
from prompt_toolkit.key_binding import KeyBindings, merge_key_bindings
from prompt_toolkit.styles import Style

from .pipeline.models import KIND_PROFILES, ProjectKind


class UserCancelled(Exception):
    """The user backed out of a prompt. Not an error: the run exits 0."""

    pass


FAREWELL = "👋 Cancelled. Nothing was created."

_STYLE = Style(
    [
        ("qmark", "fg:ansicyan bold"),
        ("question", "bold"),
        ("pointer", "fg:ansicyan bold"),
        ("highlighted", "fg:ansicyan bold"),
        ("answer", "fg:ansigreen bold"),
    ]
)


def _cancel_on_escape(question):
    """Bind Escape to the same exit path as Ctrl-C."""
    kb = KeyBindings()

    @kb.add("escape", eager=True)
    def _(event):
        event.app.exit(exception=KeyboardInterrupt, style="class:aborting")

    app = question.application
    app.key_bindings = merge_key_bindings([app.key_bindings, kb])
    return question


def _ask(question):
    # unsafe_ask lets KeyboardInterrupt through instead of returning None;
    # prompt_toolkit restores the terminal mode before it propagates
    try:
        answer = _cancel_on_escape(question).unsafe_ask()
    except (KeyboardInterrupt, EOFError):
        raise UserCancelled()
    if answer is None:
        raise UserCancelled()
    return answer


class TerminalPrompter:
    """questionary prompts on an interactive terminal."""

    def select_kind(self) -> ProjectKind:
        import questionary

        choices = [
            questionary.Choice(title=profile.label, value=kind)
            for kind, profile in KIND_PROFILES.items()
        ]
        return _ask(
            questionary.select(
                "Choose a project type:", choices=choices, style=_STYLE
            )
        )

    def ask_name(self) -> str:
        import questionary

        return _ask(
            questionary.text(
                "Project name:",
                validate=lambda v: bool(v.strip()) or "Project name is required",
                style=_STYLE,
            )
        )


class PlainPrompter:
    """click prompts reading from stdin, for scripted answers."""

    def select_kind(self) -> ProjectKind:
        values = [kind.value for kind in ProjectKind]
        try:
            answer = click.prompt(
                "Choose a project type",
                type=click.Choice(values, case_sensitive=False),
            )
        except click.exceptions.Abort:
            raise UserCancelled()
        return ProjectKind(answer.lower())

    def ask_name(self) -> str:
        try:
            return click.prompt("Project name")
        except click.exceptions.Abort:
            raise UserCancelled()


def get_prompter():
    if sys.stdin.isatty() and sys.stdout.isatty():
        return TerminalPrompter()
    return PlainPrompter()


__all__ = [
    "UserCancelled",
    "FAREWELL",
    "TerminalPrompter",
    "PlainPrompter",
    "get_prompter",
]
