"""Tool availability probing.

Each optional integration (editor, browser, window manager, hosting CLI)
is a capability. A capability resolves through an ordered list of
strategies: a PATH lookup of its canonical binary first, then fallbacks
for the current platform only. Probes never raise; anything that goes
wrong while checking is folded into "not available".
"""

import logging
import os
import shutil
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

_logging = logging.getLogger(__name__)

EDITOR = "editor"
BROWSER = "browser"
WINDOW_MANAGER = "windowManager"
VCS_HOST_CLI = "vcsHostCli"

CAPABILITIES = (EDITOR, BROWSER, WINDOW_MANAGER, VCS_HOST_CLI)


@dataclass(frozen=True)
class ResolvedTool:
    capability: str
    location: str
    via: str

    @property
    def is_app_bundle(self) -> bool:
        return self.location.endswith(".app")


Strategy = Callable[[], ResolvedTool | None]


def which(capability: str, binary: str, path: str | None = None) -> Strategy:
    """Strategy: look ``binary`` up on PATH."""

    def _lookup() -> ResolvedTool | None:
        found = shutil.which(binary, path=path)
        if found:
            return ResolvedTool(capability, found, "PATH")
        return None

    return _lookup


def existing(capability: str, location: str) -> Strategy:
    """Strategy: accept a fixed install location if it exists."""

    def _check() -> ResolvedTool | None:
        candidate = Path(os.path.expandvars(location)).expanduser()
        if candidate.exists():
            return ResolvedTool(capability, str(candidate), "fallback")
        return None

    return _check


@dataclass(frozen=True)
class CapabilitySpec:
    name: str
    binary: str
    install_hint: str
    fallbacks: dict[str, list[tuple[str, str]]] = field(default_factory=dict)


# fallbacks: platform prefix -> [(kind, value)], kind is "binary" or "path"
_BUILTIN_CAPABILITIES = [
    CapabilitySpec(
        name=EDITOR,
        binary="code",
        install_hint="Install VS Code and its 'code' shell command",
        fallbacks={
            "darwin": [
                (
                    "path",
                    "/Applications/Visual Studio Code.app/Contents/Resources/app/bin/code",
                ),
            ],
            "linux": [("binary", "code-insiders"), ("binary", "codium")],
            "win32": [
                (
                    "path",
                    "$LOCALAPPDATA/Programs/Microsoft VS Code/bin/code.cmd",
                ),
            ],
        },
    ),
    CapabilitySpec(
        name=BROWSER,
        binary="google-chrome",
        install_hint="Install Google Chrome or Chromium",
        fallbacks={
            "darwin": [("path", "/Applications/Google Chrome.app")],
            "linux": [
                ("binary", "google-chrome-stable"),
                ("binary", "chromium"),
                ("binary", "chromium-browser"),
            ],
            "win32": [
                ("path", "$PROGRAMFILES/Google/Chrome/Application/chrome.exe"),
            ],
        },
    ),
    CapabilitySpec(
        name=WINDOW_MANAGER,
        binary="xdotool",
        install_hint="Install Rectangle (macOS) or xdotool (Linux)",
        fallbacks={
            "darwin": [("path", "/Applications/Rectangle.app")],
        },
    ),
    CapabilitySpec(
        name=VCS_HOST_CLI,
        binary="gh",
        install_hint="Install the GitHub CLI from https://cli.github.com",
        fallbacks={
            "darwin": [
                ("path", "/opt/homebrew/bin/gh"),
                ("path", "/usr/local/bin/gh"),
            ],
            "linux": [
                ("path", "/home/linuxbrew/.linuxbrew/bin/gh"),
                ("path", "/snap/bin/gh"),
            ],
        },
    ),
]


def get_all_capabilities() -> dict[str, CapabilitySpec]:
    return {spec.name: spec for spec in _BUILTIN_CAPABILITIES}


def get_capability(name: str) -> CapabilitySpec | None:
    return get_all_capabilities().get(name)


def strategies_for(
    spec: CapabilitySpec, platform: str | None = None, path: str | None = None
) -> list[Strategy]:
    """Build the ordered strategy list for ``spec`` on ``platform``."""
    platform = platform or sys.platform
    strategies = [which(spec.name, spec.binary, path)]
    for prefix, fallbacks in spec.fallbacks.items():
        if not platform.startswith(prefix):
            continue
        for kind, value in fallbacks:
            if kind == "binary":
                strategies.append(which(spec.name, value, path))
            else:
                strategies.append(existing(spec.name, value))
    return strategies


def resolve_capability(
    spec: CapabilitySpec, platform: str | None = None, path: str | None = None
) -> ResolvedTool | None:
    for strategy in strategies_for(spec, platform, path):
        try:
            resolved = strategy()
        except (OSError, ValueError) as e:
            _logging.debug(f"Probe for {spec.name} failed: {e}")
            continue
        if resolved:
            _logging.debug(
                f"{spec.name}: found {resolved.location} via {resolved.via}"
            )
            return resolved
    _logging.debug(f"{spec.name}: not available")
    return None


class ToolAvailability:
    """Capability -> availability, probed at most once per capability."""

    def __init__(self, platform: str | None = None, path: str | None = None):
        self.platform = platform or sys.platform
        self.path = path
        self._resolved: dict[str, ResolvedTool | None] = {}

    @classmethod
    def none(cls) -> "ToolAvailability":
        """An availability map where every capability is absent."""
        tools = cls()
        for name in CAPABILITIES:
            tools._resolved[name] = None
        return tools

    @classmethod
    def from_mapping(cls, resolved: dict[str, ResolvedTool | None]) -> "ToolAvailability":
        tools = cls.none()
        tools._resolved.update(resolved)
        return tools

    def resolve(self, capability: str) -> ResolvedTool | None:
        if capability not in self._resolved:
            spec = get_capability(capability)
            if spec is None:
                raise KeyError(capability)
            self._resolved[capability] = resolve_capability(
                spec, self.platform, self.path
            )
        return self._resolved[capability]

    def probe(self, capability: str) -> bool:
        return self.resolve(capability) is not None

    def __getitem__(self, capability: str) -> bool:
        return self.probe(capability)

    def probe_all(self) -> dict[str, bool]:
        return {name: self.probe(name) for name in CAPABILITIES}


def probe_tools(platform: str | None = None, path: str | None = None) -> ToolAvailability:
    """Probe every capability once and return the frozen result."""
    tools = ToolAvailability(platform, path)
    tools.probe_all()
    return tools


__all__ = [
    "EDITOR",
    "BROWSER",
    "WINDOW_MANAGER",
    "VCS_HOST_CLI",
    "CAPABILITIES",
    "ResolvedTool",
    "CapabilitySpec",
    "ToolAvailability",
    "get_all_capabilities",
    "get_capability",
    "strategies_for",
    "resolve_capability",
    "probe_tools",
]
