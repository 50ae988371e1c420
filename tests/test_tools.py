"""Tests for tool availability probing."""

import os
import stat
from pathlib import Path
from unittest.mock import patch

import pytest

from mkrepo.tools import (
    BROWSER,
    CAPABILITIES,
    EDITOR,
    VCS_HOST_CLI,
    WINDOW_MANAGER,
    CapabilitySpec,
    ResolvedTool,
    ToolAvailability,
    get_all_capabilities,
    get_capability,
    probe_tools,
    resolve_capability,
    strategies_for,
)


def _make_executable(directory: Path, name: str) -> Path:
    path = directory / name
    path.write_text("#!/bin/sh\nexit 0\n")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


def test_every_capability_is_declared():
    specs = get_all_capabilities()
    assert set(specs) == set(CAPABILITIES)
    assert get_capability("nonexistent") is None


class TestStrategies:
    def test_path_lookup_comes_first(self):
        spec = get_capability(BROWSER)
        assert len(strategies_for(spec, platform="linux")) == 4
        assert len(strategies_for(spec, platform="darwin")) == 2

    def test_other_platform_fallbacks_are_skipped(self):
        spec = get_capability(WINDOW_MANAGER)
        assert len(strategies_for(spec, platform="linux")) == 1
        assert len(strategies_for(spec, platform="win32")) == 1

    @pytest.mark.skipif(os.name == "nt", reason="POSIX executables")
    def test_canonical_binary_on_path(self, temp_dir: Path):
        found = _make_executable(temp_dir, "code")
        resolved = resolve_capability(
            get_capability(EDITOR), platform="linux", path=str(temp_dir)
        )
        assert resolved == ResolvedTool(EDITOR, str(found), "PATH")

    @pytest.mark.skipif(os.name == "nt", reason="POSIX executables")
    def test_alternate_binary_name(self, temp_dir: Path):
        found = _make_executable(temp_dir, "chromium-browser")
        resolved = resolve_capability(
            get_capability(BROWSER), platform="linux", path=str(temp_dir)
        )
        assert resolved is not None
        assert resolved.location == str(found)

    def test_fixed_location_fallback(self, temp_dir: Path):
        bundle = temp_dir / "Rectangle.app"
        bundle.mkdir()
        spec = CapabilitySpec(
            name=WINDOW_MANAGER,
            binary="definitely-not-installed-xyz",
            install_hint="",
            fallbacks={"darwin": [("path", str(bundle))]},
        )
        resolved = resolve_capability(spec, platform="darwin", path="")
        assert resolved is not None
        assert resolved.via == "fallback"
        assert resolved.is_app_bundle

    def test_empty_path_and_no_fallbacks(self):
        for capability in CAPABILITIES:
            spec = get_capability(capability)
            assert resolve_capability(spec, platform="plan9", path="") is None

    def test_strategy_errors_fold_into_unavailable(self):
        spec = get_capability(VCS_HOST_CLI)
        with patch("mkrepo.tools.shutil.which", side_effect=OSError("denied")), patch(
            "mkrepo.tools.Path.exists", side_effect=PermissionError("denied")
        ):
            assert resolve_capability(spec, platform="linux") is None


class TestToolAvailability:
    def test_probes_once_per_capability(self):
        tools = ToolAvailability(platform="linux", path="")
        with patch("mkrepo.tools.resolve_capability", return_value=None) as resolve:
            assert tools.probe(EDITOR) is False
            assert tools[EDITOR] is False
            tools.probe_all()
        assert resolve.call_count == len(CAPABILITIES)

    def test_none_reports_everything_absent(self):
        tools = ToolAvailability.none()
        with patch("mkrepo.tools.resolve_capability") as resolve:
            assert tools.probe_all() == {name: False for name in CAPABILITIES}
        resolve.assert_not_called()

    def test_from_mapping(self):
        editor = ResolvedTool(EDITOR, "/usr/bin/code", "PATH")
        tools = ToolAvailability.from_mapping({EDITOR: editor})
        assert tools[EDITOR] is True
        assert tools[BROWSER] is False
        assert tools.resolve(EDITOR) is editor

    def test_unknown_capability(self):
        with pytest.raises(KeyError):
            ToolAvailability(platform="linux", path="").probe("teleporter")

    def test_probe_tools_with_empty_path(self):
        tools = probe_tools(platform="plan9", path="")
        assert tools.probe_all() == {name: False for name in CAPABILITIES}
