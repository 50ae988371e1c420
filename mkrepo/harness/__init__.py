"""End-to-end scenario harness for the mkrepo CLI."""

from .runner import EXPECTED_ARTIFACTS, Harness, TestRun, build_path, judge
from .scenarios import SCENARIOS, Expected, TestScenario, select_scenarios

__all__ = [
    "EXPECTED_ARTIFACTS",
    "Harness",
    "TestRun",
    "build_path",
    "judge",
    "SCENARIOS",
    "Expected",
    "TestScenario",
    "select_scenarios",
]
