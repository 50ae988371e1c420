"""Declared end-to-end scenarios for the mkrepo CLI."""

import re
from dataclasses import dataclass, field
from enum import Enum


class Expected(Enum):
    PASS = "pass"
    FAIL = "fail"


@dataclass(frozen=True)
class TestScenario:
    """One CLI invocation and what it should produce.

    ``stdin`` holds scripted prompt answers, one per line.
    """

    __test__ = False

    label: str
    args: tuple[str, ...]
    expected: Expected = Expected.PASS
    project_name: str | None = None
    env: dict[str, str] = field(default_factory=dict, hash=False)
    stdin: str | None = None

    @property
    def slug(self) -> str:
        return re.sub(r"\s+", "-", self.label.strip()).lower()

    @property
    def should_fail(self) -> bool:
        return self.expected is Expected.FAIL


SCENARIOS = (
    TestScenario(
        label="Vite basic",
        args=("--vite", "test-vite"),
        project_name="test-vite",
    ),
    TestScenario(
        label="Next basic",
        args=("--next", "test-next"),
        project_name="test-next",
    ),
    TestScenario(
        label="Prompt fallback",
        args=(),
        project_name="test-prompt",
        stdin="vite\nTest Prompt\n",
    ),
    TestScenario(
        label="Missing name",
        args=("--vite",),
        expected=Expected.FAIL,
    ),
    TestScenario(
        label="Invalid mixed flags",
        args=("--vite", "--next", "conflict"),
        expected=Expected.FAIL,
    ),
    TestScenario(
        label="Looks like flag",
        args=("--vite", "--prod"),
        expected=Expected.FAIL,
    ),
    TestScenario(
        label="Unsanitizable name",
        args=("--vite", "///!!!"),
        expected=Expected.FAIL,
    ),
)


def select_scenarios(labels: list[str] | tuple[str, ...] | None = None) -> tuple[TestScenario, ...]:
    """Filter the declared scenarios by label or slug, keeping declared order.

    Raises:
        KeyError: if a requested label matches no scenario
    """
    if not labels:
        return SCENARIOS
    wanted = {label.strip().lower() for label in labels}
    known = {s.label.lower() for s in SCENARIOS} | {s.slug for s in SCENARIOS}
    unknown = sorted(wanted - known)
    if unknown:
        raise KeyError(", ".join(unknown))
    return tuple(
        s for s in SCENARIOS if s.label.lower() in wanted or s.slug in wanted
    )


__all__ = ["Expected", "TestScenario", "SCENARIOS", "select_scenarios"]
