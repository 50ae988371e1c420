"""Uniform executor for the scaffold pipeline."""

import logging

import click

from ..errors import ExternalToolFailure, ScaffoldError
from .models import PipelineOutcome, PipelineStep, RunContext, StepResult
from .steps import build_steps

_logging = logging.getLogger(__name__)

_STATUS_ICONS = {
    "success": "✅",
    "skipped": "⏭️ ",
    "failed": "⚠️ ",
}


def _report(result: StepResult) -> None:
    icon = _STATUS_ICONS.get(result.status, "•")
    line = f"{icon} {result.label}"
    if result.status == "skipped" and result.output:
        line += f" ({result.output})"
    click.echo(line)


async def run_pipeline(
    ctx: RunContext, steps: list[PipelineStep] | None = None
) -> PipelineOutcome:
    """Run ``steps`` (default: ``build_steps(ctx)``) strictly in order.

    A failing required step ends the run with an ABORTED outcome; whatever
    is already on disk is left in place for inspection. A failing optional
    step is logged and the run continues.
    """
    if steps is None:
        steps = build_steps(ctx)

    results: list[StepResult] = []
    for step in steps:
        _logging.debug(f"Starting step: {step.label} (required={step.required})")
        try:
            result = await step.action(ctx)
        except ScaffoldError as e:
            if step.required:
                _logging.error(f"Required step '{step.label}' failed: {e}")
                return PipelineOutcome.aborted(step.label, e, results)
            _logging.info(f"Optional step '{step.label}' failed: {e}")
            result = StepResult(step.label, "failed", str(e))
        except OSError as e:
            if step.required:
                _logging.error(f"Required step '{step.label}' failed: {e}")
                cause = ExternalToolFailure(step.label, str(e))
                return PipelineOutcome.aborted(step.label, cause, results)
            _logging.info(f"Optional step '{step.label}' failed: {e}")
            result = StepResult(step.label, "failed", str(e))

        results.append(result)
        _report(result)

    return PipelineOutcome.success(results)


__all__ = ["run_pipeline"]
