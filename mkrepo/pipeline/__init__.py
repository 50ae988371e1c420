"""Scaffold pipeline: models, step actions and the executor loop."""

from .models import (
    KIND_PROFILES,
    SELECTOR_FLAGS,
    KindProfile,
    OutcomeStatus,
    PipelineOutcome,
    PipelineStep,
    ProjectConfig,
    ProjectKind,
    RunContext,
    StepResult,
)
from .runner import run_pipeline
from .steps import build_steps, render_readme, required_templates

__all__ = [
    "KIND_PROFILES",
    "SELECTOR_FLAGS",
    "KindProfile",
    "OutcomeStatus",
    "PipelineOutcome",
    "PipelineStep",
    "ProjectConfig",
    "ProjectKind",
    "RunContext",
    "StepResult",
    "run_pipeline",
    "build_steps",
    "render_readme",
    "required_templates",
]
