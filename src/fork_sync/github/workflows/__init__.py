"""Workflow-disabling sweep across organization repositories."""

from .disabler import RepoWorkflowResult, WorkflowDisabler, WorkflowSweepResult

__all__ = [
    "RepoWorkflowResult",
    "WorkflowDisabler",
    "WorkflowSweepResult",
]
