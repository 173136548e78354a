"""Workflow state machine.

- check_query: Local format check run before resolution
- apply: Pure ``(state, event) -> state`` transition table
- WorkflowController: Sequences resolution, boundary edits and simulations
"""

from uhi_analyzer.workflow.controller import (
    MISSING_CREDENTIAL_NOTICE,
    NOT_FOUND_NOTICE,
    MapView,
    WorkflowController,
    log_notice,
)
from uhi_analyzer.workflow.transitions import apply
from uhi_analyzer.workflow.validation import QueryValidationError, check_query

__all__ = [
    "MISSING_CREDENTIAL_NOTICE",
    "NOT_FOUND_NOTICE",
    "MapView",
    "QueryValidationError",
    "WorkflowController",
    "apply",
    "check_query",
    "log_notice",
]
