"""Data models and schemas.

Defines the data structures used throughout the workflow:
- LocationResult: Outcome of resolving a place query
- BoundaryConfig: Circular analysis region (center + radius)
- ProgressStep / SimulationRun: Progress simulator inputs and snapshots
- WorkflowState: Immutable snapshot of the workflow state machine
- AnalysisRequest: Pydantic hand-off record for the results view
"""

from uhi_analyzer.models.boundary import BoundaryConfig
from uhi_analyzer.models.location import (
    LocationResult,
    LocationStatus,
    ModelValidationError,
    is_valid_coordinate,
)
from uhi_analyzer.models.progress import (
    ANALYSIS_STEPS,
    Phase,
    ProgressStep,
    SimulationRun,
    steps_for_phase,
)
from uhi_analyzer.models.workflow import Notice, NoticeKind, Stage, WorkflowState

__all__ = [
    "ANALYSIS_STEPS",
    "BoundaryConfig",
    "LocationResult",
    "LocationStatus",
    "ModelValidationError",
    "Notice",
    "NoticeKind",
    "Phase",
    "ProgressStep",
    "SimulationRun",
    "Stage",
    "WorkflowState",
    "is_valid_coordinate",
    "steps_for_phase",
]
