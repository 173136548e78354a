"""Workflow state snapshots.

``WorkflowState`` is replaced wholesale on every transition so that the
transition table can be exercised as pure ``(state, event) -> state``
functions. Construction enforces the stage invariants:

- ``CONFIRM``/``ANALYSIS``/``RESULTS`` require a successful ``location``.
- The same stages also require a ``boundary``; entering ``CONFIRM`` derives
  one from the location.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from uhi_analyzer.core.constants import DEFAULT_ANALYSIS_YEAR
from uhi_analyzer.models.boundary import BoundaryConfig
from uhi_analyzer.models.location import LocationResult, ModelValidationError
from uhi_analyzer.models.progress import SimulationRun


class Stage(enum.Enum):
    """Top-level workflow stages, in order."""

    FORM = "form"
    GEOCODING = "geocoding"
    CONFIRM = "confirm"
    ANALYSIS = "analysis"
    RESULTS = "results"


_LOCATED_STAGES = frozenset({Stage.CONFIRM, Stage.ANALYSIS, Stage.RESULTS})


class NoticeKind(enum.Enum):
    """Why a user-facing notice was emitted."""

    QUERY_TOO_SHORT = "query_too_short"
    QUERY_MISSING_SEPARATOR = "query_missing_separator"
    UNSUPPORTED_YEAR = "unsupported_year"
    LOCATION_NOT_FOUND = "location_not_found"
    MISSING_CREDENTIAL = "missing_credential"


@dataclass(frozen=True, slots=True)
class Notice:
    """A fire-and-forget user-facing message."""

    kind: NoticeKind
    title: str
    description: str


@dataclass(frozen=True, slots=True)
class WorkflowState:
    """Immutable snapshot of one workflow.

    Attributes:
        stage: Current stage.
        query: Last submitted (trimmed) search text.
        year: Analysis year.
        location: Resolved location, present from ``CONFIRM`` onward. Never
            changed by boundary edits, so it also seeds a boundary reset.
        boundary: Current analysis boundary.
        center_draggable: Whether the map marker accepts drags.
        progress: Latest analysis simulation snapshot.
    """

    stage: Stage = Stage.FORM
    query: str = ""
    year: int = DEFAULT_ANALYSIS_YEAR
    location: LocationResult | None = None
    boundary: BoundaryConfig | None = None
    center_draggable: bool = False
    progress: SimulationRun | None = None

    def __post_init__(self) -> None:
        if self.stage in _LOCATED_STAGES and (
            self.location is None or not self.location.is_success
        ):
            raise ModelValidationError(
                "WorkflowState",
                "location",
                self.location,
                f"stage {self.stage.value} requires a successful location",
            )
        if self.stage in _LOCATED_STAGES and self.boundary is None:
            raise ModelValidationError(
                "WorkflowState",
                "boundary",
                self.boundary,
                f"stage {self.stage.value} requires a boundary",
            )

    def located(self) -> tuple[LocationResult, BoundaryConfig]:
        """Return ``(location, boundary)`` for a stage that carries both.

        Raises:
            ModelValidationError: If called before a location was resolved.
        """
        if self.location is None or self.boundary is None:
            raise ModelValidationError(
                "WorkflowState",
                "location" if self.location is None else "boundary",
                self.stage.value,
                "no resolved location and boundary in this stage",
            )
        return self.location, self.boundary
