"""Workflow transition table as pure functions.

``apply(state, event)`` returns the next ``WorkflowState``. It performs no
I/O and starts nothing; the controller owns side effects (resolution,
simulations, notices, map rendering) and feeds their outcomes back in as
events.

| From       | Event            | To         |
|------------|------------------|------------|
| FORM       | Submit (valid)   | GEOCODING  |
| GEOCODING  | Resolved ok      | CONFIRM    |
| GEOCODING  | Resolved not ok  | FORM       |
| CONFIRM    | Confirm          | ANALYSIS   |
| CONFIRM    | Edit*/Reset      | CONFIRM    |
| ANALYSIS   | AnalysisTick     | ANALYSIS   |
| ANALYSIS   | AnalysisDone     | RESULTS    |
| any        | NavigateHome     | FORM       |

Every other ``(stage, event)`` pair returns *state* unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from uhi_analyzer.boundary import model as boundary_model
from uhi_analyzer.core.constants import DEFAULT_RADIUS_KM
from uhi_analyzer.models.location import LocationResult
from uhi_analyzer.models.progress import SimulationRun
from uhi_analyzer.models.workflow import Stage, WorkflowState
from uhi_analyzer.workflow.validation import QueryValidationError, check_query

# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Submit:
    query: str
    year: int


@dataclass(frozen=True, slots=True)
class Resolved:
    location: LocationResult
    default_radius_km: float = DEFAULT_RADIUS_KM


@dataclass(frozen=True, slots=True)
class Confirm:
    center: tuple[float, float] | None = None
    radius_km: float | None = None


@dataclass(frozen=True, slots=True)
class EditRadius:
    radius_km: float


@dataclass(frozen=True, slots=True)
class EditCenter:
    center: tuple[float, float]


@dataclass(frozen=True, slots=True)
class ToggleCenterEdit:
    pass


@dataclass(frozen=True, slots=True)
class ResetBoundary:
    default_radius_km: float = DEFAULT_RADIUS_KM


@dataclass(frozen=True, slots=True)
class AnalysisTick:
    run: SimulationRun


@dataclass(frozen=True, slots=True)
class AnalysisDone:
    pass


@dataclass(frozen=True, slots=True)
class NavigateHome:
    pass


Event = (
    Submit
    | Resolved
    | Confirm
    | EditRadius
    | EditCenter
    | ToggleCenterEdit
    | ResetBoundary
    | AnalysisTick
    | AnalysisDone
    | NavigateHome
)


# ---------------------------------------------------------------------------
# Transition function
# ---------------------------------------------------------------------------


def apply(state: WorkflowState, event: Event) -> WorkflowState:
    """Return the state that follows *state* on *event*.

    Raises:
        InvalidRadiusError: If an ``EditRadius``/``Confirm`` radius is not finite.
    """
    if isinstance(event, NavigateHome):
        return WorkflowState(query=state.query, year=state.year)

    if state.stage is Stage.FORM:
        if isinstance(event, Submit):
            return _on_submit(state, event)
        return state

    if state.stage is Stage.GEOCODING:
        if isinstance(event, Resolved):
            return _on_resolved(state, event)
        return state

    if state.stage is Stage.CONFIRM:
        return _on_confirm_stage(state, event)

    if state.stage is Stage.ANALYSIS:
        if isinstance(event, AnalysisTick):
            return replace(state, progress=event.run)
        if isinstance(event, AnalysisDone):
            return replace(state, stage=Stage.RESULTS)
        return state

    return state


def _on_submit(state: WorkflowState, event: Submit) -> WorkflowState:
    try:
        query = check_query(event.query, event.year)
    except QueryValidationError:
        return state
    return WorkflowState(stage=Stage.GEOCODING, query=query, year=event.year)


def _on_resolved(state: WorkflowState, event: Resolved) -> WorkflowState:
    if not event.location.is_success:
        return WorkflowState(stage=Stage.FORM, query=state.query, year=state.year)
    return replace(
        state,
        stage=Stage.CONFIRM,
        location=event.location,
        boundary=boundary_model.init_from_location(event.location, event.default_radius_km),
        center_draggable=False,
        progress=None,
    )


def _on_confirm_stage(state: WorkflowState, event: Event) -> WorkflowState:
    location, boundary = state.located()

    if isinstance(event, EditRadius):
        return replace(state, boundary=boundary_model.set_radius(boundary, event.radius_km))

    if isinstance(event, EditCenter):
        if not state.center_draggable:
            return state
        return replace(state, boundary=boundary_model.set_center(boundary, event.center))

    if isinstance(event, ToggleCenterEdit):
        return replace(state, center_draggable=not state.center_draggable)

    if isinstance(event, ResetBoundary):
        return replace(
            state, boundary=boundary_model.reset(location, event.default_radius_km)
        )

    if isinstance(event, Confirm):
        final = boundary
        if event.center is not None:
            final = boundary_model.set_center(final, event.center)
        if event.radius_km is not None:
            final = boundary_model.set_radius(final, event.radius_km)
        return replace(
            state,
            stage=Stage.ANALYSIS,
            boundary=final,
            center_draggable=False,
            progress=None,
        )

    return state
