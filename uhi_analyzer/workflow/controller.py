"""Top-level workflow state machine.

Owns the current ``WorkflowState`` and sequences the resolver, the
boundary model and the progress simulator:

1. ``submit``: local format check, then FORM -> GEOCODING and one
   resolution; success -> CONFIRM, not found / error -> FORM with a notice.
2. Boundary edits (radius, center drag, reset) while in CONFIRM.
3. ``confirm``: CONFIRM -> ANALYSIS, start the analysis simulation.
4. Simulation done -> RESULTS.

State transitions themselves are the pure functions in
``uhi_analyzer.workflow.transitions``; this module adds the side effects
and guarantees that leaving a stage cancels the simulation it owns.

Concurrency:
    Single asyncio loop, no locks. A submit arriving while a resolution is
    outstanding is ignored. A resolution that completes after the user has
    navigated away is discarded.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Protocol

from uhi_analyzer.boundary import model as boundary_model
from uhi_analyzer.boundary.model import InvalidRadiusError
from uhi_analyzer.core.config import WorkflowConfig
from uhi_analyzer.core.exceptions import CancellationError, NotFoundError
from uhi_analyzer.models.analysis_request import (
    AnalysisRequest,
    BoundaryGeometry,
    PlaceSummary,
)
from uhi_analyzer.models.progress import ANALYSIS_STEPS, Phase, steps_for_phase
from uhi_analyzer.models.workflow import Notice, NoticeKind, Stage, WorkflowState
from uhi_analyzer.workflow.transitions import (
    AnalysisDone,
    AnalysisTick,
    Confirm,
    EditCenter,
    EditRadius,
    Event,
    NavigateHome,
    ResetBoundary,
    Resolved,
    Submit,
    ToggleCenterEdit,
    apply,
)
from uhi_analyzer.workflow.validation import QueryValidationError, check_query

if TYPE_CHECKING:
    from collections.abc import Callable

    from uhi_analyzer.geocoding.resolver import GeoResolver
    from uhi_analyzer.models.progress import SimulationRun
    from uhi_analyzer.simulation.simulator import CancelHandle, ProgressSimulator

    Notifier = Callable[[Notice], None]

logger = logging.getLogger("uhi_analyzer.workflow.controller")

NOT_FOUND_NOTICE = Notice(
    NoticeKind.LOCATION_NOT_FOUND,
    "City not found",
    'Try refining with country/state, e.g., "Paris, France".',
)

MISSING_CREDENTIAL_NOTICE = Notice(
    NoticeKind.MISSING_CREDENTIAL,
    "Mapbox token required",
    "Enter a public token to preview the map.",
)

# Simulation phase owned by each stage; leaving the stage cancels it.
_STAGE_PHASES: dict[Stage, Phase] = {
    Stage.GEOCODING: Phase.GEOCODING,
    Stage.ANALYSIS: Phase.ANALYSIS,
}


class MapView(Protocol):
    """Map-rendering collaborator.

    Draws the boundary and, when ``marker_draggable`` is true, reports
    marker drags back through ``WorkflowController.set_center``.
    """

    def render(
        self,
        center: tuple[float, float],
        ring: list[tuple[float, float]],
        marker_draggable: bool,
    ) -> None: ...


def log_notice(notice: Notice) -> None:
    """Default notifier: write the notice to the workflow log."""
    logger.info("Notice | kind=%s | title=%s | description=%s", notice.kind.value, notice.title, notice.description)


class WorkflowController:
    """Drives one workflow from query submission to the results hand-off.

    Args:
        resolver: Place resolver.
        simulator: Progress simulator shared by the geocoding and analysis phases.
        config: Workflow configuration; defaults to ``WorkflowConfig()``.
        notifier: Receives user-facing notices. Defaults to logging them.
        map_view: Optional map collaborator.
    """

    def __init__(
        self,
        resolver: GeoResolver,
        simulator: ProgressSimulator,
        *,
        config: WorkflowConfig | None = None,
        notifier: Notifier | None = None,
        map_view: MapView | None = None,
    ) -> None:
        self._resolver = resolver
        self._simulator = simulator
        self._config = config or WorkflowConfig()
        self._notify: Notifier = notifier or log_notice
        self._map_view = map_view
        self._state = WorkflowState(year=self._config.default_year)
        self._generation = 0
        self._geocoding_handle: CancelHandle | None = None
        self._analysis_handle: CancelHandle | None = None
        self._analysis_request: AnalysisRequest | None = None

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def stage(self) -> Stage:
        return self._state.stage

    @property
    def analysis_request(self) -> AnalysisRequest | None:
        """Hand-off record built when the boundary was confirmed."""
        return self._analysis_request

    @property
    def geocoding_progress(self) -> SimulationRun | None:
        """Display-only progress shown while a resolution is outstanding."""
        if self._geocoding_handle is None:
            return None
        return self._geocoding_handle.run

    # ------------------------------------------------------------------
    # FORM -> GEOCODING -> CONFIRM | FORM
    # ------------------------------------------------------------------

    async def submit(self, query: str, year: int | None = None) -> WorkflowState:
        """Submit a place query.

        Ignored unless the workflow is in ``FORM``. A query failing the local
        format check emits the rule's notice and leaves the stage unchanged.
        """
        if year is None:
            year = self._config.default_year

        if self._state.stage is not Stage.FORM:
            logger.info("Submit ignored | stage=%s | query=%s", self._state.stage.value, query)
            return self._state

        try:
            check_query(query, year)
        except QueryValidationError as exc:
            logger.info("Submit rejected | rule=%s | query=%r", exc.rule, query)
            self._notify(exc.notice)
            return self._state

        self._generation += 1
        generation = self._generation
        state = self._transition(Submit(query, year))
        self._analysis_request = None
        self._geocoding_handle = self._simulator.start(
            steps_for_phase(Phase.GEOCODING, state.query),
            self._on_geocoding_tick,
            phase=Phase.GEOCODING,
        )

        try:
            result = await self._resolver.resolve(state.query, year)
        except asyncio.CancelledError:
            if generation == self._generation:
                self._transition(NavigateHome())
            raise

        if generation != self._generation or self._state.stage is not Stage.GEOCODING:
            superseded = CancellationError(
                f"Resolution for {state.query!r} superseded", stage="geocoding"
            )
            logger.info("Resolution discarded | error=%s", superseded.to_error_dict())
            return self._state

        self._transition(Resolved(result, self._config.default_radius_km))
        if result.is_success:
            self._render_map()
        else:
            missing = NotFoundError(
                f"No place matched {state.query!r}",
                stage="geocoding",
                code=f"LOCATION_{result.status.name}",
            )
            logger.info("Resolution unsuccessful | error=%s", missing.to_error_dict())
            self._notify(NOT_FOUND_NOTICE)
        return self._state

    # ------------------------------------------------------------------
    # CONFIRM edits
    # ------------------------------------------------------------------

    def set_radius(self, radius_km: float) -> WorkflowState:
        """Slider edit; the radius is clamped into range."""
        try:
            return self._edit(EditRadius(radius_km))
        except InvalidRadiusError as exc:
            logger.warning("Radius edit rejected | value=%r | error=%s", radius_km, exc.message)
            return self._state

    def set_center(self, center: tuple[float, float]) -> WorkflowState:
        """Marker drag callback; honoured only while the center is draggable."""
        return self._edit(EditCenter(center))

    def toggle_center_edit(self) -> WorkflowState:
        """Switch between locked and draggable center marker."""
        return self._edit(ToggleCenterEdit())

    def reset_boundary(self) -> WorkflowState:
        """Restore the boundary derived from the resolved location."""
        return self._edit(ResetBoundary(self._config.default_radius_km))

    def _edit(self, event: Event) -> WorkflowState:
        if self._state.stage is not Stage.CONFIRM:
            logger.info("Edit ignored | stage=%s | event=%s", self._state.stage.value, type(event).__name__)
            return self._state
        previous = self._state
        self._transition(event)
        if self._state is not previous:
            self._render_map()
        return self._state

    # ------------------------------------------------------------------
    # CONFIRM -> ANALYSIS -> RESULTS
    # ------------------------------------------------------------------

    def confirm(
        self,
        center: tuple[float, float] | None = None,
        radius_km: float | None = None,
    ) -> WorkflowState:
        """Confirm the boundary and start the analysis simulation.

        Must be called while an asyncio event loop is running.
        """
        if self._state.stage is not Stage.CONFIRM:
            logger.info("Confirm ignored | stage=%s", self._state.stage.value)
            return self._state

        try:
            state = self._transition(Confirm(center, radius_km))
        except InvalidRadiusError as exc:
            logger.warning("Confirm rejected | radius=%r | error=%s", radius_km, exc.message)
            return self._state

        if not self._config.has_live_geocoding:
            self._notify(MISSING_CREDENTIAL_NOTICE)

        self._analysis_request = _build_analysis_request(state)
        self._analysis_handle = self._simulator.start(
            ANALYSIS_STEPS,
            self._on_analysis_tick,
            self._on_analysis_done,
            phase=Phase.ANALYSIS,
        )
        return self._state

    async def wait_for_analysis(self) -> WorkflowState:
        """Wait for the analysis simulation to finish or be cancelled."""
        if self._analysis_handle is not None:
            await self._analysis_handle.wait()
        return self._state

    # ------------------------------------------------------------------
    # Leaving the workflow
    # ------------------------------------------------------------------

    def navigate_home(self) -> WorkflowState:
        """Abandon the current workflow and return to ``FORM``."""
        self._generation += 1
        self._transition(NavigateHome())
        self._simulator.cancel_all()
        self._analysis_request = None
        return self._state

    def close(self) -> None:
        """Cancel all outstanding work owned by this controller."""
        self._generation += 1
        self._simulator.cancel_all()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _transition(self, event: Event) -> WorkflowState:
        previous = self._state
        self._state = apply(previous, event)
        if self._state.stage is not previous.stage:
            logger.info(
                "Stage transition | from=%s | to=%s | event=%s | query=%s",
                previous.stage.value,
                self._state.stage.value,
                type(event).__name__,
                self._state.query,
            )
            phase = _STAGE_PHASES.get(previous.stage)
            handle = self._simulator.active(phase) if phase is not None else None
            if handle is not None and not handle.run.done:
                self._simulator.cancel(phase)
        return self._state

    def _on_geocoding_tick(self, index: int, label: str, percent: int) -> None:
        logger.debug("Geocoding progress | step=%d | label=%s | percent=%d", index, label, percent)

    def _on_analysis_tick(self, index: int, label: str, percent: int) -> None:
        if self._analysis_handle is None:
            return
        logger.debug("Analysis progress | step=%d | label=%s | percent=%d", index, label, percent)
        self._transition(AnalysisTick(self._analysis_handle.run))

    def _on_analysis_done(self) -> None:
        self._transition(AnalysisDone())

    def _render_map(self) -> None:
        boundary = self._state.boundary
        if self._map_view is None or boundary is None:
            return
        self._map_view.render(
            boundary.center,
            boundary_model.to_polygon(boundary),
            self._state.center_draggable,
        )


def _build_analysis_request(state: WorkflowState) -> AnalysisRequest:
    """Build the results hand-off record for a confirmed ``state``."""
    location, boundary = state.located()

    ring = boundary_model.to_polygon(boundary)
    return AnalysisRequest(
        query=state.query,
        year=state.year,
        place=PlaceSummary(
            official_name=location.official_name,
            coordinates=list(location.coordinates),
            bounding_box=list(location.bounding_box) if location.bounding_box else None,
            area_km2=location.area_km2,
            population=location.population,
        ),
        boundary=BoundaryGeometry(
            coordinates=[[list(c) for c in ring]],
            center=list(boundary.center),
            radius_km=boundary.radius_km,
            area_km2=boundary_model.area_km2(boundary),
        ),
    )
