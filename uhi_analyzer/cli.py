"""
Command-line interface for the analyzer.

Runs one workflow end to end in the terminal: resolve the place, confirm
the boundary (optionally with a new radius), run the analysis simulation
and print the hand-off record as JSON.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from uhi_analyzer import __version__
from uhi_analyzer.core.config import ConfigValidationError, WorkflowConfig
from uhi_analyzer.geocoding.resolver import GeoResolver
from uhi_analyzer.geocoding.suggestions import suggest
from uhi_analyzer.models.workflow import Stage
from uhi_analyzer.simulation.simulator import ProgressSimulator
from uhi_analyzer.utils.formatting import describe_location, describe_progress
from uhi_analyzer.workflow.controller import WorkflowController


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="uhi-analyzer",
        description="Locate a city, confirm its analysis boundary and run the heat island analysis",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "query",
        help='Place to analyze, e.g. "Paris, France"',
    )
    parser.add_argument(
        "--year",
        type=int,
        default=None,
        help="Analysis year (default: DEFAULT_ANALYSIS_YEAR or 2023)",
    )
    parser.add_argument(
        "--radius",
        type=float,
        default=None,
        help="Boundary radius in km, clamped to 5-50 (default: keep the derived radius)",
    )
    parser.add_argument(
        "--suggest",
        action="store_true",
        help="Only list major cities matching the query",
    )
    return parser


async def run_workflow(
    config: WorkflowConfig,
    query: str,
    year: int | None,
    radius_km: float | None,
) -> int:
    """Drive one workflow and return the process exit code."""
    controller = WorkflowController(
        GeoResolver.from_config(config),
        ProgressSimulator(tick_ms=config.progress_tick_ms),
        config=config,
    )
    try:
        state = await controller.submit(query, year)
        if state.stage is not Stage.CONFIRM or state.location is None:
            return 1
        print(describe_location(state.location))

        controller.confirm(radius_km=radius_km)
        analysis = asyncio.ensure_future(controller.wait_for_analysis())
        last_label = ""
        while not analysis.done():
            progress = controller.state.progress
            if progress is not None and progress.current_label != last_label:
                last_label = progress.current_label
                print(describe_progress(progress))
            await asyncio.sleep(config.progress_tick_ms / 1000.0)
        state = await analysis

        if state.stage is not Stage.RESULTS or controller.analysis_request is None:
            return 1
        if state.progress is not None:
            print(describe_progress(state.progress))
        print(controller.analysis_request.model_dump_json(indent=2))
        return 0
    finally:
        controller.close()


def cmd_suggest(query: str) -> int:
    """Print typeahead matches for *query*."""
    matches = suggest(query)
    for city in matches:
        print(city)
    return 0 if matches else 1


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.suggest:
        return cmd_suggest(args.query)

    try:
        config = WorkflowConfig.from_env()
    except (ConfigValidationError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    return asyncio.run(run_workflow(config, args.query, args.year, args.radius))


if __name__ == "__main__":
    sys.exit(main())
