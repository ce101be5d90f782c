"""Module entry point for `python -m pixeloffice`."""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from pixeloffice.app import load_layout_file, run_office, run_office_with_viewer
from pixeloffice.render.office_map import render_frame_panel
from pixeloffice.sim.layout import create_default_layout, serialize_layout


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the pixel office simulation.")
    parser.add_argument(
        "--view",
        action="store_true",
        help="Run the simulation in the interactive office viewer.",
    )
    parser.add_argument(
        "--edit",
        action="store_true",
        help="Open the viewer with layout edit mode enabled.",
    )
    parser.add_argument(
        "--agents",
        type=int,
        default=None,
        help="Number of demo agents to spawn.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for agents and wandering.",
    )
    parser.add_argument(
        "--layout",
        type=Path,
        default=None,
        help="Path to a saved layout JSON document.",
    )
    parser.add_argument(
        "--tick-delay",
        type=float,
        default=None,
        help="Seconds of simulated time per tick.",
    )
    parser.add_argument(
        "--ticks",
        type=int,
        default=None,
        help="Number of ticks to run. Omit for infinite in the viewer.",
    )
    parser.add_argument(
        "--print-layout",
        action="store_true",
        help="Print the layout as JSON and exit.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (DEBUG, INFO, WARNING, ...).",
    )
    args = parser.parse_args()

    _configure_logging(args.log_level)
    layout = load_layout_file(args.layout) if args.layout else None

    if args.print_layout:
        print(serialize_layout(layout or create_default_layout()))
        return

    if args.view or args.edit:
        run_office_with_viewer(
            ticks=args.ticks,
            agents=args.agents,
            seed=args.seed,
            layout=layout,
            tick_delay=args.tick_delay,
            edit_mode=args.edit,
        )
        return

    console = Console()
    last = None
    for frame in run_office(
        ticks=args.ticks if args.ticks is not None else 100,
        agents=args.agents,
        seed=args.seed,
        layout=layout,
        tick_delay=args.tick_delay,
    ):
        last = frame
    if last is not None:
        console.print(render_frame_panel(last))


def _configure_logging(level: str | None) -> None:
    name = (level or os.getenv("PIXELOFFICE_LOG_LEVEL") or "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, name, logging.WARNING),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)],
    )


if __name__ == "__main__":
    main()
