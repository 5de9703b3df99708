"""Entry point for ``python -m mongoose``.

Loads the default YAML config, builds a simulation engine, runs it
headless for a fixed number of ticks, and logs the final scoreboard
along with a count of every event type seen.
Rendering and keyboard input live outside the core.
"""

from __future__ import annotations

import argparse
import logging
import pathlib
from collections import Counter

import structlog

from mongoose.simulation.config import SimulationConfig
from mongoose.simulation.engine import SimulationEngine

_DEFAULT_CONFIG = (
    pathlib.Path(__file__).resolve().parent.parent / "config" / "default.yaml"
)


def configure_logging(level: str) -> None:
    """Set up structured console logging at ``level``."""
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper()),
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def main(argv: list[str] | None = None) -> None:
    """Parse CLI args, run the engine, report the scoreboard."""
    parser = argparse.ArgumentParser(
        prog="mongoose",
        description="Mongoose - snakes, mice and berries on a grid arena",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=pathlib.Path,
        default=_DEFAULT_CONFIG,
        help="Path to YAML config file (default: config/default.yaml)",
    )
    parser.add_argument(
        "--ticks",
        type=int,
        default=64 * 60,
        help="Number of ticks to simulate (default: one minute at 64 Hz)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Override the RNG seed from the config",
    )
    parser.add_argument(
        "--log-level",
        default="info",
        choices=["debug", "info", "warning", "error"],
        help="Minimum log level (default: info)",
    )
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    logger = structlog.get_logger()

    if args.config == _DEFAULT_CONFIG and not _DEFAULT_CONFIG.exists():
        config = SimulationConfig()
    else:
        config = SimulationConfig.from_yaml(args.config)
    if args.seed is not None:
        config.seed = args.seed

    engine = SimulationEngine(config=config)
    logger.info(
        "simulation_started",
        arena=f"{config.arena_width}x{config.arena_height}",
        seed=config.seed,
        ticks=args.ticks,
    )
    event_counts: Counter[str] = Counter()
    engine.run(
        ticks=args.ticks,
        on_event=lambda event: event_counts.update([type(event).__name__]),
    )
    logger.info(
        "simulation_finished",
        elapsed=round(engine.elapsed, 2),
        entities=len(engine.context.entities),
        **engine.context.scoreboard.as_dict(),
    )
    logger.info("event_totals", **dict(sorted(event_counts.items())))


if __name__ == "__main__":
    main()
