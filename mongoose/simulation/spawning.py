"""Spawning — bring berries, mice, snakes, and the mongoose into the arena.

Snakes enter from outside: they are placed in the void just past a
random edge, body trailing further out, and crawl in once they plan a
route.  Everything else appears on a free in-arena cell.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from mongoose.world.cell import Cell, Direction, Kind

if TYPE_CHECKING:
    from mongoose.creatures.agent import Agent, Berry
    from mongoose.simulation.context import SimulationContext

logger = structlog.get_logger()

MAX_EXTRA_SNAKE_SEGMENTS = 3
SPAWN_ATTEMPTS = 10


def spawn_protagonist(ctx: SimulationContext) -> Agent:
    """Place the three-segment mongoose at the centre of the arena."""
    x, y = ctx.world.width // 2, ctx.world.height // 2
    cells = [Cell(x, y), Cell(x + 1, y), Cell(x + 1, y - 1)]
    mongoose = ctx.spawn_agent(Kind.MONGOOSE, cells, planning=False)
    logger.info("mongoose_spawned", entity_id=mongoose.entity_id, cell=(x, y))
    return mongoose


def spawn_berry(ctx: SimulationContext) -> Berry | None:
    """Drop a berry on a random cell; skipped if that cell is taken."""
    world = ctx.world
    cell = Cell(
        int(ctx.rng.integers(0, world.width)),
        int(ctx.rng.integers(0, world.height)),
    )
    if world.is_occupied(cell):
        return None
    return ctx.spawn_berry(cell)


def spawn_mouse(ctx: SimulationContext) -> Agent | None:
    """Place a mouse on a random free cell, if one turns up quickly."""
    cell = ctx.world.random_free_cell(ctx.rng, attempts=SPAWN_ATTEMPTS)
    if cell is None:
        return None
    mouse = ctx.spawn_agent(Kind.MOUSE, [cell])
    logger.info("mouse_spawned", entity_id=mouse.entity_id, cell=tuple(cell))
    return mouse


def spawn_snake(ctx: SimulationContext) -> Agent:
    """Place a snake of 2 to 5 segments just outside a random edge."""
    world = ctx.world
    side = list(Direction)[int(ctx.rng.integers(0, len(Direction)))]
    extra = int(ctx.rng.integers(0, MAX_EXTRA_SNAKE_SEGMENTS + 1))
    match side:
        case Direction.LEFT:
            head = Cell(-1, int(ctx.rng.integers(0, world.height)))
        case Direction.RIGHT:
            head = Cell(world.width, int(ctx.rng.integers(0, world.height)))
        case Direction.UP:
            head = Cell(int(ctx.rng.integers(0, world.width)), world.height)
        case _:
            head = Cell(int(ctx.rng.integers(0, world.width)), -1)
    cells = [head]
    for _ in range(extra + 1):
        cells.append(cells[-1].step(side))
    snake = ctx.spawn_agent(Kind.SNAKE, cells)
    logger.info(
        "snake_spawned",
        entity_id=snake.entity_id,
        side=side.name.lower(),
        length=len(cells),
    )
    return snake
