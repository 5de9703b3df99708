"""Interaction rules — what happens when a mover steps onto an occupant.

The rules form a static table keyed by ``(mover kind, occupant kind)``.
Pairs missing from the table block the move, and so does every
same-kind pair (an agent's own body included).

Snakes cannot yet defeat the mongoose: a snake that runs into it is
simply blocked, while the mongoose kills any snake it bites.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from mongoose.world.cell import Kind


class Outcome(Enum):
    """Result of stepping onto an occupied cell."""

    CONSUME = auto()
    BLOCK = auto()


@dataclass(frozen=True)
class InteractionRule:
    """One entry of the interaction table.

    Attributes:
        outcome: Whether the occupant is eaten or the move is refused.
        grows: Whether the mover appends a segment after eating.
        counter: Scoreboard counter incremented on consumption.
    """

    outcome: Outcome
    grows: bool = False
    counter: str | None = None


BLOCK = InteractionRule(Outcome.BLOCK)

RULES: dict[tuple[Kind, Kind], InteractionRule] = {
    (Kind.SNAKE, Kind.BERRY): InteractionRule(
        Outcome.CONSUME,
        grows=True,
        counter="berries_eaten_by_snakes",
    ),
    (Kind.SNAKE, Kind.MOUSE): InteractionRule(
        Outcome.CONSUME,
        grows=True,
        counter="mice_eaten_by_snakes",
    ),
    (Kind.SNAKE, Kind.MONGOOSE): BLOCK,
    (Kind.MONGOOSE, Kind.BERRY): InteractionRule(
        Outcome.CONSUME,
        counter="berries_eaten_by_mongoose",
    ),
    (Kind.MONGOOSE, Kind.MOUSE): InteractionRule(
        Outcome.CONSUME,
        grows=True,
        counter="mice_eaten_by_mongoose",
    ),
    (Kind.MONGOOSE, Kind.SNAKE): InteractionRule(
        Outcome.CONSUME,
        grows=True,
        counter="snakes_killed",
    ),
    (Kind.MOUSE, Kind.BERRY): InteractionRule(
        Outcome.CONSUME,
        counter="berries_eaten_by_mice",
    ),
}


def resolve(mover: Kind, occupant: Kind) -> InteractionRule:
    """Look up the rule for ``mover`` stepping onto ``occupant``."""
    if mover is occupant:
        return BLOCK
    return RULES.get((mover, occupant), BLOCK)
