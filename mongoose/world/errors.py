"""Errors raised when the occupancy model is already corrupt."""

from __future__ import annotations


class InvariantViolation(RuntimeError):
    """The occupancy grid or a body chain is in an impossible state.

    Never caught inside the simulation: continuing would spread the
    corruption to every later tick.
    """
