"""Cooldown — countdown state driven by the external tick delta."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Cooldown:
    """A one-shot timer that stays ready until explicitly reset.

    Attributes:
        period: Seconds between firings.
        elapsed: Seconds accumulated since the last reset.
    """

    period: float
    elapsed: float = 0.0

    @property
    def ready(self) -> bool:
        """Return True once a full period has accumulated."""
        return self.elapsed >= self.period

    def tick(self, dt: float) -> bool:
        """Advance by ``dt`` seconds and report whether the timer is ready."""
        self.elapsed += dt
        return self.ready

    def reset(self) -> None:
        """Start a new period."""
        self.elapsed = 0.0


@dataclass
class RepeatingCooldown(Cooldown):
    """A timer that fires once per elapsed period and rearms itself."""

    def tick(self, dt: float) -> bool:
        """Advance by ``dt``; on firing, carry the overshoot into the next period."""
        self.elapsed += dt
        if self.elapsed >= self.period:
            self.elapsed -= self.period
            return True
        return False
