"""Shared fixtures for the Mongoose test suite."""

from __future__ import annotations

from collections.abc import Callable

import numpy as np
import pytest
from numpy.random import Generator

from mongoose.simulation.config import SimulationConfig
from mongoose.simulation.context import SimulationContext
from mongoose.world.grid import GridWorld


@pytest.fixture
def rng() -> Generator:
    """A deterministic random generator for reproducible tests."""
    return np.random.default_rng(seed=12345)


@pytest.fixture
def small_world() -> GridWorld:
    """A small 8x8 arena for fast tests."""
    return GridWorld(width=8, height=8)


@pytest.fixture
def default_config() -> SimulationConfig:
    """Default simulation config (no YAML file needed)."""
    return SimulationConfig()


@pytest.fixture
def make_context() -> Callable[..., SimulationContext]:
    """Factory for a context over an arena of the requested size."""

    def _make(width: int = 10, height: int = 10, **overrides) -> SimulationContext:
        config = SimulationConfig(
            arena_width=width,
            arena_height=height,
            **overrides,
        )
        return SimulationContext(config=config)

    return _make


@pytest.fixture
def context(make_context: Callable[..., SimulationContext]) -> SimulationContext:
    """A 10x10 context with default settings."""
    return make_context()
