#!/usr/bin/env python3
"""
Pytest Configuration and Shared Fixtures

Provides common fixtures and markers for testing the entity store,
physics systems and simulation driver.
"""

import math
import sys
from pathlib import Path

import pytest

# Add parent directory for imports
sys.path.insert(0, str(Path(__file__).parent.parent))


# =============================================================================
# PYTEST MARKERS
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


# =============================================================================
# CONSTANTS
# =============================================================================

MU_EARTH = 3.986004418e14
LEO_RADIUS = 7.0e6


# =============================================================================
# WORLD FIXTURES
# =============================================================================

@pytest.fixture(params=["dense", "sparse"])
def storage(request):
    """Run the test once per storage backend."""
    return request.param


@pytest.fixture
def empty_world(storage):
    """Empty world using the parametrized backend."""
    from hylaean.simulation import World

    return World(storage)


@pytest.fixture
def circular_world(storage):
    """World with a single satellite on a circular orbit in the xy plane."""
    from hylaean.simulation import World, Position, Velocity

    world = World(storage)
    speed = math.sqrt(MU_EARTH / LEO_RADIUS)
    world.add_entity(Position(LEO_RADIUS, 0.0, 0.0), Velocity(0.0, speed, 0.0))
    return world


@pytest.fixture
def random_states():
    """Factory for reproducible random circular states."""
    from hylaean.simulation import create_random_circular_states

    def make(num_satellites=50, seed=42):
        return create_random_circular_states(num_satellites, seed=seed)

    return make


@pytest.fixture
def small_simulation(storage, random_states):
    """Small simulation with 20 random satellites."""
    from hylaean.simulation import Simulation, SimulationConfig

    config = SimulationConfig(storage=storage, proximity_threshold=500_000.0)
    sim = Simulation.from_states(random_states(20, seed=7), config)
    yield sim
    sim.close()
