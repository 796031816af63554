#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Hylaean Path - Satellite Population Simulator

Simulates point-mass satellites orbiting a central body with an
entity/component store, advancing them in fixed time steps and reporting
pairs that pass within a proximity threshold.

Example usage:

    from hylaean import Simulation, SimulationConfig, Position, Velocity

    config = SimulationConfig(dt=10.0, proximity_threshold=100_000.0, storage="sparse")
    with Simulation(config) as sim:
        sim.add_entity(Position(7.0e6, 0.0, 0.0), Velocity(0.0, 7546.0, 0.0))
        sim.step()
        print(sim.positions(), sim.proximity_warnings())

    # Command line
    python -m hylaean --num 500 --steps 1000 --workers 4
"""

__version__ = "1.0.0"

# Re-export commonly used items for convenience
from .simulation import (
    Simulation,
    SimulationConfig,
    SimulationState,
    World,
    Position,
    Velocity,
    EARTH_GRAVITATIONAL_PARAMETER,
)

__all__ = [
    # Main classes
    "Simulation",
    "SimulationConfig",
    "SimulationState",
    "World",
    "Position",
    "Velocity",

    # Constants
    "EARTH_GRAVITATIONAL_PARAMETER",

    # Subpackages
    "simulation",
]
