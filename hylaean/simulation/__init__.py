#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Hylaean Simulation Package

Entity/component store, the three per-tick physics systems (gravity,
propagation, proximity detection) and the driver that runs them in order.
Initial-condition generators live alongside but are not used by the core.

The simulation can run independently of any reporting front end.
"""

from .components import (
    EntityHandle,
    Position,
    Velocity,
    ProximityPair,
)

from .storage import (
    ComponentStore,
    DenseStore,
    SparseStore,
    ComponentInvariantError,
    MissingComponentError,
    STORE_REGISTRY,
    get_store_class,
    list_stores,
    register_store,
)

from .world import World

from .systems import (
    gravity_system,
    propagation_system,
    partition_range,
)

from .proximity import (
    proximity_detection_system,
    grid_proximity_detection_system,
    balanced_pair_partition,
    flagged_handles,
    minimum_separation,
)

from .orbit import (
    EARTH_GRAVITATIONAL_PARAMETER,
    circular_speed,
    orbital_period,
    specific_orbital_energy,
)

from .constellation import (
    create_random_circular_states,
    create_random_eccentric_states,
    create_states,
    populate,
)

from .simulation import (
    Simulation,
    SimulationConfig,
    SimulationState,
    create_simulation,
)


__all__ = [
    # Components
    "EntityHandle",
    "Position",
    "Velocity",
    "ProximityPair",

    # Storage
    "ComponentStore",
    "DenseStore",
    "SparseStore",
    "ComponentInvariantError",
    "MissingComponentError",
    "STORE_REGISTRY",
    "get_store_class",
    "list_stores",
    "register_store",

    # World
    "World",

    # Systems
    "gravity_system",
    "propagation_system",
    "partition_range",
    "proximity_detection_system",
    "grid_proximity_detection_system",
    "balanced_pair_partition",
    "flagged_handles",
    "minimum_separation",

    # Orbit
    "EARTH_GRAVITATIONAL_PARAMETER",
    "circular_speed",
    "orbital_period",
    "specific_orbital_energy",

    # Initial conditions
    "create_random_circular_states",
    "create_random_eccentric_states",
    "create_states",
    "populate",

    # Simulation
    "Simulation",
    "SimulationConfig",
    "SimulationState",
    "create_simulation",
]
