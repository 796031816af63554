#!/usr/bin/env python3
"""
Simulation Module

Driver that composes the World and the physics systems into a per-tick
pipeline:

    gravity -> propagation -> proximity detection

Each phase finishes completely before the next one starts. The latest
proximity result is kept on the driver and replaced every tick.

The simulation has no reporting of its own; callers read positions and
warnings through the accessors.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

import numpy as np

from .components import EntityHandle, Position, ProximityPair, Velocity
from .constellation import State, populate
from .orbit import EARTH_GRAVITATIONAL_PARAMETER
from .proximity import PROXIMITY_METHODS, flagged_handles, get_proximity_method
from .storage import DEFAULT_STORE, STORE_REGISTRY
from .systems import gravity_system, propagation_system
from .world import World


logger = logging.getLogger(__name__)


@dataclass
class SimulationConfig:
    """
    Configuration for a simulation.

    Attributes
    ----------
    gravitational_parameter : float
        μ of the central body (m³/s²).
    dt : float
        Tick duration (s).
    proximity_threshold : float
        Separation (m) below which a pair is reported.
    storage : str
        Component storage backend ("dense" or "sparse").
    num_workers : int
        Threads each phase fans out over. 1 runs everything inline.
    proximity_method : str
        Proximity detector ("pairwise" or "grid").
    """

    gravitational_parameter: float = EARTH_GRAVITATIONAL_PARAMETER
    dt: float = 10.0
    proximity_threshold: float = 100_000.0
    storage: str = DEFAULT_STORE
    num_workers: int = 1
    proximity_method: str = "pairwise"

    def __post_init__(self):
        if self.gravitational_parameter <= 0:
            raise ValueError("Gravitational parameter must be positive")
        if self.dt <= 0:
            raise ValueError("Time step must be positive")
        if self.proximity_threshold < 0:
            raise ValueError("Proximity threshold must be non-negative")
        if self.num_workers < 1:
            raise ValueError("Number of workers must be at least 1")
        if self.storage not in STORE_REGISTRY:
            available = ", ".join(STORE_REGISTRY.keys())
            raise ValueError(
                f"Unknown storage backend: '{self.storage}'. Available backends: {available}"
            )
        if self.proximity_method not in PROXIMITY_METHODS:
            available = ", ".join(PROXIMITY_METHODS.keys())
            raise ValueError(
                f"Unknown proximity method: '{self.proximity_method}'. "
                f"Available methods: {available}"
            )


@dataclass
class SimulationState:
    """
    Current simulation state.

    Attributes
    ----------
    time : float
        Simulated time (seconds).
    step_count : int
        Number of ticks executed.
    proximity_warnings : list
        Pairs closer than the threshold after the latest tick.
    """

    time: float = 0.0
    step_count: int = 0
    proximity_warnings: List[ProximityPair] = field(default_factory=list)


class Simulation:
    """
    Satellite population advanced in fixed time steps.

    Parameters
    ----------
    config : SimulationConfig, optional
        Simulation configuration.
    world : World, optional
        Pre-populated world. A new empty world using `config.storage` is
        created if omitted.

    Attributes
    ----------
    config : SimulationConfig
        Current configuration.
    world : World
        Entities and their components.
    state : SimulationState
        Tick counter, time and the latest proximity result.

    Notes
    -----
    With `num_workers > 1` a thread pool is started on the first step()
    and kept until close(). Use the simulation as a context manager, or
    call close(), to stop the worker threads.
    """

    def __init__(self, config: Optional[SimulationConfig] = None, world: Optional[World] = None):
        self.config = config or SimulationConfig()
        self.world = world if world is not None else World(self.config.storage)
        self.state = SimulationState()
        self._detect = get_proximity_method(self.config.proximity_method)

        # Worker pool is started by the first step() that needs it.
        self._executor: Optional[ThreadPoolExecutor] = None
        self._closed = False

        logger.info(
            f"Simulation created: storage={self.world.storage}, "
            f"workers={self.config.num_workers}, dt={self.config.dt}s, "
            f"threshold={self.config.proximity_threshold}m"
        )

    @classmethod
    def from_states(
        cls, states: Iterable[State], config: Optional[SimulationConfig] = None
    ) -> "Simulation":
        """Create a simulation and add every (Position, Velocity) pair to it."""
        sim = cls(config)
        populate(sim.world, states)
        return sim

    # ------------------------------------------------------------------
    # Setup interface
    # ------------------------------------------------------------------

    def create_entity(self) -> EntityHandle:
        return self.world.create_entity()

    def attach_position(self, handle: EntityHandle, position: Position) -> None:
        self.world.attach_position(handle, position)

    def attach_velocity(self, handle: EntityHandle, velocity: Velocity) -> None:
        self.world.attach_velocity(handle, velocity)

    def add_entity(self, position: Position, velocity: Velocity) -> EntityHandle:
        return self.world.add_entity(position, velocity)

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------

    def step(self) -> None:
        """
        Advance the simulation by one configured time step.

        Runs gravity, then propagation, then proximity detection, and
        replaces the stored proximity result with the new one.

        Raises
        ------
        RuntimeError
            If the simulation has been closed.
        MissingComponentError
            If an entity has a position but no velocity.
        """
        if self._closed:
            raise RuntimeError("Simulation is closed. Create a new one to keep stepping.")

        config = self.config
        workers = config.num_workers
        executor = self._get_executor()

        gravity_system(
            self.world, config.dt, config.gravitational_parameter, executor, workers
        )
        propagation_system(self.world, config.dt, executor, workers)
        warnings = self._detect(
            self.world, config.proximity_threshold, executor, workers
        )

        self.state.proximity_warnings = warnings
        self.state.time += config.dt
        self.state.step_count += 1

        logger.debug(
            f"Step {self.state.step_count}: {len(warnings)} proximity warnings"
        )

    def run(self, num_steps: int) -> List[SimulationState]:
        """
        Run the simulation for a number of ticks.

        Parameters
        ----------
        num_steps : int
            Ticks to execute.

        Returns
        -------
        list
            Copy of the state after each tick.
        """
        if num_steps < 0:
            raise ValueError("Number of steps must be non-negative")

        states = []
        for _ in range(num_steps):
            self.step()
            states.append(
                SimulationState(
                    time=self.state.time,
                    step_count=self.state.step_count,
                    proximity_warnings=list(self.state.proximity_warnings),
                )
            )
        return states

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def handles(self) -> List[EntityHandle]:
        """Entity handles in the row order used by positions() and velocities()."""
        return self.world.handles()

    def positions(self) -> np.ndarray:
        """
        Read-only snapshot of all positions.

        Returns
        -------
        np.ndarray
            (n, 3) array of [x, y, z] in meters, rows in ascending handle order.
        """
        snapshot = self.world.position_array()
        snapshot.flags.writeable = False
        return snapshot

    def velocities(self) -> np.ndarray:
        """Read-only (n, 3) snapshot of all velocities (m/s)."""
        snapshot = self.world.velocity_array()
        snapshot.flags.writeable = False
        return snapshot

    def proximity_warnings(self) -> List[ProximityPair]:
        """Pairs closer than the threshold after the latest tick."""
        return list(self.state.proximity_warnings)

    def proximity_indices(self) -> List[EntityHandle]:
        """Handles involved in at least one current proximity warning."""
        return flagged_handles(self.state.proximity_warnings)

    @property
    def num_entities(self) -> int:
        """Number of entities."""
        return len(self.world)

    @property
    def simulation_time(self) -> float:
        """Current simulation time (seconds)."""
        return self.state.time

    def get_summary(self) -> Dict[str, Any]:
        """Get simulation summary."""
        return {
            "storage": self.world.storage,
            "num_entities": self.num_entities,
            "num_workers": self.config.num_workers,
            "proximity_method": self.config.proximity_method,
            "dt": self.config.dt,
            "proximity_threshold": self.config.proximity_threshold,
            "simulation_time": self.state.time,
            "step_count": self.state.step_count,
            "proximity_warnings": len(self.state.proximity_warnings),
        }

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _get_executor(self) -> Optional[ThreadPoolExecutor]:
        if self.config.num_workers > 1 and self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.config.num_workers,
                thread_name_prefix="hylaean-worker",
            )
        return self._executor

    def close(self) -> None:
        """Shut down the worker pool. Further calls to step() raise."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
        self._closed = True

    def __enter__(self) -> "Simulation":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"Simulation(\n"
            f"  storage={self.world.storage},\n"
            f"  entities={self.num_entities},\n"
            f"  workers={self.config.num_workers},\n"
            f"  time={self.state.time:.2f}s,\n"
            f"  steps={self.state.step_count},\n"
            f"  warnings={len(self.state.proximity_warnings)}\n"
            f")"
        )


def create_simulation(storage: str = DEFAULT_STORE, **kwargs) -> Simulation:
    """
    Create a simulation with the specified storage backend.

    Parameters
    ----------
    storage : str
        One of "dense", "sparse".
    **kwargs
        Additional configuration parameters. Unknown keys are ignored.

    Returns
    -------
    Simulation
        Simulation with an empty world.
    """
    if storage not in STORE_REGISTRY:
        raise ValueError(f"Unknown storage backend: {storage}")

    known = SimulationConfig.__dataclass_fields__
    options = {key: value for key, value in kwargs.items() if key in known}
    options["storage"] = storage
    return Simulation(SimulationConfig(**options))
