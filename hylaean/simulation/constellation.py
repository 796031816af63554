#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Initial Condition Generation

Produces (Position, Velocity) pairs for random satellite populations and
feeds them into a World. Nothing in the physics core depends on this
module; any other source of states works the same way through
`World.add_entity`.

Generators:
- Random circular orbits with uniformly distributed directions
- Random near-circular eccentric orbits in random orbital planes
"""

import math
from typing import Callable, Dict, Iterable, List, Optional, Tuple

import numpy as np

from .components import EntityHandle, Position, Velocity
from .orbit import EARTH_GRAVITATIONAL_PARAMETER, circular_state, elliptical_state
from .world import World

State = Tuple[Position, Velocity]


def random_direction(rng: np.random.Generator) -> np.ndarray:
    """
    Unit vector uniformly distributed on the sphere.

    Samples the azimuth uniformly in [0, 2π) and the cosine of the polar
    angle uniformly in [-1, 1).
    """
    theta = rng.uniform(0.0, 2 * math.pi)
    u = rng.uniform(-1.0, 1.0)
    sin_phi = math.sqrt(1.0 - u * u)
    return np.array([sin_phi * math.cos(theta), sin_phi * math.sin(theta), u])


def random_plane_normal(rng: np.random.Generator, r_hat: np.ndarray) -> np.ndarray:
    """Random unit vector perpendicular to `r_hat`."""
    while True:
        candidate = rng.uniform(-1.0, 1.0, size=3)
        cross = np.cross(r_hat, candidate)
        norm = np.linalg.norm(cross)
        if norm > 1e-6:
            return cross / norm


def create_random_circular_states(
    num_satellites: int,
    min_radius: float = 6.5e6,
    max_radius: float = 7.0e6,
    gravitational_parameter: float = EARTH_GRAVITATIONAL_PARAMETER,
    seed: Optional[int] = None,
) -> List[State]:
    """
    Create states for satellites on random circular orbits.

    Parameters
    ----------
    num_satellites : int
        Number of states to create
    min_radius : float
        Minimum orbital radius in m (default 6.5e6)
    max_radius : float
        Maximum orbital radius in m (default 7.0e6)
    gravitational_parameter : float
        μ of the central body in m³/s²
    seed : Optional[int]
        Random seed for reproducibility

    Returns
    -------
    List[State]
        (Position, Velocity) pairs
    """
    if num_satellites < 0:
        raise ValueError("Number of satellites must be non-negative")
    if not 0 < min_radius <= max_radius:
        raise ValueError("Radii must satisfy 0 < min_radius <= max_radius")

    rng = np.random.default_rng(seed)
    states = []
    for _ in range(num_satellites):
        radius = rng.uniform(min_radius, max_radius)
        position = radius * random_direction(rng)
        states.append(circular_state(position, gravitational_parameter))
    return states


def create_random_eccentric_states(
    num_satellites: int,
    min_radius: float = 7.6e6,
    max_radius: float = 7.601e6,
    max_eccentricity: float = 0.001,
    gravitational_parameter: float = EARTH_GRAVITATIONAL_PARAMETER,
    seed: Optional[int] = None,
) -> List[State]:
    """
    Create states for satellites on near-circular orbits in random planes.

    Each satellite gets a random direction, a random eccentricity in
    [0, max_eccentricity), a random true anomaly and a random orbital plane
    containing its radius vector.

    Parameters
    ----------
    num_satellites : int
        Number of states to create
    min_radius : float
        Minimum current radius in m (default 7.6e6)
    max_radius : float
        Maximum current radius in m (default 7.601e6)
    max_eccentricity : float
        Upper bound on eccentricity (default 0.001)
    gravitational_parameter : float
        μ of the central body in m³/s²
    seed : Optional[int]
        Random seed for reproducibility

    Returns
    -------
    List[State]
        (Position, Velocity) pairs
    """
    if num_satellites < 0:
        raise ValueError("Number of satellites must be non-negative")
    if not 0 < min_radius <= max_radius:
        raise ValueError("Radii must satisfy 0 < min_radius <= max_radius")
    if not 0 <= max_eccentricity < 1:
        raise ValueError("Maximum eccentricity must be in [0, 1)")

    rng = np.random.default_rng(seed)
    states = []
    for _ in range(num_satellites):
        radius = rng.uniform(min_radius, max_radius)
        r_hat = random_direction(rng)
        eccentricity = rng.uniform(0.0, max_eccentricity)
        true_anomaly = rng.uniform(0.0, 2 * math.pi)
        normal = random_plane_normal(rng, r_hat)
        states.append(
            elliptical_state(
                radius * r_hat,
                normal,
                eccentricity,
                true_anomaly,
                gravitational_parameter,
            )
        )
    return states


def populate(world: World, states: Iterable[State]) -> List[EntityHandle]:
    """
    Add every (Position, Velocity) pair to `world`.

    Returns
    -------
    List[EntityHandle]
        Handles in the order the states were given.
    """
    return [world.add_entity(position, velocity) for position, velocity in states]


# Registry mapping generator names to functions
GENERATORS: Dict[str, Callable[..., List[State]]] = {
    "circular": create_random_circular_states,
    "eccentric": create_random_eccentric_states,
}


def create_states(
    generator: str,
    num_satellites: int,
    gravitational_parameter: float = EARTH_GRAVITATIONAL_PARAMETER,
    seed: Optional[int] = None,
) -> List[State]:
    """
    Create states with a named generator and its default radius range.

    Raises
    ------
    ValueError
        If the generator name is unknown.
    """
    if generator not in GENERATORS:
        available = ", ".join(GENERATORS.keys())
        raise ValueError(
            f"Unknown generator: '{generator}'. Available generators: {available}"
        )
    return GENERATORS[generator](
        num_satellites,
        gravitational_parameter=gravitational_parameter,
        seed=seed,
    )
