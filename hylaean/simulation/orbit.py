#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Orbital Mechanics Helpers

Earth gravitational parameter and two-body relations used to build
initial states and to check integrated trajectories. All distances in
meters, time in seconds.
"""

import math
from typing import Tuple

import numpy as np

from .components import Position, Velocity

# Standard Earth gravitational parameter
EARTH_GRAVITATIONAL_PARAMETER = 3.986004418e14  # μ in m³/s²


def circular_speed(radius: float, gravitational_parameter: float = EARTH_GRAVITATIONAL_PARAMETER) -> float:
    """Speed of a circular orbit at `radius`: v = sqrt(μ / r) (m/s)."""
    if radius <= 0:
        raise ValueError("Radius must be positive")
    return math.sqrt(gravitational_parameter / radius)


def orbital_period(semi_major_axis: float, gravitational_parameter: float = EARTH_GRAVITATIONAL_PARAMETER) -> float:
    """Period from Kepler's third law: T = 2π * sqrt(a³/μ) (s)."""
    if semi_major_axis <= 0:
        raise ValueError("Semi-major axis must be positive")
    return 2 * math.pi * math.sqrt(semi_major_axis**3 / gravitational_parameter)


def specific_orbital_energy(
    position: Position,
    velocity: Velocity,
    gravitational_parameter: float = EARTH_GRAVITATIONAL_PARAMETER,
) -> float:
    """
    Specific mechanical energy ε = v²/2 - μ/r (J/kg).

    Constant along an exact two-body trajectory, so its drift measures
    integration error.
    """
    return velocity.speed**2 / 2 - gravitational_parameter / position.radius


def perpendicular_unit(vector: np.ndarray) -> np.ndarray:
    """
    A unit vector perpendicular to `vector`.

    Crosses with the z axis, falling back to the x axis when `vector`
    lies on the z axis.
    """
    x, y, _ = vector
    if abs(x) < 1e-6 and abs(y) < 1e-6:
        reference = np.array([1.0, 0.0, 0.0])
    else:
        reference = np.array([0.0, 0.0, 1.0])
    direction = np.cross(vector, reference)
    return direction / np.linalg.norm(direction)


def circular_state(
    position: np.ndarray,
    gravitational_parameter: float = EARTH_GRAVITATIONAL_PARAMETER,
) -> Tuple[Position, Velocity]:
    """
    State of a circular orbit through `position`.

    Velocity has magnitude sqrt(μ/r) and is perpendicular to the radius
    vector.
    """
    position = np.asarray(position, dtype=float)
    speed = circular_speed(float(np.linalg.norm(position)), gravitational_parameter)
    velocity = perpendicular_unit(position) * speed
    return Position.from_array(position), Velocity.from_array(velocity)


def elliptical_state(
    position: np.ndarray,
    plane_normal: np.ndarray,
    eccentricity: float,
    true_anomaly: float,
    gravitational_parameter: float = EARTH_GRAVITATIONAL_PARAMETER,
) -> Tuple[Position, Velocity]:
    """
    State on an ellipse passing through `position` at the given true anomaly.

    Parameters
    ----------
    position : np.ndarray
        Current position vector (m).
    plane_normal : np.ndarray
        Unit normal of the orbital plane; must be perpendicular to `position`.
    eccentricity : float
        Orbit eccentricity (0 <= e < 1).
    true_anomaly : float
        Angle from periapsis to the current position (radians).

    Returns
    -------
    tuple
        (Position, Velocity) with radial speed sqrt(μ/p)·e·sin ν and
        tangential speed sqrt(μ/p)·(1 + e·cos ν), where p = r(1 + e·cos ν)
        is the semi-latus rectum.
    """
    if not 0 <= eccentricity < 1:
        raise ValueError("Eccentricity must be in [0, 1)")
    position = np.asarray(position, dtype=float)
    radius = float(np.linalg.norm(position))
    if radius <= 0:
        raise ValueError("Position must not coincide with the central body")

    semi_latus_rectum = radius * (1 + eccentricity * math.cos(true_anomaly))
    sqrt_mu_p = math.sqrt(gravitational_parameter / semi_latus_rectum)
    radial_speed = sqrt_mu_p * eccentricity * math.sin(true_anomaly)
    tangential_speed = sqrt_mu_p * (1 + eccentricity * math.cos(true_anomaly))

    r_hat = position / radius
    theta_hat = np.cross(plane_normal, r_hat)
    velocity = radial_speed * r_hat + tangential_speed * theta_hat
    return Position.from_array(position), Velocity.from_array(velocity)
