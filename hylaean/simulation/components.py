#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Component Types for the Satellite Entity Store

Plain records attached to entity handles. All distances in meters,
velocities in meters/second, in an inertial frame centered on the
gravitating body.
"""

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np


# Entity handles are plain integers: a dense ordinal or a sparse,
# never-reused key depending on the storage backend.
EntityHandle = int

# Unordered pair of handles, stored with the earlier snapshot entry first.
ProximityPair = Tuple[EntityHandle, EntityHandle]


@dataclass
class Position:
    """
    Position of a satellite.

    Attributes
    ----------
    x, y, z : float
        Cartesian coordinates (m)
    """
    x: float
    y: float
    z: float

    @classmethod
    def from_array(cls, values) -> "Position":
        x, y, z = values
        return cls(float(x), float(y), float(z))

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z])

    @property
    def radius(self) -> float:
        """Distance from the central body (m)."""
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def distance_to(self, other: "Position") -> float:
        dx = self.x - other.x
        dy = self.y - other.y
        dz = self.z - other.z
        return math.sqrt(dx * dx + dy * dy + dz * dz)


@dataclass
class Velocity:
    """
    Velocity of a satellite.

    Attributes
    ----------
    dx, dy, dz : float
        Cartesian components (m/s)
    """
    dx: float
    dy: float
    dz: float

    @classmethod
    def from_array(cls, values) -> "Velocity":
        dx, dy, dz = values
        return cls(float(dx), float(dy), float(dz))

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.dx, self.dy, self.dz)

    def as_array(self) -> np.ndarray:
        return np.array([self.dx, self.dy, self.dz])

    @property
    def speed(self) -> float:
        """Velocity magnitude (m/s)."""
        return math.sqrt(self.dx * self.dx + self.dy * self.dy + self.dz * self.dz)
