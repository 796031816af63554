#!/usr/bin/env python3
"""
Tests for the gravity and propagation systems.
"""

import math
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from hylaean.simulation import (
    MissingComponentError,
    Position,
    Velocity,
    World,
    gravity_system,
    partition_range,
    populate,
    propagation_system,
)

from conftest import MU_EARTH


class TestPartitionRange:
    """Tests for splitting entity ranges across workers."""

    @pytest.mark.parametrize("n,parts", [(10, 3), (7, 7), (3, 8), (100, 4), (1, 1)])
    def test_slices_cover_range_without_overlap(self, n, parts):
        bounds = partition_range(n, parts)
        covered = [i for start, stop in bounds for i in range(start, stop)]

        assert covered == list(range(n))
        assert len(bounds) <= parts

    def test_sizes_differ_by_at_most_one(self):
        sizes = [stop - start for start, stop in partition_range(10, 3)]
        assert sizes == [4, 3, 3]

    def test_empty_range(self):
        assert partition_range(0, 4) == []


class TestGravitySystem:
    """Tests for velocity integration under central gravity."""

    def test_velocity_change_matches_formula(self, empty_world):
        """Each component changes by (-mu * r / r^3) * dt."""
        position = Position(3.0e6, -4.0e6, 5.0e6)
        empty_world.add_entity(position, Velocity(100.0, 200.0, -300.0))
        dt = 10.0

        gravity_system(empty_world, dt, MU_EARTH)

        r = math.sqrt(3.0e6**2 + 4.0e6**2 + 5.0e6**2)
        factor = -MU_EARTH / r**3 * dt
        vel = empty_world.velocities.get(0)
        assert vel.dx == pytest.approx(100.0 + factor * 3.0e6, rel=1e-12)
        assert vel.dy == pytest.approx(200.0 + factor * -4.0e6, rel=1e-12)
        assert vel.dz == pytest.approx(-300.0 + factor * 5.0e6, rel=1e-12)

    def test_positions_untouched(self, empty_world):
        empty_world.add_entity(Position(7.0e6, 0.0, 0.0), Velocity(0.0, 7500.0, 0.0))
        gravity_system(empty_world, 10.0, MU_EARTH)
        assert empty_world.positions.get(0).as_tuple() == (7.0e6, 0.0, 0.0)

    def test_origin_is_skipped(self, empty_world):
        """An entity on the central body keeps its velocity and stays finite."""
        empty_world.add_entity(Position(0.0, 0.0, 0.0), Velocity(1.0, 2.0, 3.0))

        gravity_system(empty_world, 10.0, MU_EARTH)

        vel = empty_world.velocities.get(0)
        assert vel.as_tuple() == (1.0, 2.0, 3.0)
        assert all(math.isfinite(c) for c in vel.as_tuple())

    def test_mu_is_configurable(self, empty_world):
        """Doubling mu doubles the velocity change."""
        empty_world.add_entity(Position(1.0e6, 0.0, 0.0), Velocity(0.0, 0.0, 0.0))
        other = World(empty_world.storage)
        other.add_entity(Position(1.0e6, 0.0, 0.0), Velocity(0.0, 0.0, 0.0))

        gravity_system(empty_world, 1.0, 1.0e14)
        gravity_system(other, 1.0, 2.0e14)

        assert other.velocities.get(0).dx == pytest.approx(
            2 * empty_world.velocities.get(0).dx
        )

    def test_missing_velocity_fails_loudly(self, empty_world):
        """A position without a velocity is an invariant violation."""
        handle = empty_world.create_entity()
        empty_world.attach_position(handle, Position(7.0e6, 0.0, 0.0))

        with pytest.raises(MissingComponentError):
            gravity_system(empty_world, 10.0, MU_EARTH)

    def test_threaded_matches_serial(self, storage, random_states):
        """Fan-out across threads produces the same velocities."""
        serial = World(storage)
        threaded = World(storage)
        populate(serial, random_states(37, seed=3))
        populate(threaded, random_states(37, seed=3))

        gravity_system(serial, 10.0, MU_EARTH)
        with ThreadPoolExecutor(max_workers=4) as executor:
            gravity_system(threaded, 10.0, MU_EARTH, executor, num_workers=4)

        np.testing.assert_array_equal(serial.velocity_array(), threaded.velocity_array())


class TestPropagationSystem:
    """Tests for position updates."""

    def test_position_advances_by_velocity(self, empty_world):
        """p <- p + v * dt for every component."""
        empty_world.add_entity(Position(1.0, 2.0, 3.0), Velocity(0.5, -1.5, 2.0))
        empty_world.add_entity(Position(-4.0, 0.0, 9.0), Velocity(3.0, 0.0, -1.0))

        propagation_system(empty_world, 2.0)

        assert empty_world.positions.get(0).as_tuple() == pytest.approx((2.0, -1.0, 7.0))
        assert empty_world.positions.get(1).as_tuple() == pytest.approx((2.0, 0.0, 7.0))

    def test_velocities_untouched(self, empty_world):
        empty_world.add_entity(Position(1.0, 2.0, 3.0), Velocity(0.5, -1.5, 2.0))
        propagation_system(empty_world, 2.0)
        assert empty_world.velocities.get(0).as_tuple() == (0.5, -1.5, 2.0)

    def test_missing_velocity_fails_loudly(self, empty_world):
        handle = empty_world.create_entity()
        empty_world.attach_position(handle, Position(1.0, 0.0, 0.0))

        with pytest.raises(MissingComponentError):
            propagation_system(empty_world, 1.0)

    def test_threaded_matches_serial(self, storage, random_states):
        serial = World(storage)
        threaded = World(storage)
        populate(serial, random_states(23, seed=9))
        populate(threaded, random_states(23, seed=9))

        propagation_system(serial, 10.0)
        with ThreadPoolExecutor(max_workers=3) as executor:
            propagation_system(threaded, 10.0, executor, num_workers=3)

        np.testing.assert_array_equal(serial.position_array(), threaded.position_array())

    def test_sparse_after_removal(self):
        """Removed entities are simply absent from the pass."""
        world = World("sparse")
        a = world.add_entity(Position(0.0, 0.0, 0.0), Velocity(1.0, 0.0, 0.0))
        b = world.add_entity(Position(0.0, 0.0, 0.0), Velocity(0.0, 1.0, 0.0))
        world.remove_entity(a)

        propagation_system(world, 5.0)

        assert world.handles() == [b]
        assert world.positions.get(b).as_tuple() == (0.0, 5.0, 0.0)
