#!/usr/bin/env python3
"""
Tests for initial condition generators and orbit helpers.
"""

import math

import numpy as np
import pytest

from hylaean.simulation import (
    EARTH_GRAVITATIONAL_PARAMETER,
    World,
    circular_speed,
    create_random_circular_states,
    create_random_eccentric_states,
    create_states,
    orbital_period,
    populate,
    specific_orbital_energy,
)
from hylaean.simulation.orbit import circular_state, elliptical_state, perpendicular_unit


class TestOrbitHelpers:
    """Tests for two-body relations."""

    def test_circular_speed(self):
        assert circular_speed(7.0e6) == pytest.approx(7546.05, rel=1e-5)
        with pytest.raises(ValueError):
            circular_speed(0.0)

    def test_orbital_period(self):
        """Low Earth orbit takes roughly 97 minutes."""
        assert orbital_period(7.0e6) / 60 == pytest.approx(97.1, abs=0.2)
        with pytest.raises(ValueError):
            orbital_period(-1.0)

    def test_perpendicular_unit(self):
        for vector in ([1.0, 2.0, 3.0], [0.0, 0.0, 5.0], [0.0, 0.0, -2.0]):
            direction = perpendicular_unit(np.array(vector))
            assert np.dot(direction, vector) == pytest.approx(0.0, abs=1e-12)
            assert np.linalg.norm(direction) == pytest.approx(1.0)

    def test_circular_state(self):
        position, velocity = circular_state(np.array([0.0, 7.0e6, 0.0]))

        assert position.radius == pytest.approx(7.0e6)
        assert velocity.speed == pytest.approx(circular_speed(7.0e6))
        assert np.dot(position.as_array(), velocity.as_array()) == pytest.approx(0.0, abs=1e-3)

    def test_elliptical_state_reduces_to_circular(self):
        """Zero eccentricity gives a tangential circular velocity."""
        position, velocity = elliptical_state(
            np.array([7.0e6, 0.0, 0.0]), np.array([0.0, 0.0, 1.0]), 0.0, 1.3
        )
        assert velocity.as_tuple() == pytest.approx((0.0, circular_speed(7.0e6), 0.0))

    def test_elliptical_state_validation(self):
        with pytest.raises(ValueError):
            elliptical_state(np.array([7.0e6, 0.0, 0.0]), np.array([0.0, 0.0, 1.0]), 1.0, 0.0)
        with pytest.raises(ValueError):
            elliptical_state(np.zeros(3), np.array([0.0, 0.0, 1.0]), 0.1, 0.0)

    def test_specific_energy_of_circular_orbit(self):
        """ε = -μ / 2r on a circular orbit."""
        position, velocity = circular_state(np.array([7.0e6, 0.0, 0.0]))
        assert specific_orbital_energy(position, velocity) == pytest.approx(
            -EARTH_GRAVITATIONAL_PARAMETER / (2 * 7.0e6)
        )


class TestGenerators:
    """Tests for random populations."""

    def test_circular_states(self):
        states = create_random_circular_states(50, seed=1)

        assert len(states) == 50
        for position, velocity in states:
            assert 6.5e6 <= position.radius <= 7.0e6
            assert velocity.speed == pytest.approx(circular_speed(position.radius))
            cos_angle = np.dot(position.as_array(), velocity.as_array()) / (
                position.radius * velocity.speed
            )
            assert cos_angle == pytest.approx(0.0, abs=1e-9)

    def test_eccentric_states(self):
        states = create_random_eccentric_states(50, seed=2)

        for position, velocity in states:
            assert 7.6e6 <= position.radius <= 7.601e6
            # e < 0.001 keeps the speed within a fraction of a percent of circular
            assert velocity.speed == pytest.approx(circular_speed(position.radius), rel=2e-3)
            assert specific_orbital_energy(position, velocity) < 0

    def test_seed_reproducible(self):
        first = create_random_eccentric_states(5, seed=99)
        second = create_random_eccentric_states(5, seed=99)
        assert first == second

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"num_satellites": -1},
            {"num_satellites": 1, "min_radius": 8.0e6, "max_radius": 7.0e6},
            {"num_satellites": 1, "min_radius": 0.0},
        ],
    )
    def test_invalid_arguments(self, kwargs):
        with pytest.raises(ValueError):
            create_random_circular_states(**kwargs)

    def test_invalid_eccentricity(self):
        with pytest.raises(ValueError):
            create_random_eccentric_states(1, max_eccentricity=1.5)

    def test_create_states_by_name(self):
        assert len(create_states("circular", 3, seed=0)) == 3
        assert len(create_states("eccentric", 4, seed=0)) == 4
        with pytest.raises(ValueError, match="Unknown generator"):
            create_states("walker_delta", 3)


class TestPopulate:
    def test_populate_returns_handles_in_order(self, storage):
        world = World(storage)
        states = create_random_circular_states(4, seed=3)

        handles = populate(world, states)

        assert handles == world.handles()
        assert world.positions.get(handles[2]) is states[2][0]
        assert math.isclose(world.velocities.get(handles[3]).speed, states[3][1].speed)
