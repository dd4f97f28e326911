"""
Test suite for the intercept solver.

Tests cover:
- Static destinations
- Convergence against a moving destination
- Co-orbiting origin and destination
- Pinned origin positions
- Iteration bounds and argument errors
"""

import math
import pytest
from perihelion import (Body, Fixed, OrbitalParams, Vec2, World, config,
                        solve_intercept)
from perihelion.vectors import euclidean_distance


@pytest.fixture
def moving_target_world():
    """Fixed depot outside a fast circular orbit."""
    depot = Body('depot', Fixed(2000.0, 0.0))
    target = Body('target', OrbitalParams(orbital_radius_km=1000.0,
                                          orbital_period_sec=1000.0))
    return World([depot, target], reference_id='depot')


def fast_ship(distance_km):
    """About twenty times the target's orbital speed."""
    return distance_km / 125.0


class TestStaticDestination:
    """Test intercepts against bodies that do not move."""

    def test_fixed_pair(self):
        """Fixed bodies converge in one round at the exact distance."""
        world = World([Body('a', Fixed(0.0, 0.0)), Body('b', Fixed(3.0, 4.0))],
                      reference_id='a')
        result = solve_intercept('a', 'b', lambda d: d, 0.0, world)
        assert result.converged
        assert result.iterations == 1
        assert result.distance_km == pytest.approx(5.0)
        assert result.arrival_time == pytest.approx(5.0)
        assert result.intercept_pos == Vec2(3.0, 4.0)


class TestMovingDestination:
    """Test convergence against an orbiting destination."""

    def test_converges(self, moving_target_world):
        """A fast ship converges well within the round cap."""
        result = solve_intercept('depot', 'target', fast_ship, 0.0,
                                 moving_target_world)
        assert result.converged
        assert result.iterations <= 10

    @pytest.mark.parametrize("radius_km, period_sec, speed_ratio", [
        (1000.0, 1000.0, 20.0),
        (400.0, 5544.0, 50.0),
        (5e5, 30 * 86400.0, 10.0),
        (1.5e8, 365.25 * 86400.0, 15.0),
    ])
    def test_converges_across_scales(self, radius_km, period_sec, speed_ratio):
        """Ships faster than the target settle on a stable distance."""
        depot = Body('depot', Fixed(2.0 * radius_km, 0.0))
        target = Body('target', OrbitalParams(orbital_radius_km=radius_km,
                                              orbital_period_sec=period_sec))
        world = World([depot, target], reference_id='depot')
        speed = speed_ratio * 2.0 * math.pi * radius_km / period_sec

        result = solve_intercept('depot', 'target', lambda d: d / speed, 0.0, world)

        history = result.distance_history
        assert result.converged
        assert len(history) >= 2
        change = abs(history[-1] - history[-2]) / max(history[-2], 1.0)
        assert change < config.INTERCEPT_RTOL

    def test_intercept_is_destination_at_arrival(self, moving_target_world):
        """The aim point is where the destination is at the arrival time."""
        world = moving_target_world
        result = solve_intercept('depot', 'target', fast_ship, 0.0, world)
        expected = world.position_of('target', result.arrival_time)
        assert result.intercept_pos.x == pytest.approx(expected.x)
        assert result.intercept_pos.y == pytest.approx(expected.y)

    def test_self_consistent(self, moving_target_world):
        """Arrival time and distance agree with the estimator."""
        result = solve_intercept('depot', 'target', fast_ship, 0.0,
                                 moving_target_world)
        assert result.distance_km == pytest.approx(
            euclidean_distance(result.origin_pos, result.intercept_pos))
        assert result.travel_time == pytest.approx(fast_ship(result.distance_km),
                                                   rel=1e-2)

    def test_aims_ahead_of_current_position(self, moving_target_world):
        """The intercept differs from the destination's departure position."""
        world = moving_target_world
        result = solve_intercept('depot', 'target', fast_ship, 0.0, world)
        now = world.position_of('target', 0.0)
        assert euclidean_distance(result.intercept_pos, now) > 1.0

    def test_history_recorded(self, moving_target_world):
        """History holds the initial distance plus one entry per round."""
        result = solve_intercept('depot', 'target', fast_ship, 0.0,
                                 moving_target_world)
        assert len(result.distance_history) == result.iterations + 1
        assert result.distance_history[0] == pytest.approx(1000.0)
        assert result.distance_history[-1] == result.distance_km

    def test_departure_time_offset(self, moving_target_world):
        """Arrival time is measured from the departure time."""
        result = solve_intercept('depot', 'target', fast_ship, 500.0,
                                 moving_target_world)
        assert result.departure_time == 500.0
        assert result.arrival_time > 500.0


class TestCoOrbiting:
    """Test that shared parent motion cancels."""

    def test_same_orbit_constant_chord(self):
        """Two stations on one ring stay a fixed chord apart."""
        planet = Body('planet', OrbitalParams(orbital_radius_km=1e6,
                                              orbital_period_sec=3600.0))
        a = Body('a', OrbitalParams(orbital_radius_km=100.0,
                                    orbital_period_sec=600.0,
                                    parent_id='planet'))
        b = Body('b', OrbitalParams(orbital_radius_km=100.0,
                                    orbital_period_sec=600.0,
                                    initial_angle_rad=math.pi / 3,
                                    parent_id='planet'))
        world = World([planet, a, b], reference_id='planet')
        result = solve_intercept('a', 'b', lambda d: 100.0 * d, 0.0, world)
        chord = 2 * 100.0 * math.sin(math.pi / 6)
        assert result.converged
        assert result.distance_km == pytest.approx(chord)


class TestPinnedOrigin:
    """Test departures from a fixed point."""

    def test_origin_pos_overrides_body(self, moving_target_world):
        """A pinned origin is used at every round."""
        start = Vec2(0.0, 3000.0)
        result = solve_intercept(None, 'target', fast_ship, 0.0,
                                 moving_target_world, origin_pos=start)
        assert result.origin_pos == start
        assert result.distance_km == pytest.approx(
            euclidean_distance(start, result.intercept_pos))

    def test_requires_some_origin(self, moving_target_world):
        """Either an origin body or a position is required."""
        with pytest.raises(ValueError, match="origin"):
            solve_intercept(None, 'target', fast_ship, 0.0, moving_target_world)


class TestBounds:
    """Test the round cap."""

    def test_round_cap(self, moving_target_world):
        """The loop never exceeds max_iterations."""
        result = solve_intercept('depot', 'target', lambda d: 1000.0 * d, 0.0,
                                 moving_target_world, max_iterations=2)
        assert result.iterations <= 2
        assert len(result.distance_history) == result.iterations + 1

    def test_unknown_body(self, moving_target_world):
        """Unknown ids raise KeyError."""
        with pytest.raises(KeyError):
            solve_intercept('depot', 'nowhere', fast_ship, 0.0,
                            moving_target_world)
