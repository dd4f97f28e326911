'''Intercept solver for moving destinations.
Iterates arrival time to a fixed point so a flight aims at where the
destination will be, not where it is at departure.'''

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Tuple
from .config import config
from .vectors import Vec2, euclidean_distance
from .world import BodyRef, World

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InterceptResult:
    """
    Outcome of an intercept solve.

    Attributes
    ----------
    intercept_pos : Vec2
        Destination position at the arrival time [km]
    origin_pos : Vec2
        Origin position at the same arrival time [km]
    distance_km : float
        Distance between the two [km]
    arrival_time : float
        Estimated arrival time [s]
    iterations : int
        Refinement rounds performed
    converged : bool
        True if the last round changed the distance by less than
        config.INTERCEPT_RTOL
    distance_history : tuple of float
        Distance after the initial guess and after each round [km]
    departure_time : float
        Departure time the solve started from [s]
    """
    intercept_pos: Vec2
    origin_pos: Vec2
    distance_km: float
    arrival_time: float
    iterations: int
    converged: bool
    distance_history: Tuple[float, ...]
    departure_time: float

    @property
    def travel_time(self) -> float:
        """Estimated travel time [s]"""
        return self.arrival_time - self.departure_time


def solve_intercept(
    origin: Optional[BodyRef],
    destination: BodyRef,
    estimate_travel_time: Callable[[float], float],
    t: float,
    world: World,
    origin_pos: Optional[Vec2] = None,
    max_iterations: Optional[int] = None,
) -> InterceptResult:
    """
    Solve for a self-consistent arrival time at a moving destination.

    Parameters
    ----------
    origin : Body or str or None
        Departure body. Evaluated at the same instant as the destination so
        that motion shared by co-orbiting bodies cancels. May be None when
        ``origin_pos`` is given.
    destination : Body or str
        Target body
    estimate_travel_time : callable
        Maps a distance [km] to a travel time [s]
    t : float
        Departure time [s]
    world : World
    origin_pos : Vec2, optional
        Fixed departure point (e.g. a ship redirected mid-flight). Overrides
        ``origin``.
    max_iterations : int, optional
        Round cap (default: config.INTERCEPT_MAX_ITERATIONS)

    Returns
    -------
    InterceptResult

    Notes
    -----
    The loop always stops at ``max_iterations``. Orbital speeds are small
    next to transit speeds so it usually converges within a few rounds, but
    the result is a best estimate, not an exact solution.
    """
    if max_iterations is None:
        max_iterations = config.INTERCEPT_MAX_ITERATIONS
    if origin is None and origin_pos is None:
        raise ValueError("solve_intercept requires an origin body or origin_pos")
    rtol = config.INTERCEPT_RTOL

    def origin_at(when):
        if origin_pos is not None:
            return origin_pos
        return world.position_of(origin, when)

    from_pos = origin_at(t)
    to_pos = world.position_of(destination, t)
    distance = euclidean_distance(from_pos, to_pos)
    arrival_time = t + estimate_travel_time(distance)
    history = [distance]
    converged = False
    rounds = 0

    for rounds in range(1, max_iterations + 1):
        new_from = origin_at(arrival_time)
        new_to = world.position_of(destination, arrival_time)
        new_distance = euclidean_distance(new_from, new_to)
        history.append(new_distance)

        change = abs(new_distance - distance) / max(distance, 1.0)
        from_pos, to_pos, distance = new_from, new_to, new_distance
        if change < rtol:
            converged = True
            break
        arrival_time = t + estimate_travel_time(distance)

    if converged:
        logger.debug("Intercept converged after %d rounds at %.1f km",
                     rounds, distance)
    else:
        logger.debug("Intercept stopped unconverged after %d rounds at %.1f km",
                     rounds, distance)

    return InterceptResult(
        intercept_pos=to_pos,
        origin_pos=from_pos,
        distance_km=distance,
        arrival_time=arrival_time,
        iterations=rounds,
        converged=converged,
        distance_history=tuple(history),
        departure_time=t,
    )
