'''Flight state and per-tick advancement.
A FlightState is created once per leg from a FlightProfile and then
advanced one tick at a time with closed-form kinematics until arrival.'''

import logging
import math
import numpy as np
import pandas as pd
from dataclasses import dataclass, fields
from enum import Enum
from typing import Optional, Tuple, Union
from .bodies import Body
from .config import config
from .flight_profile import compute_flight_timing
from .intercept import solve_intercept
from .propulsion import G0
from .ship import ShipCapability, clamp_burn_fraction
from .vectors import Vec2, lerp
from .world import World

logger = logging.getLogger(__name__)


class FlightPhase(Enum):
    ACCELERATING = 'accelerating'
    COASTING = 'coasting'
    DECELERATING = 'decelerating'
    ARRIVED = 'arrived'


@dataclass
class FlightState:
    """
    Mutable state of one ship's leg.

    Everything except the advancement fields (``elapsed_time``,
    ``distance_covered``, ``current_velocity``, ``phase`` and ``ship_pos``)
    is fixed when the flight is initialized.

    Attributes
    ----------
    origin, destination : str
        Body ids
    total_distance : float
        Leg length [m]
    distance_covered : float
        Distance flown so far [m], never decreases
    current_velocity : float
        [m/s]
    phase : FlightPhase
    burn_time : float
        Duration of each burn [s]
    coast_time : float
        Cruise duration [s]; 0 for a mini-brachistochrone
    elapsed_time : float
        [s]
    total_time : float
        [s]
    acceleration : float
        [m/s^2]
    dock_on_arrival : bool
        Passed through for the scheduler
    burn_fraction : float
        Share of the leg delta-v budget used
    origin_pos : Vec2, optional
        Departure point at the departure time [km]
    intercept_pos : Vec2, optional
        Destination position at the predicted arrival time [km]
    ship_pos : Vec2, optional
        Interpolated ship position [km]
    estimated_arrival_time : float, optional
        Simulated arrival time predicted by the intercept solver [s]
    """
    origin: str
    destination: str
    total_distance: float
    burn_time: float
    coast_time: float
    total_time: float
    acceleration: float
    distance_covered: float = 0.0
    current_velocity: float = 0.0
    phase: FlightPhase = FlightPhase.ACCELERATING
    elapsed_time: float = 0.0
    dock_on_arrival: bool = False
    burn_fraction: float = 1.0
    origin_pos: Optional[Vec2] = None
    intercept_pos: Optional[Vec2] = None
    ship_pos: Optional[Vec2] = None
    estimated_arrival_time: Optional[float] = None

    @property
    def is_complete(self) -> bool:
        return self.phase is FlightPhase.ARRIVED

    @property
    def progress(self) -> float:
        """Fraction of the distance flown, in [0, 1]"""
        if self.total_distance <= 0:
            return 1.0 if self.is_complete else 0.0
        return min(1.0, self.distance_covered / self.total_distance)

    @property
    def remaining_time(self) -> float:
        """Seconds until arrival [s]"""
        return max(0.0, self.total_time - self.elapsed_time)

    # ========== SERIALIZATION ==========
    def to_dict(self) -> dict:
        """Plain-data representation that from_dict restores exactly."""
        data = {}
        for field in fields(self):
            value = getattr(self, field.name)
            if isinstance(value, Vec2):
                value = value.to_dict()
            elif isinstance(value, FlightPhase):
                value = value.value
            data[field.name] = value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "FlightState":
        """Rebuild a FlightState from ``to_dict`` output."""
        kwargs = dict(data)
        kwargs['phase'] = FlightPhase(kwargs.get('phase', FlightPhase.ACCELERATING.value))
        for key in ('origin_pos', 'intercept_pos', 'ship_pos'):
            if kwargs.get(key) is not None:
                kwargs[key] = Vec2.from_dict(kwargs[key])
        return cls(**kwargs)


# ========== INITIALIZATION ==========
def _body_id(body: Union[Body, str]) -> str:
    return body.id if isinstance(body, Body) else body


def initialize_flight(
    capability: ShipCapability,
    origin: Union[Body, str],
    destination: Union[Body, str],
    distance_km: Optional[float] = None,
    *,
    world: Optional[World] = None,
    t: Optional[float] = None,
    origin_pos: Optional[Vec2] = None,
    dock_on_arrival: bool = False,
    burn_fraction: float = 1.0,
) -> FlightState:
    """
    Plan a new leg from origin to destination.

    Parameters
    ----------
    capability : ShipCapability
        Ship at departure; acceleration is fixed at its current mass
    origin, destination : Body or str
    distance_km : float, optional
        Static leg length. Used when no world/time is given.
    world : World, optional
    t : float, optional
        Departure time [s]. With ``world``, the leg is aimed at the
        destination's predicted position at arrival.
    origin_pos : Vec2, optional
        Fixed departure point, for legs starting mid-flight
    dock_on_arrival : bool, optional
    burn_fraction : float, optional
        Share of the leg budget to use (clamped to
        [config.MIN_BURN_FRACTION, 1]). Default: 1.0

    Returns
    -------
    FlightState
        Fresh state in the accelerating phase

    Raises
    ------
    ValueError
        If neither a distance nor a world and time are supplied
    """
    burn_fraction = clamp_burn_fraction(burn_fraction)
    allocated = capability.allocated_delta_v(burn_fraction)
    acceleration = capability.acceleration

    flight_origin_pos = None
    intercept_pos = None
    arrival_time = None

    if world is not None and t is not None:
        result = solve_intercept(
            origin, destination,
            lambda d_km: compute_flight_timing(d_km * 1000.0, acceleration,
                                               allocated).total_time,
            t, world, origin_pos=origin_pos
        )
        distance_km = result.distance_km
        # The solver measures from the origin at arrival; the ship leaves from
        # where the origin is now
        if origin_pos is not None:
            flight_origin_pos = origin_pos
        else:
            flight_origin_pos = world.position_of(origin, t)
        intercept_pos = result.intercept_pos
        arrival_time = result.arrival_time
    elif distance_km is None:
        raise ValueError("initialize_flight requires distance_km, "
                         "or world and t to solve an intercept")

    distance_m = distance_km * 1000.0
    profile = compute_flight_timing(distance_m, acceleration, allocated)
    burn_time = profile.burn_time
    coast_time = profile.coast_time
    total_time = profile.total_time

    # NaN or inf would survive a persistence round-trip and poison every tick
    if not (math.isfinite(total_time) and math.isfinite(acceleration)
            and math.isfinite(distance_m)):
        logger.warning("Degenerate flight %s -> %s collapsed to one tick",
                       _body_id(origin), _body_id(destination))
        total_time = config.SECONDS_PER_TICK
        burn_time = coast_time = 0.0
        acceleration = 0.0
        distance_m = 0.0

    return FlightState(
        origin=_body_id(origin),
        destination=_body_id(destination),
        total_distance=distance_m,
        burn_time=burn_time,
        coast_time=coast_time,
        total_time=total_time,
        acceleration=acceleration,
        dock_on_arrival=dock_on_arrival,
        burn_fraction=burn_fraction,
        origin_pos=flight_origin_pos,
        intercept_pos=intercept_pos,
        ship_pos=flight_origin_pos,
        estimated_arrival_time=arrival_time,
    )


def redirect_flight(
    flight: FlightState,
    capability: ShipCapability,
    destination: Union[Body, str],
    distance_km: Optional[float] = None,
    *,
    world: Optional[World] = None,
    t: Optional[float] = None,
    dock_on_arrival: bool = False,
    burn_fraction: float = 1.0,
) -> FlightState:
    """
    Replace an in-progress leg with a new one from the ship's current point.

    The new leg departs from ``flight.ship_pos`` when it is known and keeps
    the original origin id for bookkeeping.
    """
    return initialize_flight(
        capability, flight.origin, destination, distance_km,
        world=world, t=t, origin_pos=flight.ship_pos,
        dock_on_arrival=dock_on_arrival, burn_fraction=burn_fraction,
    )


# ========== ADVANCEMENT ==========
def kinematics_at(flight: FlightState,
                  elapsed: float) -> Tuple[FlightPhase, float, float]:
    """
    Closed-form phase, velocity [m/s] and distance [m] at an elapsed time.

    Mini-brachistochrone legs accelerate until half the total time and then
    brake. Burn-coast-burn legs use three windows: [0, burn),
    [burn, burn + coast) and [burn + coast, total).
    """
    a = flight.acceleration
    if elapsed >= flight.total_time:
        return FlightPhase.ARRIVED, 0.0, flight.total_distance

    if flight.coast_time == 0:
        midpoint = flight.total_time / 2.0
        if elapsed < midpoint:
            return FlightPhase.ACCELERATING, a * elapsed, 0.5 * a * elapsed * elapsed
        time_into_decel = elapsed - midpoint
        max_velocity = a * midpoint
        accel_distance = 0.5 * a * midpoint * midpoint
        decel_distance = (max_velocity * time_into_decel
                          - 0.5 * a * time_into_decel * time_into_decel)
        return (FlightPhase.DECELERATING,
                max_velocity - a * time_into_decel,
                accel_distance + decel_distance)

    burn_time = flight.burn_time
    if elapsed < burn_time:
        return FlightPhase.ACCELERATING, a * elapsed, 0.5 * a * elapsed * elapsed

    max_velocity = a * burn_time
    accel_distance = 0.5 * a * burn_time * burn_time
    if elapsed < burn_time + flight.coast_time:
        time_into_coast = elapsed - burn_time
        return (FlightPhase.COASTING, max_velocity,
                accel_distance + max_velocity * time_into_coast)

    time_into_decel = elapsed - burn_time - flight.coast_time
    coast_distance = max_velocity * flight.coast_time
    decel_distance = (max_velocity * time_into_decel
                      - 0.5 * a * time_into_decel * time_into_decel)
    return (FlightPhase.DECELERATING,
            max_velocity - a * time_into_decel,
            accel_distance + coast_distance + decel_distance)


def advance_flight(flight: FlightState, dt: Optional[float] = None) -> bool:
    """
    Advance a flight by one tick.

    Parameters
    ----------
    flight : FlightState
        Updated in place
    dt : float, optional
        Tick duration [s] (default: config.SECONDS_PER_TICK)

    Returns
    -------
    bool
        True once the flight has arrived

    Notes
    -----
    On arrival the distance snaps to the full leg, velocity drops to zero,
    the phase becomes ARRIVED and the ship position snaps to the intercept
    point. Advancing an arrived flight changes nothing. A flight whose
    numbers are no longer finite (e.g. damaged by a bad save) is completed
    immediately rather than left stuck.
    """
    if flight.phase is FlightPhase.ARRIVED:
        return True

    if not all(math.isfinite(v) for v in (flight.total_time, flight.acceleration,
                                           flight.elapsed_time,
                                           flight.distance_covered)):
        logger.warning("Corrupted flight state %s -> %s; completing it",
                       flight.origin, flight.destination)
        total = flight.total_distance
        flight.distance_covered = total if math.isfinite(total) else 0.0
        flight.current_velocity = 0.0
        flight.phase = FlightPhase.ARRIVED
        return True

    if dt is None:
        dt = config.SECONDS_PER_TICK
    flight.elapsed_time += dt

    if flight.elapsed_time >= flight.total_time:
        flight.distance_covered = flight.total_distance
        flight.current_velocity = 0.0
        flight.phase = FlightPhase.ARRIVED
        if flight.intercept_pos is not None:
            flight.ship_pos = flight.intercept_pos
        return True

    phase, velocity, distance = kinematics_at(flight, flight.elapsed_time)
    flight.phase = phase
    flight.current_velocity = velocity
    flight.distance_covered = min(max(distance, flight.distance_covered),
                                  flight.total_distance)

    if (flight.origin_pos is not None and flight.intercept_pos is not None
            and flight.total_distance > 0):
        flight.ship_pos = lerp(flight.origin_pos, flight.intercept_pos,
                               flight.progress)
    return False


def burn_seconds_in_tick(flight: FlightState, dt: Optional[float] = None) -> float:
    """
    Seconds of the most recent tick spent under thrust.

    Call after advance_flight. Burns occupy [0, burn_time] and
    [burn_time + coast_time, total_time]; a mini-brachistochrone burns
    throughout. Used to pro-rate propellant use within a tick.
    """
    if dt is None:
        dt = config.SECONDS_PER_TICK
    t_end = flight.elapsed_time
    t_start = t_end - dt

    if flight.coast_time == 0:
        return max(0.0, min(t_end, flight.total_time) - max(t_start, 0.0))

    burn_seconds = 0.0
    accel_start = max(t_start, 0.0)
    accel_end = min(t_end, flight.burn_time)
    if accel_end > accel_start:
        burn_seconds += accel_end - accel_start

    decel_start = max(t_start, flight.burn_time + flight.coast_time)
    decel_end = min(t_end, flight.total_time)
    if decel_end > decel_start:
        burn_seconds += decel_end - decel_start
    return burn_seconds


def g_force(flight: FlightState) -> float:
    """Felt acceleration in g; zero while coasting or after arrival."""
    if flight.phase in (FlightPhase.COASTING, FlightPhase.ARRIVED):
        return 0.0
    return flight.acceleration / G0


def is_engine_burning(flight: FlightState) -> bool:
    return flight.phase in (FlightPhase.ACCELERATING, FlightPhase.DECELERATING)


def flight_dataframe(flight: FlightState, n_points: int = 200) -> pd.DataFrame:
    """
    Sample the planned kinematics of a leg.

    Parameters:
        flight: Leg to sample (not modified)
        n_points: Number of evenly spaced samples from departure to
            arrival (default: 200)

    Returns:
        DataFrame with columns time, phase, velocity and distance
    """
    if n_points < 2:
        raise ValueError("n_points must be at least 2")
    times = np.linspace(0.0, flight.total_time, n_points)
    rows = [kinematics_at(flight, float(t)) for t in times]
    return pd.DataFrame({
        'time': times,
        'phase': [phase.value for phase, _, _ in rows],
        'velocity': [velocity for _, velocity, _ in rows],
        'distance': [distance for _, _, distance in rows],
    })
